"""fsadmin — filesystem administration front end for a distributed store.

Each subcommand is a declarative descriptor; a shared dispatch core turns
an invocation into an argument vector and runs it in the external Java
runtime.
"""

from fsadmin.version import __version__

__all__: list[str] = ["__version__"]
