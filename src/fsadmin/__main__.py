"""Allow ``python -m fsadmin`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m fsadmin`` behaves identically to the ``fsadmin``
console script.
"""

from __future__ import annotations

from fsadmin.cli.app import cli

if __name__ == "__main__":
    cli()
