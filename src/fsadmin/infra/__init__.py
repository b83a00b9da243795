"""Infrastructure layer — external system integration.

This layer wraps all interaction with the operating system: process
launching, Java runtime discovery, and environment configuration.
Every raw ``OSError`` must be caught here and re-raised as a
:class:`~fsadmin.exceptions.FsAdminError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from fsadmin.infra.config import RuntimeConfig
from fsadmin.infra.java_detector import JavaStatus, detect_java, require_java
from fsadmin.infra.launcher import JavaLauncher, SubprocessLauncher

__all__: list[str] = [
    "JavaLauncher",
    "JavaStatus",
    "RuntimeConfig",
    "SubprocessLauncher",
    "detect_java",
    "require_java",
]
