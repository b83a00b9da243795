"""Runtime configuration read from the process environment.

Only environment variables are consulted; there are no config files.
Parsing is strict: a malformed value raises
:class:`~fsadmin.exceptions.ConfigurationError` rather than silently
falling back to a default.
"""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from fsadmin.core.dispatcher import DEFAULT_DEBUG_PORT
from fsadmin.exceptions import ConfigurationError

ENV_HOME = "FSADMIN_HOME"
ENV_JAVA = "FSADMIN_JAVA"
ENV_CLASSPATH = "FSADMIN_CLASSPATH"
ENV_JAVA_OPTS = "FSADMIN_JAVA_OPTS"
ENV_DEBUG_PORT = "FSADMIN_DEBUG_PORT"
ENV_WORKDIR = "FSADMIN_WORKDIR"


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Everything needed to start the Java runtime."""

    home: Path
    """Install root; exported to the child as ``FSADMIN_HOME``."""

    java: str
    """Java executable name or path."""

    classpath: str
    java_opts: tuple[str, ...] = ()
    """JVM options applied to every launch."""

    debug_port: int = DEFAULT_DEBUG_PORT
    working_dir: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RuntimeConfig:
        """Build a config from *environ* (defaults to ``os.environ``).

        Raises
        ------
        ConfigurationError
            When ``FSADMIN_JAVA_OPTS`` cannot be split or
            ``FSADMIN_DEBUG_PORT`` is not a valid TCP port.
        """
        env = os.environ if environ is None else environ

        home = Path(env.get(ENV_HOME) or Path.cwd())
        classpath = env.get(ENV_CLASSPATH) or str(home / "lib" / "*")

        working_dir_raw = env.get(ENV_WORKDIR)
        working_dir = Path(working_dir_raw) if working_dir_raw else None

        return cls(
            home=home,
            java=_resolve_java(env),
            classpath=classpath,
            java_opts=_parse_java_opts(env.get(ENV_JAVA_OPTS, "")),
            debug_port=_parse_port(env.get(ENV_DEBUG_PORT)),
            working_dir=working_dir,
        )

    def child_environment(self) -> dict[str, str]:
        """Variables exported to every child on top of the inherited ones."""
        return {ENV_HOME: str(self.home)}


def _resolve_java(env: Mapping[str, str]) -> str:
    explicit = env.get(ENV_JAVA)
    if explicit:
        return explicit
    java_home = env.get("JAVA_HOME")
    if java_home:
        return str(Path(java_home) / "bin" / "java")
    return "java"


def _parse_java_opts(raw: str) -> tuple[str, ...]:
    try:
        return tuple(shlex.split(raw))
    except ValueError as exc:
        raise ConfigurationError(
            f"Cannot parse {ENV_JAVA_OPTS}: {exc}",
            hint="Check the quoting of the JVM options.",
        ) from exc


def _parse_port(raw: str | None) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_DEBUG_PORT
    try:
        port = int(raw)
    except ValueError:
        raise ConfigurationError(
            f"{ENV_DEBUG_PORT} must be an integer, got {raw!r}.",
        ) from None
    if not 1 <= port <= 65535:
        raise ConfigurationError(
            f"{ENV_DEBUG_PORT} must be between 1 and 65535, got {port}.",
        )
    return port
