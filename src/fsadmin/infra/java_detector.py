"""Infrastructure: Java runtime detection and platform guidance.

This module is responsible for locating the ``java`` executable and
providing platform-specific installation guidance when it is missing.

Rules
-----
* Detection via :func:`shutil.which` only, no subprocess.
* No automatic installation.
* No ``print()``; callers handle user-facing output.
"""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from pathlib import Path

from fsadmin.exceptions import RuntimeNotFoundError


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class JavaStatus:
    """Result of a Java runtime probe.

    Attributes
    ----------
    found : bool
        Whether the runtime was located.
    path : Path | None
        Absolute path to the java binary, or ``None``.
    version_hint : str
        Human-readable status string (e.g. ``"found at …"`` or ``"not found"``).
    install_commands : tuple[str, ...]
        Suggested shell commands for installing a JRE on the current
        platform.  Empty when the runtime is already present.
    """

    found: bool
    path: Path | None
    version_hint: str
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def detect_java(java: str = "java") -> JavaStatus:
    """Probe for the *java* executable (a bare name or a path).

    Returns a :class:`JavaStatus` regardless of whether the runtime is
    present; the caller decides whether to abort or merely warn.
    """
    result = shutil.which(java)

    if result is not None:
        resolved = Path(result).resolve()
        return JavaStatus(
            found=True,
            path=resolved,
            version_hint=f"found at {resolved}",
            install_commands=(),
        )

    return JavaStatus(
        found=False,
        path=None,
        version_hint="not found",
        install_commands=_platform_install_commands(),
    )


def install_hint(status: JavaStatus) -> str | None:
    """Render the install guidance of a failed probe, if any."""
    if not status.install_commands:
        return None
    lines = ["Install a Java runtime using one of:"]
    lines.extend(f"  {cmd}" for cmd in status.install_commands)
    lines.append("or point FSADMIN_JAVA / JAVA_HOME at an existing one.")
    return "\n".join(lines)


def require_java(java: str = "java") -> Path:
    """Locate the runtime or raise :class:`RuntimeNotFoundError`."""
    status = detect_java(java)
    if not status.found or status.path is None:
        raise RuntimeNotFoundError(
            f"Java runtime {java!r} is not installed or not on PATH.",
            hint=install_hint(status),
        )
    return status.path


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

def _platform_install_commands() -> tuple[str, ...]:
    """Return install commands appropriate for the current OS."""
    system = platform.system().lower()
    if system == "windows":
        return (
            "winget install EclipseAdoptium.Temurin.17.JRE",
            "choco install temurin17jre",
        )
    if system == "linux":
        return (
            "sudo apt install openjdk-17-jre-headless",
            "sudo dnf install java-17-openjdk-headless",
            "sudo pacman -S jre17-openjdk-headless",
        )
    if system == "darwin":
        return ("brew install openjdk@17",)
    return ("Please install a Java 17 runtime from https://adoptium.net/",)
