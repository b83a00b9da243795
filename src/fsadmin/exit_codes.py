"""Exit-code constants shared by the dispatcher and the CLI layer.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.

Codes owned by fsadmin sit outside the range commonly used by the
external runtime (small positive integers), so scripts can tell a
front-end failure apart from a failure of the filesystem operation
itself.  A non-zero code reported by the external process is always
returned verbatim.
"""

from __future__ import annotations

from fsadmin.exceptions import (
    ConfigurationError,
    FsAdminError,
    LaunchFailureError,
    NonZeroExitError,
    SignalTerminationError,
    UsageError,
)

SUCCESS: int = 0
"""Clean exit — command completed without error."""

GENERAL_ERROR: int = 1
"""A known FsAdminError without a more specific code was caught."""

USAGE_ERROR: int = 64
"""Bad invocation: unknown command, unknown flag or wrong arity (EX_USAGE)."""

UNEXPECTED_ERROR: int = 70
"""An unhandled exception escaped all known error boundaries (EX_SOFTWARE)."""

CONFIG_ERROR: int = 78
"""Runtime configuration is invalid, including a missing working directory (EX_CONFIG)."""

LAUNCH_NOT_EXECUTABLE: int = 126
"""The runtime binary was found but could not be started (permission or OS error)."""

LAUNCH_NOT_FOUND: int = 127
"""The runtime binary could not be found."""

SIGNAL_BASE: int = 128
"""Signal termination is reported as ``SIGNAL_BASE + signum``."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""


def for_signal(signal_number: int) -> int:
    """Return the exit code reported for a child killed by *signal_number*."""
    return SIGNAL_BASE + signal_number


def exit_code_for(exc: FsAdminError) -> int:
    """Map a known error to the process exit code."""
    if isinstance(exc, NonZeroExitError):
        return exc.exit_code
    if isinstance(exc, SignalTerminationError):
        return for_signal(exc.signal_number)
    if isinstance(exc, LaunchFailureError):
        if exc.reason == LaunchFailureError.NOT_FOUND:
            return LAUNCH_NOT_FOUND
        if exc.reason == LaunchFailureError.MISSING_WORKDIR:
            return CONFIG_ERROR
        return LAUNCH_NOT_EXECUTABLE
    if isinstance(exc, UsageError):
        return USAGE_ERROR
    if isinstance(exc, ConfigurationError):
        return CONFIG_ERROR
    return GENERAL_ERROR
