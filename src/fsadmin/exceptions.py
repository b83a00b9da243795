"""Custom exception hierarchy for fsadmin.

All exceptions that cross layer boundaries must inherit from
:class:`FsAdminError`.  Raw ``OSError``/``subprocess`` failures must
NEVER propagate beyond the infrastructure layer; they must be caught
and re-raised as a typed subclass defined here.

Hierarchy
---------
FsAdminError
├── RegistryError
│   └── DuplicateNameError
├── UsageError
│   ├── UnknownCommandError
│   └── ArityMismatchError
├── ConfigurationError
└── ExecutionError
    ├── LaunchFailureError
    │   └── RuntimeNotFoundError
    ├── NonZeroExitError
    └── SignalTerminationError

:class:`InvariantViolation` deliberately sits outside the hierarchy: it
signals a defect in fsadmin itself, not a condition the user can fix.
"""

from __future__ import annotations


class FsAdminError(Exception):
    """Base exception for all fsadmin errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


class InvariantViolation(RuntimeError):
    """Raised when internal state contradicts a command's declaration."""


# --- Registry --------------------------------------------------------------

class RegistryError(FsAdminError):
    """Raised for command registration problems."""


class DuplicateNameError(RegistryError):
    """Raised when a command name is registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Command {name!r} is already registered.")
        self.name: str = name


# --- Usage -----------------------------------------------------------------

class UsageError(FsAdminError):
    """Raised when the invocation does not match the command's shape."""

    def __init__(
        self,
        message: str,
        *,
        usage: str | None = None,
        hint: str | None = None,
    ) -> None:
        if hint is None and usage is not None:
            hint = f"Usage: {usage}"
        super().__init__(message, hint=hint)
        self.usage: str | None = usage


class UnknownCommandError(UsageError):
    """Raised when no command is registered under the requested name."""

    def __init__(self, name: str, *, available: tuple[str, ...] = ()) -> None:
        hint = None
        if available:
            hint = "Available commands: " + ", ".join(available)
        super().__init__(f"Unknown command {name!r}.", hint=hint)
        self.name: str = name


class ArityMismatchError(UsageError):
    """Raised when the number of positional arguments is wrong."""

    def __init__(self, command: str, expected: str, got: int, *, usage: str) -> None:
        super().__init__(
            f"{command} expects {expected}, got {got}.",
            usage=usage,
        )
        self.command: str = command
        self.got: int = got


# --- Configuration ---------------------------------------------------------

class ConfigurationError(FsAdminError):
    """Raised when runtime configuration from the environment is invalid."""


# --- Execution -------------------------------------------------------------

class ExecutionError(FsAdminError):
    """Base for failures of the external runtime process."""


class LaunchFailureError(ExecutionError):
    """Raised when the external runtime could not be started at all."""

    NOT_FOUND: str = "not-found"
    PERMISSION_DENIED: str = "permission-denied"
    MISSING_WORKDIR: str = "missing-workdir"
    OS_ERROR: str = "os-error"

    def __init__(
        self,
        message: str,
        *,
        reason: str = OS_ERROR,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.reason: str = reason


class RuntimeNotFoundError(LaunchFailureError):
    """Raised when the Java runtime cannot be located."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message, reason=LaunchFailureError.NOT_FOUND, hint=hint)


def _with_cause(message: str, cause: str | None) -> str:
    return f"{message} ({cause})." if cause else f"{message}."


class NonZeroExitError(ExecutionError):
    """Raised when the external process ran and reported failure."""

    def __init__(self, command: str, exit_code: int, *, cause: str | None = None) -> None:
        super().__init__(_with_cause(f"{command} failed with exit code {exit_code}", cause))
        self.command: str = command
        self.exit_code: int = exit_code
        self.cause: str | None = cause


class SignalTerminationError(ExecutionError):
    """Raised when the external process was killed by a signal."""

    def __init__(
        self,
        command: str,
        signal_number: int,
        signal_name: str,
        *,
        cause: str | None = None,
    ) -> None:
        super().__init__(
            _with_cause(f"{command} was interrupted by {signal_name}", cause),
            hint="The operation may have been partially applied.",
        )
        self.command: str = command
        self.signal_number: int = signal_number
        self.signal_name: str = signal_name
        self.cause: str | None = cause
