"""Domain models for fsadmin.

All models are **frozen** dataclasses: immutable value objects with no
behaviour beyond data access and validation of their own shape.  They
carry zero I/O and zero dependencies on external packages.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

RESERVED_FLAG_NAMES: frozenset[str] = frozenset({"help", "attach-debug", "java-opts"})
"""Long flag names owned by the dispatcher; commands may not declare them."""

RESERVED_SHORT_FLAGS: frozenset[str] = frozenset({"h"})


# ---------------------------------------------------------------------------
# Flags
# ---------------------------------------------------------------------------

class FlagKind(enum.Enum):
    """How a flag is parsed from the command line."""

    BOOLEAN = "boolean"
    STRING = "string"


@dataclass(frozen=True, slots=True)
class FlagSpec:
    """One flag accepted by a command.

    Without a *contribute* callable, a set BOOLEAN flag emits ``(token,)``
    and a set STRING flag emits ``(token, value)``.
    """

    name: str
    """Long form without leading dashes (e.g. ``recursive``)."""

    short: str | None = None
    """Single-letter alias without the dash (e.g. ``R``)."""

    kind: FlagKind = FlagKind.BOOLEAN

    help: str = ""

    token: str | None = None
    """Canonical token for the argument vector; defaults to ``--<name>``."""

    contribute: Callable[[Any], tuple[str, ...]] | None = None
    """Optional pure mapping from the flag's value to argument tokens."""

    metavar: str | None = None

    def __post_init__(self) -> None:
        if not self.name or self.name.startswith("-"):
            raise ValueError(f"Invalid flag name: {self.name!r}")
        if self.short is not None and (len(self.short) != 1 or self.short == "-"):
            raise ValueError(f"Short alias must be one character: {self.short!r}")

    @property
    def dest(self) -> str:
        """Attribute name used by the generated argument parser."""
        return "flag_" + self.name.replace("-", "_")

    @property
    def canonical_token(self) -> str:
        return self.token if self.token is not None else f"--{self.name}"

    def option_strings(self) -> list[str]:
        options = [f"--{self.name}"]
        if self.short is not None:
            options.insert(0, f"-{self.short}")
        return options


# ---------------------------------------------------------------------------
# Arity
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Arity:
    """Accepted number of positional arguments."""

    minimum: int
    maximum: int | None
    """Upper bound, or ``None`` for unbounded."""

    def __post_init__(self) -> None:
        if self.minimum < 0:
            raise ValueError("Arity minimum must be non-negative.")
        if self.maximum is not None and self.maximum < self.minimum:
            raise ValueError("Arity maximum must not be below the minimum.")

    @classmethod
    def exact(cls, count: int) -> Arity:
        return cls(count, count)

    @classmethod
    def between(cls, minimum: int, maximum: int) -> Arity:
        return cls(minimum, maximum)

    @classmethod
    def at_least(cls, minimum: int) -> Arity:
        return cls(minimum, None)

    def accepts(self, count: int) -> bool:
        if count < self.minimum:
            return False
        return self.maximum is None or count <= self.maximum

    def describe(self) -> str:
        """Human-readable form used in usage errors."""
        if self.maximum == self.minimum:
            noun = "argument" if self.minimum == 1 else "arguments"
            return f"exactly {self.minimum} {noun}"
        if self.maximum is None:
            noun = "argument" if self.minimum == 1 else "arguments"
            return f"at least {self.minimum} {noun}"
        return f"between {self.minimum} and {self.maximum} arguments"


# ---------------------------------------------------------------------------
# Runtime target
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RuntimeTarget:
    """What the external runtime should execute."""

    main_class: str
    """Java class (or, for a plain subprocess, the executable) to run."""

    parameters: tuple[str, ...] = ()
    """Tokens passed before the argument vector (e.g. the shell command)."""

    jvm_options: tuple[str, ...] = ()
    """Per-invocation JVM options; set by the dispatcher, never by commands."""


# ---------------------------------------------------------------------------
# Command descriptor
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CommandDescriptor:
    """Declarative definition of one subcommand."""

    name: str
    usage: str
    """Positional placeholders, e.g. ``<group> <path>``."""

    arity: Arity
    target: RuntimeTarget
    summary: str = ""
    flags: tuple[FlagSpec, ...] = ()
    group: str = "fs"

    def __post_init__(self) -> None:
        if not self.name or " " in self.name:
            raise ValueError(f"Invalid command name: {self.name!r}")
        seen_names: set[str] = set()
        seen_shorts: set[str] = set()
        for flag in self.flags:
            if flag.name in RESERVED_FLAG_NAMES:
                raise ValueError(f"{self.name}: flag --{flag.name} is reserved.")
            if flag.name in seen_names:
                raise ValueError(f"{self.name}: duplicate flag --{flag.name}.")
            seen_names.add(flag.name)
            if flag.short is None:
                continue
            if flag.short in RESERVED_SHORT_FLAGS:
                raise ValueError(f"{self.name}: flag -{flag.short} is reserved.")
            if flag.short in seen_shorts:
                raise ValueError(f"{self.name}: duplicate flag -{flag.short}.")
            seen_shorts.add(flag.short)

    def usage_line(self) -> str:
        """Return ``<name> <positional-placeholders>``."""
        return f"{self.name} {self.usage}".rstrip()

    def flag(self, name: str) -> FlagSpec | None:
        return next((f for f in self.flags if f.name == name), None)


# ---------------------------------------------------------------------------
# Per-invocation values
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class InvocationRequest:
    """One parsed invocation of a command.  Built fresh per run."""

    descriptor: CommandDescriptor
    flag_values: Mapping[str, Any]
    positionals: tuple[str, ...]

    @classmethod
    def create(
        cls,
        descriptor: CommandDescriptor,
        flag_values: Mapping[str, Any],
        positionals: tuple[str, ...] | list[str],
    ) -> InvocationRequest:
        """Build a request with a read-only copy of *flag_values*."""
        return cls(
            descriptor=descriptor,
            flag_values=MappingProxyType(dict(flag_values)),
            positionals=tuple(positionals),
        )


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of one launch of the external process."""

    exit_code: int
    signal_number: int | None = None
    """Signal that killed the process, or ``None`` if it exited."""

    cause: str | None = None
    """Why the process ended the way it did, when the launcher knows more than the status."""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0 and self.signal_number is None

    @property
    def was_signalled(self) -> bool:
        return self.signal_number is not None
