"""Argument-vector construction — pure, deterministic, no I/O.

The vector handed to the external runtime is built in a fixed order:
flag-derived tokens first, in the order the descriptor declares its
flags, then the positional arguments in the order the user gave them.
External consumers rely on this ordering.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from fsadmin.core.models import CommandDescriptor, FlagKind, FlagSpec, InvocationRequest
from fsadmin.exceptions import InvariantViolation


def flag_tokens(flag: FlagSpec, value: Any) -> tuple[str, ...]:
    """Return the tokens *flag* contributes for *value* (possibly none)."""
    if flag.kind is FlagKind.BOOLEAN:
        if not isinstance(value, bool):
            raise InvariantViolation(
                f"Boolean flag --{flag.name} received {type(value).__name__} value.",
            )
        if not value:
            return ()
    else:
        if value is None:
            return ()
        if not isinstance(value, str):
            raise InvariantViolation(
                f"String flag --{flag.name} received {type(value).__name__} value.",
            )

    if flag.contribute is None:
        if flag.kind is FlagKind.BOOLEAN:
            return (flag.canonical_token,)
        return (flag.canonical_token, value)

    tokens = tuple(flag.contribute(value))
    if not all(isinstance(token, str) for token in tokens):
        raise InvariantViolation(
            f"Flag --{flag.name} contributed non-string tokens: {tokens!r}",
        )
    return tokens


def build_argv(
    descriptor: CommandDescriptor,
    flag_values: Mapping[str, Any],
    positionals: Sequence[str],
) -> tuple[str, ...]:
    """Build the argument vector for one invocation of *descriptor*.

    Parameters
    ----------
    descriptor:
        The command being invoked.
    flag_values:
        Mapping of flag name to parsed value.  Flags absent from the
        mapping are treated as not set.
    positionals:
        Positional arguments in user-supplied order.

    Raises
    ------
    InvariantViolation
        When *flag_values* names a flag the descriptor does not declare,
        or a value has the wrong type for its flag kind.  Either case is
        a defect in the caller, never a user error.
    """
    declared = {flag.name for flag in descriptor.flags}
    undeclared = sorted(set(flag_values) - declared)
    if undeclared:
        raise InvariantViolation(
            f"{descriptor.name}: values supplied for undeclared flags {undeclared}",
        )

    argv: list[str] = []
    for flag in descriptor.flags:
        if flag.name not in flag_values:
            continue
        argv.extend(flag_tokens(flag, flag_values[flag.name]))
    argv.extend(positionals)
    return tuple(argv)


def build_request_argv(request: InvocationRequest) -> tuple[str, ...]:
    """Same as :func:`build_argv`, over an :class:`InvocationRequest`."""
    return build_argv(request.descriptor, request.flag_values, request.positionals)
