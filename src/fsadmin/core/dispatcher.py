"""Dispatcher — validate an invocation, build its argv, launch once.

Each call walks ``Validating → Executing → Terminal(exit_code)`` with no
intermediate suspension.  Validation errors are raised before any
process starts; execution errors are reported verbatim and never
retried, since the underlying filesystem operation may not be
idempotent.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import shlex
import signal
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NoReturn

from fsadmin import exit_codes
from fsadmin.core.argv_builder import build_request_argv
from fsadmin.core.models import (
    CommandDescriptor,
    ExecutionResult,
    FlagKind,
    InvocationRequest,
    RuntimeTarget,
)
from fsadmin.core.protocols import ProcessLauncher
from fsadmin.core.registry import CommandRegistry
from fsadmin.exceptions import (
    ArityMismatchError,
    FsAdminError,
    NonZeroExitError,
    SignalTerminationError,
    UsageError,
)

logger = logging.getLogger(__name__)

DEFAULT_DEBUG_PORT: int = 5005

JAVA_OPTS_OPTION = "--java-opts"
SEPARATOR = "--"


def jdwp_agent_option(port: int) -> str:
    """JVM option that suspends the runtime until a debugger attaches."""
    return f"-agentlib:jdwp=transport=dt_socket,server=y,suspend=y,address={port}"


# ---------------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DispatchOutcome:
    """Terminal state of one dispatch: the exit code and its cause."""

    exit_code: int
    error: FsAdminError | None = None


# ---------------------------------------------------------------------------
# Per-command argument parser
# ---------------------------------------------------------------------------

class _CommandParser(argparse.ArgumentParser):
    """``ArgumentParser`` that raises :class:`UsageError` instead of exiting."""

    def __init__(self, *args: Any, usage_line: str, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.usage_line = usage_line

    def error(self, message: str) -> NoReturn:
        raise UsageError(message, usage=self.usage_line)


def _escape(text: str) -> str:
    return text.replace("%", "%%")


def build_command_parser(descriptor: CommandDescriptor, *, prog: str) -> argparse.ArgumentParser:
    """Generate the argument parser for *descriptor*.

    Every command also accepts the runtime flags ``--attach-debug`` and
    ``--java-opts``; those never reach the argument vector.  Help and
    usage text are passed through literally.
    """
    parser = _CommandParser(
        prog=f"{prog} {descriptor.group} {descriptor.name}",
        usage=f"%(prog)s [flags] {_escape(descriptor.usage)}".rstrip(),
        description=descriptor.summary or None,
        usage_line=descriptor.usage_line(),
        allow_abbrev=False,
    )
    for flag in descriptor.flags:
        if flag.kind is FlagKind.BOOLEAN:
            parser.add_argument(
                *flag.option_strings(),
                dest=flag.dest,
                action="store_true",
                help=_escape(flag.help),
            )
        else:
            parser.add_argument(
                *flag.option_strings(),
                dest=flag.dest,
                default=None,
                metavar=flag.metavar or flag.name.upper().replace("-", "_"),
                help=_escape(flag.help),
            )

    runtime = parser.add_argument_group("runtime options")
    runtime.add_argument(
        "--attach-debug",
        dest="attach_debug",
        action="store_true",
        help="suspend the JVM until a remote debugger attaches",
    )
    runtime.add_argument(
        JAVA_OPTS_OPTION,
        dest="java_opts",
        default=None,
        metavar="OPTS",
        help="additional JVM options, e.g. '-Xmx4g -Dkey=value'",
    )
    parser.add_argument("positionals", nargs="*", metavar="ARG", help=argparse.SUPPRESS)
    return parser


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

class Dispatcher:
    """Runs registered commands through an injected launcher.

    Parameters
    ----------
    registry:
        The commands this dispatcher can run.
    launcher:
        Any object satisfying the :class:`ProcessLauncher` protocol.
    env:
        Extra environment variables for the child process.
    cwd:
        Working directory for the child process.
    debug_port:
        Port used by ``--attach-debug``.
    prog:
        Program name shown in generated usage text.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        launcher: ProcessLauncher,
        *,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
        debug_port: int = DEFAULT_DEBUG_PORT,
        prog: str = "fsadmin",
    ) -> None:
        self._registry = registry
        self._launcher = launcher
        self._env = dict(env) if env else None
        self._cwd = cwd
        self._debug_port = debug_port
        self._prog = prog

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Validation (no side effects)
    # ------------------------------------------------------------------

    def parse(self, command_name: str, raw_args: Sequence[str]) -> tuple[InvocationRequest, RuntimeTarget]:
        """Validate *raw_args* against the command and resolve its target.

        Raises
        ------
        UnknownCommandError
            When *command_name* is not registered.
        UsageError
            On an unknown flag, a missing flag value or malformed
            ``--java-opts``.
        ArityMismatchError
            When the positional count does not match the declaration.
        """
        descriptor = self._registry.get(command_name)
        parser = build_command_parser(descriptor, prog=self._prog)
        head, tail = _split_at_separator(raw_args)
        namespace = parser.parse_intermixed_args(_attach_option_values(descriptor, head))

        positionals: list[str] = [*(namespace.positionals or []), *tail]
        if not descriptor.arity.accepts(len(positionals)):
            raise ArityMismatchError(
                descriptor.name,
                descriptor.arity.describe(),
                len(positionals),
                usage=descriptor.usage_line(),
            )

        flag_values = {flag.name: getattr(namespace, flag.dest) for flag in descriptor.flags}
        request = InvocationRequest.create(descriptor, flag_values, positionals)
        target = self._resolve_target(descriptor, namespace)
        return request, target

    def prepare(self, command_name: str, raw_args: Sequence[str]) -> tuple[RuntimeTarget, tuple[str, ...]]:
        """Return the runtime target and argument vector without launching."""
        request, target = self.parse(command_name, raw_args)
        return target, build_request_argv(request)

    def _resolve_target(self, descriptor: CommandDescriptor, namespace: argparse.Namespace) -> RuntimeTarget:
        jvm_options: list[str] = list(descriptor.target.jvm_options)
        if namespace.attach_debug:
            jvm_options.append(jdwp_agent_option(self._debug_port))
        if namespace.java_opts:
            try:
                jvm_options.extend(shlex.split(namespace.java_opts))
            except ValueError as exc:
                raise UsageError(
                    f"Cannot parse --java-opts: {exc}",
                    usage=descriptor.usage_line(),
                ) from exc
        return dataclasses.replace(descriptor.target, jvm_options=tuple(jvm_options))

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(self, command_name: str, raw_args: Sequence[str]) -> ExecutionResult:
        """Validate, launch once, and raise on any failure.

        Raises
        ------
        FsAdminError
            Any validation error (before launch), ``LaunchFailureError``,
            ``NonZeroExitError`` or ``SignalTerminationError``.
        """
        target, argv = self.prepare(command_name, raw_args)
        logger.debug("Dispatching %s: target=%s argv=%s", command_name, target, list(argv))

        result = self._launcher.launch(target, argv, env=self._env, cwd=self._cwd)

        signal_number = result.signal_number
        if signal_number is not None:
            raise SignalTerminationError(
                command_name,
                signal_number,
                _signal_name(signal_number),
                cause=result.cause,
            )
        if result.exit_code != exit_codes.SUCCESS:
            raise NonZeroExitError(command_name, result.exit_code, cause=result.cause)
        return result

    def execute(self, command_name: str, raw_args: Sequence[str]) -> DispatchOutcome:
        """Run *command_name* and report ``(exit_code, error)``.

        Known errors are captured in the outcome; :class:`InvariantViolation`
        is a defect and propagates.
        """
        try:
            self.run(command_name, raw_args)
        except FsAdminError as exc:
            logger.debug("Command %s ended with %s", command_name, type(exc).__name__)
            return DispatchOutcome(exit_codes.exit_code_for(exc), exc)
        return DispatchOutcome(exit_codes.SUCCESS)


def _signal_name(signal_number: int) -> str:
    try:
        return signal.Signals(signal_number).name
    except ValueError:
        return f"signal {signal_number}"


# ---------------------------------------------------------------------------
# Raw argument normalisation
# ---------------------------------------------------------------------------

def _split_at_separator(raw_args: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split *raw_args* at the first ``--``; everything after it is positional."""
    args = list(raw_args)
    if SEPARATOR not in args:
        return args, []
    index = args.index(SEPARATOR)
    return args[:index], args[index + 1:]


def _attach_option_values(descriptor: CommandDescriptor, args: list[str]) -> list[str]:
    """Glue dash-prefixed values onto the options that take a value.

    ``--java-opts -Xmx1g`` becomes ``--java-opts=-Xmx1g`` (short aliases
    are rewritten to their long form) so the value is not mistaken for an
    option.  Values without a leading dash are left for the parser.
    """
    long_forms = {JAVA_OPTS_OPTION: JAVA_OPTS_OPTION}
    for flag in descriptor.flags:
        if flag.kind is FlagKind.STRING:
            for option in flag.option_strings():
                long_forms[option] = f"--{flag.name}"

    normalised: list[str] = []
    index = 0
    while index < len(args):
        token = args[index]
        has_value = index + 1 < len(args)
        if token in long_forms and has_value and args[index + 1].startswith("-"):
            normalised.append(f"{long_forms[token]}={args[index + 1]}")
            index += 2
            continue
        normalised.append(token)
        index += 1
    return normalised
