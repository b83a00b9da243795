"""Subprocess-backed implementations of :class:`~fsadmin.core.protocols.ProcessLauncher`.

This module is the **only** place in the codebase that starts child
processes.  ``OSError`` raised while starting a child is caught here and
re-raised as :class:`~fsadmin.exceptions.LaunchFailureError`; nothing
raw escapes the infrastructure boundary.

The child inherits stdin, stdout and stderr, so interactive or
streaming output of the filesystem operation reaches the terminal
unmodified.  There is no timeout and no retry.
"""

from __future__ import annotations

import logging
import os
import shlex
import signal
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from fsadmin import exit_codes
from fsadmin.core.models import ExecutionResult, RuntimeTarget
from fsadmin.exceptions import LaunchFailureError, RuntimeNotFoundError
from fsadmin.infra.config import ENV_WORKDIR, RuntimeConfig
from fsadmin.infra.java_detector import detect_java, install_hint

logger = logging.getLogger(__name__)

INTERRUPT_CAUSE = "interrupt forwarded from the terminal"


class SubprocessLauncher:
    """Runs ``target.main_class`` as an executable.

    This class satisfies the :class:`~fsadmin.core.protocols.ProcessLauncher`
    protocol structurally; no explicit inheritance required.

    Parameters
    ----------
    base_env:
        Variables added to the inherited environment of every child.
    cwd:
        Default working directory; a per-call *cwd* takes precedence.
    """

    def __init__(
        self,
        *,
        base_env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
    ) -> None:
        self._base_env: dict[str, str] = dict(base_env or {})
        self._cwd = cwd

    def build_command(self, target: RuntimeTarget, argv: Sequence[str]) -> list[str]:
        """Return the full command line for *target* and *argv*."""
        return [target.main_class, *target.parameters, *argv]

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def launch(
        self,
        target: RuntimeTarget,
        argv: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
    ) -> ExecutionResult:
        """Start the child, wait for it, and report how it ended.

        Raises
        ------
        LaunchFailureError
            When the child could not be started.
        """
        command = self.build_command(target, argv)
        child_env = os.environ.copy()
        child_env.update(self._base_env)
        if env:
            child_env.update(env)
        workdir = cwd if cwd is not None else self._cwd

        logger.debug("Launching: %s (cwd=%s)", shlex.join(command), workdir or ".")
        try:
            process = subprocess.Popen(command, env=child_env, cwd=workdir)
        except OSError as exc:
            error = self._launch_error(command, workdir, exc)
            logger.error("%s", error)
            raise error from exc

        returncode, interrupted = self._wait(process)
        logger.debug("Process %s exited with %s", process.pid, returncode)
        cause = INTERRUPT_CAUSE if interrupted else None

        if returncode < 0:
            signal_number = -returncode
            return ExecutionResult(
                exit_code=exit_codes.for_signal(signal_number),
                signal_number=signal_number,
                cause=cause,
            )
        return ExecutionResult(exit_code=returncode, cause=cause)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _wait(process: subprocess.Popen[bytes]) -> tuple[int, bool]:
        """Block until *process* ends, forwarding Ctrl+C to it.

        The child decides how to react to the interrupt; we keep waiting
        for it so its exit status is never lost.  Returns the exit status
        and whether an interrupt was forwarded.
        """
        interrupted = False
        while True:
            try:
                return process.wait(), interrupted
            except KeyboardInterrupt:
                if process.poll() is None:
                    logger.debug("Forwarding SIGINT to process %s", process.pid)
                    process.send_signal(signal.SIGINT)
                    interrupted = True

    def _launch_error(
        self,
        command: list[str],
        workdir: Path | None,
        exc: OSError,
    ) -> LaunchFailureError:
        executable = command[0]
        if isinstance(exc, FileNotFoundError):
            if _is_workdir(exc, workdir):
                return LaunchFailureError(
                    f"Working directory {workdir} does not exist.",
                    reason=LaunchFailureError.MISSING_WORKDIR,
                    hint=f"Set {ENV_WORKDIR} to an existing directory or unset it.",
                )
            return self._not_found_error(executable)
        if isinstance(exc, PermissionError):
            return LaunchFailureError(
                f"Permission denied when starting {executable}.",
                reason=LaunchFailureError.PERMISSION_DENIED,
                hint="Check that the file is executable by the current user.",
            )
        return LaunchFailureError(
            f"Could not start {executable}: {exc}",
            reason=LaunchFailureError.OS_ERROR,
        )

    def _not_found_error(self, executable: str) -> LaunchFailureError:
        return LaunchFailureError(
            f"Executable {executable!r} was not found.",
            reason=LaunchFailureError.NOT_FOUND,
        )


def _is_workdir(exc: OSError, workdir: Path | None) -> bool:
    """Whether *exc* was raised for the working directory, not the executable."""
    if workdir is None or exc.filename is None:
        return False
    return os.fsdecode(exc.filename) == os.fsdecode(workdir)


class JavaLauncher(SubprocessLauncher):
    """Runs ``target.main_class`` inside a JVM configured by :class:`RuntimeConfig`.

    Command line::

        <java> -cp <classpath> <config opts> <target opts> <main class> <parameters> <argv>
    """

    def __init__(self, config: RuntimeConfig) -> None:
        super().__init__(base_env=config.child_environment(), cwd=config.working_dir)
        self._config = config

    @property
    def config(self) -> RuntimeConfig:
        return self._config

    def build_command(self, target: RuntimeTarget, argv: Sequence[str]) -> list[str]:
        return [
            self._config.java,
            "-cp",
            self._config.classpath,
            *self._config.java_opts,
            *target.jvm_options,
            target.main_class,
            *target.parameters,
            *argv,
        ]

    def _not_found_error(self, executable: str) -> LaunchFailureError:
        return RuntimeNotFoundError(
            f"Java runtime {executable!r} was not found.",
            hint=install_hint(detect_java(executable)),
        )
