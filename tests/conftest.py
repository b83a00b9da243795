"""Shared pytest fixtures and configuration for the fsadmin test suite.

Guidelines
----------
* No test launches the Java runtime; dispatch tests use the
  :class:`RecordingLauncher` stub.
* Launcher tests start short-lived ``sys.executable`` children only.
* Core tests must be pure, no side effects.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

import pytest

from fsadmin.core.models import (
    Arity,
    CommandDescriptor,
    ExecutionResult,
    FlagKind,
    FlagSpec,
    RuntimeTarget,
)
from fsadmin.core.registry import CommandRegistry


@dataclass(frozen=True)
class LaunchCall:
    target: RuntimeTarget
    argv: tuple[str, ...]
    env: Mapping[str, str] | None
    cwd: Path | None


class RecordingLauncher:
    """ProcessLauncher stub that records calls and replays scripted results."""

    def __init__(
        self,
        result: ExecutionResult | None = None,
        *,
        error: Exception | None = None,
    ) -> None:
        self.result = result if result is not None else ExecutionResult(exit_code=0)
        self.error = error
        self.calls: list[LaunchCall] = []

    def launch(
        self,
        target: RuntimeTarget,
        argv: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
    ) -> ExecutionResult:
        self.calls.append(LaunchCall(target, tuple(argv), env, cwd))
        if self.error is not None:
            raise self.error
        return self.result


def make_chgrp() -> CommandDescriptor:
    return CommandDescriptor(
        name="chgrp",
        usage="<group> <path>",
        arity=Arity.exact(2),
        summary="changes the group of a file or directory",
        flags=(FlagSpec("recursive", short="R", help="change the group recursively", token="-R"),),
        target=RuntimeTarget(main_class="example.Shell", parameters=("chgrp",)),
    )


def make_stat() -> CommandDescriptor:
    return CommandDescriptor(
        name="stat",
        usage="<path>",
        arity=Arity.exact(1),
        flags=(
            FlagSpec("verbose", short="v", token="-v"),
            FlagSpec("format", kind=FlagKind.STRING, token="-f"),
            FlagSpec("quiet", short="q", token="-q"),
        ),
        target=RuntimeTarget(main_class="example.Shell", parameters=("stat",)),
    )


@pytest.fixture
def chgrp() -> CommandDescriptor:
    return make_chgrp()


@pytest.fixture
def stat() -> CommandDescriptor:
    return make_stat()


@pytest.fixture
def registry() -> CommandRegistry:
    return CommandRegistry([make_chgrp(), make_stat()])


@pytest.fixture
def launcher() -> RecordingLauncher:
    return RecordingLauncher()
