"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols, never on concrete
implementations, so tests can substitute a stub launcher without
starting real processes.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

from fsadmin.core.models import ExecutionResult, RuntimeTarget


class ProcessLauncher(Protocol):
    """Contract for external-runtime launch backends.

    Any object that implements :meth:`launch` with the correct signature
    satisfies this protocol structurally (no explicit inheritance
    required).
    """

    def launch(
        self,
        target: RuntimeTarget,
        argv: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
    ) -> ExecutionResult:
        """Run *target* with *argv* and block until it terminates.

        Standard streams are inherited unmodified.  Exactly one process
        is started per call; implementations never retry.

        Raises
        ------
        LaunchFailureError
            When the runtime could not be started at all.
        """
        ...  # pragma: no cover
