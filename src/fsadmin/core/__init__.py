"""Core / service layer — descriptors, argument building, dispatch.

Rules
-----
* No ``print()`` calls.
* No filesystem, network or process I/O; launching is delegated to a
  :class:`~fsadmin.core.protocols.ProcessLauncher`.
* No imports from ``cli`` or ``infra``.
"""

from fsadmin.core.argv_builder import build_argv, build_request_argv
from fsadmin.core.dispatcher import DispatchOutcome, Dispatcher
from fsadmin.core.models import (
    Arity,
    CommandDescriptor,
    ExecutionResult,
    FlagKind,
    FlagSpec,
    InvocationRequest,
    RuntimeTarget,
)
from fsadmin.core.protocols import ProcessLauncher
from fsadmin.core.registry import CommandRegistry

__all__: list[str] = [
    "Arity",
    "CommandDescriptor",
    "CommandRegistry",
    "DispatchOutcome",
    "Dispatcher",
    "ExecutionResult",
    "FlagKind",
    "FlagSpec",
    "InvocationRequest",
    "ProcessLauncher",
    "RuntimeTarget",
    "build_argv",
    "build_request_argv",
]
