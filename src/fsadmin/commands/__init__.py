"""Command catalog — the descriptors fsadmin ships with.

Adding a command means adding a descriptor here; the dispatch core
needs no changes.
"""

from __future__ import annotations

from fsadmin.commands.fs import fs_commands
from fsadmin.core.registry import CommandRegistry


def build_registry() -> CommandRegistry:
    """Return a fresh registry holding every built-in command."""
    return CommandRegistry(fs_commands())


__all__: list[str] = ["build_registry", "fs_commands"]
