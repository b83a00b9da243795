"""Command registry — the flat name → descriptor table.

One registry instance is built at startup and handed to the
:class:`~fsadmin.core.dispatcher.Dispatcher`.  Registration is
serialised by a lock; lookups read an immutable snapshot and never
block, so the registry is safe to share once populated.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from types import MappingProxyType

from fsadmin.core.models import CommandDescriptor
from fsadmin.exceptions import DuplicateNameError, UnknownCommandError


class CommandRegistry:
    """Ordered collection of :class:`CommandDescriptor` keyed by name."""

    def __init__(self, descriptors: Iterable[CommandDescriptor] = ()) -> None:
        self._lock = threading.Lock()
        self._commands: MappingProxyType[str, CommandDescriptor] = MappingProxyType({})
        self.register_all(descriptors)

    def register(self, descriptor: CommandDescriptor) -> None:
        """Add *descriptor*.

        Raises
        ------
        DuplicateNameError
            When a command with the same name is already registered.  The
            registry is left unchanged.
        """
        with self._lock:
            if descriptor.name in self._commands:
                raise DuplicateNameError(descriptor.name)
            updated = dict(self._commands)
            updated[descriptor.name] = descriptor
            self._commands = MappingProxyType(updated)

    def register_all(self, descriptors: Iterable[CommandDescriptor]) -> None:
        for descriptor in descriptors:
            self.register(descriptor)

    def get(self, name: str) -> CommandDescriptor:
        """Return the descriptor registered as *name*.

        Raises
        ------
        UnknownCommandError
            When no such command exists.
        """
        commands = self._commands
        try:
            return commands[name]
        except KeyError:
            raise UnknownCommandError(name, available=tuple(commands)) from None

    def names(self) -> tuple[str, ...]:
        return tuple(self._commands)

    def groups(self) -> tuple[str, ...]:
        """Distinct CLI groups, in first-registration order."""
        return tuple(dict.fromkeys(d.group for d in self._commands.values()))

    def in_group(self, group: str) -> tuple[CommandDescriptor, ...]:
        return tuple(d for d in self._commands.values() if d.group == group)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(tuple(self._commands.values()))

    def __len__(self) -> int:
        return len(self._commands)
