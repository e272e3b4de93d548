"""The table of commands the server understands."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable

from gvalkey.protocol import Array, Payload


@dataclass(frozen=True)
class Command:
    """A command name, its arity and the function that executes it.

    A positive ``arity`` is the exact number of arguments (command name
    included); a negative one is the minimum number, negated.
    """

    name: str
    arity: int
    handler: Callable[[Array], Payload]


class CommandTable:
    """A thread-safe, case-insensitive registry of commands."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._lock = threading.Lock()

    def register(self, command: Command) -> None:
        """Add ``command``; raise ``ValueError`` if its name is taken."""
        key = str(command.name).upper()
        with self._lock:
            if key in self._commands:
                raise ValueError(f"command {key} already registered")
            self._commands[key] = command

    def get(self, name: str) -> Command | None:
        """Return the command registered under ``name``, or ``None``."""
        with self._lock:
            return self._commands.get(str(name).upper())