"""The interface shared by the in-memory key-value stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, NamedTuple

from gvalkey.arguments import SetArgs


class SetResult(NamedTuple):
    """The outcome of a SET: the previous value (if asked for) and success."""

    old_value: Any
    ok: bool


class Store(ABC):
    """A thread-safe in-memory key-value store with key expiry."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the live value stored under ``key``, or ``None``."""

    @abstractmethod
    def set(self, args: SetArgs) -> SetResult:
        """Store a value according to the parsed SET arguments."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove ``key``; return whether it was present."""

    @abstractmethod
    def close(self) -> None:
        """Stop any background work the store runs."""

    def __enter__(self) -> Store:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()