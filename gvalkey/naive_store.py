"""A lock-protected dictionary store with periodic removal of expired keys."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from gvalkey.arguments import SetArgs
from gvalkey.store import SetResult, Store

_CLEANUP_INTERVAL = 1.0


@dataclass
class _Item:
    value: Any
    expiration: datetime | None = None

    def is_expired(self) -> bool:
        return self.expiration is not None and datetime.now(timezone.utc) > self.expiration


class NaiveStore(Store):
    """A thread-safe store backed by a dictionary and a lock.

    A background thread removes expired keys once a second until ``close``.
    """

    def __init__(self) -> None:
        self._items: dict[str, _Item] = {}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._cleaner = threading.Thread(
            target=self._cleanup_expired_keys, name="naive-store-cleanup", daemon=True
        )
        self._cleaner.start()

    def set(self, args: SetArgs) -> SetResult:
        key = str(args.key)
        with self._lock:
            old_item = self._items.get(key)
            exists = old_item is not None and not old_item.is_expired()

            if (args.nx and exists) or (args.xx and not exists):
                if args.get and exists:
                    return SetResult(old_item.value, True)
                return SetResult(None, False)

            self._items[key] = _Item(args.value, args.expire_at)

        if args.get and exists:
            return SetResult(old_item.value, True)
        return SetResult(None, True)

    def get(self, key: str) -> Any | None:
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            if item.is_expired():
                del self._items[key]
                return None
            return item.value

    def delete(self, key: str) -> bool:
        with self._lock:
            item = self._items.pop(key, None)
        if item is None:
            return False
        # An expired key logically no longer existed.
        return not item.is_expired()

    def close(self) -> None:
        self._stop.set()
        if self._cleaner is not threading.current_thread():
            self._cleaner.join()

    def _cleanup_expired_keys(self) -> None:
        while not self._stop.wait(_CLEANUP_INTERVAL):
            with self._lock:
                expired = [key for key, item in self._items.items() if item.is_expired()]
                for key in expired:
                    del self._items[key]