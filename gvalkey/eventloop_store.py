"""A store whose data is touched only by a single event-loop thread."""

from __future__ import annotations

import queue
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any

from gvalkey.arguments import SetArgs
from gvalkey.store import SetResult, Store

_CLEANUP_INTERVAL = 1.0


class _Op(Enum):
    GET = auto()
    SET = auto()
    DELETE = auto()


@dataclass
class _Request:
    op: _Op
    payload: Any
    reply: Future = field(default_factory=Future)


class EventloopStore(Store):
    """A store that serialises every operation through one worker thread.

    The worker also removes expired keys once a second. Operations after
    ``close`` raise ``RuntimeError``.
    """

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._expiration: dict[str, datetime] = {}
        self._requests: queue.Queue[_Request | None] = queue.Queue()
        self._closed = False
        self._state_lock = threading.Lock()
        self._worker = threading.Thread(target=self.run, name="eventloop-store", daemon=True)
        self._worker.start()

    def get(self, key: str) -> Any | None:
        return self._execute(_Op.GET, key)

    def set(self, args: SetArgs) -> SetResult:
        return self._execute(_Op.SET, args)

    def delete(self, key: str) -> bool:
        return self._execute(_Op.DELETE, key)

    def close(self) -> None:
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
            self._requests.put(None)
        if self._worker is not threading.current_thread():
            self._worker.join()

    def run(self) -> None:
        """Process requests and expire keys until the store is closed."""
        next_tick = time.monotonic() + _CLEANUP_INTERVAL
        while True:
            timeout = max(0.0, next_tick - time.monotonic())
            try:
                request = self._requests.get(timeout=timeout)
            except queue.Empty:
                request = _Request(_Op.GET, None)
                request = None if False else request
                self._expire_keys()
                next_tick = time.monotonic() + _CLEANUP_INTERVAL
                continue

            if request is None:
                self._fail_pending()
                return
            self._handle(request)

            if time.monotonic() >= next_tick:
                self._expire_keys()
                next_tick = time.monotonic() + _CLEANUP_INTERVAL

    def _execute(self, op: _Op, payload: Any) -> Any:
        request = _Request(op, payload)
        with self._state_lock:
            if self._closed:
                raise RuntimeError("store is closed")
            self._requests.put(request)
        return request.reply.result()

    def _handle(self, request: _Request) -> None:
        try:
            if request.op is _Op.GET:
                result = self._handle_get(request.payload)
            elif request.op is _Op.SET:
                result = self._handle_set(request.payload)
            else:
                result = self._handle_delete(request.payload)
        except Exception as exc:  # noqa: BLE001 - hand the failure to the caller
            request.reply.set_exception(exc)
        else:
            request.reply.set_result(result)

    def _fail_pending(self) -> None:
        while True:
            try:
                request = self._requests.get_nowait()
            except queue.Empty:
                return
            if request is not None:
                request.reply.set_exception(RuntimeError("store is closed"))

    def _handle_get(self, key: str) -> Any | None:
        if self._is_expired(key):
            self._data.pop(key, None)
            self._expiration.pop(key, None)
            return None
        return self._data.get(key)

    def _handle_set(self, args: SetArgs) -> SetResult:
        key = str(args.key)
        exists = key in self._data
        old_value = self._data.get(key)

        if exists and self._is_expired(key):
            exists = False

        if (args.nx and exists) or (args.xx and not exists):
            if args.get and exists:
                return SetResult(old_value, True)
            return SetResult(None, False)

        self._data[key] = args.value
        if args.expire_at is not None:
            self._expiration[key] = args.expire_at
        else:
            self._expiration.pop(key, None)

        if args.get and exists:
            return SetResult(old_value, True)
        return SetResult(None, True)

    def _handle_delete(self, key: str) -> bool:
        if key not in self._data:
            return False
        del self._data[key]
        self._expiration.pop(key, None)
        return True

    def _expire_keys(self) -> None:
        now = datetime.now(timezone.utc)
        expired = [key for key, expire_at in self._expiration.items() if now > expire_at]
        for key in expired:
            self._data.pop(key, None)
            del self._expiration[key]

    def _is_expired(self, key: str) -> bool:
        expire_at = self._expiration.get(key)
        return expire_at is not None and datetime.now(timezone.utc) > expire_at