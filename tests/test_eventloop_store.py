import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from gvalkey.arguments import SetArgs
from gvalkey.eventloop_store import EventloopStore
from gvalkey.protocol import BulkString


@pytest.fixture
def store():
    s = EventloopStore()
    yield s
    s.close()


def _args(key, value, **options):
    return SetArgs(key=BulkString(key), value=value, **options)


def _wait_until(predicate, timeout, interval=0.05):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


def test_basic_operations(store):
    _, ok = store.set(_args("testkey", "testvalue"))
    assert ok is True
    assert store.get("testkey") == "testvalue"

    assert store.delete("testkey") is True
    assert store.get("testkey") is None

    assert store.delete("nonexistent") is False


def test_expiration(store):
    expire_at = datetime.now(timezone.utc) + timedelta(seconds=1)
    _, ok = store.set(_args("expirekey", "expirevalue", expire_at=expire_at))
    assert ok is True
    assert store.get("expirekey") == "expirevalue"

    assert _wait_until(lambda: store.get("expirekey") is None, timeout=3)


def test_background_cleanup_removes_expired_key(store):
    expire_at = datetime.now(timezone.utc) + timedelta(milliseconds=50)
    store.set(_args("gone", "v", expire_at=expire_at))
    time.sleep(1.5)
    assert store.delete("gone") is False


def test_plain_set_clears_previous_expiration(store):
    expire_at = datetime.now(timezone.utc) + timedelta(milliseconds=100)
    store.set(_args("k", "first", expire_at=expire_at))
    store.set(_args("k", "second"))
    time.sleep(0.2)
    assert store.get("k") == "second"


def test_set_nx(store):
    assert store.set(_args("nxkey", "original")).ok is True

    assert store.set(_args("nxkey", "new", nx=True)).ok is False
    assert store.get("nxkey") == "original"

    assert store.set(_args("newkey", "newvalue", nx=True)).ok is True
    assert store.get("newkey") == "newvalue"


def test_set_nx_with_get_on_existing_key_returns_old_value(store):
    store.set(_args("nxkey", "original"))
    old_value, ok = store.set(_args("nxkey", "new", nx=True, get=True))
    assert (old_value, ok) == ("original", True)
    assert store.get("nxkey") == "original"


def test_set_xx(store):
    assert store.set(_args("xxkey", "value", xx=True)).ok is False
    assert store.get("xxkey") is None

    assert store.set(_args("xxkey", "original")).ok is True
    assert store.set(_args("xxkey", "updated", xx=True)).ok is True
    assert store.get("xxkey") == "updated"


def test_set_xx_on_expired_key_fails(store):
    expire_at = datetime.now(timezone.utc) + timedelta(milliseconds=50)
    store.set(_args("k", "old", expire_at=expire_at))
    time.sleep(0.1)
    assert store.set(_args("k", "new", xx=True)).ok is False


def test_set_get(store):
    old_value, ok = store.set(_args("getkey", "newvalue", get=True))
    assert ok is True
    assert old_value is None

    old_value, ok = store.set(_args("getkey", "updatedvalue", get=True))
    assert ok is True
    assert old_value == "newvalue"

    assert store.get("getkey") == "updatedvalue"


def test_concurrency(store):
    count = 50
    keys = [f"concurrentkey{i}" for i in range(count)]

    with ThreadPoolExecutor(max_workers=16) as pool:
        set_results = list(pool.map(lambda i: store.set(_args(keys[i], i)).ok, range(count)))
        values = list(pool.map(store.get, keys))
        deleted = list(pool.map(store.delete, keys))

    assert all(set_results)
    assert values == list(range(count))
    assert all(deleted)
    assert all(store.get(key) is None for key in keys)


def test_operations_after_close_raise():
    s = EventloopStore()
    s.set(_args("k", "v"))
    s.close()
    with pytest.raises(RuntimeError, match="closed"):
        s.get("k")
    with pytest.raises(RuntimeError, match="closed"):
        s.set(_args("k", "v"))


def test_close_is_idempotent_and_stops_worker():
    s = EventloopStore()
    s.close()
    s.close()
    assert s._worker.is_alive() is False