"""Argument parsing for the GET, SET and DEL commands."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Sequence

from gvalkey.protocol import EX, GET, NX, PX, XX, BulkString, Payload

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


class CommandError(ValueError):
    """Raised when a command's arguments are invalid."""


@dataclass
class SetArgs:
    """The parsed arguments of a SET command."""

    key: Any
    value: Any
    expire_at: datetime | None = None
    nx: bool = False
    xx: bool = False
    get: bool = False


def peek_next_integer(args: Sequence[Any], index: int) -> int:
    """Return the argument after ``index`` parsed as a 64-bit integer."""
    next_index = index + 1
    if next_index >= len(args):
        raise CommandError("argument required")
    candidate = args[next_index]
    if not isinstance(candidate, BulkString):
        raise CommandError(f"value is not an integer: {type(candidate).__name__}")
    if _INT_RE.fullmatch(candidate) is None:
        raise CommandError(f"value is not an integer: {str(candidate)!r}")
    value = int(candidate)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise CommandError(f"value is not an integer: {str(candidate)!r} is out of range")
    return value


def _key(value: Any) -> Any:
    if not isinstance(value, Payload):
        raise CommandError("key is not a string")
    return value


def parse_get_args(args: Sequence[Any]) -> Any:
    """Return the key of a GET command."""
    return _key(args[1])


def _deadline(delta_factory, amount: int, option: str) -> datetime:
    try:
        return datetime.now(timezone.utc) + delta_factory(amount)
    except OverflowError as exc:
        raise CommandError(f"syntax error: {option} value is out of range") from exc


def parse_set_args(args: Sequence[Any]) -> SetArgs:
    """Parse ``SET key value [EX s | PX ms] [NX | XX] [GET]``."""
    parsed = SetArgs(key=_key(args[1]), value=args[2])

    ex: int | None = None
    px: int | None = None
    options = iter(enumerate(args[3:], start=3))
    for index, option in options:
        if not isinstance(option, BulkString):
            raise CommandError(f"option is not a bulk string: {type(option).__name__}")
        name = option.upper()
        if name in (EX, PX):
            try:
                amount = peek_next_integer(args, index)
            except CommandError as exc:
                raise CommandError(f"syntax error: {exc}") from exc
            if name == EX:
                ex = amount
            else:
                px = amount
            next(options, None)
        elif name == NX:
            parsed.nx = True
        elif name == XX:
            parsed.xx = True
        elif name == GET:
            parsed.get = True
        else:
            raise CommandError(f"syntax error: unsupported option '{name}'")

    if parsed.nx and parsed.xx:
        raise CommandError("syntax error: NX and XX options cannot be used together")
    if ex is not None and px is not None:
        raise CommandError("syntax error: EX and PX options cannot be used together")

    if ex is not None:
        if ex <= 0:
            raise CommandError("syntax error: EX value must be positive")
        parsed.expire_at = _deadline(lambda n: timedelta(seconds=n), ex, "EX")
    elif px is not None:
        if px <= 0:
            raise CommandError("syntax error: PX value must be positive")
        parsed.expire_at = _deadline(lambda n: timedelta(milliseconds=n), px, "PX")

    return parsed


def parse_del_args(args: Sequence[Any]) -> list[Any]:
    """Return the keys of a DEL command."""
    return [_key(arg) for arg in args[1:]]