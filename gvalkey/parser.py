"""Streaming parser for RESP2 values read from a binary stream."""

from __future__ import annotations

import re
from typing import BinaryIO

from gvalkey.protocol import Array, BulkString, Integer, Payload, SimpleString

_INT_RE = re.compile(rb"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_RESP3_PREFIXES = frozenset(b"_,#!=(%~|>")


class ProtocolError(ValueError):
    """Raised when incoming bytes are not valid RESP."""


def _quote(raw: bytes) -> str:
    return repr(raw.decode("utf-8", "backslashreplace"))


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", "surrogateescape")


def _to_int64(raw: bytes) -> int:
    if _INT_RE.fullmatch(raw) is None:
        raise ValueError(f"invalid syntax: {_quote(raw)}")
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"value out of range: {_quote(raw)}")
    return value


class Parser:
    """Reads RESP values one at a time from a binary stream.

    ``parse`` raises ``EOFError`` when the stream ends before a value starts
    and ``ProtocolError`` when the bytes are malformed.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def parse(self) -> Payload:
        """Read and return the next value from the stream."""
        line = self._read_line()
        if not line:
            raise ProtocolError("unsupported RESP type: empty line")

        prefix, body = line[:1], line[1:]
        if prefix == b"*":
            return self._parse_array(body)
        if prefix == b"$":
            return self._parse_bulk_string(body)
        if prefix == b"+":
            return SimpleString(_decode(body))
        if prefix == b":":
            return self._parse_integer(body)
        if line[0] in _RESP3_PREFIXES:
            raise ProtocolError(f"RESP3 type not supported yet: {_quote(line)}")
        raise ProtocolError(f"unsupported RESP type: {_quote(line)}")

    def _read_line(self) -> bytes:
        line = self._stream.readline()
        if not line.endswith(b"\n"):
            raise EOFError("stream closed")
        return line[:-2]

    def _read_exact(self, size: int) -> bytes:
        data = self._stream.read(size)
        if not data:
            raise EOFError("stream closed")
        if len(data) < size:
            raise ProtocolError("unexpected EOF")
        return data

    def _parse_array(self, body: bytes) -> Array:
        try:
            count = _to_int64(body)
        except ValueError as exc:
            raise ProtocolError(f"parse array length failed: {exc}") from exc
        if count <= 0:
            return Array()
        return Array(self.parse() for _ in range(count))

    def _parse_bulk_string(self, body: bytes) -> BulkString:
        try:
            length = _to_int64(body)
        except ValueError as exc:
            raise ProtocolError(f"parse bulk string length failed: {exc}") from exc
        if length == -1:
            return BulkString("")
        if length < 0:
            raise ProtocolError(f"parse bulk string length failed: negative length {length}")
        data = self._read_exact(length + 2)
        return BulkString(_decode(data[:length]))

    def _parse_integer(self, body: bytes) -> Integer:
        try:
            return Integer(_to_int64(body))
        except ValueError as exc:
            raise ProtocolError(f"parse integer failed: {exc}") from exc