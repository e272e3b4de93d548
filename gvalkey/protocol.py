"""Values of the Redis serialization protocol (RESP) and their wire encoding."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"
_CRLF = b"\r\n"


def _encode(text: str) -> bytes:
    return text.encode(_ENCODING, _ERRORS)


class Payload(ABC):
    """Anything that can be sent to a client as RESP bytes."""

    __slots__ = ()

    @abstractmethod
    def to_resp(self) -> bytes:
        """Return the RESP encoding of the value."""


class Array(list, Payload):
    """A RESP array whose elements are payloads themselves."""

    def to_resp(self) -> bytes:
        encoded = [b"*%d" % len(self) + _CRLF]
        for element in self:
            if not isinstance(element, Payload):
                raise TypeError(
                    f"array element cannot be encoded: {type(element).__name__}"
                )
            encoded.append(element.to_resp())
        return b"".join(encoded)

    def __repr__(self) -> str:
        return f"Array({list.__repr__(self)})"


class SimpleString(str, Payload):
    """A single-line status reply, written with a leading ``+``."""

    def to_resp(self) -> bytes:
        return b"+" + _encode(self) + _CRLF

    def __repr__(self) -> str:
        return f"SimpleString({str.__repr__(self)})"


class BulkString(str, Payload):
    """A binary-safe string sent with its byte length in front."""

    def to_resp(self) -> bytes:
        body = _encode(self)
        return b"$%d" % len(body) + _CRLF + body + _CRLF

    def upper(self) -> BulkString:
        """Return an upper-cased copy that is still a bulk string."""
        return BulkString(str.upper(self))

    def __repr__(self) -> str:
        return f"BulkString({str.__repr__(self)})"


class Integer(int, Payload):
    """A signed 64-bit integer reply, written with a leading ``:``."""

    def to_resp(self) -> bytes:
        return b":%d" % self + _CRLF

    def __str__(self) -> str:
        return int.__repr__(self)

    def __repr__(self) -> str:
        return f"Integer({int.__repr__(self)})"


@dataclass(frozen=True)
class SimpleError(Payload):
    """An error reply; the wire form prefixes the message with ``-ERR``."""

    message: str

    def to_resp(self) -> bytes:
        return b"-ERR " + _encode(self.message) + _CRLF

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Null(Payload):
    """The null bulk string reply."""

    def to_resp(self) -> bytes:
        return b"$-1" + _CRLF

    def __str__(self) -> str:
        return ""


OK = SimpleString("OK")
NULL = Null()

# Names of the commands the server answers and of the SET options it knows.
GET, SET, DEL, COMMAND = map(BulkString, ("GET", "SET", "DEL", "COMMAND"))
EX, PX, NX, XX = map(BulkString, ("EX", "PX", "NX", "XX"))