import io

import pytest

from gvalkey.parser import Parser, ProtocolError
from gvalkey.protocol import (
    DEL,
    GET,
    SET,
    Array,
    BulkString,
    Integer,
    Null,
    SimpleString,
)


def parse(data: bytes):
    return Parser(io.BytesIO(data)).parse()


def test_parse_simple_string():
    result = parse(b"+OK\r\n")
    assert result == "OK"
    assert isinstance(result, SimpleString)


def test_parse_integer():
    result = parse(b":1000\r\n")
    assert result == 1000
    assert isinstance(result, Integer)


def test_parse_bulk_string():
    result = parse(b"$5\r\nhello\r\n")
    assert result == "hello"
    assert isinstance(result, BulkString)


def test_parse_null_bulk_string():
    result = parse(b"$-1\r\n")
    assert result == ""
    assert isinstance(result, BulkString)


def test_parse_empty_bulk_string():
    result = parse(b"$0\r\n\r\n")
    assert result == ""
    assert isinstance(result, BulkString)


def test_parse_array():
    result = parse(b"*2\r\n$5\r\nhello\r\n:123\r\n")
    assert isinstance(result, Array)
    assert result == [BulkString("hello"), Integer(123)]
    assert isinstance(result[0], BulkString)
    assert isinstance(result[1], Integer)


def test_parse_empty_array():
    result = parse(b"*0\r\n")
    assert isinstance(result, Array)
    assert len(result) == 0


def test_parse_negative_array_length_gives_empty_array():
    result = parse(b"*-1\r\n")
    assert isinstance(result, Array)
    assert len(result) == 0


def test_parse_command_array():
    result = parse(b"*3\r\n$3\r\nSET\r\n$3\r\nkey\r\n$5\r\nvalue\r\n")
    assert result == ["SET", "key", "value"]


def test_parse_consecutive_values():
    parser = Parser(io.BytesIO(b"+OK\r\n:7\r\n$2\r\nhi\r\n"))
    assert parser.parse() == "OK"
    assert parser.parse() == 7
    assert parser.parse() == "hi"
    with pytest.raises(EOFError):
        parser.parse()


def test_invalid_array_length():
    with pytest.raises(ProtocolError, match="parse array length failed"):
        parse(b"*abc\r\n")


def test_invalid_bulk_string_length():
    with pytest.raises(ProtocolError, match="parse bulk string length failed"):
        parse(b"$abc\r\n")


def test_negative_bulk_string_length():
    with pytest.raises(ProtocolError, match="parse bulk string length failed"):
        parse(b"$-2\r\n")


def test_invalid_integer():
    with pytest.raises(ProtocolError, match="parse integer failed"):
        parse(b":abc\r\n")


def test_integer_out_of_range():
    with pytest.raises(ProtocolError, match="parse integer failed"):
        parse(b":9223372036854775808\r\n")


def test_unsupported_type():
    with pytest.raises(ProtocolError, match="unsupported RESP type"):
        parse(b"?unknown\r\n")


def test_resp3_type_not_supported():
    with pytest.raises(ProtocolError, match="RESP3 type not supported yet"):
        parse(b"_\r\n")


def test_empty_stream_is_eof():
    with pytest.raises(EOFError):
        parse(b"")


def test_partial_line_is_eof():
    with pytest.raises(EOFError):
        parse(b"+OK")


def test_missing_bulk_body_is_eof():
    with pytest.raises(EOFError):
        parse(b"$5\r\n")


def test_truncated_bulk_body_is_protocol_error():
    with pytest.raises(ProtocolError, match="unexpected EOF"):
        parse(b"$5\r\nhel")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (SimpleString("test"), SimpleString("test")),
        (Integer(42), Integer(42)),
        (BulkString("test string"), BulkString("test string")),
        (BulkString(""), BulkString("")),
        (Null(), BulkString("")),
    ],
)
def test_round_trip(value, expected):
    encoded = value.to_resp()
    assert encoded
    decoded = parse(encoded)
    assert decoded == expected
    assert type(decoded) is type(expected)


@pytest.mark.parametrize(
    "command",
    [
        Array([SET, BulkString("mykey"), BulkString("myvalue")]),
        Array([GET, BulkString("mykey")]),
        Array([DEL, BulkString("key1"), BulkString("key2"), BulkString("key3")]),
    ],
)
def test_command_round_trip(command):
    decoded = parse(command.to_resp())
    assert isinstance(decoded, Array)
    assert decoded == command


def test_large_bulk_string_round_trip():
    value = BulkString("x" * 1024)
    assert parse(value.to_resp()) == value


def test_large_array_round_trip():
    array = Array(BulkString("data" * (n + 1)) for n in range(100))
    decoded = parse(array.to_resp())
    assert len(decoded) == 100
    assert decoded[0] == "data"
    assert decoded[49] == "data" * 50
    assert decoded[99] == "data" * 100


def test_nested_array_round_trip():
    value = Array([BulkString("outer"), Array([BulkString("inner"), Integer(456)])])
    decoded = parse(value.to_resp())
    assert decoded == value
    assert isinstance(decoded[1], Array)


@pytest.mark.parametrize("number", [0, -123])
def test_integer_edge_round_trip(number):
    assert parse(Integer(number).to_resp()) == number


def test_bulk_string_with_special_characters():
    special = BulkString("hello\r\nworld\ttab")
    assert parse(special.to_resp()) == special


def test_empty_simple_string_round_trip():
    assert parse(SimpleString("").to_resp()) == ""


def test_binary_bulk_string_round_trip():
    raw = b"$3\r\n\xff\x00\xfe\r\n"
    decoded = parse(raw)
    assert decoded.to_resp() == raw