# gvalkey

A small in-memory key-value server that speaks RESP, the Redis serialization
protocol. Any Redis client, including `redis-cli`, can talk to it.

## Supported commands

- `GET key` returns the value, or a null bulk string when the key is missing
  or expired.
- `SET key value [EX seconds | PX milliseconds] [NX | XX] [GET]` stores a
  value. It answers `OK`, or a null bulk string when an `NX`/`XX` condition
  stops the write. With `GET` it answers the previous value instead, or a null
  bulk string if there was none.
- `DEL key [key ...]` returns how many of the keys were removed.
- `COMMAND` answers `OK` so that clients can finish their handshake.

Command names and options are case-insensitive. Errors come back as
`-ERR <message>` replies, for example for unknown commands, a wrong number of
arguments, or invalid `SET` options.

Keys with an expiry disappear once their time has passed. They are checked on
each read and removed in the background once a second.

## Installation

```
pip install .
```

## Running the server

```
gvalkey
```

Settings come from environment variables:

| Variable        | Default   | Meaning                                            |
|-----------------|-----------|----------------------------------------------------|
| `GVK_HOST`      | `0.0.0.0` | Address to listen on (hostname or IP address)      |
| `GVK_PORT`      | `6379`    | TCP port, from 1 to 65535                          |
| `GVK_LOG_LEVEL` | `INFO`    | One of `DEBUG`, `INFO`, `WARN`, `ERROR`, any case  |

An unset or empty variable takes its default. If a setting is invalid, the
server does not start. It prints `failed to load config: ...` on standard
error and exits with status 1. It also exits with status 1 if it cannot bind
its address. When standard output is a terminal, log lines are written as
coloured text. Otherwise each line is written as one JSON object.

For example:

```
GVK_PORT=7000 GVK_LOG_LEVEL=debug gvalkey
```

Then, from another terminal:

```
redis-cli -p 7000 SET greeting hello EX 60
redis-cli -p 7000 GET greeting
```

## Using it as a library

The protocol types in `gvalkey.protocol` and the parser in `gvalkey.parser`
can be used without the server:

```python
import io

from gvalkey.parser import Parser
from gvalkey.protocol import Array, BulkString

command = Array([BulkString("SET"), BulkString("key"), BulkString("value")])
wire = command.to_resp()            # b"*3\r\n$3\r\nSET\r\n..."
parsed = Parser(io.BytesIO(wire)).parse()
```

`Parser.parse` raises `EOFError` when the stream ends before a value starts.
It raises `gvalkey.parser.ProtocolError` when the bytes are malformed. A null
bulk string (`$-1`) is read back as an empty `BulkString`.

Other building blocks:

- `gvalkey.arguments`: `parse_get_args`, `parse_set_args` (returns a
  `SetArgs`) and `parse_del_args`. Invalid arguments raise `CommandError`.
- `gvalkey.naive_store.NaiveStore` and `gvalkey.eventloop_store.EventloopStore`:
  thread-safe stores with the `get`, `set`, `delete` and `close` methods of
  `gvalkey.store.Store`. Both can be used as context managers.
- `gvalkey.handler.Handler`: runs commands against a store. Use `dispatch` for
  a single command and `serve` for a pair of binary streams.
- `gvalkey.server.Server(host, port, logger=..., store=...)`: runs the server
  inside your own program. It serves from `serve_forever()` and stops when
  another thread calls `shutdown()`. Its `ready` event is set once the socket
  is bound. The bound address is then available as `server_address`. It uses
  a `NaiveStore` when no store is given.
- `gvalkey.config.load(environ)` reads and checks the settings and raises
  `ConfigError` when they are invalid. `gvalkey.logsetup.new_logger(level,
  stream)` builds the logger that the command uses.

## What it does not do

- Data lives only in memory. Nothing is saved to disk, and everything is lost
  when the server stops.
- Only the four commands above are implemented. Hashes, lists, sets and sorted
  sets, as well as `EXPIRE`, `TTL` and `KEYS`, are not.
- Only RESP2 is understood. RESP3 values are rejected with an error.
- There is no authentication, replication or clustering.

## Development

```
pip install -e ".[test]"
pytest
```