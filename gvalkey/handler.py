"""Executes RESP commands against a store and serves client connections."""

from __future__ import annotations

import logging
from typing import BinaryIO

from gvalkey.arguments import CommandError, parse_del_args, parse_get_args, parse_set_args
from gvalkey.commands import Command, CommandTable
from gvalkey.parser import Parser, ProtocolError
from gvalkey.protocol import (
    COMMAND,
    DEL,
    GET,
    NULL,
    OK,
    SET,
    Array,
    BulkString,
    Integer,
    Payload,
    SimpleError,
)
from gvalkey.store import Store


class Handler:
    """Dispatches parsed commands to their implementations."""

    def __init__(self, store: Store, logger: logging.Logger | None = None) -> None:
        self.store = store
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.commands = CommandTable()
        for command in (
            Command(GET, 2, self._handle_get),
            Command(SET, -3, self._handle_set),
            Command(DEL, -2, self._handle_del),
            Command(COMMAND, -1, self._handle_command),
        ):
            self.commands.register(command)

    def dispatch(self, args: Array) -> Payload:
        """Run the command in ``args``; raise ``CommandError`` on failure."""
        if not args:
            raise CommandError("empty command")
        name = args[0]
        if not isinstance(name, BulkString):
            raise CommandError("command must be a bulk string")

        command = self.commands.get(name)
        if command is None:
            raise CommandError("unsupported command")

        if (command.arity > 0 and len(args) != command.arity) or (
            command.arity < 0 and len(args) < -command.arity
        ):
            raise CommandError(f"wrong number of arguments for '{command.name}' command")

        return command.handler(args)

    def serve(self, rfile: BinaryIO, wfile: BinaryIO, peer: str = "") -> None:
        """Answer commands read from ``rfile`` until the client goes away."""
        parser = Parser(rfile)
        while True:
            try:
                value = parser.parse()
            except EOFError:
                self.logger.info("client closed connection remote_addr=%s", peer)
                return
            except (ProtocolError, OSError) as exc:
                self.logger.error("parse command failed error=%s", exc)
                try:
                    wfile.write(SimpleError(str(exc)).to_resp())
                    wfile.flush()
                except OSError as write_exc:
                    self.logger.error("write error message to client failed error=%s", write_exc)
                return

            if isinstance(value, Array):
                self.logger.debug("received array command remote_addr=%s command=%r", peer, value)
                try:
                    response = self.dispatch(value)
                except CommandError as exc:
                    response = SimpleError(str(exc))
            else:
                self.logger.error("unsupported command type remote_addr=%s command=%r", peer, value)
                response = SimpleError("command must be an array")

            encoded = response.to_resp()
            self.logger.debug(
                "writing response remote_addr=%s response=%r payload=%r", peer, response, encoded
            )
            try:
                wfile.write(encoded)
                wfile.flush()
            except OSError as exc:
                self.logger.error("write ok message to client failed error=%s", exc)

    def _handle_get(self, args: Array) -> Payload:
        key = parse_get_args(args)
        value = self.store.get(str(key))
        if value is None:
            return NULL
        if isinstance(value, Payload):
            return value
        raise CommandError(f"value is not a valid type: {type(value).__name__}")

    def _handle_set(self, args: Array) -> Payload:
        parsed = parse_set_args(args)
        old_value, success = self.store.set(parsed)

        if parsed.get:
            if not success or old_value is None:
                return NULL
            if isinstance(old_value, Payload):
                return old_value
            return SimpleError("internal error: stored value has an unmarshalable type")

        if not success:
            return NULL
        return OK

    def _handle_del(self, args: Array) -> Payload:
        keys = parse_del_args(args)
        return Integer(sum(1 for key in keys if self.store.delete(str(key))))

    def _handle_command(self, args: Array) -> Payload:
        return OK