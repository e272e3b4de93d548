"""A threaded TCP server that speaks RESP."""

from __future__ import annotations

import logging
import socket
import socketserver
import threading

from gvalkey.handler import Handler
from gvalkey.naive_store import NaiveStore
from gvalkey.store import Store

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 6379


def _discard_logger() -> logging.Logger:
    logger = logging.Logger("gvalkey.discard")
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


def _format_peer(address) -> str:
    if isinstance(address, tuple) and len(address) >= 2:
        return f"{address[0]}:{address[1]}"
    return str(address)


class _ConnectionHandler(socketserver.StreamRequestHandler):
    def handle(self) -> None:
        app = self.server.app
        peer = _format_peer(self.client_address)
        app.logger.info("new connection remote_addr=%s", peer)
        app.handler.serve(self.rfile, self.wfile, peer)


class _TCPServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, address, app: Server, family: int) -> None:
        self.app = app
        self.address_family = family
        super().__init__(address, _ConnectionHandler)

    def handle_error(self, request, client_address) -> None:
        self.app.logger.exception(
            "connection failed remote_addr=%s", _format_peer(client_address)
        )


class Server:
    """Accepts clients and serves each on its own thread.

    ``ready`` is set and ``server_address`` filled in once the listening
    socket is bound. A store created by the server is closed when it stops.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        *,
        logger: logging.Logger | None = None,
        store: Store | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.logger = logger if logger is not None else _discard_logger()
        self._owns_store = store is None
        self.store = NaiveStore() if store is None else store
        self.handler = Handler(self.store, self.logger)
        self.server_address: tuple[str, int] | None = None
        self.ready = threading.Event()
        self._tcp: _TCPServer | None = None
        self._lock = threading.Lock()
        self._stopped = False

    def serve_forever(self) -> None:
        """Listen and serve until ``shutdown``; raise ``OSError`` if binding fails."""
        self.logger.info("server started addr=%s:%s", self.host, self.port)
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        try:
            tcp = _TCPServer((self.host, self.port), self, family)
        except OSError:
            self._close_store()
            raise

        with self._lock:
            if self._stopped:
                tcp.server_close()
                self._close_store()
                return
            self._tcp = tcp

        self.server_address = tcp.server_address[:2]
        self.ready.set()
        try:
            tcp.serve_forever()
        finally:
            tcp.server_close()
            self._close_store()

    def shutdown(self) -> None:
        """Stop serving; must be called from a thread other than the server's."""
        with self._lock:
            self._stopped = True
            tcp = self._tcp
        if tcp is not None:
            tcp.shutdown()

    def _close_store(self) -> None:
        if self._owns_store:
            self.store.close()