"""Loopback servers for integration tests."""

import socket
import threading
from typing import Callable, Iterator, List

import pytest


class LineServer:
    """Accepts a single client on 127.0.0.1 and hands it to ``handler``."""

    def __init__(self, handler: Callable[["LineServer", socket.socket], None]):
        self.handler = handler
        self.received = bytearray()
        self.errors: List[BaseException] = []
        self.release = threading.Event()

        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._listener.bind(("127.0.0.1", 0))
        self._listener.listen(1)
        self._listener.settimeout(10.0)
        self.port = self._listener.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)

    @staticmethod
    def recv_line(sock: socket.socket) -> bytes:
        """Read from ``sock`` until CRLF or end of stream."""
        data = b""
        while b"\r\n" not in data:
            chunk = sock.recv(1024)
            if not chunk:
                break
            data += chunk
        return data

    def start(self) -> "LineServer":
        self._thread.start()
        return self

    def _serve(self) -> None:
        try:
            client, _ = self._listener.accept()
        except OSError:
            return

        with client:
            try:
                self.handler(self, client)
            except OSError as e:
                self.errors.append(e)

    def stop(self) -> None:
        self.release.set()
        self._thread.join(timeout=10.0)
        self._listener.close()


@pytest.fixture
def line_server() -> Iterator[Callable[..., LineServer]]:
    """Factory starting LineServers that are stopped after the test."""
    servers: List[LineServer] = []

    def _start(handler: Callable[[LineServer, socket.socket], None]) -> LineServer:
        server = LineServer(handler).start()
        servers.append(server)
        return server

    yield _start

    for server in servers:
        server.stop()
