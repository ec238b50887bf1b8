"""src/maillink/transport/connection.py

Line based TCP and TLS connection.

This module provides the blocking transport used by text protocols such as
SMTP, POP3 and IMAP: connect on construction, send lines terminated with
CRLF, read lines until a CRLF is seen.

A connection is meant to be used by one thread at a time. ``close()`` may be
called from another thread to abort a blocked ``read_line()``; the read then
fails with ``ReadFailed`` and the connection reports itself closed.
"""

import contextlib
import logging
import socket
import threading
from typing import Any, Optional

from maillink.exceptions import (
    CapabilityUnavailable,
    ConfigurationError,
    ConnectionFailed,
    IOFailure,
    ReadFailed,
    WriteFailed,
)
from maillink.transport import tls
from maillink.transport.options import TransportOptions

logger = logging.getLogger(__name__)

LINE_TERMINATOR = b"\r\n"
READ_CHUNK_SIZE = 512


class TransportConnection:
    """
    Connection to a server for line based communication.

    The connection is opened by the constructor; if it cannot be opened
    ``ConnectionFailed`` is raised and no object is returned. Once the
    connection is closed, explicitly or by an I/O failure, it stays closed.

    Attributes:
        host: The server hostname or IP address.
        port: The server port number.
        sock: The underlying socket, ``None`` once closed.
    """

    __slots__ = ("host", "port", "sock", "_options", "_buffer", "_lock")

    CRLF = "\r\n"

    def __init__(
        self,
        host: str,
        port: int,
        options: Optional[TransportOptions] = None,
    ) -> None:
        """
        Connect to ``host:port``.

        Raises:
            ConfigurationError: if host, port or options are invalid.
            CapabilityUnavailable: if TLS is requested but unsupported.
            ConnectionFailed: if the connection could not be made.
        """
        if not isinstance(host, str) or not host:
            raise ConfigurationError(f"host must be a non-empty string, got {host!r}")

        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
            raise ConfigurationError(f"port must be in 1..65535, got {port!r}")

        if options is None:
            options = TransportOptions()

        elif not isinstance(options, TransportOptions):
            raise ConfigurationError(
                f"options must be TransportOptions, got {type(options).__name__}"
            )

        self.host = host
        self.port = port
        self._options = options
        self._buffer = bytearray()
        self._lock = threading.Lock()
        self.sock: Optional[socket.socket] = None

        if options.ssl and not tls.tls_available():
            raise CapabilityUnavailable(
                "TLS requested but this Python has no ssl module"
            )

        self.sock = self._connect()

    @property
    def options(self) -> TransportOptions:
        """Options of this connection."""
        return self._options

    @options.setter
    def options(self, value: TransportOptions) -> None:
        if not isinstance(value, TransportOptions):
            raise ConfigurationError(
                f"options must be TransportOptions, got {type(value).__name__}"
            )
        self._options = value

        sock = self.sock
        if sock is not None:
            with contextlib.suppress(OSError):
                sock.settimeout(value.timeout)

    def _connect(self) -> socket.socket:
        """
        Open the TCP connection, wrapping it in TLS when requested.
        """
        timeout = self._options.timeout
        raw_sock: Optional[socket.socket] = None

        try:
            raw_sock = socket.create_connection((self.host, self.port), timeout=timeout)
            if self._options.ssl:
                context = self._options.ssl_context
                if context is None:
                    context = tls.create_ssl_context()
                sock = context.wrap_socket(raw_sock, server_hostname=self.host)
            else:
                sock = raw_sock

            sock.settimeout(timeout)

        except socket.timeout as e:
            self._discard(raw_sock)
            message = f"Timeout connecting to {self.host}:{self.port}"
            logger.warning("%s", message)
            raise ConnectionFailed(message, self.host, self.port) from e

        # ssl.SSLError is an OSError, UnicodeError from IDNA encoding a ValueError
        except (OSError, ValueError) as e:
            self._discard(raw_sock)
            message = f"Failed to connect to the server: {self.host}:{self.port} - {e}"
            logger.warning("%s", message)
            raise ConnectionFailed(message, self.host, self.port) from e

        logger.debug(
            "Connected to %s:%s (tls=%s, timeout=%s)",
            self.host,
            self.port,
            self._options.ssl,
            timeout,
        )
        return sock

    @staticmethod
    def _discard(sock: Optional[socket.socket]) -> None:
        if sock is not None:
            with contextlib.suppress(OSError):
                sock.close()

    def send_line(self, data: str) -> None:
        """
        Send ``data`` to the server followed by CRLF.

        Raises:
            WriteFailed: if there is no connection or the write failed. The
                connection is closed unless nothing was written.
        """
        sock = self.sock
        if sock is None:
            raise WriteFailed(
                "Could not write to the stream. The connection is closed.",
                IOFailure.NOT_CONNECTED,
            )

        try:
            payload = (data + self.CRLF).encode(self._options.encoding)
        except UnicodeEncodeError as e:
            raise WriteFailed(
                f"Could not encode line as {self._options.encoding}: {e}",
                IOFailure.ENCODING,
            ) from e

        try:
            sock.sendall(payload)

        except socket.timeout as e:
            self._mark_dead(sock, "write timed out")
            raise WriteFailed(
                f"Write to {self.host}:{self.port} timed out", IOFailure.TIMEOUT
            ) from e

        except OSError as e:
            self._mark_dead(sock, f"write failed: {e}")
            raise WriteFailed(
                "Could not write to the stream. "
                f"It was probably terminated by the host: {e}",
                IOFailure.IO_ERROR,
            ) from e

        logger.debug("Sent %d bytes to %s:%s", len(payload), self.host, self.port)

    def read_line(self, trim: bool = False) -> str:
        """
        Return one line from the server.

        Reads until a CRLF has been received. The line is returned with its
        CRLF unless ``trim`` is set, in which case trailing CR and LF
        characters are removed. Data received after the CRLF is kept for the
        next call.

        Raises:
            ReadFailed: if there is no connection, the server closed it, the
                read timed out or failed. The connection is closed.
        """
        sock = self.sock
        if sock is None:
            raise ReadFailed(
                "Could not read from the stream. The connection is closed.",
                IOFailure.NOT_CONNECTED,
            )

        buffer = self._buffer
        scanned = 0
        while True:
            end = buffer.find(LINE_TERMINATOR, scanned)
            if end != -1:
                break
            # Keep a trailing CR in the scan window, its LF may be next
            scanned = max(len(buffer) - 1, 0)

            try:
                chunk = sock.recv(READ_CHUNK_SIZE)

            except socket.timeout as e:
                self._mark_dead(sock, "read timed out")
                raise ReadFailed(
                    f"Read from {self.host}:{self.port} timed out", IOFailure.TIMEOUT
                ) from e

            except OSError as e:
                self._mark_dead(sock, f"read failed: {e}")
                raise ReadFailed(
                    f"Could not read from the stream: {e}", IOFailure.IO_ERROR
                ) from e

            if not chunk:
                # End of stream before a terminator
                self._mark_dead(sock, "connection closed by peer")
                raise ReadFailed(
                    "Could not read from the stream. "
                    "It was probably terminated by the host.",
                    IOFailure.PEER_CLOSED,
                )

            buffer.extend(chunk)

        end += len(LINE_TERMINATOR)
        raw = bytes(buffer[:end])
        del buffer[:end]

        logger.debug("Received %d bytes from %s:%s", len(raw), self.host, self.port)

        line = raw.decode(self._options.encoding, errors="replace")
        if trim:
            return line.rstrip("\r\n")
        return line

    def is_connected(self) -> bool:
        """
        Check if the connection is open.
        """
        return self.sock is not None

    def close(self) -> None:
        """
        Close the connection if it is open.
        """
        with self._lock:
            sock = self.sock
            self.sock = None
            self._buffer.clear()

        if sock is None:
            return

        self._release(sock)
        logger.debug("Closed connection to %s:%s", self.host, self.port)

    def _mark_dead(self, sock: socket.socket, why: str) -> None:
        """
        Drop ``sock`` after an I/O failure. A no-op if it was already dropped.
        """
        with self._lock:
            if self.sock is not sock:
                return
            self.sock = None
            self._buffer.clear()

        logger.warning(
            "Connection to %s:%s is dead: %s", self.host, self.port, why
        )
        self._release(sock)

    @staticmethod
    def _release(sock: socket.socket) -> None:
        # shutdown() wakes a reader blocked in recv() on another thread
        with contextlib.suppress(OSError):
            sock.shutdown(socket.SHUT_RDWR)
        with contextlib.suppress(OSError):
            sock.close()

    def __enter__(self) -> "TransportConnection":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        status = "open" if self.is_connected() else "closed"
        return (
            f"TransportConnection(host={self.host!r}, port={self.port}, "
            f"tls={self._options.ssl}, status={status})"
        )
