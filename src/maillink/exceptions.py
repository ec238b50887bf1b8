"""src/maillink/exceptions.py

Maillink exceptions.

Every error raised by the library is a ``MailLinkError`` carrying a ``kind``
tag, so callers can either catch a concrete class or branch on
``error.kind``.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Closed set of error kinds raised by maillink."""

    CAPABILITY_UNAVAILABLE = "capability_unavailable"
    CONNECTION_FAILED = "connection_failed"
    WRITE_FAILED = "write_failed"
    READ_FAILED = "read_failed"
    CONFIGURATION = "configuration"


class IOFailure(str, Enum):
    """Why a read or write on an open connection did not complete."""

    NOT_CONNECTED = "not_connected"
    PEER_CLOSED = "peer_closed"
    TIMEOUT = "timeout"
    IO_ERROR = "io_error"
    ENCODING = "encoding"


class MailLinkError(Exception):
    """Base exception for all maillink errors."""

    kind: ErrorKind


class CapabilityUnavailable(MailLinkError):
    """TLS was requested but the interpreter has no ``ssl`` support."""

    kind = ErrorKind.CAPABILITY_UNAVAILABLE


class ConfigurationError(MailLinkError):
    """Unknown option name or invalid option value."""

    kind = ErrorKind.CONFIGURATION


class ConnectionFailed(MailLinkError):
    """
    The connection to the server could not be established.

    Covers DNS failures, refused connections, connect timeouts and TLS
    handshake or verification errors.

    Attributes:
        host: Server the connection was made to.
        port: Port the connection was made to.
    """

    kind = ErrorKind.CONNECTION_FAILED

    def __init__(self, message: str, host: str, port: int):
        super().__init__(message)
        self.host = host
        self.port = port

    @property
    def address(self) -> str:
        """``host:port`` of the failed target."""
        return f"{self.host}:{self.port}"


class _LineIOError(MailLinkError):
    """Common base for read and write failures."""

    default_reason = IOFailure.IO_ERROR

    def __init__(self, message: str, reason: Optional[IOFailure] = None):
        super().__init__(message)
        self.reason = reason if reason is not None else self.default_reason


class WriteFailed(_LineIOError):
    """
    A line could not be written to the server.

    Attributes:
        reason: ``IOFailure`` describing the cause.
    """

    kind = ErrorKind.WRITE_FAILED


class ReadFailed(_LineIOError):
    """
    A complete line could not be read from the server.

    Attributes:
        reason: ``IOFailure`` describing the cause.
    """

    kind = ErrorKind.READ_FAILED
