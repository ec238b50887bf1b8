"""src/maillink/__init__.py

Maillink - line based TCP/TLS transport for mail protocols.

Maillink opens a plain or TLS connection to a server and exchanges CRLF
terminated lines with it. It is the layer SMTP, POP3 and IMAP clients build
their command/response dialogues on.

Key Features:
    - Plain TCP or TLS, chosen per connection
    - One timeout bounding connect, every read and every write
    - Line assembly across partial reads
    - Dead connections detected and reported, never retried
    - Memory optimized with __slots__

Example:
    Talking to an SMTP server::

        from maillink import TransportConnection, TransportOptions

        options = TransportOptions(ssl=True, timeout=10.0)
        with TransportConnection("smtp.example.com", 465, options) as conn:
            greeting = conn.read_line(trim=True)
            conn.send_line("EHLO client.example.com")
            reply = conn.read_line(trim=True)
            conn.send_line("QUIT")
"""

from maillink.exceptions import (
    CapabilityUnavailable,
    ConfigurationError,
    ConnectionFailed,
    ErrorKind,
    IOFailure,
    MailLinkError,
    ReadFailed,
    WriteFailed,
)
from maillink.transport import TransportConnection, TransportOptions
from maillink.transport.tls import create_ssl_context, tls_available
from maillink.version import __version__

__all__ = [
    "TransportConnection",
    "TransportOptions",
    "create_ssl_context",
    "tls_available",
    "MailLinkError",
    "ErrorKind",
    "IOFailure",
    "CapabilityUnavailable",
    "ConfigurationError",
    "ConnectionFailed",
    "ReadFailed",
    "WriteFailed",
    "__version__",
]
