"""src/maillink/transport/options.py

Transport connection options.
"""

import codecs
import math
import numbers
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

from maillink.exceptions import ConfigurationError
from maillink.transport import tls

DEFAULT_TIMEOUT = 15.0


@dataclass(frozen=True)
class TransportOptions:
    """
    Options for a transport connection.

    Attributes:
        ssl: Negotiate TLS during connect.
        timeout: Seconds allowed for the connect and for every read and write.
        ssl_context: Context used for TLS. ``None`` uses
            ``create_ssl_context()``.
        encoding: Codec used between text lines and bytes on the wire. It must
            be a text encoding that writes CRLF as the ASCII bytes CR LF.

    Unknown option names passed as keywords raise ``TypeError``, as for any
    Python call. Use ``from_mapping()`` or ``replace()`` to have them
    reported as ``ConfigurationError``.
    """

    ssl: bool = False
    timeout: float = DEFAULT_TIMEOUT
    ssl_context: Optional[Any] = None
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if not isinstance(self.ssl, bool):
            raise ConfigurationError(f"ssl must be a bool, got {self.ssl!r}")

        if (
            isinstance(self.timeout, bool)
            or not isinstance(self.timeout, numbers.Real)
            or not self.timeout > 0
            or not math.isfinite(self.timeout)
        ):
            raise ConfigurationError(
                f"timeout must be a positive number of seconds, got {self.timeout!r}"
            )

        if self.ssl_context is not None and not (
            tls.ssl is not None and isinstance(self.ssl_context, tls.ssl.SSLContext)
        ):
            raise ConfigurationError(
                f"ssl_context must be an ssl.SSLContext, got {self.ssl_context!r}"
            )

        if not isinstance(self.encoding, str):
            raise ConfigurationError(
                f"encoding must be a str, got {self.encoding!r}"
            )
        try:
            info = codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigurationError(f"Unknown encoding: {self.encoding}") from e

        # Lines are framed on the bytes b"\r\n"
        try:
            framed = getattr(info, "_is_text_encoding", True) and (
                "\r\n".encode(self.encoding) == b"\r\n"
            )
        except UnicodeError:
            framed = False
        if not framed:
            raise ConfigurationError(
                f"encoding must be an ASCII compatible text encoding, got {self.encoding}"
            )

    @classmethod
    def names(cls) -> frozenset:
        """Names of the recognised options."""
        return frozenset(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "TransportOptions":
        """Create options from a plain mapping, rejecting unknown keys."""
        cls._check_names(mapping)
        return cls(**mapping)

    def replace(self, **changes: Any) -> "TransportOptions":
        """Return a copy with ``changes`` applied."""
        self._check_names(changes)
        return replace(self, **changes)

    @classmethod
    def _check_names(cls, mapping: Mapping[str, Any]) -> None:
        unknown = sorted(set(mapping) - cls.names())
        if unknown:
            raise ConfigurationError(
                f"Unknown transport option(s): {', '.join(unknown)}"
            )
