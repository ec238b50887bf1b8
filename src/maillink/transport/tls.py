"""src/maillink/transport/tls.py

TLS support for maillink.
"""

try:
    import ssl
except ImportError:  # pragma: no cover - interpreter built without OpenSSL
    ssl = None  # type: ignore[assignment]


def tls_available() -> bool:
    """Return True if the interpreter can negotiate TLS."""
    return ssl is not None


def create_ssl_context() -> "ssl.SSLContext":
    """Creates a default SSL context with TLS 1.2 minimum."""
    context = ssl.create_default_context()
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    return context
