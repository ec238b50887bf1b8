"""src/maillink/transport/__init__.py

Transport layer module for maillink.

This module provides the line based connection over plain TCP or TLS and the
options it is configured with.
"""

from .connection import TransportConnection
from .options import TransportOptions

__all__ = ["TransportConnection", "TransportOptions"]
