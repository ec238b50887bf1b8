"""tests/unit/test_exceptions.py"""

import pytest

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


def test_exception_hierarchy():
    """Verify every maillink error derives from MailLinkError."""
    for exception_class in (
        CapabilityUnavailable,
        ConfigurationError,
        ConnectionFailed,
        ReadFailed,
        WriteFailed,
    ):
        assert issubclass(exception_class, MailLinkError)

    assert not issubclass(ReadFailed, WriteFailed)
    assert not issubclass(WriteFailed, ReadFailed)


@pytest.mark.parametrize(
    "error, kind",
    [
        (CapabilityUnavailable("no ssl"), ErrorKind.CAPABILITY_UNAVAILABLE),
        (ConfigurationError("bad option"), ErrorKind.CONFIGURATION),
        (ConnectionFailed("refused", "mail.example.com", 25), ErrorKind.CONNECTION_FAILED),
        (ReadFailed("closed"), ErrorKind.READ_FAILED),
        (WriteFailed("closed"), ErrorKind.WRITE_FAILED),
    ],
)
def test_error_kind_tags(error, kind):
    """Verify each error carries its kind tag."""
    assert error.kind is kind


def test_error_kinds_are_distinct():
    """Verify no two error classes share a kind."""
    kinds = [
        cls.kind
        for cls in (
            CapabilityUnavailable,
            ConfigurationError,
            ConnectionFailed,
            ReadFailed,
            WriteFailed,
        )
    ]
    assert sorted(kinds) == sorted(ErrorKind)


def test_connection_failed_carries_address():
    """Verify ConnectionFailed records the target."""
    error = ConnectionFailed("Failed to connect", "imap.example.com", 993)

    assert error.host == "imap.example.com"
    assert error.port == 993
    assert error.address == "imap.example.com:993"
    assert "Failed to connect" in str(error)


def test_io_errors_default_reason():
    """Verify read and write failures default to a generic I/O reason."""
    assert ReadFailed("boom").reason is IOFailure.IO_ERROR
    assert WriteFailed("boom").reason is IOFailure.IO_ERROR


def test_io_errors_custom_reason():
    """Verify the failure reason is kept."""
    assert ReadFailed("eof", IOFailure.PEER_CLOSED).reason is IOFailure.PEER_CLOSED
    assert WriteFailed("slow", IOFailure.TIMEOUT).reason is IOFailure.TIMEOUT


@pytest.mark.parametrize(
    "exception_class",
    [MailLinkError, CapabilityUnavailable, ConfigurationError, ReadFailed, WriteFailed],
)
def test_exceptions_accept_message(exception_class):
    """Verify that exceptions can be raised with a message."""
    message = f"Testing {exception_class.__name__}"
    with pytest.raises(exception_class) as exc_info:
        raise exception_class(message)
    assert message in str(exc_info.value)
