"""Shared fixtures for the maillink test suite."""

import _thread
import threading
from contextlib import contextmanager

import pytest


@pytest.fixture
def timeout_context():
    """Fixture failing the test if a blocking call outlives ``seconds``.

    Guards tests that read from or connect to real sockets, so a broken
    timeout shows up as a failure instead of a hung run.
    """

    @contextmanager
    def _timeout_context(seconds):
        timer = threading.Timer(seconds, _thread.interrupt_main)
        timer.start()
        try:
            yield
        except KeyboardInterrupt:
            pytest.fail(f"Blocking call did not return within {seconds} seconds")
        finally:
            timer.cancel()

    return _timeout_context
