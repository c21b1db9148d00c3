"""Test configuration and fixtures for json2text."""

import pytest

from json2text.cli.signal_handler import signal_handler


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


@pytest.fixture
def a2q():
    """Convert single-quoted JSON (easier to write in tests) to real JSON."""
    return lambda text: text.replace("'", '"')


@pytest.fixture(autouse=True)
def reset_signal_state():
    """Make sure no test sees signals recorded by another one."""
    signal_handler.sigpipe_received.clear()
    signal_handler.sigint_received.clear()
    yield
    signal_handler.sigpipe_received.clear()
    signal_handler.sigint_received.clear()
