"""Signal handling utilities for the json2text CLI.

SIGPIPE (output pipe closed, e.g. when piping to ``head``) and SIGINT (Ctrl+C)
are recorded rather than acted on immediately, so that the CLI can stop
writing, release its resources and exit with the conventional status code.
"""

import atexit
import os
import signal
import sys
from threading import Event
from types import FrameType
from typing import Optional


class SignalHandler:
    """Records SIGPIPE and SIGINT so that processing can stop cleanly.

    Attributes:
        sigpipe_received: Event that is set when a SIGPIPE signal is received.
        sigint_received: Event that is set when a SIGINT signal is received.
        original_sigpipe_handler: Original SIGPIPE signal handler.
        original_sigint_handler: Original SIGINT signal handler.
    """

    def __init__(self) -> None:
        self.sigpipe_received = Event()
        self.sigint_received = Event()
        self.original_sigpipe_handler = signal.getsignal(signal.SIGPIPE)
        self.original_sigint_handler = signal.getsignal(signal.SIGINT)

    @property
    def interrupted(self) -> bool:
        """True once either signal has been received."""
        return self.sigpipe_received.is_set() or self.sigint_received.is_set()

    def exit_code(self) -> Optional[int]:
        """The exit status for the received signal, or None if none was received.

        A broken pipe takes precedence over an interrupt.
        """
        if self.sigpipe_received.is_set():
            return 141
        if self.sigint_received.is_set():
            return 130
        return None

    def handle_sigpipe(self, signum: int, frame: Optional[FrameType]) -> None:
        self.sigpipe_received.set()
        signal.signal(signal.SIGPIPE, self.original_sigpipe_handler)

    def handle_sigint(self, signum: int, frame: Optional[FrameType]) -> None:
        # A second Ctrl+C falls through to the original handler
        self.sigint_received.set()
        signal.signal(signal.SIGINT, self.original_sigint_handler)


signal_handler = SignalHandler()


def setup_signal_handling() -> None:
    """Install the SIGPIPE and SIGINT handlers."""
    signal.signal(signal.SIGPIPE, signal_handler.handle_sigpipe)
    signal.signal(signal.SIGINT, signal_handler.handle_sigint)


def cleanup() -> None:
    """Silence stdout at exit after SIGPIPE or SIGINT.

    Redirects stdout to the null device so the interpreter does not report
    errors while flushing a closed pipe during shutdown.
    """
    if signal_handler.interrupted:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())


atexit.register(cleanup)
