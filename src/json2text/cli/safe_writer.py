"""Safe output writing utilities for the json2text CLI.

This module provides a writing interface that stops at the first sign of a
closed pipe or an interrupt, and can batch small writes into larger ones.
"""

import errno
import os
import types
from pathlib import Path
from typing import List, Optional, Type, Union

from json2text.cli.signal_handler import signal_handler


class SafeWriter:
    """Signal-aware writer for a file path or an already open file descriptor.

    Output lines are small compared to a system call, so the writer can collect
    text until ``buffer_size`` characters are pending and write them in one go.
    Without a buffer size every write goes straight to the descriptor.

    Attributes:
        file: Either a file path or file descriptor for output.
        fd: The actual file descriptor being written to.
        buffer_size (Optional[int]): Number of pending characters that triggers a
            flush, or None for unbuffered writes.
    """

    def __init__(self, file: Union[int, Path], buffer_size: Optional[int] = None):
        """Initialize the safe writer.

        Args:
            file: Either a file descriptor (int) or Path object for writing output.
            buffer_size: Optional flush threshold in characters.

        Raises:
            TypeError: If file is neither a descriptor nor a path.
            ValueError: If buffer_size is not positive.
        """
        if buffer_size is not None and buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")

        self.file = file
        self.buffer_size = buffer_size
        self._pending: List[str] = []
        self._pending_size = 0
        self._closed = False

        if isinstance(file, int):
            self.fd = file
            self._file_obj = None
        elif isinstance(file, (str, os.PathLike)):
            self._file_obj = Path(file).open("wb")
            self.fd = self._file_obj.fileno()
        else:
            raise TypeError(f"Expected int, str, or PathLike, got {type(file).__name__}")

    def write(self, data: str) -> None:
        """Write data, or queue it when buffering.

        Args:
            data: String data to write.

        Raises:
            BrokenPipeError: If SIGPIPE or SIGINT was received or the pipe is broken.
            OSError: If an I/O error occurs during writing.
            ValueError: If attempting to write to a closed writer.
        """
        if self._closed:
            raise ValueError("Cannot write to closed SafeWriter")

        if signal_handler.interrupted:
            raise BrokenPipeError()

        if self.buffer_size is None:
            self._write_through(data)
            return

        self._pending.append(data)
        self._pending_size += len(data)
        if self._pending_size >= self.buffer_size:
            self.flush()

    def flush(self) -> None:
        """Write out all queued data.

        Raises:
            BrokenPipeError: If the pipe is broken.
            OSError: If an I/O error occurs during writing.
        """
        if not self._pending:
            return
        data = "".join(self._pending)
        self._pending = []
        self._pending_size = 0
        self._write_through(data)

    def _write_through(self, data: str) -> None:
        encoded = memoryview(data.encode("utf-8"))
        try:
            while encoded:
                written = os.write(self.fd, encoded)
                encoded = encoded[written:]
        except OSError as e:
            if e.errno == errno.EPIPE:
                raise BrokenPipeError()
            raise

    def close(self) -> None:
        """Flush queued data and close the file if it was opened by this class.

        The writer is marked as closed even if flushing or closing fails with a
        broken pipe. Queued data is dropped once a signal has been received.
        """
        if self._closed:
            return

        try:
            if not signal_handler.interrupted:
                self.flush()
        except BrokenPipeError:
            pass
        finally:
            self._pending = []
            self._pending_size = 0
            self._closed = True
            if self._file_obj is not None:
                try:
                    self._file_obj.close()
                except OSError as e:
                    if e.errno != errno.EPIPE:
                        raise

    def __enter__(self) -> "SafeWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        """Close the writer, keeping an exception raised in the with block as the primary one."""
        try:
            self.close()
        except OSError:
            if exc_type is None:
                raise
