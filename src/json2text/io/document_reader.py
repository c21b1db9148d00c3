"""Reading JSON documents from files and standard input."""

import logging
import sys
from pathlib import Path
from typing import BinaryIO, Iterator, NamedTuple, Optional, Sequence, Union

from humanfriendly import InvalidSize, parse_size

from json2text.types import PathType

logger = logging.getLogger(__name__)

STDIN_SOURCE = "-"


def parse_document_size(size: Union[str, int]) -> int:
    """Parse a document size limit to bytes.

    Args:
        size: Size string like '10MB', '2.5K', '1 GiB', or a number of bytes.

    Returns:
        Size in bytes.

    Raises:
        ValueError: If size is negative or not a valid size format.

    Example:
        >>> parse_document_size("10MB")
        10000000
        >>> parse_document_size("1KiB")
        1024
        >>> parse_document_size(512)
        512
    """
    if isinstance(size, bool) or not isinstance(size, (str, int)):
        raise ValueError(f"Size must be string or int, got {type(size)}")
    if isinstance(size, int):
        if size < 0:
            raise ValueError("Size cannot be negative")
        return size
    try:
        return int(parse_size(size))
    except InvalidSize as e:
        raise ValueError(f"Invalid size format '{size}': {e}")


class Document(NamedTuple):
    """A single document read from a source.

    Attributes:
        source: Where the document came from: a file name, with ``:<line>``
            appended in JSON Lines mode.
        data: The raw document bytes, or None if the document exceeded the size limit.
        size: Size of the document in bytes.
        max_size: The limit the document exceeded, or None if it was read.
    """

    source: str
    data: Optional[bytes]
    size: int
    max_size: Optional[int] = None

    @property
    def oversized(self) -> bool:
        return self.data is None


class DocumentReader:
    """Iterates over the JSON documents held in a list of sources.

    Each source is a file path or ``-`` for standard input. By default a source
    holds one document; in JSON Lines mode every line is a document of its own
    (the line terminator is removed, everything else is kept as-is).

    Documents larger than ``max_size`` are not read into memory where it can be
    avoided; they are yielded with ``data`` set to None so the caller decides how
    to report them.

    Attributes:
        sources (list[str]): The sources, in reading order.
        json_lines (bool): Whether every line is a separate document.
        max_size (Optional[int]): The size limit in bytes, or None for no limit.

    Example:
        >>> import os, tempfile
        >>> with tempfile.NamedTemporaryFile("wb", suffix=".jsonl", delete=False) as f:
        ...     _ = f.write(b'{"a":1}\\n{"a":2}\\n')
        >>> [d.data for d in DocumentReader([f.name], json_lines=True)]
        [b'{"a":1}', b'{"a":2}']
        >>> os.unlink(f.name)
    """

    def __init__(
        self,
        sources: Sequence[PathType],
        *,
        json_lines: bool = False,
        max_size: Optional[Union[str, int]] = None,
    ) -> None:
        """Initialize the reader.

        Args:
            sources: File paths or ``-`` for standard input. An empty sequence
                reads standard input.
            json_lines: Treat every line as a separate document.
            max_size: Maximum document size, as bytes or a human-readable size.

        Raises:
            ValueError: If max_size is not a valid size.
        """
        self.sources = [str(source) for source in sources] or [STDIN_SOURCE]
        self.json_lines = json_lines
        self.max_size = None if max_size is None else parse_document_size(max_size)

    def total_size(self) -> Optional[int]:
        """Combined size in bytes of all file sources, or None if standard input is read."""
        if STDIN_SOURCE in self.sources:
            return None
        return sum(Path(source).stat().st_size for source in self.sources)

    def _too_large(self, size: int) -> bool:
        return self.max_size is not None and size > self.max_size

    def __iter__(self) -> Iterator[Document]:
        """Yield the documents of all sources in order.

        Raises:
            FileNotFoundError: If a source file does not exist.
            PermissionError: If a source file cannot be read.
        """
        for source in self.sources:
            if source == STDIN_SOURCE:
                yield from self._read_stream(sys.stdin.buffer, "<stdin>")
                continue
            path = Path(source)
            if not self.json_lines:
                size = path.stat().st_size
                if self._too_large(size):
                    yield Document(source, None, size, self.max_size)
                    continue
            with path.open("rb") as stream:
                yield from self._read_stream(stream, source)

    def _read_stream(self, stream: BinaryIO, source: str) -> Iterator[Document]:
        if not self.json_lines:
            data = stream.read()
            yield self._document(source, data)
            return

        for number, line in enumerate(stream, start=1):
            yield self._document(f"{source}:{number}", line.rstrip(b"\r\n"))

    def _document(self, source: str, data: bytes) -> Document:
        if self._too_large(len(data)):
            logger.debug("Document %s exceeds the size limit (%d bytes)", source, len(data))
            return Document(source, None, len(data), self.max_size)
        return Document(source, data, len(data))
