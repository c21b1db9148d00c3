"""Batch projection of JSON documents to text with streaming support.

This module provides classes for applying one path spec to a sequence of JSON
documents, writing one output line per document, and keeping counts of what was
processed. It includes both streaming and complete processing implementations.
"""

import logging
from typing import Iterable, Iterator, Optional, Union

import ijson

from json2text.exceptions import DocumentTooLargeError, TokenCountingError
from json2text.extractor import JsonFieldExtractor
from json2text.filter_tree.filter_tree import FilterTree
from json2text.io.document_reader import Document
from json2text.output_counter import OutputCounter
from json2text.types import FailureAction, PathSpecType

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "json")


class StreamingJson2Text:
    """Streaming processor projecting a sequence of JSON documents.

    Every document produces exactly one output line, so output lines stay aligned
    with input documents: documents that do not look like JSON, that exceed the
    size limit, or that fail to decode (unless the failure is raised) produce an
    empty line.

    Streaming properties:
    - Each streaming operation (filter tree, documents) can only be performed once
    - Counts are updated incrementally as documents are processed
    - Counts reflect only processed documents until streaming_complete is True

    Attributes:
        output_format (str): Either "text" or "json".
        failure_action (FailureAction): What to do with documents that fail to decode.
        streaming_complete (bool): Whether all documents have been processed.

    Example:
        >>> from json2text.io.document_reader import Document
        >>> processor = StreamingJson2Text("name")
        >>> docs = [Document("a", b'{"name":"Bob"}', 14), Document("b", b"plain", 5)]
        >>> list(processor.stream_documents(docs))
        ['Bob \\n', '\\n']
        >>> processor.extracted_count, processor.non_json_count
        (1, 1)

    Raises:
        ValueError: If the output format or failure action is unsupported.
        TokenCountingUnavailableError: If a tokenizer model is given but tiktoken is missing.
    """

    def __init__(
        self,
        paths: PathSpecType,
        *,
        output_format: str = "text",
        tokenizer_model: Optional[str] = None,
        failure_action: Union[str, FailureAction] = FailureAction.RAISE,
        backend: Optional[str] = None,
    ):
        """Initialize streaming processing.

        Args:
            paths: Comma-separated spec string or sequence of dotted paths.
            output_format: Format for output ('text' or 'json').
            tokenizer_model: Model to use for token counting. If None, token counting is disabled.
            failure_action: How to handle documents that fail to decode or exceed the
                size limit. Can be "ignore", "warn" or "raise", or a FailureAction value.
                Defaults to "raise".
            backend: Name of the ijson backend, or None for the fastest available one.

        Raises:
            ValueError: If the output format or failure action is unsupported.
            ImportError: If the named ijson backend is not available.
        """
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unsupported output format: {output_format}")

        if isinstance(failure_action, str):
            try:
                failure_action = FailureAction(failure_action.lower())
            except ValueError:
                raise ValueError(
                    f"Invalid failure_action: {failure_action}. Must be one of: 'ignore', 'warn', 'raise'"
                )

        self.output_format = output_format
        self.failure_action = failure_action

        self._extractor = JsonFieldExtractor.construct(paths, backend=backend)
        self._counter = OutputCounter(model=tokenizer_model)

        self._document_count = 0
        self._extracted_count = 0
        self._non_json_count = 0
        self._failed_count = 0
        self._oversized_count = 0
        self._input_bytes = 0

        self._documents_complete = False

    @property
    def filter_tree(self) -> FilterTree:
        """The compiled filter applied to every document."""
        return self._extractor.filter_tree

    @property
    def document_count(self) -> int:
        """Number of documents processed so far, whatever their outcome."""
        return self._document_count

    @property
    def extracted_count(self) -> int:
        """Number of documents that were projected successfully."""
        return self._extracted_count

    @property
    def non_json_count(self) -> int:
        """Number of documents skipped because they do not start with ``{`` or ``[``."""
        return self._non_json_count

    @property
    def failed_count(self) -> int:
        """Number of documents that failed to decode."""
        return self._failed_count

    @property
    def oversized_count(self) -> int:
        """Number of documents skipped because they exceed the size limit."""
        return self._oversized_count

    @property
    def input_bytes(self) -> int:
        """Combined size in bytes of all documents processed so far."""
        return self._input_bytes

    @property
    def character_count(self) -> int:
        """Number of characters written so far, line terminators included."""
        return self._counter.total_characters

    @property
    def token_count(self) -> Optional[int]:
        """Number of model tokens written so far, or None if token counting is disabled."""
        return self._counter.total_tokens

    @property
    def streaming_complete(self) -> bool:
        """Whether all documents have been processed and the counts are final."""
        return self._documents_complete

    def _count_and_yield(self, text: str) -> str:
        try:
            self._counter.count(text)
        except TokenCountingError as e:
            # Counting is informational; keep producing output
            logger.warning("%s", e)
        return text

    def stream_filter_tree(self) -> Iterator[str]:
        """Stream the rendering of the compiled filter line by line.

        Each yielded line includes a trailing newline. The filter lines are not
        counted as output.

        Example:
            >>> processor = StreamingJson2Text("a.b, c")
            >>> print("".join(processor.stream_filter_tree()), end="")
            $
            ├── a
            │   └── b *
            └── c *
        """
        for line in self.filter_tree.stream_tree_representation():
            yield line + "\n"

    def stream_documents(self, documents: Iterable[Document]) -> Iterator[str]:
        """Stream one output line per document.

        Args:
            documents: The documents to project, typically from a DocumentReader.

        Returns:
            Iterator yielding one line, including its trailing newline, per document.

        Raises:
            RuntimeError: If documents have already been streamed.
            DocumentTooLargeError: If a document exceeds the size limit and
                failure_action is RAISE.
            ijson.JSONError: If a document is malformed and failure_action is RAISE.
        """
        if self._documents_complete:
            raise RuntimeError("Documents have already been streamed")

        for document in documents:
            projection = self._process(document)
            yield self._count_and_yield(projection + "\n")

        self._documents_complete = True

    def _process(self, document: Document) -> str:
        self._document_count += 1
        self._input_bytes += document.size

        if document.oversized:
            self._oversized_count += 1
            self._handle_failure(
                document, DocumentTooLargeError(document.source, document.size, document.max_size or 0)
            )
            return ""

        try:
            if self.output_format == "json":
                projection = self._extractor.extract_as_json(document.data or b"")
            else:
                projection = self._extractor.extract_as_string(document.data or b"")
        except (ijson.JSONError, UnicodeDecodeError) as e:
            self._failed_count += 1
            self._handle_failure(document, e)
            return ""

        if projection is None:
            self._non_json_count += 1
            logger.debug("Document %s does not look like JSON", document.source)
            return ""

        self._extracted_count += 1
        return projection

    def _handle_failure(self, document: Document, error: Exception) -> None:
        if self.failure_action is FailureAction.RAISE:
            raise error
        if self.failure_action is FailureAction.WARN:
            logger.warning("Skipping %s: %s", document.source, error)
        else:
            logger.debug("Skipping %s: %s", document.source, error)


class Json2Text(StreamingJson2Text):
    """Complete processor that projects all documents immediately.

    This class extends StreamingJson2Text but processes all documents during
    initialization, storing the results for immediate access. It needs enough
    memory to hold the complete output; use StreamingJson2Text for large inputs.

    Example:
        >>> from json2text.io.document_reader import Document
        >>> docs = [Document("-", b'{"a":{"b":1,"c":2}}', 19)]
        >>> Json2Text("a.b", docs, output_format="json").output_string
        '{"a":{"b":1}}\\n'
    """

    def __init__(
        self,
        paths: PathSpecType,
        documents: Iterable[Document],
        *,
        output_format: str = "text",
        tokenizer_model: Optional[str] = None,
        failure_action: Union[str, FailureAction] = FailureAction.RAISE,
        backend: Optional[str] = None,
    ):
        """Initialize and immediately process all documents.

        Args:
            paths: Comma-separated spec string or sequence of dotted paths.
            documents: The documents to project.
            output_format: Format for output ('text' or 'json').
            tokenizer_model: Model to use for token counting, or None to disable token counting.
            failure_action: How to handle documents that fail to decode or exceed the size limit.
            backend: Name of the ijson backend, or None for the fastest available one.

        Raises:
            ValueError: If the output format or failure action is unsupported.
            DocumentTooLargeError: If a document exceeds the size limit and
                failure_action is RAISE.
            ijson.JSONError: If a document is malformed and failure_action is RAISE.
        """
        super().__init__(
            paths,
            output_format=output_format,
            tokenizer_model=tokenizer_model,
            failure_action=failure_action,
            backend=backend,
        )
        self._output_string = "".join(self.stream_documents(documents))

    @property
    def output_string(self) -> str:
        """Complete output, one line per document."""
        return self._output_string
