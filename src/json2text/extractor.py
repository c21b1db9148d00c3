"""Extraction of selected field values from JSON documents.

This module provides the JsonFieldExtractor façade, which compiles a path spec
once and then applies it to any number of documents, and a factory for building
extractors that share a tokenizer configuration.
"""

import logging
from typing import Iterator, Optional

from json2text.filter_tree.filter_tree import FilterTree, compile_filter
from json2text.output_strategies.json_strategy import JSONOutputStrategy
from json2text.output_strategies.text_strategy import TextOutputStrategy
from json2text.streaming_filter import filter_tokens
from json2text.tokens import Token, get_basic_parse, open_token_source
from json2text.types import DocumentType, PathSpecType

logger = logging.getLogger(__name__)

MIN_RESULT_LENGTH = 100
MAX_RESULT_LENGTH = 50_000

_JSON_START_CHARS = ("{", "[")
_JSON_START_BYTES = (ord("{"), ord("["))


def estimate_result_length(input_length: int) -> int:
    """Estimate the size of the text projection of a document.

    The projection is assumed to be about a quarter of the input, but never
    smaller than 100 or larger than 50,000 characters. Used to size output
    buffers so they rarely grow without being grossly oversized.

    Example:
        >>> estimate_result_length(10)
        100
        >>> estimate_result_length(4000)
        1000
        >>> estimate_result_length(10_000_000)
        50000
    """
    return max(MIN_RESULT_LENGTH, min(input_length // 4, MAX_RESULT_LENGTH))


def has_json_prefix(document: DocumentType) -> bool:
    """Check whether a document could be a JSON object or array.

    Only the first character is inspected: this is a cheap sniff, not
    validation. Malformed input that starts with ``{`` or ``[`` passes.

    Example:
        >>> has_json_prefix('{"a":1}')
        True
        >>> has_json_prefix(b"not json")
        False
        >>> has_json_prefix("")
        False
    """
    if len(document) == 0:
        return False
    if isinstance(document, str):
        return document[0] in _JSON_START_CHARS
    return memoryview(document)[0] in _JSON_START_BYTES


class JsonFieldExtractor:
    """Extracts the values under a set of inclusion paths from JSON documents.

    The path spec is compiled once into an immutable FilterTree; an extractor can
    therefore be reused for any number of documents and shared between threads.
    Each extraction call owns its own token source and output buffer.

    Every entry point returns None, without tokenizing anything, when the
    document does not start with ``{`` or ``[``. Tokenizer errors on malformed
    documents (``ijson.JSONError``) propagate unchanged.

    Attributes:
        filter_tree (FilterTree): The compiled filter.
        backend (Optional[str]): Name of the ijson backend used for tokenizing.

    Example:
        >>> extractor = JsonFieldExtractor.construct("a.b, a.x")
        >>> doc = '{"a":{"b":1,"c":true,"x":false},"d":"xyz"}'
        >>> extractor.extract_as_string(doc)
        '1 false '
        >>> extractor.extract_as_json(doc)
        '{"a":{"b":1,"x":false}}'
        >>> extractor.extract_as_string("not json") is None
        True
    """

    def __init__(self, filter_tree: FilterTree, backend: Optional[str] = None) -> None:
        """Initialize an extractor for an already compiled filter.

        Args:
            filter_tree: The compiled filter to apply.
            backend: Name of the ijson backend to tokenize with, or None for the
                fastest available one.

        Raises:
            ImportError: If the named backend is not available.
        """
        self.filter_tree = filter_tree
        self.backend = backend
        # Fail early on an unavailable backend rather than on the first document
        get_basic_parse(backend)

    @classmethod
    def construct(cls, paths: PathSpecType, backend: Optional[str] = None) -> "JsonFieldExtractor":
        """Compile ``paths`` (cached) and build an extractor for them.

        Args:
            paths: Comma-separated spec string or sequence of dotted paths.
            backend: Optional ijson backend name.
        """
        return cls(compile_filter(paths), backend=backend)

    @property
    def is_empty(self) -> bool:
        """True if the extractor can never include anything."""
        return self.filter_tree.is_empty

    def extract_filtered_tokens(self, document: DocumentType) -> Optional[Iterator[Token]]:
        """Return the filtered token stream of a document for structural replay.

        The returned iterator tokenizes lazily. Its token source is released when
        the iterator is exhausted, closed, or garbage collected.

        Args:
            document: The JSON document as str or a bytes-like object.

        Returns:
            An iterator over the included tokens, or None if the document does not
            look like JSON.
        """
        if not has_json_prefix(document):
            logger.debug("Skipping document without JSON content")
            return None
        return self._filtered_tokens(document)

    def _filtered_tokens(self, document: DocumentType) -> Iterator[Token]:
        with open_token_source(document, self.backend) as tokens:
            yield from filter_tokens(self.filter_tree, tokens)

    def extract_as_string(self, document: DocumentType) -> Optional[str]:
        """Extract the included scalars as space-separated text.

        Returns:
            The text projection (every value followed by one space), or None if
            the document does not look like JSON.

        Raises:
            ijson.JSONError: If the document is malformed.
        """
        tokens = self.extract_filtered_tokens(document)
        if tokens is None:
            return None
        return TextOutputStrategy().render(tokens)

    def extract_as_bytes(self, document: DocumentType) -> Optional[bytes]:
        """Extract the included scalars as UTF-8 encoded text.

        Returns:
            The UTF-8 encoding of extract_as_string, or None if the document does
            not look like JSON.

        Raises:
            ijson.JSONError: If the document is malformed.
        """
        text = self.extract_as_string(document)
        if text is None:
            return None
        return text.encode("utf-8")

    def extract_as_json(self, document: DocumentType) -> Optional[str]:
        """Extract the included part of a document as compact JSON.

        Returns:
            The filtered document (an empty string if nothing matched), or None if
            the document does not look like JSON.

        Raises:
            ijson.JSONError: If the document is malformed.
        """
        tokens = self.extract_filtered_tokens(document)
        if tokens is None:
            return None
        return JSONOutputStrategy().render(tokens)


class JsonFieldExtractorFactory:
    """Factory for constructing reusable JsonFieldExtractor instances.

    All extractors built by one factory tokenize with the same ijson backend.
    Compiled filters are cached, so building extractors for a spec seen before
    is cheap.

    Example:
        >>> factory = JsonFieldExtractorFactory()
        >>> factory.build_extractor("field").is_empty
        False
        >>> factory.build_extractor(" , ,\\t").is_empty
        True
    """

    def __init__(self, backend: Optional[str] = None) -> None:
        """Initialize the factory.

        Args:
            backend: Name of the ijson backend for the built extractors, or None
                for the fastest available one.

        Raises:
            ImportError: If the named backend is not available.
        """
        get_basic_parse(backend)
        self.backend = backend

    def build_extractor(self, paths: PathSpecType) -> JsonFieldExtractor:
        """Build an extractor for a comma-separated spec or a sequence of paths."""
        return JsonFieldExtractor.construct(paths, backend=self.backend)
