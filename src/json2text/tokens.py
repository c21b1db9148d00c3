"""Token-level view of JSON documents.

This module adapts the event stream produced by the ijson library to the token
kinds consumed by the streaming filter. Documents are never materialized as a
tree; tokens are produced lazily, one at a time.
"""

import io
from contextlib import contextmanager
from decimal import Decimal
from enum import Enum
from typing import Any, BinaryIO, Callable, Dict, Generator, Iterator, NamedTuple, Optional

import ijson


class TokenKind(Enum):
    """Enumeration of the token kinds of a JSON document."""

    START_OBJECT = "start_object"
    END_OBJECT = "end_object"
    START_ARRAY = "start_array"
    END_ARRAY = "end_array"
    FIELD_NAME = "field_name"
    VALUE_STRING = "value_string"
    VALUE_NUMBER_INT = "value_number_int"
    VALUE_NUMBER_FLOAT = "value_number_float"
    VALUE_TRUE = "value_true"
    VALUE_FALSE = "value_false"
    VALUE_NULL = "value_null"

    @property
    def is_start(self) -> bool:
        return self in (TokenKind.START_OBJECT, TokenKind.START_ARRAY)

    @property
    def is_end(self) -> bool:
        return self in (TokenKind.END_OBJECT, TokenKind.END_ARRAY)

    @property
    def is_scalar(self) -> bool:
        return not (self.is_start or self.is_end or self is TokenKind.FIELD_NAME)


class Token(NamedTuple):
    """A single token of a JSON document.

    Attributes:
        kind: The token kind.
        value: The field name for FIELD_NAME, the parsed value for scalars
            (str, int, Decimal or float, bool, None), None for structural tokens.

    Example:
        >>> Token(TokenKind.VALUE_TRUE, True).text
        'true'
        >>> Token(TokenKind.VALUE_NUMBER_FLOAT, Decimal("0.89")).text
        '0.89'
        >>> Token(TokenKind.START_OBJECT).text is None
        True
    """

    kind: TokenKind
    value: Any = None

    @property
    def text(self) -> Optional[str]:
        """Canonical textual form of a scalar or field name; None for structural tokens.

        Numbers are written as ``str()`` of the value ijson parsed, not as their
        source text: integers lose a sign on zero (``-0`` becomes ``0``) and
        exponents take Decimal's form (``1.0e5`` becomes ``1.0E+5``, ``1E3``
        becomes ``1E+3``). Trailing zeros of fractions are kept (``0.10``).
        """
        kind = self.kind
        if kind in _VERBATIM_KINDS:
            return str(self.value)
        if kind is TokenKind.VALUE_TRUE:
            return "true"
        if kind is TokenKind.VALUE_FALSE:
            return "false"
        if kind is TokenKind.VALUE_NULL:
            return "null"
        return None


_VERBATIM_KINDS = frozenset(
    (TokenKind.FIELD_NAME, TokenKind.VALUE_STRING, TokenKind.VALUE_NUMBER_INT, TokenKind.VALUE_NUMBER_FLOAT)
)

_STRUCTURAL_EVENTS: Dict[str, TokenKind] = {
    "start_map": TokenKind.START_OBJECT,
    "end_map": TokenKind.END_OBJECT,
    "start_array": TokenKind.START_ARRAY,
    "end_array": TokenKind.END_ARRAY,
}


def _to_token(event: str, value: Any) -> Token:
    """Convert one ijson ``basic_parse`` event into a Token."""
    if event in _STRUCTURAL_EVENTS:
        return Token(_STRUCTURAL_EVENTS[event])
    if event == "map_key":
        return Token(TokenKind.FIELD_NAME, value)
    if event == "string":
        return Token(TokenKind.VALUE_STRING, value)
    if event == "number":
        if isinstance(value, int):
            return Token(TokenKind.VALUE_NUMBER_INT, value)
        return Token(TokenKind.VALUE_NUMBER_FLOAT, value)
    if event == "boolean":
        return Token(TokenKind.VALUE_TRUE if value else TokenKind.VALUE_FALSE, value)
    if event == "null":
        return Token(TokenKind.VALUE_NULL)
    raise ValueError(f"Unknown JSON event: {event!r}")


def get_basic_parse(backend: Optional[str] = None) -> Callable[..., Iterator[Any]]:
    """Return the ``basic_parse`` function of an ijson backend.

    Args:
        backend: Name of the ijson backend (e.g. "python", "yajl2_c"), or None
            for the fastest one available.

    Raises:
        ImportError: If the named backend is not available.
    """
    if backend is None:
        return ijson.basic_parse  # type: ignore[no-any-return]
    return ijson.get_backend(backend).basic_parse  # type: ignore[no-any-return]


def iter_tokens(stream: BinaryIO, backend: Optional[str] = None) -> Generator[Token, None, None]:
    """Lazily tokenize a binary stream holding a single JSON document.

    Args:
        stream: Binary file-like object positioned at the start of the document.
        backend: Optional ijson backend name.

    Yields:
        Tokens in document order.

    Raises:
        ijson.JSONError: If the document is malformed or truncated.

    Example:
        >>> [t.kind.value for t in iter_tokens(io.BytesIO(b'{"a":[1]}'))]
        ['start_object', 'field_name', 'start_array', 'value_number_int', 'end_array', 'end_object']
    """
    basic_parse = get_basic_parse(backend)
    for event, value in basic_parse(stream):
        yield _to_token(event, value)


def as_bytes(document: Any) -> bytes:
    """Return the UTF-8 bytes of an in-memory document."""
    if isinstance(document, str):
        return document.encode("utf-8")
    return bytes(document)


@contextmanager
def open_token_source(document: Any, backend: Optional[str] = None) -> Iterator[Iterator[Token]]:
    """Open a scoped token source over an in-memory document.

    The underlying stream and token iterator are released when the block exits,
    whether normally or through an exception.

    Args:
        document: The document as str or a bytes-like object.
        backend: Optional ijson backend name.

    Yields:
        A lazy iterator over the document's tokens.

    Example:
        >>> with open_token_source("[true]") as tokens:
        ...     texts = [t.text for t in tokens]
        >>> texts
        [None, 'true', None]
    """
    stream = io.BytesIO(as_bytes(document))
    tokens = iter_tokens(stream, backend)
    try:
        yield tokens
    finally:
        tokens.close()
        stream.close()
