"""JSON output strategy replaying filtered tokens as compact JSON.

This module provides a strategy for reconstructing the filtered part of a
document, producing output such as ``{"a":{"b":1}}`` with no whitespace.
"""

import json
from typing import List

from json2text.tokens import Token, TokenKind

from .base_strategy import OutputStrategy


class JSONOutputStrategy(OutputStrategy):
    """Output strategy that replays a token stream as compact JSON.

    The strategy tracks, for every open container, whether a member has already
    been written so that commas are placed correctly. Strings and field names are
    escaped with the json module; non-ASCII characters are written as-is. Numbers
    are written in their canonical textual form.

    Attributes:
        encoder: JSON encoder instance used for consistent string escaping.

    Example:
        >>> strategy = JSONOutputStrategy()
        >>> strategy.render([
        ...     Token(TokenKind.START_OBJECT),
        ...     Token(TokenKind.FIELD_NAME, "arr"),
        ...     Token(TokenKind.START_ARRAY),
        ...     Token(TokenKind.VALUE_STRING, "abc"),
        ...     Token(TokenKind.VALUE_NULL),
        ...     Token(TokenKind.END_ARRAY),
        ...     Token(TokenKind.END_OBJECT),
        ... ])
        '{"arr":["abc",null]}'
    """

    def __init__(self) -> None:
        """Initialize the JSON output strategy with empty per-document state."""
        self.encoder = json.JSONEncoder(ensure_ascii=False)
        self._has_members: List[bool] = []
        self._after_field_name = False

    def _separator(self) -> str:
        """Return the comma needed before the next member, and record the member."""
        if self._after_field_name:
            self._after_field_name = False
            return ""
        if not self._has_members:
            return ""
        separator = "," if self._has_members[-1] else ""
        self._has_members[-1] = True
        return separator

    def format_token(self, token: Token) -> str:
        kind = token.kind
        if kind is TokenKind.FIELD_NAME:
            separator = self._separator()
            self._after_field_name = True
            return f"{separator}{self.encoder.encode(str(token.value))}:"
        if kind is TokenKind.START_OBJECT or kind is TokenKind.START_ARRAY:
            separator = self._separator()
            self._has_members.append(False)
            return separator + ("{" if kind is TokenKind.START_OBJECT else "[")
        if kind is TokenKind.END_OBJECT or kind is TokenKind.END_ARRAY:
            self._has_members.pop()
            return "}" if kind is TokenKind.END_OBJECT else "]"
        if kind is TokenKind.VALUE_STRING:
            return self._separator() + self.encoder.encode(token.value)
        return self._separator() + str(token.text)

    def format_end(self) -> str:
        self._has_members = []
        self._after_field_name = False
        return ""
