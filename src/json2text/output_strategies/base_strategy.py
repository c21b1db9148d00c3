"""Output strategy base class defining the interface for rendering filtered tokens.

This module provides the abstract base class that defines how a filtered token
stream is turned into output text. Concrete strategies decide which tokens
contribute to the output and how.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Iterator, List

from json2text.tokens import Token


class OutputStrategy(ABC):
    """Abstract base class defining the interface for token rendering strategies.

    This class implements the Strategy pattern for rendering the filtered tokens of
    a document in different formats (e.g., space-separated text, compact JSON).

    The rendering of one document is divided into two phases:
    1. Tokens - each token is formatted in document order
    2. End - closes the document and resets any per-document state

    A strategy instance keeps state between calls, so it must not be shared by
    renderings running at the same time.

    Example:
        >>> class KindStrategy(OutputStrategy):
        ...     def format_token(self, token: Token) -> str:
        ...         return token.kind.value[0]
        ...
        ...     def format_end(self) -> str:
        ...         return "."
        >>> from json2text.tokens import TokenKind
        >>> KindStrategy().render([Token(TokenKind.START_ARRAY), Token(TokenKind.END_ARRAY)])
        'se.'
    """

    @abstractmethod
    def format_token(self, token: Token) -> str:
        """Format a single filtered token.

        Args:
            token: The next token of the filtered stream.

        Returns:
            The output text for this token; may be empty.
        """
        pass

    @abstractmethod
    def format_end(self) -> str:
        """Finish the current document.

        Called once after the last token of a document. Implementations reset
        their per-document state so that the instance can render another document.

        Returns:
            Any closing output text; may be empty.
        """
        pass

    def render(self, tokens: Iterable[Token]) -> str:
        """Render a complete filtered token stream into a single string.

        The token iterator is closed when rendering ends, including when the
        underlying tokenizer raises.

        Args:
            tokens: The filtered tokens of one document.

        Returns:
            The rendered document.
        """
        parts: List[str] = []
        iterator: Iterator[Token] = iter(tokens)
        try:
            for token in iterator:
                parts.append(self.format_token(token))
        finally:
            close = getattr(iterator, "close", None)
            if close is not None:
                close()
            end = self.format_end()
        parts.append(end)
        return "".join(parts)
