"""Text output strategy producing a space-separated projection of scalar values."""

from json2text.tokens import Token, TokenKind

from .base_strategy import OutputStrategy

# Scalar kinds that carry searchable text; null does not
SEARCHABLE_KINDS = frozenset(kind for kind in TokenKind if kind.is_scalar and kind is not TokenKind.VALUE_NULL)


class TextOutputStrategy(OutputStrategy):
    """Output strategy that concatenates the textual form of included scalars.

    Every string, number and boolean is written followed by a single space, the
    last one included. Strings are written unquoted, numbers in their canonical
    textual form and booleans as ``true``/``false``. Structural tokens, field
    names and nulls produce no output.

    Example:
        >>> from decimal import Decimal
        >>> strategy = TextOutputStrategy()
        >>> strategy.render([
        ...     Token(TokenKind.START_OBJECT),
        ...     Token(TokenKind.FIELD_NAME, "price"),
        ...     Token(TokenKind.VALUE_NUMBER_FLOAT, Decimal("0.89")),
        ...     Token(TokenKind.FIELD_NAME, "name"),
        ...     Token(TokenKind.VALUE_STRING, "pear"),
        ...     Token(TokenKind.END_OBJECT),
        ... ])
        '0.89 pear '
    """

    def format_token(self, token: Token) -> str:
        if token.kind in SEARCHABLE_KINDS:
            return f"{token.text} "
        return ""

    def format_end(self) -> str:
        return ""
