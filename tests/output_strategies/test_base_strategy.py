"""Unit tests for the OutputStrategy base class."""

from unittest.mock import MagicMock

import pytest

from json2text.output_strategies.base_strategy import OutputStrategy
from json2text.tokens import Token, TokenKind


class RecordingStrategy(OutputStrategy):
    """Strategy writing the first letter of each token kind and recording format_end calls."""

    def __init__(self):
        self.end_calls = 0

    def format_token(self, token):
        return token.kind.value[0]

    def format_end(self):
        self.end_calls += 1
        return "|"


def test_cannot_instantiate_abstract_strategy():
    """OutputStrategy itself is abstract."""
    with pytest.raises(TypeError):
        OutputStrategy()


def test_render_calls_format_end_once():
    """Rendering formats every token and finishes with format_end."""
    strategy = RecordingStrategy()
    output = strategy.render([Token(TokenKind.START_OBJECT), Token(TokenKind.END_OBJECT)])
    assert output == "se|"
    assert strategy.end_calls == 1


def test_render_closes_iterator():
    """The token iterator is closed after rendering."""

    class ClosableTokens:
        def __init__(self):
            self.tokens = iter([Token(TokenKind.START_ARRAY), Token(TokenKind.END_ARRAY)])
            self.close = MagicMock()

        def __iter__(self):
            return self

        def __next__(self):
            return next(self.tokens)

    tokens = ClosableTokens()
    assert RecordingStrategy().render(tokens) == "se|"
    tokens.close.assert_called_once_with()


def test_render_closes_iterator_on_error():
    """A failing token source is closed and state is reset before the error propagates."""
    closed = []

    def tokens():
        try:
            yield Token(TokenKind.START_ARRAY)
            raise ValueError("bad document")
        finally:
            closed.append(True)

    strategy = RecordingStrategy()
    with pytest.raises(ValueError, match="bad document"):
        strategy.render(tokens())
    assert closed == [True]
    assert strategy.end_calls == 1


def test_render_accepts_plain_iterables():
    """Lists have no close method and are rendered all the same."""
    assert RecordingStrategy().render((Token(TokenKind.VALUE_NULL),)) == "v|"
