"""Counter for characters and language-model tokens in extracted text.

Projections produced by json2text are typically fed to search indexes or to
language models. This module keeps running totals of the produced text, and,
when a model is named and the optional tiktoken library is installed, of the
number of model tokens it encodes to.
"""

import importlib.util
from collections import namedtuple
from typing import Any, Optional

from json2text.exceptions import TokenCountingError, TokenCountingUnavailableError

CountResult = namedtuple("CountResult", ["characters", "tokens"])


def tiktoken_available() -> bool:
    """Check if the tiktoken library is available."""
    return importlib.util.find_spec("tiktoken") is not None


class OutputCounter:
    """Running totals of characters and (optionally) model tokens in output text.

    Attributes:
        model (Optional[str]): Name of the model whose tokenizer to use, or None if
            token counting is disabled.
        encoder (Optional[Any]): The tiktoken encoding, if token counting is enabled.

    Example:
        >>> counter = OutputCounter()
        >>> counter.count("1 false ")
        CountResult(characters=8, tokens=None)
        >>> counter.total_characters
        8
        >>> print(counter.total_tokens)
        None

    Raises:
        TokenCountingUnavailableError: If a model is given but tiktoken is not installed.
        ValueError: If tiktoken does not know the given model.
    """

    def __init__(self, model: Optional[str] = None) -> None:
        self.model = model
        self.encoder: Optional[Any] = None
        if model is not None:
            self.encoder = self._get_encoder(model)
        self.total_characters = 0
        self.total_tokens: Optional[int] = None if self.encoder is None else 0

    @staticmethod
    def _get_encoder(model: str) -> Any:
        if not tiktoken_available():
            raise TokenCountingUnavailableError()

        # Imported here so that tiktoken stays optional
        import tiktoken

        try:
            return tiktoken.encoding_for_model(model)
        except KeyError:
            raise ValueError(
                f"Could not load tokenizer for model '{model}'. Consider using a well-supported "
                "model like 'gpt-4' (cl100k_base encoding) for an approximate count."
            )

    def count(self, text: str) -> CountResult:
        """Count ``text`` and add it to the running totals.

        Raises:
            TokenCountingError: If token counting is enabled but the encoder fails.
        """
        characters = len(text)
        tokens = None
        self.total_characters += characters

        if self.encoder is not None:
            try:
                tokens = len(self.encoder.encode(text))
            except Exception as e:
                raise TokenCountingError(f"Failed to count tokens: {e}") from e
            self.total_tokens = (self.total_tokens or 0) + tokens

        return CountResult(characters=characters, tokens=tokens)
