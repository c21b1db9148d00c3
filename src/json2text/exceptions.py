class TokenCountingUnavailableError(Exception):
    """
    Exception raised when token counting is requested without the required tokenizer package.

    This exception is raised when the `tiktoken` package is not installed but a token counting
    model was requested for the extracted text. The tiktoken package is an optional dependency
    that must be explicitly installed using the 'token_counting' extra.

    Attributes:
        message (str): Detailed error message including installation instructions.

    Example:
        >>> error = TokenCountingUnavailableError()
        >>> str(error).startswith('Tokenizer (tiktoken) is not installed')
        True
    """

    def __init__(self, message: str = "Tokenizer (tiktoken) is not installed.") -> None:
        """
        Initialize the exception with an informative error message.

        Args:
            message (str, optional): Base error message. Installation instructions will be
                appended to this message.
        """
        self.message = (
            f"{message} To enable token counting, install json2text with the 'token_counting' "
            "extra: 'pip install json2text[token_counting]'."
        )
        super().__init__(self.message)


class TokenCountingError(Exception):
    """
    Exception raised when counting the tokens of extracted text fails.

    Example:
        >>> error = TokenCountingError("Failed to count tokens: invalid input")
        >>> str(error)
        'Failed to count tokens: invalid input'
    """

    pass


class DocumentTooLargeError(Exception):
    """
    Exception raised when a document exceeds the configured size limit.

    Attributes:
        source (str): Where the document came from (file name, possibly with a line number).
        size (int): Size of the document in bytes.
        max_size (int): The configured limit in bytes.

    Example:
        >>> error = DocumentTooLargeError("data.json", 2048, 1024)
        >>> str(error)
        'Document data.json is 2048 bytes, exceeding the limit of 1024 bytes'
    """

    def __init__(self, source: str, size: int, max_size: int) -> None:
        self.source = source
        self.size = size
        self.max_size = max_size
        super().__init__(f"Document {source} is {size} bytes, exceeding the limit of {max_size} bytes")
