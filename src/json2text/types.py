from enum import Enum
from os import PathLike
from typing import Sequence, Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]

# A comma-separated spec string or an explicit sequence of dotted paths
PathSpecType = Union[str, Sequence[str]]

# In-memory JSON document representations accepted by the extractor
DocumentType = Union[str, bytes, bytearray, memoryview]


class FailureAction(Enum):
    """Enumeration of ways to handle a document that fails to decode.

    Attributes:
        IGNORE: Skip the document silently
        WARN: Skip the document and log a warning
        RAISE: Propagate the decoding error to the caller
    """

    IGNORE = "ignore"
    WARN = "warn"
    RAISE = "raise"
