"""Streaming application of a FilterTree to a JSON token sequence.

The filter walks the document one token at a time, keeping only a stack of the
containers currently open. Excluded values are consumed from the token source
without any per-segment checks below them, and included subtrees are copied
through verbatim.

Enclosing structure is emitted lazily: the start tokens and field names leading
to a value are held back until something beneath them is actually included.
A container whose contents are all excluded produces no tokens at all, so the
filtered sequence always replays into well-formed JSON (or into nothing).
"""

from typing import Iterable, Iterator, List, NamedTuple

from json2text.filter_tree.filter_node import FilterNode
from json2text.filter_tree.filter_tree import FilterTree
from json2text.tokens import Token, TokenKind


class _OpenContainer(NamedTuple):
    """A container opened at a branch filter node.

    Attributes:
        node: Filter applying to the container's members (array elements share it).
        mark: Length of the pending buffer before this container's leading tokens
            were added to it.
    """

    node: FilterNode
    mark: int


def skip_value(tokens: Iterator[Token]) -> None:
    """Consume the next value from ``tokens``, including its whole subtree."""
    depth = 0
    for token in tokens:
        if token.kind.is_start:
            depth += 1
        elif token.kind.is_end:
            depth -= 1
        if depth == 0:
            return


def copy_container(tokens: Iterator[Token]) -> Iterator[Token]:
    """Yield the remaining tokens of a container whose start was already consumed."""
    depth = 1
    for token in tokens:
        yield token
        if token.kind.is_start:
            depth += 1
        elif token.kind.is_end:
            depth -= 1
            if depth == 0:
                return


def filter_tokens(filter_tree: FilterTree, tokens: Iterable[Token]) -> Iterator[Token]:
    """Filter a document's tokens down to the paths included by ``filter_tree``.

    Rules applied at each position:

    - A field name is looked up in the current filter node; no match skips the
      field together with its entire value.
    - Arrays are transparent: elements use the array's own filter node.
    - An INCLUDE_ALL node passes everything below it through unchanged.
    - At a branch node scalars are excluded, so a scalar root document or a
      scalar found where a deeper path was expected never matches.

    The whole document is always consumed, so tokenizer errors anywhere in it
    propagate to the caller.

    Args:
        filter_tree: The compiled filter.
        tokens: Lazy token sequence of a single JSON document.

    Yields:
        The included tokens, with the structural wrapping needed to replay them.

    Example:
        >>> from json2text.filter_tree.filter_tree import compile_filter
        >>> from json2text.tokens import open_token_source
        >>> with open_token_source('{"a":{"b":1,"c":2},"d":3}') as source:
        ...     kinds = [t.kind.value for t in filter_tokens(compile_filter("a.b"), source)]
        >>> kinds
        ['start_object', 'field_name', 'start_object', 'field_name', 'value_number_int', 'end_object', 'end_object']
    """
    tokens = iter(tokens)
    root = filter_tree.root
    pending: List[Token] = []
    open_containers: List[_OpenContainer] = []
    field_name = None
    field_node = root

    for token in tokens:
        kind = token.kind

        if kind is TokenKind.FIELD_NAME:
            node = open_containers[-1].node.lookup_child(token.value)
            if node is None:
                skip_value(tokens)
            else:
                field_name, field_node = token, node
            continue

        if kind.is_end:
            container = open_containers.pop()
            if len(pending) > container.mark:
                # Nothing inside was included; drop the held-back wrapping
                del pending[container.mark :]  # noqa: E203
            else:
                yield token
            continue

        # A value: an object member, an array element, or the document root
        leading: List[Token] = []
        if field_name is not None:
            node = field_node
            leading.append(field_name)
            field_name = None
        elif open_containers:
            node = open_containers[-1].node
        else:
            node = root

        if node.includes_scalars:
            yield from pending
            pending.clear()
            yield from leading
            yield token
            if kind.is_start:
                yield from copy_container(tokens)
        elif kind.is_start:
            open_containers.append(_OpenContainer(node, len(pending)))
            pending.extend(leading)
            pending.append(token)
        # Scalars at a branch node are excluded
