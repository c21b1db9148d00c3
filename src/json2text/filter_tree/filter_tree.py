"""Compiled filter tree for one path spec configuration.

This module provides the FilterTree class, the immutable result of compiling a
path spec, along with the compiler that turns an inclusion trie into filter
nodes. Compiled trees are cached per distinct spec and may be shared freely
across documents and threads.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterator, List, Tuple, Union

from json2text.filter_tree.filter_node import (
    INCLUDE_ALL,
    INCLUDE_NOTHING,
    FilterKind,
    FilterNode,
    multi_segment,
    single_segment,
)
from json2text.inclusion_tree.inclusion_node import InclusionNode
from json2text.inclusion_tree.inclusion_tree import SEGMENT_SEPARATOR, build_inclusion_tree, split_paths
from json2text.types import PathSpecType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterTree:
    """Immutable compiled filter for a set of inclusion paths.

    Attributes:
        root (FilterNode): The filter applied to the document root.

    Example:
        >>> tree = compile_filter("a.b, a.x, d")
        >>> tree.is_empty
        False
        >>> tree.effective_paths()
        ['a.b', 'a.x', 'd']
        >>> compile_filter(" , ").is_empty
        True
    """

    root: FilterNode

    @property
    def is_empty(self) -> bool:
        """True if the tree includes nothing at all."""
        return self.root.kind is FilterKind.INCLUDE_NOTHING

    def effective_paths(self) -> List[str]:
        """The minimal set of dotted paths this tree includes, sorted.

        Trees compiled from specs with equal effective paths behave identically.

        Example:
            >>> compile_filter("b.x, b, c").effective_paths()
            ['b', 'c']
        """
        paths: List[str] = []
        stack: List[Tuple[FilterNode, Tuple[str, ...]]] = [(self.root, ())]
        while stack:
            node, prefix = stack.pop()
            if node.kind is FilterKind.INCLUDE_ALL:
                paths.append(SEGMENT_SEPARATOR.join(prefix))
                continue
            for segment, child in node.named_children().items():
                stack.append((child, prefix + (segment,)))
        return sorted(paths)

    def stream_tree_representation(self) -> Iterator[str]:
        """Generate a tree representation of the filter one line at a time.

        Leaves (everything below included) are marked with a trailing ``*``.
        Children are listed alphabetically.

        Yields:
            Lines of the tree representation, including the connecting lines.

        Example:
            >>> for line in compile_filter("a.b, a.x, d").stream_tree_representation():
            ...     print(line)
            $
            ├── a
            │   ├── b *
            │   └── x *
            └── d *
        """
        if self.is_empty:
            yield f"{InclusionNode.ROOT_NAME} (include nothing)"
            return

        # Entries are (name, node, prefix, is_last), pushed in reverse so they pop in order
        stack: List[Tuple[str, FilterNode, str, bool]] = []

        def push_children(node: FilterNode, prefix: str) -> None:
            children = sorted(node.named_children().items())
            for i in range(len(children) - 1, -1, -1):
                name, child = children[i]
                stack.append((name, child, prefix, i == len(children) - 1))

        yield InclusionNode.ROOT_NAME
        push_children(self.root, "")
        while stack:
            name, node, prefix, is_last = stack.pop()
            connector = "└── " if is_last else "├── "
            suffix = "" if node.is_branch else " *"
            yield f"{prefix}{connector}{name}{suffix}"
            if node.is_branch:
                push_children(node, prefix + ("    " if is_last else "│   "))

    def get_tree_representation(self) -> str:
        """Get a complete string representation of the filter tree."""
        return "\n".join(self.stream_tree_representation())


def compile_node(node: InclusionNode) -> FilterNode:
    """Compile one trie node (and everything below it) into a filter node.

    A leaf compiles to INCLUDE_ALL, a node with one child to a single-segment
    branch, and a node with several children to a multi-segment branch.

    Children are compiled before their parents using an explicit stack, so the
    depth of a path is not limited by the interpreter's recursion limit.
    """
    compiled: Dict[InclusionNode, FilterNode] = {}
    stack: List[Tuple[InclusionNode, bool]] = [(node, False)]
    while stack:
        current, children_done = stack.pop()
        children = current.get_children()
        if not children:
            compiled[current] = INCLUDE_ALL
        elif not children_done:
            stack.append((current, True))
            stack.extend((child, False) for child in children.values())
        elif len(children) == 1:
            ((segment, child),) = children.items()
            compiled[current] = single_segment(segment, compiled.pop(child))
        else:
            compiled[current] = multi_segment({segment: compiled.pop(child) for segment, child in children.items()})
    return compiled[node]


def compile_inclusion_tree(root: InclusionNode) -> FilterTree:
    """Compile a whole inclusion trie into a FilterTree.

    An empty trie compiles to the shared INCLUDE_NOTHING filter.
    """
    if root.is_empty():
        return FilterTree(INCLUDE_NOTHING)
    return FilterTree(compile_node(root))


def compile_filter(spec: PathSpecType) -> FilterTree:
    """Compile a path spec into a reusable FilterTree.

    Never fails on malformed spec text; in the worst case the result includes
    nothing. Results are cached per distinct spec.

    Args:
        spec: Comma-separated spec string (``"a.b, c"``) or a sequence of dotted
            paths, one path per element.

    Returns:
        The compiled, immutable filter tree.

    Example:
        >>> compile_filter("a.b, c") is compile_filter("a.b, c")
        True
        >>> compile_filter(["a.b", "c"]) == compile_filter("c, a.b")
        True
    """
    key: Union[str, Tuple[str, ...]] = spec if isinstance(spec, str) else tuple(spec)
    return _compile_cached(key)


@lru_cache(maxsize=256)
def _compile_cached(spec: Union[str, Tuple[str, ...]]) -> FilterTree:
    paths = split_paths(spec)
    tree = compile_inclusion_tree(build_inclusion_tree(paths))
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Compiled path spec %r into %d effective path(s)", spec, len(tree.effective_paths()))
    return tree
