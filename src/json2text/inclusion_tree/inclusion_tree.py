"""Minimal inclusion trie built from dotted path specifications.

A path spec is a comma-separated list of dotted paths such as ``"a.b, c.d"``.
The trie built from it is minimal: when one path is a prefix of another, only
the shorter one survives, regardless of the order in which they were given.
"""

import logging
from typing import Iterable, List, Optional

from anytree import RenderTree

from json2text.inclusion_tree.inclusion_node import InclusionNode
from json2text.types import PathSpecType

logger = logging.getLogger(__name__)

PATH_SEPARATOR = ","
SEGMENT_SEPARATOR = "."

# Levels of the trie shown in debug output
DEBUG_RENDER_LEVELS = 32


def split_paths(spec: PathSpecType) -> List[str]:
    """Split a path spec into its individual, trimmed, non-empty paths.

    A string is split on commas; an explicit sequence is taken one path per
    element, without further comma splitting.

    Args:
        spec: Comma-separated spec string or sequence of dotted paths.

    Returns:
        The non-empty paths in their original order.

    Example:
        >>> split_paths(" a.b , ,c ")
        ['a.b', 'c']
        >>> split_paths(["a,b", "  "])
        ['a,b']
        >>> split_paths(",,,")
        []
    """
    if isinstance(spec, str):
        candidates: Iterable[str] = spec.split(PATH_SEPARATOR)
    else:
        candidates = spec
    return [path.strip() for path in candidates if path.strip()]


def split_segments(path: str) -> List[str]:
    """Split a dotted path into trimmed segments.

    Zero-length segments from doubled or leading dots are kept and match an
    empty-string property name. Trailing zero-length segments are dropped, so
    ``"a."`` selects the same as ``"a"`` and a path made only of dots has no
    segments at all.

    Example:
        >>> split_segments(" a . b ")
        ['a', 'b']
        >>> split_segments("a..b")
        ['a', '', 'b']
        >>> split_segments("a.")
        ['a']
    """
    segments = [segment.strip() for segment in path.strip().split(SEGMENT_SEPARATOR)]
    while segments and not segments[-1]:
        segments.pop()
    return segments


def build_inclusion_tree(paths: Iterable[str]) -> InclusionNode:
    """Build the minimal inclusion trie for the given paths.

    For each path the segments are walked from the root. Missing children are
    created; reaching an existing leaf stops the walk since the path is already
    covered by a shorter one. The node reached at the end is turned into a leaf,
    dropping any longer paths previously inserted below it.

    Args:
        paths: Dotted paths. Blank entries and entries made only of dots are skipped.

    Returns:
        The trie root. It has no children if no non-blank path was given.

    Example:
        >>> root = build_inclusion_tree(["a.x", "a", "b.c"])
        >>> sorted(root.get_children())
        ['a', 'b']
        >>> root.find("a").is_leaf
        True
    """
    root = InclusionNode.root()
    for path in paths:
        segments = split_segments(path)
        if not segments:
            continue
        current = root
        for segment in segments:
            following = current.find(segment)
            if following is None:
                current = current.add(segment)
            elif following.is_empty():
                # Already covered by a shorter path ending here
                current = following
                break
            else:
                current = following
        current.clear()

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Inclusion tree:\n%s", render_inclusion_tree(root, maxlevel=DEBUG_RENDER_LEVELS))
    return root


def render_inclusion_tree(root: InclusionNode, maxlevel: Optional[int] = None) -> str:
    """Render the trie with anytree's box-drawing renderer.

    Args:
        root: The trie root.
        maxlevel: Number of levels to render, the root included; None renders all.

    Example:
        >>> print(render_inclusion_tree(build_inclusion_tree(["a.b", "a.c"])))
        $
        └── a
            ├── b
            └── c
    """
    return "\n".join(f"{prefix}{node.name}" for prefix, _, node in RenderTree(root, maxlevel=maxlevel))
