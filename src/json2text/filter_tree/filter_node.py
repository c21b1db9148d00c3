"""Immutable filter nodes compiled from the inclusion trie."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class FilterKind(Enum):
    """Enumeration of the compiled filter node variants.

    Attributes:
        INCLUDE_ALL: Terminal; everything below is included, scalars too
        INCLUDE_NOTHING: Terminal; nothing is included
        SINGLE_SEGMENT: Branch with exactly one named child
        MULTI_SEGMENT: Branch with two or more named children
    """

    INCLUDE_ALL = "include_all"
    INCLUDE_NOTHING = "include_nothing"
    SINGLE_SEGMENT = "single_segment"
    MULTI_SEGMENT = "multi_segment"


_NO_CHILDREN: Mapping[str, "FilterNode"] = MappingProxyType({})


@dataclass(frozen=True, eq=False)
class FilterNode:
    """A compiled, immutable filter position.

    Only the fields relevant to the node's kind are set: ``segment`` and
    ``child`` for SINGLE_SEGMENT, ``children`` for both branch kinds. Use the
    factory functions rather than the constructor.

    Nodes are hashable values compared by structure. The hash is computed once
    at construction from the already hashed children, and comparison walks both
    trees with an explicit stack, so neither recurses on deep trees.

    Example:
        >>> node = single_segment("a", INCLUDE_ALL)
        >>> node.lookup_child("a") is INCLUDE_ALL
        True
        >>> node.lookup_child("b") is None
        True
        >>> node.includes_scalars
        False
    """

    kind: FilterKind
    segment: Optional[str] = None
    child: Optional["FilterNode"] = None
    children: Mapping[str, "FilterNode"] = field(default_factory=lambda: _NO_CHILDREN)
    _hash: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_hash", hash((self.kind, self.segment, self.child, frozenset(self.children.items())))
        )

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FilterNode):
            return NotImplemented
        pairs = [(self, other)]
        while pairs:
            left, right = pairs.pop()
            if left is right:
                continue
            if left._hash != right._hash or left.kind is not right.kind or left.segment != right.segment:
                return False
            if left.children.keys() != right.children.keys():
                return False
            pairs.extend((child, right.children[name]) for name, child in left.children.items())
        return True

    @property
    def includes_scalars(self) -> bool:
        """Whether scalar values sitting directly at this node are included.

        Only INCLUDE_ALL includes them. Branch nodes exclude scalars so that a
        path like "a.x.y" never matches a scalar found at "a.x".
        """
        return self.kind is FilterKind.INCLUDE_ALL

    @property
    def is_branch(self) -> bool:
        return self.kind in (FilterKind.SINGLE_SEGMENT, FilterKind.MULTI_SEGMENT)

    def lookup_child(self, name: str) -> Optional["FilterNode"]:
        """Return the filter to apply to the value of property ``name``.

        Args:
            name: The property name encountered in a JSON object.

        Returns:
            The child filter, or None if the property and its whole value are excluded.
        """
        if self.kind is FilterKind.SINGLE_SEGMENT:
            return self.child if name == self.segment else None
        if self.kind is FilterKind.MULTI_SEGMENT:
            return self.children.get(name)
        if self.kind is FilterKind.INCLUDE_ALL:
            return self
        return None

    def named_children(self) -> Mapping[str, "FilterNode"]:
        """Mapping of segment name to child filter for branch nodes; empty otherwise."""
        return self.children


INCLUDE_ALL = FilterNode(FilterKind.INCLUDE_ALL)
INCLUDE_NOTHING = FilterNode(FilterKind.INCLUDE_NOTHING)


def single_segment(segment: str, child: FilterNode) -> FilterNode:
    """Create a branch node matching exactly one property name."""
    return FilterNode(
        FilterKind.SINGLE_SEGMENT, segment=segment, child=child, children=MappingProxyType({segment: child})
    )


def multi_segment(children: Mapping[str, FilterNode]) -> FilterNode:
    """Create a branch node matching any of several property names.

    Raises:
        ValueError: If fewer than two children are given.
    """
    if len(children) < 2:
        raise ValueError(f"A multi-segment filter needs at least two children, got {len(children)}")
    return FilterNode(FilterKind.MULTI_SEGMENT, children=MappingProxyType(dict(children)))
