"""Node representation for segments of the inclusion trie."""

from typing import Any, Dict, Optional

from anytree import Node


class InclusionNode(Node):  # type: ignore
    """Node class representing one path segment in the inclusion trie.

    Extends anytree.Node with a name index over the children so that segment
    lookup stays constant-time while building. A node without children is a
    leaf: everything below the path it terminates is included.

    Attributes:
        name (str): The path segment this node matches (the root uses ROOT_NAME).
        parent (Optional[InclusionNode]): The parent node in the trie.
        children (tuple[InclusionNode]): The child nodes (inherited from anytree.Node).

    Example:
        >>> root = InclusionNode.root()
        >>> a = root.add("a")
        >>> root.find("a") is a
        True
        >>> a.is_leaf
        True
        >>> root.is_empty()
        False
    """

    ROOT_NAME = "$"

    def __init__(self, name: str, parent: Optional["InclusionNode"] = None, **kwargs: Any) -> None:
        """Initialize an InclusionNode.

        Args:
            name: The path segment matched by this node.
            parent: The parent node. Defaults to None.
            **kwargs: Additional arguments passed to anytree.Node.
        """
        super().__init__(name, parent, **kwargs)
        self._index: Dict[str, "InclusionNode"] = {}

    @classmethod
    def root(cls) -> "InclusionNode":
        """Create an empty trie root."""
        return cls(cls.ROOT_NAME)

    def is_empty(self) -> bool:
        """Whether this node has no children.

        For the root this means no path was inserted; for any other node it marks
        a leaf.
        """
        return not self._index

    def find(self, segment: str) -> Optional["InclusionNode"]:
        """Return the child for the given segment, or None if there is none."""
        return self._index.get(segment)

    def add(self, segment: str) -> "InclusionNode":
        """Create a child node for the given segment and return it."""
        node = InclusionNode(segment, parent=self)
        self._index[segment] = node
        return node

    def clear(self) -> None:
        """Drop all children, turning this node into a leaf."""
        self.children = ()
        self._index = {}

    def get_children(self) -> Dict[str, "InclusionNode"]:
        """Mapping of segment name to child node, in insertion order."""
        return dict(self._index)
