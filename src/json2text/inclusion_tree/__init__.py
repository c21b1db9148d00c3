"""Inclusion trie built from dotted path specifications.

This module provides the transient, mutable trie used while compiling a path
spec. The trie is minimal: shorter paths subsume longer ones.
"""

from .inclusion_node import InclusionNode
from .inclusion_tree import build_inclusion_tree, render_inclusion_tree, split_paths, split_segments

__all__ = [
    "InclusionNode",
    "build_inclusion_tree",
    "render_inclusion_tree",
    "split_paths",
    "split_segments",
]
