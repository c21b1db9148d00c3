"""Compiled, immutable filter trees.

This module provides the filter node variants and the compiler that turns an
inclusion trie into a FilterTree ready for streaming use.
"""

from .filter_node import INCLUDE_ALL, INCLUDE_NOTHING, FilterKind, FilterNode
from .filter_tree import FilterTree, compile_filter, compile_inclusion_tree

__all__ = [
    "INCLUDE_ALL",
    "INCLUDE_NOTHING",
    "FilterKind",
    "FilterNode",
    "FilterTree",
    "compile_filter",
    "compile_inclusion_tree",
]
