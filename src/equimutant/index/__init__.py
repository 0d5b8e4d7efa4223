"""
Public API for the syntax index: flat node views and cross-tree correlation.
"""
from .index_builder import SyntaxIndex, build_index
from .correlation import (
    correlate,
    find_node_by_position,
    nodes_at_line,
    nodes_between,
    nodes_near_line,
)
from . import tree_utils

__all__ = [
    "SyntaxIndex",
    "build_index",
    "correlate",
    "find_node_by_position",
    "nodes_at_line",
    "nodes_between",
    "nodes_near_line",
    "tree_utils",
]
