"""
Re-locating nodes across independently parsed trees.

A node from one tree is matched in another by kind, grammar type, start
position and printed text. When both trees were parsed from identical
source, the structural path is tried first.
"""

from typing import Dict, List, Optional

from equimutant.exceptions import CorrelationError
from equimutant.parser.nodes import SyntaxNode
from .index_builder import SyntaxIndex


def _matches(node: SyntaxNode, reference: SyntaxNode, line: int, column: int) -> bool:
    return node.line == line and node.column == column and node.same_shape(reference)


def find_node_by_position(
    index: SyntaxIndex,
    reference: Optional[SyntaxNode],
    line: int,
    column: int,
) -> Optional[SyntaxNode]:
    """
    Find the node of `index.tree` that corresponds to `reference`.

    Args:
        index: Index of the tree to search
        reference: Node from another tree built from the same (or edited) source
        line: 1-based start line of the reference node
        column: 1-based start column of the reference node

    Returns:
        The matching node, or None if nothing at that position matches

    Raises:
        CorrelationError: If more than one distinct node matches
    """
    if reference is None:
        return None

    tree = index.tree
    # Identical source bytes (same digest): structural ids are stable
    if reference.source == tree.source_bytes:
        candidate = tree.node_at_path(reference.path)
        if candidate is not None and _matches(candidate, reference, line, column):
            return candidate

    matches: Dict[tuple, SyntaxNode] = {}
    for node in index.all_nodes:
        if _matches(node, reference, line, column):
            matches.setdefault(node.path, node)

    if not matches:
        for primary in index.all_nodes:
            if not (primary.line <= line <= primary.end_line):
                continue
            for node in primary.walk():
                if _matches(node, reference, line, column):
                    matches.setdefault(node.path, node)

    if len(matches) > 1:
        found = ", ".join(str(list(path)) for path in matches)
        raise CorrelationError(
            f"Ambiguous correlation for {reference.describe()}: {len(matches)} nodes match at paths {found}"
        )
    if matches:
        return next(iter(matches.values()))
    return None


def correlate(index: SyntaxIndex, reference: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
    """Shorthand for find_node_by_position at the reference node's own position."""
    if reference is None:
        return None
    return find_node_by_position(index, reference, reference.line, reference.column)


def nodes_at_line(index: SyntaxIndex, line: int) -> List[SyntaxNode]:
    """Primary nodes starting on `line`, then their descendants starting on it."""
    return nodes_between(index, line, line)


def nodes_near_line(index: SyntaxIndex, line: int, radius: int = 3) -> List[SyntaxNode]:
    """Nodes starting within `radius` lines of `line`; a negative radius finds nothing."""
    if radius < 0:
        return []
    return nodes_between(index, max(1, line - radius), line + radius)


def nodes_between(index: SyntaxIndex, start_line: int, end_line: int) -> List[SyntaxNode]:
    found: Dict[tuple, SyntaxNode] = {}
    for node in index.all_nodes:
        if start_line <= node.line <= end_line:
            found.setdefault(node.path, node)

    for primary in index.all_nodes:
        if primary.end_line < start_line or primary.line > end_line:
            continue
        for node in primary.walk():
            if start_line <= node.line <= end_line:
                found.setdefault(node.path, node)

    return list(found.values())
