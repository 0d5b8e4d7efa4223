from typing import List, Optional, Sequence

from equimutant.exceptions import InvalidArgumentError
from equimutant.index import SyntaxIndex
from equimutant.parser.nodes import SyntaxNode
from .base import LocationStrategy


def validate_target_lines(target_lines: Optional[Sequence[Optional[int]]]) -> List[int]:
    """
    Check a target-line list and return a copy of it.

    Raises:
        InvalidArgumentError: If the list is None or holds None or non-positive entries
    """
    if target_lines is None:
        raise InvalidArgumentError("Target lines cannot be null")

    validated: List[int] = []
    for line in target_lines:
        if line is None:
            raise InvalidArgumentError("Target lines cannot contain null values")
        if isinstance(line, bool) or not isinstance(line, int):
            raise InvalidArgumentError(f"Target lines must be integers: {line!r}")
        if line <= 0:
            raise InvalidArgumentError(
                f"Target lines cannot contain negative or zero line numbers: {line}"
            )
        validated.append(line)
    return validated


class TargetStrategy(LocationStrategy):
    """Selects every primary node that starts on one of the requested lines."""

    @property
    def name(self) -> str:
        return "TARGET_LOCATION"

    def select(self, index: SyntaxIndex, target_lines: Optional[Sequence[int]]) -> List[SyntaxNode]:
        """
        Args:
            index: Index of the tree to search
            target_lines: 1-based line numbers; lines without nodes are ignored

        Returns:
            Matching nodes in index order (all nodes of a line, not just the first)

        Raises:
            InvalidArgumentError: If `target_lines` is invalid (checked before the index is read)
        """
        wanted = set(validate_target_lines(target_lines))
        if not wanted:
            return []
        return [node for node in index.all_nodes if node.line in wanted]
