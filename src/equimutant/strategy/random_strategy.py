import random
from typing import List, Optional

from equimutant.index import SyntaxIndex
from equimutant.parser.nodes import SyntaxNode
from .base import LocationStrategy
from .config import get_strategy_config


class RandomStrategy(LocationStrategy):
    """
    Unconstrained random sampling over the index's primary nodes.

    A seeded strategy is deterministic for the same seed and input.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._random = random.Random(seed)

    @property
    def name(self) -> str:
        return "RANDOM_LOCATION"

    def select(self, index: SyntaxIndex, count: int = 0) -> List[SyntaxNode]:
        """
        Shuffle all primary nodes and return the first `count` of them.

        Args:
            index: Index of the tree to sample from
            count: Number of nodes wanted; non-positive means the configured default (5)

        Returns:
            min(count, len(all_nodes)) distinct nodes
        """
        nodes = list(index.all_nodes)
        if not nodes:
            return []

        wanted = count if count > 0 else get_strategy_config()["default_random_count"]
        self._random.shuffle(nodes)
        return nodes[:wanted]

    def select_one(self, index: SyntaxIndex) -> Optional[SyntaxNode]:
        candidates = self.select(index, 1)
        return candidates[0] if candidates else None
