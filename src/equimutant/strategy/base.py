from abc import ABC, abstractmethod
from typing import List

from equimutant.parser.nodes import SyntaxNode


class LocationStrategy(ABC):
    """
    Chooses which syntax nodes are eligible for rewriting.

    Strategies know nothing about transforms: each one only maps a SyntaxIndex
    (plus its own parameters) to an ordered list of candidate nodes.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier reported in result metadata."""
        raise NotImplementedError

    @abstractmethod
    def select(self, index, *args, **kwargs) -> List[SyntaxNode]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
