from abc import ABC, abstractmethod
from typing import List, Optional

from equimutant.parser.nodes import SyntaxNode, SyntaxTree


class Transform(ABC):
    """
    A semantics-preserving rewrite rule.

    `check` inspects a candidate in the original tree and returns the nodes
    the rule can actually rewrite. `apply` records edits on a disposable
    tree; it returns False (or raises) when the rewrite cannot be done.
    Transforms hold no per-attempt state, so one instance serves every attempt.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def description(self) -> str:
        return f"Code transformation: {self.name}"

    @abstractmethod
    def check(self, index, node: SyntaxNode) -> List[SyntaxNode]:
        """
        Args:
            index: SyntaxIndex of the original tree
            node: Candidate chosen by a strategy

        Returns:
            Nodes this transform can rewrite (possibly empty)
        """
        raise NotImplementedError

    @abstractmethod
    def apply(
        self,
        target: SyntaxNode,
        tree: SyntaxTree,
        sibling: Optional[SyntaxNode],
        source: SyntaxNode,
    ) -> bool:
        """
        Record the rewrite on `tree`.

        Args:
            target: Node returned by `check`, re-located in `tree`
            tree: The attempt's own tree copy
            sibling: Statement of `source` that sits directly in a block, if any
            source: The candidate, re-located in `tree`

        Returns:
            True if edits were recorded
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{self.name}>"
