"""
Control-flow wrappers: statements are placed inside constructs that always
execute them exactly once (or, for CFWrapperWithIfFalse, never execute a copy).
"""

from typing import List, Optional

from equimutant.index.tree_utils import (
    enclosing_method,
    first_statement_in_block,
    is_literal,
    is_sole_statement,
    name_of,
)
from equimutant.parser.nodes import NodeKind, SyntaxNode, SyntaxTree
from .base import Transform
from .formatting import BlockFormatter

# Statements that cannot be moved into a nested block without changing meaning
UNWRAPPABLE_KINDS = frozenset({
    NodeKind.LOCAL_VARIABLE_DECLARATION,
    NodeKind.FIELD_DECLARATION,
    NodeKind.METHOD_DECLARATION,
    NodeKind.RETURN_STATEMENT,
    NodeKind.CONSTRUCTOR_INVOCATION,
})

CONTROL_PARENT_KINDS = frozenset({
    NodeKind.IF_STATEMENT,
    NodeKind.WHILE_STATEMENT,
    NodeKind.DO_STATEMENT,
    NodeKind.FOR_STATEMENT,
})


def wrappable(node: SyntaxNode, skip_control_bodies: bool = True) -> bool:
    """Shared applicability rules of the wrapper transforms."""
    if is_literal(node) or not node.kind.is_statement:
        return False
    if skip_control_bodies and node.parent is not None and node.parent.kind in CONTROL_PARENT_KINDS:
        return False
    return node.kind not in UNWRAPPABLE_KINDS


class _WrapperTransform(Transform):
    """Replaces a statement with `header { statement; [extra;] } footer`."""

    header = ""
    footer = "}"
    trailing: tuple = ()
    refuse_sole_statement = True

    def check(self, index, node: SyntaxNode) -> List[SyntaxNode]:
        return [node] if wrappable(node) else []

    def apply(self, target, tree: SyntaxTree, sibling, source: SyntaxNode) -> bool:
        if source is None or not source.kind.is_statement:
            return False
        if self.refuse_sole_statement and is_sole_statement(source):
            return False
        formatter = BlockFormatter(tree)
        replacement = formatter.block(self.header, source, [source.text, *self.trailing], self.footer)
        tree.replace(source, replacement)
        tree.mark_prior(source)
        return True


class CFWrapperWithIfTrue(_WrapperTransform):
    header = "if (true)"

    @property
    def description(self) -> str:
        return "Wraps statements in if(true) blocks"


class CFWrapperWithWhileTrue(_WrapperTransform):
    header = "while (true)"
    trailing = ("break;",)

    @property
    def description(self) -> str:
        return "Wraps statements with a while(true) loop and break statement"


class CFWrapperWithForTrue1(_WrapperTransform):
    header = "for (; true; )"
    trailing = ("break;",)

    @property
    def description(self) -> str:
        return "Wraps statements with a for loop that has a true condition and break statement"


class CFWrapperWithDoWhile(_WrapperTransform):
    header = "do"
    footer = "} while (false);"
    refuse_sole_statement = False

    @property
    def description(self) -> str:
        return "Wraps statements in do-while(false) blocks"

    def check(self, index, node: SyntaxNode) -> List[SyntaxNode]:
        if not wrappable(node):
            return []
        method = enclosing_method(node)
        if method is not None and name_of(method) == "finalize":
            return []
        return [node]


class CFWrapperWithIfFalse(Transform):
    """Inserts a never-executed copy `if (false) { statement }` before a statement."""

    @property
    def description(self) -> str:
        return "Adds unreachable if(false) blocks before statements"

    def check(self, index, node: SyntaxNode) -> List[SyntaxNode]:
        return [node] if wrappable(node, skip_control_bodies=False) else []

    def apply(self, target, tree: SyntaxTree, sibling: Optional[SyntaxNode], source: SyntaxNode) -> bool:
        if source is None or not source.kind.is_statement:
            return False
        formatter = BlockFormatter(tree)
        dead_copy = formatter.block("if (false)", source, [source.text])

        if first_statement_in_block(source) is source:
            tree.insert_before(source, dead_copy + formatter.statement_break(source))
        else:
            # Single-statement body: the copy and the statement need a block of their own
            replacement = formatter.block("", source, [dead_copy, source.text]).lstrip()
            tree.replace(source, replacement)
        tree.mark_prior(source)
        return True
