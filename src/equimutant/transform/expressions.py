"""
Expression-level transforms: parentheses and neutral arithmetic or boolean
operands around literals.
"""

from typing import List, Optional

from equimutant.index.tree_utils import expression_of, subnodes, variable_declarators
from equimutant.parser.nodes import NodeKind, SyntaxNode, SyntaxTree
from .base import Transform


def _value_of(statement: SyntaxNode) -> Optional[SyntaxNode]:
    """Right-hand side of an assignment statement, or the first declarator's initializer."""
    if statement.kind == NodeKind.EXPRESSION_STATEMENT:
        expression = expression_of(statement)
        if expression is not None and expression.kind == NodeKind.ASSIGNMENT:
            return expression.child("right")
        return None
    if statement.kind in (NodeKind.LOCAL_VARIABLE_DECLARATION, NodeKind.FIELD_DECLARATION):
        declarators = variable_declarators(statement)
        return declarators[0].child("value") if declarators else None
    return None


class AddBrackets(Transform):
    """`x = a + b;` becomes `x = (a + b);`."""

    @property
    def description(self) -> str:
        return "Adds parentheses around expressions in assignments and variable declarations"

    def check(self, index, node: SyntaxNode) -> List[SyntaxNode]:
        if node.kind == NodeKind.LOCAL_VARIABLE_DECLARATION:
            declared_type = node.child("type")
            if declared_type is not None and declared_type.ts_type == "array_type":
                return []
        if node.kind not in (
            NodeKind.EXPRESSION_STATEMENT,
            NodeKind.LOCAL_VARIABLE_DECLARATION,
            NodeKind.FIELD_DECLARATION,
        ):
            return []
        value = _value_of(node)
        # `{1, 2}` is only legal directly after `=`
        if value is None or value.kind == NodeKind.ARRAY_INITIALIZER:
            return []
        return [node]

    def apply(self, target, tree: SyntaxTree, sibling, source: SyntaxNode) -> bool:
        value = _value_of(source)
        if value is None or value.kind == NodeKind.ARRAY_INITIALIZER:
            return False
        tree.replace(value, f"({value.text})")
        return True


class _LiteralTransform(Transform):
    """Base for transforms that rewrite every literal of one kind below a candidate."""

    literal_kind: NodeKind

    def check(self, index, node: SyntaxNode) -> List[SyntaxNode]:
        return [n for n in subnodes(node) if n.kind == self.literal_kind]

    def apply(self, target: SyntaxNode, tree: SyntaxTree, sibling, source) -> bool:
        if target is None or target.kind != self.literal_kind:
            return False
        replacement = self.rewrite(target.text)
        if replacement is None:
            return False
        tree.replace(target, replacement)
        return True

    def rewrite(self, literal: str) -> Optional[str]:
        raise NotImplementedError


class AddRedundantLiteral(_LiteralTransform):
    """`5` becomes `(1 + 5 - 1)`; floating point literals use `1.0`."""

    literal_kind = NodeKind.NUMBER_LITERAL

    @property
    def description(self) -> str:
        return "Adds redundant arithmetic operations to number literals"

    def rewrite(self, literal: str) -> Optional[str]:
        lowered = literal.lower()
        if "0x" in lowered and "." in lowered:
            return None
        one = "1.0" if "." in literal else "1"
        return f"({one} + {literal} - {one})"


class CompoundExpression1(_LiteralTransform):
    """`true` becomes `(true || false)`, `false` becomes `(false && true)`."""

    literal_kind = NodeKind.BOOLEAN_LITERAL

    @property
    def description(self) -> str:
        return "Creates compound boolean expressions from boolean literals"

    def rewrite(self, literal: str) -> Optional[str]:
        if literal == "true":
            return "(true || false)"
        return "(false && true)"


class CompoundExpression2(_LiteralTransform):
    """Like CompoundExpression1 with the non-short-circuit `|` and `&`."""

    literal_kind = NodeKind.BOOLEAN_LITERAL

    @property
    def description(self) -> str:
        return "Creates compound boolean expressions from boolean literals using bitwise operators"

    def rewrite(self, literal: str) -> Optional[str]:
        if literal == "true":
            return "(true | false)"
        return "(false & true)"


class CompoundExpression3(_LiteralTransform):
    """`n` becomes `(0 + n)`."""

    literal_kind = NodeKind.NUMBER_LITERAL

    @property
    def description(self) -> str:
        return "Creates compound numeric expressions by adding zero to number literals"

    def rewrite(self, literal: str) -> Optional[str]:
        return f"(0 + {literal})"
