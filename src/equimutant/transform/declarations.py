"""
Declaration-level transforms.
"""

from typing import List, Optional

from equimutant.index.tree_utils import first_statement_in_block, variable_declarators
from equimutant.parser.nodes import NodeKind, SyntaxNode, SyntaxTree
from .formatting import BlockFormatter
from .base import Transform


def modifiers_of(node: SyntaxNode) -> Optional[SyntaxNode]:
    found = node.children_of_kind(NodeKind.MODIFIERS)
    return found[0] if found else None


def has_modifier(node: SyntaxNode, keyword: str) -> bool:
    modifiers = modifiers_of(node)
    return modifiers is not None and modifiers.has_token(keyword)


class AddLocalAssignment(Transform):
    """`int x = f();` becomes `int x;` followed by `x = f();`."""

    @property
    def description(self) -> str:
        return "Splits variable declarations with initializers into separate declaration and assignment statements"

    def _splittable(self, node: SyntaxNode) -> bool:
        if node.kind != NodeKind.LOCAL_VARIABLE_DECLARATION:
            return False
        declared_type = node.child("type")
        if declared_type is None:
            return False
        # final byte[] v = {0}; cannot become final byte[] v; v = {0};
        if declared_type.ts_type == "array_type" and has_modifier(node, "final"):
            return False
        if declared_type.text == "var":
            return False
        declarators = variable_declarators(node)
        if len(declarators) != 1:
            return False
        value = declarators[0].child("value")
        return value is not None and value.kind != NodeKind.ARRAY_INITIALIZER

    def check(self, index, node: SyntaxNode) -> List[SyntaxNode]:
        return [node] if self._splittable(node) else []

    def apply(self, target, tree: SyntaxTree, sibling, source: SyntaxNode) -> bool:
        if source is None or not self._splittable(source):
            return False
        if first_statement_in_block(source) is not source:
            return False

        declarator = variable_declarators(source)[0]
        name = declarator.child("name").text
        dimensions = declarator.child("dimensions")
        value = declarator.child("value")
        prefix = tree.source_bytes[source.start_byte:declarator.start_byte].decode("utf-8")

        formatter = BlockFormatter(tree)
        declaration = f"{prefix}{name}{dimensions.text if dimensions else ''};"
        assignment = f"{name} = {value.text};"
        tree.replace(source, declaration + formatter.statement_break(source) + assignment)
        return True


class AddStaticModifier(Transform):
    """Adds `static` in front of the modifiers of a field that lacks it."""

    @property
    def description(self) -> str:
        return "Adds static modifier to field declarations"

    def check(self, index, node: SyntaxNode) -> List[SyntaxNode]:
        if node.kind == NodeKind.FIELD_DECLARATION and not has_modifier(node, "static"):
            return [node]
        return []

    def apply(self, target, tree: SyntaxTree, sibling, source: SyntaxNode) -> bool:
        if source is None or source.kind != NodeKind.FIELD_DECLARATION:
            return False
        if has_modifier(source, "static"):
            return False
        tree.insert_before(modifiers_of(source) or source, "static ")
        return True
