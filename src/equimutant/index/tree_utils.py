"""
Tree queries shared by the index, the strategies and the transforms.

All helpers are read-only; none of them records edits.
"""

from collections import deque
from typing import Iterable, List, Optional, Set

from equimutant.parser.nodes import NodeKind, SyntaxNode

METHOD_KINDS = (NodeKind.METHOD_DECLARATION, NodeKind.CONSTRUCTOR_DECLARATION)


def is_literal(node: Optional[SyntaxNode]) -> bool:
    """Boolean, number, string or character literal (null is not a literal here)."""
    return node is not None and node.kind.is_literal


def is_block(node: Optional[SyntaxNode]) -> bool:
    """A `{ ... }` statement list, including an instance initializer block."""
    if node is None:
        return False
    return node.kind == NodeKind.BLOCK or (node.kind == NodeKind.INITIALIZER and node.ts_type == "block")


def block_statements(block: Optional[SyntaxNode]) -> List[SyntaxNode]:
    if block is None:
        return []
    return list(block.children)


def _unwrap_body(body: Optional[SyntaxNode]) -> List[SyntaxNode]:
    if body is None:
        return []
    if is_block(body):
        return block_statements(body)
    return [body]


def if_sub_statements(if_node: SyntaxNode) -> List[SyntaxNode]:
    """Statements of the then and else branches; a block branch contributes its contents."""
    results = _unwrap_body(if_node.child("consequence"))
    results.extend(_unwrap_body(if_node.child("alternative")))
    return results


def flatten_statements(statements: Iterable[SyntaxNode]) -> List[SyntaxNode]:
    """
    Breadth-first flattening of a statement list.

    `if` branches, `try` bodies and loop bodies are unwrapped into the result;
    the control statements themselves are kept as well.
    """
    results: List[SyntaxNode] = []
    queue = deque(statements)

    while queue:
        head = queue.popleft()
        results.append(head)

        if head.kind == NodeKind.IF_STATEMENT:
            queue.extend(if_sub_statements(head))
        elif head.kind == NodeKind.TRY_STATEMENT:
            queue.extend(block_statements(head.child("body")))
        elif head.kind.is_loop:
            queue.extend(_unwrap_body(head.child("body")))

    return results


def declaration_body(declaration: SyntaxNode) -> Optional[SyntaxNode]:
    """The statement block of a method, constructor or initializer, or None."""
    if declaration.kind in METHOD_KINDS:
        return declaration.child("body")
    if declaration.kind == NodeKind.INITIALIZER:
        if declaration.ts_type == "block":
            return declaration
        blocks = declaration.children_of_kind(NodeKind.BLOCK)
        return blocks[0] if blocks else None
    return None


def type_members(type_node: SyntaxNode) -> List[SyntaxNode]:
    """Body declarations of a class, interface, enum, record or annotation type."""
    body = type_node.child("body")
    if body is None:
        return []
    members: List[SyntaxNode] = []
    for member in body.children:
        if member.ts_type == "enum_body_declarations":
            members.extend(member.children)
        elif member.kind != NodeKind.ENUM_CONSTANT:
            members.append(member)
    return members


def name_of(node: SyntaxNode) -> str:
    name = node.child("name")
    return name.text if name is not None else ""


def normalized(text: str) -> str:
    return " ".join(text.split())


def signature_of(declaration: SyntaxNode) -> str:
    """`name:ParamType1:ParamType2` for a method or constructor."""
    parts = [name_of(declaration)]
    parameters = declaration.child("parameters")
    if parameters is not None:
        for parameter in parameters.children_of_kind(NodeKind.FORMAL_PARAMETER):
            param_type = parameter.child("type")
            if param_type is None:
                # spread_parameter keeps its type as a plain child
                types = parameter.children_of_kind(NodeKind.TYPE)
                param_type = types[0] if types else None
            if param_type is not None:
                parts.append(normalized(param_type.text))
    return ":".join(parts)


def direct_block_of(node: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
    """Nearest block enclosing a statement; None for non-statements."""
    if node is None or not node.kind.is_statement:
        return None
    for ancestor in node.ancestors():
        if is_block(ancestor):
            return ancestor
    return None


def first_statement_in_block(node: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
    """
    The statement, at or above `node`, that sits directly inside a block.

    This is the sibling context handed to transforms: the place where new
    statements can be inserted next to the candidate.
    """
    if node is None or not node.kind.is_statement:
        return None
    current = node
    for ancestor in node.ancestors():
        if is_block(ancestor):
            return current if current.kind.is_statement else None
        current = ancestor
    return None


def enclosing_method(node: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
    """Method or constructor containing `node` (itself if it is one). Fields have none."""
    if node is None or node.kind == NodeKind.FIELD_DECLARATION:
        return None
    if node.kind in METHOD_KINDS:
        return node
    for ancestor in node.ancestors():
        if ancestor.kind in METHOD_KINDS:
            return ancestor
    return None


def enclosing_type(node: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
    if node is None:
        return None
    if node.kind.is_type_declaration:
        return node
    for ancestor in node.ancestors():
        if ancestor.kind.is_type_declaration:
            return ancestor
    return None


def statement_of(node: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
    """Closest statement or field declaration at or above `node`."""
    current = node
    while current is not None:
        if current.kind.is_statement or current.kind == NodeKind.FIELD_DECLARATION:
            return current
        current = current.parent
    return None


def identifiers_in(node: Optional[SyntaxNode]) -> Set[str]:
    if node is None:
        return set()
    names = {n.text for n in node.walk() if n.kind == NodeKind.IDENTIFIER}
    if node.kind == NodeKind.IDENTIFIER:
        names.add(node.text)
    return names


def unwrap_parentheses(node: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
    while node is not None and node.kind == NodeKind.PARENTHESIZED_EXPRESSION and node.children:
        node = node.children[0]
    return node


def condition_of(node: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
    """Test expression of an if, loop or ternary, without its parentheses."""
    if node is None:
        return None
    if node.kind in (
        NodeKind.IF_STATEMENT,
        NodeKind.WHILE_STATEMENT,
        NodeKind.DO_STATEMENT,
        NodeKind.FOR_STATEMENT,
        NodeKind.CONDITIONAL_EXPRESSION,
    ):
        return unwrap_parentheses(node.child("condition"))
    return None


def variable_declarators(node: Optional[SyntaxNode]) -> List[SyntaxNode]:
    """Declarators of a field or local variable declaration."""
    if node is None:
        return []
    return list(node.children_by_field("declarator"))


def declared_names(node: Optional[SyntaxNode]) -> List[str]:
    return [name_of(d) for d in variable_declarators(node)]


def assigned_name(assignment: SyntaxNode) -> Optional[str]:
    """
    Name written by an assignment: `x = ...` gives x, `this.x = ...` gives x.
    Array element writes are attributed to the array name.
    """
    left = assignment.child("left")
    while left is not None:
        if left.kind == NodeKind.IDENTIFIER:
            return left.text
        if left.kind == NodeKind.FIELD_ACCESS:
            left = left.child("field")
        elif left.kind == NodeKind.ARRAY_ACCESS:
            left = left.child("array")
        else:
            return None
    return None


def expression_of(statement: SyntaxNode) -> Optional[SyntaxNode]:
    """The expression wrapped by an expression statement."""
    if statement.kind != NodeKind.EXPRESSION_STATEMENT or not statement.children:
        return None
    return statement.children[0]


def is_sole_statement(statement: SyntaxNode) -> bool:
    """True if `statement` is the only statement of its parent block."""
    parent = statement.parent
    return is_block(parent) and len(parent.children) == 1


def subnodes(node: Optional[SyntaxNode]) -> List[SyntaxNode]:
    """All descendants of `node`; a leaf stands for itself."""
    if node is None:
        return []
    return list(node.walk()) or [node]
