"""
Syntax tree model built on top of tree-sitter-java.

A SyntaxTree owns the original source text and an immutable tree of
SyntaxNode objects. Rewrites never touch the nodes: they are recorded as
TextEdits on the tree and applied in one batch when the tree is rendered.
"""

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from equimutant.exceptions import RewriteConflictError


class NodeKind(Enum):
    """Closed set of node kinds the core and the transforms dispatch on."""

    PROGRAM = "program"

    # Declarations
    CLASS_DECLARATION = "class_declaration"
    INTERFACE_DECLARATION = "interface_declaration"
    ENUM_DECLARATION = "enum_declaration"
    RECORD_DECLARATION = "record_declaration"
    ANNOTATION_TYPE_DECLARATION = "annotation_type_declaration"
    METHOD_DECLARATION = "method_declaration"
    CONSTRUCTOR_DECLARATION = "constructor_declaration"
    FIELD_DECLARATION = "field_declaration"
    INITIALIZER = "initializer"
    ENUM_CONSTANT = "enum_constant"
    TYPE_BODY = "type_body"

    # Statements
    BLOCK = "block"
    LOCAL_VARIABLE_DECLARATION = "local_variable_declaration"
    EXPRESSION_STATEMENT = "expression_statement"
    IF_STATEMENT = "if_statement"
    WHILE_STATEMENT = "while_statement"
    DO_STATEMENT = "do_statement"
    FOR_STATEMENT = "for_statement"
    ENHANCED_FOR_STATEMENT = "enhanced_for_statement"
    TRY_STATEMENT = "try_statement"
    RETURN_STATEMENT = "return_statement"
    BREAK_STATEMENT = "break_statement"
    CONTINUE_STATEMENT = "continue_statement"
    THROW_STATEMENT = "throw_statement"
    SWITCH_STATEMENT = "switch_statement"
    SYNCHRONIZED_STATEMENT = "synchronized_statement"
    LABELED_STATEMENT = "labeled_statement"
    ASSERT_STATEMENT = "assert_statement"
    YIELD_STATEMENT = "yield_statement"
    CONSTRUCTOR_INVOCATION = "constructor_invocation"
    CATCH_CLAUSE = "catch_clause"
    FINALLY_CLAUSE = "finally_clause"

    # Expressions
    ASSIGNMENT = "assignment"
    BINARY_EXPRESSION = "binary_expression"
    UNARY_EXPRESSION = "unary_expression"
    CONDITIONAL_EXPRESSION = "conditional_expression"
    METHOD_INVOCATION = "method_invocation"
    OBJECT_CREATION = "object_creation"
    PARENTHESIZED_EXPRESSION = "parenthesized_expression"
    CAST_EXPRESSION = "cast_expression"
    LAMBDA_EXPRESSION = "lambda_expression"
    FIELD_ACCESS = "field_access"
    ARRAY_ACCESS = "array_access"
    ARRAY_CREATION = "array_creation"
    ARRAY_INITIALIZER = "array_initializer"
    IDENTIFIER = "identifier"

    # Literals
    BOOLEAN_LITERAL = "boolean_literal"
    NUMBER_LITERAL = "number_literal"
    STRING_LITERAL = "string_literal"
    CHARACTER_LITERAL = "character_literal"
    NULL_LITERAL = "null_literal"

    # Structural pieces
    VARIABLE_DECLARATOR = "variable_declarator"
    MODIFIERS = "modifiers"
    FORMAL_PARAMETERS = "formal_parameters"
    FORMAL_PARAMETER = "formal_parameter"
    ARGUMENT_LIST = "argument_list"
    TYPE = "type"

    OTHER = "other"

    @property
    def is_statement(self) -> bool:
        return self in STATEMENT_KINDS

    @property
    def is_literal(self) -> bool:
        return self in LITERAL_KINDS

    @property
    def is_loop(self) -> bool:
        return self in LOOP_KINDS

    @property
    def is_type_declaration(self) -> bool:
        return self in TYPE_DECLARATION_KINDS


STATEMENT_KINDS = frozenset({
    NodeKind.BLOCK,
    NodeKind.LOCAL_VARIABLE_DECLARATION,
    NodeKind.EXPRESSION_STATEMENT,
    NodeKind.IF_STATEMENT,
    NodeKind.WHILE_STATEMENT,
    NodeKind.DO_STATEMENT,
    NodeKind.FOR_STATEMENT,
    NodeKind.ENHANCED_FOR_STATEMENT,
    NodeKind.TRY_STATEMENT,
    NodeKind.RETURN_STATEMENT,
    NodeKind.BREAK_STATEMENT,
    NodeKind.CONTINUE_STATEMENT,
    NodeKind.THROW_STATEMENT,
    NodeKind.SWITCH_STATEMENT,
    NodeKind.SYNCHRONIZED_STATEMENT,
    NodeKind.LABELED_STATEMENT,
    NodeKind.ASSERT_STATEMENT,
    NodeKind.YIELD_STATEMENT,
    NodeKind.CONSTRUCTOR_INVOCATION,
})

LITERAL_KINDS = frozenset({
    NodeKind.BOOLEAN_LITERAL,
    NodeKind.NUMBER_LITERAL,
    NodeKind.STRING_LITERAL,
    NodeKind.CHARACTER_LITERAL,
})

LOOP_KINDS = frozenset({
    NodeKind.WHILE_STATEMENT,
    NodeKind.DO_STATEMENT,
    NodeKind.FOR_STATEMENT,
    NodeKind.ENHANCED_FOR_STATEMENT,
})

TYPE_DECLARATION_KINDS = frozenset({
    NodeKind.CLASS_DECLARATION,
    NodeKind.INTERFACE_DECLARATION,
    NodeKind.ENUM_DECLARATION,
    NodeKind.RECORD_DECLARATION,
    NodeKind.ANNOTATION_TYPE_DECLARATION,
})

# tree-sitter-java node type -> NodeKind
TS_KIND_MAP: Dict[str, NodeKind] = {
    "program": NodeKind.PROGRAM,
    "class_declaration": NodeKind.CLASS_DECLARATION,
    "interface_declaration": NodeKind.INTERFACE_DECLARATION,
    "enum_declaration": NodeKind.ENUM_DECLARATION,
    "record_declaration": NodeKind.RECORD_DECLARATION,
    "annotation_type_declaration": NodeKind.ANNOTATION_TYPE_DECLARATION,
    "method_declaration": NodeKind.METHOD_DECLARATION,
    "constructor_declaration": NodeKind.CONSTRUCTOR_DECLARATION,
    "compact_constructor_declaration": NodeKind.CONSTRUCTOR_DECLARATION,
    "field_declaration": NodeKind.FIELD_DECLARATION,
    "constant_declaration": NodeKind.FIELD_DECLARATION,
    "static_initializer": NodeKind.INITIALIZER,
    "enum_constant": NodeKind.ENUM_CONSTANT,
    "class_body": NodeKind.TYPE_BODY,
    "interface_body": NodeKind.TYPE_BODY,
    "enum_body": NodeKind.TYPE_BODY,
    "enum_body_declarations": NodeKind.TYPE_BODY,
    "annotation_type_body": NodeKind.TYPE_BODY,
    "block": NodeKind.BLOCK,
    "constructor_body": NodeKind.BLOCK,
    "local_variable_declaration": NodeKind.LOCAL_VARIABLE_DECLARATION,
    "expression_statement": NodeKind.EXPRESSION_STATEMENT,
    "if_statement": NodeKind.IF_STATEMENT,
    "while_statement": NodeKind.WHILE_STATEMENT,
    "do_statement": NodeKind.DO_STATEMENT,
    "for_statement": NodeKind.FOR_STATEMENT,
    "enhanced_for_statement": NodeKind.ENHANCED_FOR_STATEMENT,
    "try_statement": NodeKind.TRY_STATEMENT,
    "try_with_resources_statement": NodeKind.TRY_STATEMENT,
    "return_statement": NodeKind.RETURN_STATEMENT,
    "break_statement": NodeKind.BREAK_STATEMENT,
    "continue_statement": NodeKind.CONTINUE_STATEMENT,
    "throw_statement": NodeKind.THROW_STATEMENT,
    "switch_expression": NodeKind.SWITCH_STATEMENT,
    "switch_statement": NodeKind.SWITCH_STATEMENT,
    "synchronized_statement": NodeKind.SYNCHRONIZED_STATEMENT,
    "labeled_statement": NodeKind.LABELED_STATEMENT,
    "assert_statement": NodeKind.ASSERT_STATEMENT,
    "yield_statement": NodeKind.YIELD_STATEMENT,
    "explicit_constructor_invocation": NodeKind.CONSTRUCTOR_INVOCATION,
    "catch_clause": NodeKind.CATCH_CLAUSE,
    "finally_clause": NodeKind.FINALLY_CLAUSE,
    "assignment_expression": NodeKind.ASSIGNMENT,
    "binary_expression": NodeKind.BINARY_EXPRESSION,
    "unary_expression": NodeKind.UNARY_EXPRESSION,
    "update_expression": NodeKind.UNARY_EXPRESSION,
    "ternary_expression": NodeKind.CONDITIONAL_EXPRESSION,
    "method_invocation": NodeKind.METHOD_INVOCATION,
    "object_creation_expression": NodeKind.OBJECT_CREATION,
    "parenthesized_expression": NodeKind.PARENTHESIZED_EXPRESSION,
    "cast_expression": NodeKind.CAST_EXPRESSION,
    "lambda_expression": NodeKind.LAMBDA_EXPRESSION,
    "field_access": NodeKind.FIELD_ACCESS,
    "array_access": NodeKind.ARRAY_ACCESS,
    "array_creation_expression": NodeKind.ARRAY_CREATION,
    "array_initializer": NodeKind.ARRAY_INITIALIZER,
    "identifier": NodeKind.IDENTIFIER,
    "true": NodeKind.BOOLEAN_LITERAL,
    "false": NodeKind.BOOLEAN_LITERAL,
    "decimal_integer_literal": NodeKind.NUMBER_LITERAL,
    "hex_integer_literal": NodeKind.NUMBER_LITERAL,
    "octal_integer_literal": NodeKind.NUMBER_LITERAL,
    "binary_integer_literal": NodeKind.NUMBER_LITERAL,
    "decimal_floating_point_literal": NodeKind.NUMBER_LITERAL,
    "hex_floating_point_literal": NodeKind.NUMBER_LITERAL,
    "string_literal": NodeKind.STRING_LITERAL,
    "text_block": NodeKind.STRING_LITERAL,
    "character_literal": NodeKind.CHARACTER_LITERAL,
    "null_literal": NodeKind.NULL_LITERAL,
    "variable_declarator": NodeKind.VARIABLE_DECLARATOR,
    "modifiers": NodeKind.MODIFIERS,
    "formal_parameters": NodeKind.FORMAL_PARAMETERS,
    "formal_parameter": NodeKind.FORMAL_PARAMETER,
    "spread_parameter": NodeKind.FORMAL_PARAMETER,
    "argument_list": NodeKind.ARGUMENT_LIST,
    "integral_type": NodeKind.TYPE,
    "floating_point_type": NodeKind.TYPE,
    "boolean_type": NodeKind.TYPE,
    "void_type": NodeKind.TYPE,
    "type_identifier": NodeKind.TYPE,
    "scoped_type_identifier": NodeKind.TYPE,
    "generic_type": NodeKind.TYPE,
    "array_type": NodeKind.TYPE,
}


def kind_for(ts_type: str, parent_ts_type: Optional[str]) -> NodeKind:
    """Map a tree-sitter node type to its NodeKind."""
    # An instance initializer is a bare block directly inside a class body
    if ts_type == "block" and parent_ts_type in ("class_body", "enum_body_declarations"):
        return NodeKind.INITIALIZER
    return TS_KIND_MAP.get(ts_type, NodeKind.OTHER)


@dataclass(frozen=True, eq=False)
class SyntaxNode:
    """
    One node of a parsed Java file.

    Nodes are compared by identity. `path` (child indexes from the root) is
    the structural id that stays stable across re-parses of unedited text.
    """

    kind: NodeKind
    ts_type: str
    start_byte: int
    end_byte: int
    line: int
    column: int
    end_line: int
    path: Tuple[int, ...]
    children: Tuple["SyntaxNode", ...]
    fields: Mapping[str, Tuple["SyntaxNode", ...]]
    tokens: Tuple[str, ...]
    source: bytes = field(repr=False)
    parent: Optional["SyntaxNode"] = field(default=None, repr=False)

    @cached_property
    def text(self) -> str:
        return self.source[self.start_byte:self.end_byte].decode("utf-8")

    @property
    def span_length(self) -> int:
        return self.end_byte - self.start_byte

    @property
    def position(self) -> Tuple[int, int]:
        return (self.line, self.column)

    def child(self, field_name: str) -> Optional["SyntaxNode"]:
        """First child stored under a grammar field, or None."""
        found = self.fields.get(field_name)
        return found[0] if found else None

    def children_by_field(self, field_name: str) -> Tuple["SyntaxNode", ...]:
        return self.fields.get(field_name, ())

    def children_of_kind(self, *kinds: NodeKind) -> List["SyntaxNode"]:
        return [c for c in self.children if c.kind in kinds]

    def has_token(self, token: str) -> bool:
        return token in self.tokens

    def walk(self) -> Iterator["SyntaxNode"]:
        """Yield all descendants in pre-order (self excluded)."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def ancestors(self) -> Iterator["SyntaxNode"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def same_shape(self, other: "SyntaxNode") -> bool:
        """Structural match used for correlation: same kind, grammar type and printed text."""
        return (
            other is not None
            and self.kind == other.kind
            and self.ts_type == other.ts_type
            and self.text == other.text
        )

    def describe(self, width: int = 60) -> str:
        snippet = " ".join(self.text.split())
        if len(snippet) > width:
            snippet = snippet[:width - 3] + "..."
        return f"{self.kind.value}@{self.line}:{self.column} {snippet}"

    def __repr__(self) -> str:
        return f"SyntaxNode({self.describe(40)!r})"


@dataclass(frozen=True)
class TextEdit:
    """A pending replacement of `source[start_byte:end_byte]` keyed by node id."""

    start_byte: int
    end_byte: int
    text: str
    node_path: Tuple[int, ...]
    seq: int

    @property
    def is_insert(self) -> bool:
        return self.start_byte == self.end_byte


class SyntaxTree:
    """
    Parsed Java source plus the edits recorded against it.

    Each mutation attempt works on its own SyntaxTree instance; edits on one
    tree are never visible from another.
    """

    def __init__(
        self,
        source: str,
        root: SyntaxNode,
        file_path: Optional[str] = None,
        language: str = "java",
        source_bytes: Optional[bytes] = None,
    ):
        self.source = source
        self.source_bytes = source_bytes if source_bytes is not None else source.encode("utf-8")
        self.root = root
        self.file_path = file_path
        self.language = language
        self.digest = hashlib.sha256(self.source_bytes).hexdigest()
        self.prior_nodes: List[SyntaxNode] = []
        self._edits: List[TextEdit] = []

    @property
    def edits(self) -> Tuple[TextEdit, ...]:
        return tuple(self._edits)

    @property
    def has_edits(self) -> bool:
        return bool(self._edits)

    def owns(self, node: SyntaxNode) -> bool:
        return self.node_at_path(node.path) is node

    def node_at_path(self, path: Tuple[int, ...]) -> Optional[SyntaxNode]:
        """Resolve a structural id to a node of this tree."""
        node = self.root
        for index in path:
            if index >= len(node.children):
                return None
            node = node.children[index]
        return node

    def line_text(self, line: int) -> str:
        lines = self.source.splitlines()
        if 1 <= line <= len(lines):
            return lines[line - 1]
        return ""

    # Edit recording ---------------------------------------------------

    def _record(self, start: int, end: int, text: str, node: SyntaxNode) -> None:
        self._edits.append(TextEdit(start, end, text, node.path, len(self._edits)))

    def replace(self, node: SyntaxNode, text: str) -> None:
        self._record(node.start_byte, node.end_byte, text, node)

    def insert_before(self, node: SyntaxNode, text: str) -> None:
        self._record(node.start_byte, node.start_byte, text, node)

    def insert_after(self, node: SyntaxNode, text: str) -> None:
        self._record(node.end_byte, node.end_byte, text, node)

    def remove(self, node: SyntaxNode) -> None:
        self._record(node.start_byte, node.end_byte, "", node)

    def mark_prior(self, node: SyntaxNode) -> None:
        """Record a node produced or touched by an earlier transformation pass."""
        if node not in self.prior_nodes:
            self.prior_nodes.append(node)

    def discard_edits(self) -> None:
        self._edits.clear()

    def apply_edits(self) -> str:
        """
        Apply every pending edit to the original text and return the result.

        Raises:
            RewriteConflictError: If two replacements overlap.
        """
        if not self._edits:
            return self.source

        ordered = sorted(self._edits, key=lambda e: (e.start_byte, e.end_byte, e.seq))
        previous_end = -1
        previous: Optional[TextEdit] = None
        for edit in ordered:
            if previous is not None and edit.start_byte < previous_end:
                raise RewriteConflictError(
                    f"Edit at bytes {edit.start_byte}-{edit.end_byte} overlaps "
                    f"edit at bytes {previous.start_byte}-{previous.end_byte}"
                )
            if edit.end_byte >= previous_end:
                previous_end = edit.end_byte
                previous = edit

        # Apply back to front so earlier offsets stay valid. At a shared offset
        # the replacement goes first, then inserts in reverse registration order.
        result = self.source_bytes
        apply_order = sorted(
            self._edits,
            key=lambda e: (e.start_byte, 0 if e.is_insert else 1, e.seq),
            reverse=True,
        )
        for edit in apply_order:
            result = result[:edit.start_byte] + edit.text.encode("utf-8") + result[edit.end_byte:]
        return result.decode("utf-8")

    def __repr__(self) -> str:
        return f"SyntaxTree({self.file_path or '<string>'}, edits={len(self._edits)})"


def freeze_fields(fields: Dict[str, List[SyntaxNode]]) -> Mapping[str, Tuple[SyntaxNode, ...]]:
    return MappingProxyType({name: tuple(nodes) for name, nodes in fields.items()})
