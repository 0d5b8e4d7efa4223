from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from equimutant.logging_config import logger
from equimutant.parser.nodes import NodeKind, SyntaxNode, SyntaxTree
from .tree_utils import (
    METHOD_KINDS,
    declaration_body,
    declared_names,
    flatten_statements,
    identifiers_in,
    name_of,
    signature_of,
    type_members,
)


@dataclass
class SyntaxIndex:
    """
    Read-only views over one SyntaxTree.

    `all_nodes` is the ordered list of primary nodes: type declarations, their
    members, and the flattened statements of every method, constructor and
    initializer body. Statement lists and identifier sets are keyed by
    `Type:method:ParamType...` or `Type:Initializer<n>`.
    """

    tree: SyntaxTree
    all_nodes: List[SyntaxNode] = field(default_factory=list)
    type_declarations: List[SyntaxNode] = field(default_factory=list)
    method_statements: Dict[str, List[SyntaxNode]] = field(default_factory=dict)
    method_identifiers: Dict[str, Set[str]] = field(default_factory=dict)
    field_statements: Dict[str, List[SyntaxNode]] = field(default_factory=dict)
    declaration_keys: Dict[tuple, str] = field(default_factory=dict)

    @property
    def digest(self) -> str:
        return self.tree.digest

    @property
    def prior_nodes(self) -> List[SyntaxNode]:
        return self.tree.prior_nodes

    def key_for(self, declaration: Optional[SyntaxNode]) -> Optional[str]:
        if declaration is None:
            return None
        return self.declaration_keys.get(declaration.path)

    def statements_of(self, declaration: Optional[SyntaxNode]) -> List[SyntaxNode]:
        """Flattened statements of a method, constructor or initializer."""
        key = self.key_for(declaration)
        if key is None:
            return []
        return self.method_statements.get(key, [])

    def __len__(self) -> int:
        return len(self.all_nodes)


class _IndexBuilder:
    def __init__(self, tree: SyntaxTree):
        self.index = SyntaxIndex(tree=tree)
        self._initializer_count = 0

    def build(self) -> SyntaxIndex:
        for node in self.index.tree.root.children:
            if node.kind.is_type_declaration:
                self._visit_type(node)
        return self.index

    def _visit_type(self, type_node: SyntaxNode) -> None:
        index = self.index
        index.type_declarations.append(type_node)
        index.all_nodes.append(type_node)
        type_name = name_of(type_node)

        for member in type_members(type_node):
            if member.kind.is_type_declaration:
                self._visit_type(member)
                continue

            index.all_nodes.append(member)
            if member.kind == NodeKind.INITIALIZER:
                key = f"{type_name}:Initializer{self._initializer_count}"
                self._initializer_count += 1
                self._add_body(key, member)
            elif member.kind in METHOD_KINDS:
                self._add_body(f"{type_name}:{signature_of(member)}", member)
            elif member.kind == NodeKind.FIELD_DECLARATION:
                self._add_field(member)

    def _add_body(self, key: str, declaration: SyntaxNode) -> None:
        index = self.index
        body = declaration_body(declaration)
        if body is not None and body.children:
            statements = flatten_statements(body.children)
            index.all_nodes.extend(statements)
            identifiers: Set[str] = set()
            for statement in body.children:
                identifiers |= identifiers_in(statement)
        else:
            statements = []
            identifiers = set()

        if key in index.method_statements:
            logger.debug(f"Duplicate declaration key '{key}', later declaration wins")
        index.method_statements[key] = statements
        index.method_identifiers[key] = identifiers
        index.declaration_keys[declaration.path] = key

    def _add_field(self, declaration: SyntaxNode) -> None:
        names = declared_names(declaration)
        if not names:
            return
        self.index.field_statements.setdefault(names[0], []).append(declaration)


def build_index(tree: SyntaxTree) -> SyntaxIndex:
    """
    Build the SyntaxIndex of a parsed tree. Never mutates the tree.

    Args:
        tree: Parsed source

    Returns:
        SyntaxIndex over `tree`
    """
    index = _IndexBuilder(tree).build()
    logger.debug(
        f"Indexed {tree.file_path or '<string>'}: {len(index.all_nodes)} primary nodes, "
        f"{len(index.type_declarations)} types, {len(index.method_statements)} bodies"
    )
    return index
