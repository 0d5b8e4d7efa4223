from collections import deque
from typing import Dict, List, Optional, Set

from equimutant.exceptions import BugReportError
from equimutant.index import SyntaxIndex
from equimutant.index.tree_utils import (
    assigned_name,
    condition_of,
    declared_names,
    direct_block_of,
    enclosing_method,
    expression_of,
    flatten_statements,
    identifiers_in,
    is_literal,
    variable_declarators,
)
from equimutant.logging_config import logger
from equimutant.parser.nodes import NodeKind, SyntaxNode
from equimutant.schemas import BugReport
from .base import LocationStrategy

PRIOR_CONDITION_KINDS = (
    NodeKind.IF_STATEMENT,
    NodeKind.WHILE_STATEMENT,
    NodeKind.DO_STATEMENT,
    NodeKind.FOR_STATEMENT,
)


def validate_bug_report(bug_report: Optional[BugReport]) -> BugReport:
    """
    Check that a bug report can drive guided selection.

    Raises:
        BugReportError: If the report is missing, has has_bugs=False, or has no lines
    """
    if bug_report is None:
        raise BugReportError.missing()
    if not bug_report.has_bugs:
        raise BugReportError("Guided selection requires bug information with has_bugs=True")
    if not bug_report.lines:
        raise BugReportError("Guided selection requires at least one bug line number")
    return bug_report


class _OrderedNodeSet:
    """Insertion-ordered set of nodes keyed by structural id."""

    def __init__(self, nodes=()):
        self._nodes: Dict[tuple, SyntaxNode] = {}
        for node in nodes:
            self.add(node)

    def add(self, node: Optional[SyntaxNode]) -> bool:
        if node is None or node.path in self._nodes:
            return False
        self._nodes[node.path] = node
        return True

    def extend(self, nodes) -> None:
        for node in nodes:
            self.add(node)

    def discard_if(self, predicate) -> None:
        self._nodes = {path: n for path, n in self._nodes.items() if not predicate(n)}

    def __contains__(self, node: SyntaxNode) -> bool:
        return node.path in self._nodes

    def __iter__(self):
        return iter(list(self._nodes.values()))

    def __len__(self) -> int:
        return len(self._nodes)


def _right_hand_side(statement: SyntaxNode) -> Optional[SyntaxNode]:
    """Initializer of a local declaration's first declarator, or the value of an assignment statement."""
    if statement.kind == NodeKind.LOCAL_VARIABLE_DECLARATION:
        declarators = variable_declarators(statement)
        return declarators[0].child("value") if declarators else None
    expression = _assignment_of(statement)
    if expression is not None:
        return expression.child("right")
    return None


def _assignment_of(statement: SyntaxNode) -> Optional[SyntaxNode]:
    expression = expression_of(statement)
    if expression is not None and expression.kind == NodeKind.ASSIGNMENT:
        return expression
    return None


def _simple_assigned_name(statement: SyntaxNode) -> Optional[str]:
    """Name of a plain `x = ...` target; field and array writes do not count."""
    assignment = _assignment_of(statement)
    if assignment is None:
        return None
    left = assignment.child("left")
    if left is not None and left.kind == NodeKind.IDENTIFIER:
        return left.text
    return None


class GuidedStrategy(LocationStrategy):
    """
    Bug-report guided selection with data-flow back-tracing.

    Starting from the nodes on the reported lines, the selection grows to the
    tests of prior control-flow wrappers, literal `if` conditions around the
    bug, statements writing to fields declared on a bug line, and the
    statements that define the variables a bug statement reads.
    """

    @property
    def name(self) -> str:
        return "GUIDED_LOCATION"

    def select(self, index: SyntaxIndex, bug_report: Optional[BugReport]) -> List[SyntaxNode]:
        """
        Args:
            index: Index of the tree to search
            bug_report: Report with has_bugs=True and at least one line

        Returns:
            Candidate nodes in discovery order, without duplicates

        Raises:
            BugReportError: If the report is unusable
        """
        report = validate_bug_report(bug_report)
        bug_lines = set(report.lines)

        # Exact matches on the reported lines
        collected = _OrderedNodeSet(n for n in index.all_nodes if n.line in bug_lines)

        # Tests and initializers touched by earlier transformation passes
        for prior in index.prior_nodes:
            if prior.kind in PRIOR_CONDITION_KINDS:
                collected.add(condition_of(prior))
            elif prior.kind == NodeKind.FIELD_DECLARATION:
                declarators = variable_declarators(prior)
                if declarators:
                    collected.add(declarators[0].child("value"))

        if not len(collected):
            logger.debug(f"No nodes found on bug lines {sorted(bug_lines)}")
            return []

        # Literal if-conditions guarding a collected statement
        hoisted = []
        for node in collected:
            block = direct_block_of(node)
            outer = block.parent if block is not None else None
            if outer is not None and outer.kind == NodeKind.IF_STATEMENT:
                test = condition_of(outer)
                if is_literal(test):
                    hoisted.append(test)
        collected.extend(hoisted)

        field_writers = self._field_writers(index, collected)
        self._trace_data_flow(index, collected)

        collected.discard_if(
            lambda n: n.kind.is_type_declaration or n.kind == NodeKind.INITIALIZER
        )
        collected.extend(field_writers)

        result = list(collected)
        logger.debug(f"Guided selection for lines {sorted(bug_lines)} produced {len(result)} candidates")
        return result

    def _field_writers(self, index: SyntaxIndex, collected: _OrderedNodeSet) -> List[SyntaxNode]:
        """Assignment statements, in any body, whose target is a field declared in `collected`."""
        writers: List[SyntaxNode] = []
        for node in collected:
            if node.kind != NodeKind.FIELD_DECLARATION:
                continue
            names = declared_names(node)
            if not names:
                continue
            field_name = names[0]
            for statements in index.method_statements.values():
                for statement in statements:
                    assignment = _assignment_of(statement)
                    if assignment is not None and assigned_name(assignment) == field_name:
                        writers.append(statement)
        return writers

    def _trace_data_flow(self, index: SyntaxIndex, collected: _OrderedNodeSet) -> None:
        """
        Work-queue back-trace: for each definition in `collected`, add the
        statements of its enclosing method that define a name it reads.
        Newly found statements are traced too, until nothing new appears.
        """
        queue = deque(collected)
        while queue:
            node = queue.popleft()
            rhs = _right_hand_side(node)
            sources: Set[str] = identifiers_in(rhs)
            if not sources:
                continue

            method = enclosing_method(node)
            body = method.child("body") if method is not None else None
            if body is not None:
                for statement in flatten_statements(body.children):
                    if statement in collected:
                        continue
                    defines_source = _simple_assigned_name(statement) in sources
                    if not defines_source and statement.kind == NodeKind.LOCAL_VARIABLE_DECLARATION:
                        names = declared_names(statement)
                        defines_source = bool(names) and names[0] in sources
                    if defines_source:
                        collected.add(statement)
                        queue.append(statement)

            for source in sources:
                collected.extend(index.field_statements.get(source, []))
