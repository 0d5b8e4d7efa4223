"""
Tests for the pydantic result and request models.
"""

import pytest
from pydantic import ValidationError

from equimutant.exceptions import BugReportError
from equimutant.schemas import (
    AttemptRecord,
    BugReport,
    Mutant,
    MutationOutcome,
    MutationResult,
    NodeDescriptor,
    SelectionResult,
)
from equimutant.strategy import GuidedStrategy

from conftest import node_on_line


class TestBugReport:
    """Test BugReport validation."""

    def test_create(self):
        report = BugReport.create(True, [3, 9])
        assert report.has_bugs
        assert report.lines == (3, 9)

    def test_at_lines(self):
        assert BugReport.at_lines(4).lines == (4,)

    def test_no_bugs_without_lines(self):
        report = BugReport.create(False)
        assert not report.has_bugs
        assert report.lines == ()

    @pytest.mark.parametrize("lines", [[], [0], [5, -1]])
    def test_invalid_lines(self, lines):
        with pytest.raises(BugReportError):
            BugReport.create(True, lines)

    def test_direct_construction_validates(self):
        with pytest.raises(ValidationError):
            BugReport(has_bugs=True, lines=[])

    def test_frozen(self):
        report = BugReport.at_lines(1)
        with pytest.raises(ValidationError):
            report.has_bugs = False

    def test_lines_cannot_be_changed_after_validation(self, calculator_index):
        """A validated report cannot grow a non-positive line behind the validator's back."""
        report = BugReport.at_lines(7)
        with pytest.raises(AttributeError):
            report.lines.append(0)
        with pytest.raises(ValidationError):
            report.lines = (7, 0)

        selected = GuidedStrategy().select(calculator_index, report)
        assert report.lines == (7,)
        assert {node.line for node in selected} == {6, 7}


class TestNodeDescriptor:
    """Test node snapshots."""

    def test_from_node(self, calculator_index):
        node = node_on_line(calculator_index, 9)
        descriptor = NodeDescriptor.from_node(node)
        assert descriptor.kind == "expression_statement"
        assert (descriptor.line, descriptor.column) == (9, 13)
        assert descriptor.snippet == "total = total + 1;"
        assert descriptor.span_length == len("total = total + 1;")
        assert descriptor.path == list(node.path)
        assert descriptor.label() == "expression_statement@9:13"

    def test_snippet_is_single_line(self, calculator_index):
        method = node_on_line(calculator_index, 5)
        snippet = NodeDescriptor.from_node(method).snippet
        assert "\n" not in snippet
        assert len(snippet) <= 80


class TestMutationResult:
    """Test result aggregation helpers."""

    def _descriptor(self):
        return NodeDescriptor(kind="block", line=1, column=1, span_length=2)

    def test_counts_and_paths(self):
        result = MutationResult(
            success=True,
            outcome=MutationOutcome.SUCCESS,
            mutants=[
                Mutant(plugin_name="A", target=self._descriptor(), generated_text="x", output_path="/o/1.java"),
                Mutant(plugin_name="B", target=self._descriptor(), generated_text="y"),
            ],
        )
        assert result.mutant_count == 2
        assert result.output_paths == ["/o/1.java"]

    def test_json_dump(self):
        result = MutationResult(
            success=False,
            outcome=MutationOutcome.ALL_ATTEMPTS_FAILED,
            attempts=[AttemptRecord(
                plugin_name="A", candidate=self._descriptor(), status="apply_failed", message="declined"
            )],
        )
        data = result.model_dump(mode="json")
        assert data["outcome"] == "all_attempts_failed"
        assert data["attempts"][0]["status"] == "apply_failed"

    def test_attempt_status_is_closed(self):
        with pytest.raises(ValidationError):
            AttemptRecord(plugin_name="A", candidate=self._descriptor(), status="exploded", message="")

    def test_selection_result(self):
        result = SelectionResult(strategy="TARGET_LOCATION", input_path="A.java", candidates=[self._descriptor()])
        assert result.candidate_count == 1
