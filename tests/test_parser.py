"""
Tests for the parser package: tree conversion, rendering and edits.
"""

import pytest

from equimutant.exceptions import InputFileError, ParserError, RewriteConflictError
from equimutant.parser import NodeKind, parse_file, parse_source, render, reparse
from equimutant.parser.facade import _first_error_line

from conftest import BROKEN_SOURCE, CALCULATOR_SOURCE


class TestParseSource:
    """Test conversion of tree-sitter trees into SyntaxNodes."""

    def test_round_trip_is_lossless(self):
        """An unedited tree renders to exactly its source."""
        tree = parse_source(CALCULATOR_SOURCE)
        assert render(tree) == CALCULATOR_SOURCE
        assert not tree.has_edits

    def test_positions_are_one_based(self, calculator_tree):
        class_node = calculator_tree.root.children[0]
        assert class_node.kind == NodeKind.CLASS_DECLARATION
        assert class_node.position == (1, 1)
        assert class_node.end_line == 17

    def test_columns_count_characters(self):
        """A multi-byte character earlier on the line shifts the column by one, not by its byte length."""
        source = 'class A {\n    void m() {\n        String s = "héllo"; int z = 3;\n    }\n}\n'
        tree = parse_source(source)
        statement = next(n for n in tree.root.walk() if n.text == "int z = 3;")
        assert statement.position == (3, 29)
        assert statement.start_byte - source.encode("utf-8").rindex(b"\n", 0, statement.start_byte) == 30

    def test_fields_and_parents(self, calculator_tree):
        class_node = calculator_tree.root.children[0]
        name = class_node.child("name")
        assert name.kind == NodeKind.IDENTIFIER
        assert name.text == "Calculator"
        assert name.parent is class_node
        assert list(name.ancestors())[-1] is calculator_tree.root

    def test_paths_resolve_to_nodes(self, calculator_tree):
        """Every node's structural id resolves back to the node itself."""
        for node in calculator_tree.root.walk():
            assert calculator_tree.node_at_path(node.path) is node
            assert calculator_tree.owns(node)

    def test_comments_stay_in_text_only(self):
        source = "class A {\n    // note\n    int x = 1; /* tail */\n}\n"
        tree = parse_source(source)
        assert all("comment" not in n.ts_type for n in tree.root.walk())
        assert render(tree) == source

    def test_literal_kinds(self):
        tree = parse_source('class A { void m() { f(1, 2.5, true, "s", \'c\', null); } }')
        kinds = {n.kind for n in tree.root.walk()}
        assert NodeKind.NUMBER_LITERAL in kinds
        assert NodeKind.BOOLEAN_LITERAL in kinds
        assert NodeKind.STRING_LITERAL in kinds
        assert NodeKind.CHARACTER_LITERAL in kinds
        assert NodeKind.NULL_LITERAL in kinds
        assert not NodeKind.NULL_LITERAL.is_literal

    def test_instance_initializer_kind(self):
        tree = parse_source("class A {\n    int x;\n    {\n        x = 1;\n    }\n}\n")
        kinds = [n.kind for n in tree.root.walk()]
        assert NodeKind.INITIALIZER in kinds

    def test_modifier_tokens(self):
        tree = parse_source("class A { private static final int X = 1; }")
        modifiers = [n for n in tree.root.walk() if n.kind == NodeKind.MODIFIERS][0]
        assert modifiers.has_token("static")
        assert modifiers.has_token("final")

    def test_syntax_error_raises(self):
        with pytest.raises(ParserError) as exc_info:
            parse_source(BROKEN_SOURCE, file_path="Broken.java")
        assert "Broken.java" in str(exc_info.value)

    def test_empty_source(self):
        tree = parse_source("")
        assert tree.root.kind == NodeKind.PROGRAM
        assert tree.root.children == ()

    def test_reparse_is_independent(self, calculator_tree):
        clone = reparse(calculator_tree)
        assert clone is not calculator_tree
        assert clone.root is not calculator_tree.root
        assert clone.digest == calculator_tree.digest
        assert clone.file_path == calculator_tree.file_path


class TestParseFile:
    """Test file-level parsing errors."""

    def test_parse_file(self, calculator_file):
        tree = parse_file(calculator_file)
        assert tree.file_path == str(calculator_file)
        assert tree.source == CALCULATOR_SOURCE

    def test_missing_file(self, temp_dir):
        with pytest.raises(InputFileError):
            parse_file(temp_dir / "Missing.java")

    def test_unsupported_extension(self, temp_dir):
        path = temp_dir / "notes.txt"
        path.write_text("hello")
        with pytest.raises(ParserError):
            parse_file(path)

    def test_unparseable_file(self, broken_file):
        with pytest.raises(ParserError):
            parse_file(broken_file)

    def test_first_error_line(self):
        from equimutant.parser import get_parser
        ts_tree = get_parser("java").parse(BROKEN_SOURCE.encode("utf-8"))
        assert _first_error_line(ts_tree.root_node) >= 3


class TestEdits:
    """Test recording and batch application of TextEdits."""

    def _statement(self, tree, text):
        return next(n for n in tree.root.walk() if n.text == text and n.kind.is_statement)

    def test_replace(self, calculator_tree):
        node = self._statement(calculator_tree, "total = sum;")
        calculator_tree.replace(node, "total = sum + 0;")
        assert "        total = sum + 0;\n" in render(calculator_tree)

    def test_insert_before_and_after(self, calculator_tree):
        node = self._statement(calculator_tree, "total = sum;")
        calculator_tree.insert_before(node, "/*a*/")
        calculator_tree.insert_after(node, "/*b*/")
        assert "/*a*/total = sum;/*b*/" in render(calculator_tree)

    def test_insert_and_replace_at_same_offset(self, calculator_tree):
        """The insert lands in front of the replacement."""
        node = self._statement(calculator_tree, "total = sum;")
        calculator_tree.replace(node, "X;")
        calculator_tree.insert_before(node, "I;")
        assert "I;X;" in render(calculator_tree)

    def test_inserts_keep_registration_order(self, calculator_tree):
        node = self._statement(calculator_tree, "total = sum;")
        calculator_tree.insert_before(node, "A;")
        calculator_tree.insert_before(node, "B;")
        assert "A;B;total = sum;" in render(calculator_tree)

    def test_remove(self, calculator_tree):
        node = self._statement(calculator_tree, "total = sum;")
        calculator_tree.remove(node)
        assert "total = sum;" not in render(calculator_tree)

    def test_overlapping_replacements_conflict(self, calculator_tree):
        statement = self._statement(calculator_tree, "total = sum;")
        inner = statement.children[0]
        calculator_tree.replace(statement, "a = 1;")
        calculator_tree.replace(inner, "b = 2")
        with pytest.raises(RewriteConflictError):
            render(calculator_tree)

    def test_edits_do_not_touch_nodes(self, calculator_tree):
        node = self._statement(calculator_tree, "total = sum;")
        calculator_tree.replace(node, "total = 1;")
        assert node.text == "total = sum;"
        assert calculator_tree.source == CALCULATOR_SOURCE
        assert calculator_tree.edits[0].node_path == node.path

    def test_discard_edits(self, calculator_tree):
        node = self._statement(calculator_tree, "total = sum;")
        calculator_tree.replace(node, "total = 1;")
        calculator_tree.discard_edits()
        assert render(calculator_tree) == CALCULATOR_SOURCE

    def test_mark_prior(self, calculator_tree):
        node = self._statement(calculator_tree, "total = sum;")
        calculator_tree.mark_prior(node)
        calculator_tree.mark_prior(node)
        assert calculator_tree.prior_nodes == [node]
