"""
Tests for the built-in transforms and the indentation helpers.

Each test checks a candidate against the original tree, applies the transform
to the same tree, and verifies that the rendered text is the expected rewrite
and still parses.
"""

import pytest

from equimutant.index import build_index
from equimutant.index.tree_utils import first_statement_in_block
from equimutant.parser import NodeKind, parse_source, render
from equimutant.transform import (
    AddBrackets,
    AddLocalAssignment,
    AddRedundantLiteral,
    AddStaticModifier,
    BlockFormatter,
    CFWrapperWithDoWhile,
    CFWrapperWithForTrue1,
    CFWrapperWithIfFalse,
    CFWrapperWithIfTrue,
    CFWrapperWithWhileTrue,
    CompoundExpression1,
    CompoundExpression2,
    CompoundExpression3,
    detect_indent_unit,
)
from equimutant.transform.formatting import get_indent

METHOD_SOURCE = """class A {
    private int count = 0;
    int[] data;

    void m(boolean flag) {
        int x = 0;
        x = x + 1;
        System.out.println(x);
        if (flag) x++;
        return;
    }
}
"""


def _prepare(source, text):
    tree = parse_source(source)
    index = build_index(tree)
    node = next(n for n in index.all_nodes if n.text == text)
    return tree, index, node


def _apply(transform, source, text, pick=0):
    """Check + apply on the original tree; returns the rendered text (or None if not applied)."""
    tree, index, node = _prepare(source, text)
    targets = transform.check(index, node)
    assert targets, f"{transform.name} not applicable to {text!r}"
    applied = transform.apply(targets[pick], tree, first_statement_in_block(node), node)
    if not applied:
        return None
    result = render(tree)
    parse_source(result)
    return result


class TestWrappers:
    """Test the control-flow wrapper transforms."""

    def test_if_true(self):
        result = _apply(CFWrapperWithIfTrue(), METHOD_SOURCE, "x = x + 1;")
        assert "        if (true) {\n            x = x + 1;\n        }\n" in result

    def test_while_true(self):
        result = _apply(CFWrapperWithWhileTrue(), METHOD_SOURCE, "x = x + 1;")
        assert "while (true) {\n            x = x + 1;\n            break;\n        }" in result

    def test_for_true(self):
        result = _apply(CFWrapperWithForTrue1(), METHOD_SOURCE, "x = x + 1;")
        assert "for (; true; ) {\n            x = x + 1;\n            break;\n        }" in result

    def test_do_while(self):
        result = _apply(CFWrapperWithDoWhile(), METHOD_SOURCE, "System.out.println(x);")
        assert "do {\n            System.out.println(x);\n        } while (false);" in result

    def test_if_false_inserts_dead_copy(self):
        result = _apply(CFWrapperWithIfFalse(), METHOD_SOURCE, "x = x + 1;")
        expected = "        if (false) {\n            x = x + 1;\n        }\n        x = x + 1;\n"
        assert expected in result

    def test_if_false_on_single_statement_body(self):
        """A statement that is not directly in a block gets a block of its own."""
        tree, index, statement = _prepare(METHOD_SOURCE, "if (flag) x++;")
        body = statement.child("consequence")
        transform = CFWrapperWithIfFalse()
        assert transform.check(index, body) == [body]
        assert transform.apply(body, tree, first_statement_in_block(body), body)
        result = render(tree)
        parse_source(result)
        assert "if (flag) {" in result
        assert "if (false) {" in result
        assert result.count("x++;") == 2

    @pytest.mark.parametrize("text", ["int x = 0;", "return;", "private int count = 0;"])
    def test_unwrappable_statements(self, text):
        _, index, node = _prepare(METHOD_SOURCE, text)
        assert CFWrapperWithIfTrue().check(index, node) == []

    def test_control_body_is_skipped(self):
        _, index, statement = _prepare(METHOD_SOURCE, "if (flag) x++;")
        assert CFWrapperWithIfTrue().check(index, statement.child("consequence")) == []

    def test_sole_statement_is_refused(self):
        source = "class A {\n    void m() {\n        run();\n    }\n}\n"
        tree, index, node = _prepare(source, "run();")
        transform = CFWrapperWithWhileTrue()
        assert transform.check(index, node) == [node]
        assert transform.apply(node, tree, first_statement_in_block(node), node) is False
        assert not tree.has_edits

    def test_do_while_accepts_sole_statement(self):
        source = "class A {\n    void m() {\n        run();\n    }\n}\n"
        assert "} while (false);" in _apply(CFWrapperWithDoWhile(), source, "run();")

    def test_do_while_skips_finalize(self):
        source = "class A {\n    void finalize() {\n        a();\n        b();\n    }\n}\n"
        _, index, node = _prepare(source, "a();")
        assert CFWrapperWithDoWhile().check(index, node) == []

    def test_wrapper_marks_prior(self):
        tree, index, node = _prepare(METHOD_SOURCE, "x = x + 1;")
        CFWrapperWithIfTrue().apply(node, tree, first_statement_in_block(node), node)
        assert tree.prior_nodes == [node]


class TestExpressionTransforms:
    """Test parenthesizing and neutral-operand transforms."""

    def test_add_brackets_assignment(self):
        assert "x = (x + 1);" in _apply(AddBrackets(), METHOD_SOURCE, "x = x + 1;")

    def test_add_brackets_declaration(self):
        assert "int x = (0);" in _apply(AddBrackets(), METHOD_SOURCE, "int x = 0;")

    def test_add_brackets_field(self):
        assert "private int count = (0);" in _apply(AddBrackets(), METHOD_SOURCE, "private int count = 0;")

    @pytest.mark.parametrize("text", ["System.out.println(x);", "int[] data;"])
    def test_add_brackets_not_applicable(self, text):
        _, index, node = _prepare(METHOD_SOURCE, text)
        assert AddBrackets().check(index, node) == []

    def test_add_brackets_skips_array_initializer(self):
        source = "class A { int[] v = {1, 2}; }"
        _, index, node = _prepare(source, "int[] v = {1, 2};")
        assert AddBrackets().check(index, node) == []

    def test_redundant_literal_integer(self):
        assert "int x = (1 + 0 - 1);" in _apply(AddRedundantLiteral(), METHOD_SOURCE, "int x = 0;")

    def test_redundant_literal_floating(self):
        source = "class A { void m() { double d = 2.5; } }"
        assert "(1.0 + 2.5 - 1.0)" in _apply(AddRedundantLiteral(), source, "double d = 2.5;")

    def test_redundant_literal_hex_float_declined(self):
        source = "class A { void m() { double d = 0x1.8p1; } }"
        assert _apply(AddRedundantLiteral(), source, "double d = 0x1.8p1;") is None

    def test_literal_transforms_expand_candidates(self):
        """check returns every literal of the right kind below the candidate."""
        source = "class A { void m() { f(1, 2, true); } }"
        _, index, node = _prepare(source, "f(1, 2, true);")
        assert [n.text for n in CompoundExpression3().check(index, node)] == ["1", "2"]
        assert [n.text for n in CompoundExpression1().check(index, node)] == ["true"]

    def test_compound_expression_1(self):
        source = "class A { void m() { boolean a = true; boolean b = false; } }"
        assert "(true || false)" in _apply(CompoundExpression1(), source, "boolean a = true;")
        assert "(false && true)" in _apply(CompoundExpression1(), source, "boolean b = false;")

    def test_compound_expression_2(self):
        source = "class A { void m() { boolean a = true; boolean b = false; } }"
        assert "(true | false)" in _apply(CompoundExpression2(), source, "boolean a = true;")
        assert "(false & true)" in _apply(CompoundExpression2(), source, "boolean b = false;")

    def test_compound_expression_3_on_literal_candidate(self):
        """A literal candidate expands to itself."""
        source = "class A { void m() { int y = 5; } }"
        tree = parse_source(source)
        index = build_index(tree)
        literal = next(n for n in tree.root.walk() if n.kind == NodeKind.NUMBER_LITERAL)
        assert CompoundExpression3().check(index, literal) == [literal]
        assert CompoundExpression3().apply(literal, tree, None, literal)
        assert "int y = (0 + 5);" in render(tree)


class TestDeclarationTransforms:
    """Test declaration splitting and the static modifier."""

    def test_add_local_assignment(self):
        result = _apply(AddLocalAssignment(), METHOD_SOURCE, "int x = 0;")
        assert "        int x;\n        x = 0;\n" in result

    def test_add_local_assignment_keeps_modifiers(self):
        source = "class A {\n    void m() {\n        final String s = name();\n    }\n}\n"
        result = _apply(AddLocalAssignment(), source, "final String s = name();")
        assert "final String s;\n        s = name();" in result

    @pytest.mark.parametrize("statement", [
        "int a = 1, b = 2;",
        "var v = 1;",
        "int[] arr = {1};",
        "final int[] f = new int[1];",
        "int plain;",
    ])
    def test_add_local_assignment_not_applicable(self, statement):
        source = "class A { void m() { " + statement + " } }"
        _, index, node = _prepare(source, statement)
        assert AddLocalAssignment().check(index, node) == []

    def test_add_static_modifier(self):
        result = _apply(AddStaticModifier(), METHOD_SOURCE, "private int count = 0;")
        assert "static private int count = 0;" in result

    def test_add_static_modifier_without_modifiers(self):
        assert "static int[] data;" in _apply(AddStaticModifier(), METHOD_SOURCE, "int[] data;")

    def test_add_static_modifier_skips_static(self):
        source = "class A { static int n = 1; }"
        _, index, node = _prepare(source, "static int n = 1;")
        assert AddStaticModifier().check(index, node) == []


class TestFormatting:
    """Test indentation detection and block rendering."""

    def test_get_indent(self):
        assert get_indent("    code") == "    "
        assert get_indent("\t\tcode") == "\t\t"
        assert get_indent("no indent") == ""

    def test_detect_spaces(self):
        assert detect_indent_unit(METHOD_SOURCE) == "    "
        assert detect_indent_unit("class A {\n  int x;\n    int y;\n}\n") == "  "

    def test_detect_tabs(self):
        assert detect_indent_unit("class A {\n\tint x;\n\tint y;\n}\n") == "\t"

    def test_detect_default(self):
        assert detect_indent_unit("class A {}") == "    "

    def test_block_shifts_multiline_statements(self):
        source = "class A {\n    void m() {\n        call(a,\n            b);\n        other();\n    }\n}\n"
        tree, _, node = _prepare(source, "call(a,\n            b);")
        block = BlockFormatter(tree).block("if (true)", node, [node.text])
        assert block == "if (true) {\n            call(a,\n                b);\n        }"
