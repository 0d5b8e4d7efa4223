"""
Tests for TransformRegistry and the Transform base class.
"""

import pytest

from equimutant.exceptions import InvalidArgumentError, PluginNotFoundError
from equimutant.parser import NodeKind
from equimutant.transform import AddBrackets, Transform, TransformRegistry, default_transforms

DEFAULT_NAMES = [
    "AddBrackets",
    "AddLocalAssignment",
    "AddRedundantLiteral",
    "AddStaticModifier",
    "CFWrapperWithDoWhile",
    "CFWrapperWithForTrue1",
    "CFWrapperWithIfFalse",
    "CFWrapperWithIfTrue",
    "CFWrapperWithWhileTrue",
    "CompoundExpression1",
    "CompoundExpression2",
    "CompoundExpression3",
]


class NeverApplies(Transform):
    def check(self, index, node):
        return []

    def apply(self, target, tree, sibling, source):
        return False


class BrokenCheck(Transform):
    def check(self, index, node):
        raise RuntimeError("boom")

    def apply(self, target, tree, sibling, source):
        return False


class Renamed(NeverApplies):
    @property
    def name(self):
        return "AddBrackets"


class TestTransformBase:
    """Test the Transform defaults."""

    def test_name_is_class_name(self):
        assert NeverApplies().name == "NeverApplies"

    def test_default_description(self):
        assert NeverApplies().description == "Code transformation: NeverApplies"

    def test_abstract(self):
        with pytest.raises(TypeError):
            Transform()

    def test_builtin_descriptions(self):
        for transform in default_transforms():
            assert transform.description
            assert not transform.description.startswith("Code transformation:")


class TestTransformRegistry:
    """Test registration, lookup and enumeration."""

    def test_default_set(self):
        registry = TransformRegistry.default()
        assert registry.names() == DEFAULT_NAMES
        assert len(registry) == 12

    def test_registries_are_independent(self):
        first = TransformRegistry.default()
        second = TransformRegistry.default()
        first.clear()
        assert len(first) == 0
        assert len(second) == 12

    def test_get_and_has(self):
        registry = TransformRegistry.default()
        assert isinstance(registry.get("AddBrackets"), AddBrackets)
        assert registry.get("Missing") is None
        assert registry.get("") is None
        assert registry.get(None) is None
        assert registry.has("CompoundExpression3")
        assert "CompoundExpression3" in registry
        assert not registry.has(None)

    def test_require_unknown_lists_available(self):
        registry = TransformRegistry([NeverApplies()])
        with pytest.raises(PluginNotFoundError) as exc_info:
            registry.require("Missing")
        assert exc_info.value.name == "Missing"
        assert exc_info.value.available == ["NeverApplies"]
        assert "NeverApplies" in str(exc_info.value)
        assert isinstance(exc_info.value, InvalidArgumentError)

    def test_duplicate_replaces_in_place(self):
        registry = TransformRegistry.default()
        replacement = Renamed()
        registry.register(replacement)
        assert registry.names() == DEFAULT_NAMES
        assert registry.get("AddBrackets") is replacement

    def test_register_none(self):
        with pytest.raises(InvalidArgumentError):
            TransformRegistry().register(None)

    def test_register_empty_name(self):
        class Nameless(NeverApplies):
            @property
            def name(self):
                return "  "

        with pytest.raises(InvalidArgumentError):
            TransformRegistry().register(Nameless())

    def test_reset_restores_defaults(self):
        registry = TransformRegistry([NeverApplies()])
        registry.reset()
        assert registry.names() == DEFAULT_NAMES

    def test_all_keeps_registration_order(self):
        first, second = NeverApplies(), BrokenCheck()
        registry = TransformRegistry([second, first])
        assert registry.all() == [second, first]

    def test_transforms_for_node(self, calculator_index):
        registry = TransformRegistry([NeverApplies(), BrokenCheck(), AddBrackets()])
        node = next(n for n in calculator_index.all_nodes if n.kind == NodeKind.EXPRESSION_STATEMENT)
        applicable = registry.transforms_for_node(calculator_index, node)
        assert [t.name for t in applicable] == ["AddBrackets"]
