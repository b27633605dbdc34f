#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/passes/test_definition_nodes.py
"""Unit tests for CreateDefinitionNodes."""

import pytest

from cssforge.ast import ConstantReferenceNode, DefinitionNode, LiteralNode, NumericNode, RulesetNode, UnknownAtRule
from cssforge.parser import parse
from cssforge.passes import CreateDefinitionNodes
from cssforge.passes.definition_nodes import is_definition_reference


def run_pass(css, error_manager):
    tree = parse(css)
    CreateDefinitionNodes(tree.mutating_visit_controller(), error_manager).run_pass()
    return tree


@pytest.mark.unit
class TestCreateDefinitionNodes:
    """Tests for @def conversion."""

    def test_simple_definition(self, error_manager):
        """Test converting a one-value definition."""
        tree = run_pass("@def WIDTH 10px;", error_manager)
        definition = tree.root.body.children[0]
        assert isinstance(definition, DefinitionNode)
        assert definition.name.value == "WIDTH"
        assert type(definition.name) is LiteralNode
        assert [type(v) for v in definition.values] == [NumericNode]
        assert definition.values[0].value == "10px"
        assert definition.parent is tree.root.body
        assert not error_manager.errors

    def test_multi_value_definition(self, error_manager):
        """Test that every value after the name is kept in order."""
        tree = run_pass("@def PADDING 4px 8px;", error_manager)
        assert [v.value for v in tree.root.body.children[0].values] == ["4px", "8px"]

    def test_definition_referencing_constant(self, error_manager):
        """Test that a definition may refer to another constant."""
        tree = run_pass("@def A 1px; @def B A;", error_manager)
        second = tree.root.body.children[1]
        assert isinstance(second.values[0], ConstantReferenceNode)

    def test_lowercase_name_warns(self, error_manager):
        """Test that a name not spelled like a constant only draws a warning."""
        tree = run_pass("@def width 10px;", error_manager)
        assert isinstance(tree.root.body.children[0], DefinitionNode)
        assert error_manager.warning_messages == ["WARNING for invalid @def name width. We will ignore this."]
        assert not error_manager.errors

    @pytest.mark.parametrize(
        "css,message",
        [
            ("@def A { }", "@def with block"),
            ("@def;", "@def without name"),
            ('@def "A" 1px;', "@def without a valid literal as name"),
            ("@def 10px red;", "@def without a valid literal as name"),
        ],
    )
    def test_invalid_definitions(self, error_manager, css, message):
        """Test that malformed definitions are reported and removed."""
        tree = run_pass(css, error_manager)
        assert error_manager.error_messages == [message]
        assert tree.root.body.children == []

    def test_other_rules_untouched(self, error_manager):
        """Test that only @def is converted."""
        tree = run_pass("@media screen { .a { x: y } } .b { x: y }", error_manager)
        assert [type(n) for n in tree.root.body.children] == [UnknownAtRule, RulesetNode]


@pytest.mark.unit
class TestDefinitionReference:
    """Tests for constant name spelling."""

    @pytest.mark.parametrize("name", ["A", "MAIN_COLOR", "_X1", "B2B"])
    def test_valid(self, name):
        """Test names spelled like constants."""
        assert is_definition_reference(name)

    @pytest.mark.parametrize("name", ["a", "Main", "1A", "A-B", ""])
    def test_invalid(self, name):
        """Test names that are not constants."""
        assert not is_definition_reference(name)
