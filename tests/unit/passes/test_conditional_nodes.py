#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/passes/test_conditional_nodes.py
"""Unit tests for CreateConditionalNodes.

Tests cover:
- Assembling @if/@elseif/@else chains
- Conditions written as names and as expressions
- Nested chains
- Chain and branch errors

"""

import pytest

from cssforge.ast import BooleanExpressionNode, ConditionalBlock, RulesetNode
from cssforge.ast.nodes import AtRuleType
from cssforge.parser import parse
from cssforge.passes import CreateConditionalNodes


def run_pass(css, error_manager):
    tree = parse(css)
    CreateConditionalNodes(tree.mutating_visit_controller(), error_manager).run_pass()
    return tree


@pytest.mark.unit
class TestChains:
    """Tests for well-formed conditional chains."""

    def test_full_chain(self, error_manager):
        """Test that a three-branch chain becomes one conditional block."""
        css = "@if COND { .a { x: y } } @elseif OTHER { .b { x: y } } @else { .c { x: y } }"
        tree = run_pass(css, error_manager)

        body = tree.root.body.children
        assert len(body) == 1
        chain = body[0]
        assert isinstance(chain, ConditionalBlock)
        assert [rule.type for rule in chain.children] == [AtRuleType.IF, AtRuleType.ELSEIF, AtRuleType.ELSE]
        assert isinstance(chain.children[0].condition, BooleanExpressionNode)
        assert chain.children[0].condition.value == "COND"
        assert chain.children[1].condition.value == "OTHER"
        assert chain.children[2].condition is None
        assert all(rule.parent is chain for rule in chain.children)
        assert chain.parent is tree.root.body
        assert not error_manager.errors

    def test_chain_location_spans_all_branches(self, error_manager):
        """Test that the block's location runs from @if to the last branch."""
        css = "@if A { .a { x: y } } @else { .b { x: y } }"
        tree = run_pass(css, error_manager)
        assert tree.root.body.children[0].location.text == css

    def test_single_if(self, error_manager):
        """Test a chain made of a lone @if."""
        tree = run_pass("@if A { .a { x: y } } .b { x: y }", error_manager)
        chain, ruleset = tree.root.body.children
        assert isinstance(chain, ConditionalBlock)
        assert len(chain.children) == 1
        assert isinstance(ruleset, RulesetNode)

    def test_consecutive_chains(self, error_manager):
        """Test that a second @if starts a new chain."""
        tree = run_pass("@if A { } @else { } @if B { } @elseif C { }", error_manager)
        chains = tree.root.body.children
        assert [len(chain.children) for chain in chains] == [2, 2]

    @pytest.mark.parametrize(
        "condition,expected",
        [("(A && B)", "A && B"), ("!A", "!A"), ("A || B", "A || B"), ("(A)", "A")],
    )
    def test_expression_conditions(self, error_manager, condition, expected):
        """Test that operator conditions are kept as one expression."""
        tree = run_pass(f"@if {condition} {{ .a {{ x: y }} }}", error_manager)
        assert tree.root.body.children[0].children[0].condition.value == expected

    def test_nested_chains(self, error_manager):
        """Test that chains inside a branch are assembled too."""
        css = "@if A { @if B { .x { x: y } } @else { .y { x: y } } } @else { .z { x: y } }"
        tree = run_pass(css, error_manager)
        outer = tree.root.body.children[0]
        assert len(outer.children) == 2
        inner = outer.children[0].block.children[0]
        assert isinstance(inner, ConditionalBlock)
        assert [rule.type for rule in inner.children] == [AtRuleType.IF, AtRuleType.ELSE]
        assert not error_manager.errors

    def test_comments_are_kept(self, error_manager):
        """Test that comments before @if move to the conditional block."""
        tree = run_pass("/* note */ @if A { }", error_manager)
        assert tree.root.body.children[0].comments == [" note "]


@pytest.mark.unit
class TestChainErrors:
    """Tests for malformed chains and branches."""

    def test_else_without_if(self, error_manager):
        """Test that a dangling @else is reported and removed."""
        tree = run_pass("@else { .a { x: y } }", error_manager)
        assert error_manager.error_messages == ["@else without previous @if"]
        assert tree.root.body.children == []

    def test_elseif_after_ruleset(self, error_manager):
        """Test that a ruleset ends the chain."""
        tree = run_pass("@if A { } .b { x: y } @elseif B { }", error_manager)
        assert error_manager.error_messages == ["@elseif without previous @if"]
        assert len(tree.root.body.children) == 2

    def test_elseif_after_else(self, error_manager):
        """Test that @else closes the chain."""
        run_pass("@if A { } @else { } @elseif B { }", error_manager)
        assert error_manager.error_messages == ["@elseif without previous @if"]

    def test_if_without_condition(self, error_manager):
        """Test that @if needs a condition."""
        tree = run_pass("@if { }", error_manager)
        assert error_manager.error_messages == ["@if without condition"]
        assert tree.root.body.children[0].children[0].condition is None

    def test_if_with_too_many_parameters(self, error_manager):
        """Test that a condition is a single value."""
        run_pass("@if A B { }", error_manager)
        assert error_manager.error_messages == ["@if with too many parameters"]

    def test_else_with_condition(self, error_manager):
        """Test that @else takes no condition."""
        run_pass("@if A { } @else B { }", error_manager)
        assert error_manager.error_messages == ["@else with too many parameters"]

    def test_if_without_block(self, error_manager):
        """Test that a branch needs a block."""
        run_pass("@if A;", error_manager)
        assert error_manager.error_messages == ["@if without block"]
