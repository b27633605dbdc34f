#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/ast/test_ast_nodes.py
"""Unit tests for stylesheet node classes.

Tests cover:
- Parent links set on construction and on block edits
- Value rendering
- At-rule type resolution
- Deep copies

"""

import pytest

from cssforge.ast import (
    AtRuleType,
    BlockNode,
    ClassSelector,
    CombinatorType,
    CompositeValueNode,
    ConditionalBlock,
    ConditionalRule,
    CssTree,
    DeclarationBlock,
    DeclarationNode,
    FunctionNode,
    LiteralNode,
    MediaRule,
    NumericNode,
    PageSelector,
    PropertyValue,
    RootNode,
    RulesetNode,
    SelectorList,
    SelectorNode,
    SourceCode,
    StringNode,
    UnknownAtRule,
)


def _declaration(name: str, *values) -> DeclarationNode:
    return DeclarationNode(name, PropertyValue(list(values)))


@pytest.mark.unit
class TestParentLinks:
    """Tests for parent references."""

    def test_children_are_adopted_on_construction(self):
        """Test that constructing a node parents its children."""
        red = LiteralNode("red")
        value = PropertyValue([red])
        declaration = DeclarationNode("color", value)
        assert red.parent is value
        assert value.parent is declaration

    def test_add_child_sets_parent(self):
        """Test that adding to a block parents the new child."""
        block = BlockNode()
        ruleset = RulesetNode()
        block.add_child(ruleset)
        assert ruleset.parent is block
        assert block.children == [ruleset]
        assert not block.is_empty()

    def test_root_children(self):
        """Test that the root owns the import block and the body."""
        root = RootNode()
        assert root.child_nodes() == [root.import_block, root.body]
        assert root.body.parent is root
        assert root.import_rules is root.import_block

    def test_ancestors(self):
        """Test walking up the parent chain."""
        red = LiteralNode("red")
        declaration = _declaration("color", red)
        block = DeclarationBlock([declaration])
        assert list(red.ancestors()) == [declaration.property_value, declaration, block]

    def test_walk_is_document_order(self):
        """Test that walk yields a node before its descendants."""
        selector = SelectorNode("a", [ClassSelector("b")])
        ruleset = RulesetNode(SelectorList([selector]), DeclarationBlock([_declaration("color", LiteralNode("red"))]))
        kinds = [node.visit_kind for node in ruleset.walk()]
        assert kinds == [
            "ruleset",
            "selector_block",
            "selector",
            "class_selector",
            "declaration_block",
            "declaration",
            "property_value",
            "value_node",
        ]


@pytest.mark.unit
class TestValues:
    """Tests for value node rendering."""

    def test_literal(self):
        """Test that a literal prints its text."""
        assert str(LiteralNode("bold")) == "bold"

    def test_string_keeps_quote(self):
        """Test that strings print with their original quote."""
        assert str(StringNode("x", "'")) == "'x'"
        assert StringNode("a", '"').to_css(str.upper) == '"A"'

    def test_numeric(self):
        """Test that numbers print with their unit."""
        assert NumericNode("10", "px").value == "10px"
        assert str(NumericNode("0.5")) == "0.5"

    def test_composite(self):
        """Test that composites join their members with the operator."""
        node = CompositeValueNode([LiteralNode("a"), LiteralNode("b")], "/")
        assert node.value == "a/b"
        assert all(member.parent is node for member in node.values)

    def test_function(self):
        """Test that functions print their arguments verbatim."""
        node = FunctionNode("rgb", [NumericNode("1"), LiteralNode(","), NumericNode("2")])
        assert node.value == "rgb(1,2)"


@pytest.mark.unit
class TestAtRules:
    """Tests for at-rule nodes and their type catalogue."""

    def test_from_name_known(self):
        """Test looking up a catalogued at-rule."""
        assert AtRuleType.from_name("media", True) is AtRuleType.MEDIA
        assert AtRuleType.from_name("top-left", True) is AtRuleType.TOP_LEFT

    def test_from_name_unknown(self):
        """Test the fallbacks for names outside the catalogue."""
        assert AtRuleType.from_name("foo", True) is AtRuleType.UNKNOWN_BLOCK
        assert AtRuleType.from_name("foo", False) is AtRuleType.UNKNOWN

    def test_type_str(self):
        """Test that a type prints as its at-keyword."""
        assert str(AtRuleType.FONT_FACE) == "@font-face"

    def test_unknown_rule_type_from_name(self):
        """Test that an unknown rule derives its type from its name and block."""
        rule = UnknownAtRule([], BlockNode(), LiteralNode("media"))
        assert rule.type is AtRuleType.MEDIA
        other = UnknownAtRule([], None, LiteralNode("vendor"))
        assert other.type is AtRuleType.UNKNOWN

    def test_typed_rule_defaults(self):
        """Test that typed rules supply their own type and name."""
        rule = MediaRule([LiteralNode("screen")], BlockNode())
        assert rule.type is AtRuleType.MEDIA
        assert rule.name.value == "media"
        assert rule.block.parent is rule
        assert rule.parameter_count == 1

    def test_page_selector_type(self):
        """Test that a page-margin rule takes its name from its type."""
        rule = PageSelector(block=DeclarationBlock(), type=AtRuleType.BOTTOM_RIGHT)
        assert rule.name.value == "bottom-right"

    def test_set_block_and_parameters(self):
        """Test replacing the block and parameters of a rule."""
        rule = UnknownAtRule([], None, LiteralNode("x"))
        block = BlockNode()
        param = LiteralNode("y")
        rule.set_block(block)
        rule.set_parameters([param])
        assert block.parent is rule
        assert param.parent is rule

    def test_conditional_block(self):
        """Test that a conditional block owns its branches."""
        branch = ConditionalRule([], BlockNode(), type=AtRuleType.ELSE)
        chain = ConditionalBlock()
        chain.add_child(branch)
        assert branch.parent is chain
        assert branch.condition is None

    def test_combinator_symbols(self):
        """Test mapping combinator symbols to types."""
        assert CombinatorType.from_symbol(">") is CombinatorType.CHILD
        assert CombinatorType.from_symbol("  ") is CombinatorType.DESCENDANT


@pytest.mark.unit
class TestDeepCopy:
    """Tests for subtree cloning."""

    def test_deep_copy_is_independent(self):
        """Test that a clone does not share nodes with the original."""
        red = LiteralNode("red")
        declaration = _declaration("color", red)
        block = DeclarationBlock([declaration])

        clone = declaration.deep_copy()

        assert clone is not declaration
        assert clone.parent is None
        assert clone.property_value.parent is clone
        assert clone.property_value.values[0] is not red
        assert clone.property_value.values[0].parent is clone.property_value
        assert declaration.parent is block

    def test_deep_copy_shares_location(self):
        """Test that locations are shared rather than copied."""
        source = SourceCode(None, "red")
        node = LiteralNode("red", location=source.location_of(0, 3))
        assert node.deep_copy().location is node.location

    def test_tree_deep_copy(self):
        """Test copying a whole tree."""
        tree = CssTree(SourceCode(None, ""))
        tree.root.body.add_child(RulesetNode())
        clone = tree.deep_copy()
        assert clone.source_code is tree.source_code
        assert clone.root is not tree.root
        assert len(clone.root.body.children) == 1
