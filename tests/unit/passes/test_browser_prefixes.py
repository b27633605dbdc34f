#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/passes/test_browser_prefixes.py
"""Unit tests for vendor-prefix expansion."""

import pytest

from cssforge.parser import parse
from cssforge.passes import EXPANSION_RULES, AutoExpandBrowserPrefix, BrowserPrefixRule, print_compactly
from cssforge.passes.browser_prefixes import find_matching_rule


def expand(css, **kwargs):
    """Parse, expand and print."""
    tree = parse(css)
    AutoExpandBrowserPrefix(tree.mutating_visit_controller(), **kwargs).run_pass()
    return print_compactly(tree)


@pytest.mark.unit
class TestExpansionRules:
    """Tests for the rule table."""

    def test_every_rule_expands_to_something(self):
        """Test that each rule names at least one output."""
        for rule in EXPANSION_RULES:
            assert rule.expand_property_names or rule.expand_property_values

    def test_first_matching_rule_wins(self):
        """Test lookup order for a declaration several rules could match."""
        node = parse(".a { display: flex }").root.body.children[0].declarations.children[0]
        rule = find_matching_rule(node)
        assert rule.match_property_value == "flex"
        assert rule.expand_property_values[-1] == "flex"

    def test_no_rule_for_plain_declaration(self):
        """Test that ordinary declarations match nothing."""
        node = parse(".a { color: red }").root.body.children[0].declarations.children[0]
        assert find_matching_rule(node) is None


@pytest.mark.unit
class TestAutoExpandBrowserPrefix:
    """Tests for the expansion pass."""

    @pytest.mark.parametrize(
        "css,expected",
        [
            (
                ".a { display: flex }",
                ".a{display:-webkit-box;display:-moz-box;display:-webkit-flex;display:-ms-flexbox;display:flex}",
            ),
            (".a { position: sticky }", ".a{position:-webkit-sticky;position:sticky}"),
            (".a { cursor: grab }", ".a{cursor:-moz-grab;cursor:-webkit-grab;cursor:grab}"),
            (".a { display: grid }", ".a{display:-ms-grid;display:grid}"),
            (".a { display: block }", ".a{display:block}"),
        ],
    )
    def test_keyword_rules(self, css, expected):
        """Test rules that match a property and keyword value."""
        assert expand(css) == expected

    @pytest.mark.parametrize(
        "css,expected",
        [
            (
                ".a { transition: opacity 1s }",
                ".a{-webkit-transition:opacity 1s;-o-transition:opacity 1s;transition:opacity 1s}",
            ),
            (
                ".a { flex: 1 }",
                ".a{-webkit-box-flex:1;-moz-box-flex:1;-ms-flex:1;-webkit-flex:1;flex:1}",
            ),
            (
                ".a { user-select: none }",
                ".a{-webkit-user-select:none;-moz-user-select:none;-ms-user-select:none}",
            ),
            (
                ".a { grid-template-columns: 1fr 2fr }",
                ".a{-ms-grid-columns:1fr 2fr;grid-template-columns:1fr 2fr}",
            ),
        ],
    )
    def test_name_rules(self, css, expected):
        """Test rules that copy the value under prefixed property names."""
        assert expand(css) == expected

    @pytest.mark.parametrize(
        "css,expected",
        [
            (
                ".a { width: calc(100% - 10px) }",
                ".a{width:-webkit-calc(100% - 10px);width:-moz-calc(100% - 10px);width:calc(100% - 10px)}",
            ),
            (
                ".a { background-image: radial-gradient(red, blue) }",
                ".a{background-image:-webkit-radial-gradient(red,blue);"
                "background-image:-moz-radial-gradient(red,blue);"
                "background-image:-o-radial-gradient(red,blue);"
                "background-image:radial-gradient(red,blue)}",
            ),
        ],
    )
    def test_function_rules(self, css, expected):
        """Test rules that rename a function inside the value."""
        assert expand(css) == expected

    def test_priority_is_kept(self):
        """Test that !important survives keyword expansion."""
        assert expand(".a { position: sticky !important }") == (
            ".a{position:-webkit-sticky!important;position:sticky!important}"
        )

    def test_keyword_rule_needs_single_value(self):
        """Test that a keyword rule ignores values with more than the keyword."""
        assert expand(".a { cursor: grab, pointer }") == ".a{cursor:grab,pointer}"

    def test_expansions_are_not_expanded_again(self):
        """Test that each matching declaration is expanded once."""
        tree = parse(".a { box-sizing: border-box; color: red; order: 2 }")
        expander = AutoExpandBrowserPrefix(tree.mutating_visit_controller())
        expander.run_pass()
        assert expander.expanded == 2
        assert print_compactly(tree) == (
            ".a{-webkit-box-sizing:border-box;box-sizing:border-box;color:red;"
            "-webkit-box-ordinal-group:2;-moz-box-ordinal-group:2;-ms-flex-order:2;-webkit-order:2;order:2}"
        )

    def test_comments_go_to_first_expansion(self):
        """Test that leading comments stay in front of the expanded group."""
        tree = parse(".a { /* layout */ box-sizing: border-box }")
        AutoExpandBrowserPrefix(tree.mutating_visit_controller()).run_pass()
        first, second = tree.root.body.children[0].declarations.children
        assert first.comments == [" layout "]
        assert second.comments == []

    def test_custom_rules(self):
        """Test that the pass accepts its own rule table."""
        rules = [BrowserPrefixRule("tab-size", expand_property_names=("-moz-tab-size", "tab-size"))]
        assert expand(".a { tab-size: 4; flex: 1 }", rules=rules) == ".a{-moz-tab-size:4;tab-size:4;flex:1}"
