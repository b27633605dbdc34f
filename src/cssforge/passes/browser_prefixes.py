#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/passes/browser_prefixes.py
"""Expansion of declarations into their vendor-prefixed forms.

A declaration matching one of :data:`EXPANSION_RULES` is replaced by the
prefixed declarations followed by the standard one, so::

    .box { display: flex }

becomes::

    .box { display: -webkit-box; display: -moz-box; display: -webkit-flex;
           display: -ms-flexbox; display: flex }

Rules match on a property name (``transition``), on a property name and
keyword value (``position: sticky``), or on a function used in the value
(``calc()``, ``linear-gradient()``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from cssforge.ast.controller import MutatingVisitController
from cssforge.ast.nodes import DeclarationNode, FunctionNode, LiteralNode, Node, PriorityNode, PropertyValue
from cssforge.passes.base import VisitingPass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BrowserPrefixRule:
    """One expansion rule.

    Parameters
    ----------
    match_property_name : str or None
        Property the rule applies to. ``None`` matches every property, which
        only makes sense for function rules.
    match_property_value : str or None
        Keyword value (or function name when ``is_function``) the value must have.
    expand_property_names : tuple of str
        Property names to emit, in order, each with a copy of the value.
    expand_property_values : tuple of str
        Keyword values (or function names) to emit, in order, under the
        matched property name.
    is_function : bool
        Whether ``match_property_value`` names a function.

    """

    match_property_name: Optional[str]
    match_property_value: Optional[str] = None
    expand_property_names: tuple[str, ...] = ()
    expand_property_values: tuple[str, ...] = ()
    is_function: bool = False

    def matches(self, node: DeclarationNode) -> bool:
        if self.match_property_name is not None and node.property_name != self.match_property_name:
            return False
        if self.match_property_value is None:
            return True
        values = [value for value in node.property_value.values if not isinstance(value, PriorityNode)]
        if self.is_function:
            return any(isinstance(value, FunctionNode) and value.name == self.match_property_value for value in values)
        return (
            len(values) == 1 and type(values[0]) is LiteralNode and values[0].value == self.match_property_value
        )


def _prefixed(name: str, *prefixes: str, plain: bool = True) -> tuple[str, ...]:
    return tuple(f"{prefix}{name}" for prefix in prefixes) + ((name,) if plain else ())


def _names(name: str, *prefixes: str, plain: bool = True) -> BrowserPrefixRule:
    return BrowserPrefixRule(name, expand_property_names=_prefixed(name, *prefixes, plain=plain))


def _function(property_name: Optional[str], function: str, *prefixes: str) -> BrowserPrefixRule:
    return BrowserPrefixRule(
        property_name, function, expand_property_values=_prefixed(function, *prefixes), is_function=True
    )


def _keyword(property_name: str, keyword: str, *values: str) -> BrowserPrefixRule:
    return BrowserPrefixRule(property_name, keyword, expand_property_values=values)


_WEBKIT_O = ("-webkit-", "-o-")

# First matching rule wins
EXPANSION_RULES: tuple[BrowserPrefixRule, ...] = (
    _keyword("display", "flex", "-webkit-box", "-moz-box", "-webkit-flex", "-ms-flexbox", "flex"),
    _keyword(
        "display", "inline-flex", "-webkit-inline-box", "-webkit-inline-flex", "-ms-inline-flexbox", "inline-flex"
    ),
    _names("flex-flow", "-ms-", "-webkit-"),
    _names("flex-direction", "-ms-", "-webkit-"),
    _names("flex-wrap", "-moz-", "-ms-", "-webkit-"),
    BrowserPrefixRule(
        "flex", expand_property_names=("-webkit-box-flex", "-moz-box-flex", "-ms-flex", "-webkit-flex", "flex")
    ),
    BrowserPrefixRule(
        "order",
        expand_property_names=(
            "-webkit-box-ordinal-group",
            "-moz-box-ordinal-group",
            "-ms-flex-order",
            "-webkit-order",
            "order",
        ),
    ),
    BrowserPrefixRule(
        "flex-basis", expand_property_names=("-webkit-flex-basis", "-ms-flex-preferred-size", "flex-basis")
    ),
    BrowserPrefixRule(
        "flex-grow",
        expand_property_names=("-webkit-box-flex", "box-flex", "-ms-flex-positive", "-webkit-flex-grow", "flex-grow"),
    ),
    BrowserPrefixRule(
        "flex-shrink", expand_property_names=("-ms-flex-negative", "-webkit-flex-shrink", "flex-shrink")
    ),
    _names("align-content", "-webkit-"),
    _names("align-items", "-webkit-"),
    _names("justify-content", "-webkit-"),
    BrowserPrefixRule(
        "align-self", expand_property_names=("-webkit-align-self", "-ms-grid-row-align", "align-self")
    ),
    _names("text-size-adjust", "-webkit-", "-moz-", "-ms-"),
    _names("animation", *_WEBKIT_O),
    _names("animation-delay", *_WEBKIT_O),
    _names("animation-direction", *_WEBKIT_O),
    _names("animation-duration", *_WEBKIT_O),
    _names("animation-fill-mode", "-webkit-"),
    _names("animation-iteration-count", *_WEBKIT_O),
    _names("animation-name", *_WEBKIT_O),
    _names("animation-timing-function", *_WEBKIT_O),
    _names("background-size", *_WEBKIT_O),
    _names("backface-visibility", *_WEBKIT_O),
    _names("border-radius", "-webkit-", "-moz-"),
    _names("box-shadow", "-webkit-", "-moz-"),
    _names("box-sizing", "-webkit-"),
    _function("background-image", "linear-gradient", "-webkit-", "-moz-", "-ms-", "-o-"),
    _function("background-image", "repeating-linear-gradient", "-webkit-"),
    _keyword("cursor", "grab", "-moz-grab", "-webkit-grab", "grab"),
    _keyword("cursor", "grabbing", "-moz-grabbing", "-webkit-grabbing", "grabbing"),
    _function(None, "calc", "-webkit-", "-moz-"),
    _names("column-count", "-webkit-", "-moz-"),
    _names("column-gap", "-webkit-", "-moz-"),
    _names("perspective", "-webkit-"),
    _names("perspective-origin", "-webkit-"),
    _names("hyphens", "-webkit-", "-moz-", "-ms-"),
    _keyword("min-width", "min-content", "-webkit-min-content", "-moz-min-content", "min-content"),
    _function("background-image", "radial-gradient", "-webkit-", "-moz-", "-o-"),
    _keyword("position", "sticky", "-webkit-sticky", "sticky"),
    _names("transform", "-webkit-", "-ms-", "-o-"),
    _names("transform-origin", "-webkit-", "-ms-", "-o-"),
    _names("transform-style", "-webkit-"),
    _names("transition", *_WEBKIT_O),
    _names("transition-delay", *_WEBKIT_O),
    _names("transition-duration", *_WEBKIT_O),
    _names("transition-property", *_WEBKIT_O),
    _names("transition-timing-function", *_WEBKIT_O),
    _names("user-select", "-webkit-", "-moz-", "-ms-", plain=False),
    _keyword("display", "grid", "-ms-grid", "grid"),
    BrowserPrefixRule("grid-template-columns", expand_property_names=("-ms-grid-columns", "grid-template-columns")),
    BrowserPrefixRule("grid-template-rows", expand_property_names=("-ms-grid-rows", "grid-template-rows")),
    BrowserPrefixRule("grid-row-start", expand_property_names=("-ms-grid-row", "grid-row-start")),
    BrowserPrefixRule("grid-column-start", expand_property_names=("-ms-grid-column", "grid-column-start")),
    BrowserPrefixRule("justify-self", expand_property_names=("-grid-column-align", "justify-self")),
)


def find_matching_rule(node: DeclarationNode, rules=EXPANSION_RULES) -> Optional[BrowserPrefixRule]:
    """Return the first rule in ``rules`` that applies to ``node``."""
    return next((rule for rule in rules if rule.matches(node)), None)


class AutoExpandBrowserPrefix(VisitingPass):
    """Replace declarations that need vendor prefixes by their expansions.

    The standard declaration comes last, so browsers that understand it use it.
    Expanded declarations are not visited again.
    """

    def __init__(self, visit_controller: MutatingVisitController, rules=EXPANSION_RULES):
        super().__init__(visit_controller)
        self.rules = tuple(rules)
        self.expanded = 0

    def enter_declaration(self, node: DeclarationNode) -> bool:
        rule = find_matching_rule(node, self.rules)
        if rule is None:
            return False

        if rule.expand_property_names:
            replacements = [
                self._copy(node, name, node.property_value.deep_copy()) for name in rule.expand_property_names
            ]
        elif rule.is_function:
            replacements = [
                self._copy(node, node.property_name, self._rename_function(node, rule.match_property_value, name))
                for name in rule.expand_property_values
            ]
        else:
            replacements = [
                self._copy(node, node.property_name, self._replace_keyword(node, value))
                for value in rule.expand_property_values
            ]

        if not replacements:
            return False
        replacements[0].comments = list(node.comments)
        self.visit_controller.replace_current_block_child_with(replacements, False)
        self.expanded += 1
        return False

    @staticmethod
    def _copy(node: DeclarationNode, name: str, value: PropertyValue) -> DeclarationNode:
        return DeclarationNode(name, value, node.star_hack, location=node.location)

    @staticmethod
    def _rename_function(node: DeclarationNode, function: str, new_name: str) -> PropertyValue:
        value = node.property_value.deep_copy()
        for item in value.values:
            if isinstance(item, FunctionNode) and item.name == function:
                item.name = new_name
        return value

    @staticmethod
    def _replace_keyword(node: DeclarationNode, keyword: str) -> PropertyValue:
        values: list[Node] = []
        for item in node.property_value.values:
            if isinstance(item, PriorityNode):
                values.append(item.deep_copy())
            else:
                values.append(LiteralNode(keyword, location=item.location))
        return PropertyValue(values, location=node.property_value.location)

    def run_pass(self) -> None:
        super().run_pass()
        if self.expanded:
            logger.debug("Expanded %d declaration(s) with browser prefixes", self.expanded)
