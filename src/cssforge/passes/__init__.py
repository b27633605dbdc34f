#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/passes/__init__.py
"""Compiler passes over stylesheet trees.

Each pass takes a mutating visit controller (and usually an error manager)
and rewrites or checks the tree when :meth:`run_pass` is called. The compact
printer is a read-only pass with its own controller.
"""

from cssforge.passes.base import CompilerPass, VisitingPass
from cssforge.passes.bidi_flipper import BiDiFlipper, flip_literal_value, flip_percentage_value
from cssforge.passes.browser_prefixes import EXPANSION_RULES, AutoExpandBrowserPrefix, BrowserPrefixRule
from cssforge.passes.class_renaming import CssClassRenaming
from cssforge.passes.compact_printer import CompactPrinter, print_compactly
from cssforge.passes.conditional_nodes import CreateConditionalNodes
from cssforge.passes.constant_references import CollectConstantDefinitions, ReplaceConstantReferences
from cssforge.passes.definition_nodes import CreateDefinitionNodes
from cssforge.passes.eliminate_conditional_nodes import BooleanExpressionEvaluator, EliminateConditionalNodes
from cssforge.passes.eliminate_empty_rulesets import EliminateEmptyRulesetNodes
from cssforge.passes.standard_at_rules import CreateStandardAtRuleNodes
from cssforge.passes.unknown_at_rules import HandleUnknownAtRuleNodes

__all__ = [
    "EXPANSION_RULES",
    "AutoExpandBrowserPrefix",
    "BiDiFlipper",
    "BooleanExpressionEvaluator",
    "BrowserPrefixRule",
    "CollectConstantDefinitions",
    "CompactPrinter",
    "CompilerPass",
    "CreateConditionalNodes",
    "CreateDefinitionNodes",
    "CreateStandardAtRuleNodes",
    "CssClassRenaming",
    "EliminateConditionalNodes",
    "EliminateEmptyRulesetNodes",
    "HandleUnknownAtRuleNodes",
    "ReplaceConstantReferences",
    "VisitingPass",
    "flip_literal_value",
    "flip_percentage_value",
    "print_compactly",
]
