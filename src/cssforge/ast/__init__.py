#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/ast/__init__.py
"""Stylesheet abstract syntax tree.

This package holds the node model, source locations, the visitor protocol and
the visit controllers that drive (and safely mutate during) traversal.
"""

from cssforge.ast.controller import MutatingVisitController, VisitController
from cssforge.ast.location import SourceCode, SourceLocation
from cssforge.ast.nodes import (
    AbstractBlock,
    AtRuleNode,
    AtRuleType,
    AttributeSelector,
    BlockNode,
    BooleanExpressionNode,
    CharSetRule,
    ClassSelector,
    CombinatorNode,
    CombinatorType,
    CompositeValueNode,
    ConditionalBlock,
    ConditionalRule,
    ConstantReferenceNode,
    CssTree,
    DeclarationBlock,
    DeclarationNode,
    DefinitionNode,
    FontFaceRule,
    FunctionNode,
    IdSelector,
    ImportBlock,
    ImportRule,
    LiteralNode,
    MediaRule,
    Node,
    NumericNode,
    PageRule,
    PageSelector,
    PriorityNode,
    PropertyValue,
    PseudoClass,
    PseudoClassFunction,
    PseudoElement,
    RefinerNode,
    RootNode,
    RulesetNode,
    SelectorList,
    SelectorNode,
    StringNode,
    UnknownAtRule,
    ValueNode,
)
from cssforge.ast.visitors import TreeVisitor, UniformVisitor, as_tree_visitor

__all__ = [
    "AbstractBlock",
    "AtRuleNode",
    "AtRuleType",
    "AttributeSelector",
    "BlockNode",
    "BooleanExpressionNode",
    "CharSetRule",
    "ClassSelector",
    "CombinatorNode",
    "CombinatorType",
    "CompositeValueNode",
    "ConditionalBlock",
    "ConditionalRule",
    "ConstantReferenceNode",
    "CssTree",
    "DeclarationBlock",
    "DeclarationNode",
    "DefinitionNode",
    "FontFaceRule",
    "FunctionNode",
    "IdSelector",
    "ImportBlock",
    "ImportRule",
    "LiteralNode",
    "MediaRule",
    "MutatingVisitController",
    "Node",
    "NumericNode",
    "PageRule",
    "PageSelector",
    "PriorityNode",
    "PropertyValue",
    "PseudoClass",
    "PseudoClassFunction",
    "PseudoElement",
    "RefinerNode",
    "RootNode",
    "RulesetNode",
    "SelectorList",
    "SelectorNode",
    "SourceCode",
    "SourceLocation",
    "StringNode",
    "TreeVisitor",
    "UniformVisitor",
    "UnknownAtRule",
    "ValueNode",
    "VisitController",
    "as_tree_visitor",
]
