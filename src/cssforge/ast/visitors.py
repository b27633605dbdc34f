#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/ast/visitors.py
"""Visitor protocol for stylesheet traversal.

A visit controller walks the tree and, for every node, calls
``enter_<kind>(node)`` before the node's children and ``leave_<kind>(node)``
after them, where ``<kind>`` is the node class's ``visit_kind``. An enter hook
returning ``False`` skips the children; the matching leave hook still fires.

:class:`TreeVisitor` provides no-op defaults for every hook, so a pass only
overrides the hooks it cares about. :class:`UniformVisitor` is the alternative
for passes that treat every node the same way; :func:`as_tree_visitor` adapts
one to the other.

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from cssforge.ast.nodes import (
        AttributeSelector,
        BlockNode,
        CharSetRule,
        ClassSelector,
        CombinatorNode,
        CompositeValueNode,
        ConditionalBlock,
        ConditionalRule,
        DeclarationBlock,
        DeclarationNode,
        DefinitionNode,
        FontFaceRule,
        FunctionNode,
        IdSelector,
        ImportBlock,
        ImportRule,
        MediaRule,
        Node,
        PageRule,
        PageSelector,
        PropertyValue,
        PseudoClass,
        PseudoElement,
        RootNode,
        RulesetNode,
        SelectorList,
        SelectorNode,
        UnknownAtRule,
        ValueNode,
    )

# Hook kinds fired for nodes. The two separator hooks are listed separately
# because they receive the node that owns the separated list.
NODE_HOOK_KINDS: tuple[str, ...] = (
    "tree",
    "import_block",
    "import_rule",
    "block",
    "declaration_block",
    "ruleset",
    "selector_block",
    "selector",
    "combinator",
    "class_selector",
    "id_selector",
    "pseudo_class",
    "pseudo_element",
    "attribute_selector",
    "declaration",
    "property_value",
    "value_node",
    "composite_value_node",
    "function_node",
    "argument_node",
    "unknown_at_rule",
    "media_rule",
    "page_rule",
    "page_selector",
    "font_face",
    "charset",
    "definition",
    "conditional_block",
    "conditional_rule",
)

SEPARATOR_HOOK_KINDS: tuple[str, ...] = ("composite_value_node_operator", "media_type_list_delimiter")


class TreeVisitor:
    """Base visitor with a descending, side-effect free default for every hook."""

    def enter_tree(self, node: RootNode) -> bool:
        return True

    def leave_tree(self, node: RootNode) -> None:
        pass

    def enter_import_block(self, node: ImportBlock) -> bool:
        return True

    def leave_import_block(self, node: ImportBlock) -> None:
        pass

    def enter_import_rule(self, node: ImportRule) -> bool:
        return True

    def leave_import_rule(self, node: ImportRule) -> None:
        pass

    def enter_block(self, node: BlockNode) -> bool:
        return True

    def leave_block(self, node: BlockNode) -> None:
        pass

    def enter_declaration_block(self, node: DeclarationBlock) -> bool:
        return True

    def leave_declaration_block(self, node: DeclarationBlock) -> None:
        pass

    def enter_ruleset(self, node: RulesetNode) -> bool:
        return True

    def leave_ruleset(self, node: RulesetNode) -> None:
        pass

    def enter_selector_block(self, node: SelectorList) -> bool:
        return True

    def leave_selector_block(self, node: SelectorList) -> None:
        pass

    def enter_selector(self, node: SelectorNode) -> bool:
        return True

    def leave_selector(self, node: SelectorNode) -> None:
        pass

    def enter_combinator(self, node: CombinatorNode) -> bool:
        return True

    def leave_combinator(self, node: CombinatorNode) -> None:
        pass

    def enter_class_selector(self, node: ClassSelector) -> bool:
        return True

    def leave_class_selector(self, node: ClassSelector) -> None:
        pass

    def enter_id_selector(self, node: IdSelector) -> bool:
        return True

    def leave_id_selector(self, node: IdSelector) -> None:
        pass

    def enter_pseudo_class(self, node: PseudoClass) -> bool:
        return True

    def leave_pseudo_class(self, node: PseudoClass) -> None:
        pass

    def enter_pseudo_element(self, node: PseudoElement) -> bool:
        return True

    def leave_pseudo_element(self, node: PseudoElement) -> None:
        pass

    def enter_attribute_selector(self, node: AttributeSelector) -> bool:
        return True

    def leave_attribute_selector(self, node: AttributeSelector) -> None:
        pass

    def enter_declaration(self, node: DeclarationNode) -> bool:
        return True

    def leave_declaration(self, node: DeclarationNode) -> None:
        pass

    def enter_property_value(self, node: PropertyValue) -> bool:
        return True

    def leave_property_value(self, node: PropertyValue) -> None:
        pass

    def enter_value_node(self, node: ValueNode) -> bool:
        return True

    def leave_value_node(self, node: ValueNode) -> None:
        pass

    def enter_composite_value_node(self, node: CompositeValueNode) -> bool:
        return True

    def leave_composite_value_node(self, node: CompositeValueNode) -> None:
        pass

    def enter_composite_value_node_operator(self, node: CompositeValueNode) -> bool:
        return True

    def leave_composite_value_node_operator(self, node: CompositeValueNode) -> None:
        pass

    def enter_function_node(self, node: FunctionNode) -> bool:
        return True

    def leave_function_node(self, node: FunctionNode) -> None:
        pass

    def enter_argument_node(self, node: ValueNode) -> bool:
        return True

    def leave_argument_node(self, node: ValueNode) -> None:
        pass

    def enter_unknown_at_rule(self, node: UnknownAtRule) -> bool:
        return True

    def leave_unknown_at_rule(self, node: UnknownAtRule) -> None:
        pass

    def enter_media_type_list_delimiter(self, node: Node) -> bool:
        return True

    def leave_media_type_list_delimiter(self, node: Node) -> None:
        pass

    def enter_media_rule(self, node: MediaRule) -> bool:
        return True

    def leave_media_rule(self, node: MediaRule) -> None:
        pass

    def enter_page_rule(self, node: PageRule) -> bool:
        return True

    def leave_page_rule(self, node: PageRule) -> None:
        pass

    def enter_page_selector(self, node: PageSelector) -> bool:
        return True

    def leave_page_selector(self, node: PageSelector) -> None:
        pass

    def enter_font_face(self, node: FontFaceRule) -> bool:
        return True

    def leave_font_face(self, node: FontFaceRule) -> None:
        pass

    def enter_charset(self, node: CharSetRule) -> bool:
        return True

    def leave_charset(self, node: CharSetRule) -> None:
        pass

    def enter_definition(self, node: DefinitionNode) -> bool:
        return True

    def leave_definition(self, node: DefinitionNode) -> None:
        pass

    def enter_conditional_block(self, node: ConditionalBlock) -> bool:
        return True

    def leave_conditional_block(self, node: ConditionalBlock) -> None:
        pass

    def enter_conditional_rule(self, node: ConditionalRule) -> bool:
        return True

    def leave_conditional_rule(self, node: ConditionalRule) -> None:
        pass


class UniformVisitor:
    """Visitor that receives every node through the same two callbacks."""

    def enter(self, node: Node) -> None:
        pass

    def leave(self, node: Node) -> None:
        pass


def _make_enter(kind: str) -> Callable[[TreeVisitor, Node], bool]:
    def enter(self: _UniformAdapter, node: Node) -> bool:
        self.delegate.enter(node)
        return True

    enter.__name__ = f"enter_{kind}"
    return enter


def _make_leave(kind: str) -> Callable[[TreeVisitor, Node], None]:
    def leave(self: _UniformAdapter, node: Node) -> None:
        self.delegate.leave(node)

    leave.__name__ = f"leave_{kind}"
    return leave


class _UniformAdapter(TreeVisitor):
    def __init__(self, delegate: UniformVisitor) -> None:
        self.delegate = delegate


for _kind in NODE_HOOK_KINDS:
    setattr(_UniformAdapter, f"enter_{_kind}", _make_enter(_kind))
    setattr(_UniformAdapter, f"leave_{_kind}", _make_leave(_kind))
del _kind


def as_tree_visitor(visitor: UniformVisitor) -> TreeVisitor:
    """Adapt a :class:`UniformVisitor` to the per-kind hook protocol.

    Separator hooks are not forwarded; they do not correspond to a node.
    """
    return _UniformAdapter(visitor)
