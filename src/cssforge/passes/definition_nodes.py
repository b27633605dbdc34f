#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/passes/definition_nodes.py
"""Extraction of ``@def NAME value...;`` constants into definition nodes."""

from __future__ import annotations

from cssforge.ast.controller import MutatingVisitController
from cssforge.ast.nodes import AtRuleType, DefinitionNode, LiteralNode, Node, UnknownAtRule
from cssforge.constants import DEFINITION_NAME_PATTERN
from cssforge.errors import ErrorManager
from cssforge.passes.base import VisitingPass

DEF_NAME = AtRuleType.DEFINE.canonical_name


def is_definition_reference(name: str) -> bool:
    """Return whether ``name`` is spelled like a constant (``[A-Z_][A-Z_0-9]*``)."""
    return DEFINITION_NAME_PATTERN.fullmatch(name) is not None


class CreateDefinitionNodes(VisitingPass):
    """Replace well-formed ``@def`` rules with :class:`DefinitionNode` nodes.

    A ``@def`` with a block, without parameters, or whose first parameter is
    not a plain literal is reported and removed. A name that does not look
    like a constant only draws a warning and is converted anyway.
    """

    def __init__(self, visit_controller: MutatingVisitController, error_manager: ErrorManager):
        super().__init__(visit_controller, error_manager)

    def enter_unknown_at_rule(self, node: UnknownAtRule) -> bool:
        if node.name.value != DEF_NAME:
            return True
        if node.block is not None:
            self._reject(f"@{DEF_NAME} with block", node)
            return False
        params = node.parameters
        if not params:
            self._reject(f"@{DEF_NAME} without name", node)
            return False
        name_node = params[0]
        if type(name_node) is not LiteralNode:
            self._reject(f"@{DEF_NAME} without a valid literal as name", node)
            return False
        if not is_definition_reference(name_node.value):
            self.report_warning(f"WARNING for invalid @def name {name_node.value}. We will ignore this.", name_node)

        definition = DefinitionNode(
            name_node,
            list(params[1:]),
            comments=list(node.comments),
            location=node.location,
        )
        self.visit_controller.replace_current_block_child_with([definition], False)
        return False

    def _reject(self, message: str, node: Node) -> None:
        self.report_error(message, node)
        self.visit_controller.remove_current_node()
