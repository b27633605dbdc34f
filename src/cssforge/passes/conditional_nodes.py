#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/passes/conditional_nodes.py
"""Assembly of ``@if``/``@elseif``/``@else`` chains into conditional blocks.

The parser leaves every branch as a sibling :class:`UnknownAtRule`. This pass
folds a run of branches into one :class:`ConditionalBlock` holding a
:class:`ConditionalRule` per branch.

A branch is only complete once its block has been visited, so blocks under
construction live on a stack until the branch's leave hook fires. A separate
*active block* slot names the chain that an immediately following ``@elseif``
or ``@else`` may join; entering any other at-rule, a ruleset or a definition
clears it.
"""

from __future__ import annotations

import logging
from typing import Optional

from cssforge.ast.controller import MutatingVisitController
from cssforge.ast.location import SourceLocation
from cssforge.ast.nodes import (
    AtRuleType,
    BooleanExpressionNode,
    ConditionalBlock,
    ConditionalRule,
    DefinitionNode,
    RulesetNode,
    UnknownAtRule,
    ValueNode,
)
from cssforge.errors import CssError, ErrorManager
from cssforge.passes.base import VisitingPass

logger = logging.getLogger(__name__)

IF_NAME = AtRuleType.IF.canonical_name
ELSEIF_NAME = AtRuleType.ELSEIF.canonical_name
ELSE_NAME = AtRuleType.ELSE.canonical_name

_BRANCH_TYPES = {IF_NAME: AtRuleType.IF, ELSEIF_NAME: AtRuleType.ELSEIF, ELSE_NAME: AtRuleType.ELSE}


class CreateConditionalNodes(VisitingPass):
    """Fold sibling conditional at-rules into :class:`ConditionalBlock` nodes.

    Parameters
    ----------
    visit_controller : MutatingVisitController
        Controller over the tree to rewrite.
    error_manager : ErrorManager
        Receives chain and branch errors.

    """

    def __init__(self, visit_controller: MutatingVisitController, error_manager: ErrorManager):
        super().__init__(visit_controller, error_manager)
        self._stack: list[ConditionalBlock] = []
        self._active_block: Optional[ConditionalBlock] = None

    def enter_unknown_at_rule(self, node: UnknownAtRule) -> bool:
        name = node.name.value
        if name == IF_NAME:
            self._stack.append(ConditionalBlock(comments=list(node.comments), location=node.location))
        elif name in (ELSEIF_NAME, ELSE_NAME):
            if self._active_block is None:
                self.error_manager.report(CssError(f"@{name} without previous @{IF_NAME}", node.location))
                self.visit_controller.remove_current_node()
                return False
            self._stack.append(self._active_block)
        self._active_block = None
        return True

    def leave_unknown_at_rule(self, node: UnknownAtRule) -> None:
        name = node.name.value
        if name not in _BRANCH_TYPES:
            return
        block = self._stack.pop()
        self._active_block = block
        block.add_child(self._create_conditional_rule(node, name))
        self._update_location(block)
        if name == IF_NAME:
            self.visit_controller.replace_current_block_child_with([block], False)
        else:
            self.visit_controller.remove_current_node()
            if name == ELSE_NAME:
                self._active_block = None

    def enter_ruleset(self, node: RulesetNode) -> bool:
        self._active_block = None
        return True

    def enter_definition(self, node: DefinitionNode) -> bool:
        self._active_block = None
        return True

    def _create_conditional_rule(self, node: UnknownAtRule, name: str) -> ConditionalRule:
        if node.block is None:
            self.error_manager.report(CssError(f"@{name} without block", node.location))

        params = node.parameters
        condition: Optional[ValueNode] = None
        if name != ELSE_NAME:
            if params:
                if len(params) > 1:
                    self.error_manager.report(CssError(f"@{name} with too many parameters", node.location))
                param = params[0]
                if isinstance(param, BooleanExpressionNode):
                    condition = param
                else:
                    condition = BooleanExpressionNode(param.value, location=param.location)
            else:
                self.error_manager.report(CssError(f"@{name} without condition", node.location))
        elif params:
            self.error_manager.report(CssError(f"@{ELSE_NAME} with too many parameters", node.location))

        return ConditionalRule(
            [condition] if condition is not None else [],
            node.block,
            type=_BRANCH_TYPES[name],
            comments=list(node.comments),
            location=node.location,
        )

    @staticmethod
    def _update_location(block: ConditionalBlock) -> None:
        first = block.location
        last = block.children[-1].location
        if last.is_unknown:
            return
        if first.is_unknown:
            block.location = last
            return
        block.location = SourceLocation(
            first.source_code,
            first.begin_char,
            first.begin_line,
            first.begin_column,
            last.end_char,
            last.end_line,
            last.end_column,
        )
