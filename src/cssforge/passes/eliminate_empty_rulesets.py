#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/passes/eliminate_empty_rulesets.py
"""Removal of rulesets that declare nothing."""

from __future__ import annotations

import logging

from cssforge.ast.controller import MutatingVisitController
from cssforge.ast.nodes import RulesetNode
from cssforge.passes.base import VisitingPass

logger = logging.getLogger(__name__)


class EliminateEmptyRulesetNodes(VisitingPass):
    """Drop every ruleset whose declaration block is empty."""

    def __init__(self, visit_controller: MutatingVisitController):
        super().__init__(visit_controller)
        self.removed = 0

    def enter_ruleset(self, node: RulesetNode) -> bool:
        if node.declarations.is_empty():
            self.visit_controller.remove_current_node()
            self.removed += 1
            return False
        return True

    def run_pass(self) -> None:
        super().run_pass()
        if self.removed:
            logger.debug("Removed %d empty ruleset(s)", self.removed)
