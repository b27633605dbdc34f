#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/passes/unknown_at_rules.py
"""Handling of at-rules that no pass recognised."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from cssforge.ast.controller import MutatingVisitController
from cssforge.ast.nodes import AtRuleType, UnknownAtRule
from cssforge.errors import ErrorManager
from cssforge.passes.base import VisitingPass

logger = logging.getLogger(__name__)

UNKNOWN_AT_RULE_ERROR_MESSAGE = "unknown @ rule"

_VENDOR_KEYFRAMES = re.compile(r"-[a-z]+-keyframes")


def is_recognized_at_rule(name: str) -> bool:
    """Return whether ``name`` is a catalogued at-rule or a vendor ``keyframes`` variant."""
    if AtRuleType.from_name(name, True) is not AtRuleType.UNKNOWN_BLOCK:
        return True
    return _VENDOR_KEYFRAMES.fullmatch(name) is not None


class HandleUnknownAtRuleNodes(VisitingPass):
    """Report and/or remove unknown at-rules that are still in the tree.

    Parameters
    ----------
    visit_controller : MutatingVisitController
        Controller over the tree to check.
    error_manager : ErrorManager
        Receives one error per reported rule.
    allowed_at_rules : iterable of str
        Names, without ``@``, that are accepted even though unrecognised.
    report : bool, default True
        Whether to report each unknown rule as an error.
    remove : bool, default True
        Whether to remove unknown rules. A removed rule's block is not
        visited, so nested unknown rules are not reported separately.

    """

    def __init__(
        self,
        visit_controller: MutatingVisitController,
        error_manager: ErrorManager,
        allowed_at_rules: Iterable[str] = (),
        report: bool = True,
        remove: bool = True,
    ):
        super().__init__(visit_controller, error_manager)
        self.allowed_at_rules = frozenset(allowed_at_rules)
        self.report = report
        self.remove = remove

    def enter_unknown_at_rule(self, node: UnknownAtRule) -> bool:
        name = node.name.value
        if name in self.allowed_at_rules or is_recognized_at_rule(name):
            return True
        if self.report:
            self.report_error(UNKNOWN_AT_RULE_ERROR_MESSAGE, node)
        if self.remove:
            logger.debug("Removing unknown at-rule @%s", name)
            self.visit_controller.remove_current_node()
            return False
        return True
