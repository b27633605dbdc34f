#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/passes/eliminate_conditional_nodes.py
"""Evaluation of conditional blocks against a set of true conditions.

Each :class:`ConditionalBlock` is replaced by the contents of its first branch
whose condition holds. A chain without a matching branch (and without an
``@else``) disappears. Replacements are visited, so nested chains are resolved
in the same traversal.

Conditions use a small boolean grammar::

    expr    := or
    or      := and ("||" and)*
    and     := unary ("&&" unary)*
    unary   := "!" unary | "(" expr ")" | NAME

``TRUE`` and ``FALSE`` are constants; any other name is true exactly when it
is in the configured set of true conditions.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from cssforge.ast.controller import MutatingVisitController
from cssforge.ast.nodes import AtRuleType, ConditionalBlock, ConditionalRule, Node
from cssforge.errors import ErrorManager
from cssforge.passes.base import VisitingPass

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r"\s*(?:(&&|\|\||[!()])|([A-Za-z_][A-Za-z0-9_.-]*))")


class BooleanExpressionEvaluator:
    """Evaluate condition strings against a set of names known to be true.

    Parameters
    ----------
    true_conditions : iterable of str
        Names that evaluate to true.

    Examples
    --------
    >>> BooleanExpressionEvaluator({"DEBUG"}).evaluate("DEBUG && !IE")
    True

    """

    def __init__(self, true_conditions: Iterable[str] = ()) -> None:
        self.true_conditions = frozenset(true_conditions)

    def evaluate(self, expression: str) -> bool:
        """Return the truth value of ``expression``.

        Raises
        ------
        ValueError
            If the expression does not follow the condition grammar.

        """
        self._tokens = self._tokenize(expression)
        self._position = 0
        result = self._parse_or()
        if self._position != len(self._tokens):
            raise ValueError(f"Unexpected '{self._tokens[self._position]}' in condition '{expression}'")
        return result

    @staticmethod
    def _tokenize(expression: str) -> list[str]:
        tokens = []
        position = 0
        stripped = expression.rstrip()
        while position < len(stripped):
            match = _TOKEN_PATTERN.match(stripped, position)
            if match is None:
                raise ValueError(f"Cannot read condition '{expression}' at offset {position}")
            tokens.append(match.group(1) or match.group(2))
            position = match.end()
        if not tokens:
            raise ValueError("Empty condition")
        return tokens

    def _peek(self) -> str | None:
        return self._tokens[self._position] if self._position < len(self._tokens) else None

    def _take(self) -> str:
        token = self._peek()
        if token is None:
            raise ValueError("Condition ends unexpectedly")
        self._position += 1
        return token

    def _parse_or(self) -> bool:
        result = self._parse_and()
        while self._peek() == "||":
            self._take()
            right = self._parse_and()
            result = result or right
        return result

    def _parse_and(self) -> bool:
        result = self._parse_unary()
        while self._peek() == "&&":
            self._take()
            right = self._parse_unary()
            result = result and right
        return result

    def _parse_unary(self) -> bool:
        token = self._take()
        if token == "!":
            return not self._parse_unary()
        if token == "(":
            result = self._parse_or()
            if self._take() != ")":
                raise ValueError("Missing ')' in condition")
            return result
        if token in ("&&", "||", ")"):
            raise ValueError(f"Unexpected '{token}' in condition")
        if token == "TRUE":
            return True
        if token == "FALSE":
            return False
        return token in self.true_conditions


class EliminateConditionalNodes(VisitingPass):
    """Replace every conditional block with the contents of its chosen branch.

    Parameters
    ----------
    visit_controller : MutatingVisitController
        Controller over the tree to rewrite.
    error_manager : ErrorManager
        Receives errors for unreadable conditions. A branch whose condition
        cannot be read is treated as false.
    true_conditions : iterable of str
        Condition names that hold for this compilation.

    """

    def __init__(
        self,
        visit_controller: MutatingVisitController,
        error_manager: ErrorManager,
        true_conditions: Iterable[str] = (),
    ):
        super().__init__(visit_controller, error_manager)
        self.evaluator = BooleanExpressionEvaluator(true_conditions)

    def enter_conditional_block(self, node: ConditionalBlock) -> bool:
        for rule in node.children:
            if self._holds(rule):
                replacement: list[Node] = list(rule.block.children) if rule.block is not None else []
                logger.debug("Conditional branch %s selected with %d node(s)", rule.type, len(replacement))
                self.visit_controller.replace_current_block_child_with(replacement, True)
                return False
        self.visit_controller.remove_current_node()
        return False

    def _holds(self, rule: ConditionalRule) -> bool:
        if rule.type is AtRuleType.ELSE:
            return True
        condition = rule.condition
        if condition is None:
            return False
        try:
            return self.evaluator.evaluate(condition.value)
        except ValueError as e:
            self.report_error(f"Invalid condition: {e}", condition)
            return False
