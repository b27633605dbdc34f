#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/passes/base.py
"""Base class for compiler passes."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from cssforge.ast.controller import MutatingVisitController
from cssforge.ast.nodes import Node
from cssforge.ast.visitors import TreeVisitor
from cssforge.errors import CssError, ErrorManager

logger = logging.getLogger(__name__)


class CompilerPass(ABC):
    """A single rewrite or analysis over a stylesheet tree.

    Parameters
    ----------
    visit_controller : MutatingVisitController
        Controller positioned on the tree the pass works on.
    error_manager : ErrorManager, optional
        Sink for problems found in the stylesheet. Passes that cannot find
        problems may omit it.

    """

    def __init__(self, visit_controller: MutatingVisitController, error_manager: Optional[ErrorManager] = None):
        self.visit_controller = visit_controller
        self.error_manager = error_manager

    @abstractmethod
    def run_pass(self) -> None:
        """Run the pass to completion over the controller's subtree."""

    def report_error(self, message: str, node: Node) -> None:
        """Record an error at ``node``'s location."""
        if self.error_manager is None:
            raise RuntimeError(f"{type(self).__name__} needs an error manager to report: {message}")
        self.error_manager.report(CssError(message, node.location))

    def report_warning(self, message: str, node: Node) -> None:
        """Record a warning at ``node``'s location."""
        if self.error_manager is None:
            raise RuntimeError(f"{type(self).__name__} needs an error manager to report: {message}")
        self.error_manager.report_warning(CssError(message, node.location))


class VisitingPass(CompilerPass, TreeVisitor):
    """A pass that is itself the visitor driven by its controller."""

    def run_pass(self) -> None:
        logger.debug("Running %s", type(self).__name__)
        self.visit_controller.start_visit(self)
