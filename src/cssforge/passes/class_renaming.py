#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/passes/class_renaming.py
"""Renaming of class and id selectors through substitution maps."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from cssforge.ast.controller import MutatingVisitController
from cssforge.ast.nodes import ClassSelector, IdSelector, RefinerNode
from cssforge.passes.base import VisitingPass
from cssforge.renaming import SubstitutionMap

logger = logging.getLogger(__name__)


class CssClassRenaming(VisitingPass):
    """Replace class and id selectors with their substitutions.

    Parameters
    ----------
    visit_controller : MutatingVisitController
        Controller over the tree to rewrite.
    class_map : SubstitutionMap, optional
        Map applied to class names. Classes are left alone when omitted.
    id_map : SubstitutionMap, optional
        Map applied to element ids. Ids are left alone when omitted.
    excluded_classes : iterable of str, optional
        Class names that are never renamed.

    """

    def __init__(
        self,
        visit_controller: MutatingVisitController,
        class_map: Optional[SubstitutionMap] = None,
        id_map: Optional[SubstitutionMap] = None,
        excluded_classes: Iterable[str] = (),
    ):
        super().__init__(visit_controller)
        self.class_map = class_map
        self.id_map = id_map
        self.excluded_classes = frozenset(excluded_classes)
        self.renamed = 0

    def enter_class_selector(self, node: ClassSelector) -> bool:
        if self.class_map is None or node.name in self.excluded_classes:
            return True
        self._substitute(node, self.class_map.get(node.name))
        return True

    def enter_id_selector(self, node: IdSelector) -> bool:
        if self.id_map is None:
            return True
        self._substitute(node, self.id_map.get(node.name))
        return True

    def _substitute(self, node: RefinerNode, substitution: Optional[str]) -> None:
        if substitution is None:
            return
        replacement = type(node)(substitution, comments=list(node.comments), location=node.location)
        self.visit_controller.replace_current_block_child_with([replacement], False)
        self.renamed += 1

    def run_pass(self) -> None:
        super().run_pass()
        logger.debug("Renamed %d selector(s)", self.renamed)
