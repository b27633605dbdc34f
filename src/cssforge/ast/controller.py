#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/ast/controller.py
"""Visit controllers: the traversal drivers for stylesheet trees.

A controller walks a subtree depth-first in document order and fires the
visitor hooks described in :mod:`cssforge.ast.visitors`. The mutating variant
additionally lets a pass replace or remove the node it is currently visiting.

Traversal keeps an explicit stack of cursor frames, one per child list being
walked. A frame records the owning node, the list itself and the index of the
current child. Structural edits go through the frame, so the controller always
knows where traversal resumes:

- ``replace_current_block_child_with(nodes, True)`` resumes at the first
  replacement node, so the replacements are visited.
- ``replace_current_block_child_with(nodes, False)`` resumes after the last
  replacement node.
- ``remove_current_node()`` resumes at the node that followed the removed one.

A node that is replaced or removed from its enter hook gets no child traversal
and no leave hook. Nodes held in single-slot positions (the declaration block
of a ruleset, the property value of a declaration, ...) have no enclosing list
and cannot be replaced or removed through the controller.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from cssforge.ast.nodes import (
    AbstractBlock,
    CombinatorNode,
    CompositeValueNode,
    ConditionalBlock,
    ConditionalRule,
    DeclarationNode,
    DefinitionNode,
    FontFaceRule,
    FunctionNode,
    MediaRule,
    Node,
    PageRule,
    PageSelector,
    PropertyValue,
    PseudoClass,
    RootNode,
    RulesetNode,
    SelectorList,
    SelectorNode,
    UnknownAtRule,
    ValueNode,
)
from cssforge.ast.visitors import TreeVisitor
from cssforge.exceptions import VisitControllerError

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    """Cursor over one child list (or a single child slot when ``children`` is None)."""

    owner: Optional[Node]
    children: Optional[list]
    index: int = 0
    current: Optional[Node] = None
    mutated: bool = False


class VisitController:
    """Read-only traversal driver.

    Parameters
    ----------
    subtree : Node
        Node at which every traversal starts.

    """

    def __init__(self, subtree: Node) -> None:
        self.subtree = subtree
        self._visitor: Optional[TreeVisitor] = None
        self._frames: list[_Frame] = []
        self._stopped = False

    def start_visit(self, visitor: TreeVisitor) -> None:
        """Traverse the subtree, firing ``visitor``'s hooks in document order."""
        self._visitor = visitor
        self._frames = []
        self._stopped = False
        try:
            self._visit_slot(None, self.subtree)
        finally:
            self._visitor = None
            self._frames = []

    def stop_visit(self) -> None:
        """Abort the current traversal; no further hooks fire."""
        logger.debug("Traversal stopped by visitor")
        self._stopped = True

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _visit_slot(self, owner: Optional[Node], node: Node, argument: bool = False) -> None:
        frame = _Frame(owner, None, current=node)
        self._frames.append(frame)
        try:
            self._visit_node(node, frame, argument)
        finally:
            self._frames.pop()

    def _visit_list(
        self,
        owner: Node,
        children: list,
        argument: bool = False,
        separator: Optional[str] = None,
    ) -> None:
        frame = _Frame(owner, children)
        self._frames.append(frame)
        try:
            while frame.index < len(children) and not self._stopped:
                if separator is not None and frame.index > 0:
                    frame.current = None
                    self._fire_separator(separator, owner)
                    if self._stopped:
                        return
                node = children[frame.index]
                frame.current = node
                frame.mutated = False
                self._visit_node(node, frame, argument)
                if not frame.mutated:
                    frame.index += 1
        finally:
            self._frames.pop()

    def _fire_separator(self, kind: str, owner: Node) -> None:
        if getattr(self._visitor, f"enter_{kind}")(owner) and not self._stopped:
            getattr(self._visitor, f"leave_{kind}")(owner)

    @staticmethod
    def _kind_of(node: Node, argument: bool) -> str:
        if argument and isinstance(node, ValueNode) and not isinstance(node, FunctionNode):
            return "argument_node"
        return node.visit_kind

    def _visit_node(self, node: Node, frame: _Frame, argument: bool) -> None:
        kind = self._kind_of(node, argument)
        descend = getattr(self._visitor, f"enter_{kind}")(node)
        if self._stopped or frame.mutated:
            return
        if descend:
            self._visit_children(node)
            if self._stopped:
                return
        getattr(self._visitor, f"leave_{kind}")(node)

    def _visit_children(self, node: Node) -> None:
        if isinstance(node, RootNode):
            self._visit_slot(node, node.import_block)
            if not self._stopped:
                self._visit_slot(node, node.body)
        elif isinstance(node, (AbstractBlock, ConditionalBlock)):
            self._visit_list(node, node.children)
        elif isinstance(node, RulesetNode):
            self._visit_slot(node, node.selectors)
            if not self._stopped:
                self._visit_slot(node, node.declarations)
        elif isinstance(node, SelectorList):
            self._visit_list(node, node.selectors)
        elif isinstance(node, SelectorNode):
            self._visit_list(node, node.refiners)
            if node.combinator is not None and not self._stopped:
                self._visit_slot(node, node.combinator)
        elif isinstance(node, CombinatorNode):
            self._visit_slot(node, node.selector)
        elif isinstance(node, PseudoClass):
            if node.not_selectors is not None:
                self._visit_slot(node, node.not_selectors)
        elif isinstance(node, DeclarationNode):
            self._visit_slot(node, node.property_value)
        elif isinstance(node, PropertyValue):
            self._visit_list(node, node.values)
        elif isinstance(node, CompositeValueNode):
            self._visit_list(node, node.values, separator="composite_value_node_operator")
        elif isinstance(node, FunctionNode):
            self._visit_list(node, node.arguments, argument=True)
        elif isinstance(node, (UnknownAtRule, MediaRule)):
            self._visit_list(node, node.parameters, separator="media_type_list_delimiter")
            if node.block is not None and not self._stopped:
                self._visit_slot(node, node.block)
        elif isinstance(node, (PageRule, PageSelector, FontFaceRule, ConditionalRule)):
            if node.block is not None:
                self._visit_slot(node, node.block)
        elif isinstance(node, DefinitionNode):
            self._visit_list(node, node.values)


class MutatingVisitController(VisitController):
    """Traversal driver that allows the current node to be replaced or removed."""

    def _current_frame(self, operation: str) -> _Frame:
        if not self._frames:
            raise VisitControllerError(f"{operation} called outside of a traversal")
        frame = self._frames[-1]
        if frame.current is None:
            raise VisitControllerError(f"{operation} called while no node is current")
        if frame.children is None:
            raise VisitControllerError(
                f"{operation}: {type(frame.current).__name__} is not held in a child list and cannot be mutated"
            )
        if frame.mutated:
            raise VisitControllerError(
                f"{operation}: {type(frame.current).__name__} has already been replaced or removed"
            )
        return frame

    @property
    def current_node(self) -> Optional[Node]:
        """The node whose enter or leave hook is running, if any."""
        return self._frames[-1].current if self._frames else None

    def replace_current_block_child_with(self, new_nodes: Sequence[Node], visit_replacements: bool) -> None:
        """Splice ``new_nodes`` into the current node's position.

        Parameters
        ----------
        new_nodes : sequence of Node
            Replacement nodes, in order. Ownership moves to the current node's
            owner.
        visit_replacements : bool
            When true, traversal continues with the first replacement node;
            otherwise it continues after the last one.

        Raises
        ------
        VisitControllerError
            If no mutable node is current or it was already mutated.

        """
        frame = self._current_frame("replace_current_block_child_with")
        index = frame.index
        old = frame.children[index]
        replacements = list(new_nodes)
        frame.children[index : index + 1] = replacements
        old.parent = None
        for replacement in replacements:
            replacement.parent = frame.owner
        frame.index = index if visit_replacements else index + len(replacements)
        frame.mutated = True
        logger.debug(
            "Replaced %s with %d node(s) in %s",
            type(old).__name__,
            len(replacements),
            type(frame.owner).__name__,
        )

    def remove_current_node(self) -> None:
        """Remove the current node; traversal continues with its next sibling.

        Raises
        ------
        VisitControllerError
            If no mutable node is current or it was already mutated.

        """
        frame = self._current_frame("remove_current_node")
        old = frame.children.pop(frame.index)
        old.parent = None
        frame.mutated = True
        logger.debug("Removed %s from %s", type(old).__name__, type(frame.owner).__name__)
