#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/passes/constant_references.py
"""Collection of ``@def`` constants and substitution of their references."""

from __future__ import annotations

import logging
from typing import Optional

from cssforge.ast.controller import MutatingVisitController
from cssforge.ast.nodes import ConstantReferenceNode, DefinitionNode, ValueNode
from cssforge.errors import ErrorManager
from cssforge.passes.base import VisitingPass

logger = logging.getLogger(__name__)


class CollectConstantDefinitions(VisitingPass):
    """Gather every definition in the tree; a later definition of a name wins."""

    def __init__(self, visit_controller: MutatingVisitController):
        super().__init__(visit_controller)
        self.definitions: dict[str, DefinitionNode] = {}

    def enter_definition(self, node: DefinitionNode) -> bool:
        name = node.name.value
        if name in self.definitions:
            logger.debug("Constant %s redefined", name)
        self.definitions[name] = node
        return False

    def get_definition(self, name: str) -> Optional[DefinitionNode]:
        return self.definitions.get(name)


class ReplaceConstantReferences(VisitingPass):
    """Replace constant references with copies of the referenced values.

    References inside definitions are expanded as well, so a definition may
    be written in terms of another. A reference to an unknown constant is
    reported as a warning and left in place; a reference cycle is an error.

    Parameters
    ----------
    visit_controller : MutatingVisitController
        Controller over the tree to rewrite.
    error_manager : ErrorManager
        Receives unknown-constant warnings and cycle errors.
    definitions : dict of str to DefinitionNode
        Definitions gathered by :class:`CollectConstantDefinitions`.

    """

    def __init__(
        self,
        visit_controller: MutatingVisitController,
        error_manager: ErrorManager,
        definitions: dict[str, DefinitionNode],
    ):
        super().__init__(visit_controller, error_manager)
        self.definitions = definitions

    def enter_value_node(self, node: ValueNode) -> bool:
        self._replace(node)
        return True

    def enter_argument_node(self, node: ValueNode) -> bool:
        self._replace(node)
        return True

    def _replace(self, node: ValueNode) -> None:
        if not isinstance(node, ConstantReferenceNode):
            return
        expansion = self._expand(node, ())
        if expansion is not None:
            self.visit_controller.replace_current_block_child_with(expansion, False)

    def _expand(self, reference: ConstantReferenceNode, seen: tuple[str, ...]) -> Optional[list[ValueNode]]:
        name = reference.value
        if name in seen:
            self.report_error(f"Cyclic constant reference: {' -> '.join((*seen, name))}", reference)
            return None
        definition = self.definitions.get(name)
        if definition is None:
            self.report_warning(f"Unknown constant: {name}", reference)
            return None

        values: list[ValueNode] = []
        for value in definition.values:
            if isinstance(value, ConstantReferenceNode):
                nested = self._expand(value, (*seen, name))
                if nested is None:
                    values.append(value.deep_copy())
                else:
                    values.extend(nested)
            else:
                values.append(value.deep_copy())
        return values
