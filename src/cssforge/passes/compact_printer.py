#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/passes/compact_printer.py
"""Compact CSS serialization.

This module prints a stylesheet tree as CSS with no optional whitespace.
The printer works by appending text to a buffer from the visitor hooks and
retracting the occasional trailing separator (a space, a comma or a
semicolon) when the next hook proves it unnecessary.

Constructs that should have been compiled away are handled as follows:
definitions are skipped, and a conditional block stops the printout with a
logged warning.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from cssforge.ast.controller import VisitController
from cssforge.ast.nodes import (
    AttributeSelector,
    BlockNode,
    BooleanExpressionNode,
    CharSetRule,
    ClassSelector,
    CombinatorNode,
    CompositeValueNode,
    ConditionalBlock,
    CssTree,
    DeclarationBlock,
    DeclarationNode,
    DefinitionNode,
    FontFaceRule,
    FunctionNode,
    IdSelector,
    ImportRule,
    MediaRule,
    Node,
    NumericNode,
    PageRule,
    PageSelector,
    PriorityNode,
    PropertyValue,
    PseudoClass,
    PseudoClassFunction,
    PseudoElement,
    RefinerNode,
    SelectorList,
    SelectorNode,
    StringNode,
    UnknownAtRule,
    ValueNode,
)
from cssforge.ast.visitors import TreeVisitor
from cssforge.constants import ARGUMENT_SEPARATORS

logger = logging.getLogger(__name__)

_HTML_UNSAFE = {"<": "\\3c ", ">": "\\3e ", "&": "\\26 ", "\n": "\\a "}


def escape_string_content(text: str, quote: str = '"') -> str:
    """Escape string content for a quoted CSS string that may sit in HTML.

    Backslashes and the enclosing quote are escaped, and characters with a
    meaning in HTML are written as CSS hex escapes.

    Examples
    --------
    >>> escape_string_content("</style>")
    '\\\\3c /style\\\\3e '

    """
    parts = []
    for char in text:
        if char == "\\" or char == quote:
            parts.append("\\" + char)
        else:
            parts.append(_HTML_UNSAFE.get(char, char))
    return "".join(parts)


class CompactPrinter(TreeVisitor):
    """Print a tree, or any subtree, as compact CSS.

    Parameters
    ----------
    subtree : Node or CssTree
        What to print. A tree prints from its root.

    Examples
    --------
    >>> from cssforge.parser import parse
    >>> CompactPrinter.print_compactly(parse(".a, .b { color: red; }"))
    '.a,.b{color:red}'

    """

    def __init__(self, subtree: Union[Node, CssTree]):
        self.subtree = subtree.root if isinstance(subtree, CssTree) else subtree
        self.visit_controller = VisitController(self.subtree)
        self.buffer: list[str] = []
        self._compacted: Optional[str] = None

    # ------------------------------------------------------------------
    # Buffer
    # ------------------------------------------------------------------

    def _append(self, text: str) -> None:
        if text:
            self.buffer.append(text)

    def delete_last_char_if_char_is(self, char: str) -> None:
        """Drop the last buffered character if it equals ``char``."""
        while self.buffer and not self.buffer[-1]:
            self.buffer.pop()
        if self.buffer and self.buffer[-1].endswith(char):
            self.buffer[-1] = self.buffer[-1][:-1]
            if not self.buffer[-1]:
                self.buffer.pop()

    def run_pass(self) -> None:
        self.buffer = []
        self.visit_controller.start_visit(self)
        self._compacted = "".join(self.buffer)

    @property
    def compacted_string(self) -> Optional[str]:
        """Output of the last :meth:`run_pass`, or ``None`` before the first run."""
        return self._compacted

    @classmethod
    def print_compactly(cls, subtree: Union[Node, CssTree]) -> str:
        """Return the compact CSS for ``subtree`` without surrounding whitespace."""
        printer = cls(subtree)
        printer.run_pass()
        return (printer.compacted_string or "").strip()

    # ------------------------------------------------------------------
    # At-rules
    # ------------------------------------------------------------------

    def enter_definition(self, node: DefinitionNode) -> bool:
        return False

    def enter_charset(self, node: CharSetRule) -> bool:
        self._append(str(node.type))
        for param in node.parameters:
            self._append(" ")
            self.append_value_node(param)
        return True

    def leave_charset(self, node: CharSetRule) -> None:
        self._append(";")

    def enter_import_rule(self, node: ImportRule) -> bool:
        self._append(str(node.type))
        for param in node.parameters:
            self._append(" ")
            self._append(str(param) if isinstance(param, StringNode) else param.value)
        return True

    def leave_import_rule(self, node: ImportRule) -> None:
        self._append(";")

    def enter_media_rule(self, node: MediaRule) -> bool:
        self._append(str(node.type))
        if node.parameters:
            self._append(" ")
        return True

    def leave_media_rule(self, node: MediaRule) -> None:
        self._append("}")

    def enter_page_rule(self, node: PageRule) -> bool:
        self._append(str(node.type))
        self._append(" ")
        for param in node.parameters:
            self._append(param.value)
        self.delete_last_char_if_char_is(" ")
        return True

    def enter_page_selector(self, node: PageSelector) -> bool:
        self._append(str(node.type))
        for param in node.parameters:
            self._append(" ")
            self._append(param.value)
        return True

    def enter_font_face(self, node: FontFaceRule) -> bool:
        self._append(str(node.type))
        return True

    def enter_unknown_at_rule(self, node: UnknownAtRule) -> bool:
        self._append(f"@{node.name}")
        if node.parameters:
            self._append(" ")
        return True

    def leave_unknown_at_rule(self, node: UnknownAtRule) -> None:
        if node.type.has_block:
            if not isinstance(node.block, DeclarationBlock):
                self._append("}")
        else:
            self._append(";")

    def enter_media_type_list_delimiter(self, node: Node) -> bool:
        self._append(" ")
        return True

    def enter_conditional_block(self, node: ConditionalBlock) -> bool:
        self.visit_controller.stop_visit()
        location = "" if node.location.is_unknown else f"@{node.location.begin_line}"
        first = node.children[0] if node.children else None
        description = f"@{first.name} {first.condition or ''}".rstrip() if first is not None else "empty block"
        logger.warning("Conditional block should not be present: %s%s", description, location)
        return True

    # ------------------------------------------------------------------
    # Selectors
    # ------------------------------------------------------------------

    def enter_selector(self, node: SelectorNode) -> bool:
        self._append(node.name)
        return True

    def leave_selector(self, node: SelectorNode) -> None:
        self._append(",")

    def enter_class_selector(self, node: ClassSelector) -> bool:
        self._append_refiner(node)
        return True

    def enter_id_selector(self, node: IdSelector) -> bool:
        self._append_refiner(node)
        return True

    def enter_pseudo_element(self, node: PseudoElement) -> bool:
        self._append_refiner(node)
        return True

    def enter_pseudo_class(self, node: PseudoClass) -> bool:
        self._append_refiner(node)
        if node.function_type is PseudoClassFunction.NTH:
            self._append(f"({node.argument.replace(' ', '')})")
        elif node.function_type is PseudoClassFunction.LANG:
            self._append(f"({node.argument})")
        elif node.function_type is PseudoClassFunction.NOT:
            self._append("(")
        return True

    def leave_pseudo_class(self, node: PseudoClass) -> None:
        if node.function_type is PseudoClassFunction.NOT:
            self.delete_last_char_if_char_is(",")
            self._append(")")

    def enter_attribute_selector(self, node: AttributeSelector) -> bool:
        self._append(f"{node.prefix}{node.name}{node.match_symbol}{node.value}{node.suffix}")
        return True

    def _append_refiner(self, node: RefinerNode) -> None:
        self._append(f"{node.prefix}{node.refiner_name}")

    def enter_combinator(self, node: CombinatorNode) -> bool:
        self._append(node.combinator_type.canonical_name)
        return True

    def leave_combinator(self, node: CombinatorNode) -> None:
        self.delete_last_char_if_char_is(",")

    def leave_selector_block(self, node: SelectorList) -> None:
        self.delete_last_char_if_char_is(",")

    # ------------------------------------------------------------------
    # Blocks and declarations
    # ------------------------------------------------------------------

    def enter_block(self, node: BlockNode) -> bool:
        if isinstance(node.parent, (UnknownAtRule, MediaRule)):
            self._append("{")
        return True

    def enter_declaration_block(self, node: DeclarationBlock) -> bool:
        self._append("{")
        return True

    def leave_declaration_block(self, node: DeclarationBlock) -> None:
        self.delete_last_char_if_char_is(";")
        self._append("}")

    def enter_declaration(self, node: DeclarationNode) -> bool:
        if node.star_hack:
            self._append("*")
        self._append(f"{node.property_name}:")
        return True

    def leave_declaration(self, node: DeclarationNode) -> None:
        self.delete_last_char_if_char_is(" ")
        self._append(";")

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def leave_composite_value_node(self, node: CompositeValueNode) -> None:
        self.delete_last_char_if_char_is(" ")
        if isinstance(node.parent, PropertyValue):
            self._append(" ")

    def enter_composite_value_node_operator(self, node: CompositeValueNode) -> bool:
        self.delete_last_char_if_char_is(" ")
        self._append(node.operator)
        return True

    def enter_value_node(self, node: ValueNode) -> bool:
        if isinstance(node, PriorityNode):
            self.delete_last_char_if_char_is(" ")
        self.append_value_node(node)
        return True

    def leave_value_node(self, node: ValueNode) -> None:
        if isinstance(node.parent, PropertyValue):
            self._append(" ")

    def enter_function_node(self, node: FunctionNode) -> bool:
        self._append(f"{node.name}(")
        return True

    def leave_function_node(self, node: FunctionNode) -> None:
        self.delete_last_char_if_char_is(" ")
        self._append(") ")

    def enter_argument_node(self, node: ValueNode) -> bool:
        # A preceding function argument leaves a trailing space behind.
        if str(node) in ARGUMENT_SEPARATORS:
            self.delete_last_char_if_char_is(" ")
        self.append_value_node(node)
        return True

    def append_value_node(self, node: ValueNode) -> None:
        """Append the CSS text of a single value.

        Subclasses may override this to change how particular value types
        are written.
        """
        if isinstance(node, CompositeValueNode):
            return
        if isinstance(node, BooleanExpressionNode) and isinstance(_value_owner(node), MediaRule):
            # The parser keeps only the inside of a media feature's parentheses.
            self._append(f"({node.value})")
            return
        if isinstance(node, StringNode):
            self._append(node.to_css(lambda text: escape_string_content(text, node.quote)))
            return
        if isinstance(node, NumericNode):
            self._append(f"{node.numeric_part}{node.unit}")
            return
        self._append(str(node))


def _value_owner(node: ValueNode) -> Optional[Node]:
    """Return the nearest ancestor that is not a composite value."""
    for ancestor in node.ancestors():
        if not isinstance(ancestor, CompositeValueNode):
            return ancestor
    return None


print_compactly = CompactPrinter.print_compactly
