#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/passes/bidi_flipper.py
"""Mirroring of stylesheets for right-to-left output.

:class:`BiDiFlipper` rewrites every declaration so that what was on the left
ends up on the right:

- property names: ``padding-left`` becomes ``padding-right``, and
  ``border-left-width`` becomes ``border-right-width``;
- keyword values: ``left``/``right``, ``ltr``/``rtl`` and the diagonal
  ``*-resize`` cursors;
- four-part box values: ``margin: 1px 2px 3px 4px`` becomes
  ``margin: 1px 4px 3px 2px``;
- ``border-radius`` corners, on both sides of a ``/``;
- horizontal background percentages: ``background-position: 20% 50%``
  becomes ``80% 50%``;
- optionally, ``ltr``/``rtl`` and ``left``/``right`` path segments in ``url()``.

A declaration preceded by a ``/* @noflip */`` comment is left alone.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from cssforge.ast.controller import MutatingVisitController
from cssforge.ast.nodes import (
    CompositeValueNode,
    ConstantReferenceNode,
    DeclarationNode,
    FunctionNode,
    LiteralNode,
    NumericNode,
    PriorityNode,
    PropertyValue,
    StringNode,
    ValueNode,
)
from cssforge.passes.base import VisitingPass

logger = logging.getLogger(__name__)

NOFLIP_ANNOTATION = "@noflip"

EXACT_MATCHING_FOR_FLIPPING = {
    "ltr": "rtl",
    "rtl": "ltr",
    "left": "right",
    "right": "left",
    "e-resize": "w-resize",
    "w-resize": "e-resize",
    "ne-resize": "nw-resize",
    "nw-resize": "ne-resize",
    "nesw-resize": "nwse-resize",
    "nwse-resize": "nesw-resize",
    "se-resize": "sw-resize",
    "sw-resize": "se-resize",
}

ENDS_WITH_MATCHING_FOR_FLIPPING = {
    "-left": "-right",
    "-right": "-left",
    "-bottomleft": "-bottomright",
    "-topleft": "-topright",
    "-bottomright": "-bottomleft",
    "-topright": "-topleft",
}

CONTAINS_MATCHING_FOR_FLIPPING = {
    "-left-": "-right-",
    "-right-": "-left-",
}

PROPERTIES_WITH_FLIPPABLE_PERCENTAGE = frozenset(
    {"background", "background-position", "background-position-x", "-ms-background-position-x"}
)

BORDER_RADIUS_PROPERTIES = frozenset({"border-radius", "-webkit-border-radius", "-moz-border-radius"})

FOUR_PART_PROPERTIES_THAT_SHOULD_FLIP = frozenset(
    {"border-color", "border-style", "border-width", "margin", "padding"}
)

# Only the first match in a url is swapped
_URL_LTR_RTL_PATTERNS = (
    (re.compile(r"(?<![a-zA-Z])([-_./]*)ltr([-_./]+)"), r"\1rtl\2"),
    (re.compile(r"(?<![a-zA-Z])([-_./]*)rtl([-_./]+)"), r"\1ltr\2"),
)
_URL_LEFT_RIGHT_PATTERNS = (
    (re.compile(r"(?<![a-zA-Z])([-_./]*)left([-_./]+)"), r"\1right\2"),
    (re.compile(r"(?<![a-zA-Z])([-_./]*)right([-_./]+)"), r"\1left\2"),
)


def flip_literal_value(value: str) -> str:
    """Return ``value`` with its left/right (or ltr/rtl) meaning mirrored.

    Examples
    --------
    >>> flip_literal_value("left")
    'right'
    >>> flip_literal_value("margin-right")
    'margin-left'
    >>> flip_literal_value("border-left-color")
    'border-right-color'

    """
    value = EXACT_MATCHING_FOR_FLIPPING.get(value, value)
    for suffix, replacement in ENDS_WITH_MATCHING_FOR_FLIPPING.items():
        if value.endswith(suffix):
            value = value.replace(suffix, replacement)
            break
    for part, replacement in CONTAINS_MATCHING_FOR_FLIPPING.items():
        if part in value:
            value = value.replace(part, replacement)
            break
    return value


def flip_percentage_value(value: str) -> str:
    """Return ``100 - value`` formatted without trailing zeros.

    Examples
    --------
    >>> flip_percentage_value("20")
    '80'
    >>> flip_percentage_value("33.5")
    '66.5'

    """
    flipped = f"{100 - float(value):.8f}".rstrip("0").rstrip(".")
    return "0" if flipped in ("", "-0") else flipped


def _flip_corners(values: list[ValueNode]) -> list[ValueNode]:
    """Reorder border-radius corners: 0 1 -> 1 0, 0 1 2 -> 1 0 1 2, 0 1 2 3 -> 1 0 3 2."""
    if len(values) == 2:
        return [values[1], values[0]]
    if len(values) == 3:
        return [values[1], values[0], values[1].deep_copy(), values[2]]
    if len(values) == 4:
        return [values[1], values[0], values[3], values[2]]
    return values


def _is_slash(value: ValueNode) -> bool:
    return isinstance(value, CompositeValueNode) and value.operator == "/"


def _flip_border_radius(values: list[ValueNode]) -> list[ValueNode]:
    slash_index = next((index for index, value in enumerate(values) if _is_slash(value)), None)
    if slash_index is None:
        return _flip_corners(values)

    # "1px 2px / 5px 6px" parses as 1px, (2px / 5px), 6px
    slash = values[slash_index]
    horizontal = _flip_corners([*values[:slash_index], slash.values[0]])
    vertical = _flip_corners([slash.values[1], *values[slash_index + 1 :]])
    joined = CompositeValueNode([horizontal[-1], vertical[0]], "/", location=slash.location)
    return [*horizontal[:-1], joined, *vertical[1:]]


class BiDiFlipper(VisitingPass):
    """Mirror declarations for right-to-left layouts.

    Parameters
    ----------
    visit_controller : MutatingVisitController
        Controller over the tree to rewrite.
    swap_ltr_rtl_in_url : bool, default False
        Swap ``ltr`` and ``rtl`` path segments inside ``url()`` values.
    swap_left_right_in_url : bool, default False
        Swap ``left`` and ``right`` path segments inside ``url()`` values.
    flip_constant_references : bool, default False
        Treat unresolved constant references as flippable box values.

    """

    def __init__(
        self,
        visit_controller: MutatingVisitController,
        swap_ltr_rtl_in_url: bool = False,
        swap_left_right_in_url: bool = False,
        flip_constant_references: bool = False,
    ):
        super().__init__(visit_controller)
        self.swap_ltr_rtl_in_url = swap_ltr_rtl_in_url
        self.swap_left_right_in_url = swap_left_right_in_url
        self.flip_constant_references = flip_constant_references
        self.flipped = 0

    def enter_declaration(self, node: DeclarationNode) -> bool:
        if any(comment.strip() == NOFLIP_ANNOTATION for comment in node.comments):
            return False

        property_name = node.property_name
        original = node.property_value.values
        values: list[ValueNode] = []
        for index, value in enumerate(original):
            flipped = self._flip_url(value)
            flipped = self._flip_literal(flipped)
            if self._is_valid_for_percentage_flipping(property_name, original, index):
                flipped = self._flip_percentage(flipped)
            values.append(flipped if flipped is not value else value.deep_copy())

        priority: Optional[ValueNode] = None
        if values and isinstance(values[-1], PriorityNode):
            priority = values.pop()
        values = self._flip_box_values(values, property_name)
        if priority is not None:
            values.append(priority)

        replacement = DeclarationNode(
            flip_literal_value(property_name),
            PropertyValue(values, location=node.property_value.location),
            node.star_hack,
            comments=list(node.comments),
            location=node.location,
        )
        self.visit_controller.replace_current_block_child_with([replacement], False)
        self.flipped += 1
        return False

    @staticmethod
    def _flip_literal(value: ValueNode) -> ValueNode:
        if type(value) is not LiteralNode:
            return value
        flipped = flip_literal_value(value.value)
        if flipped == value.value:
            return value
        return LiteralNode(flipped, location=value.location)

    @staticmethod
    def _is_valid_for_percentage_flipping(property_name: str, values: list[ValueNode], index: int) -> bool:
        # CSS 2.1 positions only: the first value, or a background value not preceded by a vertical one
        if property_name not in PROPERTIES_WITH_FLIPPABLE_PERCENTAGE:
            return False
        if index == 0:
            return True
        if property_name == "background":
            previous = values[index - 1]
            return not isinstance(previous, NumericNode) and previous.value not in ("left", "center", "right")
        return False

    @staticmethod
    def _flip_percentage(value: ValueNode) -> ValueNode:
        if not isinstance(value, NumericNode) or value.unit != "%":
            return value
        return NumericNode(flip_percentage_value(value.numeric_part), "%", location=value.location)

    def _flip_url(self, value: ValueNode) -> ValueNode:
        if not isinstance(value, FunctionNode) or value.name.lower() != "url" or len(value.arguments) != 1:
            return value
        argument = value.arguments[0]
        if not isinstance(argument, (LiteralNode, StringNode)):
            return value
        url = self._flip_url_value(argument.value)
        if url == argument.value:
            return value
        flipped = value.deep_copy()
        flipped.arguments[0].value = url
        return flipped

    def _flip_url_value(self, url: str) -> str:
        pattern_sets = []
        if self.swap_ltr_rtl_in_url:
            pattern_sets.append(_URL_LTR_RTL_PATTERNS)
        if self.swap_left_right_in_url:
            pattern_sets.append(_URL_LEFT_RIGHT_PATTERNS)
        for patterns in pattern_sets:
            for pattern, replacement in patterns:
                if pattern.search(url):
                    url = pattern.sub(replacement, url, count=1)
                    break
        return url

    def _flip_box_values(self, values: list[ValueNode], property_name: str) -> list[ValueNode]:
        """Swap the right and left entries of a four-part box value."""
        if property_name in BORDER_RADIUS_PROPERTIES:
            return _flip_border_radius(values)
        if len(values) != 4 or property_name not in FOUR_PART_PROPERTIES_THAT_SHOULD_FLIP:
            return values
        for value in values:
            if isinstance(value, ConstantReferenceNode):
                if not self.flip_constant_references:
                    return values
            elif not isinstance(value, (NumericNode, LiteralNode)):
                return values
        return [values[0], values[3], values[2], values[1]]

    def run_pass(self) -> None:
        super().run_pass()
        logger.debug("Flipped %d declaration(s)", self.flipped)
