#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/ast/nodes.py
"""AST node classes for stylesheet representation.

This module defines the node hierarchy produced by the parser and rewritten
by the compiler passes. Each node owns its children exclusively; the link back
to the parent is a weak reference that is only ever used for contextual
questions such as "is this value a direct parameter of an ``@media`` rule?".

Node Hierarchy
--------------
Structure:
    - RootNode, BlockNode, DeclarationBlock, ImportBlock
    - RulesetNode, DeclarationNode, PropertyValue

Selectors:
    - SelectorList, SelectorNode, CombinatorNode
    - ClassSelector, IdSelector, PseudoClass, PseudoElement, AttributeSelector

Values:
    - LiteralNode, StringNode, NumericNode, CompositeValueNode, FunctionNode
    - PriorityNode, BooleanExpressionNode, ConstantReferenceNode

At-rules:
    - UnknownAtRule (what the parser produces for every ``@`` construct)
    - MediaRule, PageRule, PageSelector, FontFaceRule, CharSetRule, ImportRule
    - DefinitionNode, ConditionalBlock, ConditionalRule

Every concrete class names its ``visit_kind``; visit controllers use it to
select the ``enter_<kind>``/``leave_<kind>`` hooks of a visitor.

"""

from __future__ import annotations

import copy
import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Iterator, Optional

from cssforge.ast.location import SourceCode, SourceLocation

if TYPE_CHECKING:
    from cssforge.ast.controller import MutatingVisitController, VisitController


class AtRuleType(Enum):
    """Catalogue of at-rule keywords recognised by the parser.

    Each member carries the keyword's canonical name and whether rules of
    that kind own a block. ``UNKNOWN`` and ``UNKNOWN_BLOCK`` are the fallbacks
    for keywords outside the catalogue.
    """

    CHARSET = ("charset", False)
    IMPORT = ("import", False)
    NAMESPACE = ("namespace", False)
    MEDIA = ("media", True)
    PAGE = ("page", True)
    FONT_FACE = ("font-face", True)
    TOP_LEFT_CORNER = ("top-left-corner", True)
    TOP_LEFT = ("top-left", True)
    TOP_CENTER = ("top-center", True)
    TOP_RIGHT = ("top-right", True)
    TOP_RIGHT_CORNER = ("top-right-corner", True)
    LEFT_TOP = ("left-top", True)
    LEFT_MIDDLE = ("left-middle", True)
    LEFT_BOTTOM = ("left-bottom", True)
    RIGHT_TOP = ("right-top", True)
    RIGHT_MIDDLE = ("right-middle", True)
    RIGHT_BOTTOM = ("right-bottom", True)
    BOTTOM_LEFT_CORNER = ("bottom-left-corner", True)
    BOTTOM_LEFT = ("bottom-left", True)
    BOTTOM_CENTER = ("bottom-center", True)
    BOTTOM_RIGHT = ("bottom-right", True)
    BOTTOM_RIGHT_CORNER = ("bottom-right-corner", True)
    DEFINE = ("def", False)
    IF = ("if", True)
    ELSEIF = ("elseif", True)
    ELSE = ("else", True)
    FOR = ("for", True)
    KEYFRAMES = ("keyframes", True)
    SUPPORTS = ("supports", True)
    UNKNOWN = ("", False)
    UNKNOWN_BLOCK = ("", True)

    def __init__(self, canonical_name: str, has_block: bool) -> None:
        self.canonical_name = canonical_name
        self.has_block = has_block

    def __str__(self) -> str:
        return f"@{self.canonical_name}"

    @classmethod
    def from_name(cls, name: str, has_block: bool) -> AtRuleType:
        """Return the catalogue entry for ``name``.

        Parameters
        ----------
        name : str
            Keyword without the leading ``@``.
        has_block : bool
            Whether the rule was written with a block. Only used to pick
            between the two unknown fallbacks.

        """
        for member in cls:
            if member.canonical_name and member.canonical_name == name:
                return member
        return cls.UNKNOWN_BLOCK if has_block else cls.UNKNOWN


class CombinatorType(Enum):
    """Selector combinators, keyed by their printed form."""

    DESCENDANT = " "
    CHILD = ">"
    ADJACENT_SIBLING = "+"
    GENERAL_SIBLING = "~"

    @property
    def canonical_name(self) -> str:
        return self.value

    @classmethod
    def from_symbol(cls, symbol: str) -> CombinatorType:
        return cls(symbol if symbol.strip() else " ")


class PseudoClassFunction(Enum):
    """How a pseudo-class refiner takes an argument, if at all."""

    NONE = "none"
    NTH = "nth"
    LANG = "lang"
    NOT = "not"


def _unknown_location() -> SourceLocation:
    return SourceLocation.unknown()


@dataclass(eq=False)
class Node:
    """Base class for all stylesheet nodes.

    Parameters
    ----------
    location : SourceLocation, keyword-only
        Where the node came from. Synthesized nodes use the unknown sentinel.
    comments : list of str, keyword-only
        Comments that directly preceded the node in the source.

    """

    location: SourceLocation = field(default_factory=_unknown_location, kw_only=True)
    comments: list[str] = field(default_factory=list, kw_only=True)

    visit_kind: ClassVar[str] = "node"

    def __post_init__(self) -> None:
        self._parent_ref: Optional[weakref.ref[Node]] = None
        for child in self.child_nodes():
            child.parent = self

    @property
    def parent(self) -> Optional[Node]:
        """The owning node, or ``None`` for detached nodes and the root."""
        return self._parent_ref() if self._parent_ref is not None else None

    @parent.setter
    def parent(self, value: Optional[Node]) -> None:
        self._parent_ref = weakref.ref(value) if value is not None else None

    def child_nodes(self) -> list[Node]:
        """Return the nodes owned by this node, in document order."""
        return []

    def adopt(self, child: Optional[Node]) -> None:
        """Make this node the parent of ``child``."""
        if child is not None:
            child.parent = self

    def walk(self) -> Iterator[Node]:
        """Yield this node and every descendant in document order."""
        yield self
        for child in self.child_nodes():
            yield from child.walk()

    def deep_copy(self) -> Node:
        """Return an independent clone of this subtree.

        The clone has no parent; every node inside it is parented to its
        cloned owner. Locations and source buffers are immutable and shared.
        """
        clone = copy.deepcopy(self)
        clone._parent_ref = None
        clone._relink()
        return clone

    def _relink(self) -> None:
        for child in self.child_nodes():
            child.parent = self
            child._relink()

    def ancestors(self) -> Iterator[Node]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent


# ============================================================================
# Blocks
# ============================================================================


@dataclass(eq=False)
class AbstractBlock(Node):
    """Common behaviour of the three block kinds.

    Parameters
    ----------
    children : list of Node
        Nodes held by the block, in document order.

    """

    children: list[Node] = field(default_factory=list)

    def child_nodes(self) -> list[Node]:
        return list(self.children)

    def add_child(self, child: Node) -> None:
        self.children.append(child)
        child.parent = self

    def add_children(self, children: list[Node]) -> None:
        for child in children:
            self.add_child(child)

    def is_empty(self) -> bool:
        return not self.children


@dataclass(eq=False)
class BlockNode(AbstractBlock):
    """Generic block holding rulesets, at-rules and conditional blocks."""

    visit_kind: ClassVar[str] = "block"


@dataclass(eq=False)
class DeclarationBlock(AbstractBlock):
    """Block holding declarations.

    In a declaration context the block may also nest at-rules (for example a
    page-margin rule inside ``@page``) and conditional blocks.
    """

    visit_kind: ClassVar[str] = "declaration_block"


@dataclass(eq=False)
class ImportBlock(AbstractBlock):
    """Root-level container for accepted ``@import`` rules."""

    visit_kind: ClassVar[str] = "import_block"


@dataclass(eq=False)
class RootNode(Node):
    """Root of a stylesheet tree.

    Parameters
    ----------
    body : BlockNode
        Top-level block of the stylesheet.
    import_block : ImportBlock
        Accepted ``@import`` rules, filled in during at-rule classification.
    charset_rule : CharSetRule or None
        The ``@charset`` rule in effect. It is a non-owning reference; the rule
        itself stays in ``body``.

    """

    body: BlockNode = field(default_factory=BlockNode)
    import_block: ImportBlock = field(default_factory=ImportBlock)
    charset_rule: Optional[CharSetRule] = field(default=None, repr=False)

    visit_kind: ClassVar[str] = "tree"

    def child_nodes(self) -> list[Node]:
        return [self.import_block, self.body]

    @property
    def import_rules(self) -> ImportBlock:
        return self.import_block


# ============================================================================
# Values
# ============================================================================


@dataclass(eq=False)
class ValueNode(Node):
    """Base class for values in declarations, at-rule parameters and arguments.

    ``str(node)`` returns the CSS text of the value.
    """

    visit_kind: ClassVar[str] = "value_node"

    @property
    def value(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.value


@dataclass(eq=False)
class LiteralNode(ValueNode):
    """An identifier or other verbatim token sequence."""

    value: str = ""


@dataclass(eq=False)
class StringNode(ValueNode):
    """A quoted string.

    Parameters
    ----------
    value : str
        Unquoted, unescaped string content.
    quote : str, default '"'
        Quote character used in the source.

    """

    value: str = ""
    quote: str = '"'

    def __str__(self) -> str:
        return f"{self.quote}{self.value}{self.quote}"

    def to_css(self, escaper=None) -> str:
        """Return the quoted string, passing the content through ``escaper``."""
        content = escaper(self.value) if escaper is not None else self.value
        return f"{self.quote}{content}{self.quote}"


@dataclass(eq=False)
class NumericNode(ValueNode):
    """A number with an optional unit (``10px``, ``50%``, ``0.375``)."""

    numeric_part: str = "0"
    unit: str = ""

    @property
    def value(self) -> str:
        return f"{self.numeric_part}{self.unit}"


@dataclass(eq=False)
class CompositeValueNode(ValueNode):
    """Two or more values joined by an operator such as ``,`` or ``/``."""

    values: list[ValueNode] = field(default_factory=list)
    operator: str = ","

    visit_kind: ClassVar[str] = "composite_value_node"

    def child_nodes(self) -> list[Node]:
        return list(self.values)

    @property
    def value(self) -> str:
        return self.operator.join(str(v) for v in self.values)


@dataclass(eq=False)
class FunctionNode(ValueNode):
    """A function call; separators are kept as literal arguments."""

    name: str = ""
    arguments: list[ValueNode] = field(default_factory=list)

    visit_kind: ClassVar[str] = "function_node"

    def child_nodes(self) -> list[Node]:
        return list(self.arguments)

    @property
    def value(self) -> str:
        return f"{self.name}({''.join(str(arg) for arg in self.arguments)})"


@dataclass(eq=False)
class PriorityNode(ValueNode):
    """The ``!important`` marker at the end of a declaration."""

    value: str = "!important"


@dataclass(eq=False)
class BooleanExpressionNode(ValueNode):
    """A condition, as used by ``@if`` and by media features like ``(color)``."""

    value: str = ""


@dataclass(eq=False)
class ConstantReferenceNode(ValueNode):
    """A reference to a ``@def`` constant inside a property value."""

    value: str = ""


# ============================================================================
# Selectors
# ============================================================================


@dataclass(eq=False)
class RefinerNode(Node):
    """Base class for the parts of a compound selector after its element name."""

    name: str = ""

    prefix: ClassVar[str] = ""

    @property
    def refiner_name(self) -> str:
        return self.name


@dataclass(eq=False)
class ClassSelector(RefinerNode):
    prefix: ClassVar[str] = "."
    visit_kind: ClassVar[str] = "class_selector"


@dataclass(eq=False)
class IdSelector(RefinerNode):
    prefix: ClassVar[str] = "#"
    visit_kind: ClassVar[str] = "id_selector"


@dataclass(eq=False)
class PseudoElement(RefinerNode):
    prefix: ClassVar[str] = "::"
    visit_kind: ClassVar[str] = "pseudo_element"


@dataclass(eq=False)
class PseudoClass(RefinerNode):
    """A pseudo-class, optionally functional.

    Parameters
    ----------
    name : str
        Pseudo-class name without the colon.
    function_type : PseudoClassFunction
        Whether and how the pseudo-class takes an argument.
    argument : str
        Raw argument text for ``NTH`` and ``LANG`` pseudo-classes.
    not_selectors : SelectorList or None
        Argument of ``:not()``.

    """

    function_type: PseudoClassFunction = PseudoClassFunction.NONE
    argument: str = ""
    not_selectors: Optional[SelectorList] = None

    prefix: ClassVar[str] = ":"
    visit_kind: ClassVar[str] = "pseudo_class"

    def child_nodes(self) -> list[Node]:
        return [self.not_selectors] if self.not_selectors is not None else []


@dataclass(eq=False)
class AttributeSelector(RefinerNode):
    """An attribute test such as ``[type="text"]``."""

    match_symbol: str = ""
    value: str = ""

    prefix: ClassVar[str] = "["
    suffix: ClassVar[str] = "]"
    visit_kind: ClassVar[str] = "attribute_selector"


@dataclass(eq=False)
class SelectorNode(Node):
    """A compound selector, optionally chained to the next one by a combinator."""

    name: str = ""
    refiners: list[RefinerNode] = field(default_factory=list)
    combinator: Optional[CombinatorNode] = None

    visit_kind: ClassVar[str] = "selector"

    def child_nodes(self) -> list[Node]:
        nodes: list[Node] = list(self.refiners)
        if self.combinator is not None:
            nodes.append(self.combinator)
        return nodes


@dataclass(eq=False)
class CombinatorNode(Node):
    combinator_type: CombinatorType = CombinatorType.DESCENDANT
    selector: SelectorNode = field(default_factory=SelectorNode)

    visit_kind: ClassVar[str] = "combinator"

    def child_nodes(self) -> list[Node]:
        return [self.selector]


@dataclass(eq=False)
class SelectorList(Node):
    selectors: list[SelectorNode] = field(default_factory=list)

    visit_kind: ClassVar[str] = "selector_block"

    def child_nodes(self) -> list[Node]:
        return list(self.selectors)


# ============================================================================
# Rules and declarations
# ============================================================================


@dataclass(eq=False)
class PropertyValue(Node):
    """Ordered values on the right-hand side of a declaration."""

    values: list[ValueNode] = field(default_factory=list)

    visit_kind: ClassVar[str] = "property_value"

    def child_nodes(self) -> list[Node]:
        return list(self.values)


@dataclass(eq=False)
class DeclarationNode(Node):
    """A ``property: value`` pair.

    Parameters
    ----------
    property_name : str
        Property name without any star-hack prefix.
    property_value : PropertyValue
        The declared value.
    star_hack : bool, default False
        Whether the property was written as ``*name`` (an old IE hack).

    """

    property_name: str = ""
    property_value: PropertyValue = field(default_factory=PropertyValue)
    star_hack: bool = False

    visit_kind: ClassVar[str] = "declaration"

    def child_nodes(self) -> list[Node]:
        return [self.property_value]


@dataclass(eq=False)
class RulesetNode(Node):
    selectors: SelectorList = field(default_factory=SelectorList)
    declarations: DeclarationBlock = field(default_factory=DeclarationBlock)

    visit_kind: ClassVar[str] = "ruleset"

    def child_nodes(self) -> list[Node]:
        return [self.selectors, self.declarations]


# ============================================================================
# At-rules
# ============================================================================


@dataclass(eq=False)
class AtRuleNode(Node):
    """Base class for every at-rule.

    Parameters
    ----------
    parameters : list of ValueNode
        Values between the keyword and the block or semicolon.
    block : AbstractBlock or None
        The rule's block, if it has one.
    name : LiteralNode, optional
        Keyword without ``@``. Typed rules derive it from ``type``.
    type : AtRuleType, optional
        Catalogue entry. Typed rules supply their own default.

    """

    parameters: list[ValueNode] = field(default_factory=list)
    block: Optional[AbstractBlock] = None
    name: Optional[LiteralNode] = None
    type: Optional[AtRuleType] = None

    default_type: ClassVar[Optional[AtRuleType]] = None

    def __post_init__(self) -> None:
        if self.type is None:
            if self.default_type is not None:
                self.type = self.default_type
            else:
                name = self.name.value if self.name is not None else ""
                self.type = AtRuleType.from_name(name, self.block is not None)
        if self.name is None:
            self.name = LiteralNode(self.type.canonical_name)
        super().__post_init__()

    def child_nodes(self) -> list[Node]:
        nodes: list[Node] = []
        if self.name is not None:
            nodes.append(self.name)
        nodes.extend(self.parameters)
        if self.block is not None:
            nodes.append(self.block)
        return nodes

    def set_block(self, block: Optional[AbstractBlock]) -> None:
        self.block = block
        self.adopt(block)

    def set_parameters(self, parameters: list[ValueNode]) -> None:
        self.parameters = list(parameters)
        for param in self.parameters:
            param.parent = self

    @property
    def parameter_count(self) -> int:
        return len(self.parameters)


@dataclass(eq=False)
class UnknownAtRule(AtRuleNode):
    """The parser's representation of any ``@name ...`` construct."""

    visit_kind: ClassVar[str] = "unknown_at_rule"


@dataclass(eq=False)
class MediaRule(AtRuleNode):
    default_type: ClassVar[Optional[AtRuleType]] = AtRuleType.MEDIA
    visit_kind: ClassVar[str] = "media_rule"


@dataclass(eq=False)
class PageRule(AtRuleNode):
    default_type: ClassVar[Optional[AtRuleType]] = AtRuleType.PAGE
    visit_kind: ClassVar[str] = "page_rule"


@dataclass(eq=False)
class PageSelector(AtRuleNode):
    """A page-margin box rule such as ``@top-left``; ``type`` names the box."""

    visit_kind: ClassVar[str] = "page_selector"


@dataclass(eq=False)
class FontFaceRule(AtRuleNode):
    default_type: ClassVar[Optional[AtRuleType]] = AtRuleType.FONT_FACE
    visit_kind: ClassVar[str] = "font_face"


@dataclass(eq=False)
class CharSetRule(AtRuleNode):
    default_type: ClassVar[Optional[AtRuleType]] = AtRuleType.CHARSET
    visit_kind: ClassVar[str] = "charset"


@dataclass(eq=False)
class ImportRule(AtRuleNode):
    default_type: ClassVar[Optional[AtRuleType]] = AtRuleType.IMPORT
    visit_kind: ClassVar[str] = "import_rule"


@dataclass(eq=False)
class ConditionalRule(AtRuleNode):
    """One branch of a conditional chain; ``type`` is IF, ELSEIF or ELSE."""

    visit_kind: ClassVar[str] = "conditional_rule"

    @property
    def condition(self) -> Optional[ValueNode]:
        return self.parameters[0] if self.parameters else None


@dataclass(eq=False)
class ConditionalBlock(Node):
    """An ``@if``/``@elseif``/``@else`` chain; the first child is always ``@if``."""

    children: list[ConditionalRule] = field(default_factory=list)

    visit_kind: ClassVar[str] = "conditional_block"

    def child_nodes(self) -> list[Node]:
        return list(self.children)

    def add_child(self, rule: ConditionalRule) -> None:
        self.children.append(rule)
        rule.parent = self


@dataclass(eq=False)
class DefinitionNode(Node):
    """A ``@def NAME value...;`` constant definition."""

    name: LiteralNode = field(default_factory=LiteralNode)
    values: list[ValueNode] = field(default_factory=list)

    visit_kind: ClassVar[str] = "definition"

    def child_nodes(self) -> list[Node]:
        return [self.name, *self.values]


# ============================================================================
# Tree
# ============================================================================


class CssTree:
    """A parsed stylesheet: the root node plus the source it came from.

    Parameters
    ----------
    source_code : SourceCode
        Buffer the tree was parsed from.
    root : RootNode, optional
        Root of the tree; an empty root is created if omitted.

    """

    def __init__(self, source_code: SourceCode, root: Optional[RootNode] = None) -> None:
        self.source_code = source_code
        self.root = root if root is not None else RootNode()

    def visit_controller(self) -> VisitController:
        from cssforge.ast.controller import VisitController

        return VisitController(self.root)

    def mutating_visit_controller(self) -> MutatingVisitController:
        from cssforge.ast.controller import MutatingVisitController

        return MutatingVisitController(self.root)

    def deep_copy(self) -> CssTree:
        return CssTree(self.source_code, self.root.deep_copy())
