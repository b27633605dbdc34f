#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/parser.py
"""Stylesheet parser built on tinycss2.

tinycss2 tokenizes the source and groups it into rules, at-rules and
declarations. This module turns that component-value tree into an untyped
:class:`~cssforge.ast.nodes.CssTree`:

- Every ``@name`` construct becomes an :class:`UnknownAtRule`. Recognising
  ``@media``, ``@page``, ``@def``, ``@if`` and friends is left to the compiler
  passes.
- Qualified rules become rulesets with parsed selectors.
- The content of ``@page``, ``@font-face``, page-margin boxes and of any
  at-rule nested in a declaration block is read as a declaration list.

Locations come from tinycss2's line and column positions; a node's span
covers the serialized text of the tokens it was built from.

"""

from __future__ import annotations

import logging
from typing import Iterable, NoReturn, Optional, Sequence, Union

import tinycss2
import tinycss2.ast as c2ast

from cssforge.ast.location import SourceCode, SourceLocation
from cssforge.ast.nodes import (
    AbstractBlock,
    AttributeSelector,
    BlockNode,
    BooleanExpressionNode,
    ClassSelector,
    CombinatorNode,
    CombinatorType,
    CompositeValueNode,
    ConstantReferenceNode,
    CssTree,
    DeclarationBlock,
    DeclarationNode,
    FunctionNode,
    IdSelector,
    LiteralNode,
    Node,
    NumericNode,
    PriorityNode,
    PropertyValue,
    PseudoClass,
    PseudoClassFunction,
    PseudoElement,
    RefinerNode,
    RootNode,
    RulesetNode,
    SelectorList,
    SelectorNode,
    StringNode,
    UnknownAtRule,
    ValueNode,
)
from cssforge.constants import (
    COMBINATOR_SYMBOLS,
    COMPOSITE_OPERATORS,
    CONDITIONAL_AT_RULES,
    DECLARATION_BLOCK_AT_RULES,
    DEFINITION_NAME_PATTERN,
    NTH_PSEUDO_CLASSES,
)
from cssforge.errors import CssError, ErrorManager
from cssforge.exceptions import ParsingError

logger = logging.getLogger(__name__)

_SPACING = (c2ast.WhitespaceToken, c2ast.Comment)
_CONDITION_OPERATORS = frozenset({"!", "&", "|", "&&", "||"})


def _is_literal(token: c2ast.Node, *values: str) -> bool:
    return isinstance(token, c2ast.LiteralToken) and token.value in values


def _join_tokens(tokens: Sequence[c2ast.Node]) -> str:
    # tinycss2.serialize() separates some token pairs (2n +1, | |) with an empty comment.
    return "".join(token.serialize() for token in tokens)


def _strip_spacing(tokens: Sequence[c2ast.Node]) -> list[c2ast.Node]:
    """Return ``tokens`` without leading and trailing whitespace and comments."""
    start = 0
    stop = len(tokens)
    while start < stop and isinstance(tokens[start], _SPACING):
        start += 1
    while stop > start and isinstance(tokens[stop - 1], _SPACING):
        stop -= 1
    return list(tokens[start:stop])


def _has_parse_error(items: Iterable[c2ast.Node]) -> bool:
    return any(isinstance(item, c2ast.ParseError) for item in items)


def _split_on_comma(tokens: Sequence[c2ast.Node]) -> list[list[c2ast.Node]]:
    groups: list[list[c2ast.Node]] = [[]]
    for token in tokens:
        if _is_literal(token, ","):
            groups.append([])
        else:
            groups[-1].append(token)
    return groups


class _SkipItem(Exception):
    """Abandon the rule or declaration being built after its syntax error was reported."""


class CssParser:
    """Build a :class:`CssTree` from one source buffer.

    Parameters
    ----------
    source_code : SourceCode
        Buffer to parse.
    error_manager : ErrorManager, optional
        Receives one error per malformed rule or declaration, which is then
        left out of the tree. Without one, the first syntax error raises
        :class:`ParsingError`.

    """

    def __init__(self, source_code: SourceCode, error_manager: Optional[ErrorManager] = None) -> None:
        self.source_code = source_code
        self.error_manager = error_manager

    def parse(self) -> CssTree:
        """Parse the whole buffer.

        Raises
        ------
        ParsingError
            If tinycss2 reports a syntax error and there is no error manager.

        """
        contents = self.source_code.contents
        logger.debug("Parsing %s (%d characters)", self.source_code.file_name or "<input>", len(contents))
        rules = tinycss2.parse_stylesheet(contents, skip_comments=False, skip_whitespace=True)
        whole = self.source_code.location_of(0, len(contents))
        body = BlockNode(self._parse_rules(rules, in_declarations=False), location=whole)
        root = RootNode(body, location=whole)
        return CssTree(self.source_code, root)

    # ------------------------------------------------------------------
    # Locations and errors
    # ------------------------------------------------------------------

    def _location(self, first: c2ast.Node, text: str) -> SourceLocation:
        begin = self.source_code.offset_of(first.source_line, first.source_column)
        end = min(begin + len(text), len(self.source_code.contents))
        return self.source_code.location_of(begin, end)

    def _tokens_location(self, tokens: Sequence[c2ast.Node]) -> SourceLocation:
        tokens = _strip_spacing(tokens)
        if not tokens:
            return SourceLocation.unknown(self.source_code)
        return self._location(tokens[0], _join_tokens(tokens))

    def _fail(self, error: c2ast.ParseError) -> NoReturn:
        self._report(CssError(f"Parse error: {error.message}", self._location(error, "")))

    def _report(self, css_error: CssError) -> NoReturn:
        if self.error_manager is None:
            raise ParsingError(css_error.format(), css_error)
        self.error_manager.report(css_error)
        raise _SkipItem

    def _check_tokens(self, tokens: Iterable[c2ast.Node]) -> None:
        for token in tokens:
            if isinstance(token, c2ast.ParseError):
                self._fail(token)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _parse_rules(self, items: Iterable[c2ast.Node], in_declarations: bool, starred=frozenset()) -> list[Node]:
        nodes: list[Node] = []
        comments: list[str] = []
        for item in items:
            if isinstance(item, c2ast.Comment):
                comments.append(item.value)
                continue
            if isinstance(item, c2ast.WhitespaceToken) or _is_literal(item, ";"):
                continue
            try:
                node = self._parse_item(item, in_declarations, starred)
            except _SkipItem:
                comments = []
                continue
            node.comments = comments
            comments = []
            nodes.append(node)
        return nodes

    def _parse_item(self, item: c2ast.Node, in_declarations: bool, starred: frozenset) -> Node:
        if isinstance(item, c2ast.ParseError):
            self._fail(item)
        if isinstance(item, c2ast.QualifiedRule):
            return self._parse_ruleset(item)
        if isinstance(item, c2ast.AtRule):
            return self._parse_at_rule(item, in_declarations)
        if isinstance(item, c2ast.Declaration):
            return self._parse_declaration(item, starred)
        self._report(CssError(f"Unexpected {item.type}", self._location(item, item.serialize())))

    def _parse_ruleset(self, rule: c2ast.QualifiedRule) -> RulesetNode:
        selectors = self._parse_selector_list(rule.prelude)
        declarations = self._parse_declaration_block(rule.content, rule)
        return RulesetNode(selectors, declarations, location=self._location(rule, rule.serialize()))

    def _parse_declaration_block(self, content: list[c2ast.Node], owner: c2ast.Node) -> DeclarationBlock:
        tokens, starred = self._strip_star_hacks(content)
        items = tinycss2.parse_declaration_list(tokens, skip_comments=False, skip_whitespace=True)
        children = self._parse_rules(items, in_declarations=True, starred=starred)
        return DeclarationBlock(children, location=self._location(owner, owner.serialize()))

    def _is_declaration_list(self, content: list[c2ast.Node]) -> bool:
        tokens, _ = self._strip_star_hacks(content)
        items = tinycss2.parse_declaration_list(tokens, skip_comments=False, skip_whitespace=True)
        return not _has_parse_error(items)

    @staticmethod
    def _strip_star_hacks(tokens: Sequence[c2ast.Node]) -> tuple[list[c2ast.Node], frozenset]:
        """Remove ``*`` before property names, remembering where the names are."""
        cleaned: list[c2ast.Node] = []
        starred: set[tuple[int, int]] = set()
        at_start = True
        for index, token in enumerate(tokens):
            following = tokens[index + 1] if index + 1 < len(tokens) else None
            if at_start and _is_literal(token, "*") and isinstance(following, c2ast.IdentToken):
                starred.add((following.source_line, following.source_column))
                continue
            cleaned.append(token)
            if _is_literal(token, ";"):
                at_start = True
            elif not isinstance(token, _SPACING):
                at_start = False
        return cleaned, frozenset(starred)

    def _raw_string(self, token: c2ast.StringToken) -> str:
        """Return a string token as written, quotes included.

        ``StringToken.representation`` is re-serialized by recent tinycss2
        releases and always uses double quotes.
        """
        contents = self.source_code.contents
        begin = self.source_code.offset_of(token.source_line, token.source_column)
        quote = contents[begin : begin + 1]
        if quote not in ("'", '"'):
            return token.serialize()
        index = begin + 1
        while index < len(contents) and contents[index] not in (quote, "\n"):
            index += 2 if contents[index] == "\\" else 1
        end = index + 1 if index < len(contents) and contents[index] == quote else index
        return contents[begin:end]

    def _parse_declaration(self, declaration: c2ast.Declaration, starred: frozenset) -> DeclarationNode:
        location = self._location(declaration, declaration.serialize())
        self._check_tokens(declaration.value)
        values = self._parse_values(declaration.value, constants=True)
        if declaration.important:
            values.append(PriorityNode(location=location))
        property_value = PropertyValue(values, location=self._tokens_location(declaration.value))
        star_hack = (declaration.source_line, declaration.source_column) in starred
        return DeclarationNode(declaration.name, property_value, star_hack, location=location)

    def _parse_at_rule(self, rule: c2ast.AtRule, in_declarations: bool) -> UnknownAtRule:
        name = rule.lower_at_keyword
        location = self._location(rule, rule.serialize())
        self._check_tokens(rule.prelude)

        if name in CONDITIONAL_AT_RULES:
            parameters = self._parse_condition(rule.prelude)
        elif name == "def":
            parameters = self._parse_values(rule.prelude, constants=True)
            if parameters and isinstance(parameters[0], ConstantReferenceNode):
                parameters[0] = LiteralNode(parameters[0].value, location=parameters[0].location)
        elif name == "page":
            parameters = self._parse_values(rule.prelude, constants=False, split_pseudo_pages=True)
        else:
            parameters = self._parse_values(rule.prelude, constants=False, prelude=True)

        block: Optional[AbstractBlock] = None
        if rule.content is not None:
            items = None
            if name not in DECLARATION_BLOCK_AT_RULES and not in_declarations:
                items = tinycss2.parse_rule_list(rule.content, skip_comments=False, skip_whitespace=True)
                if _has_parse_error(items) and self._is_declaration_list(rule.content):
                    # @def X { color: red } and similar; the passes report the misplaced block
                    items = None
            if items is None:
                block = self._parse_declaration_block(rule.content, rule)
            else:
                block = BlockNode(self._parse_rules(items, in_declarations=False), location=location)

        name_node = LiteralNode(name, location=self._location(rule, f"@{rule.at_keyword}"))
        return UnknownAtRule(parameters, block, name_node, location=location)

    def _parse_condition(self, tokens: Sequence[c2ast.Node]) -> list[ValueNode]:
        """Read an ``@if``/``@elseif`` condition.

        A condition using operators or parentheses becomes one boolean
        expression; a bare name is left as an ordinary value.
        """
        significant = [token for token in tokens if not isinstance(token, _SPACING)]
        if not significant:
            return []
        is_expression = any(
            isinstance(token, c2ast.ParenthesesBlock) or _is_literal(token, *_CONDITION_OPERATORS)
            for token in significant
        )
        if not is_expression:
            return self._parse_values(tokens, constants=False)
        stripped = _strip_spacing(tokens)
        if len(stripped) == 1 and isinstance(stripped[0], c2ast.ParenthesesBlock):
            text = _join_tokens(stripped[0].content).strip()
        else:
            text = _join_tokens(stripped).strip()
        return [BooleanExpressionNode(text, location=self._tokens_location(stripped))]

    # ------------------------------------------------------------------
    # Selectors
    # ------------------------------------------------------------------

    def _parse_selector_list(self, tokens: Sequence[c2ast.Node]) -> SelectorList:
        self._check_tokens(tokens)
        selectors = []
        for group in _split_on_comma(tokens):
            group = _strip_spacing(group)
            if group:
                selectors.append(self._parse_selector(group))
        return SelectorList(selectors, location=self._tokens_location(tokens))

    def _parse_selector(self, tokens: Sequence[c2ast.Node]) -> SelectorNode:
        """Parse a complex selector into a chain of compounds linked by combinators."""
        compounds: list[tuple[Optional[str], list[c2ast.Node]]] = []
        current: list[c2ast.Node] = []
        combinator: Optional[str] = None
        saw_space = False
        for token in tokens:
            if isinstance(token, _SPACING):
                saw_space = True
            elif isinstance(token, c2ast.LiteralToken) and token.value in COMBINATOR_SYMBOLS:
                combinator = token.value
            else:
                if current and (saw_space or combinator):
                    compounds.append((None, current))
                    current = []
                if not current and compounds:
                    compounds[-1] = (combinator or " ", compounds[-1][1])
                combinator = None
                saw_space = False
                current.append(token)
        if current:
            compounds.append((None, current))

        selector: Optional[SelectorNode] = None
        for symbol, compound in reversed(compounds):
            link = None
            if symbol is not None and selector is not None:
                link = CombinatorNode(
                    CombinatorType.from_symbol(symbol), selector, location=selector.location
                )
            selector = self._parse_compound(compound, link)
        if selector is None:
            return SelectorNode(_join_tokens(tokens), location=self._tokens_location(tokens))
        return selector

    def _parse_compound(self, tokens: list[c2ast.Node], combinator: Optional[CombinatorNode]) -> SelectorNode:
        name = ""
        refiners: list[RefinerNode] = []
        index = 0
        if tokens and (isinstance(tokens[0], c2ast.IdentToken) or _is_literal(tokens[0], "*")):
            name = tokens[0].value
            index = 1
        while index < len(tokens):
            token = tokens[index]
            following = tokens[index + 1] if index + 1 < len(tokens) else None
            location = self._location(token, token.serialize())
            if _is_literal(token, ".") and isinstance(following, c2ast.IdentToken):
                refiners.append(ClassSelector(following.value, location=location))
                index += 2
            elif isinstance(token, c2ast.HashToken):
                refiners.append(IdSelector(token.value, location=location))
                index += 1
            elif _is_literal(token, ":") and _is_literal(following, ":") and index + 2 < len(tokens):
                refiners.append(PseudoElement(_join_tokens([tokens[index + 2]]), location=location))
                index += 3
            elif _is_literal(token, ":") and following is not None:
                refiners.append(self._parse_pseudo_class(following, location))
                index += 2
            elif isinstance(token, c2ast.SquareBracketsBlock):
                refiners.append(self._parse_attribute(token, location))
                index += 1
            else:
                # Keyframe selectors such as 50% and anything else unusual
                name += token.serialize()
                index += 1
        return SelectorNode(name, refiners, combinator, location=self._tokens_location(tokens))

    def _parse_pseudo_class(self, token: c2ast.Node, location: SourceLocation) -> PseudoClass:
        if not isinstance(token, c2ast.FunctionBlock):
            return PseudoClass(_join_tokens([token]), location=location)
        function_name = token.lower_name
        argument = _join_tokens(token.arguments).strip()
        if function_name in NTH_PSEUDO_CLASSES:
            return PseudoClass(token.name, PseudoClassFunction.NTH, argument, location=location)
        if function_name == "lang":
            return PseudoClass(token.name, PseudoClassFunction.LANG, argument, location=location)
        if function_name == "not":
            not_selectors = self._parse_selector_list(token.arguments)
            return PseudoClass(token.name, PseudoClassFunction.NOT, not_selectors=not_selectors, location=location)
        return PseudoClass(f"{token.name}({argument})", location=location)

    def _parse_attribute(self, block: c2ast.SquareBracketsBlock, location: SourceLocation) -> AttributeSelector:
        tokens = [token for token in block.content if not isinstance(token, _SPACING)]
        if not tokens:
            return AttributeSelector("", location=location)
        name = tokens[0].serialize()
        index = 1
        match_symbol = ""
        while index < len(tokens) and isinstance(tokens[index], c2ast.LiteralToken):
            match_symbol += tokens[index].value
            index += 1
        value = "".join(
            self._raw_string(token) if isinstance(token, c2ast.StringToken) else token.serialize()
            for token in tokens[index:]
        )
        return AttributeSelector(name, match_symbol, value, location=location)

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def _parse_values(
        self,
        tokens: Sequence[c2ast.Node],
        constants: bool,
        prelude: bool = False,
        split_pseudo_pages: bool = False,
    ) -> list[ValueNode]:
        """Parse space-separated terms, joining ``,`` and ``/`` neighbours into composites."""
        terms: list[Union[ValueNode, str]] = []
        current: list[c2ast.Node] = []

        def flush() -> None:
            if current:
                terms.append(self._parse_term(current, constants, prelude))
                current.clear()

        for token in tokens:
            if isinstance(token, _SPACING):
                flush()
            elif isinstance(token, c2ast.LiteralToken) and token.value in COMPOSITE_OPERATORS:
                flush()
                terms.append(token.value)
            elif split_pseudo_pages and _is_literal(token, ":"):
                flush()
                current.append(token)
            else:
                current.append(token)
        flush()
        return self._join_composites(terms)

    @staticmethod
    def _join_composites(terms: list[Union[ValueNode, str]]) -> list[ValueNode]:
        values: list[ValueNode] = []
        index = 0
        while index < len(terms):
            term = terms[index]
            if isinstance(term, str):
                # Operator without a left operand
                values.append(LiteralNode(term))
                index += 1
                continue
            while (
                index + 2 < len(terms)
                and isinstance(terms[index + 1], str)
                and not isinstance(terms[index + 2], str)
            ):
                operator = terms[index + 1]
                right = terms[index + 2]
                location = term.location
                if not term.location.is_unknown and not right.location.is_unknown:
                    location = SourceLocation.merge(term.location, right.location)
                if isinstance(term, CompositeValueNode) and term.operator == operator:
                    term.values.append(right)
                    right.parent = term
                    term.location = location
                else:
                    term = CompositeValueNode([term, right], operator, location=location)
                index += 2
            values.append(term)
            index += 1
        return values

    def _parse_term(self, tokens: list[c2ast.Node], constants: bool, prelude: bool) -> ValueNode:
        location = self._tokens_location(tokens)
        if len(tokens) > 1:
            last = tokens[-1]
            if isinstance(last, c2ast.FunctionBlock):
                # Legacy filters: progid:DXImageTransform.Microsoft.Alpha(Opacity=80)
                name = _join_tokens(tokens[:-1]) + last.name
                return FunctionNode(name, self._parse_arguments(last.arguments), location=location)
            return LiteralNode(_join_tokens(tokens), location=location)

        token = tokens[0]
        if isinstance(token, c2ast.IdentToken):
            if constants and DEFINITION_NAME_PATTERN.fullmatch(token.value):
                return ConstantReferenceNode(token.value, location=location)
            return LiteralNode(token.value, location=location)
        if isinstance(token, c2ast.PercentageToken):
            return NumericNode(token.representation, "%", location=location)
        if isinstance(token, c2ast.DimensionToken):
            return NumericNode(token.representation, token.unit, location=location)
        if isinstance(token, c2ast.NumberToken):
            return NumericNode(token.representation, location=location)
        if isinstance(token, c2ast.StringToken):
            return StringNode(token.value, self._raw_string(token)[0], location=location)
        if isinstance(token, c2ast.URLToken):
            return FunctionNode("url", [LiteralNode(token.value, location=location)], location=location)
        if isinstance(token, c2ast.FunctionBlock):
            return FunctionNode(token.name, self._parse_arguments(token.arguments), location=location)
        if isinstance(token, c2ast.HashToken):
            return LiteralNode(f"#{token.value}", location=location)
        if isinstance(token, c2ast.ParenthesesBlock) and prelude:
            inner = [item for item in token.content if not isinstance(item, _SPACING)]
            if len(inner) == 1 and isinstance(inner[0], c2ast.IdentToken):
                return BooleanExpressionNode(inner[0].value, location=location)
            return LiteralNode(f"({_join_tokens(inner)})", location=location)
        return LiteralNode(token.serialize(), location=location)

    def _parse_arguments(self, tokens: Sequence[c2ast.Node]) -> list[ValueNode]:
        """Parse function arguments, keeping ``,``, ``=`` and spaces as separator literals."""
        self._check_tokens(tokens)
        arguments: list[ValueNode] = []
        current: list[c2ast.Node] = []
        pending_space = False

        def flush() -> None:
            if current:
                arguments.append(self._parse_term(current, constants=True, prelude=False))
                current.clear()

        for token in tokens:
            if isinstance(token, _SPACING):
                flush()
                pending_space = bool(arguments)
            elif _is_literal(token, ",", "="):
                flush()
                arguments.append(LiteralNode(token.value, location=self._location(token, token.value)))
                pending_space = False
            else:
                if pending_space and not current and str(arguments[-1]) not in (",", "="):
                    arguments.append(LiteralNode(" "))
                pending_space = False
                current.append(token)
        flush()
        return arguments


def parse(
    source: Union[str, SourceCode],
    file_name: Optional[str] = None,
    error_manager: Optional[ErrorManager] = None,
) -> CssTree:
    """Parse stylesheet text into an untyped tree.

    Parameters
    ----------
    source : str or SourceCode
        Stylesheet text, or an already-built source buffer.
    file_name : str, optional
        Name reported in error messages when ``source`` is a string.
    error_manager : ErrorManager, optional
        When given, each syntax error is reported here and the malformed rule
        or declaration is skipped instead of failing the whole parse.

    Returns
    -------
    CssTree
        Tree whose at-rules are all :class:`UnknownAtRule` nodes.

    Raises
    ------
    ParsingError
        If the text is not syntactically valid CSS and no error manager was given.

    """
    source_code = source if isinstance(source, SourceCode) else SourceCode(file_name, source)
    return CssParser(source_code, error_manager).parse()
