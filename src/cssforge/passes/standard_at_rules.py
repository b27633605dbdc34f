#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/passes/standard_at_rules.py
"""Classification of standard CSS at-rules.

:class:`CreateStandardAtRuleNodes` walks the whole tree once and turns every
:class:`~cssforge.ast.nodes.UnknownAtRule` named ``charset``, ``import``,
``media``, ``page``, ``font-face`` or one of the sixteen page-margin boxes into
its typed node, validating the rule's grammar on the way. A rule that fails
validation is reported and removed from the tree, except ``@charset``, which
is reported and still converted so that it stays in effect.

``@charset`` and ``@import`` have ordering rules. Both are tracked with a
single reference to the first node that closes the door on them, so the pass
stays linear:

- only the first ``@charset`` is used; later ones are removed with a warning.
  A rule that is already a :class:`~cssforge.ast.nodes.CharSetRule` counts as
  the first, so running the pass twice keeps a single charset.
- ``@import`` rules seen before any other construct are detached and, once
  the root is left, appended to the root's import block in document order.
  Later imports are converted in place and flagged with two warnings, one on
  the import and one on the node that blocked it.

"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from cssforge.ast.controller import MutatingVisitController
from cssforge.ast.nodes import (
    AtRuleNode,
    AtRuleType,
    BlockNode,
    BooleanExpressionNode,
    CharSetRule,
    CompositeValueNode,
    ConditionalBlock,
    DeclarationBlock,
    FontFaceRule,
    FunctionNode,
    ImportBlock,
    ImportRule,
    LiteralNode,
    MediaRule,
    Node,
    PageRule,
    PageSelector,
    RootNode,
    RulesetNode,
    StringNode,
    UnknownAtRule,
    ValueNode,
)
from cssforge.ast.visitors import UniformVisitor, as_tree_visitor
from cssforge.constants import ALLOWED_AT_RULES_IN_MEDIA, MEDIA_QUERY_PREFIXES, PAGE_SELECTOR_NAMES, PSEUDO_PAGES
from cssforge.errors import ErrorManager
from cssforge.passes.base import CompilerPass

logger = logging.getLogger(__name__)

NO_BLOCK_ERROR_MESSAGE = "This @-rule has to have a block"
BLOCK_ERROR_MESSAGE = "This @-rule is not allowed to have a block"
ONLY_DECLARATION_BLOCK_ERROR_MESSAGE = "Only declaration blocks are allowed for this @-rule"
INVALID_PARAMETERS_ERROR_MESSAGE = "This @-rule has invalid parameters"
MEDIA_INVALID_CHILD_ERROR_MESSAGE = "This is not valid inside an @media block"
MEDIA_WITHOUT_PARAMETERS_ERROR_MESSAGE = "@media without parameters"
PAGE_SELECTOR_PARAMETERS_ERROR_MESSAGE = "Page selectors are not allowed to have parameters"
FONT_FACE_PARAMETERS_ERROR_MESSAGE = "@font-face is not allowed to have parameters"
CHARSET_ERROR_CHAR_BEFORE_MESSAGE = "There must not be characters before @charset"
IGNORED_IMPORT_WARNING_MESSAGE = (
    "@import rules should occur outside blocks and can only be preceded by @charset and other @import rules."
)
IGNORE_IMPORT_WARNING_MESSAGE = "A node after which all @import rule nodes are ignored is here."
IGNORED_CHARSET_WARNING_MESSAGE = "Only the first @charset rule is used. This node is superfluous."
IMPORT_WITHOUT_PARAMETERS_ERROR_MESSAGE = "@import without a following string or uri"
IMPORT_TOO_MANY_PARAMETERS_ERROR_MESSAGE = "@import with too many parameters"
IMPORT_FIRST_PARAMETER_ERROR_MESSAGE = "@import's first parameter has to be a string or an url"
IMPORT_ILLEGAL_PARAMETER_ERROR_MESSAGE = "@import has illegal parameter"

# While checking a media query, a tuple stands for the tail of a composite
# value whose first member has been consumed.
_MediaParam = Union[ValueNode, tuple]


def _is_composite(param: _MediaParam) -> bool:
    return isinstance(param, (CompositeValueNode, tuple))


def _composite_members(param: _MediaParam) -> list:
    return list(param.values) if isinstance(param, CompositeValueNode) else list(param)


def _value_of(param: _MediaParam) -> str:
    return param.value if isinstance(param, ValueNode) else ""


class CreateStandardAtRuleNodes(CompilerPass, UniformVisitor):
    """Convert recognised unknown at-rules into typed at-rule nodes.

    Parameters
    ----------
    visit_controller : MutatingVisitController
        Controller over the tree to classify.
    error_manager : ErrorManager
        Receives grammar errors and ordering warnings.

    """

    def __init__(self, visit_controller: MutatingVisitController, error_manager: ErrorManager):
        super().__init__(visit_controller, error_manager)
        self._root: Optional[RootNode] = None
        self._accepted_imports: list[ImportRule] = []
        self._no_more_import_rules: Optional[Node] = None
        self._no_more_charset_rules: Optional[Node] = None

    def run_pass(self) -> None:
        logger.debug("Classifying standard at-rules")
        self.visit_controller.start_visit(as_tree_visitor(self))

    # ------------------------------------------------------------------
    # Uniform visitor
    # ------------------------------------------------------------------

    def enter(self, node: Node) -> None:
        if isinstance(node, RootNode):
            self._enter_tree(node)
        if isinstance(node, CharSetRule) and self._no_more_charset_rules is None:
            # Already classified by an earlier run
            self._no_more_charset_rules = node
        if not isinstance(node, UnknownAtRule):
            return
        name = node.name.value
        if name == AtRuleType.CHARSET.canonical_name:
            self._create_charset_rule(node)
        elif name == AtRuleType.IMPORT.canonical_name:
            self._create_import_rule(node)
        elif name == AtRuleType.MEDIA.canonical_name:
            self._create_media_rule(node)
        elif name == AtRuleType.PAGE.canonical_name:
            self._create_page_rule(node)
        elif name == AtRuleType.FONT_FACE.canonical_name:
            self._create_font_face_rule(node)
        elif name in PAGE_SELECTOR_NAMES:
            self._create_page_selector(node)

    def leave(self, node: Node) -> None:
        charset_rule = self._root.charset_rule if self._root is not None else None
        if not isinstance(node, (ImportRule, ImportBlock)) and node is not charset_rule:
            self._no_more_import_rules = node
        if isinstance(node, RootNode):
            self._leave_tree(node)

    def _enter_tree(self, root: RootNode) -> None:
        self._root = root
        self._accepted_imports = []
        self._no_more_import_rules = None
        self._no_more_charset_rules = None

    def _leave_tree(self, root: RootNode) -> None:
        for import_rule in self._accepted_imports:
            root.import_block.add_child(import_rule)
        logger.debug("Moved %d @import rule(s) to the import block", len(self._accepted_imports))
        self._accepted_imports = []

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _reject(self, message: str, node: Node) -> None:
        """Report ``message`` at ``node`` and drop the rule being visited."""
        self.report_error(message, node)
        self.visit_controller.remove_current_node()

    # ------------------------------------------------------------------
    # @charset
    # ------------------------------------------------------------------

    def _create_charset_rule(self, node: UnknownAtRule) -> None:
        if self._no_more_charset_rules is not None:
            self.visit_controller.remove_current_node()
            self.report_warning(IGNORED_CHARSET_WARNING_MESSAGE, node)
            return
        self._no_more_charset_rules = node
        # Reported problems do not stop the conversion; the rule stays in effect
        self._validate_charset_rule(node)
        charset = CharSetRule(list(node.parameters), comments=list(node.comments), location=node.location)
        if self._root is not None:
            self._root.charset_rule = charset
        self.visit_controller.replace_current_block_child_with([charset], True)

    def _validate_charset_rule(self, node: UnknownAtRule) -> None:
        if self._root is not None and not self._is_first_in_document(node):
            self.report_error(CHARSET_ERROR_CHAR_BEFORE_MESSAGE, node)
        if node.block is not None:
            self.report_error(BLOCK_ERROR_MESSAGE, node)
        params = node.parameters
        if not params or not isinstance(params[0], StringNode) or params[0].quote != '"':
            self.report_error(INVALID_PARAMETERS_ERROR_MESSAGE, node)

    def _is_first_in_document(self, node: Node) -> bool:
        body = self._root.body
        if node.parent is not body or not body.children or body.children[0] is not node:
            return False
        return not self._accepted_imports and self._root.import_block.is_empty()

    # ------------------------------------------------------------------
    # @import
    # ------------------------------------------------------------------

    @staticmethod
    def _is_uri(node: ValueNode) -> bool:
        return isinstance(node, FunctionNode) and node.name == "url"

    def _create_import_rule(self, node: UnknownAtRule) -> None:
        if node.block is not None:
            self._reject(BLOCK_ERROR_MESSAGE, node)
            return
        params = node.parameters
        if not params:
            self._reject(IMPORT_WITHOUT_PARAMETERS_ERROR_MESSAGE, node)
            return
        if len(params) > 2:
            self._reject(IMPORT_TOO_MANY_PARAMETERS_ERROR_MESSAGE, node)
            return
        first = params[0]
        if not (isinstance(first, StringNode) or self._is_uri(first)):
            self._reject(IMPORT_FIRST_PARAMETER_ERROR_MESSAGE, node)
            return
        import_params: list[ValueNode] = [first]
        if len(params) == 2:
            second = params[1]
            if not isinstance(second, (CompositeValueNode, LiteralNode)):
                self._reject(IMPORT_ILLEGAL_PARAMETER_ERROR_MESSAGE, node)
                return
            import_params.append(second)

        import_rule = ImportRule(import_params, comments=list(node.comments), location=node.location)
        if self._no_more_import_rules is not None:
            self.visit_controller.replace_current_block_child_with([import_rule], False)
            self.report_warning(IGNORED_IMPORT_WARNING_MESSAGE, node)
            self.report_warning(IGNORE_IMPORT_WARNING_MESSAGE, self._no_more_import_rules)
        else:
            self.visit_controller.remove_current_node()
            self._accepted_imports.append(import_rule)

    # ------------------------------------------------------------------
    # @media
    # ------------------------------------------------------------------

    def _create_media_rule(self, node: UnknownAtRule) -> None:
        block = node.block
        if block is None:
            self._reject(NO_BLOCK_ERROR_MESSAGE, node)
            return
        if not isinstance(block, BlockNode):
            self._reject(ONLY_DECLARATION_BLOCK_ERROR_MESSAGE, node)
            return
        for part in block.children:
            if not self._is_valid_in_media_rule(part):
                self.report_error(MEDIA_INVALID_CHILD_ERROR_MESSAGE, part)
                self.visit_controller.remove_current_node()
                return
        params = node.parameters
        if not params:
            self._reject(MEDIA_WITHOUT_PARAMETERS_ERROR_MESSAGE, node)
            return
        if not self._check_media_parameter(list(params)):
            self._reject(INVALID_PARAMETERS_ERROR_MESSAGE, node)
            return
        media_rule = MediaRule(list(params), block, comments=list(node.comments), location=node.location)
        self.visit_controller.replace_current_block_child_with([media_rule], True)

    @staticmethod
    def _is_valid_in_media_rule(node: Node) -> bool:
        if isinstance(node, RulesetNode):
            return True
        if isinstance(node, AtRuleNode) and node.name.value in ALLOWED_AT_RULES_IN_MEDIA:
            return True
        # @if/@elseif/@else stop being at-rules once assembled into a chain
        return isinstance(node, ConditionalBlock)

    def _check_media_parameter(self, params: Sequence[_MediaParam]) -> bool:
        """Check ``[only|not]? literal [and expression]*`` or an implicit ``all``."""
        first = params[0]
        if _is_composite(first):
            return self._check_media_composite_expression(params, 0)
        if isinstance(first, BooleanExpressionNode):
            # shorthand syntax: implicit "all and ..."
            return self._check_media_expression(params, 0)
        if not isinstance(first, LiteralNode):
            self.report_warning(f"Expected a literal but found {type(first).__name__}", first)
            return False
        starting_literals = 2 if first.value in MEDIA_QUERY_PREFIXES else 1
        if len(params) < starting_literals:
            last = params[-1]
            self.report_warning("Expected a literal after 'only' or 'not'.", last)
            return False
        if len(params) > starting_literals:
            return self._check_and_media_expression(params, starting_literals)
        return True

    def _check_and_media_expression(self, params: Sequence[_MediaParam], start: int) -> bool:
        """Check ``and expression [and expression]*`` starting at ``start``."""
        if len(params) - start < 2:
            return False
        if _value_of(params[start]) != "and":
            return False
        return self._check_media_expression(params, start + 1)

    def _check_media_expression(self, params: Sequence[_MediaParam], start: int) -> bool:
        if len(params) - start < 1:
            return False
        if _is_composite(params[start]):
            return self._check_media_composite_expression(params, start)
        if len(params) > start + 1:
            return self._check_and_media_expression(params, start + 1)
        return True

    def _check_media_composite_expression(self, params: Sequence[_MediaParam], start: int) -> bool:
        """Continue checking after the first member of a comma-joined query.

        ``screen and (device-width:800px), print`` arrives as ``screen``,
        ``and`` and the composite ``(device-width:800px), print``. The query
        after the comma is checked on its own, followed by whatever came after
        the composite.
        """
        members = _composite_members(params[start])
        rest: _MediaParam = members[1] if len(members) == 2 else tuple(members[1:])
        return self._check_media_parameter([rest, *params[start + 1 :]])

    # ------------------------------------------------------------------
    # @page, page-margin boxes, @font-face
    # ------------------------------------------------------------------

    def _create_page_rule(self, node: UnknownAtRule) -> None:
        block = node.block
        if block is None:
            self._reject(NO_BLOCK_ERROR_MESSAGE, node)
            return
        if not isinstance(block, DeclarationBlock):
            self._reject(ONLY_DECLARATION_BLOCK_ERROR_MESSAGE, node)
            return
        params = node.parameters
        if (
            len(params) > 2
            or (len(params) == 2 and params[1].value not in PSEUDO_PAGES)
            or (len(params) == 1 and params[0].value.startswith(":") and params[0].value not in PSEUDO_PAGES)
        ):
            self._reject(INVALID_PARAMETERS_ERROR_MESSAGE, node)
            return
        page_rule = PageRule(list(params), block, comments=list(node.comments), location=node.location)
        self.visit_controller.replace_current_block_child_with([page_rule], True)

    def _create_page_selector(self, node: UnknownAtRule) -> None:
        block = node.block
        if block is None:
            self._reject(NO_BLOCK_ERROR_MESSAGE, node)
            return
        if not isinstance(block, DeclarationBlock):
            self._reject(ONLY_DECLARATION_BLOCK_ERROR_MESSAGE, node)
            return
        if node.parameters:
            self._reject(PAGE_SELECTOR_PARAMETERS_ERROR_MESSAGE, node)
            return
        selector_type = AtRuleType.from_name(node.name.value, True)
        page_selector = PageSelector(
            block=block, type=selector_type, comments=list(node.comments), location=node.location
        )
        self.visit_controller.replace_current_block_child_with([page_selector], True)

    def _create_font_face_rule(self, node: UnknownAtRule) -> None:
        block = node.block
        if block is None:
            self._reject(NO_BLOCK_ERROR_MESSAGE, node)
            return
        if not isinstance(block, DeclarationBlock):
            self._reject(ONLY_DECLARATION_BLOCK_ERROR_MESSAGE, node)
            return
        if node.parameters:
            self._reject(FONT_FACE_PARAMETERS_ERROR_MESSAGE, node)
            return
        font_face = FontFaceRule(block=block, comments=list(node.comments), location=node.location)
        self.visit_controller.replace_current_block_child_with([font_face], True)
