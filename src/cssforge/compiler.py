#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/compiler.py
"""The compilation pipeline.

A compilation parses each input, runs the passes below in order over its
tree, and prints the result compactly:

1. :class:`CreateDefinitionNodes` turns ``@def`` rules into definitions.
2. :class:`CreateConditionalNodes` assembles ``@if`` chains.
3. :class:`EliminateConditionalNodes` keeps the branches that hold.
4. :class:`CollectConstantDefinitions` and :class:`ReplaceConstantReferences`
   substitute constants.
5. :class:`CreateStandardAtRuleNodes` classifies standard at-rules.
6. :class:`HandleUnknownAtRuleNodes` reports unrecognised at-rules.
7. :class:`AutoExpandBrowserPrefix` adds vendor-prefixed declarations (optional).
8. :class:`BiDiFlipper` mirrors the stylesheet for right-to-left output (optional).
9. :class:`EliminateEmptyRulesetNodes` drops empty rulesets (optional).
10. :class:`CssClassRenaming` renames classes.
11. :class:`CompactPrinter` prints the tree.

Problems in the stylesheets are collected rather than raised; the caller
decides what a recorded error means. :func:`compile_css` raises
:class:`CompilationError` when any error was recorded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from cssforge.ast.location import SourceCode
from cssforge.ast.nodes import CssTree
from cssforge.errors import CollectingErrorManager, CssError, ErrorManager
from cssforge.exceptions import CompilationError
from cssforge.options import CompilerOptions
from cssforge.parser import parse
from cssforge.passes import (
    AutoExpandBrowserPrefix,
    BiDiFlipper,
    CollectConstantDefinitions,
    CompactPrinter,
    CreateConditionalNodes,
    CreateDefinitionNodes,
    CreateStandardAtRuleNodes,
    CssClassRenaming,
    EliminateConditionalNodes,
    EliminateEmptyRulesetNodes,
    HandleUnknownAtRuleNodes,
    ReplaceConstantReferences,
)
from cssforge.renaming import (
    PrefixingSubstitutionMap,
    RecordingSubstitutionMap,
    RenamingType,
    SubstitutionMap,
)

logger = logging.getLogger(__name__)

SourceInput = Union[str, SourceCode, Path]


@dataclass
class CompilationResult:
    """Output of a compilation.

    Parameters
    ----------
    css : str
        Compact CSS for all inputs, in input order.
    renaming_map : dict of str to str
        Class renamings applied, in first-use order. Empty when classes
        were not renamed.
    errors : list of CssError
        Errors recorded during compilation, sorted by location.
    warnings : list of CssError
        Warnings recorded during compilation, sorted by location.

    """

    css: str
    renaming_map: dict[str, str] = field(default_factory=dict)
    errors: list[CssError] = field(default_factory=list)
    warnings: list[CssError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


def to_source_code(source: SourceInput) -> SourceCode:
    """Normalize an input to a :class:`SourceCode`.

    Paths are read as UTF-8 and named after the file; plain strings are
    treated as stylesheet text with no name.
    """
    if isinstance(source, SourceCode):
        return source
    if isinstance(source, Path):
        return SourceCode(str(source), source.read_text(encoding="utf-8"))
    return SourceCode(None, source)


class StylesheetCompiler:
    """Compile stylesheets with a fixed set of options.

    Parameters
    ----------
    options : CompilerOptions, optional
        Compilation settings. Defaults are used when omitted.
    error_manager : ErrorManager, optional
        Sink for stylesheet problems. A :class:`CollectingErrorManager` is
        created when omitted.

    """

    def __init__(self, options: Optional[CompilerOptions] = None, error_manager: Optional[ErrorManager] = None):
        self.options = options or CompilerOptions()
        self.error_manager = error_manager if error_manager is not None else CollectingErrorManager()
        self.class_map = self._create_class_map()

    def _create_class_map(self) -> Optional[RecordingSubstitutionMap]:
        if self.options.rename is RenamingType.NONE and not self.options.css_renaming_prefix:
            return None
        substitution_map: SubstitutionMap = self.options.rename.create_substitution_map()
        if self.options.css_renaming_prefix:
            substitution_map = PrefixingSubstitutionMap(substitution_map, self.options.css_renaming_prefix)
        return RecordingSubstitutionMap(substitution_map)

    def compile(self, sources: Iterable[SourceInput]) -> CompilationResult:
        """Compile every source and concatenate the outputs.

        Each source is compiled on its own, so constants do not leak between
        files. The class renaming map is shared by all sources.
        """
        outputs = []
        for source in sources:
            source_code = to_source_code(source)
            tree = parse(source_code, error_manager=self.error_manager)
            outputs.append(self.compile_tree(tree))

        return CompilationResult(
            css="".join(outputs),
            renaming_map=self.class_map.mappings if self.class_map is not None else {},
            errors=sorted(getattr(self.error_manager, "errors", [])),
            warnings=sorted(getattr(self.error_manager, "warnings", [])),
        )

    def compile_tree(self, tree: CssTree) -> str:
        """Run the passes over a parsed tree and return its compact CSS."""
        self.run_passes(tree)
        return CompactPrinter.print_compactly(tree)

    def run_passes(self, tree: CssTree) -> None:
        """Rewrite ``tree`` in place through every compilation pass."""
        options = self.options
        errors = self.error_manager

        CreateDefinitionNodes(tree.mutating_visit_controller(), errors).run_pass()
        CreateConditionalNodes(tree.mutating_visit_controller(), errors).run_pass()
        EliminateConditionalNodes(tree.mutating_visit_controller(), errors, options.true_conditions).run_pass()

        collector = CollectConstantDefinitions(tree.mutating_visit_controller())
        collector.run_pass()
        ReplaceConstantReferences(tree.mutating_visit_controller(), errors, collector.definitions).run_pass()

        CreateStandardAtRuleNodes(tree.mutating_visit_controller(), errors).run_pass()
        if not options.allow_unrecognized_at_rules:
            HandleUnknownAtRuleNodes(
                tree.mutating_visit_controller(), errors, options.allowed_unrecognized_at_rules
            ).run_pass()
        if options.expand_browser_prefixes:
            AutoExpandBrowserPrefix(tree.mutating_visit_controller()).run_pass()
        if options.flip_bidi:
            BiDiFlipper(
                tree.mutating_visit_controller(),
                swap_ltr_rtl_in_url=options.swap_ltr_rtl_in_url,
                swap_left_right_in_url=options.swap_left_right_in_url,
            ).run_pass()
        if options.eliminate_empty_rulesets:
            EliminateEmptyRulesetNodes(tree.mutating_visit_controller()).run_pass()
        if self.class_map is not None:
            CssClassRenaming(
                tree.mutating_visit_controller(),
                class_map=self.class_map,
                excluded_classes=options.excluded_classes,
            ).run_pass()


def compile_css(
    sources: Union[SourceInput, Sequence[SourceInput]],
    options: Optional[CompilerOptions] = None,
    **kwargs,
) -> CompilationResult:
    """Compile one or more stylesheets to compact CSS.

    Parameters
    ----------
    sources : str, Path, SourceCode or sequence of them
        Stylesheet text, files, or source buffers.
    options : CompilerOptions, optional
        Compilation settings.
    **kwargs
        Individual option overrides applied on top of ``options``.

    Returns
    -------
    CompilationResult
        Compiled CSS, renaming map and any warnings.

    Raises
    ------
    CompilationError
        If any error was recorded. The message is the formatted report.

    Examples
    --------
    >>> compile_css("@def C red; .a { color: C }").css
    '.a{color:red}'

    """
    options = options or CompilerOptions()
    if kwargs:
        options = options.create_updated(**kwargs)
    if isinstance(sources, (str, SourceCode, Path)):
        sources = [sources]

    error_manager = CollectingErrorManager()
    result = StylesheetCompiler(options, error_manager).compile(sources)
    if result.has_errors:
        raise CompilationError(error_manager.generate_report(), result.errors)
    return result
