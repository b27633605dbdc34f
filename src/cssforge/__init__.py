"""cssforge - a compiler for an extended CSS syntax.

cssforge reads stylesheets written in a superset of CSS and compiles them to
compact, standard CSS. The extensions are resolved at compile time:

- ``@def NAME value;`` defines a constant that property values reference by name
- ``@if``/``@elseif``/``@else`` blocks select rules by compile-time conditions
- CSS classes can be renamed to short or debug-friendly names, with the
  mapping written out for the code that references them

Compilation is a pipeline of passes over a mutable tree. Each pass walks the
tree through a visit controller that lets it replace or remove the node it is
visiting. See :mod:`cssforge.ast` for the tree and :mod:`cssforge.passes` for
the passes.

Requirements
------------
- Python 3.10+
- tinycss2 for tokenizing

Examples
--------
Compile a stylesheet:

    >>> from cssforge import compile_css
    >>> compile_css("@def BG #fff; .a { background: BG; }").css
    '.a{background:#fff}'

Rename classes:

    >>> result = compile_css(".menu-item { color: red }", rename="DEBUG")
    >>> result.css
    '.menu_-item_{color:red}'
    >>> result.renaming_map
    {'menu-item': 'menu_-item_'}

Work with the tree directly:

    >>> from cssforge import parse, print_compactly
    >>> tree = parse(".a, .b { color: red; }")
    >>> print_compactly(tree)
    '.a,.b{color:red}'

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "cssforge requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from cssforge.ast import CssTree, SourceCode, SourceLocation
from cssforge.compiler import CompilationResult, StylesheetCompiler, compile_css
from cssforge.errors import BasicErrorManager, CollectingErrorManager, CssError, ErrorManager
from cssforge.exceptions import (
    CompilationError,
    CssForgeError,
    ParsingError,
    ValidationError,
    VisitControllerError,
)
from cssforge.options import CompilerOptions
from cssforge.parser import parse
from cssforge.passes.compact_printer import print_compactly
from cssforge.renaming import RenamingType

__all__ = [
    "__version__",
    "BasicErrorManager",
    "CollectingErrorManager",
    "CompilationError",
    "CompilationResult",
    "CompilerOptions",
    "CssError",
    "CssForgeError",
    "CssTree",
    "ErrorManager",
    "ParsingError",
    "RenamingType",
    "SourceCode",
    "SourceLocation",
    "StylesheetCompiler",
    "ValidationError",
    "VisitControllerError",
    "compile_css",
    "parse",
    "print_compactly",
]
