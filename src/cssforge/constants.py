#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants shared by the parser, the passes and the printer.

Constants are organized by category:
1. At-rule names and the sets used to validate them
2. Value and selector syntax
3. Compiler defaults
"""

from __future__ import annotations

import re
from typing import Final

# =============================================================================
# At-rules
# =============================================================================

PAGE_SELECTOR_NAMES: Final[tuple[str, ...]] = (
    "top-left-corner",
    "top-left",
    "top-center",
    "top-right",
    "top-right-corner",
    "left-top",
    "left-middle",
    "left-bottom",
    "right-top",
    "right-middle",
    "right-bottom",
    "bottom-left-corner",
    "bottom-left",
    "bottom-center",
    "bottom-right",
    "bottom-right-corner",
)

PSEUDO_PAGES: Final[frozenset[str]] = frozenset({":left", ":right", ":first"})

# @charset, @import and @namespace only make sense at the top of a stylesheet,
# and @def is resolved by the compiler while @media is resolved by the browser.
ALLOWED_AT_RULES_IN_MEDIA: Final[frozenset[str]] = frozenset(
    {"page", "if", "elseif", "else", "for", "media", "keyframes", "supports", "font-face"}
)

# At-rules whose block holds declarations rather than rules.
DECLARATION_BLOCK_AT_RULES: Final[frozenset[str]] = frozenset({"page", "font-face", *PAGE_SELECTOR_NAMES})

CONDITIONAL_AT_RULES: Final[frozenset[str]] = frozenset({"if", "elseif", "else"})

MEDIA_QUERY_PREFIXES: Final[frozenset[str]] = frozenset({"only", "not"})

# =============================================================================
# Values and selectors
# =============================================================================

# Separators appear as explicit function arguments: "," for standard calls,
# "=" and " " for legacy filter syntax such as alpha(opacity=70) or rect(0 0 0 0).
ARGUMENT_SEPARATORS: Final[frozenset[str]] = frozenset({",", "=", " "})

COMPOSITE_OPERATORS: Final[frozenset[str]] = frozenset({",", "/"})

DEFINITION_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"[A-Z_][A-Z_0-9]*")

NTH_PSEUDO_CLASSES: Final[frozenset[str]] = frozenset(
    {"nth-child", "nth-last-child", "nth-of-type", "nth-last-of-type"}
)

COMBINATOR_SYMBOLS: Final[frozenset[str]] = frozenset({">", "+", "~"})

# =============================================================================
# Compiler defaults
# =============================================================================

DEFAULT_CONFIG_FILENAMES: Final[tuple[str, ...]] = (
    ".cssforge.toml",
    ".cssforge.yaml",
    ".cssforge.yml",
    ".cssforge.json",
)

ENV_VAR_PREFIX: Final[str] = "CSSFORGE_"

# Characters used by the minimal renaming map. Class names may not start with
# a digit or a dash, so the first character draws from a narrower set.
MINIMAL_START_CHARS: Final[str] = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
MINIMAL_CHARS: Final[str] = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_"
