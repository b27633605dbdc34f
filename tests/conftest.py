"""Pytest configuration and shared fixtures for the cssforge test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from cssforge.ast import CssTree
from cssforge.errors import CollectingErrorManager
from cssforge.parser import parse

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def error_manager() -> CollectingErrorManager:
    """Provide a fresh error manager that records everything it is given."""
    return CollectingErrorManager()


@pytest.fixture
def parse_css():
    """Provide a helper that parses stylesheet text into a tree.

    Returns
    -------
    callable
        Function taking CSS text (and an optional file name) and returning a CssTree.

    """

    def _parse(text: str, file_name: str | None = None) -> CssTree:
        return parse(text, file_name)

    return _parse


@pytest.fixture
def sample_stylesheet() -> str:
    """Provide a stylesheet that exercises every compile-time extension.

    Returns
    -------
    str
        Stylesheet text with constants, a conditional chain, media and font-face rules.

    """
    return """@def MAIN_COLOR #336699;
@def PADDING 4px 8px;

@if MOBILE {
  .menu-item { padding: 2px; }
} @elseif TABLET {
  .menu-item { padding: PADDING; }
} @else {
  .menu-item { padding: 8px 16px; }
}

/* Primary navigation */
.nav > .menu-item:hover { color: MAIN_COLOR; }

@media screen and (max-width: 600px) {
  .nav { display: none; }
}

@font-face { font-family: Arial; src: url(a.woff); }

.empty { }
"""
