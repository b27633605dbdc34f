#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/passes/test_class_renaming.py
"""Unit tests for CssClassRenaming."""

import pytest

from cssforge.ast import ClassSelector
from cssforge.parser import parse
from cssforge.passes import CssClassRenaming, print_compactly
from cssforge.renaming import (
    MinimalSubstitutionMap,
    RecordingSubstitutionMap,
    SimpleSubstitutionMap,
    SplittingSubstitutionMap,
)


def rename(css, **kwargs):
    tree = parse(css)
    renamer = CssClassRenaming(tree.mutating_visit_controller(), **kwargs)
    renamer.run_pass()
    return tree, renamer


@pytest.mark.unit
class TestCssClassRenaming:
    """Tests for renaming selectors."""

    def test_classes_renamed(self):
        """Test that every class selector goes through the map."""
        tree, renamer = rename(".menu .item, a.item { x: y }", class_map=SimpleSubstitutionMap())
        assert print_compactly(tree) == ".menu_ .item_,a.item_{x:y}"
        assert renamer.renamed == 3

    def test_replacement_keeps_position_and_parent(self):
        """Test that the renamed selector replaces the original node."""
        tree, _ = rename("p.a:hover { x: y }", class_map=SimpleSubstitutionMap())
        selector = tree.root.body.children[0].selectors.selectors[0]
        refiners = selector.refiners
        assert isinstance(refiners[0], ClassSelector)
        assert refiners[0].name == "a_"
        assert refiners[0].parent is selector
        assert print_compactly(tree) == "p.a_:hover{x:y}"

    def test_ids_untouched_without_id_map(self):
        """Test that ids are left alone unless an id map is given."""
        tree, _ = rename("#main .a { x: y }", class_map=SimpleSubstitutionMap())
        assert print_compactly(tree) == "#main .a_{x:y}"

    def test_ids_renamed_with_id_map(self):
        """Test renaming ids."""
        tree, _ = rename("#main .a { x: y }", id_map=SimpleSubstitutionMap())
        assert print_compactly(tree) == "#main_ .a{x:y}"

    def test_excluded_classes(self):
        """Test that excluded classes keep their names."""
        tree, renamer = rename(".keep .change { x: y }", class_map=SimpleSubstitutionMap(), excluded_classes=["keep"])
        assert print_compactly(tree) == ".keep .change_{x:y}"
        assert renamer.renamed == 1

    def test_not_arguments_renamed(self):
        """Test that classes inside :not() are renamed too."""
        tree, _ = rename("p:not(.a) { x: y }", class_map=SimpleSubstitutionMap())
        assert print_compactly(tree) == "p:not(.a_){x:y}"

    def test_splitting_minimal_map_with_record(self):
        """Test the compiler's closure-style map end to end."""
        recorder = RecordingSubstitutionMap(SplittingSubstitutionMap(MinimalSubstitutionMap()))
        tree, _ = rename(".menu-item .menu { x: y }", class_map=recorder)
        assert print_compactly(tree) == ".a-b .a{x:y}"
        assert recorder.mappings == {"menu-item": "a-b", "menu": "a"}
