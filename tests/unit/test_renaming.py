#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_renaming.py
"""Unit tests for substitution maps."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from cssforge.renaming import (
    IdentitySubstitutionMap,
    MinimalSubstitutionMap,
    PrefixingSubstitutionMap,
    RecordingSubstitutionMap,
    RenamingType,
    SimpleSubstitutionMap,
    SplittingSubstitutionMap,
)

class_names = st.from_regex(r"[a-z][a-z0-9]{0,8}", fullmatch=True)


@pytest.mark.unit
class TestBasicMaps:
    """Tests for the identity and simple maps."""

    def test_identity(self):
        """Test that the identity map changes nothing."""
        assert IdentitySubstitutionMap().get("menu") == "menu"

    def test_identity_rejects_renamings(self):
        """Test that the identity map only accepts identity mappings."""
        substitution_map = IdentitySubstitutionMap()
        substitution_map.initialize_with_mappings({"a": "a"})
        with pytest.raises(ValueError):
            substitution_map.initialize_with_mappings({"a": "b"})

    def test_simple(self):
        """Test the debugging map."""
        assert SimpleSubstitutionMap().get("menu") == "menu_"

    def test_simple_cannot_be_seeded(self):
        """Test that maps without state refuse initial mappings."""
        with pytest.raises(ValueError):
            SimpleSubstitutionMap().initialize_with_mappings({"a": "b"})


@pytest.mark.unit
class TestMinimalSubstitutionMap:
    """Tests for the shortest-name map."""

    def test_sequence(self):
        """Test that new keys get successive short names."""
        substitution_map = MinimalSubstitutionMap()
        assert [substitution_map.get(key) for key in ("x", "y", "x", "z")] == ["a", "b", "a", "c"]

    def test_short_string_sequence(self):
        """Test the naming sequence past the single characters."""
        substitution_map = MinimalSubstitutionMap(start_chars="ab", chars="xy")
        assert [substitution_map.to_short_string(i) for i in range(6)] == ["a", "b", "ax", "bx", "ay", "by"]

    def test_blacklist_skipped(self):
        """Test that blacklisted names are never handed out."""
        substitution_map = MinimalSubstitutionMap(blacklist=["a", "c"])
        assert [substitution_map.get(key) for key in ("x", "y")] == ["b", "d"]

    def test_seeded_names_are_reserved(self):
        """Test that seeded replacements are not reused for new keys."""
        substitution_map = MinimalSubstitutionMap()
        substitution_map.initialize_with_mappings({"menu": "a"})
        assert substitution_map.get("menu") == "a"
        assert substitution_map.get("other") == "b"

    def test_conflicting_seed(self):
        """Test that two keys may not share a seeded replacement."""
        substitution_map = MinimalSubstitutionMap()
        substitution_map.get("menu")
        with pytest.raises(ValueError):
            substitution_map.initialize_with_mappings({"other": "a"})

    def test_needs_characters(self):
        """Test that empty alphabets are rejected."""
        with pytest.raises(ValueError):
            MinimalSubstitutionMap(start_chars="")

    @given(st.lists(class_names, unique=True, max_size=80))
    def test_injective_and_stable(self, keys):
        """Test that distinct keys get distinct, repeatable names."""
        substitution_map = MinimalSubstitutionMap()
        first = [substitution_map.get(key) for key in keys]
        second = [substitution_map.get(key) for key in keys]
        assert first == second
        assert len(set(first)) == len(keys)


@pytest.mark.unit
class TestCompositeMaps:
    """Tests for maps that wrap another map."""

    def test_prefixing(self):
        """Test that the prefix is added to the delegate's output."""
        assert PrefixingSubstitutionMap(SimpleSubstitutionMap(), "x-").get("menu") == "x-menu_"

    def test_prefixing_seed_requires_prefix(self):
        """Test seeding through a prefixing map."""
        substitution_map = PrefixingSubstitutionMap(MinimalSubstitutionMap(), "x-")
        substitution_map.initialize_with_mappings({"menu": "x-q"})
        assert substitution_map.get("menu") == "x-q"
        with pytest.raises(ValueError):
            substitution_map.initialize_with_mappings({"other": "r"})

    def test_splitting(self):
        """Test that dash-separated parts are renamed independently."""
        substitution_map = SplittingSubstitutionMap(MinimalSubstitutionMap())
        assert substitution_map.get("goog-menu-item") == "a-b-c"
        assert substitution_map.get("goog-menu") == "a-b"
        assert substitution_map.get("item") == "c"

    def test_splitting_seed_must_keep_parts(self):
        """Test that seeded mappings must preserve the number of parts."""
        substitution_map = SplittingSubstitutionMap(MinimalSubstitutionMap())
        with pytest.raises(ValueError):
            substitution_map.initialize_with_mappings({"menu-item": "a"})

    def test_recording(self):
        """Test that replacements are recorded in first-use order."""
        recorder = RecordingSubstitutionMap(SimpleSubstitutionMap())
        recorder.get("b")
        recorder.get("a")
        recorder.get("b")
        assert list(recorder.mappings.items()) == [("b", "b_"), ("a", "a_")]

    def test_recording_predicate(self):
        """Test that only accepted names are recorded."""
        recorder = RecordingSubstitutionMap(SimpleSubstitutionMap(), should_record=lambda key: key != "skip")
        assert recorder.get("skip") == "skip_"
        recorder.get("keep")
        assert recorder.mappings == {"keep": "keep_"}

    def test_recording_seed(self):
        """Test that seeded mappings are recorded and honoured."""
        recorder = RecordingSubstitutionMap(MinimalSubstitutionMap())
        recorder.initialize_with_mappings({"menu": "z"})
        assert recorder.get("menu") == "z"
        assert recorder.mappings == {"menu": "z"}


@pytest.mark.unit
class TestRenamingType:
    """Tests for named renaming strategies."""

    @pytest.mark.parametrize(
        "name,expected",
        [("NONE", "menu-item"), ("debug", "menu_-item_"), (RenamingType.CLOSURE, "a-b")],
    )
    def test_strategies(self, name, expected):
        """Test each strategy's output."""
        assert RenamingType.from_name(name).create_substitution_map().get("menu-item") == expected

    def test_unknown_name(self):
        """Test that an unknown strategy lists the choices."""
        with pytest.raises(ValueError, match="NONE, DEBUG, CLOSURE"):
            RenamingType.from_name("fancy")
