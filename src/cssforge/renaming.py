#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/renaming.py
"""Substitution maps used to rename CSS classes and element ids.

A substitution map turns a name into its replacement. Every map here is
injective (two different names never share a replacement) and stable (a name
maps to the same replacement for the lifetime of the map).

Maps compose: :class:`SplittingSubstitutionMap` renames each dash-separated
part of a name through another map, :class:`PrefixingSubstitutionMap` adds a
prefix to another map's output, and :class:`RecordingSubstitutionMap` keeps a
record of what was renamed so the mapping can be written out for the code
that references the classes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Iterable, Mapping, Optional

from cssforge.constants import MINIMAL_CHARS, MINIMAL_START_CHARS

logger = logging.getLogger(__name__)


class SubstitutionMap(ABC):
    """Maps a name to its replacement."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the replacement for ``key``, or ``None`` to leave it alone."""

    def initialize_with_mappings(self, mappings: Mapping[str, str]) -> None:
        """Seed the map with known replacements from an earlier compilation.

        Raises
        ------
        ValueError
            If the map cannot honour pre-existing mappings.

        """
        raise ValueError(f"{type(self).__name__} cannot be initialized with mappings")


class IdentitySubstitutionMap(SubstitutionMap):
    """Leaves every name unchanged."""

    def get(self, key: str) -> str:
        return key

    def initialize_with_mappings(self, mappings: Mapping[str, str]) -> None:
        for key, value in mappings.items():
            if key != value:
                raise ValueError(f"Identity map cannot map {key!r} to {value!r}")


class SimpleSubstitutionMap(SubstitutionMap):
    """Appends an underscore; readable output for debugging renamed stylesheets."""

    def get(self, key: str) -> str:
        return f"{key}_"


class MinimalSubstitutionMap(SubstitutionMap):
    """Assigns the shortest unused name to each new key.

    Parameters
    ----------
    start_chars : iterable of str, optional
        Characters allowed as the first character of a replacement.
    chars : iterable of str, optional
        Characters allowed in the remaining positions.
    blacklist : iterable of str, optional
        Replacements that must never be produced.

    """

    def __init__(
        self,
        start_chars: Optional[Iterable[str]] = None,
        chars: Optional[Iterable[str]] = None,
        blacklist: Iterable[str] = (),
    ) -> None:
        self.start_chars = list(start_chars if start_chars is not None else MINIMAL_START_CHARS)
        self.chars = list(chars if chars is not None else MINIMAL_CHARS)
        if not self.start_chars or not self.chars:
            raise ValueError("MinimalSubstitutionMap needs at least one start character and one character")
        self.blacklist = set(blacklist)
        self._mappings: dict[str, str] = {}
        self._used: set[str] = set()
        self._next_index = 0

    def get(self, key: str) -> str:
        value = self._mappings.get(key)
        if value is None:
            value = self._next_value()
            self._mappings[key] = value
            self._used.add(value)
        return value

    def _next_value(self) -> str:
        while True:
            candidate = self.to_short_string(self._next_index)
            self._next_index += 1
            if candidate not in self.blacklist and candidate not in self._used:
                return candidate

    def to_short_string(self, index: int) -> str:
        """Return the ``index``-th name in this map's naming sequence."""
        start_count = len(self.start_chars)
        char_count = len(self.chars)
        parts = [self.start_chars[index % start_count]]
        index //= start_count
        while index > 0:
            parts.append(self.chars[(index - 1) % char_count])
            index = (index - 1) // char_count
        return "".join(parts)

    def initialize_with_mappings(self, mappings: Mapping[str, str]) -> None:
        for key, value in mappings.items():
            if value in self._used and self._mappings.get(key) != value:
                raise ValueError(f"Replacement {value!r} is already assigned")
            self._mappings[key] = value
            self._used.add(value)


class PrefixingSubstitutionMap(SubstitutionMap):
    """Prefixes the output of another map."""

    def __init__(self, delegate: SubstitutionMap, prefix: str) -> None:
        self.delegate = delegate
        self.prefix = prefix

    def get(self, key: str) -> Optional[str]:
        value = self.delegate.get(key)
        return None if value is None else f"{self.prefix}{value}"

    def initialize_with_mappings(self, mappings: Mapping[str, str]) -> None:
        stripped = {}
        for key, value in mappings.items():
            if not value.startswith(self.prefix):
                raise ValueError(f"Mapping {key!r} -> {value!r} lacks prefix {self.prefix!r}")
            stripped[key] = value[len(self.prefix) :]
        self.delegate.initialize_with_mappings(stripped)


class SplittingSubstitutionMap(SubstitutionMap):
    """Renames each dash-separated part of a name independently.

    ``goog-menu-item`` and ``goog-menu`` then share the renamed ``goog`` and
    ``menu`` parts, so code that builds class names by joining parts keeps
    working after renaming.
    """

    def __init__(self, delegate: SubstitutionMap) -> None:
        self.delegate = delegate

    def get(self, key: str) -> Optional[str]:
        if "-" not in key:
            return self.delegate.get(key)
        parts = []
        for part in key.split("-"):
            value = self.delegate.get(part)
            parts.append(part if value is None else value)
        return "-".join(parts)

    def initialize_with_mappings(self, mappings: Mapping[str, str]) -> None:
        part_mappings: dict[str, str] = {}
        for key, value in mappings.items():
            key_parts = key.split("-")
            value_parts = value.split("-")
            if len(key_parts) != len(value_parts):
                raise ValueError(f"Mapping {key!r} -> {value!r} does not preserve dash-separated parts")
            part_mappings.update(zip(key_parts, value_parts))
        self.delegate.initialize_with_mappings(part_mappings)


class RecordingSubstitutionMap(SubstitutionMap):
    """Records the replacements handed out by another map.

    Parameters
    ----------
    delegate : SubstitutionMap
        Map that produces the replacements.
    should_record : callable, optional
        Predicate on the original name; only names it accepts are recorded.
        Every name is recorded when omitted.

    """

    def __init__(self, delegate: SubstitutionMap, should_record: Optional[Callable[[str], bool]] = None) -> None:
        self.delegate = delegate
        self.should_record = should_record or (lambda key: True)
        self._mappings: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        if key in self._mappings:
            return self._mappings[key]
        value = self.delegate.get(key)
        if value is not None and self.should_record(key):
            self._mappings[key] = value
        return value

    @property
    def mappings(self) -> dict[str, str]:
        """Recorded replacements in the order they were first requested."""
        return dict(self._mappings)

    def initialize_with_mappings(self, mappings: Mapping[str, str]) -> None:
        self.delegate.initialize_with_mappings(mappings)
        for key, value in mappings.items():
            if self.should_record(key):
                self._mappings[key] = value
        logger.debug("Seeded renaming map with %d mapping(s)", len(mappings))


class RenamingType(Enum):
    """Named renaming strategies offered by the compiler."""

    NONE = "NONE"
    DEBUG = "DEBUG"
    CLOSURE = "CLOSURE"

    def create_substitution_map(self) -> SubstitutionMap:
        """Return a fresh map implementing this strategy."""
        if self is RenamingType.NONE:
            return IdentitySubstitutionMap()
        if self is RenamingType.DEBUG:
            return SplittingSubstitutionMap(SimpleSubstitutionMap())
        return SplittingSubstitutionMap(MinimalSubstitutionMap())

    @classmethod
    def from_name(cls, name: str | RenamingType) -> RenamingType:
        if isinstance(name, RenamingType):
            return name
        try:
            return cls[str(name).upper()]
        except KeyError:
            choices = ", ".join(member.name for member in cls)
            raise ValueError(f"Unknown renaming type {name!r}; expected one of {choices}") from None
