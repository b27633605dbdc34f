#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/ast/location.py
"""Source buffers and the character spans that point into them.

Every node in a stylesheet tree carries a :class:`SourceLocation` describing
the half-open character range it was parsed from. Locations are immutable
values: passes that synthesize nodes either copy a location from the node they
replace, merge several locations into one span, or use the unknown sentinel.

Coordinates
-----------
- Character indices are 0-based offsets into ``SourceCode.contents`` and the
  span covers ``contents[begin_char:end_char]``.
- Line and column numbers are 1-based.
- The unknown location uses ``-1`` for both character indices and ``0`` for
  every line/column field.

"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Iterable, Optional

UNKNOWN_INDEX = -1


@dataclass(frozen=True)
class SourceCode:
    """A named, immutable buffer of stylesheet text.

    Parameters
    ----------
    file_name : str or None
        Name used when reporting errors. ``None`` for anonymous input
        such as text passed directly to the API.
    contents : str
        Full text of the source.

    """

    file_name: Optional[str]
    contents: str
    _line_starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        starts = [0]
        for index, char in enumerate(self.contents):
            if char == "\n":
                starts.append(index + 1)
        object.__setattr__(self, "_line_starts", tuple(starts))

    def __deepcopy__(self, memo: dict) -> SourceCode:
        return self

    @property
    def line_offsets(self) -> tuple[int, ...]:
        """Character offsets at which each line begins."""
        return self._line_starts

    def position_of(self, char_index: int) -> tuple[int, int]:
        """Return the 1-based ``(line, column)`` of a character offset."""
        line_index = bisect.bisect_right(self._line_starts, char_index) - 1
        return line_index + 1, char_index - self._line_starts[line_index] + 1

    def offset_of(self, line: int, column: int) -> int:
        """Return the character offset of a 1-based ``(line, column)`` pair."""
        line = max(1, min(line, len(self._line_starts)))
        return min(self._line_starts[line - 1] + column - 1, len(self.contents))

    def location_of(self, begin_char: int, end_char: int) -> SourceLocation:
        """Build a location for the half-open range ``[begin_char, end_char)``.

        Parameters
        ----------
        begin_char : int
            Offset of the first character in the span.
        end_char : int
            Offset one past the last character in the span.

        Returns
        -------
        SourceLocation
            Location with line and column numbers derived from the offsets.

        """
        begin_line, begin_column = self.position_of(begin_char)
        end_line, end_column = self.position_of(end_char)
        return SourceLocation(self, begin_char, begin_line, begin_column, end_char, end_line, end_column)

    def line_text(self, line: int) -> str:
        """Return the text of a 1-based line without its newline."""
        if line < 1 or line > len(self._line_starts):
            return ""
        start = self._line_starts[line - 1]
        end = self.contents.find("\n", start)
        if end == -1:
            end = len(self.contents)
        return self.contents[start:end]


_ANONYMOUS_SOURCE = SourceCode(None, "")


@total_ordering
@dataclass(frozen=True, eq=False)
class SourceLocation:
    """A half-open span within a :class:`SourceCode` buffer.

    Parameters
    ----------
    source_code : SourceCode
        Buffer the span points into.
    begin_char, end_char : int
        Half-open character range.
    begin_line, begin_column : int
        1-based position of ``begin_char``.
    end_line, end_column : int
        1-based position of ``end_char``.

    Raises
    ------
    ValueError
        If the span ends before it begins.

    Notes
    -----
    Locations order by ``(begin_char, end_char)``, so the unknown sentinel
    sorts before every known location. Equality also compares the source
    buffer, so equal coordinates in different files are different locations.

    """

    source_code: SourceCode
    begin_char: int
    begin_line: int
    begin_column: int
    end_char: int
    end_line: int
    end_column: int

    def __post_init__(self) -> None:
        if self.begin_char > self.end_char:
            raise ValueError("Beginning location must come before the end location.")

    @classmethod
    def unknown(cls, source_code: Optional[SourceCode] = None) -> SourceLocation:
        """Return the sentinel location used for synthesized nodes."""
        return cls(source_code or _ANONYMOUS_SOURCE, UNKNOWN_INDEX, 0, 0, UNKNOWN_INDEX, 0, 0)

    @property
    def is_unknown(self) -> bool:
        return self.begin_char == UNKNOWN_INDEX

    @property
    def file_name(self) -> Optional[str]:
        return self.source_code.file_name

    @property
    def text(self) -> str:
        """The slice of source text covered by this location."""
        if self.is_unknown:
            return ""
        return self.source_code.contents[self.begin_char : self.end_char]

    def _key(self) -> tuple:
        return (
            self.source_code.file_name,
            self.source_code.contents,
            self.begin_char,
            self.begin_line,
            self.begin_column,
            self.end_char,
            self.end_line,
            self.end_column,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceLocation):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: SourceLocation) -> bool:
        if not isinstance(other, SourceLocation):
            return NotImplemented
        return (self.begin_char, self.end_char) < (other.begin_char, other.end_char)

    def __deepcopy__(self, memo: dict) -> SourceLocation:
        return self

    @staticmethod
    def merge(first: SourceLocation, second: SourceLocation) -> SourceLocation:
        """Return a span from the beginning of ``first`` to the end of ``second``.

        Parameters
        ----------
        first : SourceLocation
            Location supplying the beginning of the span.
        second : SourceLocation
            Location supplying the end of the span.

        Returns
        -------
        SourceLocation
            The merged span.

        Raises
        ------
        ValueError
            If the locations come from different sources, or ``first``
            begins after ``second``.

        """
        if first.source_code != second.source_code:
            raise ValueError("Locations to merge must come from the same source code.")
        if first.begin_char > second.begin_char:
            raise ValueError(
                f"The first location to merge ({first.begin_char}) must not begin after "
                f"the second one ({second.begin_char})."
            )
        return SourceLocation(
            first.source_code,
            first.begin_char,
            first.begin_line,
            first.begin_column,
            second.end_char,
            second.end_line,
            second.end_column,
        )

    @staticmethod
    def merge_all(locations: Iterable[SourceLocation]) -> SourceLocation:
        """Return the smallest span covering every location in ``locations``.

        Raises
        ------
        ValueError
            If ``locations`` is empty or mixes sources.

        """
        ordered = sorted(locations)
        if not ordered:
            raise ValueError("At least one location is required.")
        last = max(ordered, key=lambda loc: loc.end_char)
        return SourceLocation.merge(ordered[0], last)

    def __str__(self) -> str:
        if self.is_unknown:
            return "<unknown location>"
        name = self.file_name or "<input>"
        return f"{name}:{self.begin_line}:{self.begin_column}"
