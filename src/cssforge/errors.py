#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/errors.py
"""Located stylesheet errors and the managers that collect them.

Passes never raise for problems in the stylesheet. They build a
:class:`CssError` pointing at the offending node and hand it to an
:class:`ErrorManager`, either as an error (the construct is dropped and the
compilation will be reported as failed) or as a warning (the construct is kept
or converted on a best-effort basis).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import total_ordering

from cssforge.ast.location import SourceLocation

logger = logging.getLogger(__name__)


@total_ordering
class CssError:
    """A message attached to a source location.

    Parameters
    ----------
    message : str
        Human-readable description.
    location : SourceLocation
        Where the problem is. Use ``SourceLocation.unknown()`` when there is
        no meaningful location.

    Notes
    -----
    Errors sort by file name (anonymous sources first), then by location,
    then by message.

    """

    def __init__(self, message: str, location: SourceLocation) -> None:
        if message is None or location is None:
            raise ValueError("CssError requires a message and a location")
        self.message = message
        self.location = location

    @property
    def line(self) -> str:
        """Text of the source line on which the error begins."""
        return self.location.source_code.line_text(self.location.begin_line)

    def format(self) -> str:
        """Render the error with its file, position and a caret under the column.

        Examples
        --------
        >>> error.format()  # doctest: +SKIP
        'Bad thing in a.gss at line 1 column 3:\\na {}\\n  ^\\n'

        """
        loc = self.location
        if loc.is_unknown:
            return f"{self.message} at unknown location"
        caret = " " * (loc.begin_column - 1) + "^"
        where = f" in {loc.file_name}" if loc.file_name is not None else ""
        return f"{self.message}{where} at line {loc.begin_line} column {loc.begin_column}:\n{self.line}\n{caret}\n"

    def _sort_key(self) -> tuple:
        file_name = self.location.file_name
        return (file_name is not None, file_name or "", self.location.begin_char, self.location.end_char, self.message)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CssError):
            return NotImplemented
        return self.message == other.message and self.location == other.location

    def __hash__(self) -> int:
        return 31 * hash(self.message) + hash(self.location)

    def __lt__(self, other: CssError) -> bool:
        if not isinstance(other, CssError):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __repr__(self) -> str:
        return f"CssError({self.message!r}, {self.location})"

    def __str__(self) -> str:
        return self.format()


class ErrorManager(ABC):
    """Sink for errors and warnings produced while compiling."""

    @abstractmethod
    def report(self, error: CssError) -> None:
        """Record an error; the compilation will be reported as failed."""

    @abstractmethod
    def report_warning(self, warning: CssError) -> None:
        """Record a recoverable anomaly."""

    @property
    @abstractmethod
    def has_errors(self) -> bool:
        """Whether at least one error (not warning) was recorded."""

    @abstractmethod
    def generate_report(self) -> str:
        """Return every recorded error and warning as text."""


class CollectingErrorManager(ErrorManager):
    """Error manager that stores everything it is given, in arrival order."""

    def __init__(self) -> None:
        self.errors: list[CssError] = []
        self.warnings: list[CssError] = []

    def report(self, error: CssError) -> None:
        self.errors.append(error)

    def report_warning(self, warning: CssError) -> None:
        self.warnings.append(warning)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def error_messages(self) -> list[str]:
        return [error.message for error in self.errors]

    @property
    def warning_messages(self) -> list[str]:
        return [warning.message for warning in self.warnings]

    def generate_report(self) -> str:
        lines = [f"ERROR: {error.format()}" for error in sorted(self.errors)]
        lines.extend(f"WARNING: {warning.format()}" for warning in sorted(self.warnings))
        if self.errors or self.warnings:
            lines.append(f"{len(self.errors)} error(s), {len(self.warnings)} warning(s)")
        return "\n".join(lines)


class BasicErrorManager(CollectingErrorManager):
    """Error manager that logs each error and warning as it is reported."""

    def report(self, error: CssError) -> None:
        logger.error(error.format().rstrip("\n"))
        super().report(error)

    def report_warning(self, warning: CssError) -> None:
        logger.warning(warning.format().rstrip("\n"))
        super().report_warning(warning)
