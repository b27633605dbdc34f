#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the cssforge library.

Problems in the stylesheet itself (a malformed ``@media`` rule, a stray
``@else``) are not exceptions: passes record them on an error manager and
keep going. The exceptions below cover everything else: misuse of the tree
API, invalid options and the final verdict of a failed compilation.

Exception Hierarchy
-------------------
- CssForgeError (base exception)

  - ValidationError (parameter/option validation)

  - ParsingError (input that the tokenizer cannot read)

  - CompilationError (one or more stylesheet errors were recorded)

  - VisitControllerError (illegal tree mutation during traversal)

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from cssforge.errors import CssError


class CssForgeError(Exception):
    """Base exception class for all cssforge-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(CssForgeError, ValueError):
    """Exception raised for invalid input parameters or options.

    Subclasses ValueError so callers validating plain values can catch either.

    Parameters
    ----------
    message : str
        Description of the validation failure
    parameter_name : str, optional
        Name of the offending parameter
    parameter_value : Any, optional
        The rejected value

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: object = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class ParsingError(CssForgeError):
    """Exception raised when stylesheet text cannot be tokenized into a tree.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    error : CssError, optional
        Located error describing where parsing failed

    """

    def __init__(self, message: str, error: CssError | None = None, original_error: Exception | None = None):
        super().__init__(message, original_error)
        self.error = error


class CompilationError(CssForgeError):
    """Exception raised when a compilation recorded at least one error.

    Parameters
    ----------
    message : str
        Formatted report of every recorded error
    errors : sequence of CssError
        The recorded errors, sorted by location

    """

    def __init__(self, message: str, errors: Sequence[CssError] = ()):
        super().__init__(message)
        self.errors = list(errors)


class VisitControllerError(CssForgeError):
    """Exception raised when a pass mutates the tree in an illegal way.

    This signals a programming error in a pass, for example removing a node
    that has no enclosing child list, or mutating the same position twice.
    """
