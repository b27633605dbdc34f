#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/options.py
"""Compiler options.

:class:`CompilerOptions` is an immutable description of one compilation. Use
:meth:`CloneFrozenMixin.create_updated` to derive a modified copy::

    options = CompilerOptions(rename=RenamingType.CLOSURE)
    debug_options = options.create_updated(rename=RenamingType.DEBUG)

Field metadata (``help`` and ``importance``) drives the command-line help.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from cssforge.exceptions import ValidationError
from cssforge.renaming import RenamingType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class CompilerOptions(CloneFrozenMixin):
    """Configuration for :class:`~cssforge.compiler.StylesheetCompiler`.

    Parameters
    ----------
    rename : RenamingType, default RenamingType.NONE
        Strategy used to rename CSS classes.
    css_renaming_prefix : str, default ""
        Prefix added to every renamed class.
    eliminate_empty_rulesets : bool, default True
        Whether rulesets without declarations are dropped from the output.
    allow_unrecognized_at_rules : bool, default False
        Keep unknown at-rules silently instead of reporting and removing them.
    allowed_unrecognized_at_rules : tuple of str, default ()
        Unknown at-rule names (without ``@``) that are always kept.
    excluded_classes : tuple of str, default ()
        Class names that are never renamed.
    true_conditions : tuple of str, default ()
        Condition names that hold when evaluating ``@if`` chains.
    expand_browser_prefixes : bool, default False
        Expand declarations such as ``display: flex`` into their vendor-prefixed forms.
    flip_bidi : bool, default False
        Mirror the stylesheet for right-to-left output.
    swap_ltr_rtl_in_url : bool, default False
        When flipping, also swap ``ltr`` and ``rtl`` path segments inside ``url()``.
    swap_left_right_in_url : bool, default False
        When flipping, also swap ``left`` and ``right`` path segments inside ``url()``.

    """

    rename: RenamingType = field(
        default=RenamingType.NONE,
        metadata={"help": "Class renaming strategy", "choices": [t.name for t in RenamingType], "importance": "core"},
    )
    css_renaming_prefix: str = field(
        default="",
        metadata={"help": "Prefix added to every renamed class", "importance": "core"},
    )
    eliminate_empty_rulesets: bool = field(
        default=True,
        metadata={"help": "Drop rulesets that have no declarations", "importance": "advanced"},
    )
    allow_unrecognized_at_rules: bool = field(
        default=False,
        metadata={"help": "Keep unknown @-rules instead of reporting them as errors", "importance": "advanced"},
    )
    allowed_unrecognized_at_rules: tuple[str, ...] = field(
        default=(),
        metadata={"help": "Unknown @-rule names that are always accepted", "importance": "advanced"},
    )
    excluded_classes: tuple[str, ...] = field(
        default=(),
        metadata={"help": "Class names that are never renamed", "importance": "core"},
    )
    true_conditions: tuple[str, ...] = field(
        default=(),
        metadata={"help": "Condition names that evaluate to true in @if rules", "importance": "core"},
    )
    expand_browser_prefixes: bool = field(
        default=False,
        metadata={"help": "Add vendor-prefixed copies of declarations that need them", "importance": "core"},
    )
    flip_bidi: bool = field(
        default=False,
        metadata={"help": "Mirror left and right for right-to-left output", "importance": "core"},
    )
    swap_ltr_rtl_in_url: bool = field(
        default=False,
        metadata={"help": "Swap ltr and rtl in url() paths when flipping", "importance": "advanced"},
    )
    swap_left_right_in_url: bool = field(
        default=False,
        metadata={"help": "Swap left and right in url() paths when flipping", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Normalize collection fields and validate values.

        Raises
        ------
        ValidationError
            If a field has an unusable value.

        """
        if not isinstance(self.rename, RenamingType):
            object.__setattr__(self, "rename", RenamingType.from_name(self.rename))

        for name in ("allowed_unrecognized_at_rules", "excluded_classes", "true_conditions"):
            value = getattr(self, name)
            if isinstance(value, str):
                value = [item.strip() for item in value.split(",") if item.strip()]
            object.__setattr__(self, name, tuple(value))

        if not isinstance(self.css_renaming_prefix, str):
            raise ValidationError(
                f"css_renaming_prefix must be a string, got {type(self.css_renaming_prefix).__name__}",
                parameter_name="css_renaming_prefix",
                parameter_value=self.css_renaming_prefix,
            )
        first = self.css_renaming_prefix[:1]
        if first and not (first.isalpha() or first in "_-"):
            raise ValidationError(
                f"css_renaming_prefix must start a valid class name, got {self.css_renaming_prefix!r}",
                parameter_name="css_renaming_prefix",
                parameter_value=self.css_renaming_prefix,
            )

        for name in (
            "eliminate_empty_rulesets",
            "allow_unrecognized_at_rules",
            "expand_browser_prefixes",
            "flip_bidi",
            "swap_ltr_rtl_in_url",
            "swap_left_right_in_url",
        ):
            if not isinstance(getattr(self, name), bool):
                raise ValidationError(
                    f"{name} must be a boolean, got {getattr(self, name)!r}",
                    parameter_name=name,
                    parameter_value=getattr(self, name),
                )

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> CompilerOptions:
        """Build options from a configuration mapping, ignoring unknown keys.

        Keys may use dashes or underscores (``css-renaming-prefix`` or
        ``css_renaming_prefix``).
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            normalized = key.replace("-", "_")
            if normalized in known:
                kwargs[normalized] = value
            else:
                logger.warning("Ignoring unknown configuration key: %s", key)
        return cls(**kwargs)
