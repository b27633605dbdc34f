"""Custom argparse Action classes for the cssforge CLI.

Each action reads an environment variable named ``CSSFORGE_<DEST>`` and uses
its value as the argument default, so ``CSSFORGE_RENAME=CLOSURE`` behaves like
``--rename CLOSURE`` unless the flag is given explicitly.
"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import argparse
import logging
import os

from cssforge.constants import ENV_VAR_PREFIX

TRUTHY_ENV_VALUES = ("true", "1", "yes", "on")


def _infer_dest(args, kwargs) -> str | None:
    """Return the destination argparse assigned to the action being built."""
    # argparse passes option_strings and dest as keywords
    return kwargs.get("dest")


def env_key_for(dest: str) -> str:
    """Return the environment variable consulted for ``dest``."""
    return f"{ENV_VAR_PREFIX}{dest.upper().replace('-', '_')}"


class EnvironmentAwareAction(argparse.Action):
    """Store action that takes its default from ``CSSFORGE_<DEST>``."""

    def __init__(self, *args, **kwargs):
        dest = _infer_dest(args, kwargs)
        if dest:
            env_key = env_key_for(dest)
            env_value = os.environ.get(env_key)
            if env_value is not None:
                try:
                    type_func = kwargs.get("type")
                    kwargs["default"] = type_func(env_value) if type_func is not None else env_value
                except (ValueError, TypeError) as e:
                    logging.warning(f"Invalid environment variable {env_key}={env_value}: {e}")

        super().__init__(*args, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, values)


class EnvironmentAwareBooleanAction(argparse._StoreTrueAction):
    """Boolean action that supports environment variable defaults."""

    def __init__(self, *args, **kwargs):
        dest = _infer_dest(args, kwargs)
        if dest:
            env_value = os.environ.get(env_key_for(dest))
            if env_value is not None:
                kwargs["default"] = env_value.lower() in TRUTHY_ENV_VALUES

        super().__init__(*args, **kwargs)


class EnvironmentAwareBooleanFalseAction(argparse._StoreFalseAction):
    """Boolean false action (``--no-*``) that supports environment variable defaults.

    The variable names the positive setting: ``CSSFORGE_ELIMINATE_EMPTY_RULESETS=false``
    has the same effect as ``--no-eliminate-empty-rulesets``.
    """

    def __init__(self, *args, **kwargs):
        dest = _infer_dest(args, kwargs)
        if dest:
            env_value = os.environ.get(env_key_for(dest))
            if env_value is not None:
                kwargs["default"] = env_value.lower() in TRUTHY_ENV_VALUES

        super().__init__(*args, **kwargs)


class EnvironmentAwareAppendAction(argparse._AppendAction):
    """Append action whose default is a comma-separated environment variable."""

    def __init__(self, *args, **kwargs):
        dest = _infer_dest(args, kwargs)
        if dest:
            env_value = os.environ.get(env_key_for(dest))
            if env_value is not None:
                kwargs["default"] = [item.strip() for item in env_value.split(",") if item.strip()]

        super().__init__(*args, **kwargs)


def create_env_aware_argument(parser, *args, **kwargs):
    """Add an argument whose action also reads its default from the environment.

    The environment-aware action is chosen from the ``action`` keyword;
    unrecognised actions are passed through unchanged.
    """
    action = kwargs.get("action", "store")

    if action == "store_true":
        kwargs["action"] = EnvironmentAwareBooleanAction
    elif action == "store_false":
        kwargs["action"] = EnvironmentAwareBooleanFalseAction
    elif action == "append":
        kwargs["action"] = EnvironmentAwareAppendAction
    elif action in ("store", None):
        kwargs["action"] = EnvironmentAwareAction

    return parser.add_argument(*args, **kwargs)
