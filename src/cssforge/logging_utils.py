#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/logging_utils.py
"""Logging setup for the ``cssforge`` command.

Library modules only create loggers (``logging.getLogger(__name__)``); the
command line decides where records go. Stylesheet errors and warnings are not
log records. They travel through an :class:`~cssforge.errors.ErrorManager`
and are printed as a report, so the default console format stays short.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PLAIN_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(log_level: int | str) -> int:
    """Turn ``"debug"``, ``"INFO"`` or ``logging.WARNING`` into a numeric level.

    Unknown names fall back to ``INFO``.
    """
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Send compiler log records to stderr and, optionally, a file.

    Any handlers already on the root logger are replaced, so calling this
    twice (as repeated ``main()`` calls in one process do) does not duplicate
    output.

    Parameters
    ----------
    log_level : int | str
        Level for the root logger and every handler.
    log_file : str, optional
        File that also receives every record, appended to.
    trace_mode : bool, default False
        Prefix records with a timestamp and the logger name, which shows
        which pass or parser step produced them.

    Returns
    -------
    logging.Logger
        The root logger.

    """
    level = resolve_level(log_level)
    formatter = (
        logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT) if trace_mode else logging.Formatter(PLAIN_FORMAT)
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            # Compilation goes on; the console still gets every record
            root_logger.addHandler(_with_format(handlers[0], level, formatter))
            root_logger.warning("Could not open log file %s: %s", log_file, exc)
            return root_logger

    for handler in handlers:
        root_logger.addHandler(_with_format(handler, level, formatter))
    if log_file:
        root_logger.debug("Writing log records to %s", log_file)
    return root_logger


def _with_format(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler
