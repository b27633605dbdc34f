#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cssforge/cli/__init__.py
"""Command-line interface for cssforge.

Compile one or more stylesheets into compact CSS.

Examples
--------
Compile a stylesheet to stdout::

    $ cssforge styles.gss

Rename classes and write the renaming map::

    $ cssforge styles.gss -o styles.css --rename CLOSURE --output-renaming-map map.json

Evaluate ``@if`` chains with a condition set::

    $ cssforge styles.gss --true-condition MOBILE --true-condition RTL

Show problems in a table::

    $ cssforge styles.gss --rich

Settings are merged with this precedence (highest first): command-line flags,
``CSSFORGE_<OPTION>`` environment variables, the configuration file
(``--config``, ``CSSFORGE_CONFIG``, or discovered), then built-in defaults.
"""

import argparse
import json
import logging
import os
import sys
from dataclasses import fields
from pathlib import Path
from typing import Any

from cssforge.ast.location import SourceCode
from cssforge.cli.actions import create_env_aware_argument
from cssforge.cli.config import load_config_with_priority
from cssforge.compiler import SourceInput, StylesheetCompiler
from cssforge.errors import CollectingErrorManager, CssError
from cssforge.logging_utils import configure_logging
from cssforge.options import CompilerOptions
from cssforge.renaming import RenamingType

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_COMPILATION_ERROR = 1
EXIT_USAGE_ERROR = 2

STDIN_MARKER = "-"

__all__ = [
    "EXIT_COMPILATION_ERROR",
    "EXIT_SUCCESS",
    "EXIT_USAGE_ERROR",
    "build_options",
    "create_parser",
    "main",
]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``cssforge`` command."""
    from cssforge import __version__

    parser = argparse.ArgumentParser(
        prog="cssforge",
        description="Compile GSS stylesheets into compact CSS.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=_build_epilog(),
    )
    parser.add_argument("--version", action="version", version=f"cssforge {__version__}")
    parser.add_argument(
        "inputs",
        nargs="*",
        metavar="INPUT",
        help="Stylesheets to compile, in order. Use '-' or nothing to read stdin.",
    )
    create_env_aware_argument(parser, "-o", "--output", dest="output", help="Write CSS here instead of stdout")

    compile_group = parser.add_argument_group("compilation options")
    create_env_aware_argument(
        compile_group,
        "--rename",
        dest="rename",
        type=str.upper,
        choices=[t.name for t in RenamingType],
        default=None,
        help="Class renaming strategy (default: NONE)",
    )
    create_env_aware_argument(
        compile_group,
        "--css-renaming-prefix",
        dest="css_renaming_prefix",
        default=None,
        help="Prefix added to every renamed class",
    )
    create_env_aware_argument(
        compile_group,
        "--excluded-classes",
        dest="excluded_classes",
        default=None,
        help="Comma-separated class names that are never renamed",
    )
    create_env_aware_argument(
        compile_group,
        "--true-condition",
        dest="true_conditions",
        action="append",
        default=None,
        metavar="NAME",
        help="Condition name that holds in @if rules (repeatable)",
    )
    create_env_aware_argument(
        compile_group,
        "--no-eliminate-empty-rulesets",
        dest="eliminate_empty_rulesets",
        action="store_false",
        default=None,
        help="Keep rulesets that have no declarations",
    )
    create_env_aware_argument(
        compile_group,
        "--allow-unrecognized-at-rules",
        dest="allow_unrecognized_at_rules",
        action="store_true",
        default=None,
        help="Keep unknown @-rules instead of reporting them as errors",
    )
    create_env_aware_argument(
        compile_group,
        "--allowed-at-rule",
        dest="allowed_unrecognized_at_rules",
        action="append",
        default=None,
        metavar="NAME",
        help="Unknown @-rule name (without '@') to accept (repeatable)",
    )
    create_env_aware_argument(
        compile_group,
        "--expand-browser-prefixes",
        dest="expand_browser_prefixes",
        action="store_true",
        default=None,
        help="Add vendor-prefixed copies of declarations such as display: flex",
    )

    bidi_group = parser.add_argument_group("right-to-left options")
    create_env_aware_argument(
        bidi_group,
        "--flip-bidi",
        dest="flip_bidi",
        action="store_true",
        default=None,
        help="Mirror left and right (float, margins, cursors, positions) for right-to-left output",
    )
    create_env_aware_argument(
        bidi_group,
        "--swap-ltr-rtl-in-url",
        dest="swap_ltr_rtl_in_url",
        action="store_true",
        default=None,
        help="With --flip-bidi, also swap ltr and rtl in url() paths",
    )
    create_env_aware_argument(
        bidi_group,
        "--swap-left-right-in-url",
        dest="swap_left_right_in_url",
        action="store_true",
        default=None,
        help="With --flip-bidi, also swap left and right in url() paths",
    )

    output_group = parser.add_argument_group("output options")
    create_env_aware_argument(
        output_group,
        "--output-renaming-map",
        dest="output_renaming_map",
        metavar="PATH",
        help="Write the class renaming map as JSON",
    )
    create_env_aware_argument(
        output_group, "--rich", dest="rich", action="store_true", help="Show errors and warnings in a table"
    )

    config_group = parser.add_argument_group("configuration")
    config_group.add_argument(
        "--config",
        dest="config",
        metavar="PATH",
        help="Configuration file (.toml, .yaml, .json, or pyproject.toml). Overrides CSSFORGE_CONFIG.",
    )
    config_group.add_argument(
        "--no-config",
        action="store_true",
        dest="no_config",
        help="Disable loading of configuration files, including CSSFORGE_CONFIG and --config",
    )

    logging_group = parser.add_argument_group("logging")
    create_env_aware_argument(
        logging_group,
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging verbosity (default: WARNING)",
    )
    create_env_aware_argument(logging_group, "--log-file", dest="log_file", help="Also write log records here")
    create_env_aware_argument(
        logging_group,
        "--trace",
        dest="trace",
        action="store_true",
        help="Debug logging with timestamps and logger names",
    )

    return parser


def _build_epilog() -> str:
    """List configuration file keys, core options first, from the option field metadata."""
    lines = ["configuration file keys:"]
    for importance in ("core", "advanced"):
        for option_field in fields(CompilerOptions):
            if option_field.metadata.get("importance") == importance:
                lines.append(f"  {option_field.name:<32}{option_field.metadata.get('help', '')}")
    lines.append("")
    lines.append("Every option also reads a CSSFORGE_<OPTION> environment variable, e.g. CSSFORGE_RENAME=CLOSURE.")
    return "\n".join(lines)


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Configure logging from ``--trace``, ``--log-level`` and ``--log-file``."""
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level.upper())
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def build_options(parsed_args: argparse.Namespace, config: dict[str, Any]) -> CompilerOptions:
    """Merge configuration file values with command-line values.

    A command-line value (or its environment variable) wins whenever it was
    given; configuration file values fill the rest.

    Raises
    ------
    ValueError
        If the merged values are not valid options.

    """
    merged = {key.replace("-", "_"): value for key, value in config.items()}
    for option_field in fields(CompilerOptions):
        value = getattr(parsed_args, option_field.name, None)
        if value is not None:
            merged[option_field.name] = value
    return CompilerOptions.from_mapping(merged)


def _collect_sources(inputs: list[str]) -> list[SourceInput]:
    """Turn input arguments into compiler sources, reading stdin for ``-``.

    Raises
    ------
    argparse.ArgumentTypeError
        If an input file does not exist.

    """
    if not inputs:
        inputs = [STDIN_MARKER]
    sources: list[SourceInput] = []
    for item in inputs:
        if item == STDIN_MARKER:
            sources.append(SourceCode("<stdin>", sys.stdin.read()))
            continue
        path = Path(item)
        if not path.is_file():
            raise argparse.ArgumentTypeError(f"Input file does not exist: {item}")
        sources.append(path)
    return sources


def _print_report_rich(errors: list[CssError], warnings: list[CssError]) -> None:
    """Print errors and warnings as a table on stderr."""
    from rich.console import Console
    from rich.table import Table

    console = Console(stderr=True)
    table = Table(title="Compilation Problems")
    table.add_column("Severity", style="bold")
    table.add_column("File", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Column", justify="right")
    table.add_column("Message", style="white", no_wrap=False)

    for severity, style, problems in (("ERROR", "red", errors), ("WARNING", "yellow", warnings)):
        for problem in problems:
            location = problem.location
            line = "" if location.is_unknown else str(location.begin_line)
            column = "" if location.is_unknown else str(location.begin_column)
            table.add_row(
                f"[{style}]{severity}[/{style}]", location.file_name or "<input>", line, column, problem.message
            )

    console.print(table)
    console.print(f"[bold]{len(errors)} error(s), {len(warnings)} warning(s)[/bold]")


def _write_output(css: str, output: str | None) -> None:
    if output:
        Path(output).write_text(css + "\n", encoding="utf-8")
        logger.info("Wrote %s", output)
    else:
        sys.stdout.write(css + "\n")


def main(args: list[str] | None = None) -> int:
    """Run the ``cssforge`` command and return its exit code.

    Returns
    -------
    int
        ``EXIT_SUCCESS`` when the stylesheets compiled, ``EXIT_COMPILATION_ERROR``
        when the compiler recorded errors, ``EXIT_USAGE_ERROR`` for bad options,
        configuration or inputs.

    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    _setup_logging_level(parsed_args)

    try:
        config: dict[str, Any] = {}
        if not parsed_args.no_config:
            config = load_config_with_priority(parsed_args.config, os.environ.get("CSSFORGE_CONFIG"))
        options = build_options(parsed_args, config)
        sources = _collect_sources(parsed_args.inputs)
    except (argparse.ArgumentTypeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    logger.debug("Compiling %d source(s) with %s", len(sources), options)
    error_manager = CollectingErrorManager()
    result = StylesheetCompiler(options, error_manager).compile(sources)

    if result.errors or result.warnings:
        if parsed_args.rich:
            _print_report_rich(result.errors, result.warnings)
        else:
            print(error_manager.generate_report(), file=sys.stderr)

    if result.has_errors:
        return EXIT_COMPILATION_ERROR

    try:
        _write_output(result.css, parsed_args.output)
        if parsed_args.output_renaming_map:
            Path(parsed_args.output_renaming_map).write_text(
                json.dumps(result.renaming_map, indent=2) + "\n", encoding="utf-8"
            )
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    return EXIT_SUCCESS
