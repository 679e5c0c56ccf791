#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Command-line interface for block2html.

This module reads a block document (JSON), converts it with the options from
the command line and an optional configuration file, and writes HTML (or, in
``nodes`` output mode, a JSON list of rendered blocks).

Examples
--------
    block2html post.json -o post.html --framework tailwind --content-mode blended
    block2html post.json --ssr --ssr-level maximum --minify
    cat post.json | block2html - --config block2html.yaml

"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict

from block2html import __version__
from block2html.ast.serialization import json_to_blocks
from block2html.config import load_config_with_priority, merge_configs
from block2html.constants import (
    CONFIG_ENV_VAR,
    CONTENT_MODE_ALIASES,
    CSS_FRAMEWORKS,
    OUTPUT_MODES,
    SSR_LEVELS,
)
from block2html.converter import convert_blocks
from block2html.exceptions import Block2HtmlError, ConfigError, MalformedBlockError, ValidationError
from block2html.logging_utils import configure_logging
from block2html.options.conversion import ConversionOptions

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``block2html`` command."""
    parser = argparse.ArgumentParser(
        prog="block2html",
        description="Convert WordPress block-editor documents (JSON) to HTML.",
        epilog=f"A configuration file may also be selected with the {CONFIG_ENV_VAR} environment variable.",
    )
    parser.add_argument("input", metavar="INPUT", help="Block document in JSON format, or '-' to read from stdin")
    parser.add_argument("-o", "--out", dest="output", help="Output file (default: stdout)")
    parser.add_argument("--config", help="Configuration file (.json, .toml, .yaml or pyproject.toml)")
    parser.add_argument("--framework", choices=CSS_FRAMEWORKS, help="CSS framework for generated classes")
    parser.add_argument(
        "--content-mode",
        choices=sorted(CONTENT_MODE_ALIASES),
        help="How editor-rendered markup is used (raw, trust-rendered, blended)",
    )
    parser.add_argument("--output-mode", choices=OUTPUT_MODES, help="Emit one HTML string or a list of rendered blocks")
    parser.add_argument("--ssr", action="store_true", help="Run the SSR optimizer on the output")
    parser.add_argument("--ssr-level", choices=SSR_LEVELS, help="SSR optimization level (implies --ssr)")
    parser.add_argument("--minify", action="store_true", help="Minify the optimized output (implies --ssr)")
    parser.add_argument("--strict", action="store_true", help="Fail instead of degrading when a handler or hook fails")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log messages to this file")
    parser.add_argument("--debug", action="store_true", help="Enable per-block diagnostic logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _cli_overrides(parsed_args: argparse.Namespace) -> Dict[str, Any]:
    """Collect the option values given explicitly on the command line."""
    overrides: Dict[str, Any] = {}
    if parsed_args.framework:
        overrides["css_framework"] = parsed_args.framework
    if parsed_args.content_mode:
        overrides["content_mode"] = parsed_args.content_mode
    if parsed_args.output_mode:
        overrides["output_mode"] = parsed_args.output_mode
    if parsed_args.strict:
        overrides["strict"] = True
    if parsed_args.debug:
        overrides["debug"] = True

    ssr: Dict[str, Any] = {}
    if parsed_args.ssr or parsed_args.ssr_level or parsed_args.minify:
        ssr["enabled"] = True
    if parsed_args.ssr_level:
        ssr["level"] = parsed_args.ssr_level
    if parsed_args.minify:
        ssr["minify_output"] = True
    if ssr:
        overrides["ssr"] = ssr
    return overrides


def build_options(parsed_args: argparse.Namespace) -> ConversionOptions:
    """Combine the configuration file and command-line flags into options.

    Raises
    ------
    ConfigError
        If the configuration file cannot be loaded
    ValidationError
        If the combined configuration is invalid

    """
    config = load_config_with_priority(parsed_args.config)
    if isinstance(config.get("ssr"), bool):
        config = {**config, "ssr": {"enabled": config["ssr"]}}
    return ConversionOptions.from_dict(merge_configs(config, _cli_overrides(parsed_args)))


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _write_output(text: str, destination: str | None) -> None:
    if destination:
        Path(destination).write_text(text, encoding="utf-8")
        logger.info(f"Wrote output to {destination}")
    else:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")


def main(args: list[str] | None = None) -> int:
    """Execute the block2html command.

    Returns
    -------
    int
        0 on success, 1 on a conversion error, 2 on a usage, configuration
        or input error

    """
    parser = create_parser()
    try:
        parsed_args = parser.parse_args(args)
    except SystemExit as e:
        return EXIT_SUCCESS if e.code == 0 else EXIT_VALIDATION_ERROR

    configure_logging(parsed_args.log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.debug)

    try:
        options = build_options(parsed_args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except ValidationError as e:
        print(f"Invalid options: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    try:
        document = json_to_blocks(_read_input(parsed_args.input))
    except OSError as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except MalformedBlockError as e:
        print(f"Invalid block document: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    try:
        result = convert_blocks(document, options)
    except Block2HtmlError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Conversion failed: {e}", file=sys.stderr)
        return EXIT_ERROR

    if isinstance(result, list):
        text = json.dumps([asdict(rendered) for rendered in result], indent=2, ensure_ascii=False)
    else:
        text = result

    try:
        _write_output(text, parsed_args.output)
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
