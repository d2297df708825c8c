"""Command line entry point.

Usage:
    mamd -i docs -o site
    mamd -i docs -o site --style monokai --template page.html
    python -m mamd -i docs

Exit status:
    0  every page built
    1  fatal error (template, stylesheet, walk) or at least one page failed
    2  bad arguments (argparse)
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from mamd import __version__
from mamd.build import SiteBuilder
from mamd.config import DEFAULT_STYLESHEET, DEFAULT_TEMPLATE, BuildConfig
from mamd.errors import MamdError
from mamd.highlighting import DEFAULT_STYLE
from mamd.template import load_template
from mamd.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

PROG = "mamd"


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Convert a tree of Markdown files into a mirrored tree of HTML pages.",
    )
    parser.add_argument(
        "-i",
        "--input",
        required=True,
        type=Path,
        help="root of path to walk for input files",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=Path("."),
        type=Path,
        help="where to build output (default: current directory)",
    )
    parser.add_argument(
        "--template",
        type=Path,
        default=DEFAULT_TEMPLATE,
        help="Jinja2 page template (default: bundled template.html)",
    )
    parser.add_argument(
        "--stylesheet",
        type=Path,
        default=DEFAULT_STYLESHEET,
        help="stylesheet copied to the output root as mamd.css (default: bundled)",
    )
    parser.add_argument(
        "--style",
        default=DEFAULT_STYLE,
        help=f"Pygments style for code blocks (default: {DEFAULT_STYLE})",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="stop at the first file that fails instead of reporting failures at the end",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="debug output")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="only report errors")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> BuildConfig:
    return BuildConfig(
        input_root=args.input,
        output_root=args.output,
        template_path=args.template,
        stylesheet_path=args.stylesheet,
        style=args.style,
        fail_fast=args.fail_fast,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit status."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    package_logger = get_logger("mamd")
    previous_level = package_logger.level
    handler = configure_logging(-1 if args.quiet else 1 if args.verbose else 0)
    try:
        config = config_from_args(args)
        logger.debug("Build configuration: %s", config)
        try:
            template = load_template(config.template_path)
            report = SiteBuilder(config, template).run()
        except MamdError as exc:
            print(f"{PROG}: error: {exc}", file=sys.stderr)
            return 1

        if not report.ok:
            print(f"{PROG}: {len(report.failures)} file(s) failed:", file=sys.stderr)
            for failure in report.failures:
                print(f"  {failure}", file=sys.stderr)
            return 1
        return 0
    finally:
        package_logger.removeHandler(handler)
        package_logger.setLevel(previous_level)
