#!/usr/bin/env python3
"""
svg2pts command line.

Converts all visible paths of an SVG document to a list of points, one
``X Y`` pair per line.  Shapes with neither stroke nor fill are ignored.

Usage:
    svg2pts drawing.svg                      # vertices to stdout
    svg2pts -d 0.5 drawing.svg points.txt    # one point every 0.5 units
    svg2pts -p 2000 < drawing.svg            # about 2000 points
    svg2pts -d 1 -m even-split drawing.svg   # split each segment evenly

Exit status:
    0 on success (nothing written to stderr), 2 for invalid options,
    1 for unreadable input, malformed documents and output failures.
    Failures print a single ``error: ...`` line to stderr.
"""

from __future__ import annotations

import argparse
import sys
from typing import NoReturn, Sequence

from svg2pts import __version__
from svg2pts.configs.loader import LOG_LEVELS, ConfigError, load_config
from svg2pts.document.svg import DocumentError, load_document
from svg2pts.pipeline import convert_document
from svg2pts.resample.policies import ResampleMode
from svg2pts.utils import fs
from svg2pts.utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class _ArgumentParser(argparse.ArgumentParser):
    """Raise instead of printing usage, so failures stay on one line."""

    def error(self, message: str) -> NoReturn:
        raise ConfigError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="svg2pts",
        description=(
            "Convert all paths in an SVG to a list of points. Paths with no "
            "stroke or fill are ignored. Output is a sequence of `X Y` lines."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="Input SVG file, stdin if absent or '-'",
    )
    parser.add_argument(
        "output",
        nargs="?",
        help="Output file, stdout if absent or '-'",
    )

    # Resampling
    parser.add_argument(
        "--distance",
        "-d",
        type=float,
        help="Target distance between points in SVG user units; "
             "0 writes every vertex unchanged [default: 0]",
    )
    parser.add_argument(
        "--accuracy",
        "-a",
        type=float,
        help="Maximum curve flattening deviation "
             "[default: 0.05, or distance/25 when distance > 0]",
    )
    parser.add_argument(
        "--points",
        "-p",
        type=int,
        help="Approximate number of points; derives the distance from the "
             "estimated path length [default: 0, disabled]",
    )
    parser.add_argument(
        "--mode",
        "-m",
        choices=[m.value for m in ResampleMode],
        help="Resampling policy [default: exact]",
    )

    # Configuration and logging
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="YAML defaults file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help=f"Log level: {', '.join(LOG_LEVELS)} [default: WARNING]",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        default=None,
        help="Log JSON lines instead of text",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Also write logs to this file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _fail(message: object, code: int) -> int:
    print(f"error: {message}", file=sys.stderr)
    return code


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; returns the process exit status."""
    try:
        args = build_parser().parse_args(argv)
        config = load_config(
            args.config,
            {
                "distance": args.distance,
                "accuracy": args.accuracy,
                "points": args.points,
                "mode": args.mode,
                "log_level": args.log_level,
                "log_json": args.log_json,
                "log_file": args.log_file,
            },
        )
    except ConfigError as e:
        return _fail(e, EXIT_USAGE)
    except OSError as e:
        return _fail(f"could not read configuration: {e}", EXIT_USAGE)

    setup_logging(
        config.logging.level,
        config.logging.file,
        json=config.logging.json,
        context={"input": args.input or "<stdin>"},
    )

    try:
        data = fs.read_input(args.input)
    except OSError as e:
        return _fail(f"could not read input file, `{args.input}`: {e}", EXIT_FAILURE)

    try:
        document = load_document(data)
    except DocumentError as e:
        return _fail(e, EXIT_FAILURE)

    try:
        with fs.open_output(args.output) as stream:
            convert_document(document, config, stream)
    except OSError as e:
        logger.debug("Output failed", exc_info=True)
        return _fail(f"could not write output, `{args.output or '<stdout>'}`: {e}", EXIT_FAILURE)

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
