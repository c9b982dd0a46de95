"""Command line interface for batch BMP editing."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .codec import describe, format_info, load_image, save_image
from .errors import BmpError
from .pipeline import OPERATION_NAMES, load_pipeline, parse_operation, run_pipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Edit 8-bit and 24-bit BMP images")
    parser.add_argument("input", type=Path, help="Path to the input BMP image")
    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        default=None,
        help="Where to write the edited image (omit to only print image info)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        choices=(8, 24),
        default=None,
        help="Require the input to have this bit depth (default: accept either)",
    )
    parser.add_argument(
        "--op",
        dest="operations",
        action="append",
        default=[],
        metavar="SPEC",
        help=(
            "Operation to apply, repeatable, e.g. 'negative' or 'brightness=20'. "
            f"Known operations: {', '.join(OPERATION_NAMES)}"
        ),
    )
    parser.add_argument(
        "--pipeline",
        type=Path,
        default=None,
        help="Optional JSON file listing operations to apply before any --op",
    )
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print width, height, bit depth and data size",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the image info as JSON instead of text",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for info, -vv for debug)",
    )
    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        operations = load_pipeline(args.pipeline)
        operations += [parse_operation(text) for text in args.operations]
        image = load_image(args.input, args.depth)
        run_pipeline(image, operations)

        if args.info or args.output is None:
            info = describe(image)
            if args.json:
                print(json.dumps(info.as_dict(), indent=2))
            else:
                print(format_info(info))

        if args.output is not None:
            save_image(args.output, image)
            logger.info("Wrote %s", args.output)
    except (BmpError, OSError, json.JSONDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
