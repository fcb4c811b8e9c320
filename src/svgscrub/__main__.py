"""Command-line entry point: ``python -m svgscrub [file]``."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .parser import MarkupParseError
from .sanitize import DEFAULT_POLICY
from .serialize import sanitize_markup

logger = logging.getLogger("svgscrub")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="svgscrub",
        description="Sanitize SVG/MathML markup against an element and attribute allow-list",
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="File to sanitize (default: read from stdin)",
    )
    parser.add_argument(
        "--output", "-o",
        help="Write the sanitized markup here instead of stdout",
    )
    parser.add_argument(
        "--space-negative-numbers",
        action="store_true",
        help="Insert a space between a digit and a following minus sign in transform attributes",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Report every removal and rewrite on stderr",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.input:
            markup = Path(args.input).read_bytes()
        else:
            markup = sys.stdin.buffer.read()
    except OSError as exc:
        print(f"svgscrub: {exc}", file=sys.stderr)
        return 1

    policy = replace(DEFAULT_POLICY, space_negative_numbers=args.space_negative_numbers)

    try:
        result = sanitize_markup(markup, policy=policy)
    except MarkupParseError as exc:
        print(f"svgscrub: {exc}", file=sys.stderr)
        return 1

    if args.output:
        try:
            Path(args.output).write_text(result, encoding="utf-8")
        except OSError as exc:
            print(f"svgscrub: {exc}", file=sys.stderr)
            return 1
    else:
        sys.stdout.write(result)
        sys.stdout.write("\n")
    logger.debug("Wrote %d characters", len(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
