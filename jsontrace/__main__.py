"""
Command-line entry point: parse a JSON file and print the result.

    python -m jsontrace data.json

Exit status is 0 when the file parses, 1 when it does not (the error and its
derivation trace are written to stderr), and 2 for usage errors.
"""

import argparse
import logging
import pprint
import sys
from typing import Optional

from .core.engine import parse
from .security.exceptions import ErrorReporter, ParseError, SecurityError
from .utils.config import ParseConfig, ParseLimits


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="jsontrace", description="Parse a JSON file and print the result"
    )
    ap.add_argument("file", help="JSON file to parse")
    ap.add_argument(
        "--decode-escapes",
        action="store_true",
        help="decode escape sequences inside strings",
    )
    ap.add_argument(
        "--allow-trailing-data",
        action="store_true",
        help="ignore text after the root value",
    )
    ap.add_argument(
        "--max-depth",
        type=int,
        default=ParseLimits().max_nesting_depth,
        help="maximum nesting depth of arrays and objects",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    return ap


def main(argv: Optional[list[str]] = None) -> int:
    ap = build_arg_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        with open(args.file, encoding="utf-8") as fp:
            text = fp.read()
    except (OSError, UnicodeDecodeError) as exc:
        ap.error(f"cannot read {args.file}: {exc}")

    try:
        config = ParseConfig(
            limits=ParseLimits(max_nesting_depth=args.max_depth),
            decode_escapes=args.decode_escapes,
            allow_trailing_data=args.allow_trailing_data,
        )
    except ValueError as exc:
        ap.error(str(exc))

    try:
        result = parse(text, config=config)
    except ParseError as exc:
        print(exc, file=sys.stderr)
        print(file=sys.stderr)
        print(ErrorReporter(text).format_trace(exc), file=sys.stderr)
        return 1
    except SecurityError as exc:
        print(f"SecurityError: {exc}", file=sys.stderr)
        return 1

    pprint.pprint(result, sort_dicts=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
