"""Command-line entry point."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from .commands import decode, epochs, parse_object, print_json
from .object import Object


def _object_argument(text: str) -> str:
    try:
        Object.parse(text)
    except ValueError as err:
        raise argparse.ArgumentTypeError(str(err)) from err
    return text


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ordinals")
    subcommands = parser.add_subparsers(dest="command", required=True)

    decode_parser = subcommands.add_parser("decode", help="Decode a transaction")
    decode_parser.add_argument("transaction", nargs="?", default=None)

    subcommands.add_parser("epochs", help="List the first satoshis of each reward epoch")

    parse_parser = subcommands.add_parser("parse", help="Parse a satoshi from ordinal notation")
    parse_parser.add_argument("object", type=_object_argument, help="Parse <OBJECT>.")

    return parser


def _run(args: argparse.Namespace):
    if args.command == "decode":
        if args.transaction is None:
            return decode(sys.stdin.buffer)
        with open(args.transaction, "rb") as stream:
            return decode(stream)
    if args.command == "epochs":
        return epochs()
    return parse_object(args.object)


def _report(err: BaseException) -> None:
    print(f"error: {err}", file=sys.stderr)
    cause = err.__cause__
    while cause is not None:
        print(f"because: {cause}", file=sys.stderr)
        cause = cause.__cause__


def main(argv: Sequence[str] | None = None) -> int:
    """Run a command and print its result as JSON; return the exit status."""
    args = _build_parser().parse_args(argv)
    try:
        output = _run(args)
    except (OSError, ValueError) as err:
        _report(err)
        return 1
    print_json(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())