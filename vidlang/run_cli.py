"""Command that runs a script."""

from __future__ import annotations

import argparse
import sys

from .interpreter import interpret
from .nodes import AstError
from .parse_cli import read_script
from .parser import AssertionFailure
from .runtime import InterpreterError


def main(argv: list[str] | None = None) -> int:
    """Run a script and print the exports it requested."""
    arg_parser = argparse.ArgumentParser(
        prog="vidlang", description="Run a video editing script."
    )
    arg_parser.add_argument("-script", "--script", default="", help="script file to parse")
    arg_parser.add_argument(
        "-stdin", "--stdin", action="store_true", help="read script from stdin"
    )
    arg_parser.add_argument(
        "-debug", "--debug", action="store_true", help="enable debug mode"
    )
    args = arg_parser.parse_args(argv)

    if not args.script and not args.stdin:
        arg_parser.print_usage(sys.stderr)
        return 1

    try:
        script = read_script(args.script, args.stdin)
    except (OSError, UnicodeDecodeError) as exc:
        source = "stdin" if args.stdin else "script file"
        print(f"Failed to read {source}: {exc}", file=sys.stderr)
        return 1

    try:
        ctx = interpret(script, args.debug)
    except (InterpreterError, AstError, AssertionFailure) as exc:
        print(f"Failed to interpret script: {exc}", file=sys.stderr)
        return 1

    for job in ctx.exports:
        print(f"Export: {job}")
    return 0


if __name__ == "__main__":
    sys.exit(main())