"""Command that parses a script and prints its syntax tree."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .nodes import AstError
from .parser import AssertionFailure, parse
from .treeprint import print_tree


def read_script(path: str | None, use_stdin: bool) -> str:
    """Read the script from *path*, or from standard input if *use_stdin*.

    Only complete lines are taken from standard input.
    """
    if use_stdin:
        data = sys.stdin.read()
        return data[: data.rfind("\n") + 1]
    return Path(path or "").read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    """Parse a script and print the tree of each top-level node."""
    arg_parser = argparse.ArgumentParser(
        prog="vidlang-parse", description="Parse a script and print its syntax tree."
    )
    arg_parser.add_argument("-script", "--script", default="", help="script file to parse")
    arg_parser.add_argument(
        "-stdin", "--stdin", action="store_true", help="read script from stdin"
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
        for node in parse(script):
            print_tree(node, "")
    except (AstError, AssertionFailure) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())