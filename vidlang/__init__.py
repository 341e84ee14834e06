"""A pipeline language for video edits: lexer, parser, interpreter and preview server."""

__version__ = "0.1.0"

__all__ = [
    "tokens",
    "lexer",
    "nodes",
    "parser",
    "treeprint",
    "parse_cli",
    "runtime",
    "commands",
    "interpreter",
    "run_cli",
    "server",
]