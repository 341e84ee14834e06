"""Indented, multi-line rendering of syntax trees."""

from __future__ import annotations

from typing import Any, Iterator

from .nodes import Assign, Expr, ExprMath, NodeList, SubExpr
from .tokens import ItemType, item_type_name


def _lines(node: Any, indent: str) -> Iterator[str]:
    inner = indent + "  "
    deep = indent + "    "
    if isinstance(node, Assign):
        yield f"{indent}Assignment:"
        yield f"{inner}Dest:"
        for dest in node.dest:
            yield from _lines(dest, deep)
        yield f"{inner}Value:"
        yield from _lines(node.value, deep)
    elif isinstance(node, ExprMath):
        symbol = item_type_name(ItemType(int(node.op)))
        yield f"{indent}Math Expression: (Operator: {symbol})"
        yield f"{inner}Left:"
        yield from _lines(node.left, deep)
        yield f"{inner}Right:"
        yield from _lines(node.right, deep)
    elif isinstance(node, Expr):
        yield f"{indent}Expression:"
        if node.input is not None:
            yield f"{inner}Input:"
            yield from _lines(NodeList(node.input), deep)
        if node.pipeline:
            command_indent = indent + "        "
            yield f"{inner}Pipeline:"
            for index, cmd in enumerate(node.pipeline):
                yield f"{deep}Command {index}:"
                yield f"{command_indent}Name: {cmd.name}"
                if cmd.args:
                    yield f"{command_indent}Args:"
                    for arg in cmd.args:
                        yield from _lines(arg, command_indent)
    elif isinstance(node, SubExpr):
        yield f"{indent}Sub-Expression:"
        yield f"{inner}Params:"
        for param in node.params:
            yield from _lines(param, deep)
        yield f"{inner}Body:"
        yield from _lines(node.body, deep)
    elif isinstance(node, NodeList):
        yield f"{indent}List (length {len(node)}):"
        for element in node:
            yield from _lines(element, inner)
    elif hasattr(type(node), "value_type"):
        yield f"{indent}{node}"
    else:
        yield f"{indent}Unknown node: {node!r}"


def format_tree(node: Any, indent: str = "") -> str:
    """Render *node* and its children as indented lines."""
    return "\n".join(_lines(node, indent))


def print_tree(node: Any, indent: str = "") -> None:
    """Print the rendering of *node* produced by :func:`format_tree`."""
    print(format_tree(node, indent))