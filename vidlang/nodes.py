"""Syntax tree nodes and helpers to display them."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, ClassVar, Iterator, Optional

from .tokens import ItemType, item_type_name


class AstError(Exception):
    """A lexical or syntax error at a line and position."""

    def __init__(self, message: str, line: int, pos: int) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.pos = pos

    def __str__(self) -> str:
        return f"{self.message} at {self.line}:{self.pos}"


class ValueType(IntEnum):
    LITERAL_BOOL = 0
    LITERAL_NUMBER = 1
    LITERAL_STRING = 2
    GLOBAL_STREAM = 3
    IDENTIFIER = 4
    SELF_STAR = 5
    EXPR = 6
    LIST = 7
    SUB_EXPR = 8


class OpType(IntEnum):
    ADD = int(ItemType.PLUS)
    DIV = int(ItemType.DIV)
    MUL = int(ItemType.MULT)
    SUB = int(ItemType.MINUS)


@dataclass(frozen=True)
class LiteralString:
    value: str
    value_type: ClassVar[ValueType] = ValueType.LITERAL_STRING

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LiteralNumber:
    value: float
    value_type: ClassVar[ValueType] = ValueType.LITERAL_NUMBER

    def __str__(self) -> str:
        number = float(self.value)
        if math.isfinite(number) and number.is_integer():
            return str(int(number))
        return "%.6g" % number


@dataclass(frozen=True)
class LiteralBool:
    value: bool
    value_type: ClassVar[ValueType] = ValueType.LITERAL_BOOL

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Ident:
    name: str
    value_type: ClassVar[ValueType] = ValueType.IDENTIFIER

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class SelfStar:
    text: str = "*"
    value_type: ClassVar[ValueType] = ValueType.SELF_STAR

    def __str__(self) -> str:
        return self.text


class NodeList(list):
    """A list of nodes, itself usable as a value."""

    value_type: ClassVar[ValueType] = ValueType.LIST

    def __str__(self) -> str:
        if not self:
            return "[]"
        return "[" + ", ".join(str(element) for element in self) + "]"


@dataclass(frozen=True)
class SubExpr:
    body: Any
    params: NodeList = field(default_factory=NodeList)
    value_type: ClassVar[ValueType] = ValueType.SUB_EXPR

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.params)
        return f"[{params}] -> {self.body}"


@dataclass(frozen=True)
class ExprMath:
    left: Any
    op: OpType
    right: Any
    value_type: ClassVar[ValueType] = ValueType.EXPR

    def __str__(self) -> str:
        symbol = item_type_name(ItemType(int(self.op)))
        return f"({self.left} {symbol} {self.right})"


@dataclass(frozen=True)
class Command:
    name: str
    args: list = field(default_factory=list)

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}({', '.join(str(a) for a in self.args)})"


class Pipeline(list):
    """Commands joined by the pipe operator."""

    def __str__(self) -> str:
        return " |> ".join(str(cmd) for cmd in self)


@dataclass(frozen=True)
class Expr:
    input: Optional[NodeList] = None
    pipeline: Pipeline = field(default_factory=Pipeline)
    value_type: ClassVar[ValueType] = ValueType.EXPR

    def __str__(self) -> str:
        input_str = str(NodeList(self.input or ()))
        if not self.pipeline:
            return input_str
        return f"{input_str} |> {Pipeline(self.pipeline)}"


@dataclass(frozen=True)
class Assign:
    dest: NodeList
    value: Any
    define: bool = False

    def __str__(self) -> str:
        operator = ":=" if self.define else "="
        return f"{NodeList(self.dest)} {operator} {self.value}"


def pretty_print_node(node: Any, indent: str = "") -> str:
    """One-line description of *node*, prefixed by *indent*."""
    if isinstance(node, Assign):
        operator = ":=" if node.define else "="
        return f"{indent}Assign: {NodeList(node.dest)} {operator} {node.value}"
    if isinstance(node, Expr):
        return f"{indent}Expr: {node}"
    if isinstance(node, NodeList):
        return f"{indent}List: {node}"
    if isinstance(node, Command):
        return f"{indent}Command: {node}"
    return f"{indent}{type(node).__name__}: {node}"


def print_node(node: Any) -> None:
    """Print the one-line description of *node*."""
    print(pretty_print_node(node, ""))


def _ident_list_lines(idents: Any, indent: str) -> Iterator[str]:
    idents = NodeList(idents)
    yield pretty_print_node(idents, indent)
    for index, ident in enumerate(idents):
        yield f"{indent}  Ident[{index}]: {ident}"


def _tree_lines(node: Any, indent: str) -> Iterator[str]:
    yield pretty_print_node(node, indent)
    child = indent + "    "
    if isinstance(node, Assign):
        yield indent + "  Dest:"
        yield from _ident_list_lines(node.dest, child)
        yield indent + "  Value:"
        yield from _tree_lines(node.value, child)
    elif isinstance(node, Expr):
        yield indent + "  Input:"
        yield from _tree_lines(NodeList(node.input or ()), child)
        yield indent + "  Pipeline:"
        for index, cmd in enumerate(node.pipeline):
            yield f"{indent}  Command[{index}]:"
            yield from _tree_lines(cmd, child)
    elif isinstance(node, NodeList):
        for index, element in enumerate(node):
            yield f"{indent}  Item[{index}]:"
            yield from _tree_lines(element, child)
    elif isinstance(node, SubExpr):
        yield indent + "  Params:"
        yield from _ident_list_lines(node.params, child)
        yield indent + "  Body:"
        yield from _tree_lines(node.body, child)


def print_node_tree(node: Any, indent: str = "") -> None:
    """Print *node* and its children, one per line, indented by depth."""
    for line in _tree_lines(node, indent):
        print(line)