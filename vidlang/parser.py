"""Recursive-descent parser that turns script text into syntax tree nodes."""

from __future__ import annotations

from typing import Any, Iterator

from .lexer import Lexer
from .nodes import (
    Assign,
    AstError,
    Command,
    Expr,
    ExprMath,
    Ident,
    LiteralBool,
    LiteralNumber,
    LiteralString,
    NodeList,
    OpType,
    Pipeline,
    SubExpr,
    ValueType,
)
from .tokens import MATH_SYMBOLS, Item, ItemType

# What the parser sees once the lexer has nothing more to give.
_CLOSED = Item(ItemType.ERROR, "", 0, 0)

_VALID_ARGS = frozenset(
    {
        ItemType.LEFT_BRACE,
        ItemType.IDENTIFIER,
        ItemType.STREAM,
        ItemType.NUMBER,
        ItemType.STRING,
        ItemType.BOOL,
    }
)

_VALID_VALUES = _VALID_ARGS | {ItemType.SELF_STAR}


class AssertionFailure(Exception):
    """An internal invariant of the parser did not hold."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"Assertion Failed: {self.message}"


def _check(condition: bool, message: str) -> None:
    if not condition:
        raise AssertionFailure(message)


def _to_number(text: str) -> LiteralNumber:
    try:
        return LiteralNumber(float(text))
    except ValueError:
        raise AssertionFailure(
            f"lexer must provide a valid number, failed to parse number {text}"
        ) from None


class Parser:
    """Iterates over the top-level nodes of a script.

    The parser starts one item ahead of the lexer, so the first item of the
    text is consumed without being parsed. Errors are raised as
    :class:`AstError` (lexical or syntax) or :class:`AssertionFailure`.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self._items: Iterator[Item] = iter(())
        self._curr = _CLOSED
        self._peek = _CLOSED
        self._peek2 = _CLOSED

    def __iter__(self) -> Iterator[Any]:
        self._items = iter(Lexer(self.text))
        self._curr = self._pull()
        self._peek = self._pull()
        self._peek2 = self._pull()
        while True:
            self._advance()
            typ = self._curr.typ
            if typ == ItemType.EOF:
                return
            if typ == ItemType.IDENTIFIER:
                if self._peek.typ in (ItemType.ASSIGN, ItemType.DECLARE, ItemType.COMMA):
                    yield self._parse_assignment()
                elif self._peek.typ == ItemType.PIPE:
                    yield self._parse_assignable()
            elif typ in (ItemType.LEFT_BRACE, ItemType.NUMBER, ItemType.STRING, ItemType.BOOL):
                yield self._parse_assignable()
            elif typ > ItemType.COMMAND:
                yield self._parse_assignable()

    # item handling

    def _pull(self) -> Item:
        return next(self._items, _CLOSED)

    def _advance(self) -> None:
        if self._curr.typ == ItemType.ERROR:
            raise AstError(
                "lexical error: " + self._curr.val, self._curr.line, self._curr.pos
            )
        self._curr = self._peek
        self._peek = self._peek2
        self._peek2 = self._pull()

    def _error(self, message: str) -> None:
        raise AstError("syntax error: " + message, self._curr.line, self._curr.pos)

    # grammar

    def _parse_command(self) -> Command:
        name = self._curr.val
        args: list = []
        while self._peek.typ in _VALID_ARGS and self._peek.typ != ItemType.NEWLINE:
            self._advance()
            _check(
                self._curr.typ in _VALID_ARGS,
                f"parseCommand's loop should be entered with a valid arg, but got {self._curr}",
            )
            args.append(self._parse_value())
        return Command(name, args)

    def _parse_value(self) -> Any:
        _check(
            self._curr.typ in _VALID_VALUES,
            "parseValue should be invoked with currItem at a simple value, "
            f"list or subexpression got {self._curr}",
        )
        if self._curr.typ == ItemType.LEFT_BRACE:
            node: Any = self._parse_simple_value_list()
            _check(
                self._curr.typ == ItemType.RIGHT_BRACE,
                "assumed that the list was terminated successfully by a right brace, "
                f"but got {self._curr} -> {self._peek}",
            )
            if self._peek.typ == ItemType.LEFT_PAREN:
                node = self._parse_sub_expr(node)
            return node
        math_follows = self._peek.typ == MATH_SYMBOLS.get(self._peek.val, ItemType.ERROR)
        if self._curr.typ in (ItemType.NUMBER, ItemType.LEFT_PAREN) and math_follows:
            return self._parse_term()
        return self._parse_simple_value()

    def _parse_assignable(self) -> Any:
        _check(
            self._curr.typ in _VALID_VALUES or self._curr.typ > ItemType.COMMAND,
            "parseValue should be invoked with currItem at a simple value, list, "
            f"subexpression or command, got {self._curr}",
        )
        if self._curr.typ not in _VALID_VALUES:
            return Expr(input=None, pipeline=self._parse_pipeline())

        node = self._parse_value()
        if self._peek.typ == ItemType.NEWLINE and self._peek2.typ == ItemType.PIPE:
            self._advance()
        if self._peek.typ == ItemType.PIPE:
            self._advance()
        if self._curr.typ == ItemType.PIPE:
            self._advance()
            if node.value_type != ValueType.LIST:
                node = NodeList([node])
            node = Expr(input=node, pipeline=self._parse_pipeline())
        return node

    def _parse_sub_expr_body(self) -> Any:
        _check(
            self._curr.typ == ItemType.LEFT_PAREN,
            "parseSubExprBody should be invoked with currItem at left paren "
            f"(the beginning of its body), got {self._curr}",
        )
        self._advance()
        node = self._parse_assignable()
        if self._curr.typ != ItemType.RIGHT_PAREN:
            self._advance()
        if self._curr.typ != ItemType.RIGHT_PAREN:
            self._error(
                "expected right paren at the end of subexpression body, "
                f"got {self._curr} -> {self._peek}"
            )
        return node

    def _parse_sub_expr(self, value: Any) -> SubExpr:
        _check(
            value.value_type == ValueType.LIST,
            f"parseSubExpr's argument is assumed to be a list, but got {self._curr}",
        )
        params = NodeList()
        for arg in value:
            if arg.value_type != ValueType.IDENTIFIER:
                self._error(
                    "a subexpression's argument list must be a list of identifiers, "
                    f"but got {arg}"
                )
            params.append(arg)
        self._advance()
        body = self._parse_sub_expr_body()
        return SubExpr(body=body, params=params)

    def _parse_pipeline(self) -> Pipeline:
        pipeline = Pipeline()
        _check(
            self._curr.typ > ItemType.COMMAND,
            f"parsePipeline should be invoked with currItem at a command, got {self._curr}",
        )
        while self._curr.typ > ItemType.COMMAND:
            pipeline.append(self._parse_command())
            if self._peek.typ == ItemType.NEWLINE and self._peek2.typ == ItemType.PIPE:
                self._advance()
            if self._peek.typ != ItemType.PIPE:
                break
            self._advance()
            if self._peek.typ < ItemType.COMMAND:
                self._error(f"expected command after pipe, got {self._peek}")
            self._advance()
        return pipeline

    def _parse_simple_value_list(self) -> NodeList:
        values = NodeList()
        _check(
            self._curr.typ == ItemType.LEFT_BRACE,
            "parseSimpleValueList should be invoked with currItem at left brace, "
            f"got {self._curr}",
        )
        while self._curr.typ != ItemType.RIGHT_BRACE:
            self._advance()
            values.append(self._parse_simple_value())
            self._advance()
            if self._curr.typ != ItemType.COMMA:
                if self._curr.typ != ItemType.RIGHT_BRACE:
                    self._error(
                        "list not terminated properly, expected comma or right brace, "
                        f"got {self._curr}"
                    )
                break
        _check(
            self._curr.typ == ItemType.RIGHT_BRACE,
            "it was assumed that the list was terminated by a right brace "
            f"but got {self._curr} -> {self._peek}",
        )
        return values

    def _parse_simple_value(self) -> Any:
        _check(
            self._curr.typ in _VALID_VALUES,
            f"parseSimpleValue should be invoked with a valid value, but got {self._curr}",
        )
        typ = self._curr.typ
        if typ in (ItemType.IDENTIFIER, ItemType.SELF_STAR, ItemType.STREAM):
            return Ident(self._curr.val)
        if typ == ItemType.NUMBER:
            return _to_number(self._curr.val)
        if typ == ItemType.BOOL:
            return LiteralBool(self._curr.val == "true")
        if typ == ItemType.STRING:
            return LiteralString(self._curr.val)
        self._error(
            f"parseSimpleValue should be invoked with a valid value, but got {self._curr}"
        )
        return None

    def _parse_assignment(self) -> Assign:
        dest = self._parse_ident_list()
        define = False
        if self._curr.typ == ItemType.DECLARE:
            define = True
        elif self._curr.typ != ItemType.ASSIGN:
            self._error(f"expected assignment or declaration, got {self._peek}")
        self._advance()
        while self._curr.typ == ItemType.NEWLINE:
            self._advance()
        value = self._parse_assignable()
        return Assign(dest=dest, value=value, define=define)

    def _parse_ident_list(self) -> NodeList:
        idents = NodeList()
        while self._curr.typ == ItemType.IDENTIFIER:
            idents.append(Ident(self._curr.val))
            self._advance()
            if self._curr.typ == ItemType.COMMA:
                self._advance()
        return idents

    def _parse_term(self) -> Any:
        node = self._parse_factor()
        while self._curr.typ in (ItemType.PLUS, ItemType.MINUS):
            op = OpType(int(self._curr.typ))
            self._advance()
            node = ExprMath(left=node, op=op, right=self._parse_factor())
        return node

    def _parse_factor(self) -> Any:
        node = self._parse_primary()
        while self._curr.typ in (ItemType.MULT, ItemType.DIV):
            op = OpType(int(self._curr.typ))
            self._advance()
            node = ExprMath(left=node, op=op, right=self._parse_primary())
        return node

    def _parse_primary(self) -> Any:
        typ = self._curr.typ
        if typ == ItemType.IDENTIFIER:
            node: Any = Ident(self._curr.val)
            self._advance()
            return node
        if typ == ItemType.NUMBER:
            node = _to_number(self._curr.val)
            self._advance()
            return node
        if typ == ItemType.LEFT_PAREN:
            self._advance()
            node = self._parse_term()
            if self._curr.typ != ItemType.RIGHT_PAREN:
                self._error("missing closing parenthesis")
            self._advance()
            return node
        self._error(f"unexpected token in expression {self._curr}")
        return None


def parse(text: str) -> Parser:
    """Return a parser whose iteration yields the top-level nodes of *text*."""
    return Parser(text)