"""State-machine lexer for the scripting language."""

from __future__ import annotations

import unicodedata
from collections import deque
from typing import Callable, Iterator, Optional

from .tokens import (
    COMMANDS,
    GLOBAL_STREAM,
    RUNE_KEYWORDS,
    STR_OPERATORS,
    Item,
    ItemType,
)

_State = Optional[Callable[[], "Optional[_State]"]]


def _is_digit(r: str | None) -> bool:
    return r is not None and unicodedata.category(r) == "Nd"


def _is_alphanumeric(r: str | None) -> bool:
    return r is not None and (unicodedata.category(r).startswith("L") or _is_digit(r))


def _is_space(r: str | None) -> bool:
    return r in (" ", "\t", "\r")


class Lexer:
    """Scans script text into a stream of :class:`Item` values.

    Positions are character offsets into the text; lines count from zero.
    Scanning stops after an ``EOF`` or ``ERROR`` item.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self._reset()

    def _reset(self) -> None:
        self._input = self.text
        self._start = 0
        self._pos = 0
        self._start_line = 0
        self._line = 0
        self._allow_self_star = False
        self._reached_eof = False
        self._pending: deque[Item] = deque()

    def __iter__(self) -> Iterator[Item]:
        self._reset()
        state: _State = self._lex_script
        while state is not None:
            state = state()
            while self._pending:
                yield self._pending.popleft()

    # primitives

    def _emit(self, typ: ItemType) -> None:
        self._pending.append(
            Item(typ, self._input[self._start:self._pos], self._start, self._start_line)
        )
        self._start = self._pos
        self._start_line = self._line

    def _errorf(self, message: str) -> None:
        self._pending.append(Item(ItemType.ERROR, message, self._start, self._start_line))
        self._start = 0
        self._pos = 0
        self._input = ""
        return None

    def _next(self) -> str | None:
        if self._pos >= len(self._input):
            self._reached_eof = True
            return None
        r = self._input[self._pos]
        self._pos += 1
        if r == "\n":
            self._line += 1
        return r

    def _backup(self) -> None:
        if self._pos > 0:
            self._pos -= 1
            if self._input[self._pos] == "\n":
                self._line -= 1

    def _peek(self) -> str | None:
        r = self._next()
        self._backup()
        return r

    def _accept(self, valid: str) -> bool:
        r = self._next()
        if r is not None and r in valid:
            return True
        self._backup()
        return False

    def _accept_run(self, valid: str) -> None:
        while True:
            r = self._next()
            if r is None or r not in valid:
                break
        self._backup()

    def _ignore(self) -> None:
        self._line += self._input[self._start:self._pos].count("\n")
        self._start = self._pos
        self._start_line = self._line

    # states

    def _lex_script(self) -> _State:
        if self._reached_eof:
            self._emit(ItemType.EOF)
            return None

        while _is_space(self._peek()):
            self._next()
            self._ignore()

        r = self._next()
        if r is None:
            self._emit(ItemType.EOF)
            return None
        if r == "#":
            return self._lex_comment
        if r == '"':
            return self._lex_string
        if _is_digit(r):
            self._backup()
            return self._lex_number
        if _is_alphanumeric(r):
            self._backup()
            return self._lex_identifier

        op = RUNE_KEYWORDS.get(r)
        if op is not None:
            if op == ItemType.MULT and self._allow_self_star:
                op = ItemType.SELF_STAR
            if op in (ItemType.ASSIGN, ItemType.LEFT_BRACE):
                self._allow_self_star = True
            if op == ItemType.RIGHT_PAREN:
                self._allow_self_star = False
            self._emit(op)
            return self._lex_script

        p = self._next()
        if p is None:
            self._emit(ItemType.EOF)
            return None
        op = STR_OPERATORS.get(r + p)
        if op is not None:
            self._emit(op)
            if op == ItemType.DECLARE:
                self._allow_self_star = True
            if op == ItemType.PIPE:
                self._allow_self_star = False
            return self._lex_script

        shown = f" '{r}'" if r.isprintable() else ""
        return self._errorf(f"unexpected character U+{ord(r):04X}{shown}")

    def _lex_comment(self) -> _State:
        while self._peek() == "#":
            self._next()
            self._ignore()
        while True:
            c = self._next()
            if c == "\n":
                self._emit(ItemType.COMMENT)
                return self._lex_script
            if c is None:
                self._emit(ItemType.COMMENT)
                self._emit(ItemType.EOF)
                return None

    def _lex_identifier(self) -> _State:
        r = self._next()
        while _is_alphanumeric(r):
            r = self._next()
        self._backup()

        word = self._input[self._start:self._pos]
        command = COMMANDS.get(word)
        if command is not None:
            self._emit(command)
            return self._lex_script

        self._emit(ItemType.STREAM if word == GLOBAL_STREAM else ItemType.IDENTIFIER)
        if r is None:
            self._emit(ItemType.EOF)
            return None
        return self._lex_script

    def _lex_number(self) -> _State:
        digits = "0123456789"
        self._accept("+-")
        self._accept_run(digits)
        if self._accept("."):
            self._accept_run(digits)
        self._emit(ItemType.NUMBER)
        return self._lex_script

    def _lex_string(self) -> _State:
        while True:
            r = self._next()
            if r is None:
                return self._errorf("unterminated string")
            if r == "\\":
                if self._next() is None:
                    return self._errorf("unterminated string escape")
                continue
            if r == '"':
                break
        self._emit(ItemType.STRING)
        return self._lex_script


def lex(text: str) -> Iterator[Item]:
    """Return an iterator over the items of *text*."""
    return iter(Lexer(text))