"""Token types and the items the lexer produces."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum


class ItemType(IntEnum):
    """Kinds of lexical items; commands sort after ``COMMAND``."""

    ERROR = 0
    EOF = 1

    IDENTIFIER = 2
    VARIABLE = 3

    # predefined identifiers
    SELF_STAR = 4
    STREAM = 5
    UNDERSCORE = 6

    # number operators
    DIV = 7
    MINUS = 8
    MULT = 9
    PLUS = 10

    # stream operators
    ASSIGN = 11
    DECLARE = 12
    PIPE = 13

    # list operators
    CONCAT_OP = 14

    # literals
    NUMBER = 15
    STRING = 16
    BOOL = 17

    # delimiters
    COMMA = 18
    LEFT_BRACE = 19
    LEFT_PAREN = 20
    NEWLINE = 21
    RIGHT_BRACE = 22
    RIGHT_PAREN = 23

    COMMENT = 24

    # commands
    COMMAND = 25
    BRIGHTNESS = 26
    CONCAT = 27
    CONTRAST = 28
    CROSSFADE = 29
    CUT = 30
    EXPORT = 31
    FADE = 32
    HUE = 33
    MAP = 34
    OPEN = 35
    PITCH = 36
    SATURATION = 37
    SPEED = 38
    TRACK_LINE = 39
    VOLUME = 40


GLOBAL_STREAM = "stream"
SELF_STAR = "*"

RUNE_KEYWORDS: dict[str, ItemType] = {
    "(": ItemType.LEFT_PAREN,
    ")": ItemType.RIGHT_PAREN,
    ",": ItemType.COMMA,
    "[": ItemType.LEFT_BRACE,
    "]": ItemType.RIGHT_BRACE,
    "\n": ItemType.NEWLINE,
    "_": ItemType.UNDERSCORE,
    "*": ItemType.MULT,
    "+": ItemType.PLUS,
    "-": ItemType.MINUS,
    "/": ItemType.DIV,
    "=": ItemType.ASSIGN,
}

MATH_SYMBOLS: dict[str, ItemType] = {
    "*": ItemType.MULT,
    "+": ItemType.PLUS,
    "-": ItemType.MINUS,
    "/": ItemType.DIV,
    "(": ItemType.LEFT_PAREN,
    ")": ItemType.RIGHT_PAREN,
}

STR_OPERATORS: dict[str, ItemType] = {
    ":=": ItemType.DECLARE,
    "|>": ItemType.PIPE,
    "..": ItemType.CONCAT_OP,
}

COMMANDS: dict[str, ItemType] = {
    "brightness": ItemType.BRIGHTNESS,
    "concat": ItemType.CONCAT,
    "contrast": ItemType.CONTRAST,
    "crossfade": ItemType.CROSSFADE,
    "cut": ItemType.CUT,
    "export": ItemType.EXPORT,
    "fade": ItemType.FADE,
    "hue": ItemType.HUE,
    "map": ItemType.MAP,
    "open": ItemType.OPEN,
    "pitch": ItemType.PITCH,
    "saturation": ItemType.SATURATION,
    "speed": ItemType.SPEED,
    "trackline": ItemType.TRACK_LINE,
    "volume": ItemType.VOLUME,
}


def is_command(word: str) -> bool:
    """Return True if *word* names a built-in command."""
    return word in COMMANDS


def is_str_operator(word: str) -> bool:
    """Return True if *word* is a two-character operator."""
    return word in STR_OPERATORS


def item_type_name(typ: ItemType) -> str:
    """Human-readable name of an item type."""
    if typ == ItemType.EOF:
        return "EOF"
    if typ == ItemType.ERROR:
        return "error"
    if typ == ItemType.IDENTIFIER:
        return "identifier"
    if typ in (ItemType.STRING, ItemType.NUMBER, ItemType.BOOL):
        return "literal"
    if typ == ItemType.COMMENT:
        return "comment"
    if typ == ItemType.NEWLINE:
        return "newline"
    for table in (COMMANDS, RUNE_KEYWORDS, STR_OPERATORS):
        for text, candidate in table.items():
            if candidate == typ:
                return text
    return "unknown"


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


@dataclass(frozen=True)
class Item:
    """A lexical item: its type, text, offset and line (both from zero)."""

    typ: ItemType
    val: str
    pos: int = 0
    line: int = 0

    def __str__(self) -> str:
        if self.typ == ItemType.EOF:
            return "EOF"
        if self.typ == ItemType.ERROR:
            return self.val
        if self.typ > ItemType.COMMAND:
            return f"cmd: {self.val}"
        if len(self.val) > 10:
            return f"{_quote(self.val[:10])}..."
        return _quote(self.val)