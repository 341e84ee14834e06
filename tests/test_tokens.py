import pytest

from vidlang.tokens import (
    COMMANDS,
    GLOBAL_STREAM,
    Item,
    ItemType,
    RUNE_KEYWORDS,
    STR_OPERATORS,
    is_command,
    is_str_operator,
    item_type_name,
)


def test_eof_item_string():
    assert str(Item(ItemType.EOF, "")) == "EOF"


def test_error_item_string_is_message():
    assert str(Item(ItemType.ERROR, "unterminated string")) == "unterminated string"


def test_command_item_string():
    assert str(Item(ItemType.OPEN, "open")) == "cmd: open"


def test_short_item_is_quoted():
    text = str(Item(ItemType.IDENTIFIER, "clip"))
    assert text.startswith('"') and text.endswith('"')
    assert text[1:-1] == "clip"


def test_long_item_is_truncated():
    value = "abcdefghijklmnopqrst"
    text = str(Item(ItemType.IDENTIFIER, value))
    assert text.endswith("...")
    assert text[1:11] == value[:10]


def test_newline_item_is_escaped():
    assert "\n" not in str(Item(ItemType.NEWLINE, "\n"))


@pytest.mark.parametrize("word", sorted(COMMANDS))
def test_every_command_is_recognised(word):
    assert is_command(word)
    assert item_type_name(COMMANDS[word]) == word


@pytest.mark.parametrize("word", ["foo", GLOBAL_STREAM, "", "Open"])
def test_non_commands(word):
    assert not is_command(word)


def test_str_operators():
    assert is_str_operator(":=")
    assert is_str_operator("|>")
    assert is_str_operator("..")
    assert not is_str_operator("=")


@pytest.mark.parametrize(
    "typ,name",
    [
        (ItemType.EOF, "EOF"),
        (ItemType.ERROR, "error"),
        (ItemType.IDENTIFIER, "identifier"),
        (ItemType.NUMBER, "literal"),
        (ItemType.STRING, "literal"),
        (ItemType.BOOL, "literal"),
        (ItemType.COMMENT, "comment"),
        (ItemType.NEWLINE, "newline"),
        (ItemType.PIPE, "|>"),
        (ItemType.DECLARE, ":="),
        (ItemType.MULT, "*"),
        (ItemType.VARIABLE, "unknown"),
    ],
)
def test_item_type_names(typ, name):
    assert item_type_name(typ) == name


def test_rune_keywords_round_trip_names():
    for text, typ in RUNE_KEYWORDS.items():
        if typ != ItemType.NEWLINE:
            assert item_type_name(typ) == text


def test_operators_round_trip_names():
    for text, typ in STR_OPERATORS.items():
        assert item_type_name(typ) == text


def test_commands_sort_after_delimiter():
    assert all(typ > ItemType.COMMAND for typ in COMMANDS.values())
    assert all(typ < ItemType.COMMAND for typ in STR_OPERATORS.values())