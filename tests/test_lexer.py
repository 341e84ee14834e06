from vidlang.lexer import Lexer, lex
from vidlang.tokens import ItemType


def _items(text):
    return list(lex(text))


def _types(text):
    return [item.typ for item in lex(text)]


def test_declaration_with_command_and_string():
    items = _items('a := open "x.mp4"\n')
    assert [i.typ for i in items[:5]] == [
        ItemType.IDENTIFIER,
        ItemType.DECLARE,
        ItemType.OPEN,
        ItemType.STRING,
        ItemType.NEWLINE,
    ]
    assert [i.val for i in items[:4]] == ["a", ":=", "open", '"x.mp4"']
    assert items[-1].typ == ItemType.EOF


def test_ends_with_single_eof():
    types = _types("x = 1\n")
    assert types[-1] == ItemType.EOF
    assert types.count(ItemType.EOF) == 1


def test_pipe_operator():
    types = _types('open "a" |> export\n')
    assert types[:4] == [ItemType.OPEN, ItemType.STRING, ItemType.PIPE, ItemType.EXPORT]


def test_star_after_assign_is_self_star():
    types = _types("x = *\n")
    assert types[:3] == [ItemType.IDENTIFIER, ItemType.ASSIGN, ItemType.SELF_STAR]


def test_star_in_arithmetic_is_mult():
    types = _types("2 * 3\n")
    assert types[:3] == [ItemType.NUMBER, ItemType.MULT, ItemType.NUMBER]


def test_right_paren_turns_self_star_off():
    types = _types("[a](b) *\n")
    assert ItemType.MULT in types
    assert ItemType.SELF_STAR not in types


def test_decimal_number():
    items = _items("x = 1.5\n")
    numbers = [i for i in items if i.typ == ItemType.NUMBER]
    assert [n.val for n in numbers] == ["1.5"]


def test_stream_keyword():
    items = _items("stream |> export\n")
    assert items[0].typ == ItemType.STREAM
    assert items[0].val == "stream"


def test_delimiters():
    types = _types("[a, b]\n")
    assert types[:5] == [
        ItemType.LEFT_BRACE,
        ItemType.IDENTIFIER,
        ItemType.COMMA,
        ItemType.IDENTIFIER,
        ItemType.RIGHT_BRACE,
    ]


def test_positions_and_lines():
    items = _items("a\nbc\n")
    a, newline, bc = items[:3]
    assert (a.pos, a.line) == (0, 0)
    assert newline.line == 0
    assert bc.val == "bc"
    assert (bc.pos, bc.line) == (2, 1)


def test_string_with_escaped_quote():
    items = _items('"a\\"b" \n')
    assert items[0].typ == ItemType.STRING
    assert items[0].val == '"a\\"b"'


def test_unterminated_string_is_error():
    items = _items('"abc')
    assert items[-1].typ == ItemType.ERROR
    assert items[-1].val == "unterminated string"


def test_unterminated_escape_is_error():
    items = _items('"abc\\')
    assert items[-1].typ == ItemType.ERROR
    assert items[-1].val == "unterminated string escape"


def test_unexpected_character_stops_scan():
    items = _items("a ! b\n")
    assert items[-1].typ == ItemType.ERROR
    assert items[-1].val.startswith("unexpected character U+0021")
    assert items[-1].pos == 2
    assert all(i.typ != ItemType.EOF for i in items)


def test_comment_drops_leading_hashes():
    items = _items("## note\nx\n")
    assert items[0].typ == ItemType.COMMENT
    assert "#" not in items[0].val
    assert "note" in items[0].val
    assert items[1].typ == ItemType.IDENTIFIER


def test_comment_at_end_of_input():
    items = _items("# tail")
    assert [i.typ for i in items] == [ItemType.COMMENT, ItemType.EOF]


def test_empty_input():
    assert _types("") == [ItemType.EOF]


def test_lexer_can_be_iterated_twice():
    lexer = Lexer('v := open "a.mp4" |> export v "b.mp4"\n')
    first = list(lexer)
    second = list(lexer)
    assert [i.val for i in first[:5]] == ["v", ":=", "open", '"a.mp4"', "|>"]
    assert [i.typ for i in second[:5]] == [
        ItemType.IDENTIFIER,
        ItemType.DECLARE,
        ItemType.OPEN,
        ItemType.STRING,
        ItemType.PIPE,
    ]
    assert [(i.typ, i.val, i.pos, i.line) for i in first] == [
        (i.typ, i.val, i.pos, i.line) for i in second
    ]


def test_non_ascii_letters_form_identifiers():
    items = _items("café = 1\n")
    assert items[0].typ == ItemType.IDENTIFIER
    assert items[0].val == "café"