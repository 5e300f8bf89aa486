import pytest

from arkfront.errors import TokenizingError
from arkfront.lexer import Lexer, Token, TokenType, guess_type


def lex(code):
    lexer = Lexer(0)
    lexer.feed(code)
    return lexer.tokens()


def pairs(code):
    return [(t.type, t.token) for t in lex(code)]


def test_simple_form():
    assert pairs("(let a 1)") == [
        (TokenType.GROUPING, "("),
        (TokenType.KEYWORD, "let"),
        (TokenType.IDENTIFIER, "a"),
        (TokenType.NUMBER, "1"),
        (TokenType.GROUPING, ")"),
    ]


def test_positions_after_newline():
    tokens = lex("(a\n b)")
    b = next(t for t in tokens if t.token == "b")
    assert (b.line, b.col) == (1, 1)
    assert tokens[0] == Token(TokenType.GROUPING, "(", 0, 0)


def test_decimal_number_is_one_token():
    assert pairs("3.14") == [(TokenType.NUMBER, "3.14")]


def test_string_keeps_quotes():
    assert pairs('"hello world"') == [(TokenType.STRING, '"hello world"')]


def test_string_escapes():
    assert lex('"a\\nb\\tc"')[0].token == '"a\nb\tc"'


def test_escaped_quote_inside_string():
    assert lex('"say \\"hi\\""')[0].token == '"say "hi""'


def test_unicode_escape_short():
    assert lex('"\\u00e9"')[0].token == '"\u00e9"'


def test_unicode_escape_long():
    assert lex('"\\U0001F600"')[0].token == '"\U0001F600"'


def test_empty_escape_raises():
    with pytest.raises(TokenizingError, match="empty control character"):
        lex('"\\ x"')


def test_invalid_unicode_escape_raises():
    with pytest.raises(TokenizingError, match="invalid escape sequence"):
        lex('"\\uzzzz"')


def test_unterminated_string_raises():
    with pytest.raises(TokenizingError, match="invalid token"):
        lex('"abc')


def test_comments_are_dropped():
    assert pairs("# hello\n(a)") == [
        (TokenType.GROUPING, "("),
        (TokenType.IDENTIFIER, "a"),
        (TokenType.GROUPING, ")"),
    ]


def test_capture_strips_ampersand():
    assert pairs("&x") == [(TokenType.CAPTURE, "x")]


def test_getfield_split():
    assert pairs("a.b") == [(TokenType.IDENTIFIER, "a"), (TokenType.GET_FIELD, "b")]


def test_spread():
    assert pairs("...args") == [(TokenType.SPREAD, "...args")]


def test_quote_shorthand():
    assert pairs("'a") == [(TokenType.SHORTHAND, "'"), (TokenType.IDENTIFIER, "a")]


def test_macro_shorthand_and_not_equal():
    assert pairs("!{a}")[:2] == [(TokenType.SHORTHAND, "!"), (TokenType.GROUPING, "{")]
    assert pairs("(!= a b)")[1] == (TokenType.OPERATOR, "!=")


def test_mismatch_raises_with_position():
    with pytest.raises(TokenizingError) as info:
        lex("(foo 3x)")
    assert info.value.match == "3x"
    assert "invalid token '3x'" in str(info.value)


def test_feed_accumulates():
    lexer = Lexer(0)
    lexer.feed("a")
    lexer.feed("b")
    assert [t.token for t in lexer.tokens()] == ["a", "b"]


@pytest.mark.parametrize(
    "text,expected",
    [
        ("-5", TokenType.NUMBER),
        (".5", TokenType.NUMBER),
        ("+", TokenType.OPERATOR),
        ("empty?", TokenType.OPERATOR),
        ("while", TokenType.KEYWORD),
        ("foo?", TokenType.IDENTIFIER),
        ("&a", TokenType.CAPTURE),
        (".field", TokenType.GET_FIELD),
        ("...rest", TokenType.SPREAD),
        ("# note", TokenType.COMMENT),
        ("9abc", TokenType.MISMATCH),
        ("&", TokenType.MISMATCH),
        ("", TokenType.MISMATCH),
    ],
)
def test_guess_type(text, expected):
    assert guess_type(text) is expected