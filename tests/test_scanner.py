from pylox.scanner import scan
from pylox.types import TokenType


def types_of(source):
    tokens, errors = scan(source)
    assert errors == []
    return [t.type for t in tokens]


def test_punctuation_and_operators():
    assert types_of("(){},.-+;*/ ! != = == < <= > >= ? :") == [
        TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN,
        TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
        TokenType.COMMA, TokenType.DOT, TokenType.MINUS, TokenType.PLUS,
        TokenType.SEMICOLON, TokenType.STAR, TokenType.SLASH,
        TokenType.BANG, TokenType.BANG_EQUAL,
        TokenType.EQUAL, TokenType.EQUAL_EQUAL,
        TokenType.LESS, TokenType.LESS_EQUAL,
        TokenType.GREATER, TokenType.GREATER_EQUAL,
        TokenType.QUESTION, TokenType.COLON,
        TokenType.EOF,
    ]


def test_keywords_vs_identifiers():
    tokens, _ = scan("class classy orchid or _x1 nil true false")
    assert [(t.type, t.lexeme) for t in tokens[:-1]] == [
        (TokenType.CLASS, "class"),
        (TokenType.IDENTIFIER, "classy"),
        (TokenType.IDENTIFIER, "orchid"),
        (TokenType.OR, "or"),
        (TokenType.IDENTIFIER, "_x1"),
        (TokenType.NIL, "nil"),
        (TokenType.TRUE, "true"),
        (TokenType.FALSE, "false"),
    ]
    assert tokens[5].literal is None
    assert tokens[6].literal is True
    assert tokens[7].literal is False


def test_numbers():
    tokens, _ = scan("123 45.67 8.")
    assert tokens[0].literal == 123.0
    assert tokens[1].literal == 45.67
    # a trailing dot is not part of the number
    assert [t.type for t in tokens[2:]] == [TokenType.NUMBER, TokenType.DOT, TokenType.EOF]
    assert tokens[2].literal == 8.0


def test_leading_dot_is_not_a_number():
    assert types_of(".5") == [TokenType.DOT, TokenType.NUMBER, TokenType.EOF]


def test_multiline_string_tracks_lines():
    tokens, errors = scan('"one\ntwo"\nx')
    assert errors == []
    assert tokens[0].type == TokenType.STRING
    assert tokens[0].literal == "one\ntwo"
    assert tokens[1].lexeme == "x"
    assert tokens[1].line == 3


def test_comments_are_discarded():
    source = """
    // line comment
    a /* block
    comment */ b
    /* outer /* nested */ still comment */ c
    """
    tokens, errors = scan(source)
    assert errors == []
    assert [t.lexeme for t in tokens[:-1]] == ["a", "b", "c"]
    assert tokens[2].line == 5


def test_unterminated_string_reports_start_line():
    tokens, errors = scan('var a = 1;\n"never\nclosed')
    assert len(errors) == 1
    assert errors[0].line == 2
    assert errors[0].message == "Unterminated string."
    assert tokens[-1].type == TokenType.EOF


def test_unexpected_characters_are_all_reported():
    tokens, errors = scan("a @ b\n# c")
    assert [e.message for e in errors] == ["Unexpected character."] * 2
    assert [e.line for e in errors] == [1, 2]
    assert [t.lexeme for t in tokens[:-1]] == ["a", "b", "c"]


def test_eof_is_always_last():
    tokens, _ = scan("")
    assert len(tokens) == 1
    assert tokens[0].type == TokenType.EOF
    assert tokens[0].line == 1
