import pytest

from calclang.tokenizer import Token, TokenType, strip_whitespace, tokenize, untokenize


def ident(name: str) -> Token:
    return Token(TokenType.IDENTIFIER, name)


def integer(lexeme: str) -> Token:
    return Token(TokenType.INTEGER, lexeme)


WS = Token(TokenType.WHITESPACE, " ")


@pytest.mark.parametrize(
    "code, expected_tokens",
    [
        pytest.param("", []),
        pytest.param("f", [ident("f")]),
        pytest.param("123", [integer("123")]),
        pytest.param("-13", [Token(TokenType.MINUS, "-"), integer("13")]),
        pytest.param(".123", [Token(TokenType.FLOAT, ".123")]),
        pytest.param("x_1 _y", [ident("x_1"), WS, ident("_y")]),
        pytest.param("1a", [integer("1"), ident("a")]),
        pytest.param("a1.5", [ident("a1"), Token(TokenType.FLOAT, ".5")]),
        pytest.param("a$b", [ident("a"), Token(TokenType.UNKNOWN, "$"), ident("b")]),
        pytest.param("é", [Token(TokenType.UNKNOWN, "é")]),
        pytest.param(
            "1+2-3*4/5^6",
            [
                integer("1"),
                Token(TokenType.PLUS, "+"),
                integer("2"),
                Token(TokenType.MINUS, "-"),
                integer("3"),
                Token(TokenType.TIMES, "*"),
                integer("4"),
                Token(TokenType.DIV, "/"),
                integer("5"),
                Token(TokenType.POW, "^"),
                integer("6"),
            ],
        ),
        pytest.param(
            "f({5},[3])",
            [
                ident("f"),
                Token(TokenType.PAREN_OPEN, "("),
                Token(TokenType.CURLY_OPEN, "{"),
                integer("5"),
                Token(TokenType.CURLY_CLOSE, "}"),
                Token(TokenType.COMMA, ","),
                Token(TokenType.BRACKET_OPEN, "["),
                integer("3"),
                Token(TokenType.BRACKET_CLOSE, "]"),
                Token(TokenType.PAREN_CLOSE, ")"),
            ],
        ),
        pytest.param(
            "f ( 5 , 3 )",
            [
                ident("f"),
                WS,
                Token(TokenType.PAREN_OPEN, "("),
                WS,
                integer("5"),
                WS,
                Token(TokenType.COMMA, ","),
                WS,
                integer("3"),
                WS,
                Token(TokenType.PAREN_CLOSE, ")"),
            ],
        ),
        pytest.param(
            "1  \t\n\r",
            [
                integer("1"),
                WS,
                WS,
                Token(TokenType.WHITESPACE, "\t"),
                Token(TokenType.WHITESPACE, "\n"),
                Token(TokenType.WHITESPACE, "\r"),
            ],
        ),
    ],
)
def test_tokenize(code: str, expected_tokens: list[Token]) -> None:
    assert tokenize(code) == expected_tokens


@pytest.mark.parametrize(
    "code, expected_value",
    [
        pytest.param("42", 42),
        pytest.param("007", 7),
        pytest.param("3.25", 3.25),
        pytest.param(".5", 0.5),
        pytest.param("5.", 5.0),
        pytest.param(".", 0.0),
        pytest.param("1.2.3", 12.3),
        pytest.param("abc", "abc"),
    ],
)
def test_token_value(code: str, expected_value: int | float | str) -> None:
    [token] = tokenize(code)
    assert token.value == expected_value
    assert type(token.value) is type(expected_value)


def test_multiple_dots_lex_as_one_float() -> None:
    assert [t.type for t in tokenize("1.2.3")] == [TokenType.FLOAT]


@pytest.mark.parametrize("code", ["", "f ( 5 , 3 )", "2^3 ^ 2", "a$b\t?", "1.2.3 + x_y"])
def test_untokenize_restores_code(code: str) -> None:
    assert untokenize(tokenize(code)) == code


def test_strip_whitespace() -> None:
    assert strip_whitespace(tokenize(" 1 +\t2 ")) == [
        integer("1"),
        Token(TokenType.PLUS, "+"),
        integer("2"),
    ]
