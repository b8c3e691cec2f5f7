import enum
import string
from dataclasses import dataclass

from calclang.utils import PrintableEnum


class TokenType(PrintableEnum):
    IDENTIFIER = enum.auto()
    INTEGER = enum.auto()
    FLOAT = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    TIMES = enum.auto()
    DIV = enum.auto()
    POW = enum.auto()
    PAREN_OPEN = enum.auto()
    PAREN_CLOSE = enum.auto()
    BRACKET_OPEN = enum.auto()
    BRACKET_CLOSE = enum.auto()
    CURLY_OPEN = enum.auto()
    CURLY_CLOSE = enum.auto()
    COMMA = enum.auto()
    WHITESPACE = enum.auto()
    UNKNOWN = enum.auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str

    @property
    def value(self) -> str | int | float:
        if self.type is TokenType.INTEGER:
            return int(self.lexeme)
        elif self.type is TokenType.FLOAT:
            return _parse_float(self.lexeme)
        else:
            return self.lexeme

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"


def _parse_float(lexeme: str) -> float:
    # 1.2.3 reads as 12.3: only the last dot separates the fraction
    head, _, fraction = lexeme.rpartition(".")
    whole = head.replace(".", "")
    return float(f"{whole or '0'}.{fraction or '0'}")


def _is_valid_in_number(s: str) -> bool:
    return s in string.digits or s == "."


def _is_valid_identifier_start(s: str) -> bool:
    return s in string.ascii_letters or s == "_"


def _is_valid_in_identifier(s: str) -> bool:
    return _is_valid_identifier_start(s) or s in string.digits


SINGLE_CHAR_TOKENS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.TIMES,
    "/": TokenType.DIV,
    "^": TokenType.POW,
    "(": TokenType.PAREN_OPEN,
    ")": TokenType.PAREN_CLOSE,
    "[": TokenType.BRACKET_OPEN,
    "]": TokenType.BRACKET_CLOSE,
    "{": TokenType.CURLY_OPEN,
    "}": TokenType.CURLY_CLOSE,
    ",": TokenType.COMMA,
}

WHITESPACE_CHARS = " \t\n\r"


def tokenize(code: str) -> list[Token]:
    """Split ``code`` into tokens. Never fails: unrecognized characters become UNKNOWN tokens."""
    i = 0
    tokens: list[Token] = []
    while i < len(code):
        if _is_valid_in_number(code[i]):
            number_end_idx = i + 1
            while number_end_idx < len(code) and _is_valid_in_number(code[number_end_idx]):
                number_end_idx += 1
            lexeme = code[i:number_end_idx]
            token_type = TokenType.FLOAT if "." in lexeme else TokenType.INTEGER
            tokens.append(Token(type=token_type, lexeme=lexeme))
            i = number_end_idx - 1  # to account for += 1 later
        elif _is_valid_identifier_start(code[i]):
            ident_end_idx = i + 1
            while ident_end_idx < len(code) and _is_valid_in_identifier(code[ident_end_idx]):
                ident_end_idx += 1
            tokens.append(Token(type=TokenType.IDENTIFIER, lexeme=code[i:ident_end_idx]))
            i = ident_end_idx - 1  # to account for += 1 later
        elif code[i] in SINGLE_CHAR_TOKENS:
            tokens.append(Token(type=SINGLE_CHAR_TOKENS[code[i]], lexeme=code[i]))
        elif code[i] in WHITESPACE_CHARS:
            tokens.append(Token(type=TokenType.WHITESPACE, lexeme=code[i]))
        else:
            tokens.append(Token(type=TokenType.UNKNOWN, lexeme=code[i]))
        i += 1

    return tokens


def strip_whitespace(tokens: list[Token]) -> list[Token]:
    return [t for t in tokens if t.type is not TokenType.WHITESPACE]


def untokenize(tokens: list[Token]) -> str:
    return "".join(t.lexeme for t in tokens)
