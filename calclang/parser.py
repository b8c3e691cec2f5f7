import enum
from dataclasses import dataclass
from typing import Optional

from calclang.tokenizer import Token, TokenType, strip_whitespace, tokenize
from calclang.utils import PrintableEnum, render_pointer


@dataclass
class ParserError(Exception):
    errmsg: str
    tokens: list[Token]
    error_token_idx: int

    @property
    def token(self) -> Optional[Token]:
        if self.error_token_idx < len(self.tokens):
            return self.tokens[self.error_token_idx]
        return None

    def __str__(self) -> str:
        pieces = [t.lexeme for t in self.tokens]
        return "\n".join([f"Parser error: {self.errmsg}", render_pointer(pieces, self.error_token_idx)])


class UnexpectedEndOfInput(ParserError):
    pass


class UnexpectedToken(ParserError):
    pass


class BinaryOperator(PrintableEnum):
    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    POW = enum.auto()


@dataclass(frozen=True)
class BinaryOperation:
    operator: BinaryOperator
    left: "Expression"
    right: "Expression"


class UnaryOperator(PrintableEnum):
    NEG = enum.auto()


@dataclass(frozen=True)
class UnaryOperation:
    operator: UnaryOperator
    operand: "Expression"


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class IntegerLiteral:
    value: int


@dataclass(frozen=True)
class FloatLiteral:
    value: float


@dataclass(frozen=True)
class FunctionDefinition:
    name: str
    params: tuple[str, ...]
    body: "Expression"


@dataclass(frozen=True)
class FunctionCall:
    name: str
    args: tuple["Expression", ...]


class SyntaxScope(PrintableEnum):
    GLOBAL = enum.auto()
    LOCAL = enum.auto()


@dataclass(frozen=True)
class SyntaxDefinition:
    """Registers a named syntax rule. Stored by the interpreter, never consulted by this parser."""

    name: str
    pattern: str
    precedence: int
    scope: SyntaxScope


Expression = (
    Identifier
    | IntegerLiteral
    | FloatLiteral
    | FunctionDefinition
    | FunctionCall
    | BinaryOperation
    | UnaryOperation
    | SyntaxDefinition
)

ADDITIVE_OPERATORS = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUB,
}

MULTIPLICATIVE_OPERATORS = {
    TokenType.TIMES: BinaryOperator.MUL,
    TokenType.DIV: BinaryOperator.DIV,
}


def parse(tokens: list[Token]) -> tuple[list[Token], Expression]:
    """Parse one expression from the start of ``tokens``.

    Returns the tokens left unconsumed together with the expression. Whitespace
    tokens are expected to be filtered out by the caller, but are tolerated.
    """
    expression, i = _consume_expression(tokens, 0)
    return tokens[i:], expression


def parse_source(code: str) -> Expression:
    """Tokenize and parse a whole line, rejecting anything left after the expression."""
    tokens = strip_whitespace(tokenize(code))
    rest, expression = parse(tokens)
    if rest:
        error_token_idx = len(tokens) - len(rest)
        raise UnexpectedToken(
            f"Binary operator expected, found {rest[0].type}", tokens=tokens, error_token_idx=error_token_idx
        )
    return expression


def _peek_type(tokens: list[Token], i: int) -> Optional[TokenType]:
    if i < len(tokens):
        return tokens[i].type
    return None


def _describe(tokens: list[Token], i: int) -> str:
    token_type = _peek_type(tokens, i)
    return "end of input" if token_type is None else str(token_type)


def _skip_whitespace(tokens: list[Token], i: int) -> int:
    while _peek_type(tokens, i) is TokenType.WHITESPACE:
        i += 1
    return i


def _consume_expression(tokens: list[Token], i: int) -> tuple[Expression, int]:
    return _consume_additive(tokens, i)


def _consume_additive(tokens: list[Token], i: int) -> tuple[Expression, int]:
    left, i = _consume_multiplicative(tokens, i)
    while True:
        i = _skip_whitespace(tokens, i)
        operator = ADDITIVE_OPERATORS.get(_peek_type(tokens, i))  # type: ignore
        if operator is None:
            return left, i
        right, i = _consume_multiplicative(tokens, i + 1)
        left = BinaryOperation(operator=operator, left=left, right=right)


def _consume_multiplicative(tokens: list[Token], i: int) -> tuple[Expression, int]:
    left, i = _consume_unary(tokens, i)
    while True:
        i = _skip_whitespace(tokens, i)
        operator = MULTIPLICATIVE_OPERATORS.get(_peek_type(tokens, i))  # type: ignore
        if operator is None:
            return left, i
        right, i = _consume_unary(tokens, i + 1)
        left = BinaryOperation(operator=operator, left=left, right=right)


def _consume_unary(tokens: list[Token], i: int) -> tuple[Expression, int]:
    i = _skip_whitespace(tokens, i)
    if i >= len(tokens):
        raise UnexpectedEndOfInput("Operand expected, found end of input", tokens=tokens, error_token_idx=i)
    if tokens[i].type is TokenType.MINUS:
        # the operand of a leading minus is parsed at exponent level: -2^2 is -(2^2)
        operand, i = _consume_power(tokens, i + 1)
        return UnaryOperation(operator=UnaryOperator.NEG, operand=operand), i
    return _consume_power(tokens, i)


def _consume_power(tokens: list[Token], i: int) -> tuple[Expression, int]:
    base, i = _consume_primary(tokens, i)
    j = _skip_whitespace(tokens, i)
    if _peek_type(tokens, j) is TokenType.POW:
        exponent, i = _consume_power(tokens, j + 1)
        return BinaryOperation(operator=BinaryOperator.POW, left=base, right=exponent), i
    return base, i


def _consume_primary(tokens: list[Token], i: int) -> tuple[Expression, int]:
    i = _skip_whitespace(tokens, i)
    if i >= len(tokens):
        raise UnexpectedEndOfInput("Operand expected, found end of input", tokens=tokens, error_token_idx=i)
    first = tokens[i]
    if first.type is TokenType.MINUS:
        operand, i = _consume_primary(tokens, i + 1)
        return UnaryOperation(operator=UnaryOperator.NEG, operand=operand), i
    elif first.type is TokenType.INTEGER:
        return IntegerLiteral(first.value), i + 1  # type: ignore
    elif first.type is TokenType.FLOAT:
        return FloatLiteral(first.value), i + 1  # type: ignore
    elif first.type is TokenType.IDENTIFIER:
        if _peek_type(tokens, i + 1) is TokenType.PAREN_OPEN:
            return _consume_function_call(tokens, i)
        return Identifier(first.lexeme), i + 1
    elif first.type is TokenType.PAREN_OPEN:
        expression, i = _consume_expression(tokens, i + 1)
        i = _skip_whitespace(tokens, i)
        if _peek_type(tokens, i) is not TokenType.PAREN_CLOSE:
            raise UnexpectedToken(
                f"Closing bracket expected, found {_describe(tokens, i)}", tokens=tokens, error_token_idx=i
            )
        return expression, i + 1
    else:
        raise UnexpectedToken(f"Operand expected, found {first.type}", tokens=tokens, error_token_idx=i)


def _consume_function_call(tokens: list[Token], i: int) -> tuple[Expression, int]:
    """Expects ``tokens[i]`` to be the function name and ``tokens[i + 1]`` the opening bracket"""
    name = tokens[i].lexeme
    i = _skip_whitespace(tokens, i + 2)
    args: list[Expression] = []
    if _peek_type(tokens, i) is TokenType.PAREN_CLOSE:
        return FunctionCall(name=name, args=()), i + 1

    while True:
        arg, i = _consume_expression(tokens, i)
        args.append(arg)
        i = _skip_whitespace(tokens, i)
        next_type = _peek_type(tokens, i)
        if next_type is TokenType.COMMA:
            i += 1
        elif next_type is TokenType.PAREN_CLOSE:
            return FunctionCall(name=name, args=tuple(args)), i + 1
        else:
            raise UnexpectedToken(
                f"',' or ')' expected in arguments of {name!r}, found {_describe(tokens, i)}",
                tokens=tokens,
                error_token_idx=i,
            )
