import logging
import math
from dataclasses import dataclass
from typing import Optional, Type

from calclang.builtins import BUILTIN_FUNCS
from calclang.environment import Environment, SyntaxRule
from calclang.parser import (
    BinaryOperation,
    BinaryOperator,
    Expression,
    FloatLiteral,
    FunctionCall,
    FunctionDefinition,
    Identifier,
    IntegerLiteral,
    SyntaxDefinition,
    UnaryOperation,
    UnaryOperator,
    parse_source,
)
from calclang.value import BinaryOperationImpl, Builtin, Float, Function, Integer, UnaryOperationImpl, Unit, Value

logger = logging.getLogger(__name__)

MAX_EXACT_EXPONENT = 20


class CalcRuntimeError(Exception):
    """Base class for errors raised while evaluating an expression"""


@dataclass
class UndefinedVariable(CalcRuntimeError):
    name: str

    def __str__(self) -> str:
        return f"Undefined variable: {self.name}"


@dataclass
class ArityMismatch(CalcRuntimeError):
    name: str
    expected: int
    actual: int

    def __str__(self) -> str:
        return f"Arity mismatch: {self.name} expected {self.expected} arguments, got {self.actual}"


@dataclass
class NotCallable(CalcRuntimeError):
    name: str

    def __str__(self) -> str:
        return f"{self.name} is not a function"


@dataclass
class FunctionNotFound(CalcRuntimeError):
    name: str

    def __str__(self) -> str:
        return f"Function not found: {self.name}"


@dataclass
class UnknownBuiltin(CalcRuntimeError):
    name: str

    def __str__(self) -> str:
        return f"Unknown builtin: {self.name}"


@dataclass
class DivisionByZero(CalcRuntimeError):
    def __str__(self) -> str:
        return "Division by zero"


OPERATION_NAMES = {
    BinaryOperator.ADD: "Addition",
    BinaryOperator.SUB: "Subtraction",
    BinaryOperator.MUL: "Multiplication",
    BinaryOperator.DIV: "Division",
    BinaryOperator.POW: "Power",
    UnaryOperator.NEG: "Negation",
}


@dataclass
class InvalidOperandTypes(CalcRuntimeError):
    operator: BinaryOperator
    left_type: str
    right_type: str

    def __str__(self) -> str:
        return f"{OPERATION_NAMES[self.operator]} is not defined for {self.left_type} and {self.right_type}"


@dataclass
class InvalidUnaryOperand(CalcRuntimeError):
    operator: UnaryOperator
    operand_type: str

    def __str__(self) -> str:
        return f"{OPERATION_NAMES[self.operator]} is not defined for {self.operand_type}"


class Interpreter:
    """Evaluates expressions against an environment that persists between calls to ``interpret``."""

    def __init__(self) -> None:
        self.environment = Environment()

    def interpret(self, expression: Expression) -> Value:
        if isinstance(expression, IntegerLiteral):
            return Integer(expression.value)
        elif isinstance(expression, FloatLiteral):
            return Float(expression.value)
        elif isinstance(expression, Identifier):
            value = self.environment.lookup(expression.name)
            if value is None:
                raise UndefinedVariable(expression.name)
            return value
        elif isinstance(expression, FunctionDefinition):
            function = Function(params=expression.params, body=expression.body)
            self.environment.bind(expression.name, function)
            return function
        elif isinstance(expression, FunctionCall):
            return self._call(expression)
        elif isinstance(expression, BinaryOperation):
            left_res = self.interpret(expression.left)
            right_res = self.interpret(expression.right)
            return eval_binary_operation(expression.operator, left_res, right_res)
        elif isinstance(expression, UnaryOperation):
            operand = self.interpret(expression.operand)
            return eval_unary_operation(expression.operator, operand)
        elif isinstance(expression, SyntaxDefinition):
            self.environment.add_syntax_rule(
                SyntaxRule(
                    name=expression.name,
                    pattern=expression.pattern,
                    precedence=expression.precedence,
                    scope=expression.scope,
                )
            )
            return Unit()
        else:
            raise RuntimeError(f"Unexpected expression type: {expression}")

    def _call(self, call: FunctionCall) -> Value:
        callee = self.environment.lookup(call.name)
        if callee is None:
            raise FunctionNotFound(call.name)
        if isinstance(callee, Builtin):
            return self._call_builtin(callee, call.args)
        if not isinstance(callee, Function):
            raise NotCallable(call.name)
        if len(callee.params) != len(call.args):
            raise ArityMismatch(call.name, expected=len(callee.params), actual=len(call.args))

        # arguments are evaluated in the caller's scope, before the callee's scope exists
        args = [self.interpret(arg) for arg in call.args]
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Calling %s(%s)", call.name, ", ".join(str(a) for a in args))
        with self.environment.child_scope(dict(zip(callee.params, args))):
            result = self.interpret(callee.body)
        logger.debug("%s returned %s", call.name, result)
        return result

    def _call_builtin(self, callee: Builtin, args: tuple[Expression, ...]) -> Value:
        builtin = BUILTIN_FUNCS.get(callee.name)
        if builtin is None:
            raise UnknownBuiltin(callee.name)
        if len(args) != builtin.arity:
            raise ArityMismatch(callee.name, expected=builtin.arity, actual=len(args))
        return builtin.fn([self.interpret(arg) for arg in args])


def evaluate(code: str, interpreter: Optional[Interpreter] = None) -> Value:
    """Parse and evaluate one line of code, in a fresh interpreter unless one is given"""
    if interpreter is None:
        interpreter = Interpreter()
    return interpreter.interpret(parse_source(code))


BinaryOperationImplTable = list[tuple[tuple[Type[Value], Type[Value]], BinaryOperationImpl]]


def _int_to_float(v: int) -> float:
    try:
        return float(v)
    except OverflowError:
        return math.inf if v > 0 else -math.inf


def _promote(a: Value, b: Value) -> tuple[Value, Value]:
    if isinstance(a, Integer) and isinstance(b, Float):
        return Float(_int_to_float(a.v)), b
    if isinstance(a, Float) and isinstance(b, Integer):
        return a, Float(_int_to_float(b.v))
    return a, b


def eval_binary_operation(operator: BinaryOperator, a: Value, b: Value) -> Value:
    a, b = _promote(a, b)
    for (type_a, type_b), impl in BINARY_OPERATION_IMPLS[operator]:
        if isinstance(a, type_a) and isinstance(b, type_b):
            return impl(a, b)
    else:
        raise InvalidOperandTypes(operator, a.type_name(), b.type_name())


def _div_integers(a: Integer, b: Integer) -> Value:
    if b.v == 0:
        raise DivisionByZero()
    quotient = abs(a.v) // abs(b.v)
    return Integer(quotient if (a.v < 0) == (b.v < 0) else -quotient)


def _div_floats(a: Float, b: Float) -> Value:
    if b.v == 0.0:
        raise DivisionByZero()
    return Float(a.v / b.v)


def _is_odd_integer(x: float) -> bool:
    return x.is_integer() and x % 2 == 1


def _float_pow(base: float, exponent: float) -> float:
    """``math.pow`` returning IEEE results where it would raise"""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.copysign(math.inf, base) if _is_odd_integer(exponent) else math.inf
    except ValueError:
        # zero to a negative power or a negative base to a fractional power
        if base == 0.0:
            return math.copysign(math.inf, base) if _is_odd_integer(exponent) else math.inf
        return math.nan


def _pow_integers(a: Integer, b: Integer) -> Value:
    if 0 <= b.v <= MAX_EXACT_EXPONENT:
        return Integer(a.v**b.v)
    return Float(_float_pow(_int_to_float(a.v), _int_to_float(b.v)))


add_impls: BinaryOperationImplTable = [
    ((Integer, Integer), lambda a, b: Integer(a.v + b.v)),  # type: ignore
    ((Float, Float), lambda a, b: Float(a.v + b.v)),  # type: ignore
]
sub_impls: BinaryOperationImplTable = [
    ((Integer, Integer), lambda a, b: Integer(a.v - b.v)),  # type: ignore
    ((Float, Float), lambda a, b: Float(a.v - b.v)),  # type: ignore
]
mul_impls: BinaryOperationImplTable = [
    ((Integer, Integer), lambda a, b: Integer(a.v * b.v)),  # type: ignore
    ((Float, Float), lambda a, b: Float(a.v * b.v)),  # type: ignore
]
div_impls: BinaryOperationImplTable = [
    ((Integer, Integer), _div_integers),  # type: ignore
    ((Float, Float), _div_floats),  # type: ignore
]
pow_impls: BinaryOperationImplTable = [
    ((Integer, Integer), _pow_integers),  # type: ignore
    ((Float, Float), lambda a, b: Float(_float_pow(a.v, b.v))),  # type: ignore
]

BINARY_OPERATION_IMPLS: dict[BinaryOperator, BinaryOperationImplTable] = {
    BinaryOperator.ADD: add_impls,
    BinaryOperator.SUB: sub_impls,
    BinaryOperator.MUL: mul_impls,
    BinaryOperator.DIV: div_impls,
    BinaryOperator.POW: pow_impls,
}

UnaryOperationImplTable = list[tuple[Type[Value], UnaryOperationImpl]]


def eval_unary_operation(operator: UnaryOperator, operand: Value) -> Value:
    for operand_type, impl in UNARY_OPERATION_IMPLS[operator]:
        if isinstance(operand, operand_type):
            return impl(operand)
    else:
        raise InvalidUnaryOperand(operator, operand.type_name())


neg_impls: UnaryOperationImplTable = [
    (Integer, lambda a: Integer(-a.v)),  # type: ignore
    (Float, lambda a: Float(-a.v)),  # type: ignore
]

UNARY_OPERATION_IMPLS: dict[UnaryOperator, UnaryOperationImplTable] = {
    UnaryOperator.NEG: neg_impls,
}
