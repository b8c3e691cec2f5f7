import abc
from dataclasses import dataclass
from typing import Callable

from calclang.parser import Expression


class Value(abc.ABC):
    @classmethod
    @abc.abstractmethod
    def type_name(cls) -> str:
        ...


UnaryOperationImpl = Callable[[Value], Value]
BinaryOperationImpl = Callable[[Value, Value], Value]


@dataclass(frozen=True)
class Integer(Value):
    v: int

    @classmethod
    def type_name(cls) -> str:
        return "Integer"

    def __str__(self) -> str:
        return str(self.v)


@dataclass(frozen=True)
class Float(Value):
    v: float

    @classmethod
    def type_name(cls) -> str:
        return "Float"

    def __str__(self) -> str:
        return str(self.v)


@dataclass(frozen=True)
class Function(Value):
    """User-defined function. Holds no environment: names other than params resolve at the call site."""

    params: tuple[str, ...]
    body: Expression

    @classmethod
    def type_name(cls) -> str:
        return "Function"

    def __str__(self) -> str:
        return f"<function({', '.join(self.params)})>"


@dataclass(frozen=True)
class Builtin(Value):
    name: str

    @classmethod
    def type_name(cls) -> str:
        return "Built-in function"

    def __str__(self) -> str:
        return f"<builtin {self.name}>"


@dataclass(frozen=True)
class Unit(Value):
    @classmethod
    def type_name(cls) -> str:
        return "Unit"

    def __str__(self) -> str:
        return "()"
