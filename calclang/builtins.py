from dataclasses import dataclass
from typing import Callable

from calclang.value import Value

BuiltinFuncImpl = Callable[[list[Value]], Value]


@dataclass(frozen=True)
class BuiltinFunc:
    name: str
    arity: int
    fn: BuiltinFuncImpl


BUILTIN_FUNCS: dict[str, BuiltinFunc] = dict()


def register_builtin_func(name: str, arity: int):
    def decorator(fn: BuiltinFuncImpl) -> BuiltinFuncImpl:
        BUILTIN_FUNCS[name] = BuiltinFunc(name=name, arity=arity, fn=fn)
        return fn

    return decorator


@register_builtin_func("ID", arity=1)
def id_(args: list[Value]) -> Value:
    return args[0]
