import pytest

from calclang.environment import DEFAULT_SYNTAX_RULES, Environment, SyntaxRule
from calclang.parser import SyntaxScope
from calclang.value import Builtin, Float, Integer


def test_root_scope_has_builtins_and_default_rule() -> None:
    env = Environment()
    assert env.depth == 1
    assert env.lookup("ID") == Builtin("ID")
    assert env.syntax_rules == [SyntaxRule("FUNCTION", "{name}({args})", 1, SyntaxScope.GLOBAL)]


def test_bind_and_lookup() -> None:
    env = Environment()
    assert env.lookup("x") is None
    env.bind("x", Integer(1))
    env.bind("x", Integer(2))
    assert env.lookup("x") == Integer(2)


def test_child_scope_shadows_and_falls_back() -> None:
    env = Environment()
    env.bind("x", Integer(1))
    env.bind("y", Integer(2))
    with env.child_scope({"x": Float(1.5)}) as frame:
        assert frame.parent == 0
        assert env.depth == 2
        assert env.lookup("x") == Float(1.5)
        assert env.lookup("y") == Integer(2)
        env.bind("y", Integer(20))
        assert env.lookup("y") == Integer(20)
    assert env.depth == 1
    assert env.lookup("x") == Integer(1)
    assert env.lookup("y") == Integer(2)


def test_nested_scopes_chain_through_parents() -> None:
    env = Environment()
    env.bind("a", Integer(1))
    with env.child_scope({"b": Integer(2)}):
        with env.child_scope({"c": Integer(3)}) as inner:
            assert inner.parent == 1
            assert [env.lookup(name) for name in "abc"] == [Integer(1), Integer(2), Integer(3)]
        assert env.lookup("c") is None


def test_syntax_rules_are_copied_into_children() -> None:
    env = Environment()
    rule = SyntaxRule("PAIR", "<{a}, {b}>", 3, SyntaxScope.LOCAL)
    with env.child_scope({}) as frame:
        env.add_syntax_rule(rule)
        assert frame.syntax_rules[-1] == rule
    assert env.syntax_rules == DEFAULT_SYNTAX_RULES


def test_child_scope_exits_on_error() -> None:
    env = Environment()
    with pytest.raises(ValueError):
        with env.child_scope({"x": Integer(1)}):
            raise ValueError("boom")
    assert env.depth == 1
    assert env.lookup("x") is None
