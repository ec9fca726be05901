import pytest

from pylox.env import Environment
from pylox.errors import ErrorCodes, LoxInternalError, LoxRuntimeError
from pylox.types import Token, TokenType


def name(lexeme, line=1):
    return Token(TokenType.IDENTIFIER, lexeme, None, line)


def test_define_and_get():
    env = Environment()
    env.define("a", 1.0)
    assert env.get(name("a")) == 1.0
    assert "a" in env


def test_redefinition_replaces_value():
    env = Environment()
    env.define("a", 1.0)
    env.define("a", "two")
    assert env.get(name("a")) == "two"


def test_get_searches_enclosing_scopes():
    outer = Environment()
    outer.define("a", 1.0)
    inner = Environment(outer)
    assert inner.get(name("a")) == 1.0
    assert "a" not in inner


def test_assign_updates_the_defining_scope():
    outer = Environment()
    outer.define("a", 1.0)
    inner = Environment(outer)
    inner.assign(name("a"), 2.0)
    assert outer.values["a"] == 2.0
    assert "a" not in inner


def test_undefined_name_is_a_runtime_error():
    env = Environment()
    with pytest.raises(LoxRuntimeError) as exc_info:
        env.get(name("missing", line=7))
    assert exc_info.value.message == "Undefined variable 'missing'."
    assert exc_info.value.code == ErrorCodes.UNDEFINED_VARIABLE
    assert exc_info.value.line == 7

    with pytest.raises(LoxRuntimeError):
        env.assign(name("missing"), 1.0)


def test_resolved_access_walks_exact_distance():
    outer = Environment()
    outer.define("a", "outer")
    middle = Environment(outer)
    middle.define("a", "middle")
    inner = Environment(middle)

    assert inner.ancestor(2) is outer
    assert inner.get_at(2, "a") == "outer"
    assert inner.get_at(1, "a") == "middle"

    inner.assign_at(2, name("a"), "changed")
    assert outer.values["a"] == "changed"
    assert middle.values["a"] == "middle"


def test_resolved_access_mismatch_is_internal_error():
    env = Environment(Environment())
    with pytest.raises(LoxInternalError):
        env.get_at(1, "nope")
    with pytest.raises(LoxInternalError):
        env.ancestor(5)


def test_shared_reference_sees_mutation():
    shared = Environment()
    shared.define("count", 0.0)
    first = Environment(shared)
    second = Environment(shared)
    first.assign_at(1, name("count"), 1.0)
    assert second.get_at(1, "count") == 1.0
