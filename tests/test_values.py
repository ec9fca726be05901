import math

import pytest

from pylox.evaluator import divide
from pylox.values import format_number, is_equal, is_truthy, stringify


@pytest.mark.parametrize("value, expected", [
    (None, False),
    (False, False),
    (True, True),
    (0.0, True),
    ("", True),
])
def test_truthiness(value, expected):
    assert is_truthy(value) is expected


def test_equality_never_coerces():
    assert is_equal(None, None)
    assert not is_equal(None, False)
    assert not is_equal(True, 1.0)
    assert not is_equal("1", 1.0)
    assert is_equal(1.0, 1.0)
    assert is_equal("ab", "a" + "b")
    assert not is_equal(math.nan, math.nan)


@pytest.mark.parametrize("value, expected", [
    (1.0, "1"),
    (-3.0, "-3"),
    (2.5, "2.5"),
    (0.1, "0.1"),
    (1e-07, "0.0000001"),
    (0.00001, "0.00001"),
    (-2.5e-05, "-0.000025"),
    (123456.789, "123456.789"),
    (1e21, "1000000000000000000000"),
    (-0.0, "-0"),
    (math.inf, "inf"),
    (-math.inf, "-inf"),
    (math.nan, "NaN"),
])
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_stringify_primitives():
    assert stringify(None) == "nil"
    assert stringify(True) == "true"
    assert stringify(False) == "false"
    assert stringify("text") == "text"
    assert stringify(10.0) == "10"


def test_division_follows_ieee():
    assert divide(1.0, 0.0) == math.inf
    assert divide(-1.0, 0.0) == -math.inf
    assert divide(1.0, -0.0) == -math.inf
    assert math.isnan(divide(0.0, 0.0))
    assert divide(7.0, 2.0) == 3.5
