import json
import math
from dataclasses import dataclass
from enum import Enum

import pytest

from viewreconcile.util import map_list, stringify


@dataclass
class _Point:
    x: int
    y: int


class _Colour(Enum):
    RED = "red"


def test_map_list_applies_function():
    assert map_list(str, [1, 2, 3]) == ["1", "2", "3"]


def test_map_list_empty():
    assert map_list(str, []) == []


def test_map_list_preserves_length_and_order():
    items = list(range(20))
    result = map_list(lambda v: -v, items)
    assert len(result) == len(items)
    assert result == sorted(result, reverse=True)


def test_map_list_accepts_generator():
    result = map_list(len, (s for s in ["a", "bb"]))
    assert result[0] < result[1]


def test_stringify_sorts_keys_compactly():
    assert stringify({"b": 1, "a": 2}) == '{"a":2,"b":1}'


def test_stringify_none():
    assert stringify(None) == "null"


@pytest.mark.parametrize(
    "value",
    [
        {"metadata": {"name": "x", "namespace": "y"}},
        [1, "two", None, True],
        "plain",
        42,
    ],
)
def test_stringify_round_trip(value):
    assert json.loads(stringify(value)) == value


def test_stringify_dataclass():
    assert json.loads(stringify(_Point(1, 2))) == {"x": 1, "y": 2}


def test_stringify_enum():
    assert json.loads(stringify({"c": _Colour.RED})) == {"c": "red"}


def test_stringify_falls_back_to_repr():
    value = object()
    assert stringify(value) == repr(value)


def test_stringify_nan_falls_back_to_repr():
    value = float("nan")
    out = stringify(value)
    assert out == repr(value)
    assert math.isnan(float(out))