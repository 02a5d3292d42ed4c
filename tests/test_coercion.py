import math

import pytest

from garden_engine.coercion import as_bool, as_float, as_int, string_or_fallback


@pytest.mark.parametrize(
    "value, expected",
    [
        (True, True),
        (False, False),
        ("false", False),
        (" False ", False),
        ("0", False),
        ("no", False),
        ("true", True),
        ("YES", True),
        (1, True),
        (0, False),
        ("maybe", "default"),
        (None, "default"),
        ([1], "default"),
    ],
)
def test_as_bool(value, expected):
    result = as_bool(value, True)
    if expected == "default":
        assert result is True
        assert as_bool(value, False) is False
    else:
        assert result is expected


def test_as_int_and_float():
    assert as_int(3.0) == 3
    assert as_int(3.5) is None
    assert as_int(True, 7) == 7
    assert as_float("2.5") == 2.5
    assert as_float(math.inf) is None


def test_string_or_fallback():
    assert string_or_fallback("  ", None, " Basil ", fallback="x") == "Basil"
    assert string_or_fallback(3, fallback="x") == "x"
