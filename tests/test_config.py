"""Unit tests for the numeric type registry."""

from fractions import Fraction

import pytest

from stratspace.config import (
    DEFAULT_NUMERIC, NUMERIC_TYPES, get_numeric, list_numerics, resolve_numeric,
)


def test_registry():
    assert list_numerics() == ["float", "rational"]
    assert get_numeric("float") is float
    assert get_numeric("rational") is Fraction
    assert DEFAULT_NUMERIC in NUMERIC_TYPES


def test_unknown_name():
    with pytest.raises(ValueError, match="Unknown numeric type"):
        get_numeric("decimal")


@pytest.mark.parametrize("numeric,expected", [
    (None, float),
    ("float", float),
    ("rational", Fraction),
    (float, float),
    (Fraction, Fraction),
])
def test_resolve(numeric, expected):
    assert resolve_numeric(numeric) is expected


def test_resolve_unregistered_type():
    with pytest.raises(ValueError):
        resolve_numeric(int)
