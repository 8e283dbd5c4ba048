"""Tests for transform simplification."""

from __future__ import annotations

import pytest

from vectorslide.svg.transforms import parse_transform, simplify_transform


def test_parse_transform_list():
    assert parse_transform("translate(10, 5) scale(2)") == [("translate", [10.0, 5.0]), ("scale", [2.0])]


def test_parse_transform_rejects_garbage():
    with pytest.raises(ValueError):
        parse_transform("translate(1) bogus(2)")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("translate(0 0)", ""),
        ("scale(1)", ""),
        ("rotate(360)", ""),
        ("matrix(1 0 0 1 0 0)", ""),
        ("matrix(1 0 0 1 10 20)", "translate(10 20)"),
        ("matrix(2 0 0 2 0 0)", "scale(2)"),
        ("matrix(0 1 -1 0 0 0)", "rotate(90)"),
        ("translate(10 0) translate(5 5)", "translate(15 5)"),
        ("scale(2 2)", "scale(2)"),
        ("rotate(30) rotate(60)", "rotate(90)"),
        ("translate(10) scale(2)", "translate(10) scale(2)"),
        ("translate(1.23456 0)", "translate(1.23)"),
    ],
)
def test_simplify_transform(value, expected):
    assert simplify_transform(value, 2) == expected


def test_matrix_is_never_fused():
    out = simplify_transform("translate(10 10) rotate(45) scale(2 3)", 2)
    assert out == "translate(10 10) rotate(45) scale(2 3)"


@pytest.mark.parametrize(
    "value",
    ["matrix(0.7071 0.7071 -0.7071 0.7071 0 0)", "rotate(33.333333) translate(1.005 2)", "matrix(1.5 0.2 0.3 1.1 4 5)"],
)
def test_simplify_transform_is_idempotent(value):
    once = simplify_transform(value, 2)
    assert simplify_transform(once, 2) == once
