"""Tests for path data parsing and simplification."""

from __future__ import annotations

import pytest

from vectorslide.svg.pathdata import PathSyntaxError, parse_path, simplify_path


def test_parse_relative_commands_to_absolute():
    assert parse_path("m10 10 l5 0 z") == [("M", [10.0, 10.0]), ("L", [15.0, 10.0]), ("Z", [])]


def test_implicit_lineto_after_moveto():
    assert parse_path("M0 0 10 10") == [("M", [0.0, 0.0]), ("L", [10.0, 10.0])]


def test_compact_number_syntax():
    assert parse_path("M.5.5L-1-1") == [("M", [0.5, 0.5]), ("L", [-1.0, -1.0])]


def test_horizontal_and_vertical_expanded_to_lines():
    assert parse_path("M1 1 h4 V9") == [("M", [1.0, 1.0]), ("L", [5.0, 1.0]), ("L", [5.0, 9.0])]


def test_subpaths_keep_moves_and_closepaths():
    commands = [cmd for cmd, _ in parse_path("M0 0 L5 0 Z m 10 10 l 5 0 z")]
    assert commands == ["M", "L", "Z", "M", "L", "Z"]


@pytest.mark.parametrize("bad", ["", "   ", "L 10 10"])
def test_malformed_path_raises(bad):
    with pytest.raises(PathSyntaxError):
        parse_path(bad)


@pytest.mark.parametrize(
    "d, expected",
    [
        ("M 0 0 L 10 0 L 10 10 L 0 10 Z", "M0 0H10V10H0Z"),
        ("M 0 0 L 10 10 L 20 20", "M0 0L10 10 20 20"),
        ("M0 0 C 5 0 10 0 10 0", "M0 0H10"),
        ("M0 0 Q 5 0 10 0", "M0 0H10"),
        ("M0 0 L 0 0 L 5 5 L 5 5", "M0 0L0 0 5 5"),
        ("M 1.23456 2.34567 l 1 1", "M1.23 2.35L2.23 3.35"),
        ("M0 0 h 10 v 10 h -10 z m 20 0 h 5", "M0 0H10V10H0ZM20 0H25"),
    ],
)
def test_simplify_path(d, expected):
    assert simplify_path(d, 2) == expected


def test_smooth_cubic_shorthand():
    out = simplify_path("M0 0 C 0 10 10 10 10 0 C 10 -10 20 -10 20 0", 2)
    assert out == "M0 0C0 10 10 10 10 0S20 -10 20 0"


def test_arc_kept_as_arc():
    out = simplify_path("M0 0 A 5 5 0 0 1 10 0", 2)
    assert out.startswith("M0 0A")
    assert out.endswith(" 10 0")


@pytest.mark.parametrize(
    "d",
    [
        "M 0 0 L 10 0 L 10 10 L 0 10 Z",
        "M0 0 C 0 10 10 10 10 0 S 20 -10 20 0",
        "M 1.23456 2.34567 q 3 4 5 6 t 2 2",
        "M10 10 h 5 v 5 H 0 V 0 z m 3 3 l 4 0",
    ],
)
def test_simplify_path_is_idempotent(d):
    once = simplify_path(d, 2)
    assert simplify_path(once, 2) == once
