"""Tests for optimization profile tables and selection."""

from __future__ import annotations

import pytest

from vectorslide.engine.profiles import (
    CLEANUP_RULES,
    DEFAULT_PROFILE,
    PROFILES,
    OptimizationProfile,
    get_profile,
    select_profile,
)
from vectorslide.engine.registry import load_builtin_rules
from tests.conftest import SIMPLE_SVG, STYLED_SVG


@pytest.mark.parametrize(
    "markup, expected",
    [
        (SIMPLE_SVG, OptimizationProfile.CONSERVATIVE),
        (STYLED_SVG, OptimizationProfile.COMPATIBLE),
        ('<svg><g clip-path="url(#c)"/></svg>', OptimizationProfile.COMPATIBLE),
        ('<svg><g style="clip-path: url(#c)"/></svg>', OptimizationProfile.COMPATIBLE),
        ("<svg><clipPath id='c'/></svg>", OptimizationProfile.COMPATIBLE),
        ("", OptimizationProfile.COMPATIBLE),
        (None, OptimizationProfile.COMPATIBLE),
    ],
)
def test_select_profile(markup, expected):
    assert select_profile(markup) == expected


def test_default_is_compatible():
    assert DEFAULT_PROFILE == OptimizationProfile.COMPATIBLE


@pytest.mark.parametrize(
    "name, expected",
    [
        ("aggressive", OptimizationProfile.AGGRESSIVE),
        ("  Conservative ", OptimizationProfile.CONSERVATIVE),
        (OptimizationProfile.COMPATIBLE, OptimizationProfile.COMPATIBLE),
        ("bogus", OptimizationProfile.COMPATIBLE),
        (None, OptimizationProfile.COMPATIBLE),
    ],
)
def test_get_profile(name, expected):
    assert get_profile(name).profile == expected


def test_precision_decreases_with_aggressiveness():
    precisions = [PROFILES[p].precision for p in OptimizationProfile]
    assert precisions == [3, 2, 1]


def test_conservative_is_cleanup_only():
    spec = PROFILES[OptimizationProfile.CONSERVATIVE]
    assert spec.rules == CLEANUP_RULES
    assert spec.strip_default_px is False


def test_aggressive_extends_compatible():
    compatible = PROFILES[OptimizationProfile.COMPATIBLE].rules
    aggressive = PROFILES[OptimizationProfile.AGGRESSIVE].rules
    assert aggressive[: len(compatible)] == compatible
    assert "remove_dimensions" in aggressive


@pytest.mark.parametrize("profile", list(OptimizationProfile))
def test_every_profile_rule_is_registered(profile):
    registry = load_builtin_rules()
    registry.resolve_order(PROFILES[profile].rules)
