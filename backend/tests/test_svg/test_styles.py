"""Tests for the stylesheet parser and selector matcher."""

from __future__ import annotations

from vectorslide.svg.parser import parse_markup
from vectorslide.svg.styles import apply_rules, parse_declarations, parse_selector, parse_stylesheet


def test_parse_selector_compounds():
    sel = parse_selector("g.layer #logo")
    assert [c.tag for c in sel.compounds] == ["g", None]
    assert sel.compounds[0].classes == ("layer",)
    assert sel.compounds[1].element_id == "logo"


def test_unsupported_selector_returns_none():
    assert parse_selector("rect:hover") is None
    assert parse_selector("g > rect") is None


def test_declarations_strip_important():
    assert parse_declarations("fill: red !important; stroke : blue") == {"fill": "red", "stroke": "blue"}


def test_stylesheet_skips_comments_and_splits_selector_lists():
    rules = parse_stylesheet("/* c */ .a, .b { fill: red } rect:hover { fill: blue }")
    assert len(rules) == 1
    assert [s.text for s in rules[0].selectors] == [".a", ".b"]


def test_apply_rules_respects_inline_style():
    root = parse_markup(
        '<svg xmlns="http://www.w3.org/2000/svg"><rect class="a" style="fill:green"/><rect class="a"/></svg>'
    )
    written = apply_rules(root, parse_stylesheet(".a { fill: red; cursor: pointer }"))
    first, second = list(root)
    assert written == 1
    assert first.get("fill") is None
    assert second.get("fill") == "red"
    assert second.get("cursor") is None


def test_first_rule_wins():
    root = parse_markup('<svg xmlns="http://www.w3.org/2000/svg"><rect class="a"/></svg>')
    apply_rules(root, parse_stylesheet(".a { fill: red } rect { fill: blue }"))
    assert root[0].get("fill") == "red"


def test_rules_inside_at_rules_ignored():
    rules = parse_stylesheet("@media print { rect { fill: red } } @supports (fill: red) { .a { fill: red } } .b { fill: blue }")
    assert len(rules) == 1
    assert rules[0].selectors[0].text == ".b"


def test_media_rule_not_applied():
    root = parse_markup('<svg xmlns="http://www.w3.org/2000/svg"><rect width="5" height="5"/></svg>')
    written = apply_rules(root, parse_stylesheet("@media print { rect { fill: red } }"))
    assert written == 0
    assert root[0].get("fill") is None


def test_escaped_property_names_decoded():
    assert parse_declarations(r"f\ill: red") == {"fill": "red"}
