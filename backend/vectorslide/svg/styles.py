"""Minimal stylesheet support for inlining ``<style>`` blocks.

Not a CSS engine: selectors are limited to type, class, id and universal
selectors, compounds of those (``rect.a.b``) and descendant combinators.
Anything else (child/sibling combinators, attribute selectors,
pseudo-classes) is skipped. There is no cascade beyond source order.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

import tinycss2
from lxml import etree

from vectorslide.svg.parser import localname

logger = logging.getLogger(__name__)

# CSS property → SVG presentation attribute. Everything else is ignored.
CSS_TO_SVG_ATTRIBUTE = {
    "fill": "fill",
    "stroke": "stroke",
    "stroke-width": "stroke-width",
    "stroke-linecap": "stroke-linecap",
    "stroke-linejoin": "stroke-linejoin",
    "stroke-miterlimit": "stroke-miterlimit",
    "opacity": "opacity",
    "fill-opacity": "fill-opacity",
    "stroke-opacity": "stroke-opacity",
    "font-family": "font-family",
    "font-size": "font-size",
    "font-weight": "font-weight",
    "text-anchor": "text-anchor",
}

_COMPOUND_RE = re.compile(r"^(\*|[A-Za-z][\w-]*)?((?:[.#][A-Za-z_][\w-]*)*)$")
_PART_RE = re.compile(r"([.#])([A-Za-z_][\w-]*)")


@dataclass
class Compound:
    """One compound selector, e.g. ``rect.outline``."""

    tag: str | None = None
    classes: tuple[str, ...] = ()
    element_id: str | None = None

    def matches(self, el: etree._Element) -> bool:
        if self.tag is not None and localname(el.tag) != self.tag:
            return False
        if self.element_id is not None and el.get("id") != self.element_id:
            return False
        if self.classes:
            have = set((el.get("class") or "").split())
            if not all(c in have for c in self.classes):
                return False
        return True


@dataclass
class Selector:
    """Descendant chain of compounds, outermost first."""

    text: str
    compounds: list[Compound] = field(default_factory=list)

    def matches(self, el: etree._Element) -> bool:
        if not self.compounds or not self.compounds[-1].matches(el):
            return False
        node = el.getparent()
        # Nearest-ancestor matching, descendant combinators only
        for compound in reversed(self.compounds[:-1]):
            while node is not None and not compound.matches(node):
                node = node.getparent()
            if node is None:
                return False
            node = node.getparent()
        return True


@dataclass
class CssRule:
    selectors: list[Selector]
    declarations: dict[str, str]


def parse_selector(text: str) -> Selector | None:
    """Parse one selector; returns None for unsupported syntax."""
    text = text.strip()
    if not text:
        return None
    compounds: list[Compound] = []
    for token in text.split():
        m = _COMPOUND_RE.match(token)
        if not m:
            return None
        tag = m.group(1)
        classes: list[str] = []
        element_id = None
        for kind, name in _PART_RE.findall(m.group(2)):
            if kind == ".":
                classes.append(name)
            else:
                element_id = name
        compounds.append(Compound(
            tag=None if tag in (None, "*") else tag,
            classes=tuple(classes),
            element_id=element_id,
        ))
    return Selector(text=text, compounds=compounds)


def parse_declarations(block) -> dict[str, str]:
    """Declaration text (or tokens) to ``{property: value}``; ``!important`` is dropped."""
    decls: dict[str, str] = {}
    for node in tinycss2.parse_declaration_list(block, skip_comments=True, skip_whitespace=True):
        if node.type != "declaration":
            continue
        value = tinycss2.serialize(node.value).strip()
        if value:
            decls[node.lower_name] = value
    return decls


def parse_stylesheet(css: str) -> list[CssRule]:
    """Parse stylesheet text into rules, in source order."""
    rules: list[CssRule] = []
    for node in tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True):
        # Rules inside @media, @supports etc. only apply conditionally
        if node.type != "qualified-rule":
            continue
        selectors = []
        for part in tinycss2.serialize(node.prelude).split(","):
            sel = parse_selector(part)
            if sel is None:
                logger.debug("Skipping unsupported selector %r", part.strip())
                continue
            selectors.append(sel)
        decls = parse_declarations(node.content)
        if selectors and decls:
            rules.append(CssRule(selectors=selectors, declarations=decls))
    return rules


def apply_rules(root: etree._Element, rules: list[CssRule]) -> int:
    """Copy mapped declarations onto matching elements as attributes.

    Attributes already present (explicit, from an inline ``style``, or set by
    an earlier rule) are never overwritten. Returns the number of attributes
    written.
    """
    written = 0
    elements = [el for el in root.iter() if isinstance(el.tag, str)]
    for rule in rules:
        mapped = {
            CSS_TO_SVG_ATTRIBUTE[prop]: value
            for prop, value in rule.declarations.items()
            if prop in CSS_TO_SVG_ATTRIBUTE
        }
        if not mapped:
            continue
        for el in elements:
            if not any(sel.matches(el) for sel in rule.selectors):
                continue
            inline = _inline_properties(el)
            for attr, value in mapped.items():
                if attr in el.attrib or attr in inline:
                    continue
                el.set(attr, value)
                written += 1
    return written


def _inline_properties(el: etree._Element) -> set[str]:
    style = el.get("style")
    if not style:
        return set()
    return set(parse_declarations(style))
