"""Structural normalizer — rewrites sanitized SVG into the slide-safe subset.

Steps run in a fixed order; each relies on what the previous one left:

1. clip-path removal
2. ``<style>`` inlining
3. identifier simplification
4. coordinate precision reduction
5. font substitution
6. root namespace / viewBox normalization (always)
"""

from __future__ import annotations

import logging
import re

from lxml import etree

from vectorslide.errors import MalformedDocument
from vectorslide.models.document import SanitizationOptions
from vectorslide.svg.parser import (
    SVG_NS,
    format_number,
    iter_elements,
    localname,
    namespace,
    parse_length,
    parse_markup,
    parse_style,
    parse_viewbox,
    remove_element,
    serialize,
    serialize_style,
    svg_tag,
)
from vectorslide.svg.styles import apply_rules, parse_stylesheet

logger = logging.getLogger(__name__)

COORDINATE_ATTRIBUTES = (
    "x", "y", "x1", "y1", "x2", "y2", "cx", "cy", "r", "rx", "ry",
    "width", "height", "points", "d", "viewBox",
)

# Non-web font families → widely installed equivalents
FONT_REPLACEMENTS = {
    "Nimbus Sans": "Arial, sans-serif",
    "Nimbus Sans L": "Arial, sans-serif",
    "Nimbus Roman": "Times New Roman, serif",
    "Nimbus Roman No9 L": "Times New Roman, serif",
    "Nimbus Mono": "Courier New, monospace",
    "Nimbus Mono L": "Courier New, monospace",
    "Liberation Sans": "Arial, sans-serif",
    "Liberation Serif": "Times New Roman, serif",
    "Liberation Mono": "Courier New, monospace",
    "DejaVu Sans": "Arial, sans-serif",
    "DejaVu Serif": "Times New Roman, serif",
    "DejaVu Sans Mono": "Courier New, monospace",
}

_COMPLEX_ID_MAX_LEN = 10
_BASE64_ID_RE = re.compile(r"^[A-Za-z0-9+/]+=*$")
# "#" followed by an id token; the token ends at anything that cannot be part of an id
_FRAGMENT_REF_RE = re.compile(r"#([^\s#'\"()<>,;]+)")
_LONG_DECIMAL_RE = re.compile(r"\d+\.\d{3,}")
_PERCENT_100 = "100%"

# ── Minimal string-level fix, used when the DOM passes fail ──────────────
_SVG_OPEN_RE = re.compile(r"<svg\b[^>]*>", re.IGNORECASE)
_ATTR_RE_TEMPLATE = r"""\s{name}\s*=\s*(["'])(.*?)\1"""


def normalize_markup(markup: str, options: SanitizationOptions | None = None) -> str:
    """Run the normalization steps over sanitized markup.

    A MalformedDocument from parsing propagates. Any other failure falls back
    to a minimally fixed copy of the input (namespace + viewBox only).
    """
    opts = options or SanitizationOptions()
    root = parse_markup(markup)
    try:
        if opts.remove_clip_paths:
            remove_clip_paths(root)
        if opts.inline_css:
            inline_styles(root)
        if opts.simplify_ids:
            simplify_ids(root)
        if opts.optimize_coordinates:
            reduce_precision(root)
        if opts.replace_non_web_fonts:
            replace_fonts(root)
        root = ensure_svg_attributes(root)
        return serialize(root)
    except MalformedDocument:
        raise
    except Exception as e:
        logger.warning("Normalization failed, using minimal fix: %s", e)
        return minimal_fix(markup)


# ── 1. Clip paths ─────────────────────────────────────────────────────────

def remove_clip_paths(root: etree._Element) -> int:
    """Drop every clip-path reference and clipPath definition. Lossy."""
    stripped = 0
    for el in iter_elements(root):
        if el.attrib.pop("clip-path", None) is not None:
            stripped += 1
        style = el.get("style")
        if style and "clip-path" in style:
            decls = parse_style(style)
            if decls.pop("clip-path", None) is not None:
                stripped += 1
                _set_style(el, decls)
    clip_paths = [el for el in iter_elements(root) if localname(el.tag) == "clipPath"]
    for el in clip_paths:
        remove_element(el)
    if stripped or clip_paths:
        logger.debug("Removed %d clip-path refs, %d clipPath defs", stripped, len(clip_paths))
    return stripped


# ── 2. Stylesheets ────────────────────────────────────────────────────────

def inline_styles(root: etree._Element) -> int:
    """Inline ``<style>`` rules as presentation attributes, then drop the blocks."""
    style_elements = [el for el in iter_elements(root) if localname(el.tag) == "style"]
    if not style_elements:
        return 0
    rules = []
    for el in style_elements:
        rules.extend(parse_stylesheet(el.text or ""))
    written = apply_rules(root, rules)
    for el in style_elements:
        remove_element(el)
    logger.debug("Inlined %d rules (%d attributes)", len(rules), written)
    return written


# ── 3. Identifiers ────────────────────────────────────────────────────────

def is_complex_id(value: str) -> bool:
    return len(value) > _COMPLEX_ID_MAX_LEN or bool(_BASE64_ID_RE.match(value))


def simplify_ids(root: etree._Element) -> dict[str, str]:
    """Replace complex ids with ``id1``, ``id2``… and rewrite references.

    Returns the rewrite table (old id → new id). The counter is local to the
    call, so ids restart at ``id1`` for every document.
    """
    table: dict[str, str] = {}
    counter = 0
    for el in iter_elements(root):
        old = el.get("id")
        if not old or not is_complex_id(old):
            continue
        if old in table:
            # Duplicate id: the first element owns the reference target
            el.set("id", table[old])
            continue
        counter += 1
        table[old] = f"id{counter}"
        el.set("id", table[old])

    if not table:
        return table

    def _rewrite(m: re.Match) -> str:
        new = table.get(m.group(1))
        return f"#{new}" if new else m.group(0)

    for el in iter_elements(root):
        for name, value in el.attrib.items():
            if "#" in value:
                updated = _FRAGMENT_REF_RE.sub(_rewrite, value)
                if updated != value:
                    el.set(name, updated)
    logger.debug("Simplified %d ids", len(table))
    return table


# ── 4. Precision ──────────────────────────────────────────────────────────

def round_decimals(value: str, precision: int = 2) -> str:
    """Round every decimal literal with 3+ fractional digits."""
    return _LONG_DECIMAL_RE.sub(lambda m: f"{float(m.group(0)):.{precision}f}", value)


def reduce_precision(root: etree._Element, precision: int = 2) -> int:
    changed = 0
    for el in iter_elements(root):
        for attr in COORDINATE_ATTRIBUTES:
            value = el.get(attr)
            if not value:
                continue
            rounded = round_decimals(value, precision)
            if rounded != value:
                el.set(attr, rounded)
                changed += 1
    return changed


# ── 5. Fonts ──────────────────────────────────────────────────────────────

def replace_fonts(root: etree._Element) -> int:
    replaced = 0
    for el in iter_elements(root):
        family = el.get("font-family")
        if not family:
            continue
        replacement = FONT_REPLACEMENTS.get(family.replace('"', "").replace("'", "").strip())
        if replacement:
            el.set("font-family", replacement)
            replaced += 1
    return replaced


# ── 6. Root attributes ────────────────────────────────────────────────────

def ensure_svg_attributes(root: etree._Element) -> etree._Element:
    """Put the tree in the SVG namespace and make the viewBox explicit.

    Returns the (possibly rebuilt) root element.
    """
    if namespace(root.tag) != SVG_NS or root.prefix is not None:
        root = _rebuild_root(root)

    width, height = root.get("width"), root.get("height")
    if width and height and root.get("viewBox") is None:
        w, h = _leading_number(width), _leading_number(height)
        if w is not None and h is not None:
            root.set("viewBox", f"0 0 {format_number(w, 6)} {format_number(h, 6)}")

    if width == _PERCENT_100 and height == _PERCENT_100:
        vb = parse_viewbox(root.get("viewBox"))
        if vb is not None:
            root.set("width", format_number(vb[2], 6))
            root.set("height", format_number(vb[3], 6))
    return root


def _rebuild_root(root: etree._Element) -> etree._Element:
    """Move every unnamespaced element into the SVG default namespace."""
    for el in iter_elements(root):
        if namespace(el.tag) is None:
            el.tag = svg_tag(el.tag)
    nsmap = {None: SVG_NS}
    for prefix, uri in root.nsmap.items():
        if prefix is not None and uri != SVG_NS:
            nsmap[prefix] = uri
    new_root = etree.Element(svg_tag("svg"), nsmap=nsmap)
    for name, value in root.attrib.items():
        new_root.set(name, value)
    new_root.text = root.text
    for child in list(root):
        new_root.append(child)
    etree.cleanup_namespaces(new_root)
    return new_root


def _leading_number(value: str) -> float | None:
    """parseFloat-style read of width/height, ignoring any unit suffix."""
    if value.strip().endswith("%"):
        return None
    length = parse_length(value)
    if length is not None:
        return length
    digits = re.sub(r"[^\d.]", "", value)
    try:
        return float(digits)
    except ValueError:
        return None


def minimal_fix(markup: str) -> str:
    """String-level fallback: add the SVG namespace and a viewBox."""
    m = _SVG_OPEN_RE.search(markup)
    if not m:
        return markup
    tag = m.group(0)
    new_tag = tag
    if "viewBox" not in tag:
        w = _attr_from_tag(tag, "width")
        h = _attr_from_tag(tag, "height")
        if w is not None and h is not None:
            new_tag = new_tag.replace(
                "<svg", f'<svg viewBox="0 0 {format_number(w, 6)} {format_number(h, 6)}"', 1,
            )
    # Namespace goes in last so it ends up as the first attribute
    if f'xmlns="{SVG_NS}"' not in tag:
        new_tag = new_tag.replace("<svg", f'<svg xmlns="{SVG_NS}"', 1)
    return markup[: m.start()] + new_tag + markup[m.end():]


def _attr_from_tag(tag: str, name: str) -> float | None:
    m = re.search(_ATTR_RE_TEMPLATE.format(name=name), tag)
    if not m:
        return None
    return _leading_number(m.group(2))


def _set_style(el: etree._Element, decls: dict[str, str]) -> None:
    if decls:
        el.set("style", serialize_style(decls))
    else:
        el.attrib.pop("style", None)
