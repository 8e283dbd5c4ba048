"""Color canonicalization."""

from __future__ import annotations

from lxml import etree

from vectorslide.engine.context import OptimizationContext
from vectorslide.engine.registry import Stage, rule
from vectorslide.svg.colors import COLOR_PROPERTIES, CURRENT_COLOR, DEFAULT_COLOR, canonical_color
from vectorslide.svg.parser import parse_style, serialize_style


def _inherited_color(el: etree._Element) -> str:
    """Resolve ``currentColor`` the way a renderer would: nearest ``color`` value."""
    node = el
    while node is not None:
        value = node.get("color")
        if value is None:
            decls = parse_style(node.get("style") or "")
            value = decls.get("color")
        if value and value.strip().lower() not in (CURRENT_COLOR, "inherit"):
            return value.strip()
        node = node.getparent()
    return DEFAULT_COLOR


def _convert(el: etree._Element, value: str) -> str:
    if value.strip().lower() == CURRENT_COLOR:
        value = _inherited_color(el)
    return canonical_color(value)


@rule(id="convert_colors", stage=Stage.COLORS, description="Shorten colors and resolve currentColor")
def convert_colors(ctx: OptimizationContext) -> int:
    changed = 0
    for el in ctx.root.iter():
        if not isinstance(el.tag, str):
            continue
        for prop in COLOR_PROPERTIES:
            value = el.get(prop)
            if value is None:
                continue
            converted = _convert(el, value)
            if converted != value:
                el.set(prop, converted)
                changed += 1
        style = el.get("style")
        if style:
            decls = parse_style(style)
            updated = {k: _convert(el, v) if k in COLOR_PROPERTIES else v for k, v in decls.items()}
            if updated != decls:
                el.set("style", serialize_style(updated))
                changed += 1
    return changed
