"""Root size attributes that duplicate the viewBox."""

from __future__ import annotations

from vectorslide.engine.context import OptimizationContext
from vectorslide.engine.registry import Stage, rule
from vectorslide.svg.parser import parse_length, parse_viewbox


@rule(id="remove_dimensions", stage=Stage.DIMENSIONS, description="Drop width/height equal to the viewBox size")
def remove_dimensions(ctx: OptimizationContext) -> int:
    root = ctx.root
    vb = parse_viewbox(root.get("viewBox"))
    if vb is None:
        return 0
    width, height = root.get("width"), root.get("height")
    if width is None or height is None:
        return 0
    # Only unitless / px values can equal user units
    if any(v.strip().endswith(("pt", "pc", "mm", "cm", "in", "%", "em", "ex")) for v in (width, height)):
        return 0
    if parse_length(width) == vb[2] and parse_length(height) == vb[3]:
        del root.attrib["width"]
        del root.attrib["height"]
        return 2
    return 0
