"""Path data and transform simplification."""

from __future__ import annotations

import logging

from vectorslide.engine.context import OptimizationContext
from vectorslide.engine.registry import Stage, rule
from vectorslide.svg.parser import localname
from vectorslide.svg.pathdata import PathSyntaxError, simplify_path
from vectorslide.svg.transforms import simplify_transform

logger = logging.getLogger(__name__)

TRANSFORM_ATTRIBUTES = ("transform", "gradientTransform", "patternTransform")


@rule(id="convert_path_data", stage=Stage.GEOMETRY, description="Absolute, shortened path data")
def convert_path_data(ctx: OptimizationContext) -> int:
    changed = 0
    for el in ctx.root.iter():
        if not isinstance(el.tag, str) or localname(el.tag) != "path":
            continue
        d = el.get("d")
        if not d:
            continue
        try:
            simplified = simplify_path(d, ctx.precision)
        except PathSyntaxError as e:
            # Renderers draw up to the first error
            logger.debug("Leaving unparseable path data alone: %s", e)
            continue
        if simplified != d:
            el.set("d", simplified)
            changed += 1
    return changed


@rule(id="convert_transform", stage=Stage.GEOMETRY, description="Simplify transforms without fusing them")
def convert_transform(ctx: OptimizationContext) -> int:
    changed = 0
    for el in ctx.root.iter():
        if not isinstance(el.tag, str):
            continue
        for attr in TRANSFORM_ATTRIBUTES:
            value = el.get(attr)
            if value is None:
                continue
            simplified = simplify_transform(value, ctx.precision)
            if simplified == value:
                continue
            if simplified:
                el.set(attr, simplified)
            else:
                del el.attrib[attr]
            changed += 1
    return changed
