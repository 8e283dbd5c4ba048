"""Numeric value rounding for plain numeric attributes."""

from __future__ import annotations

import re

from vectorslide.engine.context import OptimizationContext
from vectorslide.engine.registry import Stage, rule
from vectorslide.svg.parser import format_number, parse_viewbox

_NUMERIC_VALUE_RE = re.compile(
    r"^([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)(px|pt|pc|mm|cm|m|in|ft|em|ex|%)?$"
)

# Handled by their own rules, or numeric-looking without being lengths
_SKIP_ATTRIBUTES = frozenset({
    "id", "class", "version", "d", "points", "transform",
    "gradientTransform", "patternTransform", "viewBox",
})


def round_numeric(value: str, precision: int, strip_default_px: bool) -> str:
    m = _NUMERIC_VALUE_RE.match(value.strip())
    if not m:
        return value
    unit = m.group(2) or ""
    if unit == "px" and strip_default_px:
        unit = ""
    return format_number(float(m.group(1)), precision) + unit


@rule(id="cleanup_numeric_values", stage=Stage.NUMERIC, description="Round numbers to the profile precision")
def cleanup_numeric_values(ctx: OptimizationContext) -> int:
    changed = 0
    for el in ctx.root.iter():
        if not isinstance(el.tag, str):
            continue
        for name, value in el.attrib.items():
            if name.startswith("{") or name in _SKIP_ATTRIBUTES:
                continue
            rounded = round_numeric(value, ctx.precision, ctx.spec.strip_default_px)
            if rounded != value:
                el.set(name, rounded)
                changed += 1
        vb = parse_viewbox(el.get("viewBox"))
        if vb is not None:
            text = " ".join(format_number(v, ctx.precision) for v in vb)
            if text != el.get("viewBox"):
                el.set("viewBox", text)
                changed += 1
    return changed
