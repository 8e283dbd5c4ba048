"""Layout fitter: intrinsic size derivation and placement on a fixed canvas.

All placement math is in canvas units (inches). The graphic is scaled to
fill the content box along its binding axis and centered along the other,
then clamped so it never crosses the 0.2 inch safety edge.
"""

from __future__ import annotations

import logging
import math

from vectorslide.errors import MalformedDocument
from vectorslide.models.document import (
    DEFAULT_INTRINSIC_HEIGHT,
    DEFAULT_INTRINSIC_WIDTH,
    BinaryPassthrough,
    Canvas,
    NormalizedDocument,
    PlacementRect,
)
from vectorslide.svg.parser import parse_length, parse_markup, parse_viewbox

logger = logging.getLogger(__name__)

# Minimum distance between the graphic and any canvas edge
MIN_EDGE = 0.2


def _positive(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def intrinsic_size(markup: str) -> tuple[float, float]:
    """Natural size of a markup document in px.

    Explicit root ``width``/``height`` win, then the ``viewBox`` size, then
    the 576×432 default. Unparseable markup gets the default.
    """
    try:
        root = parse_markup(markup)
    except MalformedDocument:
        return DEFAULT_INTRINSIC_WIDTH, DEFAULT_INTRINSIC_HEIGHT

    width = parse_length(root.get("width"))
    height = parse_length(root.get("height"))
    if _positive(width) and _positive(height):
        return width, height

    vb = parse_viewbox(root.get("viewBox"))
    if vb is not None and _positive(vb[2]) and _positive(vb[3]):
        return vb[2], vb[3]

    logger.debug("No usable size metadata, using %sx%s", DEFAULT_INTRINSIC_WIDTH, DEFAULT_INTRINSIC_HEIGHT)
    return DEFAULT_INTRINSIC_WIDTH, DEFAULT_INTRINSIC_HEIGHT


def fit(intrinsic_width: float, intrinsic_height: float, canvas: Canvas) -> PlacementRect:
    """Aspect-preserving placement of an ``iw``×``ih`` graphic on ``canvas``."""
    if not (_positive(intrinsic_width) and _positive(intrinsic_height)):
        intrinsic_width, intrinsic_height = DEFAULT_INTRINSIC_WIDTH, DEFAULT_INTRINSIC_HEIGHT

    aspect = intrinsic_width / intrinsic_height
    # Ratios that overflow or underflow a float have no usable shape
    if not _positive(aspect):
        logger.warning("Unusable aspect ratio %sx%s, using default size", intrinsic_width, intrinsic_height)
        aspect = DEFAULT_INTRINSIC_WIDTH / DEFAULT_INTRINSIC_HEIGHT
    canvas_ratio = canvas.content_width / canvas.content_height

    if aspect > canvas_ratio:
        w = canvas.content_width
        h = w / aspect
        x = canvas.margin
        y = canvas.margin + (canvas.content_height - h) / 2
    else:
        h = canvas.content_height
        w = h * aspect
        y = canvas.margin
        x = canvas.margin + (canvas.content_width - w) / 2

    # Scale as a whole so the ratio survives the clamp
    max_w = canvas.width - 2 * MIN_EDGE
    max_h = canvas.height - 2 * MIN_EDGE
    scale = min(1.0, max_w / w, max_h / h)
    if scale < 1.0:
        w, h = w * scale, h * scale

    x = max(x, MIN_EDGE)
    y = max(y, MIN_EDGE)
    if x + w > canvas.width - MIN_EDGE:
        x = canvas.width - MIN_EDGE - w
    if y + h > canvas.height - MIN_EDGE:
        y = canvas.height - MIN_EDGE - h

    return PlacementRect(x=x, y=y, w=w, h=h)


def fit_document(document: NormalizedDocument | BinaryPassthrough, canvas: Canvas) -> PlacementRect:
    return fit(document.intrinsic_width, document.intrinsic_height, canvas)
