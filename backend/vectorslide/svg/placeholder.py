"""Diagnostic placeholder document shown in place of an unusable input."""

from __future__ import annotations

import re

from lxml import etree

from vectorslide.svg.parser import SVG_NS, serialize, svg_tag

PLACEHOLDER_WIDTH = 400
PLACEHOLDER_HEIGHT = 300

_MAX_MESSAGE_LEN = 60
_NON_XML_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def placeholder_svg(message: str = "", title: str = "SVG Processing Error") -> str:
    """Build a 400×300 SVG with a framed rectangle and an explanatory label."""
    root = etree.Element(svg_tag("svg"), nsmap={None: SVG_NS})
    root.set("width", str(PLACEHOLDER_WIDTH))
    root.set("height", str(PLACEHOLDER_HEIGHT))
    root.set("viewBox", f"0 0 {PLACEHOLDER_WIDTH} {PLACEHOLDER_HEIGHT}")

    rect = etree.SubElement(root, svg_tag("rect"))
    rect.set("width", str(PLACEHOLDER_WIDTH))
    rect.set("height", str(PLACEHOLDER_HEIGHT))
    rect.set("fill", "#f8f9fa")
    rect.set("stroke", "#dee2e6")

    _label(root, title, y=140, size=14, fill="#6c757d")
    message = _NON_XML_CHARS_RE.sub("", message or "").strip()
    if message:
        if len(message) > _MAX_MESSAGE_LEN:
            message = message[: _MAX_MESSAGE_LEN - 1] + "…"
        _label(root, message, y=160, size=12, fill="#868e96")
    return serialize(root)


def _label(root: etree._Element, text: str, *, y: int, size: int, fill: str) -> None:
    el = etree.SubElement(root, svg_tag("text"))
    el.set("x", str(PLACEHOLDER_WIDTH // 2))
    el.set("y", str(y))
    el.set("text-anchor", "middle")
    el.set("font-size", str(size))
    el.set("font-family", "Arial, sans-serif")
    el.set("fill", fill)
    el.text = text
