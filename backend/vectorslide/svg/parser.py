"""SVG parser — hardened lxml facade shared by every markup stage.

Converts raw SVG text → lxml element tree and back. Parsing never resolves
entities, never touches the network and never loads a DTD.
"""

from __future__ import annotations

import logging
import math
import re

from lxml import etree

from vectorslide.errors import MalformedDocument

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"
XML_NS = "http://www.w3.org/XML/1998/namespace"

XLINK_HREF = f"{{{XLINK_NS}}}href"

# An encoding declaration is illegal in an already-decoded str for lxml
_XML_DECL_RE = re.compile(r"^\s*<\?xml[^>]*\?>", re.IGNORECASE)
_ROOT_XMLNS_RE = re.compile(r'\sxmlns="http://www\.w3\.org/2000/svg"')
_VIEWBOX_SPLIT_RE = re.compile(r"[\s,]+")
_LENGTH_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([a-zA-Z%]*)\s*$")

# CSS absolute units → px (96 dpi)
UNITS_TO_PX = {
    "": 1.0,
    "px": 1.0,
    "pt": 96 / 72,
    "pc": 16.0,
    "mm": 96 / 25.4,
    "cm": 96 / 2.54,
    "in": 96.0,
}


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        huge_tree=False,
        remove_blank_text=False,
    )


def parse_markup(markup: str) -> etree._Element:
    """Parse SVG text into an element tree; raises MalformedDocument."""
    if not markup or not markup.strip():
        raise MalformedDocument("Empty document")
    text = _XML_DECL_RE.sub("", markup, count=1)
    try:
        root = etree.fromstring(text.encode("utf-8"), parser=_make_parser())
    except etree.XMLSyntaxError as e:
        raise MalformedDocument(f"Invalid XML: {e}") from e
    if root is None or not isinstance(root.tag, str):
        raise MalformedDocument("No root element")
    if localname(root.tag) != "svg":
        raise MalformedDocument(f"Root element is <{localname(root.tag)}>, expected <svg>")
    return root


def serialize(root: etree._Element) -> str:
    """Serialize the root element only (no prolog, no DOCTYPE).

    The default SVG namespace declaration is always emitted first so the
    output starts with ``<svg xmlns="http://www.w3.org/2000/svg"``.
    """
    text = etree.tostring(root, encoding="unicode")
    end = text.find(">")
    head, rest = text[:end], text[end:]
    if _ROOT_XMLNS_RE.search(head) and not head.startswith(f'<svg xmlns="{SVG_NS}"'):
        head = _ROOT_XMLNS_RE.sub("", head, count=1)
        head = head.replace("<svg", f'<svg xmlns="{SVG_NS}"', 1)
    return head + rest


def localname(tag: str) -> str:
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def namespace(tag: str) -> str | None:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def svg_tag(name: str) -> str:
    return f"{{{SVG_NS}}}{name}"


def iter_elements(root: etree._Element):
    """Iterate real elements (skips comments, PIs and entity nodes)."""
    for el in root.iter():
        if isinstance(el.tag, str):
            yield el


def remove_element(el: etree._Element) -> None:
    """Detach an element, keeping its tail text attached to the document."""
    parent = el.getparent()
    if parent is None:
        return
    if el.tail:
        prev = el.getprevious()
        if prev is not None:
            prev.tail = (prev.tail or "") + el.tail
        else:
            parent.text = (parent.text or "") + el.tail
    parent.remove(el)


def parse_style(style: str) -> dict[str, str]:
    """Parse an inline ``style`` declaration list into an ordered dict."""
    out: dict[str, str] = {}
    for chunk in style.split(";"):
        if ":" not in chunk:
            continue
        key, value = chunk.split(":", 1)
        key, value = key.strip(), value.strip()
        if key and value:
            out[key] = value
    return out


def serialize_style(decls: dict[str, str]) -> str:
    return ";".join(f"{k}:{v}" for k, v in decls.items())


def parse_length(value: str | None) -> float | None:
    """Convert an SVG length to px. Percentages and unknown units give None."""
    if not value:
        return None
    m = _LENGTH_RE.match(value)
    if not m:
        return None
    unit = m.group(2).lower()
    factor = UNITS_TO_PX.get(unit)
    if factor is None:
        return None
    number = float(m.group(1)) * factor
    if not math.isfinite(number):
        return None
    return number


def parse_viewbox(value: str | None) -> tuple[float, float, float, float] | None:
    if not value:
        return None
    parts = [p for p in _VIEWBOX_SPLIT_RE.split(value.strip()) if p]
    if len(parts) != 4:
        return None
    try:
        nums = tuple(float(p) for p in parts)
    except ValueError:
        return None
    if not all(math.isfinite(n) for n in nums):
        return None
    return nums  # type: ignore[return-value]


def format_number(value: float, precision: int) -> str:
    """Fixed-precision float with trailing zeros and ``-0`` stripped."""
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text
