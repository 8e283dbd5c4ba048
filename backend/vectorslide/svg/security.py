"""Security filter — allow-list sanitizer for untrusted SVG.

Keeps the static-graphics subset of SVG (shapes, paint servers, text,
filter primitives, styling) and drops everything that can run code, load
external resources or animate. Elements outside the allow-list are removed
together with their subtree.
"""

from __future__ import annotations

import logging
import re

import tinycss2
from lxml import etree

from vectorslide.errors import MalformedDocument
from vectorslide.svg.parser import (
    SVG_NS,
    XLINK_NS,
    XML_NS,
    localname,
    namespace,
    parse_markup,
    remove_element,
    serialize,
)

logger = logging.getLogger(__name__)

ALLOWED_ELEMENTS = frozenset({
    "svg", "g", "defs", "symbol", "use", "switch", "a", "view",
    "title", "desc", "metadata", "style",
    "path", "rect", "circle", "ellipse", "line", "polyline", "polygon",
    "text", "tspan", "textPath", "tref",
    "image", "marker", "mask", "pattern", "clipPath",
    "linearGradient", "radialGradient", "stop",
    # Filter primitives
    "filter", "feBlend", "feColorMatrix", "feComponentTransfer", "feComposite",
    "feConvolveMatrix", "feDiffuseLighting", "feDisplacementMap",
    "feDistantLight", "feDropShadow", "feFlood", "feFuncA", "feFuncB",
    "feFuncG", "feFuncR", "feGaussianBlur", "feImage", "feMerge",
    "feMergeNode", "feMorphology", "feOffset", "fePointLight",
    "feSpecularLighting", "feSpotLight", "feTile", "feTurbulence",
})

# Rejected even if listed in ALLOWED_ELEMENTS
FORBIDDEN_ELEMENTS = frozenset({
    "script", "iframe", "object", "embed", "link", "foreignObject",
    "handler", "listener",
    "animate", "animateColor", "animateMotion", "animateTransform", "set",
})

ALLOWED_ATTRIBUTES = frozenset({
    # Core / structure
    "id", "class", "style", "lang", "tabindex", "role", "version",
    "viewBox", "preserveAspectRatio", "width", "height", "x", "y",
    "transform", "href", "display", "visibility", "overflow",
    "systemLanguage", "requiredFeatures", "requiredExtensions",
    "baseProfile", "zoomAndPan", "enable-background",
    # Geometry
    "d", "points", "cx", "cy", "r", "rx", "ry", "x1", "y1", "x2", "y2",
    "fx", "fy", "fr", "pathLength",
    # Paint / presentation
    "fill", "fill-opacity", "fill-rule", "stroke", "stroke-width",
    "stroke-linecap", "stroke-linejoin", "stroke-miterlimit",
    "stroke-dasharray", "stroke-dashoffset", "stroke-opacity", "opacity",
    "color", "color-interpolation", "color-interpolation-filters",
    "color-rendering", "shape-rendering", "image-rendering",
    "text-rendering", "vector-effect", "paint-order", "mix-blend-mode",
    "isolation", "clip-path", "clip-rule", "clipPathUnits", "mask",
    "maskUnits", "maskContentUnits", "filter", "filterUnits",
    "primitiveUnits", "marker-start", "marker-mid", "marker-end",
    "markerWidth", "markerHeight", "markerUnits", "refX", "refY", "orient",
    "patternUnits", "patternContentUnits", "patternTransform",
    "gradientUnits", "gradientTransform", "spreadMethod", "offset",
    "stop-color", "stop-opacity", "flood-color", "flood-opacity",
    "lighting-color",
    # Text
    "font-family", "font-size", "font-size-adjust", "font-stretch",
    "font-style", "font-variant", "font-weight", "text-anchor",
    "text-decoration", "dominant-baseline", "alignment-baseline",
    "baseline-shift", "letter-spacing", "word-spacing", "writing-mode",
    "direction", "unicode-bidi", "dx", "dy", "rotate", "textLength",
    "lengthAdjust", "startOffset", "method", "spacing", "side",
    # Filter primitive attributes
    "in", "in2", "result", "mode", "type", "values", "tableValues",
    "slope", "intercept", "amplitude", "exponent", "operator", "k1", "k2",
    "k3", "k4", "order", "kernelMatrix", "divisor", "bias", "targetX",
    "targetY", "edgeMode", "kernelUnitLength", "preserveAlpha",
    "surfaceScale", "diffuseConstant", "specularConstant",
    "specularExponent", "scale", "xChannelSelector", "yChannelSelector",
    "azimuth", "elevation", "z", "pointsAtX", "pointsAtY", "pointsAtZ",
    "limitingConeAngle", "stdDeviation", "radius", "baseFrequency",
    "numOctaves", "seed", "stitchTiles",
})

_ALLOWED_NS_ATTRIBUTES = frozenset({
    f"{{{XLINK_NS}}}href",
    f"{{{XLINK_NS}}}title",
    f"{{{XML_NS}}}space",
    f"{{{XML_NS}}}lang",
})

_HREF_ATTRS = ("href", f"{{{XLINK_NS}}}href")
_SAFE_DATA_IMAGE_RE = re.compile(r"^data:image/(?:png|jpe?g|gif|webp|bmp);base64,", re.IGNORECASE)
_ACTIVE_VALUE_RE = re.compile(r"(?:java|vb)script\s*:|expression\s*\(", re.IGNORECASE)
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x20]+")

# CSS functions that fetch or evaluate something besides url()
_UNSAFE_CSS_FUNCTIONS = frozenset({
    "expression", "image", "image-set", "-webkit-image-set", "cross-fade", "element",
})
_UNSAFE_CSS_PROPERTIES = frozenset({"behavior", "-moz-binding"})


def sanitize_markup(markup: str) -> str:
    """Return ``markup`` restricted to the safe SVG profile.

    Raises MalformedDocument when the input is not a parseable SVG document.
    """
    root = parse_markup(markup)
    if namespace(root.tag) not in (None, SVG_NS):
        raise MalformedDocument(f"Root element is in foreign namespace {namespace(root.tag)!r}")
    removed_elements, removed_attrs = _sanitize_tree(root)
    if removed_elements or removed_attrs:
        logger.info(
            "Security filter removed %d elements, %d attributes",
            removed_elements,
            removed_attrs,
        )
    return serialize(root)


def _sanitize_tree(root: etree._Element) -> tuple[int, int]:
    removed_elements = 0
    removed_attrs = 0

    # Snapshot first: removing nodes while iterating lxml trees skips siblings
    for node in list(root.iter()):
        if node is not root and _is_detached(node, root):
            continue
        if not isinstance(node.tag, str):
            # Comments survive here; the optimizer decides about them
            if node.tag is etree.Comment:
                continue
            remove_element(node)
            continue
        if not _element_allowed(node):
            logger.debug("Dropping element <%s>", localname(node.tag))
            remove_element(node)
            removed_elements += 1
            continue
        removed_attrs += _sanitize_attributes(node)
        if localname(node.tag) == "style" and node.text:
            node.text = _sanitize_css(node.text)

    return removed_elements, removed_attrs


def _is_detached(node: etree._Element, root: etree._Element) -> bool:
    """True when an ancestor of ``node`` was already removed from ``root``."""
    parent = node.getparent()
    while parent is not None:
        if parent is root:
            return False
        parent = parent.getparent()
    return True


def _element_allowed(el: etree._Element) -> bool:
    ns = namespace(el.tag)
    if ns not in (None, SVG_NS):
        return False
    name = localname(el.tag)
    if name in FORBIDDEN_ELEMENTS:
        return False
    return name in ALLOWED_ELEMENTS


def _sanitize_attributes(el: etree._Element) -> int:
    removed = 0
    for name in list(el.attrib.keys()):
        value = el.attrib[name]
        if not _attribute_allowed(name):
            del el.attrib[name]
            removed += 1
            continue
        compact = _CONTROL_CHARS_RE.sub("", value)
        if name in _HREF_ATTRS:
            if not _href_allowed(compact):
                del el.attrib[name]
                removed += 1
            continue
        if name == "style":
            cleaned, dropped = _sanitize_declarations(value)
            if dropped:
                logger.debug("Dropped %d unsafe declarations from style attribute", dropped)
                if cleaned:
                    el.set(name, cleaned)
                else:
                    del el.attrib[name]
                removed += 1
            continue
        if _ACTIVE_VALUE_RE.search(compact) or _has_unsafe_reference(tinycss2.parse_component_value_list(value)):
            del el.attrib[name]
            removed += 1
    return removed


def _attribute_allowed(name: str) -> bool:
    if name.startswith("{"):
        return name in _ALLOWED_NS_ATTRIBUTES
    lowered = name.lower()
    if lowered.startswith("on"):
        return False
    if lowered.startswith(("aria-", "data-")):
        return True
    return name in ALLOWED_ATTRIBUTES


def _href_allowed(value: str) -> bool:
    if value.startswith("#"):
        return True
    return bool(_SAFE_DATA_IMAGE_RE.match(value))


def _sanitize_css(css: str) -> str:
    """Keep plain style rules and their safe declarations.

    At-rules (``@import``, ``@font-face``, ``@media`` ...) are dropped whole.
    tinycss2 decodes escapes, so ``@imp\\ort`` and ``u\\rl(`` are caught too.
    """
    kept: list[str] = []
    for node in tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True):
        if node.type == "at-rule":
            logger.debug("Dropping @%s rule from stylesheet", node.lower_at_keyword)
            continue
        if node.type != "qualified-rule" or _has_unsafe_reference(node.prelude):
            continue
        declarations, _ = _sanitize_declarations(node.content)
        if declarations:
            kept.append(f"{tinycss2.serialize(node.prelude).strip()} {{ {declarations} }}")
    return "\n".join(kept)


def _sanitize_declarations(block) -> tuple[str, int]:
    """Serialize the safe declarations of ``block``; also returns how many were dropped."""
    parts: list[str] = []
    dropped = 0
    for node in tinycss2.parse_declaration_list(block, skip_comments=True, skip_whitespace=True):
        if node.type != "declaration":
            dropped += 1
            continue
        if node.lower_name in _UNSAFE_CSS_PROPERTIES or _has_unsafe_reference(node.value):
            dropped += 1
            continue
        value = tinycss2.serialize(node.value).strip()
        if node.important:
            value += " !important"
        parts.append(f"{tinycss2.serialize_identifier(node.lower_name)}:{value}")
    return ";".join(parts), dropped


def _has_unsafe_reference(tokens) -> bool:
    """True when ``tokens`` load anything but a same-document fragment."""
    for token in tokens:
        if token.type == "url":
            if not token.value.strip().startswith("#"):
                return True
        elif token.type == "function":
            if token.lower_name in _UNSAFE_CSS_FUNCTIONS:
                return True
            if token.lower_name in ("url", "src") and not _fragment_argument(token.arguments):
                return True
            if _has_unsafe_reference(token.arguments):
                return True
        elif token.type in ("() block", "[] block", "{} block"):
            if _has_unsafe_reference(token.content):
                return True
    return False


def _fragment_argument(arguments) -> bool:
    values = [t for t in arguments if t.type not in ("whitespace", "comment")]
    return (
        len(values) == 1
        and values[0].type == "string"
        and values[0].value.strip().startswith("#")
    )
