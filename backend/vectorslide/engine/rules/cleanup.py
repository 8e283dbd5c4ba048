"""Non-destructive cleanup rules shared by every profile."""

from __future__ import annotations

import re

from lxml import etree

from vectorslide.engine.context import OptimizationContext
from vectorslide.engine.registry import Stage, rule
from vectorslide.svg.parser import SVG_NS, localname, namespace, remove_element

# Namespaces written by authoring tools; nothing in them affects rendering
EDITOR_NAMESPACES = frozenset({
    "http://creativecommons.org/ns#",
    "http://inkscape.sourceforge.net/DTD/sodipodi-0.dtd",
    "http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd",
    "http://www.inkscape.org/namespaces/inkscape",
    "http://ns.adobe.com/AdobeIllustrator/10.0/",
    "http://ns.adobe.com/AdobeSVGViewerExtensions/3.0/",
    "http://ns.adobe.com/Extensibility/1.0/",
    "http://ns.adobe.com/Flows/1.0/",
    "http://ns.adobe.com/GenericCustomNamespace/1.0/",
    "http://ns.adobe.com/Graphs/1.0/",
    "http://ns.adobe.com/ImageReplacement/1.0/",
    "http://ns.adobe.com/SaveForWeb/1.0/",
    "http://ns.adobe.com/Variables/1.0/",
    "http://ns.adobe.com/XPath/1.0/",
    "http://ns.adobe.com/xap/1.0/",
    "http://ns.adobe.com/xap/1.0/mm/",
    "http://ns.adobe.com/xap/1.0/sType/ResourceEvent#",
    "http://purl.org/dc/elements/1.1/",
    "http://schemas.microsoft.com/visio/2003/SVGExtensions/",
    "http://taptrix.com/vectorillustrator/svg_extensions",
    "http://www.bohemiancoding.com/sketch/ns",
    "http://www.figma.com/figma/ns",
    "http://www.serif.com/",
    "http://www.vector.evaxdesign.sk",
    "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
})

_WHITESPACE_RE = re.compile(r"\s+")


def _remove_nodes(ctx: OptimizationContext, predicate) -> int:
    doomed = [node for node in ctx.root.iter() if node is not ctx.root and predicate(node)]
    for node in doomed:
        remove_element(node)
    return len(doomed)


@rule(id="remove_doctype", stage=Stage.CLEANUP, description="Drop DOCTYPE and entity references")
def remove_doctype(ctx: OptimizationContext) -> int:
    ctx.root.getroottree().docinfo.clear()
    return _remove_nodes(ctx, lambda n: n.tag is etree.Entity)


@rule(id="remove_xml_proc_inst", stage=Stage.CLEANUP, description="Drop processing instructions")
def remove_xml_proc_inst(ctx: OptimizationContext) -> int:
    return _remove_nodes(ctx, lambda n: n.tag is etree.PI)


@rule(id="remove_comments", stage=Stage.CLEANUP, description="Drop XML comments")
def remove_comments(ctx: OptimizationContext) -> int:
    return _remove_nodes(ctx, lambda n: n.tag is etree.Comment)


@rule(id="remove_metadata", stage=Stage.CLEANUP, description="Drop <metadata> blocks")
def remove_metadata(ctx: OptimizationContext) -> int:
    return _remove_nodes(
        ctx,
        lambda n: isinstance(n.tag, str) and localname(n.tag) == "metadata" and namespace(n.tag) in (None, SVG_NS),
    )


@rule(id="remove_editors_ns_data", stage=Stage.CLEANUP, description="Drop authoring-tool elements and attributes")
def remove_editors_ns_data(ctx: OptimizationContext) -> int:
    removed = _remove_nodes(ctx, lambda n: isinstance(n.tag, str) and namespace(n.tag) in EDITOR_NAMESPACES)
    for el in ctx.root.iter():
        if not isinstance(el.tag, str):
            continue
        for name in list(el.attrib.keys()):
            if namespace(name) in EDITOR_NAMESPACES:
                del el.attrib[name]
                removed += 1
    etree.cleanup_namespaces(ctx.root)
    return removed


@rule(id="cleanup_attrs", stage=Stage.CLEANUP, description="Collapse whitespace in attribute values")
def cleanup_attrs(ctx: OptimizationContext) -> int:
    changed = 0
    for el in ctx.root.iter():
        if not isinstance(el.tag, str):
            continue
        for name, value in el.attrib.items():
            cleaned = _WHITESPACE_RE.sub(" ", value).strip()
            if cleaned != value:
                el.set(name, cleaned)
                changed += 1
    return changed
