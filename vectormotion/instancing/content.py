"""
Typed content tree for clip definitions and emitted markup.

Clip markup is parsed once into ContentNode trees; transform injection and
serialization both work on the tree, never on markup text.
"""

import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Tuple
from xml.sax.saxutils import escape, quoteattr

from vectormotion.core import get_logger

from .errors import ContentParseError
from .sdk import ANIMATION_TAGS, SHAPE_TAGS, ContentNode, Subpaths, values_text
from .svg_geom import SVG_NS, subpaths_to_d

log = get_logger("content")

XLINK_NS = "http://www.w3.org/1999/xlink"

# Canonical camel-case spelling for tags ElementTree hands back verbatim
_TAG_CASE = {
    "animatetransform": "animateTransform",
    "animatemotion": "animateMotion",
    "textpath": "textPath",
}


def _local(name: str) -> str:
    if name.startswith("{"):
        ns, _, local = name[1:].partition("}")
        if ns == XLINK_NS:
            return f"xlink:{local}"
        return local
    return name


def _chars(value: Optional[str]) -> Optional[str]:
    """Character data kept verbatim; whitespace-only runs are indentation."""
    return value if value and value.strip() else None


def _convert(el: ET.Element) -> Optional[ContentNode]:
    tag = _local(el.tag)
    if tag.lower() not in SHAPE_TAGS and tag.lower() not in ANIMATION_TAGS:
        log.debug(f"Dropping unsupported clip content tag <{tag}>")
        return None
    attributes: Dict[str, str] = {}
    for name, value in el.attrib.items():
        local = _local(name)
        if local == "xmlns" or local.startswith("xmlns:"):
            continue
        attributes[local] = value
    children = tuple(c for c in (_convert(child) for child in el) if c is not None)
    return ContentNode(
        tag=_TAG_CASE.get(tag.lower(), tag),
        attributes=attributes,
        children=children,
        text=_chars(el.text),
        tail=_chars(el.tail),
    )


def parse_content(markup: str) -> Tuple[ContentNode, ...]:
    """Parse a fragment of SVG shape markup into top-level content nodes."""
    try:
        root = ET.fromstring(f'<svg xmlns="{SVG_NS}" xmlns:xlink="{XLINK_NS}">{markup}</svg>')
    except ET.ParseError as e:
        raise ContentParseError(f"invalid clip markup: {e}") from e
    return tuple(n for n in (_convert(child) for child in root) if n is not None)


def parse_single_shape(markup: str) -> ContentNode:
    nodes = parse_content(markup)
    if len(nodes) != 1:
        raise ContentParseError(f"expected exactly one shape, found {len(nodes)}")
    return nodes[0]


# ============================================================================
# TREE EDITS
# ============================================================================

def with_attributes(node: ContentNode, **updates) -> ContentNode:
    attributes = dict(node.attributes)
    attributes.update({k: v for k, v in updates.items() if v is not None})
    return node.model_copy(update={"attributes": attributes})


def prepend_transform(node: ContentNode, transform: str) -> ContentNode:
    """Put ``transform`` in front of whatever transform the node already carries."""
    existing = node.attributes.get("transform", "").strip()
    combined = f"{transform} {existing}" if existing else transform
    return with_attributes(node, transform=combined)


def append_children(node: ContentNode, children) -> ContentNode:
    if not children:
        return node
    return node.model_copy(update={"children": node.children + tuple(children)})


def path_node(subpaths: Subpaths, **attributes) -> ContentNode:
    attrs = {"d": subpaths_to_d(subpaths)}
    attrs.update({k: v for k, v in attributes.items() if v is not None})
    return ContentNode(tag="path", attributes=attrs)


# ============================================================================
# ANIMATION FRAGMENTS
# ============================================================================

def begin_value(track, delay_ms: Optional[float] = None, default: str = "0s") -> str:
    """Chain delay wins when positive; otherwise the track's own begin."""
    if delay_ms is not None and delay_ms > 0:
        return f"{delay_ms / 1000:.3f}s"
    return track.begin or default


def animation_node(track, begin: str, key: Optional[str] = None) -> ContentNode:
    """Declarative animation element for one resolved track."""
    attrs: Dict[str, str] = {"attributeName": track.attribute_name}
    if track.dur is not None:
        attrs["dur"] = track.dur
    attrs["begin"] = begin
    attrs["fill"] = track.fill.value
    if track.kind != "set":
        attrs["repeatCount"] = str(track.repeat_count)
        attrs["calcMode"] = track.calc_mode.value
        if track.key_times:
            attrs["keyTimes"] = track.key_times
        if track.key_splines:
            attrs["keySplines"] = track.key_splines
    values = values_text(track.values)
    if values is not None:
        attrs["values"] = values
    else:
        if track.from_value is not None:
            attrs["from"] = track.from_value
        if track.to_value is not None:
            attrs["to"] = track.to_value
    if track.kind == "animateTransform":
        attrs["type"] = track.transform_kind.value
    if track.kind != "set" and track.additive is not None:
        attrs["additive"] = track.additive.value
    return ContentNode(tag=track.kind, attributes=attrs, key=key)


# ============================================================================
# SERIALIZATION
# ============================================================================

def serialize(node: ContentNode) -> str:
    attrs = "".join(f" {name}={quoteattr(value)}" for name, value in node.attributes.items())
    if not node.children and node.text is None:
        return f"<{node.tag}{attrs}/>"
    inner: List[str] = []
    if node.text is not None:
        inner.append(escape(node.text))
    for child in node.children:
        inner.append(serialize(child))
        if child.tail is not None:
            inner.append(escape(child.tail))
    return f"<{node.tag}{attrs}>{''.join(inner)}</{node.tag}>"


def serialize_all(nodes) -> str:
    return "".join(serialize(n) + (escape(n.tail) if n.tail is not None else "") for n in nodes)
