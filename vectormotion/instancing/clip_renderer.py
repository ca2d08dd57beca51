#!/usr/bin/env python3
"""
Clip Instance Renderer

Maps one ClipTemplate onto one target's bounds. Four strategies:

- SINGLE_SHAPE_NO_SCALE: one shape or path already in absolute coordinates,
  shifted by the template origin when it is non-zero (userSpaceOnUse only).
- RAW_CONTENT_NO_SCALE: raw content used as authored.
- RAW_CONTENT_SCALED: ``translate(tx, ty) scale(sx, sy)`` prepended to each
  top-level child's own transform. Group transforms are not honoured inside
  clipPath by every renderer, so no wrapper group is used.
- PATH_SCALED: path commands rewritten with the same affine.

Scaled output is absolute, so it is always emitted as ``userSpaceOnUse``
whatever units the template was authored in.

Rendering is a pure projection of the stores: every call builds a new tree
and nothing is cached between calls.
"""

from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

from vectormotion.core import get_logger

from .content import animation_node, append_children, begin_value, path_node, prepend_transform, serialize
from .sdk import (
    AnimationRecord,
    BoundingBox,
    ClipStrategy,
    ClipTemplate,
    ContentNode,
    PathContent,
    RawContent,
    RenderableClip,
    ShapeContent,
    format_number as n,
    values_text,
)
from .svg_geom import affine_subpaths

log = get_logger("clip_renderer")

# Scaled strategies bake the fit into absolute user-space coordinates
_UNSCALED = frozenset({ClipStrategy.SINGLE_SHAPE_NO_SCALE, ClipStrategy.RAW_CONTENT_NO_SCALE})


class ClipInstance(NamedTuple):
    template: ClipTemplate
    instance_id: str
    bounds: Optional[BoundingBox]
    element_id: str


def select_strategy(template: ClipTemplate) -> ClipStrategy:
    content = template.content
    if not template.should_scale_to_element:
        if isinstance(content, RawContent):
            return ClipStrategy.RAW_CONTENT_NO_SCALE
        return ClipStrategy.SINGLE_SHAPE_NO_SCALE
    if isinstance(content, PathContent):
        return ClipStrategy.PATH_SCALED
    return ClipStrategy.RAW_CONTENT_SCALED


def fallback_bounds(template: ClipTemplate) -> BoundingBox:
    return BoundingBox(
        min_x=template.origin.x,
        min_y=template.origin.y,
        width=template.local_bounds.width,
        height=template.local_bounds.height,
    )


def fit_transform(template: ClipTemplate, target: BoundingBox) -> Tuple[float, float, float, float]:
    """``(sx, sy, tx, ty)`` mapping local bounds onto ``target``."""
    local = template.local_bounds
    sx = target.width / local.width
    sy = target.height / local.height
    return sx, sy, target.min_x - local.min_x * sx, target.min_y - local.min_y * sy


def _top_level_nodes(template: ClipTemplate) -> List[ContentNode]:
    content = template.content
    if isinstance(content, RawContent):
        return list(content.nodes)
    if isinstance(content, ShapeContent):
        return [content.node]
    return [path_node(content.subpaths)]


def _content_nodes(template: ClipTemplate, strategy: ClipStrategy, target: BoundingBox) -> List[ContentNode]:
    content = template.content

    if strategy == ClipStrategy.SINGLE_SHAPE_NO_SCALE:
        ox, oy = template.origin.x, template.origin.y
        shift = (ox or oy) and template.units == "userSpaceOnUse"
        if isinstance(content, PathContent):
            subpaths = affine_subpaths(content.subpaths, 1, 1, ox, oy) if shift else content.subpaths
            return [path_node(subpaths)]
        if shift:
            return [prepend_transform(content.node, f"translate({n(ox)}, {n(oy)})")]
        return [content.node]

    if strategy == ClipStrategy.RAW_CONTENT_NO_SCALE:
        return list(content.nodes)

    sx, sy, tx, ty = fit_transform(template, target)
    if strategy == ClipStrategy.PATH_SCALED:
        return [path_node(affine_subpaths(content.subpaths, sx, sy, tx, ty))]

    transform = f"translate({n(tx)}, {n(ty)}) scale({n(sx)}, {n(sy)})"
    return [prepend_transform(node, transform) for node in _top_level_nodes(template)]


def record_signature(record: AnimationRecord, begin: str) -> tuple:
    track = record.track
    return (
        track.kind,
        track.attribute_name,
        record.clip_template_id,
        begin,
        track.dur,
        values_text(track.values),
        track.from_value,
        track.to_value,
    )


def owned_records(
    template: ClipTemplate,
    records: Iterable[AnimationRecord],
    delays: Optional[Dict[str, float]] = None,
    default_begin: str = "0s",
) -> List[Tuple[AnimationRecord, str]]:
    """Records belonging to ``template`` with their begin, one per signature."""
    delays = delays or {}
    seen = set()
    out = []
    for record in records:
        if record.clip_template_id != template.id:
            continue
        begin = begin_value(record.track, delays.get(record.id), default_begin)
        sig = record_signature(record, begin)
        if sig in seen:
            continue
        seen.add(sig)
        out.append((record, begin))
    return out


def instantiate_clip(
    template: ClipTemplate,
    target_bounds: Optional[BoundingBox],
    instance_id: str,
    records: Iterable[AnimationRecord] = (),
    delays: Optional[Dict[str, float]] = None,
    restart_key: Optional[int] = None,
    default_begin: str = "0s",
) -> RenderableClip:
    if target_bounds is None:
        log.info(f"No target bounds for {instance_id}; using template bounds")
        target_bounds = fallback_bounds(template)

    strategy = select_strategy(template)
    children = _content_nodes(template, strategy, target_bounds)
    units = template.units if strategy in _UNSCALED else "userSpaceOnUse"

    trailing = []
    for record, begin in owned_records(template, records, delays, default_begin):
        key = f"{record.id}-{restart_key}" if restart_key is not None else None
        anim = animation_node(record.track, begin, key=key)
        idx = record.clip_child_index
        if idx is not None and 0 <= idx < len(children):
            children[idx] = append_children(children[idx], [anim])
        else:
            trailing.append(anim)

    root = ContentNode(
        tag="clipPath",
        attributes={"id": instance_id, "clipPathUnits": units},
        children=tuple(children) + tuple(trailing),
        key=f"{instance_id}-{restart_key}" if restart_key is not None else None,
    )
    return RenderableClip(
        instance_id=instance_id,
        template_id=template.id,
        strategy=strategy,
        units=units,
        node=root,
    )


def serialize_clip(
    template: ClipTemplate,
    target_bounds: Optional[BoundingBox],
    instance_id: str,
    records: Iterable[AnimationRecord] = (),
    delays: Optional[Dict[str, float]] = None,
) -> str:
    return serialize(instantiate_clip(template, target_bounds, instance_id, records, delays).node)


def collect_instances(elements, definitions, geometry) -> List[ClipInstance]:
    """Every (template, instance id, bounds) the current elements reference."""
    instances = []
    seen = set()
    for el in elements.list_elements():
        if not (el.clip_template_id or el.clip_path_id):
            continue
        template = None
        if el.clip_template_id:
            template = definitions.get_clip_definition(el.clip_template_id)
        if template is None and el.clip_path_id:
            template = definitions.get_clip_definition(el.clip_path_id)
        if template is None:
            log.debug(f"{el.id} references a missing clip definition")
            continue
        instance_id = el.clip_path_id or f"{template.id}-{el.id}"
        if instance_id in seen:
            continue
        seen.add(instance_id)
        instances.append(ClipInstance(template, instance_id, geometry.get_bounds(el), el.id))
    return instances
