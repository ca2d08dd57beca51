#!/usr/bin/env python3
"""
Animation Instance Builder

Expands a catalog template into concrete AnimationRecords for each target
element. This is the only write path of the engine: records are appended to
the animation store, reveal clips to the definition store, and placeholder
pre-conditions (path dash setup) and clip references to the element store.
"""

import uuid
from typing import Callable, Iterable, List, Optional

from vectormotion.config.schemas import EngineConfig
from vectormotion.core import get_logger

from .catalog import TemplateCatalog
from .errors import InstancingError, PlaceholderResolutionError
from .placeholders import resolve_placeholder
from .sdk import (
    REVEAL_CLIP_PREFIX,
    AnimationRecord,
    AnimationTemplate,
    BoundingBox,
    ClipTemplate,
    ContentNode,
    Element,
    ElementKind,
    Point,
    ShapeContent,
    TargetKind,
    TransformAnimateTrack,
    UnknownValues,
    format_number,
)
from .stores import AnimationStore, DefinitionStore, ElementStore
from .svg_geom import GeometryQuery
from .transform_resolver import resolve_centered_transform

log = get_logger("builder")


def _new_id() -> str:
    return uuid.uuid4().hex


def target_matches(target_kind: TargetKind, element: Element) -> bool:
    if target_kind == TargetKind.ANY:
        return True
    if target_kind == TargetKind.TEXT:
        return element.kind == ElementKind.TEXT
    return element.kind == ElementKind.PATH


class AnimationInstanceBuilder:
    def __init__(
        self,
        catalog: TemplateCatalog,
        elements: ElementStore,
        animations: AnimationStore,
        definitions: DefinitionStore,
        geometry: Optional[GeometryQuery] = None,
        config: Optional[EngineConfig] = None,
        id_factory: Callable[[], str] = _new_id,
    ):
        self.catalog = catalog
        self.elements = elements
        self.animations = animations
        self.definitions = definitions
        self.geometry = geometry or GeometryQuery(elements)
        self.config = config or EngineConfig()
        self.id_factory = id_factory

    # ------------------------------------------------------------------
    # Apply
    # ------------------------------------------------------------------

    def apply_template(self, template_id: str, target_ids: Optional[Iterable[str]] = None) -> List[AnimationRecord]:
        """Append records for ``template_id`` on each target (default: selection).

        Re-applying always adds new records. Returns the records created.
        """
        template = self.catalog.get_template(template_id)
        if template is None:
            log.warning(f"Unknown animation template: {template_id}")
            return []
        targets = list(target_ids) if target_ids is not None else self.elements.list_selected()

        created: List[AnimationRecord] = []
        for element_id in targets:
            element = self.elements.get_element(element_id)
            if element is None:
                log.warning(f"Target {element_id} not found; skipped")
                continue
            if not target_matches(template.target_kind, element):
                log.debug(f"{template.id} targets {template.target_kind.value}; skipping {element.kind.value} {element.id}")
                continue

            bounds = self.geometry.get_bounds(element)
            if template.is_clip_driven:
                record = self._apply_clip_reveal(template, element, bounds)
                if record is not None:
                    created.append(record)
                continue

            for track in template.tracks:
                try:
                    resolved = self._resolve_track(track, element, bounds)
                except InstancingError as e:
                    log.error(f"{template.id}: dropped {track.attribute_name} track on {element.id}: {e}")
                    continue
                for concrete in resolved:
                    created.append(self._add_record(concrete, element.id))

        log.info(f"Applied {template.id} to {len(targets)} target(s): {len(created)} record(s)")
        return created

    def _add_record(self, track, element_id: str, clip_id: Optional[str] = None, child_index: Optional[int] = None):
        record = AnimationRecord(
            id=self.id_factory(),
            track=track,
            target_element_id=element_id,
            clip_template_id=clip_id,
            clip_child_index=child_index,
        )
        return self.animations.add_animation_record(record)

    def _resolve_track(self, track, element: Element, bounds: Optional[BoundingBox]) -> list:
        if isinstance(track, TransformAnimateTrack) and (track.is_centered_scale or track.is_centered_rotate):
            if bounds is None:
                log.info(f"No bounds for {element.id}; centering on origin")
            centroid = bounds.centroid if bounds is not None else Point(x=0, y=0)
            return resolve_centered_transform(track, centroid, self.config.transforms.translate_precision)

        tag = track.placeholder
        if tag is not None:
            try:
                resolution = resolve_placeholder(tag, element, bounds, self.config.placeholders)
            except PlaceholderResolutionError as e:
                log.error(f"Placeholder resolution failed, dropping track: {e}")
                return []
            if resolution is None:
                log.debug(f"{tag.value} does not apply to {element.kind.value} {element.id}; track dropped")
                return []
            if resolution.element_patch:
                self.elements.update_element_data(element.id, resolution.element_patch)
            return [track.with_values(resolution.values)]

        if isinstance(track.values, UnknownValues):
            log.warning(f"Unknown placeholder {track.values.raw!r} on {track.attribute_name}; copied verbatim")
        return [track]

    def _apply_clip_reveal(
        self, template: AnimationTemplate, element: Element, bounds: Optional[BoundingBox]
    ) -> Optional[AnimationRecord]:
        if bounds is None or bounds.width <= 0 or bounds.height <= 0:
            log.warning(f"{template.id} needs measurable bounds; {element.id} skipped")
            return None

        spec = template.clip_reveal
        resolved = self._resolve_track(spec.track, element, bounds)
        if not resolved:
            log.warning(f"{template.id}: reveal track did not resolve for {element.id}")
            return None

        pad = self.config.clips.reveal_padding_px
        clip_id = f"{REVEAL_CLIP_PREFIX}-{self.id_factory()}"
        shape = ContentNode(
            tag=spec.shape_tag,
            attributes={
                "x": format_number(bounds.min_x),
                "y": format_number(bounds.min_y - pad),
                "width": format_number(bounds.width),
                "height": format_number(bounds.height + 2 * pad),
            },
        )
        clip = ClipTemplate(
            id=clip_id,
            name=f"{template.name} reveal",
            local_bounds=BoundingBox(min_x=0, min_y=0, width=bounds.width, height=bounds.height),
            origin=Point(x=0, y=0),
            units=self.config.clips.default_units,
            should_scale_to_element=False,
            content=ShapeContent(node=shape),
        )
        self.definitions.add_clip_definition(clip)
        self.elements.update_element_data(
            element.id, {"clip_path_id": f"{clip_id}-{element.id}", "clip_template_id": clip_id}
        )
        return self._add_record(resolved[0], element.id, clip_id=clip_id, child_index=0)

    # ------------------------------------------------------------------
    # Remove
    # ------------------------------------------------------------------

    def remove_records_for_targets(self, element_ids: Iterable[str]) -> int:
        return self.animations.remove_records_for_targets(element_ids)

    def clear_from_selection(self) -> int:
        return self.remove_records_for_targets(self.elements.list_selected())
