#!/usr/bin/env python3
"""
Template catalog

A read-only collection of animation templates, clip presets and clip
templates. A catalog is built once and passed to the builder; there is no
process-wide catalog.
"""

from types import MappingProxyType
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError

from vectormotion.core import get_logger, load_yaml

from .content import parse_content, parse_single_shape
from .errors import ContentParseError
from .presets import ANIMATION_PRESETS, CLIP_PRESETS, ClipPreset
from .sdk import AnimationTemplate, BoundingBox, ClipTemplate, RawContent, ShapeContent
from .svg_geom import markup_bounds

log = get_logger("catalog")


class TemplateCatalog:
    def __init__(
        self,
        templates: Iterable[AnimationTemplate] = (),
        clip_presets: Iterable[ClipPreset] = (),
        clip_templates: Iterable[ClipTemplate] = (),
    ):
        self._templates = MappingProxyType(_index(templates, "animation template"))
        self._clip_presets = MappingProxyType(_index(clip_presets, "clip preset"))
        self._clip_templates = MappingProxyType(_index(clip_templates, "clip template"))

    def get_template(self, template_id: str) -> Optional[AnimationTemplate]:
        return self._templates.get(template_id)

    def list_templates(self) -> List[AnimationTemplate]:
        return list(self._templates.values())

    def get_clip_preset(self, preset_id: str) -> Optional[ClipPreset]:
        return self._clip_presets.get(preset_id)

    def list_clip_presets(self) -> List[ClipPreset]:
        return list(self._clip_presets.values())

    def get_clip_template(self, clip_id: str) -> Optional[ClipTemplate]:
        return self._clip_templates.get(clip_id)

    def list_clip_templates(self) -> List[ClipTemplate]:
        return list(self._clip_templates.values())

    def __contains__(self, template_id) -> bool:
        return template_id in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def merged(self, other: "TemplateCatalog") -> "TemplateCatalog":
        """New catalog holding both; ids must not collide."""
        return TemplateCatalog(
            self.list_templates() + other.list_templates(),
            self.list_clip_presets() + other.list_clip_presets(),
            self.list_clip_templates() + other.list_clip_templates(),
        )


def _index(items, what: str) -> Dict:
    out = {}
    for item in items:
        if item.id in out:
            raise ValueError(f"Duplicate {what} id: {item.id}")
        out[item.id] = item
    return out


def default_catalog() -> TemplateCatalog:
    templates = [AnimationTemplate.model_validate(p) for p in ANIMATION_PRESETS]
    return TemplateCatalog(templates, CLIP_PRESETS)


def _clip_from_yaml(raw: dict) -> ClipTemplate:
    raw = dict(raw)
    if "shape" in raw:
        markup = raw.pop("shape")
        content = ShapeContent(node=parse_single_shape(markup))
    elif "markup" in raw:
        markup = raw.pop("markup")
        content = RawContent(nodes=parse_content(markup))
    else:
        raise ContentParseError(f"clip {raw.get('id')!r} needs 'shape' or 'markup'")
    if "local_bounds" not in raw:
        bounds = markup_bounds(markup)
        if bounds is None:
            raise ContentParseError(f"clip {raw.get('id')!r} has no measurable bounds")
        raw["local_bounds"] = bounds
    elif isinstance(raw["local_bounds"], (list, tuple)):
        x, y, w, h = raw["local_bounds"]
        raw["local_bounds"] = BoundingBox(min_x=x, min_y=y, width=w, height=h)
    raw["content"] = content
    return ClipTemplate.model_validate(raw)


def load_catalog(path: str, include_defaults: bool = True) -> TemplateCatalog:
    """Load templates and clips from a YAML file.

    The file holds ``templates:`` (AnimationTemplate mappings) and ``clips:``
    (clip mappings with ``shape`` or ``markup`` content).
    """
    data = load_yaml(path)
    try:
        templates = [AnimationTemplate.model_validate(t) for t in data.get("templates") or []]
        clips = [_clip_from_yaml(c) for c in data.get("clips") or []]
    except ValidationError as e:
        log.error(f"Template catalog validation failed for {path}: {e}")
        raise
    log.info(f"Loaded {len(templates)} template(s) and {len(clips)} clip(s) from {path}")
    loaded = TemplateCatalog(templates, clip_templates=clips)
    return default_catalog().merged(loaded) if include_defaults else loaded
