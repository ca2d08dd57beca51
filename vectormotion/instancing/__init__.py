"""
vectormotion - Instancing Package

Expands element-agnostic animation and clip templates into element-bound
records, and renders them as a preview tree and as export markup.
"""

from .builder import AnimationInstanceBuilder, target_matches
from .catalog import TemplateCatalog, default_catalog, load_catalog
from .clip_renderer import (
    ClipInstance,
    collect_instances,
    fit_transform,
    instantiate_clip,
    select_strategy,
    serialize_clip,
)
from .content import parse_content, serialize
from .emitter import DualEmitter, Emission, compute_chain_delays
from .errors import ContentParseError, InstancingError, MeasurementError, PlaceholderResolutionError
from .placeholders import PlaceholderResolution, resolve_placeholder
from .presets import CLIP_PRESETS, ClipPreset
from .sdk import (  # Enums; Models; Helpers
    AnimationChain,
    AnimationRecord,
    AnimationTemplate,
    AttributeAnimateTrack,
    BoundingBox,
    ChainEntry,
    ChainTrigger,
    ClipStrategy,
    ClipTemplate,
    ContentNode,
    Element,
    ElementKind,
    PathCommand,
    PathContent,
    PlaceholderTag,
    Point,
    RawContent,
    RenderableClip,
    SetAttributeTrack,
    ShapeContent,
    TargetKind,
    TransformAnimateTrack,
    TransformKind,
    parse_values,
)
from .stores import AnimationStore, DefinitionStore, ElementStore
from .svg_geom import GeometryQuery, measure_path_length
from .transform_resolver import resolve_centered_transform

__all__ = [
    "AnimationInstanceBuilder",
    "target_matches",
    "TemplateCatalog",
    "default_catalog",
    "load_catalog",
    "ClipInstance",
    "collect_instances",
    "fit_transform",
    "instantiate_clip",
    "select_strategy",
    "serialize_clip",
    "parse_content",
    "serialize",
    "DualEmitter",
    "Emission",
    "compute_chain_delays",
    "ContentParseError",
    "InstancingError",
    "MeasurementError",
    "PlaceholderResolutionError",
    "PlaceholderResolution",
    "resolve_placeholder",
    "CLIP_PRESETS",
    "ClipPreset",
    "AnimationChain",
    "AnimationRecord",
    "AnimationTemplate",
    "AttributeAnimateTrack",
    "BoundingBox",
    "ChainEntry",
    "ChainTrigger",
    "ClipStrategy",
    "ClipTemplate",
    "ContentNode",
    "Element",
    "ElementKind",
    "PathCommand",
    "PathContent",
    "PlaceholderTag",
    "Point",
    "RawContent",
    "RenderableClip",
    "SetAttributeTrack",
    "ShapeContent",
    "TargetKind",
    "TransformAnimateTrack",
    "TransformKind",
    "parse_values",
    "AnimationStore",
    "DefinitionStore",
    "ElementStore",
    "GeometryQuery",
    "measure_path_length",
    "resolve_centered_transform",
]
