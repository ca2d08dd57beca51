#!/usr/bin/env python3
"""
Core SDK for the template-to-instance engine

This module provides the single source of truth for types, constants and
naming. Every instancing module imports its models from here to avoid drift.

Templates are authored in an abstract space (keyframes that know nothing about
their target); records are the concrete, element-bound result of resolving a
template against one target.
"""

import math
from enum import Enum
from typing import Annotated, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from vectormotion.config.schemas import ClipUnits


# ============================================================================
# CONSTANTS
# ============================================================================

PLACEHOLDER_PREFIX = "DYNAMIC_"
REVEAL_CLIP_PREFIX = "clip-reveal"
INDEFINITE = "indefinite"

# Shape and text elements allowed inside a clip definition (lowercase)
SHAPE_TAGS = frozenset(
    {"rect", "circle", "ellipse", "path", "polygon", "polyline", "line", "text", "tspan", "textpath", "g", "use"}
)
# Declarative animation elements that may be nested inside shapes
ANIMATION_TAGS = frozenset({"animate", "animatetransform", "animatemotion", "set"})


# ============================================================================
# ENUMS
# ============================================================================

class TrackKind(str, Enum):
    ATTRIBUTE_ANIMATE = "animate"
    TRANSFORM_ANIMATE = "animateTransform"
    SET_ATTRIBUTE = "set"


class TransformKind(str, Enum):
    TRANSLATE = "translate"
    SCALE = "scale"
    ROTATE = "rotate"
    SKEW_X = "skewX"
    SKEW_Y = "skewY"


class CalcMode(str, Enum):
    LINEAR = "linear"
    DISCRETE = "discrete"
    PACED = "paced"
    SPLINE = "spline"


class FillMode(str, Enum):
    FREEZE = "freeze"
    REMOVE = "remove"


class Additive(str, Enum):
    REPLACE = "replace"
    SUM = "sum"


class TargetKind(str, Enum):
    ANY = "any"
    TEXT = "text"
    PATH = "path"


class PlaceholderTag(str, Enum):
    PATH_LENGTH = "DYNAMIC_PATH_LENGTH"
    STROKE_WIDTH_RANGE = "DYNAMIC_STROKE_WIDTH"
    LETTER_SPACING_RANGE = "DYNAMIC_SPACING"
    FONT_SIZE_RANGE = "DYNAMIC_SIZE_PULSE"
    PER_CHARACTER_ROTATION_WAVE = "DYNAMIC_LETTER_ROTATE"
    WIDTH_STEPS = "DYNAMIC_WIDTH_STEPS"


class ElementKind(str, Enum):
    PATH = "path"
    TEXT = "text"
    GROUP = "group"
    RECT = "rect"
    ELLIPSE = "ellipse"
    IMAGE = "image"


class ClipStrategy(str, Enum):
    SINGLE_SHAPE_NO_SCALE = "single_shape_no_scale"
    RAW_CONTENT_NO_SCALE = "raw_content_no_scale"
    RAW_CONTENT_SCALED = "raw_content_scaled"
    PATH_SCALED = "path_scaled"


class ChainTrigger(str, Enum):
    START = "start"
    END = "end"


RepeatCount = Union[int, Literal["indefinite"]]


# ============================================================================
# NUMBER HELPERS
# ============================================================================

def round_half_up(value: float, precision: Optional[int] = 0) -> float:
    """Round halves toward positive infinity; ``precision=None`` keeps the value."""
    if precision is None:
        return value
    factor = 10 ** precision
    return math.floor(value * factor + 0.5) / factor


def format_number(value: float) -> str:
    """Shortest textual form of a number: ``15.0 -> "15"``, ``1.15 -> "1.15"``."""
    value = float(value)
    if value == 0:
        return "0"
    if value.is_integer():
        return str(int(value))
    return repr(value)


# ============================================================================
# GEOMETRY MODELS
# ============================================================================

class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class BoundingBox(BaseModel):
    """Axis-aligned box. Always derived fresh from the geometry query."""

    model_config = ConfigDict(frozen=True)

    min_x: float
    min_y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.min_x + self.width

    @property
    def max_y(self) -> float:
        return self.min_y + self.height

    @property
    def centroid(self) -> Point:
        return Point(x=(self.min_x + self.max_x) / 2, y=(self.min_y + self.max_y) / 2)

    @classmethod
    def from_extents(cls, min_x: float, min_y: float, max_x: float, max_y: float) -> "BoundingBox":
        return cls(min_x=min_x, min_y=min_y, width=max_x - min_x, height=max_y - min_y)


class PathCommand(BaseModel):
    """One absolute path command. ``points`` holds control points then the end point."""

    model_config = ConfigDict(frozen=True)

    type: Literal["M", "L", "C", "Q", "Z"]
    points: Tuple[Point, ...] = ()

    @model_validator(mode="after")
    def validate_point_count(self):
        expected = {"M": 1, "L": 1, "C": 3, "Q": 2, "Z": 0}[self.type]
        if len(self.points) != expected:
            raise ValueError(f"{self.type} command takes {expected} point(s), got {len(self.points)}")
        return self


Subpaths = Tuple[Tuple[PathCommand, ...], ...]


# ============================================================================
# TRACK VALUES
# ============================================================================

class LiteralValues(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    text: str


class PlaceholderValues(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["placeholder"] = "placeholder"
    tag: PlaceholderTag


class UnknownValues(BaseModel):
    """A ``DYNAMIC_*`` tag this engine does not know; copied through verbatim."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unknown"] = "unknown"
    raw: str


TrackValues = Annotated[
    Union[LiteralValues, PlaceholderValues, UnknownValues], Field(discriminator="kind")
]


def parse_values(raw: str) -> Union[LiteralValues, PlaceholderValues, UnknownValues]:
    """Map an authoring ``values`` string onto the closed value union."""
    text = raw.strip()
    if text.startswith(PLACEHOLDER_PREFIX):
        try:
            return PlaceholderValues(tag=PlaceholderTag(text))
        except ValueError:
            return UnknownValues(raw=raw)
    return LiteralValues(text=raw)


def values_text(values) -> Optional[str]:
    if values is None:
        return None
    if isinstance(values, LiteralValues):
        return values.text
    if isinstance(values, UnknownValues):
        return values.raw
    return values.tag.value


# ============================================================================
# TRACKS
# ============================================================================

class _TrackBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    attribute_name: str
    dur: Optional[str] = "2s"
    begin: str = "0s"
    fill: FillMode = FillMode.FREEZE
    repeat_count: RepeatCount = 1
    calc_mode: CalcMode = CalcMode.LINEAR
    key_times: Optional[str] = None
    key_splines: Optional[str] = None
    values: Optional[TrackValues] = None
    from_value: Optional[str] = Field(None, alias="from")
    to_value: Optional[str] = Field(None, alias="to")

    @field_validator("values", mode="before")
    @classmethod
    def coerce_values(cls, v):
        if isinstance(v, str):
            return parse_values(v)
        return v

    @field_validator("from_value", "to_value", mode="before")
    @classmethod
    def coerce_endpoint(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return format_number(v)
        return v

    @property
    def placeholder(self) -> Optional[PlaceholderTag]:
        if isinstance(self.values, PlaceholderValues):
            return self.values.tag
        return None

    def with_values(self, text: str):
        return self.model_copy(update={"values": LiteralValues(text=text)})


class AttributeAnimateTrack(_TrackBase):
    kind: Literal["animate"] = "animate"
    additive: Optional[Additive] = None

    @model_validator(mode="after")
    def validate_endpoints(self):
        if self.values is None and self.to_value is None:
            raise ValueError(f"animate track on {self.attribute_name!r} needs values or to")
        if self.values is not None and (self.from_value is not None or self.to_value is not None):
            raise ValueError("values and from/to are mutually exclusive")
        return self


class TransformAnimateTrack(_TrackBase):
    kind: Literal["animateTransform"] = "animateTransform"
    attribute_name: str = "transform"
    transform_kind: TransformKind = TransformKind.TRANSLATE
    additive: Optional[Additive] = None
    is_centered_scale: bool = False
    is_centered_rotate: bool = False

    @model_validator(mode="after")
    def validate_flags(self):
        if self.is_centered_scale and self.transform_kind != TransformKind.SCALE:
            raise ValueError("is_centered_scale requires transform_kind=scale")
        if self.is_centered_rotate and self.transform_kind != TransformKind.ROTATE:
            raise ValueError("is_centered_rotate requires transform_kind=rotate")
        if self.values is None and self.to_value is None:
            raise ValueError("animateTransform track needs values or to")
        if self.values is not None and (self.from_value is not None or self.to_value is not None):
            raise ValueError("values and from/to are mutually exclusive")
        return self


class SetAttributeTrack(_TrackBase):
    kind: Literal["set"] = "set"
    dur: Optional[str] = None

    @model_validator(mode="after")
    def validate_to(self):
        if self.to_value is None:
            raise ValueError(f"set track on {self.attribute_name!r} needs to")
        return self


AnimationTrack = Annotated[
    Union[AttributeAnimateTrack, TransformAnimateTrack, SetAttributeTrack],
    Field(discriminator="kind"),
]


# ============================================================================
# TEMPLATES AND RECORDS
# ============================================================================

class ClipRevealSpec(BaseModel):
    """A template that animates a reveal shape inside a per-target clip definition."""

    model_config = ConfigDict(frozen=True)

    shape_tag: str = "rect"
    track: AttributeAnimateTrack


class AnimationTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique template identifier")
    name: str = Field(..., description="Display name")
    description: str = ""
    target_kind: TargetKind = TargetKind.ANY
    tracks: Tuple[AnimationTrack, ...] = ()
    clip_reveal: Optional[ClipRevealSpec] = None

    @model_validator(mode="after")
    def validate_drivers(self):
        if self.clip_reveal is not None and self.tracks:
            raise ValueError(f"template {self.id!r}: clip-driven and track-driven are exclusive")
        if self.clip_reveal is None and not self.tracks:
            raise ValueError(f"template {self.id!r} has no tracks")
        return self

    @property
    def is_clip_driven(self) -> bool:
        return self.clip_reveal is not None


class AnimationRecord(BaseModel):
    """A fully resolved track bound to one target. Never updated in place."""

    model_config = ConfigDict(frozen=True)

    id: str
    track: AnimationTrack
    target_element_id: Optional[str] = None
    clip_template_id: Optional[str] = None
    clip_child_index: Optional[int] = None

    @model_validator(mode="after")
    def validate_clip_child(self):
        if self.clip_child_index is not None and self.clip_template_id is None:
            raise ValueError(f"record {self.id!r} targets a clip child but has no clip_template_id")
        return self

    @property
    def targets_clip(self) -> bool:
        return self.clip_template_id is not None


class ChainEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    animation_id: str
    delay: float = Field(0.0, description="Delay in seconds")
    trigger: ChainTrigger = ChainTrigger.END


class AnimationChain(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = None
    entries: Tuple[ChainEntry, ...] = ()


# ============================================================================
# CONTENT AST AND CLIPS
# ============================================================================

class ContentNode(BaseModel):
    """Markup-independent node: used for clip content, preview trees and export."""

    model_config = ConfigDict(frozen=True)

    tag: str
    attributes: Dict[str, str] = Field(default_factory=dict)
    children: Tuple["ContentNode", ...] = ()
    text: Optional[str] = None
    # Character data following the closing tag, inside the parent
    tail: Optional[str] = None
    key: Optional[str] = None


ContentNode.model_rebuild()


class ShapeContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["shape"] = "shape"
    node: ContentNode


class PathContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["path"] = "path"
    subpaths: Subpaths


class RawContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["raw"] = "raw"
    nodes: Tuple[ContentNode, ...]


ClipContent = Annotated[Union[ShapeContent, PathContent, RawContent], Field(discriminator="kind")]


class ClipTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    local_bounds: BoundingBox
    origin: Point = Field(default_factory=Point)
    units: ClipUnits = "userSpaceOnUse"
    should_scale_to_element: bool = True
    content: ClipContent

    @field_validator("local_bounds")
    @classmethod
    def validate_local_bounds(cls, v):
        if not (v.width > 0 and v.height > 0):
            raise ValueError("clip local_bounds must have non-zero width and height")
        return v


class RenderableClip(BaseModel):
    """Per-render result of mapping one clip template onto one target. Never stored."""

    model_config = ConfigDict(frozen=True)

    instance_id: str
    template_id: str
    strategy: ClipStrategy
    units: ClipUnits
    node: ContentNode


# ============================================================================
# ELEMENTS
# ============================================================================

class Element(BaseModel):
    """Canvas element as seen by the engine: geometry, style and definition refs."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: ElementKind
    subpaths: Subpaths = ()
    stroke_width: Optional[float] = None
    stroke_dasharray: Optional[str] = None
    stroke_dashoffset: Optional[float] = None
    text: str = ""
    font_size: Optional[float] = None
    letter_spacing: Optional[float] = None
    x: float = 0.0
    y: float = 0.0
    width: Optional[float] = None
    height: Optional[float] = None
    child_ids: Tuple[str, ...] = ()
    clip_path_id: Optional[str] = None
    clip_template_id: Optional[str] = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    # Constants
    'PLACEHOLDER_PREFIX', 'REVEAL_CLIP_PREFIX', 'INDEFINITE', 'SHAPE_TAGS', 'ANIMATION_TAGS',

    # Enums
    'TrackKind', 'TransformKind', 'CalcMode', 'FillMode', 'Additive', 'TargetKind',
    'PlaceholderTag', 'ElementKind', 'ClipStrategy', 'ChainTrigger',

    # Helpers
    'round_half_up', 'format_number', 'parse_values', 'values_text',

    # Models
    'Point', 'BoundingBox', 'PathCommand', 'LiteralValues', 'PlaceholderValues',
    'UnknownValues', 'AttributeAnimateTrack', 'TransformAnimateTrack', 'SetAttributeTrack',
    'AnimationTrack', 'ClipRevealSpec', 'AnimationTemplate', 'AnimationRecord', 'ChainEntry',
    'AnimationChain', 'ContentNode', 'ShapeContent', 'PathContent', 'RawContent',
    'ClipContent', 'ClipTemplate', 'RenderableClip', 'Element',
]
