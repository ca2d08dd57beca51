#!/usr/bin/env python3
"""
Placeholder Resolver

Resolves symbolic ``DYNAMIC_*`` values from a target's live state at apply
time. Resolution is pure: the element and template are never touched. Any
change the target needs before it animates (the dash pre-condition of a path
draw) is returned as ``element_patch`` for the caller to apply.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from vectormotion.config.schemas import PlaceholderSettings
from vectormotion.core import get_logger

from .errors import MeasurementError, PlaceholderResolutionError
from .sdk import BoundingBox, Element, ElementKind, PlaceholderTag, format_number, round_half_up
from .svg_geom import measure_path_length

log = get_logger("placeholders")


@dataclass(frozen=True)
class PlaceholderResolution:
    values: str
    element_patch: Dict[str, object] = field(default_factory=dict)


def _range(base: float, peak: float) -> str:
    return f"{format_number(base)};{format_number(peak)};{format_number(base)}"


def resolve_path_length(element: Element, settings: PlaceholderSettings):
    if element.kind != ElementKind.PATH:
        return None
    try:
        length = measure_path_length(element.subpaths)
    except MeasurementError as e:
        raise PlaceholderResolutionError(PlaceholderTag.PATH_LENGTH.value, element.id, str(e)) from e
    total = max(1, math.ceil(length))
    return PlaceholderResolution(
        values=f"{total};0",
        element_patch={"stroke_dasharray": str(total), "stroke_dashoffset": 0},
    )


def resolve_stroke_width(element: Element, settings: PlaceholderSettings):
    base = element.stroke_width if element.stroke_width is not None else settings.default_stroke_width
    return PlaceholderResolution(values=_range(base, base * settings.stroke_width_factor))


def resolve_letter_spacing(element: Element, settings: PlaceholderSettings):
    base = element.letter_spacing if element.letter_spacing is not None else settings.default_letter_spacing
    return PlaceholderResolution(values=_range(base, base + settings.letter_spacing_boost))


def resolve_font_size(element: Element, settings: PlaceholderSettings):
    base = element.font_size if element.font_size is not None else settings.default_font_size
    return PlaceholderResolution(values=_range(base, round_half_up(base * settings.font_size_factor)))


def wave_angles(text: str, settings: PlaceholderSettings) -> List[float]:
    """Peak angle per character; whitespace stays at 0.

    Non-whitespace characters are ranked and mapped linearly onto the
    configured progress range so no glyph lands on a zero-crossing of sine.
    """
    lo, hi = settings.wave_progress_range
    glyphs = sum(1 for ch in text if not ch.isspace())
    angles = []
    rank = 0
    for ch in text:
        if ch.isspace():
            angles.append(0.0)
            continue
        progress = lo + rank / max(1, glyphs - 1) * (hi - lo)
        angles.append(round_half_up(math.sin(progress * math.pi) * settings.wave_amplitude_deg))
        rank += 1
    return angles


def resolve_letter_rotate(element: Element, settings: PlaceholderSettings):
    if element.kind != ElementKind.TEXT or not element.text:
        return None
    up = wave_angles(element.text, settings)
    down = [-a if a else 0.0 for a in up]
    neutral = [0.0] * len(up)

    def frame(angles):
        return " ".join(format_number(a) for a in angles)

    frames = [neutral, up, neutral, down, neutral]
    return PlaceholderResolution(values="; ".join(frame(f) for f in frames))


def resolve_width_steps(bounds: Optional[BoundingBox]):
    if bounds is None:
        return None
    return PlaceholderResolution(values=f"0;{format_number(round_half_up(bounds.width))}")


def resolve_placeholder(
    tag: PlaceholderTag,
    element: Element,
    bounds: Optional[BoundingBox] = None,
    settings: Optional[PlaceholderSettings] = None,
) -> Optional[PlaceholderResolution]:
    """Concrete values for ``tag`` on ``element``.

    Returns None when the tag does not apply to this kind of target (the track
    is dropped). Raises PlaceholderResolutionError when it applies but cannot
    be measured.
    """
    settings = settings or PlaceholderSettings()
    if tag == PlaceholderTag.PATH_LENGTH:
        return resolve_path_length(element, settings)
    if tag == PlaceholderTag.STROKE_WIDTH_RANGE:
        return resolve_stroke_width(element, settings)
    if tag == PlaceholderTag.LETTER_SPACING_RANGE:
        return resolve_letter_spacing(element, settings)
    if tag == PlaceholderTag.FONT_SIZE_RANGE:
        return resolve_font_size(element, settings)
    if tag == PlaceholderTag.PER_CHARACTER_ROTATION_WAVE:
        return resolve_letter_rotate(element, settings)
    if tag == PlaceholderTag.WIDTH_STEPS:
        return resolve_width_steps(bounds)
    raise PlaceholderResolutionError(tag, element.id, "unhandled placeholder tag")
