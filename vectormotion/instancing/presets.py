#!/usr/bin/env python3
"""
Built-in animation and clip presets.

Animation presets are plain authoring dicts validated into AnimationTemplate
by the catalog, the same path YAML-authored templates take. Clip presets are
generators: given a box they return clip content markup sized to it.
"""

from typing import Callable, Dict, List, Optional

from .content import parse_content
from .sdk import BoundingBox, ClipTemplate, RawContent, format_number as n

SMOOTH = "0.4 0 0.6 1"

ANIMATION_PRESETS: List[Dict] = [
    {
        "id": "preset-fade-in",
        "name": "Fade In",
        "description": "Opacity from transparent to opaque.",
        "tracks": [
            {"kind": "animate", "attribute_name": "opacity", "dur": "1s", "values": "0;1"},
        ],
    },
    {
        "id": "preset-pulse",
        "name": "Pulse",
        "description": "Breathing scale around the element's center.",
        "tracks": [
            {
                "kind": "animateTransform",
                "transform_kind": "scale",
                "is_centered_scale": True,
                "dur": "1.5s",
                "repeat_count": "indefinite",
                "calc_mode": "spline",
                "key_times": "0;0.5;1",
                "key_splines": f"{SMOOTH}; {SMOOTH}",
                "values": "1; 1.1; 1",
            },
        ],
    },
    {
        "id": "preset-text-zoom",
        "name": "Text Zoom",
        "description": "Rhythmic scale in and out effect.",
        "target_kind": "text",
        "tracks": [
            {
                "kind": "animateTransform",
                "transform_kind": "scale",
                "is_centered_scale": True,
                "dur": "1.2s",
                "repeat_count": "indefinite",
                "calc_mode": "spline",
                "key_times": "0;0.5;1",
                "key_splines": f"{SMOOTH}; {SMOOTH}",
                "values": "1 1; 1.15 1.15; 1 1",
                "additive": "sum",
            },
        ],
    },
    {
        "id": "preset-spin",
        "name": "Spin",
        "description": "Full turn around the element's center.",
        "tracks": [
            {
                "kind": "animateTransform",
                "transform_kind": "rotate",
                "is_centered_rotate": True,
                "dur": "2s",
                "repeat_count": "indefinite",
                "values": "0; 360",
            },
        ],
    },
    {
        "id": "preset-wobble",
        "name": "Wobble",
        "description": "Gentle tilt back and forth.",
        "tracks": [
            {
                "kind": "animateTransform",
                "transform_kind": "rotate",
                "is_centered_rotate": True,
                "dur": "1.5s",
                "repeat_count": "indefinite",
                "calc_mode": "spline",
                "key_times": "0;0.25;0.5;0.75;1",
                "key_splines": "; ".join([SMOOTH] * 4),
                "values": "0; 8; 0; -8; 0",
                "additive": "sum",
            },
        ],
    },
    {
        "id": "preset-path-draw",
        "name": "Path Draw",
        "description": "Draws the stroke along its length.",
        "target_kind": "path",
        "tracks": [
            {
                "kind": "animate",
                "attribute_name": "stroke-dashoffset",
                "dur": "3s",
                "repeat_count": "indefinite",
                "values": "DYNAMIC_PATH_LENGTH",
            },
        ],
    },
    {
        "id": "preset-stroke-width-pulse",
        "name": "Stroke Pulse",
        "description": "Stroke swells to three times its width.",
        "target_kind": "path",
        "tracks": [
            {
                "kind": "animate",
                "attribute_name": "stroke-width",
                "dur": "2s",
                "repeat_count": "indefinite",
                "calc_mode": "spline",
                "key_times": "0;0.5;1",
                "key_splines": f"{SMOOTH}; {SMOOTH}",
                "values": "DYNAMIC_STROKE_WIDTH",
            },
        ],
    },
    {
        "id": "preset-text-spacing",
        "name": "Letter Spacing",
        "description": "Letters drift apart and back.",
        "target_kind": "text",
        "tracks": [
            {
                "kind": "animate",
                "attribute_name": "letter-spacing",
                "dur": "2s",
                "repeat_count": "indefinite",
                "calc_mode": "spline",
                "key_times": "0;0.5;1",
                "key_splines": f"{SMOOTH}; {SMOOTH}",
                "values": "DYNAMIC_SPACING",
            },
        ],
    },
    {
        "id": "preset-text-size-pulse",
        "name": "Size Pulse",
        "description": "Font size grows and settles.",
        "target_kind": "text",
        "tracks": [
            {
                "kind": "animate",
                "attribute_name": "font-size",
                "dur": "2s",
                "repeat_count": "indefinite",
                "calc_mode": "spline",
                "key_times": "0;0.5;1",
                "key_splines": f"{SMOOTH}; {SMOOTH}",
                "values": "DYNAMIC_SIZE_PULSE",
            },
        ],
    },
    {
        "id": "preset-text-letter-rotate",
        "name": "Letter Wave",
        "description": "Each glyph rocks by a different angle.",
        "target_kind": "text",
        "tracks": [
            {
                "kind": "animate",
                "attribute_name": "rotate",
                "dur": "3s",
                "repeat_count": "indefinite",
                "values": "DYNAMIC_LETTER_ROTATE",
            },
        ],
    },
    {
        "id": "preset-text-typewriter",
        "name": "Typewriter",
        "description": "Reveals the text left to right through a growing clip.",
        "target_kind": "text",
        "clip_reveal": {
            "shape_tag": "rect",
            "track": {
                "kind": "animate",
                "attribute_name": "width",
                "dur": "3s",
                "repeat_count": "indefinite",
                "values": "DYNAMIC_WIDTH_STEPS",
            },
        },
    },
    {
        "id": "preset-text-wave",
        "name": "Text Wave",
        "description": "Gentle vertical wave motion.",
        "target_kind": "text",
        "tracks": [
            {
                "kind": "animateTransform",
                "transform_kind": "translate",
                "dur": "2s",
                "repeat_count": "indefinite",
                "calc_mode": "spline",
                "key_times": "0;0.25;0.5;0.75;1",
                "key_splines": "; ".join([SMOOTH] * 4),
                "values": "0 0; 0 -5; 0 0; 0 5; 0 0",
                "additive": "sum",
            },
        ],
    },
    {
        "id": "preset-text-glow",
        "name": "Text Glow",
        "description": "Soft pulsating glow effect for emphasis.",
        "target_kind": "text",
        "tracks": [
            {"kind": "set", "attribute_name": "filter", "to": "url(#filter-glow-400)"},
            {
                "kind": "animate",
                "attribute_name": "opacity",
                "dur": "1.5s",
                "repeat_count": "indefinite",
                "calc_mode": "spline",
                "key_times": "0;0.5;1",
                "key_splines": f"{SMOOTH}; {SMOOTH}",
                "values": "0.6;1;0.6",
            },
        ],
    },
]


# ============================================================================
# CLIP PRESETS
# ============================================================================

def _circle(b: BoundingBox) -> str:
    c = b.centroid
    r = min(b.width, b.height) * 0.45
    return f'<circle cx="{n(c.x)}" cy="{n(c.y)}" r="{n(r)}"/>'


def _diamond(b: BoundingBox) -> str:
    c = b.centroid
    hw, hh = b.width * 0.45, b.height * 0.45
    points = [(c.x, c.y - hh), (c.x + hw, c.y), (c.x, c.y + hh), (c.x - hw, c.y)]
    return '<polygon points="{}"/>'.format(" ".join(f"{n(x)},{n(y)}" for x, y in points))


def _triangle(b: BoundingBox) -> str:
    top = b.min_y + b.height * 0.1
    bottom = b.min_y + b.height * 0.9
    left = b.min_x + b.width * 0.1
    right = b.min_x + b.width * 0.9
    cx = b.centroid.x
    return f'<polygon points="{n(cx)},{n(top)} {n(right)},{n(bottom)} {n(left)},{n(bottom)}"/>'


def _iris_open(b: BoundingBox) -> str:
    c = b.centroid
    max_r = max(b.width, b.height) * 0.7
    return (
        f'<circle cx="{n(c.x)}" cy="{n(c.y)}" r="0">'
        f'<animate attributeName="r" from="0" to="{n(max_r)}" dur="2s" repeatCount="indefinite" '
        f'calcMode="spline" keyTimes="0;1" keySplines="0.42 0 0.58 1"/>'
        f"</circle>"
    )


def _wipe(b: BoundingBox) -> str:
    start = b.min_x - b.width
    return (
        f'<rect x="{n(start)}" y="{n(b.min_y)}" width="{n(b.width)}" height="{n(b.height)}">'
        f'<animate attributeName="x" from="{n(start)}" to="{n(b.min_x)}" dur="2s" repeatCount="indefinite"/>'
        f"</rect>"
    )


DEFAULT_CLIP_BOX = BoundingBox(min_x=0, min_y=0, width=100, height=100)


class ClipPreset:
    """A clip generator producing content sized to a box."""

    def __init__(self, preset_id: str, name: str, generator: Callable[[BoundingBox], str], animated: bool = False):
        self.id = preset_id
        self.name = name
        self.generator = generator
        self.animated = animated

    def generate(self, bbox: Optional[BoundingBox] = None) -> str:
        return self.generator(bbox or DEFAULT_CLIP_BOX)

    def to_template(
        self,
        bbox: Optional[BoundingBox] = None,
        template_id: Optional[str] = None,
        scale_to_element: bool = True,
    ) -> ClipTemplate:
        """Clip template whose content is authored inside ``bbox``.

        With ``scale_to_element`` the content is re-fitted to each target;
        otherwise it is used at the coordinates it was generated for.
        """
        bbox = bbox or DEFAULT_CLIP_BOX
        return ClipTemplate(
            id=template_id or self.id,
            name=self.name,
            local_bounds=bbox,
            should_scale_to_element=scale_to_element,
            content=RawContent(nodes=parse_content(self.generate(bbox))),
        )


CLIP_PRESETS: List[ClipPreset] = [
    ClipPreset("clip-circle", "Circle", _circle),
    ClipPreset("clip-diamond", "Diamond", _diamond),
    ClipPreset("clip-triangle", "Triangle", _triangle),
    ClipPreset("clip-iris-open", "Iris Open", _iris_open, animated=True),
    ClipPreset("clip-wipe", "Wipe", _wipe, animated=True),
]
