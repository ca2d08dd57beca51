"""Placeholder resolution from live element state."""

import pytest

from conftest import make_path, make_rect, make_text
from vectormotion.config.schemas import PlaceholderSettings
from vectormotion.instancing import BoundingBox, PlaceholderResolutionError, PlaceholderTag, resolve_placeholder
from vectormotion.instancing.sdk import Element, ElementKind

WAVE = PlaceholderTag.PER_CHARACTER_ROTATION_WAVE


def wave_frames(values):
    return [frame.split(" ") for frame in values.split("; ")]


def test_path_length_of_straight_segment():
    line = make_path("line", (0, 0), (10, 0))
    res = resolve_placeholder(PlaceholderTag.PATH_LENGTH, line)
    assert res.values == "10;0"
    assert res.element_patch == {"stroke_dasharray": "10", "stroke_dashoffset": 0}
    # the element itself is untouched; the caller applies the patch
    assert line.stroke_dasharray is None


def test_path_length_ceils_to_whole_units():
    diagonal = make_path("diag", (0, 0), (3, 3))  # length ~4.24
    assert resolve_placeholder(PlaceholderTag.PATH_LENGTH, diagonal).values == "5;0"


def test_path_length_only_applies_to_paths():
    assert resolve_placeholder(PlaceholderTag.PATH_LENGTH, make_rect("r", 0, 0, 10, 10)) is None


def test_path_length_on_degenerate_path_raises():
    lone_move = make_path("dot", (4, 4))
    with pytest.raises(PlaceholderResolutionError) as exc:
        resolve_placeholder(PlaceholderTag.PATH_LENGTH, lone_move)
    assert exc.value.element_id == "dot"


@pytest.mark.parametrize(
    "element,tag,expected",
    [
        (make_path("p", (0, 0), (1, 1), stroke_width=2), PlaceholderTag.STROKE_WIDTH_RANGE, "2;6;2"),
        (make_path("p", (0, 0), (1, 1)), PlaceholderTag.STROKE_WIDTH_RANGE, "1;3;1"),
        (make_text("t", "hi"), PlaceholderTag.LETTER_SPACING_RANGE, "0;8;0"),
        (make_text("t", "hi", letter_spacing=2), PlaceholderTag.LETTER_SPACING_RANGE, "2;10;2"),
        (Element(id="t", kind=ElementKind.TEXT, text="hi"), PlaceholderTag.FONT_SIZE_RANGE, "18;25;18"),
        (make_text("t", "hi", font_size=20), PlaceholderTag.FONT_SIZE_RANGE, "20;28;20"),
    ],
)
def test_range_placeholders(element, tag, expected):
    res = resolve_placeholder(tag, element)
    assert res.values == expected
    assert res.element_patch == {}


def test_range_factors_come_from_settings():
    settings = PlaceholderSettings(stroke_width_factor=2, letter_spacing_boost=4)
    path = make_path("p", (0, 0), (1, 1), stroke_width=3)
    assert resolve_placeholder(PlaceholderTag.STROKE_WIDTH_RANGE, path, settings=settings).values == "3;6;3"
    text = make_text("t", "hi")
    assert resolve_placeholder(PlaceholderTag.LETTER_SPACING_RANGE, text, settings=settings).values == "0;4;0"


def test_letter_wave_shape_on_text_with_space():
    res = resolve_placeholder(WAVE, make_text("t", "AB CD"))
    frames = wave_frames(res.values)

    assert len(frames) == 5
    assert all(len(f) == 5 for f in frames)
    assert all(f[2] == "0" for f in frames)
    neutral, up, _, down, _ = frames
    assert neutral == ["0"] * 5
    for i in (0, 1, 3, 4):
        assert float(down[i]) == -float(up[i])
        assert up[i] != "0"


def test_letter_wave_values():
    res = resolve_placeholder(WAVE, make_text("t", "AB CD"))
    assert res.values == "0 0 0 0 0; 5 14 0 14 5; 0 0 0 0 0; -5 -14 0 -14 -5; 0 0 0 0 0"


def test_letter_wave_skips_non_text_and_empty_text():
    assert resolve_placeholder(WAVE, make_text("t", "")) is None
    assert resolve_placeholder(WAVE, make_rect("r", 0, 0, 1, 1)) is None


def test_width_steps_uses_rounded_width():
    bounds = BoundingBox(min_x=0, min_y=0, width=99.6, height=10)
    res = resolve_placeholder(PlaceholderTag.WIDTH_STEPS, make_text("t", "x"), bounds=bounds)
    assert res.values == "0;100"
    assert resolve_placeholder(PlaceholderTag.WIDTH_STEPS, make_text("t", "x")) is None


def test_resolution_is_repeatable():
    text = make_text("t", "wave me")
    assert resolve_placeholder(WAVE, text) == resolve_placeholder(WAVE, text)
    line = make_path("line", (0, 0), (10, 0))
    assert resolve_placeholder(PlaceholderTag.PATH_LENGTH, line) == resolve_placeholder(
        PlaceholderTag.PATH_LENGTH, line
    )
