"""Centered scale and rotate resolution."""

import pytest

from vectormotion.instancing import (
    AttributeAnimateTrack,
    Point,
    TransformAnimateTrack,
    resolve_centered_transform,
)
from vectormotion.instancing.sdk import Additive, CalcMode, LiteralValues, round_half_up
from vectormotion.instancing.transform_resolver import split_keyframes


def centered_scale(values, **kw):
    return TransformAnimateTrack(transform_kind="scale", is_centered_scale=True, values=values, **kw)


def centered_rotate(values, **kw):
    return TransformAnimateTrack(transform_kind="rotate", is_centered_rotate=True, values=values, **kw)


def frames(track):
    return [[float(t) for t in f] for f in split_keyframes(track.values.text)]


def test_centered_scale_emits_translate_then_scale():
    track = centered_scale("1 1; 1.5 2; 0.5 0.5", dur="1.2s", repeat_count="indefinite")
    out = resolve_centered_transform(track, Point(x=40, y=20))

    assert [t.transform_kind.value for t in out] == ["translate", "scale"]
    translate, scale = out
    assert translate.values.text == "0 0; -20 -20; 20 10"
    assert scale.values.text == "1 1; 1.5 2; 0.5 0.5"
    assert translate.additive == Additive.SUM and scale.additive == Additive.SUM
    assert not scale.is_centered_scale


def test_companion_track_shares_timing():
    track = centered_scale(
        "1; 1.2; 1",
        dur="3s",
        begin="1s",
        repeat_count=2,
        calc_mode="spline",
        key_times="0;0.5;1",
        key_splines="0.4 0 0.6 1; 0.4 0 0.6 1",
        fill="remove",
    )
    translate, scale = resolve_centered_transform(track, Point(x=10, y=10))
    for attr in ("dur", "begin", "repeat_count", "calc_mode", "key_times", "key_splines", "fill"):
        assert getattr(translate, attr) == getattr(scale, attr) == getattr(track, attr)
    assert translate.calc_mode == CalcMode.SPLINE


def test_single_scale_value_applies_to_both_axes():
    _, scale = resolve_centered_transform(centered_scale("1; 2"), Point(x=3, y=4))
    assert scale.values.text == "1 1; 2 2"


@pytest.mark.parametrize("cx,cy", [(0, 0), (40, 20), (12.5, -7.25), (333.3, 0.1)])
@pytest.mark.parametrize("values", ["1 1; 1.15 1.15; 1 1", "0.5; 2; 0.25 3", "1.1 0.9; 0.8 1.3"])
def test_centroid_is_fixed_point_at_every_keyframe(cx, cy, values):
    translate, scale = resolve_centered_transform(centered_scale(values), Point(x=cx, y=cy), precision=None)
    for (tx, ty), (sx, sy) in zip(frames(translate), frames(scale)):
        assert tx + sx * cx == pytest.approx(cx)
        assert ty + sy * cy == pytest.approx(cy)


def test_translate_rounds_half_up():
    translate, _ = resolve_centered_transform(centered_scale("0.5; 1.5"), Point(x=5, y=5))
    assert translate.values.text == "3 3; -2 -2"


def test_from_to_scale_keeps_from_to_shape():
    track = centered_scale(None, **{"from": "1", "to": "2"})
    translate, scale = resolve_centered_transform(track, Point(x=10, y=10))
    assert (translate.from_value, translate.to_value) == ("0 0", "-10 -10")
    assert (scale.from_value, scale.to_value) == ("1 1", "2 2")
    assert translate.values is None


def test_centered_rotate_embeds_pivot():
    out = resolve_centered_transform(centered_rotate("0; 90; 180"), Point(x=50, y=25))
    assert len(out) == 1
    assert out[0].values.text == "0 50 25; 90 50 25; 180 50 25"
    assert not out[0].is_centered_rotate


def test_rotate_with_fractional_centroid():
    out = resolve_centered_transform(centered_rotate("-8; 8"), Point(x=12.5, y=3.75))
    assert out[0].values.text == "-8 12.5 3.75; 8 12.5 3.75"


def test_missing_centroid_centers_on_origin():
    translate, _ = resolve_centered_transform(centered_scale("1; 2"), None)
    assert translate.values.text == "0 0; 0 0"
    rotated = resolve_centered_transform(centered_rotate("0; 360"), None)[0]
    assert rotated.values.text == "0 0 0; 360 0 0"


def test_non_centered_tracks_pass_through():
    plain = TransformAnimateTrack(transform_kind="translate", values="0 0; 5 5")
    attr = AttributeAnimateTrack(attribute_name="opacity", values="0;1")
    assert resolve_centered_transform(plain, Point(x=1, y=1)) == [plain]
    assert resolve_centered_transform(attr, Point(x=1, y=1)) == [attr]


def test_resolution_is_pure_and_repeatable():
    track = centered_scale("1 1; 1.15 1.15; 1 1")
    snapshot = track.model_dump()
    first = resolve_centered_transform(track, Point(x=21, y=13))
    second = resolve_centered_transform(track, Point(x=21, y=13))
    assert [t.model_dump() for t in first] == [t.model_dump() for t in second]
    assert track.model_dump() == snapshot
    assert track.values == LiteralValues(text="1 1; 1.15 1.15; 1 1")


@pytest.mark.parametrize("value,precision,expected", [(2.5, 0, 3), (-2.5, 0, -2), (-2.6, 0, -3), (1.25, 1, 1.3), (1.234, None, 1.234)])
def test_round_half_up_goes_toward_positive_infinity(value, precision, expected):
    assert round_half_up(value, precision) == pytest.approx(expected)
