#!/usr/bin/env python3
"""
Transform Resolver

Turns centered scale and centered rotate tracks into concrete tracks that pivot
at a target's centroid.

Scale natively pivots at the coordinate origin, so a centered scale keyframe
``(sx, sy)`` is paired with a translate keyframe ``(cx(1-sx), cy(1-sy))`` on an
additive companion track. With ``p' = t + s*p`` the centroid maps onto itself at
every keyframe. Rotate carries its own pivot, so each angle becomes
``"angle cx cy"``.
"""

import re
from typing import List, Optional, Tuple

from vectormotion.core import get_logger

from .errors import InstancingError
from .sdk import (
    Additive,
    LiteralValues,
    Point,
    TransformAnimateTrack,
    TransformKind,
    format_number,
    round_half_up,
)

log = get_logger("transform_resolver")

_SEP = re.compile(r"[\s,]+")


def split_keyframes(values: str) -> List[List[str]]:
    """``"1 1; 1.2, 1.2"`` -> ``[["1", "1"], ["1.2", "1.2"]]``."""
    frames = []
    for frame in values.split(";"):
        tokens = [t for t in _SEP.split(frame.strip()) if t]
        if tokens:
            frames.append(tokens)
    return frames


def _to_float(token: str, track) -> float:
    try:
        return float(token)
    except ValueError as e:
        raise InstancingError(f"non-numeric keyframe {token!r} on {track.attribute_name}") from e


def _scale_pair(tokens: List[str], track) -> Tuple[float, float]:
    sx = _to_float(tokens[0], track)
    sy = _to_float(tokens[1], track) if len(tokens) > 1 else sx
    return sx, sy


def _keyframes(track) -> Tuple[Optional[List[str]], bool]:
    """Raw keyframe strings and whether they came from ``from``/``to``."""
    if isinstance(track.values, LiteralValues):
        return [f for f in track.values.text.split(";") if f.strip()], False
    if track.values is None and track.from_value is not None and track.to_value is not None:
        return [track.from_value, track.to_value], True
    return None, False


def _with_frames(track, frames: List[str], from_to: bool, **update):
    if from_to:
        update.update(from_value=frames[0], to_value=frames[1])
    else:
        update["values"] = LiteralValues(text="; ".join(frames))
    return track.model_copy(update=update)


def _shared_timing(track) -> dict:
    return dict(
        dur=track.dur,
        begin=track.begin,
        fill=track.fill,
        repeat_count=track.repeat_count,
        calc_mode=track.calc_mode,
        key_times=track.key_times,
        key_splines=track.key_splines,
    )


def resolve_centered_scale(track: TransformAnimateTrack, centroid: Point, precision: Optional[int] = 0):
    frames, from_to = _keyframes(track)
    if not frames:
        log.warning(f"Centered scale on {track.attribute_name} has no literal keyframes; left as-is")
        return [track]

    pairs = [_scale_pair(split_keyframes(f)[0], track) for f in frames]
    translate_frames = [
        f"{format_number(round_half_up(centroid.x * (1 - sx), precision))} "
        f"{format_number(round_half_up(centroid.y * (1 - sy), precision))}"
        for sx, sy in pairs
    ]
    scale_frames = [f"{format_number(sx)} {format_number(sy)}" for sx, sy in pairs]

    translate = TransformAnimateTrack(
        attribute_name=track.attribute_name,
        transform_kind=TransformKind.TRANSLATE,
        additive=Additive.SUM,
        **_shared_timing(track),
        **({"from": translate_frames[0], "to": translate_frames[1]} if from_to
           else {"values": LiteralValues(text="; ".join(translate_frames))}),
    )
    scale = _with_frames(
        track, scale_frames, from_to, additive=Additive.SUM, is_centered_scale=False
    )
    return [translate, scale]


def resolve_centered_rotate(track: TransformAnimateTrack, centroid: Point):
    frames, from_to = _keyframes(track)
    if not frames:
        log.warning(f"Centered rotate on {track.attribute_name} has no literal keyframes; left as-is")
        return [track]

    cx, cy = format_number(centroid.x), format_number(centroid.y)
    rotated = []
    for frame in frames:
        angle = split_keyframes(frame)[0][0]
        _to_float(angle, track)
        rotated.append(f"{angle} {cx} {cy}")
    return [_with_frames(track, rotated, from_to, is_centered_rotate=False)]


def resolve_centered_transform(track, centroid: Optional[Point], precision: Optional[int] = 0):
    """Concrete tracks for ``track`` pivoting at ``centroid``.

    Returns a list: translate + scale for centered scale, one track otherwise.
    A missing centroid means identity centering at the origin.
    """
    if centroid is None:
        centroid = Point(x=0, y=0)
    if not isinstance(track, TransformAnimateTrack):
        return [track]
    if track.is_centered_scale:
        return resolve_centered_scale(track, centroid, precision)
    if track.is_centered_rotate:
        return resolve_centered_rotate(track, centroid)
    return [track]
