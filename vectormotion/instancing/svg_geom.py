#!/usr/bin/env python3
"""
SVG Geometry Query

Bounds and arc-length measurement for canvas elements. Paths are measured with
svgpathtools, raw clip markup with svgelements, and group bounds are the union
of descendant boxes computed with shapely.

Bounds are always derived on request; nothing here caches geometry between
calls.
"""

import io
import math
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator, List, Optional

from shapely.geometry import MultiPoint
from svgelements import SVG
from svgpathtools import parse_path

from vectormotion.core import get_logger

from .errors import MeasurementError
from .sdk import BoundingBox, Element, ElementKind, PathCommand, Point, Subpaths, format_number

log = get_logger("svg_geom")

SVG_NS = "http://www.w3.org/2000/svg"

# Rough glyph metrics for estimating text boxes without a font engine
GLYPH_WIDTH_EM = 0.6
LINE_HEIGHT_EM = 1.2


# ============================================================================
# PATH COMMANDS
# ============================================================================

def subpaths_to_d(subpaths: Subpaths) -> str:
    """Concatenate subpath commands into one ``d`` attribute."""
    parts: List[str] = []
    for subpath in subpaths:
        for cmd in subpath:
            coords = " ".join(f"{format_number(p.x)} {format_number(p.y)}" for p in cmd.points)
            parts.append(f"{cmd.type} {coords}" if coords else cmd.type)
    return " ".join(parts)


def map_subpaths(subpaths: Subpaths, fn: Callable[[Point], Point]) -> Subpaths:
    """Apply a point mapping to every control and end point."""
    return tuple(
        tuple(PathCommand(type=cmd.type, points=tuple(fn(p) for p in cmd.points)) for cmd in subpath)
        for subpath in subpaths
    )


def affine_subpaths(subpaths: Subpaths, sx: float, sy: float, tx: float, ty: float) -> Subpaths:
    return map_subpaths(subpaths, lambda p: Point(x=p.x * sx + tx, y=p.y * sy + ty))


def has_drawing_segments(subpaths: Subpaths) -> bool:
    return any(cmd.type in ("L", "C", "Q", "Z") for subpath in subpaths for cmd in subpath)


# ============================================================================
# MEASUREMENT
# ============================================================================

class MeasurementSession:
    """One svgpathtools path held open for the duration of a single measurement."""

    def __init__(self, d: str):
        self.d = d
        self._path = None

    def open(self):
        try:
            self._path = parse_path(self.d)
        except Exception as e:
            raise MeasurementError(f"could not parse path data: {e}") from e
        log.debug(f"Opened measurement session ({len(self._path)} segments)")

    def close(self):
        self._path = None

    def length(self) -> float:
        if self._path is None:
            raise MeasurementError("measurement session is not open")
        if len(self._path) == 0:
            raise MeasurementError("path has no segments")
        try:
            value = float(self._path.length())
        except Exception as e:
            raise MeasurementError(f"length computation failed: {e}") from e
        if not math.isfinite(value) or value <= 0:
            raise MeasurementError(f"degenerate path (length={value})")
        return value


@contextmanager
def measurement_session(d: str) -> Iterator[MeasurementSession]:
    session = MeasurementSession(d)
    session.open()
    try:
        yield session
    finally:
        session.close()


def measure_path_length(subpaths: Subpaths) -> float:
    """Arc length of the concatenated subpaths.

    Raises MeasurementError for empty or degenerate geometry.
    """
    if not has_drawing_segments(subpaths):
        raise MeasurementError("path has no drawing commands")
    with measurement_session(subpaths_to_d(subpaths)) as session:
        return session.length()


# ============================================================================
# BOUNDS
# ============================================================================

def path_bounds(subpaths: Subpaths) -> Optional[BoundingBox]:
    if not has_drawing_segments(subpaths):
        return None
    path = parse_path(subpaths_to_d(subpaths))
    if len(path) == 0:
        return None
    xmin, xmax, ymin, ymax = path.bbox()
    return BoundingBox.from_extents(xmin, ymin, xmax, ymax)


def text_bounds(element: Element) -> Optional[BoundingBox]:
    if not element.text:
        return None
    font_size = element.font_size or 18.0
    spacing = element.letter_spacing or 0.0
    n = len(element.text)
    width = n * font_size * GLYPH_WIDTH_EM + max(0, n - 1) * spacing
    return BoundingBox(
        min_x=element.x,
        min_y=element.y - font_size,
        width=width,
        height=font_size * LINE_HEIGHT_EM,
    )


def union_bounds(boxes: Iterable[BoundingBox]) -> Optional[BoundingBox]:
    corners = []
    for b in boxes:
        corners.extend([(b.min_x, b.min_y), (b.max_x, b.max_y)])
    if not corners:
        return None
    min_x, min_y, max_x, max_y = MultiPoint(corners).bounds
    return BoundingBox.from_extents(min_x, min_y, max_x, max_y)


def markup_bounds(markup: str) -> Optional[BoundingBox]:
    """Bounds of raw SVG content markup, as rendered (transforms applied)."""
    doc = SVG.parse(io.StringIO(f'<svg xmlns="{SVG_NS}">{markup}</svg>'))
    bbox = doc.bbox()
    if bbox is None:
        return None
    xmin, ymin, xmax, ymax = bbox
    return BoundingBox.from_extents(xmin, ymin, xmax, ymax)


class GeometryQuery:
    """Group-aware bounds for elements held by an element lookup.

    ``lookup`` is anything with ``get_element(id) -> Element | None``.
    """

    def __init__(self, lookup):
        self.lookup = lookup

    def get_bounds(self, element) -> Optional[BoundingBox]:
        if isinstance(element, str):
            element = self.lookup.get_element(element)
        if element is None:
            return None
        return self._bounds(element, set())

    def get_centroid(self, element) -> Point:
        bounds = self.get_bounds(element)
        return bounds.centroid if bounds is not None else Point(x=0, y=0)

    def _bounds(self, element: Element, seen: set) -> Optional[BoundingBox]:
        if element.id in seen:
            log.warning(f"Group cycle through {element.id}; ignoring repeat visit")
            return None
        seen.add(element.id)

        if element.kind == ElementKind.GROUP:
            boxes = []
            for child_id in element.child_ids:
                child = self.lookup.get_element(child_id)
                if child is None:
                    continue
                b = self._bounds(child, seen)
                if b is not None:
                    boxes.append(b)
            return union_bounds(boxes)
        if element.kind == ElementKind.PATH:
            return path_bounds(element.subpaths)
        if element.kind == ElementKind.TEXT:
            return text_bounds(element)
        if element.width is None or element.height is None:
            return None
        return BoundingBox(min_x=element.x, min_y=element.y, width=element.width, height=element.height)
