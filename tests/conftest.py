"""
Test configuration and fixtures for the instancing engine.

Provides small canvases (a straight path, a text run, rectangles and a group)
wired into fresh stores, plus a builder with deterministic record ids.
"""

import itertools
import os
import sys

import pytest

# Ensure repo root is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from vectormotion.core import load_config
from vectormotion.instancing import (
    AnimationInstanceBuilder,
    AnimationStore,
    DefinitionStore,
    Element,
    ElementKind,
    ElementStore,
    GeometryQuery,
    PathCommand,
    Point,
    default_catalog,
)


def make_path(element_id, *points, closed=False, **fields):
    """Polyline path element through ``points``."""
    cmds = [PathCommand(type="M", points=(Point(x=points[0][0], y=points[0][1]),))]
    for x, y in points[1:]:
        cmds.append(PathCommand(type="L", points=(Point(x=x, y=y),)))
    if closed:
        cmds.append(PathCommand(type="Z"))
    return Element(id=element_id, kind=ElementKind.PATH, subpaths=(tuple(cmds),), **fields)


def make_rect(element_id, x, y, w, h):
    return Element(id=element_id, kind=ElementKind.RECT, x=x, y=y, width=w, height=h)


def make_text(element_id, text, x=10, y=50, font_size=20, **fields):
    return Element(id=element_id, kind=ElementKind.TEXT, text=text, x=x, y=y, font_size=font_size, **fields)


@pytest.fixture(scope="session")
def test_config():
    """Load test configuration"""
    return load_config()


@pytest.fixture
def elements():
    return ElementStore(
        [
            make_path("line", (0, 0), (10, 0), stroke_width=2),
            make_text("title", "AB CD"),
            make_rect("box-a", 0, 0, 100, 50),
            make_rect("box-b", 200, 100, 40, 40),
            Element(id="grp", kind=ElementKind.GROUP, child_ids=("box-a", "box-b")),
        ]
    )


@pytest.fixture
def animations():
    return AnimationStore()


@pytest.fixture
def definitions():
    return DefinitionStore()


@pytest.fixture
def geometry(elements):
    return GeometryQuery(elements)


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"rec-{next(counter)}"


@pytest.fixture
def builder(catalog, elements, animations, definitions, geometry, id_factory):
    return AnimationInstanceBuilder(
        catalog, elements, animations, definitions, geometry=geometry, id_factory=id_factory
    )
