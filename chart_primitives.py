"""
Drawing primitives emitted by the layout engine.

Each primitive carries a ``kind`` tag for renderers and a ``role`` telling
which part of the chart it belongs to (axis, background, series, legend, caption).
"""

from dataclasses import dataclass
from typing import ClassVar, Tuple, Union

from chart_geometry import Point

ROLE_AXIS = "axis"
ROLE_BACKGROUND = "background"
ROLE_SERIES = "series"
ROLE_LEGEND = "legend"
ROLE_CAPTION = "caption"


@dataclass(frozen=True)
class Line:
    kind: ClassVar[str] = "line"

    start: Point
    end: Point
    color: str
    width: float = 1.0
    role: str = ROLE_SERIES


@dataclass(frozen=True)
class PointMark:
    """A small filled disc."""
    kind: ClassVar[str] = "point"

    at: Point
    color: str
    radius: float = 3.0
    role: str = ROLE_SERIES


@dataclass(frozen=True)
class Bar:
    """Rectangle from at.y down to base, left edge at at.x + lane_offset."""
    kind: ClassVar[str] = "bar"

    at: Point
    color: str
    lane_offset: float
    width: float
    base: float
    role: str = ROLE_SERIES


@dataclass(frozen=True)
class Label:
    kind: ClassVar[str] = "label"

    at: Point
    text: str
    anchor: str = "start"
    role: str = ROLE_LEGEND


@dataclass(frozen=True)
class Polygon:
    kind: ClassVar[str] = "polygon"

    points: Tuple[Point, ...]
    fill: str
    role: str = ROLE_BACKGROUND


Primitive = Union[Line, PointMark, Bar, Label, Polygon]
