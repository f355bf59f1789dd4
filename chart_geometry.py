"""
Coordinate mapping and the background silhouette accumulator.

All coordinates are chart-local and exclude the margin: x grows to the right
with the data-point index, y grows downward from 0 (top) to the chart height.
"""

import math
from typing import Dict, List, NamedTuple, Tuple

from chart_errors import DegenerateScaleError


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class Point(NamedTuple):
    x: float
    y: float


class CoordinateMapper:
    """Maps data values to chart-local points for one chart."""

    def __init__(self, scale_max: float, chart_height: float, horizontal_step: float):
        if not scale_max or scale_max <= 0:
            raise DegenerateScaleError(f"Cannot map values onto a scale of {scale_max}")
        self.scale_max = scale_max
        self.chart_height = chart_height
        self.horizontal_step = horizontal_step

    def x_for(self, point_index: int) -> int:
        # Centered in the slot, halves rounded up.
        return round_half_up(self.horizontal_step * (point_index + 0.5))

    def y_for(self, value: float) -> float:
        return self.chart_height - self.chart_height * value / self.scale_max

    def map_value(self, point_index: int, value: float) -> Point:
        return Point(self.x_for(point_index), self.y_for(value))

    def map_point(self, series_index: int, point_index: int, value: float) -> Point:
        """Position of one value of one series; every series shares the same slots."""
        return self.map_value(point_index, value)

    def entry_point(self, first: Point) -> Point:
        """Half-height lead-in at the left edge, used before a line series' first point."""
        return Point(0, self.chart_height - (self.chart_height - first.y) / 2)


class _Bucket:
    __slots__ = ("top", "bottom")

    def __init__(self, y: float):
        self.top = y
        self.bottom = y


class BackgroundSilhouette:
    """
    Vertical envelope of every point visited while drawing a line chart.

    Points are bucketed by rounded x. Each bucket remembers the largest y
    (top) and the smallest y (bottom) seen in that column across all series.
    """

    def __init__(self):
        self._buckets: Dict[int, _Bucket] = {}

    def use(self, point: Point) -> None:
        key = round_half_up(point.x)
        bucket = self._buckets.get(key)
        if bucket is None:
            self._buckets[key] = _Bucket(point.y)
        else:
            bucket.top = max(bucket.top, point.y)
            bucket.bottom = min(bucket.bottom, point.y)

    def keys(self) -> List[int]:
        return sorted(self._buckets)

    def bucket(self, key: int) -> Tuple[float, float]:
        """Return (top, bottom) of one bucket."""
        found = self._buckets[key]
        return found.top, found.bottom

    def build(self) -> List[Point]:
        """
        Closed outline: tops left to right, then bottoms right to left.

        No buckets gives an empty list, one bucket gives two coinciding points.
        """
        keys = self.keys()
        outline = [Point(key, self._buckets[key].top) for key in keys]
        outline.extend(Point(key, self._buckets[key].bottom) for key in reversed(keys))
        return outline

    def __len__(self) -> int:
        return len(self._buckets)
