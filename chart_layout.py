"""
Chart layout engine: turns an extracted DataSet into an ordered list of
drawing primitives for a line chart or a bar chart.

Primitives are emitted in drawing order, so later entries sit on top of
earlier ones when a renderer paints them in sequence.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import List, Optional

from chart_data import CHART_KINDS, DataSet, TableSource, extract_data
from chart_geometry import BackgroundSilhouette, CoordinateMapper, Point
from chart_primitives import (
    ROLE_AXIS,
    ROLE_BACKGROUND,
    ROLE_CAPTION,
    ROLE_LEGEND,
    Bar,
    Label,
    Line,
    PointMark,
    Polygon,
    Primitive,
)
from chart_scale import SCALE_POLICIES, SCALE_POWER_OF_TEN, resolve_scale

logger = logging.getLogger(__name__)

# Series colors; series i uses PALETTE[i % 3], so a fourth series reuses the first color.
PALETTE = (
    '#49CAE4',  # blue
    '#BCDF59',  # green
    '#A093E2',  # purple
)
GUIDE_COLOR = '#666666'
SILHOUETTE_FILL = '#333333'

AXIS_LABEL_GAP = 6
TICK_LENGTH = 4
ROW_LABEL_OFFSET = 16
LEGEND_TOP = 34
LEGEND_ROW_HEIGHT = 16
LEGEND_TEXT_GAP = 8
CAPTION_GAP = 12


def series_color(series_index: int) -> str:
    return PALETTE[series_index % len(PALETTE)]


def format_tick(value: float) -> str:
    """Axis label text: integers without a decimal point, other values trimmed."""
    if float(value).is_integer():
        return f"{value:.0f}"
    return f"{value:g}"


@dataclass(frozen=True)
class LayoutOptions:
    """Layout knobs for one chart. Sizes are in pixels."""

    chart_kind: str = "line"
    scale_policy: str = SCALE_POWER_OF_TEN
    chart_width: float = 400
    chart_height: float = 200
    margin: float = 40
    horizontal_step: Optional[float] = None
    bar_width: float = 10
    line_width: float = 2.0
    point_radius: float = 3.0

    def __post_init__(self):
        if self.chart_kind not in CHART_KINDS:
            raise ValueError(f"Unknown chart kind: {self.chart_kind!r}")
        if self.scale_policy not in SCALE_POLICIES:
            raise ValueError(f"Unknown scale policy: {self.scale_policy!r}")
        for name in ("chart_width", "chart_height", "bar_width", "line_width", "point_radius"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.margin < 0:
            raise ValueError(f"margin must not be negative, got {self.margin}")
        if self.horizontal_step is not None and self.horizontal_step <= 0:
            raise ValueError(f"horizontal_step must be positive, got {self.horizontal_step}")

    def step_for(self, point_count: int) -> float:
        """Slot width per data point; spreads the rows over the chart width when unset."""
        if self.horizontal_step is not None:
            return self.horizontal_step
        return self.chart_width / max(point_count, 1)


@dataclass
class ChartLayout:
    """Result of laying out one chart."""

    primitives: List[Primitive]
    data_set: DataSet
    options: LayoutOptions
    footer_height: float
    silhouette: Optional[BackgroundSilhouette] = None
    caption: str = ""

    def of_kind(self, kind: str) -> List[Primitive]:
        return [p for p in self.primitives if p.kind == kind]

    def of_role(self, role: str) -> List[Primitive]:
        return [p for p in self.primitives if p.role == role]

    def __iter__(self):
        return iter(self.primitives)

    def __len__(self) -> int:
        return len(self.primitives)


class ChartLayoutEngine:
    """Produces the primitive list for a DataSet under a fixed set of options."""

    def __init__(self, options: Optional[LayoutOptions] = None):
        self.options = options or LayoutOptions()

    def layout(self, data_set: DataSet, caption: Optional[str] = None) -> ChartLayout:
        """
        Lay out one chart.

        Args:
            data_set: Extracted data; the scale is resolved here if still unset
            caption: Summary text; defaults to the series labels

        Returns:
            ChartLayout with primitives in drawing order

        Raises:
            SchemaMismatchError: If a series does not have one value per row
            DegenerateScaleError: If the scale cannot be resolved to a positive value
        """
        options = self.options
        data_set.validate()
        if data_set.scale_max is None:
            resolve_scale(data_set, options.scale_policy)

        step = options.step_for(data_set.point_count)
        mapper = CoordinateMapper(data_set.scale_max, options.chart_height, step)

        primitives: List[Primitive] = self._axis(data_set.scale_max)
        silhouette = None

        if options.chart_kind == "line":
            silhouette = BackgroundSilhouette()
            lines, points = self._line_series(data_set, mapper, silhouette)
            primitives.append(Polygon(tuple(silhouette.build()), SILHOUETTE_FILL, role=ROLE_BACKGROUND))
            primitives.extend(lines)
            primitives.extend(points)
        else:
            primitives.extend(self._bar_series(data_set, mapper))

        primitives.extend(self._row_labels(data_set, mapper))
        primitives.extend(self._series_legend(data_set))

        summary = caption if caption else ", ".join(s.label for s in data_set.series)
        legend_bottom = options.chart_height + LEGEND_TOP + len(data_set.series) * LEGEND_ROW_HEIGHT
        primitives.append(
            Label(Point(options.chart_width / 2, legend_bottom + CAPTION_GAP), summary,
                  anchor="middle", role=ROLE_CAPTION)
        )

        logger.debug(
            "Laid out %s chart: %d series, %d row(s), %d primitive(s)",
            options.chart_kind, len(data_set.series), data_set.point_count, len(primitives)
        )

        return ChartLayout(
            primitives=primitives,
            data_set=data_set,
            options=options,
            footer_height=legend_bottom + CAPTION_GAP * 2 - options.chart_height,
            silhouette=silhouette,
            caption=summary,
        )

    def _axis(self, scale_max: float) -> List[Primitive]:
        width = self.options.chart_width
        height = self.options.chart_height
        axis: List[Primitive] = []
        for y, value in ((0, scale_max), (height / 2, scale_max / 2), (height, 0)):
            axis.append(Line(Point(0, y), Point(width, y), GUIDE_COLOR, 1.0, role=ROLE_AXIS))
            axis.append(Label(Point(-AXIS_LABEL_GAP, y), format_tick(value), anchor="end", role=ROLE_AXIS))
        return axis

    def _line_series(self, data_set: DataSet, mapper: CoordinateMapper, silhouette: BackgroundSilhouette):
        options = self.options
        lines: List[Primitive] = []
        points: List[Primitive] = []

        for series_index, series in enumerate(data_set.series):
            if not series.values:
                continue
            color = series_color(series_index)

            first = mapper.map_point(series_index, 0, series.values[0])
            previous = mapper.entry_point(first)
            silhouette.use(previous)

            for point_index, value in enumerate(series.values):
                current = mapper.map_point(series_index, point_index, value)
                lines.append(Line(previous, current, color, options.line_width))
                points.append(PointMark(current, color, options.point_radius))
                silhouette.use(current)
                previous = current

        return lines, points

    def _bar_series(self, data_set: DataSet, mapper: CoordinateMapper) -> List[Primitive]:
        options = self.options
        bars: List[Primitive] = []
        for series_index, series in enumerate(data_set.series):
            color = series_color(series_index)
            for point_index, value in enumerate(series.values):
                at = mapper.map_point(series_index, point_index, value)
                bars.append(Bar(at, color, series_index * options.bar_width, options.bar_width,
                                options.chart_height))
        return bars

    def _row_labels(self, data_set: DataSet, mapper: CoordinateMapper) -> List[Primitive]:
        height = self.options.chart_height
        legend: List[Primitive] = []
        for point_index, text in enumerate(data_set.labels):
            x = mapper.x_for(point_index)
            legend.append(Label(Point(x, height + ROW_LABEL_OFFSET), text, anchor="middle"))
            legend.append(Line(Point(x, height), Point(x, height + TICK_LENGTH), GUIDE_COLOR, 1.0,
                               role=ROLE_LEGEND))
        return legend

    def _series_legend(self, data_set: DataSet) -> List[Primitive]:
        options = self.options
        legend: List[Primitive] = []
        for series_index, series in enumerate(data_set.series):
            y = options.chart_height + LEGEND_TOP + series_index * LEGEND_ROW_HEIGHT
            legend.append(PointMark(Point(0, y), series_color(series_index), options.point_radius,
                                    role=ROLE_LEGEND))
            legend.append(Label(Point(LEGEND_TEXT_GAP, y), series.label, role=ROLE_LEGEND))
        return legend


def build_chart(source: TableSource, options: Optional[LayoutOptions] = None) -> ChartLayout:
    """
    Extract, scale and lay out one table.

    A chart kind set on the source takes precedence over the kind in
    options; a source without one is drawn with the options' kind.
    Raises ChartError subclasses without emitting anything on failure.
    """
    options = options or LayoutOptions()
    if source.chart_kind is not None and source.chart_kind != options.chart_kind:
        options = dataclasses.replace(options, chart_kind=source.chart_kind)

    data_set = extract_data(source)
    resolve_scale(data_set, options.scale_policy)
    chart = ChartLayoutEngine(options).layout(data_set, caption=source.caption)

    logger.info(
        "Built %s chart with %d series over %d row(s), scale max %s",
        options.chart_kind, len(data_set.series), data_set.point_count, data_set.scale_max
    )
    return chart
