"""
Chart rendering module.
Detects markdown tables in text, lays them out as charts and draws the
resulting primitives with matplotlib.
"""

import re
import logging
import io
from typing import List, Dict, Tuple, Optional

from matplotlib.figure import Figure
import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.patches import Circle, Rectangle, Polygon as PolygonPatch

import config
import config_validator
from chart_data import TableSource
from chart_errors import handle_chart_error
from chart_layout import ChartLayout, LayoutOptions, build_chart
from chart_primitives import Primitive

logger = logging.getLogger(__name__)

# Set matplotlib to use non-interactive backend
plt.switch_backend('Agg')

TEXT_ANCHORS = {"start": "left", "middle": "center", "end": "right"}


class PrimitiveRenderer:
    """Draws an ordered primitive list onto a matplotlib figure."""

    # Custom color scheme (0x96f theme)
    COLORS = {
        'background': '#000000',  # Pure black
        'foreground': '#FCFCFA',
        'border': '#666666',      # Grey for borders
    }

    def __init__(self, dpi: int = 100, font_size: float = 8, silhouette_alpha: float = 0.6):
        """Initialize the renderer with a dark theme and no grid."""
        self.dpi = dpi
        self.font_size = font_size
        self.silhouette_alpha = silhouette_alpha
        sns.set_theme(style="dark")
        plt.rcParams.update({
            'figure.facecolor': self.COLORS['background'],
            'axes.facecolor': self.COLORS['background'],
            'text.color': self.COLORS['foreground'],
            'font.family': 'monospace',
            'font.monospace': ['IBM Plex Mono', 'DejaVu Sans Mono', 'Courier New', 'monospace'],
        })

    def _points(self, pixels: float) -> float:
        """Convert a pixel length to typographic points at the configured dpi."""
        return pixels * 72.0 / self.dpi

    def draw(self, chart: ChartLayout) -> Figure:
        """
        Draw every primitive of a chart in emission order.

        The figure covers the chart plus its margin on every side and the
        legend area below it. Data coordinates are chart-local pixels with y
        pointing down, so primitives are drawn without any conversion.
        """
        options = chart.options
        margin = options.margin
        total_width = options.chart_width + 2 * margin
        total_height = options.chart_height + chart.footer_height + 2 * margin

        fig = plt.figure(figsize=(total_width / self.dpi, total_height / self.dpi), dpi=self.dpi)
        fig.patch.set_facecolor(self.COLORS['background'])
        ax = fig.add_axes([0, 0, 1, 1])
        ax.set_facecolor(self.COLORS['background'])
        ax.set_xlim(-margin, options.chart_width + margin)
        ax.set_ylim(options.chart_height + chart.footer_height + margin, -margin)
        ax.set_axis_off()

        for zorder, primitive in enumerate(chart.primitives, start=1):
            self._draw_primitive(ax, primitive, zorder)

        return fig

    def _draw_primitive(self, ax, primitive: Primitive, zorder: int) -> None:
        kind = primitive.kind

        if kind == "line":
            ax.plot(
                [primitive.start.x, primitive.end.x],
                [primitive.start.y, primitive.end.y],
                color=primitive.color,
                linewidth=self._points(primitive.width),
                solid_capstyle='round',
                zorder=zorder,
            )
        elif kind == "point":
            ax.add_patch(Circle(
                (primitive.at.x, primitive.at.y),
                primitive.radius,
                facecolor=primitive.color,
                edgecolor=self.COLORS['foreground'],
                linewidth=self._points(0.5),
                zorder=zorder,
            ))
        elif kind == "bar":
            ax.add_patch(Rectangle(
                (primitive.at.x + primitive.lane_offset, primitive.at.y),
                primitive.width,
                primitive.base - primitive.at.y,
                facecolor=primitive.color,
                edgecolor=self.COLORS['border'],
                linewidth=self._points(0.5),
                zorder=zorder,
            ))
        elif kind == "label":
            ax.text(
                primitive.at.x,
                primitive.at.y,
                primitive.text,
                ha=TEXT_ANCHORS.get(primitive.anchor, "left"),
                va='center',
                color=self.COLORS['foreground'],
                fontsize=self.font_size,
                zorder=zorder,
            )
        elif kind == "polygon":
            # A silhouette with fewer than three corners encloses nothing.
            if len(primitive.points) < 3:
                return
            ax.add_patch(PolygonPatch(
                [(p.x, p.y) for p in primitive.points],
                closed=True,
                facecolor=primitive.fill,
                edgecolor='none',
                alpha=self.silhouette_alpha,
                zorder=zorder,
            ))
        else:
            logger.warning("Unknown primitive kind: %s", kind)

    def _save(self, chart: ChartLayout, fmt: str) -> io.BytesIO:
        fig = self.draw(chart)
        buf = io.BytesIO()
        try:
            fig.savefig(buf, format=fmt, dpi=self.dpi, facecolor=self.COLORS['background'])
        finally:
            plt.close(fig)
        buf.seek(0)
        return buf

    def render_png(self, chart: ChartLayout) -> io.BytesIO:
        """Render a chart to PNG bytes."""
        return self._save(chart, 'png')

    def render_svg(self, chart: ChartLayout) -> str:
        """Render a chart to an SVG document."""
        return self._save(chart, 'svg').getvalue().decode('utf-8')


class ChartRenderer:
    """Handles detection and rendering of charts from markdown tables in text."""

    TABLE_PATTERN = re.compile(
        r"(\|.+\|[\r\n]+\|[\s\-:|]+\|[\r\n]+(?:\|.+\|[\r\n]*)+)", re.MULTILINE
    )

    TIME_PATTERNS = ["time", "hour", "day", "date", "week", "month", "year", "period", "quarter"]

    def __init__(self, config_module=None, primitive_renderer: Optional[PrimitiveRenderer] = None):
        """Initialize the chart renderer from configuration."""
        self.config = config_module or config
        self.chart_kind = config_validator.resolve_chart_kind(self.config)
        self.primitive_renderer = primitive_renderer or PrimitiveRenderer(
            dpi=config_validator.resolve_dpi(self.config)
        )

    def extract_tables_for_rendering(self, content: str) -> Tuple[str, List[Dict]]:
        """
        Extract markdown tables from content and render them as charts.

        Args:
            content: Text containing potential markdown tables

        Returns:
            Tuple of (cleaned_content, chart_data_list)
            - cleaned_content: Original content with rendered tables replaced by placeholders
            - chart_data_list: List of dicts with 'file', 'type', 'placeholder',
              'original_table' and 'layout' keys
        """
        tables = self.TABLE_PATTERN.findall(content)

        if not tables:
            return content, []

        logger.info("Found %d markdown table(s) in content", len(tables))

        chart_data_list = []
        cleaned_content = content

        for idx, table_text in enumerate(tables):
            try:
                chart = self.layout_table(table_text)

                if chart is None:
                    logger.warning("Table %s could not be charted, leaving it in place", idx + 1)
                    continue

                chart_type = chart.options.chart_kind
                placeholder = f"[Chart {idx + 1}: {chart_type.title()}]"

                chart_file = self.primitive_renderer.render_png(chart)

                cleaned_content = cleaned_content.replace(table_text, placeholder, 1)

                chart_data_list.append(
                    {
                        "file": chart_file,
                        "type": chart_type,
                        "placeholder": placeholder,
                        "original_table": table_text,
                        "layout": chart,
                    }
                )

                logger.info("Generated %s chart for table %s", chart_type, idx + 1)

            except Exception as e:
                logger.error("Error processing table %s: %s", idx + 1, e, exc_info=True)
                continue

        return cleaned_content, chart_data_list

    @handle_chart_error
    def layout_table(self, table_text: str, chart_kind: Optional[str] = None) -> Optional[ChartLayout]:
        """
        Parse one markdown table and lay it out.

        Returns None (after logging a warning) if the table is not chartable.
        """
        source = TableSource.from_markdown(table_text)
        kind = chart_kind or self.infer_chart_type(source.headers)
        source.chart_kind = kind
        source.caption = self.generate_chart_title(source.headers, kind)
        return build_chart(source, self.layout_options(kind))

    def layout_options(self, chart_kind: str) -> LayoutOptions:
        return config_validator.build_layout_options(self.config, chart_kind=chart_kind)

    def infer_chart_type(self, headers: List[str]) -> str:
        """Use the configured chart kind, or pick one from the table's shape."""
        if self.chart_kind != config_validator.CHART_KIND_AUTO:
            return self.chart_kind

        if not headers:
            return "bar"

        first_col_time = any(pattern in headers[0].lower() for pattern in self.TIME_PATTERNS)
        if first_col_time or len(headers) - 1 >= 2:
            return "line"
        return "bar"

    def generate_chart_title(self, headers: List[str], chart_type: str) -> str:
        """Generate a chart caption based on headers and chart type."""
        if len(headers) < 2:
            return f"{chart_type.title()} Chart"

        category_header = headers[0]
        value_headers = headers[1:]

        if len(value_headers) == 1:
            value_header = value_headers[0]
            if chart_type == "line":
                if any(pattern in category_header.lower() for pattern in self.TIME_PATTERNS):
                    return f"{value_header} Trends Over {category_header}"
                return f"{value_header} Evolution Across {category_header}"
            return f"{value_header} by {category_header}"

        if chart_type == "line":
            return f"Multi-Metric Trends Over {category_header}"
        return f"{', '.join(value_headers)} by {category_header}"


_chart_renderer = None


def extract_tables_for_rendering(content: str) -> Tuple[str, List[Dict]]:
    """
    Convenience function to extract and render tables from content.

    Args:
        content: Text containing markdown tables

    Returns:
        Tuple of (cleaned_content, chart_data_list)
    """
    global _chart_renderer
    if _chart_renderer is None:
        _chart_renderer = ChartRenderer()
    return _chart_renderer.extract_tables_for_rendering(content)
