"""
Normalized chart data model and extraction from tabular sources.

A table is read as: header row, then body rows. The first column of every
row is a label, every other column is one numeric series.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from chart_errors import MalformedDataError, SchemaMismatchError

logger = logging.getLogger(__name__)

CHART_KINDS = ("line", "bar")

# Plain decimal notation only; float() alone would also accept "nan", "inf" and "1_000".
DECIMAL_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
SEPARATOR_CELL_PATTERN = re.compile(r"^:?-+:?$")


class Series:
    """One labeled data column with its running maximum."""

    def __init__(self, label: str):
        self.label = label
        self.values: List[float] = []
        self.max = 0.0

    def add(self, value: float) -> None:
        if not self.values or value > self.max:
            self.max = value
        self.values.append(value)

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        return f"Series({self.label!r}, {self.values!r})"

    def __str__(self) -> str:
        return self.label


@dataclass
class DataSet:
    """Row labels, the series plotted over them, and the resolved vertical scale."""

    labels: List[str] = field(default_factory=list)
    series: List[Series] = field(default_factory=list)
    scale_max: Optional[float] = None

    @property
    def point_count(self) -> int:
        return len(self.labels)

    @property
    def raw_max(self) -> float:
        maxima = [s.max for s in self.series if s.values]
        return max(maxima) if maxima else 0.0

    def validate(self) -> None:
        """Check that every series carries exactly one value per row."""
        for s in self.series:
            if len(s.values) != len(self.labels):
                raise SchemaMismatchError(
                    f"Series {s.label!r} has {len(s.values)} values for {len(self.labels)} rows"
                )

    def to_frame(self) -> pd.DataFrame:
        """Return the data as a DataFrame indexed by row label."""
        frame = pd.DataFrame(
            {s.label: s.values for s in self.series},
            index=pd.Index(self.labels, name="label"),
        )
        return frame


@dataclass
class TableSource:
    """Raw table handed over by whatever located the chart in a document."""

    headers: List[str]
    rows: List[List[str]]
    chart_kind: Optional[str] = None
    caption: Optional[str] = None

    def __post_init__(self):
        if self.chart_kind is not None and self.chart_kind not in CHART_KINDS:
            raise ValueError(f"Unknown chart kind: {self.chart_kind!r} (expected one of {CHART_KINDS})")

    @staticmethod
    def _split_cells(line: str) -> List[str]:
        line = line.strip()
        if line.startswith("|"):
            line = line[1:]
        if line.endswith("|"):
            line = line[:-1]
        return [cell.strip() for cell in line.split("|")]

    @classmethod
    def from_markdown(cls, table_text: str, chart_kind: Optional[str] = None, caption: Optional[str] = None) -> "TableSource":
        """
        Parse a markdown pipe table.

        Args:
            table_text: Header line, separator line, then one line per row
            chart_kind: 'line', 'bar', or None to leave the choice to the layout options
            caption: Optional summary text shown under the chart

        Returns:
            TableSource with raw cell texts (empty cells are kept)

        Raises:
            SchemaMismatchError: If the header or separator line is missing
        """
        lines = [line.strip() for line in table_text.strip().splitlines() if line.strip()]

        if len(lines) < 2:
            raise SchemaMismatchError("A markdown table needs a header line and a separator line")

        separator = cls._split_cells(lines[1])
        if not all(SEPARATOR_CELL_PATTERN.match(cell) for cell in separator):
            raise SchemaMismatchError(f"Second table line is not a separator: {lines[1]!r}")

        headers = cls._split_cells(lines[0])
        rows = [cls._split_cells(line) for line in lines[2:]]

        return cls(headers=headers, rows=rows, chart_kind=chart_kind, caption=caption)

    @classmethod
    def from_dataframe(cls, frame: pd.DataFrame, chart_kind: Optional[str] = None, caption: Optional[str] = None) -> "TableSource":
        """Build a source from a DataFrame whose first column holds the row labels."""
        headers = [str(column) for column in frame.columns]
        rows = [[str(cell) for cell in record] for record in frame.itertuples(index=False, name=None)]
        return cls(headers=headers, rows=rows, chart_kind=chart_kind, caption=caption)


def parse_value(cell: str, row: int, column: int) -> float:
    """Parse one data cell, raising MalformedDataError with its position."""
    text = cell.strip() if isinstance(cell, str) else str(cell)

    if not DECIMAL_PATTERN.match(text):
        raise MalformedDataError(row, column, cell)

    value = float(text)
    if not math.isfinite(value):
        raise MalformedDataError(row, column, cell, reason="value is not finite")
    if value < 0:
        raise MalformedDataError(row, column, cell, reason="negative values are not supported")

    return value


def extract_data(source: TableSource) -> DataSet:
    """
    Read a table source into labels and series.

    The returned DataSet has no scale yet; see chart_scale.resolve_scale.

    Raises:
        SchemaMismatchError: If a row does not have one cell per header column
        MalformedDataError: If a data cell is not a non-negative decimal number
    """
    if not source.headers:
        raise SchemaMismatchError("Table has no header row")

    width = len(source.headers)
    data_set = DataSet(series=[Series(header) for header in source.headers[1:]])

    for row_index, row in enumerate(source.rows):
        if len(row) != width:
            raise SchemaMismatchError(
                f"Row {row_index} has {len(row)} cells but the header has {width} columns"
            )

        data_set.labels.append(row[0])
        for col_index, cell in enumerate(row[1:], start=1):
            data_set.series[col_index - 1].add(parse_value(cell, row_index, col_index))

    data_set.validate()

    logger.debug(
        "Extracted %d row(s) across %d series (raw max %s)",
        data_set.point_count, len(data_set.series), data_set.raw_max
    )
    return data_set
