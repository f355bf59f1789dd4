"""
Unit tests for table extraction into the chart data model.
"""

import pandas as pd
import pytest

from chart_data import DataSet, Series, TableSource, extract_data, parse_value
from chart_errors import ChartError, MalformedDataError, SchemaMismatchError


class TestSeries:
    """Test cases for the Series container."""

    def test_empty_series_has_zero_max(self):
        """Test that an empty series reports a maximum of zero."""
        series = Series("Sales")
        assert series.values == []
        assert series.max == 0

    def test_running_max(self):
        """Test that the maximum follows the values as they are added."""
        series = Series("Sales")
        for value in [3.0, 7.5, 2.0]:
            series.add(value)
        assert series.values == [3.0, 7.5, 2.0]
        assert series.max == 7.5

    def test_str_is_label(self):
        """Test that a series prints as its label."""
        assert str(Series("Retail")) == "Retail"


class TestExtractData:
    """Test cases for extract_data."""

    def test_labels_and_series_shape(self, sales_source):
        """Test that the first column becomes labels and the rest become series."""
        data_set = extract_data(sales_source)

        assert data_set.labels == ["Jan", "Feb", "Mar"]
        assert [s.label for s in data_set.series] == ["Online", "Retail"]
        assert data_set.series[0].values == [1.0, 2.0, 3.0]
        assert data_set.series[1].values == [2.0, 4.0, 6.0]
        for series in data_set.series:
            assert len(series.values) == len(data_set.labels)

    def test_scale_is_unset_after_extraction(self, sales_source):
        """Test that extraction leaves the scale for the resolver."""
        data_set = extract_data(sales_source)
        assert data_set.scale_max is None
        assert data_set.raw_max == 6.0

    def test_header_only_table(self):
        """Test that a table without body rows gives empty series."""
        data_set = extract_data(TableSource(headers=["Month", "Sales"], rows=[]))
        assert data_set.labels == []
        assert data_set.series[0].values == []
        assert data_set.raw_max == 0

    def test_decimal_notation_accepted(self):
        """Test the decimal forms accepted in data cells."""
        source = TableSource(
            headers=["Run", "Time"],
            rows=[["a", " 1.5 "], ["b", "2e3"], ["c", ".25"], ["d", "+4"]],
        )
        data_set = extract_data(source)
        assert data_set.series[0].values == [1.5, 2000.0, 0.25, 4.0]

    def test_non_numeric_cell_reports_position(self):
        """Test that a bad cell reports its row and column."""
        source = TableSource(
            headers=["Month", "Online", "Retail"],
            rows=[["Jan", "1", "2"], ["Feb", "2", "four"]],
        )
        with pytest.raises(MalformedDataError) as excinfo:
            extract_data(source)

        assert excinfo.value.row == 1
        assert excinfo.value.column == 2
        assert excinfo.value.cell == "four"
        assert isinstance(excinfo.value, ChartError)

    @pytest.mark.parametrize("cell", ["", "nan", "inf", "1,000", "$5", "12%", "1_000"])
    def test_non_decimal_cells_rejected(self, cell):
        """Test that cells outside plain decimal notation are rejected."""
        with pytest.raises(MalformedDataError):
            parse_value(cell, 0, 1)

    def test_negative_value_rejected(self):
        """Test that negative values are rejected."""
        with pytest.raises(MalformedDataError) as excinfo:
            parse_value("-3", 4, 2)
        assert "negative" in str(excinfo.value)

    def test_extra_cell_without_header(self):
        """Test that a row wider than the header is a schema mismatch."""
        source = TableSource(headers=["Month", "Sales"], rows=[["Jan", "1", "9"]])
        with pytest.raises(SchemaMismatchError):
            extract_data(source)

    def test_header_without_cell(self):
        """Test that a row narrower than the header is a schema mismatch."""
        source = TableSource(headers=["Month", "Online", "Retail"], rows=[["Jan", "1"]])
        with pytest.raises(SchemaMismatchError):
            extract_data(source)

    def test_missing_header_row(self):
        """Test that a table without headers is a schema mismatch."""
        with pytest.raises(SchemaMismatchError):
            extract_data(TableSource(headers=[], rows=[["Jan", "1"]]))


class TestDataSet:
    """Test cases for DataSet helpers."""

    def test_validate_detects_short_series(self):
        """Test that validate catches a series shorter than the labels."""
        series = Series("Sales")
        series.add(1.0)
        data_set = DataSet(labels=["Jan", "Feb"], series=[series])
        with pytest.raises(SchemaMismatchError):
            data_set.validate()

    def test_to_frame(self, sales_source):
        """Test conversion of extracted data to a DataFrame."""
        frame = extract_data(sales_source).to_frame()

        assert list(frame.columns) == ["Online", "Retail"]
        assert list(frame.index) == ["Jan", "Feb", "Mar"]
        assert frame.loc["Mar", "Retail"] == 6.0


class TestTableSource:
    """Test cases for building table sources."""

    def test_from_markdown(self, sales_table_text):
        """Test parsing a markdown table into a source."""
        source = TableSource.from_markdown(sales_table_text, chart_kind="bar", caption="Sales")

        assert source.headers == ["Month", "Online", "Retail"]
        assert source.rows[0] == ["Jan", "1", "2"]
        assert len(source.rows) == 3
        assert source.chart_kind == "bar"
        assert source.caption == "Sales"

    def test_from_markdown_keeps_empty_cells(self):
        """Test that empty cells survive parsing and fail extraction."""
        source = TableSource.from_markdown("| A | B |\n|---|---|\n| x |   |")
        assert source.rows == [["x", ""]]
        with pytest.raises(MalformedDataError):
            extract_data(source)

    def test_from_markdown_needs_separator(self):
        """Test that a lone header line is refused."""
        with pytest.raises(SchemaMismatchError):
            TableSource.from_markdown("| A | B |")

    def test_from_markdown_rejects_missing_separator(self):
        """Test that a second line that is not a separator is refused rather than skipped."""
        with pytest.raises(SchemaMismatchError):
            TableSource.from_markdown("| Month | Sales |\n| Jan | 1 |\n| Feb | 2 |")

    def test_from_markdown_alignment_separator(self):
        """Test that alignment colons are accepted in the separator line."""
        source = TableSource.from_markdown("| Month | Sales |\n|:---|---:|\n| Jan | 1 |")
        assert source.rows == [["Jan", "1"]]

    def test_chart_kind_unset_by_default(self, sales_table_text):
        """Test that a parsed source leaves the chart kind to the layout options."""
        assert TableSource.from_markdown(sales_table_text).chart_kind is None
        assert TableSource(headers=["A", "B"], rows=[]).chart_kind is None

    def test_from_dataframe(self):
        """Test building a source from a DataFrame."""
        frame = pd.DataFrame({"Month": ["Jan", "Feb"], "Sales": [1.5, 2.0]})
        source = TableSource.from_dataframe(frame)

        data_set = extract_data(source)
        assert data_set.labels == ["Jan", "Feb"]
        assert data_set.series[0].label == "Sales"
        assert data_set.series[0].values == [1.5, 2.0]

    def test_unknown_chart_kind(self):
        """Test that an unknown chart kind is refused."""
        with pytest.raises(ValueError):
            TableSource(headers=["A", "B"], rows=[], chart_kind="pie")
