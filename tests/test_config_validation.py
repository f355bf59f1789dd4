"""
Test suite for configuration validation.
Tests that raw settings become LayoutOptions with sensible fallbacks.
"""

import logging
import types

import pytest

import config
import config_validator
from chart_errors import ChartError, handle_chart_error, MalformedDataError


def make_config(**overrides):
    values = dict(config.DEFAULTS)
    values.update(overrides)
    return types.SimpleNamespace(DEFAULTS=config.DEFAULTS, **values)


class TestBuildLayoutOptions:
    """Test building layout options from configuration."""

    def test_defaults(self):
        """Test layout options built from the default configuration."""
        options = config_validator.build_layout_options(make_config())

        assert options.chart_kind == "line"
        assert options.scale_policy == "power-of-ten"
        assert options.chart_width == 400
        assert options.chart_height == 200
        assert options.margin == 40
        assert options.horizontal_step is None
        assert options.bar_width == 10

    def test_string_values_from_environment(self):
        """Test that string settings from the environment are converted."""
        options = config_validator.build_layout_options(make_config(
            chart_kind="BAR",
            scale_policy="exact",
            chart_width="640",
            chart_height="180.5",
            margin="0",
            horizontal_step="32",
            bar_width="6",
        ))

        assert options.chart_kind == "bar"
        assert options.scale_policy == "exact"
        assert options.chart_width == 640
        assert options.chart_height == 180.5
        assert options.margin == 0
        assert options.horizontal_step == 32
        assert options.bar_width == 6

    def test_explicit_kind_overrides_config(self):
        """Test that an explicit chart kind replaces the configured one."""
        options = config_validator.build_layout_options(make_config(chart_kind="line"), chart_kind="bar")
        assert options.chart_kind == "bar"

    def test_invalid_values_fall_back(self, caplog):
        """Test that invalid settings log a warning and fall back to defaults."""
        with caplog.at_level(logging.WARNING, logger="table_graphs.config"):
            options = config_validator.build_layout_options(make_config(
                chart_kind="pie",
                scale_policy="log",
                chart_width="wide",
                chart_height="-5",
                bar_width="0",
            ))

        assert options.chart_kind == "line"
        assert options.scale_policy == "power-of-ten"
        assert options.chart_width == 400
        assert options.chart_height == 200
        assert options.bar_width == 10
        assert "chart_width" in caplog.text
        assert "scale_policy" in caplog.text

    def test_empty_step_means_derived(self):
        """Test that an empty horizontal step leaves it derived from the width."""
        options = config_validator.build_layout_options(make_config(horizontal_step=""))
        assert options.horizontal_step is None

    def test_missing_attributes_use_defaults(self):
        """Test that missing config attributes use the defaults."""
        bare = types.SimpleNamespace(DEFAULTS=config.DEFAULTS)
        options = config_validator.build_layout_options(bare)
        assert options.chart_width == 400
        assert config_validator.resolve_dpi(bare) == 100


class TestResolveChartKind:
    """Test chart kind resolution."""

    @pytest.mark.parametrize("value,expected", [
        ("auto", "auto"), ("line", "line"), (" Bar ", "bar"), ("", "auto"), (None, "auto"), ("pie", "auto"),
    ])
    def test_resolve_chart_kind(self, value, expected):
        """Test chart kind resolution, including auto and invalid values."""
        assert config_validator.resolve_chart_kind(make_config(chart_kind=value)) == expected


class TestHandleChartError:
    """Test the chart error decorator."""

    def test_chart_error_returns_none(self, caplog):
        """Test that a chart error is logged and turned into None."""
        @handle_chart_error
        def failing_chart():
            raise MalformedDataError(2, 1, "abc")

        with caplog.at_level(logging.WARNING):
            assert failing_chart() is None
        assert "failing_chart" in caplog.text
        assert "row 2, column 1" in caplog.text

    def test_other_errors_propagate(self):
        """Test that unexpected errors are re-raised."""
        @handle_chart_error
        def broken():
            raise KeyError("boom")

        with pytest.raises(KeyError):
            broken()

    def test_success_passes_through(self):
        """Test that a successful call returns its value."""
        @handle_chart_error
        def fine():
            return 42

        assert fine() == 42

    def test_chart_errors_share_base(self):
        """Test that chart errors derive from ChartError."""
        assert issubclass(MalformedDataError, ChartError)
