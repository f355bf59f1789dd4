#!/usr/bin/env python3
"""
Command-line entry point: render the first markdown table of a file as a chart.

Usage:
    python render_chart.py report.md -o chart.svg --format svg
    python render_chart.py report.md --kind bar --dump
"""

import argparse
import dataclasses
import sys
from pathlib import Path

import config
import config_validator
from chart_data import CHART_KINDS, TableSource
from chart_errors import ChartError
from chart_layout import build_chart
from chart_renderer import ChartRenderer
from chart_scale import SCALE_POLICIES
from logging_config import setup_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Render a markdown table as a line or bar chart.")
    parser.add_argument("input", help="File containing a markdown table")
    parser.add_argument("-o", "--output", help="Image file to write (default: input name with the format's extension)")
    parser.add_argument("--kind", choices=CHART_KINDS, help="Chart kind (default: configured or inferred)")
    parser.add_argument("--scale", choices=SCALE_POLICIES, help="Vertical scale policy")
    parser.add_argument("--format", choices=("png", "svg"), default="png", help="Output format")
    parser.add_argument("--width", type=float, help="Chart width in pixels")
    parser.add_argument("--height", type=float, help="Chart height in pixels")
    parser.add_argument("--caption", help="Summary text shown under the chart")
    parser.add_argument("--dump", action="store_true", help="Print the primitive list instead of writing an image")
    return parser.parse_args(argv)


def main(argv=None):
    """Run the command line; returns the process exit code."""
    args = parse_args(argv)
    logger = setup_logging()

    input_path = Path(args.input)
    try:
        content = input_path.read_text(encoding='utf-8')
    except OSError as e:
        logger.error("Cannot read %s: %s", input_path, e)
        return 1

    tables = ChartRenderer.TABLE_PATTERN.findall(content)
    if not tables:
        logger.error("No markdown table found in %s", input_path)
        return 1

    renderer = ChartRenderer(config)
    try:
        source = TableSource.from_markdown(tables[0])
        source.chart_kind = args.kind or renderer.infer_chart_type(source.headers)
        source.caption = args.caption or renderer.generate_chart_title(source.headers, source.chart_kind)

        options = config_validator.build_layout_options(config, chart_kind=source.chart_kind)
        overrides = {
            "scale_policy": args.scale,
            "chart_width": args.width,
            "chart_height": args.height,
        }
        options = dataclasses.replace(
            options, **{key: value for key, value in overrides.items() if value is not None}
        )

        chart = build_chart(source, options)
    except (ChartError, ValueError) as e:
        logger.error("Cannot chart %s: %s", input_path, e)
        return 1

    if args.dump:
        for primitive in chart.primitives:
            print(primitive)
        return 0

    output_path = Path(args.output) if args.output else input_path.with_suffix(f".{args.format}")

    if args.format == "svg":
        output_path.write_text(renderer.primitive_renderer.render_svg(chart), encoding='utf-8')
    else:
        output_path.write_bytes(renderer.primitive_renderer.render_png(chart).getvalue())

    logger.info("Wrote %s chart to %s", source.chart_kind, output_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
