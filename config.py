"""
Chart configuration using environment variables and .env file support.

This module loads configuration from environment variables with .env file taking precedence.
Values are read as raw settings here; config_validator turns them into LayoutOptions.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
# Use override=True to prioritize .env file over system environment variables
load_dotenv(override=True)

# Chart kind (optional)
# Environment variable: CHART_KIND
# One of: auto, line, bar. 'auto' picks line or bar from the table's shape.
chart_kind = os.getenv('CHART_KIND', 'auto')

# Vertical scale policy (optional)
# Environment variable: CHART_SCALE_POLICY
# 'exact' uses the largest value, 'power-of-ten' rounds it up (42 -> 100)
scale_policy = os.getenv('CHART_SCALE_POLICY', 'power-of-ten')

# Chart size in pixels, excluding the margin (optional)
# Environment variables: CHART_WIDTH, CHART_HEIGHT, CHART_MARGIN
chart_width = os.getenv('CHART_WIDTH', '400')
chart_height = os.getenv('CHART_HEIGHT', '200')
margin = os.getenv('CHART_MARGIN', '40')

# Slot width per data point (optional)
# Environment variable: CHART_HORIZONTAL_STEP
# If not provided, rows are spread evenly across the chart width
horizontal_step = os.getenv('CHART_HORIZONTAL_STEP')

# Width of one bar in bar charts (optional)
# Environment variable: CHART_BAR_WIDTH
bar_width = os.getenv('CHART_BAR_WIDTH', '10')

# Raster resolution for PNG output (optional)
# Environment variable: CHART_DPI
dpi = os.getenv('CHART_DPI', '100')

# Logging (optional)
# Environment variables: LOG_DIRECTORY, LOG_LEVEL
# Set LOG_DIRECTORY to an empty string to log to the console only
log_directory = os.getenv('LOG_DIRECTORY', 'logs')
log_level = os.getenv('LOG_LEVEL', 'INFO')

# Defaults used when a configured value is invalid
DEFAULTS = {
    'chart_kind': 'auto',
    'scale_policy': 'power-of-ten',
    'chart_width': 400,
    'chart_height': 200,
    'margin': 40,
    'horizontal_step': None,
    'bar_width': 10,
    'dpi': 100,
}
