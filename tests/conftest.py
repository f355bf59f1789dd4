"""Shared fixtures for chart tests."""

import os
import sys

import pytest

# Add the project root to the path so the top-level modules import without installation
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from chart_data import TableSource  # noqa: E402


SALES_TABLE = """| Month | Online | Retail |
| ----- | ------ | ------ |
| Jan   | 1      | 2      |
| Feb   | 2      | 4      |
| Mar   | 3      | 6      |"""


@pytest.fixture
def sales_table_text():
    return SALES_TABLE


@pytest.fixture
def sales_source():
    """Two series over three rows: [[1, 2], [2, 4], [3, 6]]."""
    return TableSource(
        headers=["Month", "Online", "Retail"],
        rows=[["Jan", "1", "2"], ["Feb", "2", "4"], ["Mar", "3", "6"]],
    )
