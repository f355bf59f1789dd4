"""
Error types and handling utilities for chart construction.
Every failure during extraction, scaling or mapping aborts only the chart being built.
"""

import logging
from typing import Callable, Optional
from functools import wraps

logger = logging.getLogger('table_graphs.errors')


class ChartError(Exception):
    """Base class for errors that abort the layout of a single chart."""
    pass


class MalformedDataError(ChartError):
    """A data cell could not be read as a usable number."""

    def __init__(self, row: int, column: int, cell: Optional[str] = None, reason: str = "not a decimal number"):
        self.row = row
        self.column = column
        self.cell = cell
        self.reason = reason
        super().__init__(f"Malformed cell at row {row}, column {column} ({cell!r}): {reason}")


class SchemaMismatchError(ChartError):
    """Header columns and data columns do not line up."""
    pass


class DegenerateScaleError(ChartError):
    """The resolved vertical scale cannot be used to map values."""
    pass


def handle_chart_error(func: Callable) -> Callable:
    """
    Decorator for collaborators that prefer to skip a failed chart.

    A ChartError is logged as a warning and the wrapped call returns None.
    Anything else is logged with a traceback and re-raised.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ChartError as e:
            logger.warning("Chart skipped in %s: %s", func.__name__, e)
            return None
        except Exception as e:
            logger.error("Unexpected error in %s: %s", func.__name__, e, exc_info=True)
            raise

    return wrapper
