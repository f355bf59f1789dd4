"""
Vertical scale resolution for extracted chart data.
"""

import logging
import math

from chart_data import DataSet
from chart_errors import DegenerateScaleError

logger = logging.getLogger(__name__)

SCALE_EXACT = "exact"
SCALE_POWER_OF_TEN = "power-of-ten"
SCALE_POLICIES = (SCALE_EXACT, SCALE_POWER_OF_TEN)


def digit_count(number: int) -> int:
    """Number of decimal digits in a non-negative integer; 0 has one digit."""
    if number < 0:
        raise ValueError(f"digit_count expects a non-negative integer, got {number}")
    return len(str(number))


def power_of_ten_above(raw_max: float) -> float:
    """
    Smallest power of ten strictly greater than the integer part of raw_max.

    Data below 1 (including no data at all) gets a scale of 1.
    """
    whole = max(int(math.floor(raw_max)), 0)
    if whole == 0:
        return 1.0
    return float(10 ** digit_count(whole))


def resolve_scale(data_set: DataSet, policy: str = SCALE_POWER_OF_TEN) -> float:
    """
    Compute the value mapped to the top of the chart and store it on data_set.

    Args:
        data_set: Extracted chart data
        policy: 'exact' keeps the data maximum, 'power-of-ten' rounds it up

    Returns:
        float: The resolved scale maximum

    Raises:
        ValueError: If the policy is unknown
        DegenerateScaleError: If the resolved maximum is not positive
    """
    raw_max = data_set.raw_max

    if policy == SCALE_EXACT:
        scale_max = raw_max
    elif policy == SCALE_POWER_OF_TEN:
        scale_max = power_of_ten_above(raw_max)
    else:
        raise ValueError(f"Unknown scale policy: {policy!r} (expected one of {SCALE_POLICIES})")

    if scale_max <= 0:
        raise DegenerateScaleError(
            f"Scale resolved to {scale_max} with policy {policy!r}; the chart has no positive values"
        )

    data_set.scale_max = scale_max
    logger.debug("Resolved scale %s from raw max %s (%s)", scale_max, raw_max, policy)
    return scale_max
