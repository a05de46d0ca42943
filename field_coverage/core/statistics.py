"""
Robust statistics helpers.

Median and median absolute deviation (MAD) are used instead of mean and
standard deviation so a handful of bad GPS fixes cannot drag the
estimates around.
"""
import math
from typing import Sequence

import numpy as np


def median(values: Sequence[float]) -> float:
    """
    Median of a sequence; 0.0 for an empty sequence.

    Even-length input returns the mean of the two central values. The
    caller's sequence is never reordered.

    Example:
        >>> median([3.0, 1.0, 2.0])
        2.0
        >>> median([4.0, 1.0, 3.0, 2.0])
        2.5
    """
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0
    return float(np.median(arr))


def mad(values: Sequence[float]) -> float:
    """
    Median absolute deviation from the median; 0.0 for an empty sequence.

    Example:
        >>> mad([1.0, 2.0, 3.0, 4.0, 100.0])
        1.0
    """
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0
    return median(np.abs(arr - median(arr)))


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with .5 going towards +inf.

    Python's round() uses banker's rounding (round(2.5) == 2), which would
    shift shortfall thresholds and hex boundaries by one.

    Example:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(-0.5)
        0
    """
    return int(math.floor(value + 0.5))
