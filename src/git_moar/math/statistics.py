"""Descriptive statistics used by the aggregate and analytics modules."""

import math
from typing import Sequence, Union

import numpy as np

Number = Union[int, float]


class Statistics:
    """Zero-safe descriptive statistics."""

    @staticmethod
    def mean(values: Sequence[Number]) -> float:
        """Arithmetic mean; 0.0 for empty input."""
        if len(values) == 0:
            return 0.0
        return float(np.mean(values))

    @staticmethod
    def pstdev(values: Sequence[Number]) -> float:
        """Population standard deviation (divides by n); 0.0 for empty input."""
        if len(values) == 0:
            return 0.0
        return float(np.std(values, ddof=0))

    @staticmethod
    def diffs(values: Sequence[Number]) -> list[float]:
        """Consecutive differences ``values[i] - values[i-1]``."""
        if len(values) < 2:
            return []
        return [float(d) for d in np.diff(np.asarray(values, dtype=float))]


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves away from negative infinity (0.5 -> 1, 2.5 -> 3).

    Python's ``round`` uses banker's rounding, which would make reported
    averages disagree with the figures users compute by hand.
    """
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    """``round_half_up`` to an int."""
    return int(math.floor(value + 0.5))


def percent(part: Number, whole: Number, ndigits: int = 1) -> float:
    """``part / whole * 100`` rounded; 0.0 when ``whole`` is 0."""
    if not whole:
        return 0.0
    return round_half_up(part / whole * 100, ndigits)
