"""Mathematical utilities for history analysis."""

from .gini import Gini
from .statistics import Statistics, percent, round_half_up, round_int

__all__ = [
    "Gini",
    "Statistics",
    "percent",
    "round_half_up",
    "round_int",
]
