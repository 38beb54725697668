"""Gini coefficient for inequality measurement.

Applied to per-author added lines, the Gini coefficient measures how
concentrated code ownership is.

    G = 0: perfect equality (every author added the same amount)
    G -> 1: one author added everything

Formula (for sorted values x_1 <= x_2 <= ... <= x_n):
    G = (2 * sum(i * x_i)) / (n * sum(x_i)) - (n + 1) / n
"""

from typing import List, Union

import numpy as np


class Gini:
    """Gini coefficient calculations for inequality measurement."""

    @staticmethod
    def gini_coefficient(values: Union[List[float], List[int]]) -> float:
        """Compute the Gini coefficient of non-negative contributions.

        Args:
            values: Non-negative values, in any order.

        Returns:
            Gini coefficient in [0, 1). Empty input, a single contributor and
            an all-zero vector all return 0.0.

        Raises:
            ValueError: If values contains negative values.
        """
        if len(values) <= 1:
            return 0.0

        arr = np.sort(np.asarray(values, dtype=float))
        if (arr < 0).any():
            raise ValueError("Gini requires non-negative values")

        total = arr.sum()
        if total == 0:
            return 0.0

        n = len(arr)
        ranks = np.arange(1, n + 1)
        gini = (2.0 * float((ranks * arr).sum())) / (n * total) - (n + 1.0) / n

        return max(0.0, min(1.0, gini))
