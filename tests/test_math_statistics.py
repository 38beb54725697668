"""Tests for git_moar.math.statistics module."""

import pytest

from git_moar.math.statistics import Statistics, percent, round_half_up, round_int


class TestStatistics:
    """Zero-safe descriptive statistics."""

    def test_mean_empty(self):
        assert Statistics.mean([]) == 0.0

    def test_mean_known(self):
        assert Statistics.mean([2, 4, 9]) == 5.0

    def test_pstdev_divides_by_n(self):
        """Population stdev of [2, 4, 4, 4, 5, 5, 7, 9] is exactly 2."""
        assert Statistics.pstdev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_pstdev_empty(self):
        assert Statistics.pstdev([]) == 0.0

    def test_diffs(self):
        assert Statistics.diffs([1, 4, 10]) == [3.0, 6.0]
        assert Statistics.diffs([7]) == []


class TestRounding:
    def test_half_up_not_bankers(self):
        assert round_int(2.5) == 3
        assert round_int(0.5) == 1
        assert round_int(7.4) == 7

    def test_half_up_with_digits(self):
        assert round_half_up(0.625, 1) == 0.6
        assert round_half_up(1.25, 1) == 1.3

    def test_percent(self):
        assert percent(1, 3) == 33.3
        assert percent(2, 3) == 66.7
        assert percent(5, 0) == 0.0
