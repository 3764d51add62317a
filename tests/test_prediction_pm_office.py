"""
Tests for PM Office Buffer
==========================
Tests for routewise/prediction/pm_office.py
"""

import pytest
from datetime import date, timedelta

from routewise.prediction.pm_office import (
    PmOfficeEstimate,
    estimate_pm_office,
    nearest_rank_percentile,
    pm_office_buffer,
)
from routewise.prediction.records import BreakStatus


def _history(make_day, values, start=date(2026, 1, 1)):
    return [make_day(start + timedelta(days=i), pm_office_time=v) for i, v in enumerate(values)]


class TestNearestRankPercentile:
    """Tests for nearest_rank_percentile"""

    def test_ten_values(self):
        assert nearest_rank_percentile(list(range(10, 101, 10)), 0.85) == 90

    def test_single_value(self):
        assert nearest_rank_percentile([42], 0.85) == 42

    def test_unsorted_input(self):
        assert nearest_rank_percentile([50, 10, 30, 20, 40], 0.85) == 50

    def test_empty(self):
        assert nearest_rank_percentile([], 0.85) == 0


class TestEstimatePmOffice:
    """Tests for estimate_pm_office"""

    def test_outlier_capped_by_p85(self, make_day):
        estimate = estimate_pm_office(_history(make_day, [20] * 9 + [60]))

        assert estimate.avg == 24
        assert estimate.p85 == 20
        assert estimate.buffer == 20

    def test_avg_below_p85(self, make_day):
        estimate = estimate_pm_office(_history(make_day, list(range(10, 101, 10))))
        assert estimate.buffer == 55

    def test_zero_samples_ignored(self, make_day):
        estimate = estimate_pm_office(_history(make_day, [0, 0, 30]))
        assert estimate.samples == 1
        assert estimate.buffer == 30

    def test_uses_most_recent_samples(self, make_day):
        history = _history(make_day, [50] * 5 + [10] * 3)
        estimate = estimate_pm_office(history, limit=3)
        assert estimate.avg == 10
        assert estimate.samples == 3

    def test_no_samples(self, make_day):
        estimate = estimate_pm_office(_history(make_day, [0, 0]))
        assert estimate == PmOfficeEstimate()
        assert estimate.buffer == 0


class TestPmOfficeBuffer:
    """Tests for break-aware buffer"""

    def test_all_breaks_taken_zeroes_buffer(self):
        estimate = PmOfficeEstimate(avg=20, p85=25, samples=10)
        assert pm_office_buffer(estimate, BreakStatus(True, True)) == 0

    def test_partial_breaks_keep_buffer(self):
        estimate = PmOfficeEstimate(avg=20, p85=25, samples=10)
        assert pm_office_buffer(estimate, BreakStatus(lunch_taken=True)) == 20
        assert pm_office_buffer(estimate) == 20
