"""
Tests for History Filter Module
===============================
Tests for routewise/prediction/history_filter.py
"""

import pytest
import logging
from datetime import date
from unittest.mock import Mock

from routewise.config import EngineSettings
from routewise.prediction.history_filter import HistoryFilter, FilterResult


class TestExclusionReason:
    """Tests for the per-record plausibility rules"""

    @pytest.fixture
    def history_filter(self):
        return HistoryFilter()

    def test_plausible_day_kept(self, history_filter, make_day):
        assert history_filter.exclusion_reason(make_day()) is None

    def test_pm_office_without_street(self, history_filter, make_day):
        reason = history_filter.exclusion_reason(make_day(street_time=0, pm_office_time=45))
        assert 'without street time' in reason

    def test_short_street_time(self, history_filter, make_day):
        assert 'below' in history_filter.exclusion_reason(make_day(street_time=100))

    def test_long_street_time_normal_day(self, history_filter, make_day):
        assert 'above 720' in history_filter.exclusion_reason(make_day(street_time=780))

    def test_long_street_time_allowed_in_peak(self, history_filter, make_day):
        assert history_filter.exclusion_reason(make_day('2026-12-08', street_time=780)) is None
        assert 'above 840' in history_filter.exclusion_reason(make_day('2026-12-08', street_time=900))

    def test_long_street_time_allowed_after_holiday(self, history_filter, make_day):
        assert history_filter.exclusion_reason(make_day('2026-02-17', street_time=780)) is None

    def test_pm_office_too_long(self, history_filter, make_day):
        assert 'pm office' in history_filter.exclusion_reason(make_day(pm_office_time=75))

    def test_office_too_long(self, history_filter, make_day):
        assert 'office time' in history_filter.exclusion_reason(make_day(office_time=200))

    def test_uses_normalized_street_time(self, history_filter, make_day):
        record = make_day(street_time=100, street_time_normalized=250)
        assert history_filter.exclusion_reason(record) is None

    def test_injected_classifier(self, make_day):
        classifier = Mock()
        classifier.can_exceed_street_time_limit.return_value = True
        history_filter = HistoryFilter(day_classifier=classifier)

        assert history_filter.exclusion_reason(make_day(street_time=800)) is None
        classifier.can_exceed_street_time_limit.assert_called_once()


class TestRun:
    """Tests for filtering a whole history"""

    def test_rules_apply_regardless_of_sample_size(self, make_day):
        """Even a single record is filtered"""
        result = HistoryFilter().run([make_day(street_time=50)])

        assert result.n_kept == 0
        assert result.n_excluded == 1
        assert '2026-03-04' in result.excluded

    def test_quarantined_records_skipped(self, make_day):
        records = [make_day(), make_day('2026-03-03', exclude_from_averages=True)]
        result = HistoryFilter().run(records)

        assert result.n_kept == 1
        assert result.quarantined == 1
        assert result.n_excluded == 0

    def test_filter_returns_kept(self, clean_history, make_day):
        kept = HistoryFilter().filter(clean_history + [make_day('2026-03-02', office_time=500)])
        assert kept == clean_history

    def test_empty(self):
        result = HistoryFilter().run([])
        assert result.n_kept == 0
        assert result.summarize().startswith('History filter kept 0')


class TestWorkingSet:
    """Tests for the small-sample fallback"""

    def test_enough_days_no_fallback(self, clean_history, make_day):
        records = clean_history + [make_day('2026-03-02', street_time=50)]
        result = HistoryFilter().working_set(records)

        assert result.used_fallback is False
        assert result.n_kept == len(clean_history)

    def test_fallback_to_unfiltered(self, make_day, caplog):
        records = [
            make_day('2026-03-02', street_time=50),
            make_day('2026-03-03', street_time=60),
            make_day('2026-03-04'),
        ]
        with caplog.at_level(logging.WARNING):
            result = HistoryFilter().working_set(records)

        assert result.used_fallback is True
        assert result.n_kept == 3
        assert 'unfiltered' in caplog.text

    def test_fallback_never_returns_quarantined(self, make_day):
        records = [
            make_day('2026-03-02', street_time=50),
            make_day('2026-03-03', exclude_from_averages=True),
        ]
        result = HistoryFilter().working_set(records)

        assert [r.date for r in result.kept] == [date(2026, 3, 2)]
        assert all(not r.exclude_from_averages for r in result.kept)

    def test_threshold_is_configurable(self, make_day):
        settings = EngineSettings(min_filtered_days=1)
        records = [make_day('2026-03-02', street_time=50), make_day('2026-03-03')]

        result = HistoryFilter(settings).working_set(records)

        assert result.used_fallback is False
        assert result.n_kept == 1

    def test_summarize_mentions_fallback(self):
        result = FilterResult(used_fallback=True, quarantined=2)
        assert 'quarantined 2' in result.summarize()
        assert 'unfiltered' in result.summarize()
