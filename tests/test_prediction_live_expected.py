"""
Tests for Live Expected Times
=============================
Tests for routewise/prediction/live_expected.py
"""

import pytest
from datetime import datetime

from routewise.prediction.live_expected import (
    LiveOffset,
    apply_expected_time_rollover_sanity,
    apply_live_offset_to_predicted_time,
    is_valid_predicted_minutes,
    should_apply_live_offset,
)


class TestIsValidPredictedMinutes:
    """Tests for is_valid_predicted_minutes"""

    @pytest.mark.parametrize('value', [0, 0.0, 15, -3, '12'])
    def test_valid(self, value):
        assert is_valid_predicted_minutes(value)

    @pytest.mark.parametrize('value', [None, float('nan'), float('inf'), 'abc', True])
    def test_invalid(self, value):
        assert not is_valid_predicted_minutes(value)


class TestShouldApplyLiveOffset:
    """Tests for forward-only offset application"""

    def test_only_after_origin(self):
        offset = LiveOffset(minutes=12, from_seq=5)
        assert not should_apply_live_offset(4, offset)
        assert not should_apply_live_offset(5, offset)
        assert should_apply_live_offset(6, offset)

    def test_accepts_mapping(self):
        assert should_apply_live_offset(6, {'minutes': 12, 'fromSeq': 5})
        assert should_apply_live_offset(6, {'minutes': 12, 'from_seq': 5})

    @pytest.mark.parametrize('seq,offset', [
        (6, None),
        (None, LiveOffset(12, 5)),
        (6, LiveOffset(12, None)),
        ('x', LiveOffset(12, 5)),
    ])
    def test_missing_inputs(self, seq, offset):
        assert not should_apply_live_offset(seq, offset)


class TestApplyLiveOffset:
    """Tests for apply_live_offset_to_predicted_time"""

    def test_shifts_future_waypoint(self):
        predicted = datetime(2026, 3, 4, 12, 0)
        shifted = apply_live_offset_to_predicted_time(predicted, 8, LiveOffset(7.6, 5))
        assert shifted == datetime(2026, 3, 4, 12, 8)

    def test_never_backwards(self):
        predicted = datetime(2026, 3, 4, 12, 0)
        assert apply_live_offset_to_predicted_time(predicted, 3, LiveOffset(10, 5)) == predicted

    def test_negative_offset(self):
        predicted = datetime(2026, 3, 4, 12, 0)
        shifted = apply_live_offset_to_predicted_time(predicted, 6, {'minutes': -5, 'fromSeq': 5})
        assert shifted == datetime(2026, 3, 4, 11, 55)

    def test_invalid_predicted_passthrough(self):
        assert apply_live_offset_to_predicted_time(None, 6, LiveOffset(10, 5)) is None
        assert apply_live_offset_to_predicted_time('soon', 6, LiveOffset(10, 5)) == 'soon'

    def test_zero_offset(self):
        predicted = datetime(2026, 3, 4, 12, 0)
        assert apply_live_offset_to_predicted_time(predicted, 6, LiveOffset(0, 5)) == predicted


class TestRolloverSanity:
    """Tests for apply_expected_time_rollover_sanity"""

    def test_rolls_past_midnight(self):
        now = datetime(2026, 3, 4, 23, 30)
        expected = datetime(2026, 3, 4, 1, 0)

        result = apply_expected_time_rollover_sanity(expected, now)

        assert result.time == datetime(2026, 3, 5, 1, 0)
        assert result.rolled_days == 1
        assert result.did_adjust is True

    def test_recent_past_untouched(self):
        now = datetime(2026, 3, 4, 14, 0)
        expected = datetime(2026, 3, 4, 13, 30)

        result = apply_expected_time_rollover_sanity(expected, now)

        assert result.time == expected
        assert result.did_adjust is False

    def test_bounded_by_max_days(self):
        now = datetime(2026, 3, 10, 12, 0)
        expected = datetime(2026, 3, 1, 12, 0)

        result = apply_expected_time_rollover_sanity(expected, now)

        assert result.rolled_days == 2
        assert result.time == datetime(2026, 3, 3, 12, 0)

    def test_invalid_input(self):
        result = apply_expected_time_rollover_sanity(None, datetime(2026, 3, 4))
        assert result.time is None
        assert result.did_adjust is False
