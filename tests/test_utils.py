"""
Tests for routewise/utils.py
============================
Tests for shared utility functions.
"""

import pytest
import logging
import os
import sys
from datetime import date, datetime, time

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from routewise.utils import (
    add_minutes,
    combine_start,
    configure_logging,
    format_clock,
    local_now,
    minutes_between,
    parse_date,
    parse_hhmm,
    to_bool,
    to_number,
)


class TestToNumber:
    """Tests for lenient number coercion"""

    @pytest.mark.parametrize('value,expected', [
        (5, 5.0),
        ('12.5', 12.5),
        (' 7 ', 7.0),
        (True, 1.0),
    ])
    def test_numeric_values(self, value, expected):
        assert to_number(value) == expected

    @pytest.mark.parametrize('value', [None, '', '   ', 'abc', float('nan'), float('inf'), [1]])
    def test_bad_values_use_default(self, value):
        assert to_number(value) == 0.0
        assert to_number(value, default=8.5) == 8.5


class TestToBool:
    """Tests for flag coercion"""

    @pytest.mark.parametrize('value', ['true', 'TRUE', '1', 'yes', 1, True])
    def test_truthy(self, value):
        assert to_bool(value) is True

    @pytest.mark.parametrize('value', ['false', '0', '', None, 0, False, float('nan')])
    def test_falsy(self, value):
        assert to_bool(value) is False


class TestParseDate:
    """Tests for local date parsing"""

    def test_date_only_string_keeps_weekday(self):
        """A Monday string must stay a Monday"""
        d = parse_date('2026-03-02')
        assert d == date(2026, 3, 2)
        assert d.weekday() == 0

    def test_iso_timestamp_uses_date_part(self):
        assert parse_date('2026-03-02T23:30:00Z') == date(2026, 3, 2)

    def test_datetime_and_date(self):
        assert parse_date(datetime(2026, 3, 2, 8, 0)) == date(2026, 3, 2)
        assert parse_date(date(2026, 3, 2)) == date(2026, 3, 2)

    @pytest.mark.parametrize('value', [None, '', 'not-a-date'])
    def test_invalid_returns_none(self, value):
        assert parse_date(value) is None


class TestClockHelpers:
    """Tests for wall-clock arithmetic"""

    def test_parse_hhmm(self):
        assert parse_hhmm('07:30') == time(7, 30)
        assert parse_hhmm('7') == time(7, 0)

    @pytest.mark.parametrize('value', [None, '', 'xx:yy', '25:00', 730])
    def test_parse_hhmm_fallback(self, value):
        assert parse_hhmm(value) == time(0, 0)

    def test_combine_start(self):
        assert combine_start(date(2026, 3, 4), '07:30') == datetime(2026, 3, 4, 7, 30)

    def test_add_minutes_rounds(self):
        start = datetime(2026, 3, 4, 7, 30)
        assert add_minutes(start, 90) == datetime(2026, 3, 4, 9, 0)
        assert add_minutes(start, 89.6) == datetime(2026, 3, 4, 9, 0)

    def test_add_minutes_crosses_midnight(self):
        assert add_minutes(datetime(2026, 3, 4, 23, 50), 20) == datetime(2026, 3, 5, 0, 10)

    def test_minutes_between_is_signed(self):
        a = datetime(2026, 3, 4, 9, 0)
        b = datetime(2026, 3, 4, 10, 30)
        assert minutes_between(a, b) == 90
        assert minutes_between(b, a) == -90

    def test_format_clock(self):
        assert format_clock(datetime(2026, 3, 4, 14, 5)) == '2:05 PM'
        assert format_clock(None) == '--'

    def test_local_now_is_naive(self):
        assert local_now('America/Chicago').tzinfo is None


class TestConfigureLogging:
    """Tests for logging setup"""

    def test_does_not_raise(self):
        configure_logging()
        configure_logging(verbose=True)
        assert logging.getLogger().handlers
