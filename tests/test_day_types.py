"""
Tests for routewise/day_types.py
================================
Tests for holiday-aware day classification.
"""

import pytest
from datetime import date

from routewise.day_types import (
    DayType,
    FederalHolidayCalendar,
    can_exceed_street_time_limit,
    federal_holidays_observed,
    get_day_type,
    is_day_after_federal_holiday,
    is_federal_holiday_observed,
    is_peak_season,
)


class TestFederalHolidays:
    """Tests for the observed holiday schedule"""

    def test_floating_holidays_2026(self):
        holidays = federal_holidays_observed(2026)
        assert date(2026, 1, 19) in holidays    # MLK Day
        assert date(2026, 2, 16) in holidays    # Presidents Day
        assert date(2026, 5, 25) in holidays    # Memorial Day
        assert date(2026, 9, 7) in holidays     # Labor Day
        assert date(2026, 10, 12) in holidays   # Columbus Day
        assert date(2026, 11, 26) in holidays   # Thanksgiving

    def test_saturday_holiday_observed_friday(self):
        # July 4, 2026 is a Saturday
        assert is_federal_holiday_observed('2026-07-03')
        assert not is_federal_holiday_observed('2026-07-04')

    def test_sunday_holiday_observed_monday(self):
        # Christmas 2022 fell on a Sunday
        assert is_federal_holiday_observed(date(2022, 12, 26))

    def test_new_year_observed_in_previous_year(self):
        # Jan 1, 2022 was a Saturday, observed Friday Dec 31, 2021
        assert is_federal_holiday_observed(date(2021, 12, 31))

    def test_invalid_input(self):
        assert not is_federal_holiday_observed(None)
        assert not is_day_after_federal_holiday('garbage')


class TestGetDayType:
    """Tests for day type precedence"""

    def test_normal_weekday(self):
        assert get_day_type('2026-03-04') is DayType.NORMAL

    def test_monday(self):
        assert get_day_type('2026-03-02') is DayType.MONDAY

    def test_saturday(self):
        assert get_day_type('2026-03-07') is DayType.SATURDAY

    def test_day_after_holiday_overrides_weekday(self):
        # Tuesday after Presidents Day
        assert get_day_type('2026-02-17') is DayType.DAY_AFTER_HOLIDAY

    def test_day_after_friday_holiday_is_saturday_override(self):
        # Observed Independence Day is Friday July 3, 2026
        assert is_day_after_federal_holiday('2026-07-04')
        assert get_day_type('2026-07-04') is DayType.DAY_AFTER_HOLIDAY

    def test_unparseable_is_normal(self):
        assert get_day_type(None) is DayType.NORMAL

    def test_coerce(self):
        assert DayType.coerce('Monday') is DayType.MONDAY
        assert DayType.coerce('day-after-holiday') is DayType.DAY_AFTER_HOLIDAY
        assert DayType.coerce('holiday') is None
        assert DayType.coerce('') is None

    def test_labels(self):
        assert DayType.SATURDAY.label == 'Saturday'
        assert DayType.NORMAL.label == 'normal'


class TestStreetTimeCeiling:
    """Tests for exceptional street-time allowance"""

    def test_peak_season(self):
        assert is_peak_season('2026-11-02')
        assert is_peak_season('2026-12-15')
        assert not is_peak_season('2026-10-30')

    def test_can_exceed(self):
        assert can_exceed_street_time_limit('2026-12-08')
        assert can_exceed_street_time_limit('2026-02-17')
        assert not can_exceed_street_time_limit('2026-03-04')

    def test_calendar_delegates(self):
        calendar = FederalHolidayCalendar()
        assert calendar.get_day_type('2026-03-02') is DayType.MONDAY
        assert calendar.can_exceed_street_time_limit('2026-12-08')
