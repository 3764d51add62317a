"""
Day Types
=========
Calendar classification of workdays for similarity matching and the
street-time ceiling.

Day-after-holiday overrides everything; Saturday and Monday are their own
types; everything else is a normal day.
"""

from datetime import date, timedelta
from enum import Enum
from functools import lru_cache
from typing import FrozenSet, Optional, Protocol, Union

from .utils import parse_date

DateLike = Union[str, date, None]


class DayType(str, Enum):
    NORMAL = "normal"
    MONDAY = "monday"
    SATURDAY = "saturday"
    DAY_AFTER_HOLIDAY = "day-after-holiday"

    @classmethod
    def coerce(cls, value) -> Optional['DayType']:
        if value is None or value == '':
            return None
        if isinstance(value, DayType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None

    @property
    def label(self) -> str:
        if self is DayType.SATURDAY:
            return "Saturday"
        if self is DayType.MONDAY:
            return "Monday"
        return self.value


class DayClassifier(Protocol):
    """Calendar collaborator consumed by the history filter and matcher."""

    def get_day_type(self, day: DateLike) -> DayType:
        ...

    def can_exceed_street_time_limit(self, day: DateLike) -> bool:
        ...


def _observed(day: date) -> date:
    # Saturday holidays are observed Friday, Sunday holidays Monday.
    if day.weekday() == 5:
        return day - timedelta(days=1)
    if day.weekday() == 6:
        return day + timedelta(days=1)
    return day


def _nth_weekday(year: int, month: int, weekday: int, n: int) -> date:
    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    return first + timedelta(days=offset + (n - 1) * 7)


def _last_weekday(year: int, month: int, weekday: int) -> date:
    if month == 12:
        last = date(year, 12, 31)
    else:
        last = date(year, month + 1, 1) - timedelta(days=1)
    return last - timedelta(days=(last.weekday() - weekday) % 7)


@lru_cache(maxsize=64)
def federal_holidays_observed(year: int) -> FrozenSet[date]:
    """Observed US federal holidays for a year."""
    monday, thursday = 0, 3
    holidays = [
        _observed(date(year, 1, 1)),     # New Year's Day
        _observed(date(year, 6, 19)),    # Juneteenth
        _observed(date(year, 7, 4)),     # Independence Day
        _observed(date(year, 11, 11)),   # Veterans Day
        _observed(date(year, 12, 25)),   # Christmas Day
        _nth_weekday(year, 1, monday, 3),    # MLK Day
        _nth_weekday(year, 2, monday, 3),    # Presidents Day
        _last_weekday(year, 5, monday),      # Memorial Day
        _nth_weekday(year, 9, monday, 1),    # Labor Day
        _nth_weekday(year, 10, monday, 2),   # Columbus / Indigenous Peoples' Day
        _nth_weekday(year, 11, thursday, 4), # Thanksgiving
    ]
    return frozenset(holidays)


def is_federal_holiday_observed(day: DateLike) -> bool:
    d = parse_date(day)
    if d is None:
        return False
    # Neighbor years: Jan 1 on a Saturday is observed Dec 31.
    return any(d in federal_holidays_observed(y) for y in (d.year - 1, d.year, d.year + 1))


def is_day_after_federal_holiday(day: DateLike) -> bool:
    d = parse_date(day)
    if d is None:
        return False
    return is_federal_holiday_observed(d - timedelta(days=1))


def is_peak_season(day: DateLike) -> bool:
    """November and December."""
    d = parse_date(day)
    return d is not None and d.month >= 11


def get_day_type(day: DateLike) -> DayType:
    d = parse_date(day)
    if d is None:
        return DayType.NORMAL
    if is_day_after_federal_holiday(d):
        return DayType.DAY_AFTER_HOLIDAY
    if d.weekday() == 5:
        return DayType.SATURDAY
    if d.weekday() == 0:
        return DayType.MONDAY
    return DayType.NORMAL


def can_exceed_street_time_limit(day: DateLike) -> bool:
    """True when street time beyond the normal 12h ceiling is plausible."""
    return get_day_type(day) is DayType.DAY_AFTER_HOLIDAY or is_peak_season(day)


class FederalHolidayCalendar:
    """Default DayClassifier backed by the US federal holiday schedule."""

    def get_day_type(self, day: DateLike) -> DayType:
        return get_day_type(day)

    def can_exceed_street_time_limit(self, day: DateLike) -> bool:
        return can_exceed_street_time_limit(day)
