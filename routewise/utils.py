"""
Shared Utilities for RouteWise
==============================
Common functions used across multiple modules: lenient coercion,
wall-clock arithmetic and logging setup.
"""

import logging
import math
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

from zoneinfo import ZoneInfo

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging for command-line use.

    Args:
        verbose: DEBUG level when True, INFO otherwise.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT
    )


def to_number(value: Any, default: float = 0.0) -> float:
    """Coerce a loosely-typed value to a finite float.

    None, empty strings, non-numeric text, NaN and infinities all collapse
    to ``default``. Booleans are treated as 0/1.
    """
    if value is None:
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        n = float(value)
    except (TypeError, ValueError):
        return default
    return n if math.isfinite(n) else default


def to_bool(value: Any) -> bool:
    """Coerce CSV/JSON flag values ('true', '1', 'yes', 1, True) to bool."""
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'y', 't')
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def parse_date(value: Any) -> Optional[date]:
    """Parse a YYYY-MM-DD string (or ISO timestamp) into a local date.

    Date-only strings are never routed through a timezone conversion, so a
    Monday stays a Monday.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def parse_hhmm(value: Any) -> time:
    """Parse an 'HH:MM' string into a time, falling back to midnight."""
    if isinstance(value, time):
        return value
    if not value or not isinstance(value, str):
        return time(0, 0)
    parts = value.strip().split(':')
    try:
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 else 0
    except ValueError:
        return time(0, 0)
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        return time(0, 0)
    return time(hours, minutes)


def combine_start(service_date: date, start_time: Any) -> datetime:
    """Route start (HH:MM) on the given service date as a naive local datetime."""
    return datetime.combine(service_date, parse_hhmm(start_time))


def add_minutes(moment: datetime, minutes: float) -> datetime:
    """Shift a datetime by a whole number of minutes (rounded)."""
    return moment + timedelta(minutes=round(to_number(minutes)))


def minutes_between(start: datetime, end: datetime) -> float:
    """Signed minutes from ``start`` to ``end``."""
    return (end - start).total_seconds() / 60.0


def local_now(timezone: str = 'America/Chicago') -> datetime:
    """Current wall-clock time in the route's timezone, returned naive."""
    return datetime.now(ZoneInfo(timezone)).replace(tzinfo=None)


def format_clock(moment: Optional[datetime]) -> str:
    """Format a datetime as a carrier-facing clock string, e.g. '2:05 PM'."""
    if moment is None:
        return '--'
    return moment.strftime('%I:%M %p').lstrip('0')
