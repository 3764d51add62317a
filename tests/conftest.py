"""
Pytest Configuration and Shared Fixtures
=========================================
"""

import pytest
import os
import sys
from datetime import date, timedelta

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from routewise.prediction.records import HistoricalDayRecord, RouteConfig, TodayMailVolumes


@pytest.fixture
def make_day():
    """Factory for historical day records with sensible defaults"""
    def _make(day='2026-03-04', **overrides):
        values = {
            'date': date.fromisoformat(day) if isinstance(day, str) else day,
            'dps': 1800.0,
            'flats': 4.0,
            'letters': 2.0,
            'parcels': 60.0,
            'sprs': 20.0,
            'street_time': 300.0,
            'office_time': 90.0,
            'pm_office_time': 20.0,
        }
        values.update(overrides)
        return HistoricalDayRecord(**values)
    return _make


@pytest.fixture
def clean_history(make_day):
    """Five plain Tuesday-Friday workdays with 300m street and 20m PM office"""
    days = [date(2026, 2, 24), date(2026, 2, 25), date(2026, 2, 26),
            date(2026, 2, 27), date(2026, 3, 3)]
    return [make_day(d) for d in days]


@pytest.fixture
def route_config():
    """Default mixed route starting 07:30 with an 8.5h tour"""
    return RouteConfig(start_time='07:30', tour_length=8.5)


@pytest.fixture
def quiet_today():
    """Volumes whose office time is exactly 90 minutes (33 fixed + 57 safety talk)"""
    return TodayMailVolumes(safety_talk=57)


@pytest.fixture
def today_volumes():
    """Typical declared volumes matching the make_day defaults"""
    return TodayMailVolumes(dps=1800, flats=4, letters=2, parcels=60, sprs=20)


# ============================================================================
# Configuration for test environment
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Set up test environment variables"""
    monkeypatch.delenv('ROUTEWISE_TIMEZONE', raising=False)
    monkeypatch.delenv('ROUTEWISE_SETTINGS_FILE', raising=False)
