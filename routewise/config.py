"""
Engine Configuration
====================
Tunable thresholds and rate constants for the prediction engine.

No logic here beyond validation, so behavior can be tuned without touching
the estimators. Values can be overridden from a JSON file
(config/engine_settings.json by default) and a couple of environment
variables (read from .env when present):

    ROUTEWISE_TIMEZONE        route-local timezone (default America/Chicago)
    ROUTEWISE_SETTINGS_FILE   alternate settings JSON path
"""

import json
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .paths import ENGINE_SETTINGS_FILE

# Find .env file in project root
load_dotenv(Path(__file__).parent.parent / '.env')


@dataclass(frozen=True)
class OfficeRates:
    """Casing/pull-down standards used to convert volumes into office minutes."""
    fixed_office_time: float = 33.0
    flats_per_foot: float = 115.0
    letters_per_foot: float = 227.0
    flats_case_rate: float = 8.0      # pieces per minute
    letters_case_rate: float = 18.0   # pieces per minute
    pull_down_rate: float = 70.0      # pieces per minute
    load_truck_time: float = 0.4      # minutes per parcel/SPR
    boxholder_bundle_time: float = 15.0

    def validate(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value < 0:
                raise ValueError(f"{f.name} must be >= 0")
        for name in ('flats_case_rate', 'letters_case_rate', 'pull_down_rate'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0")


@dataclass(frozen=True)
class EngineSettings:
    """
    Central configuration for the prediction engine.

    Notes:
    - min_clean_days and historical_floor_minutes gate the historical
      street-time tier. Both are pending product-owner review and are kept
      at their long-standing values.
    - pm_office_* control the PM-office buffer: min(avg, P85) of the most
      recent non-zero samples.
    """

    # --- History filter bounds (minutes) ---
    min_street_time: float = 120.0
    max_street_time: float = 720.0
    max_street_time_exceptional: float = 840.0
    max_pm_office_time: float = 60.0
    max_office_time: float = 180.0
    max_pm_office_without_street: float = 30.0
    # Below this many filtered days, callers fall back to the unfiltered set.
    min_filtered_days: int = 3

    # --- Similarity search ---
    max_candidates: int = 90
    top_n: int = 10
    min_same_type_days: int = 3
    recency_horizon_days: float = 75.0
    recency_floor: float = 0.55
    min_combined_weight: float = 0.0001

    # --- Street time tiers ---
    min_clean_days: int = 3
    historical_floor_minutes: float = 30.0
    default_street_minutes: float = 450.0

    # --- Waypoint refinement ---
    max_divergence_minutes: float = 120.0

    # --- PM office buffer ---
    pm_office_sample_limit: int = 30
    pm_office_percentile: float = 0.85

    # --- Locale ---
    timezone: str = 'America/Chicago'

    rates: OfficeRates = field(default_factory=OfficeRates)

    def validate(self) -> None:
        """Basic sanity checks. Raises ValueError on inconsistent settings."""
        if self.min_street_time < 0:
            raise ValueError("min_street_time must be >= 0")

        if self.max_street_time <= self.min_street_time:
            raise ValueError("max_street_time must be > min_street_time")

        if self.max_street_time_exceptional < self.max_street_time:
            raise ValueError("max_street_time_exceptional must be >= max_street_time")

        if self.min_filtered_days < 0 or self.min_clean_days < 0:
            raise ValueError("day-count thresholds must be >= 0")

        if self.max_candidates <= 0 or self.top_n <= 0:
            raise ValueError("max_candidates and top_n must be > 0")

        if self.recency_horizon_days <= 0:
            raise ValueError("recency_horizon_days must be > 0")

        if not 0 <= self.recency_floor <= 1:
            raise ValueError("recency_floor must be within [0, 1]")

        if self.min_combined_weight <= 0:
            raise ValueError("min_combined_weight must be > 0")

        if self.default_street_minutes <= 0:
            raise ValueError("default_street_minutes must be > 0")

        if self.max_divergence_minutes < 0:
            raise ValueError("max_divergence_minutes must be >= 0")

        if self.pm_office_sample_limit <= 0:
            raise ValueError("pm_office_sample_limit must be > 0")

        if not 0 < self.pm_office_percentile <= 1:
            raise ValueError("pm_office_percentile must be within (0, 1]")

        self.rates.validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def default_settings() -> EngineSettings:
    """Convenience factory for the default settings."""
    s = EngineSettings(timezone=os.environ.get('ROUTEWISE_TIMEZONE', 'America/Chicago'))
    s.validate()
    return s


def settings_from_dict(data: Dict[str, Any]) -> EngineSettings:
    """Build settings from a (possibly partial) dict; unknown keys are ignored."""
    known = {f.name for f in fields(EngineSettings)}
    kwargs = {k: v for k, v in data.items() if k in known and k != 'rates'}
    if 'timezone' not in kwargs and os.environ.get('ROUTEWISE_TIMEZONE'):
        kwargs['timezone'] = os.environ['ROUTEWISE_TIMEZONE']

    rates_data = data.get('rates') or {}
    rate_names = {f.name for f in fields(OfficeRates)}
    rates = OfficeRates(**{k: float(v) for k, v in rates_data.items() if k in rate_names})

    s = EngineSettings(rates=rates, **kwargs)
    s.validate()
    return s


def load_settings(path: Optional[str] = None) -> EngineSettings:
    """
    Load engine settings from JSON.

    Args:
        path: Settings file. Defaults to ROUTEWISE_SETTINGS_FILE or
              config/engine_settings.json. A missing file yields defaults.

    Returns:
        Validated EngineSettings
    """
    path = path or os.environ.get('ROUTEWISE_SETTINGS_FILE') or ENGINE_SETTINGS_FILE
    if not os.path.exists(path):
        return default_settings()

    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    return settings_from_dict(data)
