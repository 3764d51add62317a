"""
Street Time Estimation
======================
Chooses a street-time (721) estimate with a fixed precedence of sources:

    HISTORICAL > EVALUATION > MANUAL > ESTIMATE

Once enough clean history exists the empirical estimate wins outright;
tiers are never blended. Load-truck time is inside street time.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..config import EngineSettings
from .records import HistoricalDayRecord, RouteConfig
from .similarity import SimilarityResult


class StreetTimeTier(str, Enum):
    """Sources of a street-time estimate, in precedence order."""
    HISTORICAL = "historical"
    EVALUATION = "evaluation"
    MANUAL = "manual"
    ESTIMATE = "estimate"


@dataclass(frozen=True)
class StreetTimePrediction:
    """A street-time estimate and where it came from."""
    street_time: float
    tier: StreetTimeTier
    confidence: str
    matches_used: int = 0
    similar_dates: List[date] = field(default_factory=list)
    confidence_hint: float = 0.0
    method: str = ""

    def to_dict(self) -> Dict:
        return {
            'street_time': self.street_time,
            'method': self.method or self.tier.value,
            'tier': self.tier.value,
            'confidence': self.confidence,
            'matches_used': self.matches_used,
            'similar_dates': [d.isoformat() for d in self.similar_dates],
            'confidence_hint': self.confidence_hint,
        }


def select_tier(clean_count: int,
                weighted_street_time: float,
                route_config: RouteConfig,
                settings: EngineSettings) -> StreetTimeTier:
    """
    Total, order-preserving tier selection.

    HISTORICAL requires at least ``min_clean_days`` clean days and a
    weighted street time above ``historical_floor_minutes``, however good
    the match score.
    """
    if (clean_count >= settings.min_clean_days
            and weighted_street_time > settings.historical_floor_minutes):
        return StreetTimeTier.HISTORICAL
    if route_config.evaluated_street_time:
        return StreetTimeTier.EVALUATION
    if route_config.manual_street_time:
        return StreetTimeTier.MANUAL
    return StreetTimeTier.ESTIMATE


class StreetTimeEstimator:
    """Applies the tier policy once per prediction."""

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()

    def estimate(self,
                 similarity: Optional[SimilarityResult],
                 clean_count: int,
                 route_config: RouteConfig) -> StreetTimePrediction:
        """
        Pick the street-time estimate.

        Args:
            similarity: Matcher output (None when there is no usable history)
            clean_count: Number of clean history days available to the matcher
            route_config: Supplies evaluated/manual fallbacks

        Returns:
            StreetTimePrediction
        """
        weighted = similarity.weighted_street_time if similarity is not None else 0.0
        tier = select_tier(clean_count, weighted, route_config, self.settings)

        if tier is StreetTimeTier.HISTORICAL:
            return StreetTimePrediction(
                street_time=float(round(weighted)),
                tier=tier,
                confidence=similarity.confidence,
                matches_used=similarity.matches_used,
                similar_dates=similarity.similar_dates,
                confidence_hint=similarity.confidence_hint,
                method='similar-days',
            )
        if tier is StreetTimeTier.EVALUATION:
            minutes = route_config.evaluated_street_time * 60
        elif tier is StreetTimeTier.MANUAL:
            minutes = route_config.manual_street_time
        else:
            minutes = self.settings.default_street_minutes

        return StreetTimePrediction(
            street_time=float(minutes),
            tier=tier,
            confidence=tier.value,
            method=tier.value,
        )


def calculate_simple_prediction(history: Sequence[HistoricalDayRecord],
                                window: int = 15) -> Optional[StreetTimePrediction]:
    """
    Plain average of the last ``window`` days' street time.

    Returns None for empty history; callers must check.
    """
    if not history:
        return None

    recent = list(history)[-window:]
    avg = float(np.mean([d.effective_street_time for d in recent]))

    return StreetTimePrediction(
        street_time=float(round(avg)),
        tier=StreetTimeTier.HISTORICAL,
        confidence='medium' if len(recent) >= window else 'low',
        matches_used=len(recent),
        method='simple',
    )
