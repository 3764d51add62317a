"""
Similar Day Matching
====================
Ranks historical days by resemblance to today's volumes, weighted per
route type and discounted by age.

Pure computation: history, volumes and the recency anchor ``now`` are
all passed in.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from ..config import EngineSettings
from ..day_types import DayClassifier, DayType, FederalHolidayCalendar
from ..utils import parse_date
from .records import HistoricalDayRecord, RouteConfig, TodayMailVolumes

VOLUME_FIELDS = ('dps', 'flats', 'letters', 'parcels', 'sprs')

# Per-field weights by route type (each sums to 1.00). DPS weighs more on
# mounted routes (can't sort while driving); walking routes lean on
# letters/flats.
ROUTE_TYPE_WEIGHTS: Dict[str, Dict[str, float]] = {
    'mounted': {'dps': 0.38, 'flats': 0.18, 'letters': 0.13, 'parcels': 0.23, 'sprs': 0.08},
    'mixed':   {'dps': 0.34, 'flats': 0.19, 'letters': 0.14, 'parcels': 0.24, 'sprs': 0.09},
    'walking': {'dps': 0.26, 'flats': 0.20, 'letters': 0.17, 'parcels': 0.27, 'sprs': 0.10},
}

# Confidence tiers: the top match score must exceed match_score
CONFIDENCE_THRESHOLDS = {
    'high': {'match_score': 0.85, 'min_matches': 5},
    'medium': {'match_score': 0.70, 'min_matches': 3},
}


def get_weights(route_type: str) -> Dict[str, float]:
    return dict(ROUTE_TYPE_WEIGHTS.get(route_type, ROUTE_TYPE_WEIGHTS['mixed']))


def field_similarity(a, b) -> np.ndarray:
    """``1 - |a-b| / max(|a|, |b|, 1)`` clipped to [0, 1], elementwise."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    denom = np.maximum(np.maximum(np.abs(a), np.abs(b)), 1.0)
    return np.clip(1.0 - np.abs(a - b) / denom, 0.0, 1.0)


@dataclass(frozen=True)
class SimilarDayMatch:
    date: date
    weight: float
    match_score: float
    street_time: float

    def to_dict(self) -> Dict:
        return {
            'date': self.date.isoformat(),
            'weight': self.weight,
            'match_score': self.match_score,
            'street_time': self.street_time,
        }


@dataclass(frozen=True)
class SimilarityResult:
    """Ranked matches for one target day."""
    target_day_type: DayType
    route_type: str
    weights: Dict[str, float]
    top_matches: List[SimilarDayMatch] = field(default_factory=list)
    top_day: Optional[HistoricalDayRecord] = None
    confidence_hint: float = 0.0
    pool_size: int = 0

    @property
    def matches_used(self) -> int:
        return len(self.top_matches)

    @property
    def similar_dates(self) -> List[date]:
        return [m.date for m in self.top_matches]

    @property
    def weighted_street_time(self) -> float:
        """Similarity-weighted average street time over the top matches."""
        if not self.top_matches:
            return 0.0
        times = np.array([m.street_time for m in self.top_matches], dtype=float)
        weights = np.array([m.weight for m in self.top_matches], dtype=float)
        return float(np.average(times, weights=weights))

    @property
    def confidence(self) -> str:
        for tag in ('high', 'medium'):
            t = CONFIDENCE_THRESHOLDS[tag]
            if self.matches_used >= t['min_matches'] and self.confidence_hint > t['match_score']:
                return tag
        return 'low'

    def to_dict(self) -> Dict:
        return {
            'target_day_type': self.target_day_type.value,
            'route_type': self.route_type,
            'weights': dict(self.weights),
            'top_matches': [m.to_dict() for m in self.top_matches],
            'top_day': self.top_day.date.isoformat() if self.top_day else None,
            'confidence_hint': self.confidence_hint,
            'pool_size': self.pool_size,
        }


class SimilarityMatcher:
    """
    Weighted similarity search over historical days.

    Example usage:
        matcher = SimilarityMatcher()
        result = matcher.find_similar_days(history, today, route_config,
                                           target_date=date(2026, 3, 4))
        if result is not None:
            print(result.weighted_street_time, result.confidence)
    """

    def __init__(self,
                 settings: Optional[EngineSettings] = None,
                 day_classifier: Optional[DayClassifier] = None):
        self.settings = settings or EngineSettings()
        self.day_classifier = day_classifier or FederalHolidayCalendar()

    def _day_type_of(self, record: HistoricalDayRecord) -> DayType:
        return record.day_type or self.day_classifier.get_day_type(record.date)

    def candidate_pool(self,
                       history: Sequence[HistoricalDayRecord],
                       target_day_type: DayType,
                       max_candidates: int,
                       min_days: int) -> List[HistoricalDayRecord]:
        """Clean records, same day type when enough exist, most recent first."""
        clean = [d for d in history or [] if d.is_clean and d.date is not None]
        same_type = [d for d in clean if self._day_type_of(d) == target_day_type]
        pool = same_type if len(same_type) >= min_days else clean
        pool = sorted(pool, key=lambda d: d.date, reverse=True)
        return pool[:max_candidates]

    def score_pool(self,
                   pool: Sequence[HistoricalDayRecord],
                   today: TodayMailVolumes,
                   weights: Dict[str, float]) -> np.ndarray:
        """Weighted match score in [0, 1] for each pool record."""
        if not pool:
            return np.zeros(0)
        history_volumes = np.array(
            [[getattr(d, f) for f in VOLUME_FIELDS] for d in pool], dtype=float
        )
        today_volumes = np.array([getattr(today, f) for f in VOLUME_FIELDS], dtype=float)
        weight_vector = np.array([weights[f] for f in VOLUME_FIELDS], dtype=float)

        similarities = field_similarity(history_volumes, today_volumes[np.newaxis, :])
        return np.clip(similarities @ weight_vector, 0.0, 1.0)

    def recency_weights(self, pool: Sequence[HistoricalDayRecord], now: date) -> np.ndarray:
        s = self.settings
        days_since = np.array([max(0, (now - d.date).days) for d in pool], dtype=float)
        return np.maximum(s.recency_floor, 1.0 - days_since / s.recency_horizon_days)

    def find_similar_days(self,
                          history: Sequence[HistoricalDayRecord],
                          today: TodayMailVolumes,
                          route_config: RouteConfig,
                          target_date: Union[str, date, datetime],
                          max_candidates: Optional[int] = None,
                          top_n: Optional[int] = None,
                          min_days: Optional[int] = None,
                          now: Optional[Union[date, datetime]] = None) -> Optional[SimilarityResult]:
        """
        Rank historical days by resemblance to today.

        Args:
            history: Candidate records (already plausibility-filtered by callers)
            today: Today's declared volumes
            route_config: Supplies the route type for weighting
            target_date: Day being predicted; drives the day-type preference
            max_candidates: Most recent records considered (default 90)
            top_n: Matches kept (default 10)
            min_days: Same-day-type records required before widening (default 3)
            now: Recency anchor; defaults to the target date

        Returns:
            SimilarityResult, or None when no clean candidate exists or the
            target date is unparseable
        """
        s = self.settings
        max_candidates = s.max_candidates if max_candidates is None else max_candidates
        top_n = s.top_n if top_n is None else top_n
        min_days = s.min_same_type_days if min_days is None else min_days

        target = parse_date(target_date)
        if target is None:
            return None
        anchor = parse_date(now) or target

        route_type = route_config.normalized_route_type
        weights = get_weights(route_type)
        target_day_type = self.day_classifier.get_day_type(target)

        pool = self.candidate_pool(history, target_day_type, max_candidates, min_days)
        if not pool:
            return None

        match_scores = self.score_pool(pool, today, weights)
        recency = self.recency_weights(pool, anchor)
        combined = np.maximum(s.min_combined_weight, match_scores * recency)

        # Stable sort keeps most-recent-first order among ties
        order = np.argsort(-combined, kind='stable')[:top_n]

        top_matches = [
            SimilarDayMatch(
                date=pool[i].date,
                weight=float(combined[i]),
                match_score=float(match_scores[i]),
                street_time=pool[i].effective_street_time,
            )
            for i in order
        ]

        return SimilarityResult(
            target_day_type=target_day_type,
            route_type=route_type,
            weights=weights,
            top_matches=top_matches,
            top_day=pool[order[0]],
            confidence_hint=top_matches[0].match_score,
            pool_size=len(pool),
        )


def find_similar_days(history: Sequence[HistoricalDayRecord],
                      today: TodayMailVolumes,
                      route_config: RouteConfig,
                      target_date: Union[str, date, datetime],
                      **options) -> Optional[SimilarityResult]:
    """Functional wrapper around ``SimilarityMatcher.find_similar_days``."""
    return SimilarityMatcher().find_similar_days(history, today, route_config, target_date, **options)
