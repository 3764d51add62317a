"""
Prediction Pipeline
===================
Orchestrates the end-of-shift prediction with injectable dependencies.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..config import EngineSettings
from ..day_types import DayClassifier, FederalHolidayCalendar
from ..utils import add_minutes, combine_start, local_now
from .confidence import confidence_to_minutes
from .history_filter import HistoryFilter
from .office_time import OfficeTimeBreakdown, decompose_office_time
from .pm_office import estimate_pm_office, pm_office_buffer
from .records import (
    BreakStatus,
    HistoricalDayRecord,
    RouteConfig,
    TodayMailVolumes,
    Waypoint,
)
from .similarity import SimilarityMatcher
from .street_time import StreetTimeEstimator, StreetTimePrediction
from .waypoints import ReturnEstimate, WaypointRefiner, validate_refinement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Prediction:
    """End-of-shift prediction. Recomputed wholesale on every call."""
    office_time: float
    street_time: float
    load_truck_time: float
    leave_office_time: datetime
    base_clock_out_time: datetime
    clock_out_time: datetime
    overtime: float
    pm_office_time: float
    pm_office_avg: float
    pm_office_p85: float
    breakdown: OfficeTimeBreakdown
    prediction: StreetTimePrediction
    waypoint_enhanced: bool = False
    return_time_estimate: Optional[ReturnEstimate] = None
    uncertainty_minutes: int = 25
    refinement_note: Optional[str] = None

    @property
    def total_minutes(self) -> float:
        return self.office_time + self.street_time + self.pm_office_time

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'office_time': self.office_time,
            'street_time': self.street_time,
            'load_truck_time': self.load_truck_time,
            'leave_office_time': self.leave_office_time.isoformat(),
            'base_clock_out_time': self.base_clock_out_time.isoformat(),
            'clock_out_time': self.clock_out_time.isoformat(),
            'overtime': self.overtime,
            'pm_office_time': self.pm_office_time,
            'pm_office_avg': self.pm_office_avg,
            'pm_office_p85': self.pm_office_p85,
            'breakdown': self.breakdown.to_dict(),
            'prediction': self.prediction.to_dict(),
            'waypoint_enhanced': self.waypoint_enhanced,
            'return_time_estimate': (self.return_time_estimate.to_dict()
                                     if self.return_time_estimate else None),
            'uncertainty_minutes': self.uncertainty_minutes,
            'refinement_note': self.refinement_note,
        }


class PredictionPipeline:
    """
    Composes the estimators into one prediction per call.

    Designed for testability:
    - All dependencies are injectable
    - History, config and volumes are passed in on every call
    - No caching; identical inputs give equal output

    Example usage:
        pipeline = PredictionPipeline()
        result = pipeline.predict(today, route_config, history)

    With live progress:
        pipeline = PredictionPipeline(waypoint_refiner=HistoricalWaypointRefiner(days))
        result = pipeline.predict(today, route_config, history,
                                  waypoints=waypoints, route_id='R12')
    """

    def __init__(self,
                 settings: Optional[EngineSettings] = None,
                 day_classifier: Optional[DayClassifier] = None,
                 waypoint_refiner: Optional[WaypointRefiner] = None):
        """
        Initialize prediction pipeline.

        Args:
            settings: Engine thresholds and rates
            day_classifier: Calendar collaborator (defaults to federal holidays)
            waypoint_refiner: Optional live-progress refiner
        """
        self.settings = settings or EngineSettings()
        self.day_classifier = day_classifier or FederalHolidayCalendar()
        self.waypoint_refiner = waypoint_refiner
        self.history_filter = HistoryFilter(self.settings, self.day_classifier)
        self.matcher = SimilarityMatcher(self.settings, self.day_classifier)
        self.street_estimator = StreetTimeEstimator(self.settings)

    def refine_clock_out(self,
                         waypoints: Sequence[Waypoint],
                         route_id: str,
                         leave_time: datetime,
                         time_based_clock_out: datetime,
                         pause_minutes: float,
                         similar_dates: Sequence[date]):
        """
        Ask the refiner for a better clock-out.

        Returns:
            (accepted_time or None, ReturnEstimate or None, note)
        """
        if self.waypoint_refiner is None:
            return None, None, "no waypoint refiner configured"

        try:
            predictions = self.waypoint_refiner.predict_waypoint_times(
                waypoints, leave_time, route_id, pause_minutes, similar_dates
            )
            estimate = self.waypoint_refiner.estimate_return_time(waypoints, predictions, leave_time)
            # Malformed refiner output (wrong type, tz-aware times) fails here
            accepted, reason = validate_refinement(
                estimate, leave_time, time_based_clock_out, waypoints,
                self.settings.max_divergence_minutes,
            )
        except Exception as e:
            logger.warning("Waypoint refinement failed for route %s: %s", route_id, e)
            return None, None, f"refiner error: {e}"

        if not accepted:
            logger.info("Discarding waypoint refinement for route %s: %s", route_id, reason)
            return None, estimate, reason
        return estimate.predicted_return_time, estimate, reason

    def predict(self,
                today: TodayMailVolumes,
                route_config: RouteConfig,
                history: Sequence[HistoricalDayRecord],
                waypoints: Optional[Sequence[Waypoint]] = None,
                route_id: Optional[str] = None,
                waypoint_pause_minutes: float = 0,
                break_status: Optional[BreakStatus] = None,
                service_date: Optional[date] = None,
                now: Optional[datetime] = None) -> Prediction:
        """
        Predict today's clock-out.

        Args:
            today: Today's declared volumes
            route_config: Route constants
            history: Past workdays (unfiltered; filtering happens here)
            waypoints: Today's stops, for live refinement
            route_id: Route identifier passed to the refiner
            waypoint_pause_minutes: Paused minutes to push pending stops back
            break_status: Breaks already taken today
            service_date: Day being predicted (defaults to today's local date)
            now: Recency anchor (defaults to local now)

        Returns:
            Prediction
        """
        if now is None:
            now = local_now(self.settings.timezone)
        if service_date is None:
            service_date = now.date()

        working = self.history_filter.working_set(history)
        clean_count = sum(1 for d in working.kept if d.is_clean)

        breakdown = decompose_office_time(today, self.settings.rates)
        office_time = breakdown.total

        similarity = self.matcher.find_similar_days(
            working.kept, today, route_config, service_date, now=now
        )
        street = self.street_estimator.estimate(similarity, clean_count, route_config)
        street_time = street.street_time

        start = combine_start(service_date, route_config.start_time)
        leave_office_time = add_minutes(start, office_time)
        base_clock_out = add_minutes(leave_office_time, street_time)
        clock_out = base_clock_out

        waypoint_enhanced = False
        return_estimate = None
        note = None
        if waypoints and route_id:
            refined, return_estimate, note = self.refine_clock_out(
                waypoints, route_id, leave_office_time, base_clock_out,
                waypoint_pause_minutes, street.similar_dates,
            )
            if refined is not None:
                clock_out = refined
                waypoint_enhanced = True

        pm_estimate = estimate_pm_office(
            working.kept, self.settings.pm_office_sample_limit, self.settings.pm_office_percentile
        )
        pm_office_time = pm_office_buffer(pm_estimate, break_status)
        clock_out = add_minutes(clock_out, pm_office_time)

        total = office_time + street_time + pm_office_time
        overtime = max(0.0, total - route_config.tour_length_minutes)

        return Prediction(
            office_time=office_time,
            street_time=street_time,
            load_truck_time=breakdown.load_truck_time,
            leave_office_time=leave_office_time,
            base_clock_out_time=base_clock_out,
            clock_out_time=clock_out,
            overtime=overtime,
            pm_office_time=pm_office_time,
            pm_office_avg=pm_estimate.avg,
            pm_office_p85=pm_estimate.p85,
            breakdown=breakdown,
            prediction=street,
            waypoint_enhanced=waypoint_enhanced,
            return_time_estimate=return_estimate,
            uncertainty_minutes=confidence_to_minutes(street.confidence, waypoint_enhanced),
            refinement_note=note,
        )


def predict(today: TodayMailVolumes,
            route_config: RouteConfig,
            history: Sequence[HistoricalDayRecord],
            **kwargs) -> Prediction:
    """Convenience wrapper using default settings and collaborators."""
    refiner = kwargs.pop('waypoint_refiner', None)
    return PredictionPipeline(waypoint_refiner=refiner).predict(today, route_config, history, **kwargs)
