"""
Waypoint Refinement
===================
Optional live-progress refinement of the clock-out estimate.

The pipeline only depends on the ``WaypointRefiner`` protocol. The sanity
checks deciding whether a refined return time may replace the time-based
estimate live in ``validate_refinement``, a pure function that needs no
refiner to test.

``HistoricalWaypointRefiner`` is the default implementation: it predicts
each stop from its average elapsed time over recent days.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

import numpy as np

from ..utils import add_minutes, minutes_between
from .records import Waypoint, WaypointDay

logger = logging.getLogger(__name__)

RETURN_WAYPOINT_NAME = 'Return to PO'


@dataclass(frozen=True)
class WaypointAverage:
    name: str
    average_minutes: float
    sample_size: int

    @property
    def confidence(self) -> str:
        if self.sample_size >= 10:
            return 'high'
        if self.sample_size >= 5:
            return 'medium'
        return 'low'


@dataclass(frozen=True)
class WaypointPrediction:
    waypoint: Waypoint
    predicted_time: Optional[datetime]
    predicted_minutes: Optional[float]
    confidence: str
    sample_size: int = 0

    @property
    def label(self) -> str:
        return self.waypoint.label


@dataclass(frozen=True)
class ReturnEstimate:
    predicted_return_time: Optional[datetime]
    confidence: str
    progress: Optional[int] = None

    def to_dict(self) -> Dict:
        return {
            'predicted_return_time': (self.predicted_return_time.isoformat()
                                      if self.predicted_return_time else None),
            'confidence': self.confidence,
            'progress': self.progress,
        }


@dataclass(frozen=True)
class ProgressStatus:
    status: str           # 'ahead' | 'behind' | 'on-schedule'
    variance: float       # minutes; positive = behind
    message: str
    last_waypoint: Optional[str] = None
    completed_at: Optional[datetime] = None


class WaypointRefiner(Protocol):
    """Live progress collaborator consumed by the prediction pipeline."""

    def predict_waypoint_times(self,
                               waypoints: Sequence[Waypoint],
                               leave_time: datetime,
                               route_id: str,
                               pause_minutes: float,
                               similar_dates: Sequence[date]) -> List[WaypointPrediction]:
        ...

    def estimate_return_time(self,
                             waypoints: Sequence[Waypoint],
                             predictions: Sequence[WaypointPrediction],
                             leave_time: datetime) -> Optional[ReturnEstimate]:
        ...


def validate_refinement(estimate: Optional[ReturnEstimate],
                        leave_time: datetime,
                        time_based_clock_out: datetime,
                        waypoints: Sequence[Waypoint],
                        max_divergence_minutes: float = 120) -> Tuple[bool, str]:
    """
    Decide whether a refined return time may replace the time-based estimate.

    Returns:
        (accepted, reason)
    """
    if estimate is None or estimate.predicted_return_time is None:
        return False, "no return time available"

    predicted = estimate.predicted_return_time
    if predicted < leave_time:
        return False, "return time precedes leaving the office"

    divergence = abs(minutes_between(time_based_clock_out, predicted))
    if divergence > max_divergence_minutes:
        has_completed = any(wp.is_completed for wp in waypoints)
        if not has_completed and estimate.confidence == 'low':
            return False, (f"diverges {divergence:.0f}m from time-based estimate "
                           f"with no completed stops and low confidence")

    return True, "accepted"


def calculate_waypoint_averages(history: Sequence[WaypointDay],
                                window: int = 30) -> Dict[str, WaypointAverage]:
    """Average elapsed minutes per waypoint over the most recent days."""
    days = [d for d in history or [] if d.timings]
    days = sorted(days, key=lambda d: d.date)[-window:]

    samples: Dict[str, List[float]] = {}
    for day in days:
        for name, minutes in day.timings.items():
            samples.setdefault(name, []).append(minutes)

    return {
        name: WaypointAverage(name=name,
                              average_minutes=float(round(np.mean(values))),
                              sample_size=len(values))
        for name, values in samples.items()
    }


def calculate_progress_status(waypoints: Sequence[Waypoint],
                              predictions: Sequence[WaypointPrediction],
                              tolerance_minutes: float = 10) -> ProgressStatus:
    """Compare the last completed stop against its prediction."""
    completed = [wp for wp in waypoints if wp.is_completed]
    if not completed:
        return ProgressStatus(status='on-schedule', variance=0, message='Not started')

    last = max(completed, key=lambda wp: wp.order)
    prediction = next((p for p in predictions if p.waypoint.id == last.id), None)
    if prediction is None or prediction.predicted_time is None:
        return ProgressStatus(status='on-schedule', variance=0, message='No prediction data')

    variance = round(minutes_between(prediction.predicted_time, last.delivery_time))
    if variance <= -tolerance_minutes:
        status, message = 'ahead', f"{abs(variance)} min ahead"
    elif variance >= tolerance_minutes:
        status, message = 'behind', f"{variance} min behind"
    else:
        status, message = 'on-schedule', 'On schedule'

    return ProgressStatus(status=status, variance=variance, message=message,
                          last_waypoint=last.label, completed_at=last.delivery_time)


class HistoricalWaypointRefiner:
    """
    Predicts stop times from historical per-waypoint averages.

    Args:
        history: Past days' waypoint timings (minutes after leaving the office)
        window: Number of most recent days averaged
    """

    def __init__(self, history: Sequence[WaypointDay], window: int = 30):
        self.history = list(history or [])
        self.window = window

    def _history_for(self, similar_dates: Sequence[date]) -> List[WaypointDay]:
        # Prefer the similar days when any of them carry timings
        if similar_dates:
            wanted = set(similar_dates)
            subset = [d for d in self.history if d.date in wanted and d.timings]
            if subset:
                return subset
        return self.history

    def predict_waypoint_times(self,
                               waypoints: Sequence[Waypoint],
                               leave_time: datetime,
                               route_id: str,
                               pause_minutes: float = 0,
                               similar_dates: Sequence[date] = ()) -> List[WaypointPrediction]:
        if not waypoints:
            return []

        averages = calculate_waypoint_averages(self._history_for(similar_dates), self.window)
        if not averages:
            logger.info("No waypoint averages for route %s; predictions unavailable", route_id)
            return [WaypointPrediction(wp, None, None, 'none') for wp in waypoints]

        # Anchor on the last completed stop, else the office departure
        anchor_time = leave_time
        anchor_avg = 0.0
        completed = [wp for wp in waypoints if wp.is_completed]
        if completed:
            last = max(completed, key=lambda wp: wp.order)
            anchor_time = last.delivery_time
            last_avg = averages.get(last.label)
            anchor_avg = last_avg.average_minutes if last_avg else 0.0

        predictions = []
        for wp in waypoints:
            if wp.is_completed:
                elapsed = minutes_between(leave_time, wp.delivery_time)
                predictions.append(WaypointPrediction(wp, wp.delivery_time, elapsed, 'actual'))
                continue

            avg = averages.get(wp.label)
            if avg is None:
                logger.debug("No historical average for waypoint %r", wp.label)
                predictions.append(WaypointPrediction(wp, None, None, 'none'))
                continue

            remaining = max(0.0, avg.average_minutes - anchor_avg) + max(0.0, pause_minutes)
            predictions.append(WaypointPrediction(
                waypoint=wp,
                predicted_time=add_minutes(anchor_time, remaining),
                predicted_minutes=avg.average_minutes,
                confidence=avg.confidence,
                sample_size=avg.sample_size,
            ))
        return predictions

    def estimate_return_time(self,
                             waypoints: Sequence[Waypoint],
                             predictions: Sequence[WaypointPrediction],
                             leave_time: datetime) -> Optional[ReturnEstimate]:
        def is_return(p: WaypointPrediction) -> bool:
            name = p.label or ''
            return name == RETURN_WAYPOINT_NAME or 'return' in name.lower()

        returning = next((p for p in predictions if is_return(p)), None)
        if returning is None or returning.predicted_time is None:
            return None

        completed = sum(1 for wp in waypoints if wp.is_completed)
        if completed == 0:
            return ReturnEstimate(returning.predicted_time, returning.confidence)

        progress = completed / len(waypoints)
        confidence = returning.confidence
        if progress >= 0.75:
            confidence = 'high'
        elif progress >= 0.5:
            confidence = 'medium'

        return ReturnEstimate(returning.predicted_time, confidence, round(progress * 100))
