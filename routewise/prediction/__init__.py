"""
Prediction Module
=================
Time prediction engine components for RouteWise.
Designed for testability with dependency injection.
"""

from .records import (
    HistoricalDayRecord,
    RouteConfig,
    TodayMailVolumes,
    BreakStatus,
    Waypoint,
    WaypointDay,
)
from .history_filter import HistoryFilter, FilterResult
from .similarity import SimilarityMatcher, SimilarityResult, SimilarDayMatch, find_similar_days
from .office_time import OfficeTimeBreakdown, decompose_office_time
from .street_time import (
    StreetTimeTier,
    StreetTimePrediction,
    StreetTimeEstimator,
    select_tier,
    calculate_simple_prediction,
)
from .pm_office import PmOfficeEstimate, estimate_pm_office, pm_office_buffer
from .confidence import confidence_to_minutes
from .live_expected import (
    LiveOffset,
    RolloverResult,
    is_valid_predicted_minutes,
    should_apply_live_offset,
    apply_live_offset_to_predicted_time,
    apply_expected_time_rollover_sanity,
)
from .waypoints import (
    WaypointRefiner,
    HistoricalWaypointRefiner,
    WaypointPrediction,
    ReturnEstimate,
    validate_refinement,
    calculate_progress_status,
)
from .pipeline import PredictionPipeline, Prediction, predict
from .loader import InputLoader
from .history import calculate_route_averages, summarize_office_times, save_prediction_to_log

__all__ = [
    # Records
    'HistoricalDayRecord',
    'RouteConfig',
    'TodayMailVolumes',
    'BreakStatus',
    'Waypoint',
    'WaypointDay',
    # Core prediction
    'HistoryFilter',
    'FilterResult',
    'SimilarityMatcher',
    'SimilarityResult',
    'SimilarDayMatch',
    'find_similar_days',
    'OfficeTimeBreakdown',
    'decompose_office_time',
    'StreetTimeTier',
    'StreetTimePrediction',
    'StreetTimeEstimator',
    'select_tier',
    'calculate_simple_prediction',
    'PmOfficeEstimate',
    'estimate_pm_office',
    'pm_office_buffer',
    'confidence_to_minutes',
    'PredictionPipeline',
    'Prediction',
    'predict',
    # Live expected times
    'LiveOffset',
    'RolloverResult',
    'is_valid_predicted_minutes',
    'should_apply_live_offset',
    'apply_live_offset_to_predicted_time',
    'apply_expected_time_rollover_sanity',
    # Waypoints
    'WaypointRefiner',
    'HistoricalWaypointRefiner',
    'WaypointPrediction',
    'ReturnEstimate',
    'validate_refinement',
    'calculate_progress_status',
    # I/O and history
    'InputLoader',
    'calculate_route_averages',
    'summarize_office_times',
    'save_prediction_to_log',
]
