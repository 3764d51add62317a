"""
RouteWise Time Prediction Package
=================================
End-of-shift clock-out prediction for a delivery-route carrier.

Modules:
- prediction: History filtering, similar-day matching, office/street time
  estimation and the prediction pipeline
- day_types: Federal-holiday aware day classification
- config: Engine thresholds and rate constants
"""

from .paths import (
    PROJECT_ROOT, DATA_DIR, CONFIG_DIR, REPORTS_DIR,
    get_data_path, get_config_path, get_report_path
)

from .config import EngineSettings, OfficeRates, load_settings
from .day_types import DayType, FederalHolidayCalendar, get_day_type, can_exceed_street_time_limit

# Re-export prediction module components
from .prediction import (
    HistoricalDayRecord, RouteConfig, TodayMailVolumes, BreakStatus, Waypoint,
    PredictionPipeline, Prediction, predict,
    find_similar_days,
)

__version__ = "1.0.0"
