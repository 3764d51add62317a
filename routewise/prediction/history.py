"""
History Module
==============
Route averages over historical days and the prediction log.
"""

import os
from typing import Dict, List, Optional, Sequence

import pandas as pd

from ..day_types import DayType, get_day_type
from ..paths import PREDICTION_LOG_FILE
from .pm_office import nearest_rank_percentile
from .records import HistoricalDayRecord

LOG_COLUMNS = ['date', 'leave_office_time', 'clock_out_time', 'office_time', 'street_time',
               'pm_office_time', 'overtime', 'method', 'confidence', 'uncertainty_minutes',
               'waypoint_enhanced']


def history_to_frame(history: Sequence[HistoricalDayRecord]) -> pd.DataFrame:
    """Historical records as a DataFrame with an ``effective_street_time`` column."""
    rows = []
    for d in history or []:
        row = d.to_dict()
        row['day_type'] = (d.day_type or get_day_type(d.date)).value
        row['effective_street_time'] = d.effective_street_time
        rows.append(row)
    return pd.DataFrame(rows)


def calculate_route_averages(history: Sequence[HistoricalDayRecord]) -> Dict[str, int]:
    """Average street minutes per day type, rounded; types without data are omitted."""
    df = history_to_frame(history)
    if df.empty:
        return {}

    df = df[df['effective_street_time'] > 0]
    if df.empty:
        return {}

    grouped = df.groupby('day_type')['effective_street_time'].mean()
    order = [t.value for t in DayType]
    return {t: int(round(grouped[t])) for t in order if t in grouped.index}


def summarize_office_times(history: Sequence[HistoricalDayRecord],
                           sample_limit: int = 30,
                           percentile: float = 0.85) -> Optional[Dict[str, int]]:
    """
    Average 722 / 721 / 744 minutes across recorded days.

    744 is capped at its P85 over the most recent non-zero samples to damp
    "helping others" outliers; the prediction uses min(avg 744, P85).
    """
    df = history_to_frame(history)
    if df.empty:
        return None

    has_any = (df['office_time'] > 0) | (df['effective_street_time'] > 0) | (df['pm_office_time'] > 0)
    df = df[has_any].sort_values('date', ascending=False)
    if df.empty:
        return None

    pm_samples = df.loc[df['pm_office_time'] > 0, 'pm_office_time'].head(sample_limit)
    pm_avg = pm_samples.mean() if len(pm_samples) else df['pm_office_time'].mean()
    pm_p85 = round(nearest_rank_percentile(pm_samples.tolist(), percentile)) if len(pm_samples) else 0

    return {
        'days': len(df),
        'am722': int(round(df['office_time'].mean())),
        'street721': int(round(df['effective_street_time'].mean())),
        'pm744': int(round(pm_avg)),
        'pm744P85': int(pm_p85),
        'pm744Used': int(min(round(pm_avg), pm_p85) if pm_p85 else round(pm_avg)),
    }


def save_prediction_to_log(prediction, date_str: str, path: str = PREDICTION_LOG_FILE) -> bool:
    """Append a prediction summary to the log CSV (creates or appends).

    Args:
        prediction: Prediction from PredictionPipeline.predict
        date_str: Service date (YYYY-MM-DD)
        path: Log file

    Returns:
        True if a row was written, False if the date was already logged
    """
    row = {
        'date': date_str,
        'leave_office_time': prediction.leave_office_time.strftime('%H:%M'),
        'clock_out_time': prediction.clock_out_time.strftime('%H:%M'),
        'office_time': round(prediction.office_time, 1),
        'street_time': round(prediction.street_time, 1),
        'pm_office_time': round(prediction.pm_office_time, 1),
        'overtime': round(prediction.overtime, 1),
        'method': prediction.prediction.method,
        'confidence': prediction.prediction.confidence,
        'uncertainty_minutes': prediction.uncertainty_minutes,
        'waypoint_enhanced': prediction.waypoint_enhanced,
    }
    new_df = pd.DataFrame([row], columns=LOG_COLUMNS)

    if os.path.exists(path):
        existing_df = pd.read_csv(path, dtype={'date': str})
        if date_str in existing_df['date'].tolist():
            return False
        combined_df = pd.concat([existing_df, new_df], ignore_index=True)
        combined_df.to_csv(path, index=False)
    else:
        new_df.to_csv(path, index=False)
    return True


def load_prediction_log(path: str = PREDICTION_LOG_FILE) -> List[Dict]:
    if not os.path.exists(path):
        return []
    return pd.read_csv(path, dtype={'date': str}).to_dict('records')
