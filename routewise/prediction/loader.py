"""
Input Loader
============
Reads exported history, route configuration, today's volumes and waypoint
data from disk. Separated from prediction logic for testability: the
engine itself never reads files.
"""

import json
import logging
import os
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from .records import (
    HistoricalDayRecord,
    RouteConfig,
    TodayMailVolumes,
    Waypoint,
    WaypointDay,
)

logger = logging.getLogger(__name__)


class InputLoader:
    """
    Loads engine inputs from CSV/JSON files.

    Uses dependency injection for table reading to enable testing without
    actual file I/O.
    """

    def __init__(self,
                 table_reader: Optional[Callable[[str], pd.DataFrame]] = None,
                 json_reader: Optional[Callable[[str], Any]] = None):
        """
        Initialize loader.

        Args:
            table_reader: Function returning a DataFrame for a path (injectable for testing)
            json_reader: Function returning parsed JSON for a path (injectable for testing)
        """
        self._table_reader = table_reader or self._read_table
        self._json_reader = json_reader or self._read_json

    @staticmethod
    def _require(path: str) -> None:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Input file not found: {path}")

    def _read_table(self, path: str) -> pd.DataFrame:
        self._require(path)
        if path.lower().endswith('.json'):
            return pd.read_json(path, orient='records', dtype=False, convert_dates=False)
        return pd.read_csv(path, dtype={'date': str})

    def _read_json(self, path: str) -> Any:
        self._require(path)
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    @staticmethod
    def frame_to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
        """DataFrame rows as dicts with NaN replaced by None."""
        if df is None or df.empty:
            return []
        return df.astype(object).where(pd.notna(df), None).to_dict('records')

    def load_history(self, path: str) -> List[HistoricalDayRecord]:
        """Load historical day records; rows without a usable date are skipped."""
        rows = self.frame_to_records(self._table_reader(path))

        records = []
        skipped = 0
        for row in rows:
            try:
                records.append(HistoricalDayRecord.from_dict(row))
            except ValueError as e:
                skipped += 1
                logger.warning("Skipping history row: %s", e)

        if skipped:
            logger.info("Loaded %d history records (%d skipped) from %s", len(records), skipped, path)
        return records

    def load_route_config(self, path: str) -> RouteConfig:
        return RouteConfig.from_dict(self._json_reader(path) or {})

    def load_today_volumes(self, path: str) -> TodayMailVolumes:
        return TodayMailVolumes.from_dict(self._json_reader(path) or {})

    def load_waypoints(self, path: str) -> List[Waypoint]:
        data = self._json_reader(path) or []
        return sorted((Waypoint.from_dict(w) for w in data), key=lambda w: w.order)

    def load_waypoint_history(self, path: str) -> List[WaypointDay]:
        return [WaypointDay.from_dict(d) for d in self._json_reader(path) or []]
