"""
History Filter
==============
Rejects implausible historical day records before they reach matching or
averaging. These represent data-entry slips, not real workdays.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..config import EngineSettings
from ..day_types import DayClassifier, FederalHolidayCalendar
from .records import HistoricalDayRecord

logger = logging.getLogger(__name__)


@dataclass
class FilterResult:
    """Outcome of a filtering pass."""
    kept: List[HistoricalDayRecord] = field(default_factory=list)
    excluded: Dict[str, str] = field(default_factory=dict)  # ISO date -> reason
    quarantined: int = 0
    used_fallback: bool = False

    @property
    def n_kept(self) -> int:
        return len(self.kept)

    @property
    def n_excluded(self) -> int:
        return len(self.excluded)

    def summarize(self) -> str:
        msg = f"History filter kept {self.n_kept}, excluded {self.n_excluded}"
        if self.quarantined:
            msg += f", quarantined {self.quarantined}"
        if self.used_fallback:
            msg += " (fell back to unfiltered history)"
        return msg


class HistoryFilter:
    """
    Applies the plausibility rules to historical day records.

    The rules run unconditionally, independent of sample size. Callers that
    need a usable sample use ``working_set`` which falls back to the
    unfiltered (but still non-quarantined) records when too few survive.
    """

    def __init__(self,
                 settings: Optional[EngineSettings] = None,
                 day_classifier: Optional[DayClassifier] = None):
        self.settings = settings or EngineSettings()
        self.day_classifier = day_classifier or FederalHolidayCalendar()

    def exclusion_reason(self, record: HistoricalDayRecord) -> Optional[str]:
        """Why a record is implausible, or None when it is usable."""
        s = self.settings
        street = record.effective_street_time

        if street == 0 and record.pm_office_time > s.max_pm_office_without_street:
            return "pm office time logged without street time"
        if street < s.min_street_time:
            return f"street time {street:.0f}m below {s.min_street_time:.0f}m"

        ceiling = s.max_street_time
        if self.day_classifier.can_exceed_street_time_limit(record.date):
            ceiling = s.max_street_time_exceptional
        if street > ceiling:
            return f"street time {street:.0f}m above {ceiling:.0f}m"

        if record.pm_office_time > s.max_pm_office_time:
            return f"pm office time {record.pm_office_time:.0f}m above {s.max_pm_office_time:.0f}m"
        if record.office_time > s.max_office_time:
            return f"office time {record.office_time:.0f}m above {s.max_office_time:.0f}m"
        return None

    def run(self, records: Sequence[HistoricalDayRecord]) -> FilterResult:
        result = FilterResult()
        for record in records or []:
            if record.exclude_from_averages:
                result.quarantined += 1
                continue
            reason = self.exclusion_reason(record)
            if reason is None:
                result.kept.append(record)
            else:
                result.excluded[record.date.isoformat()] = reason
                logger.debug("Excluding %s: %s", record.date, reason)
        return result

    def filter(self, records: Sequence[HistoricalDayRecord]) -> List[HistoricalDayRecord]:
        """Records passing every plausibility rule."""
        return self.run(records).kept

    def working_set(self, records: Sequence[HistoricalDayRecord]) -> FilterResult:
        """
        Filtered records, or the unfiltered set when fewer than
        ``min_filtered_days`` survive.

        The fallback reintroduces the outliers the filter exists to remove;
        a rough answer is preferred over none.
        """
        result = self.run(records)
        if result.n_kept < self.settings.min_filtered_days:
            unfiltered = [r for r in records or [] if not r.exclude_from_averages]
            if len(unfiltered) > result.n_kept:
                logger.warning(
                    "Only %d plausible history days (need %d); using %d unfiltered days",
                    result.n_kept, self.settings.min_filtered_days, len(unfiltered),
                )
                result.kept = unfiltered
                result.used_fallback = True
        logger.debug(result.summarize())
        return result
