"""
PM Office Buffer
================
Estimates the PM office (744) tail added after street time.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .records import BreakStatus, HistoricalDayRecord


@dataclass(frozen=True)
class PmOfficeEstimate:
    """PM office samples summarized as avg, P85 and the buffer used."""
    avg: float = 0.0
    p85: float = 0.0
    samples: int = 0

    @property
    def buffer(self) -> float:
        """min(avg, P85). With one or two samples this is just that sample."""
        if self.samples == 0:
            return 0.0
        return min(self.avg, self.p85)


def nearest_rank_percentile(values: Sequence[float], q: float) -> float:
    """Nearest-rank percentile (no interpolation)."""
    ordered = np.sort(np.asarray(values, dtype=float))
    if ordered.size == 0:
        return 0.0
    idx = max(0, min(ordered.size - 1, math.ceil(q * ordered.size) - 1))
    return float(ordered[idx])


def estimate_pm_office(history: Sequence[HistoricalDayRecord],
                       limit: int = 30,
                       percentile: float = 0.85) -> PmOfficeEstimate:
    """
    Summarize the most recent non-zero PM office samples.

    Args:
        history: Working history (any order; newest samples are used)
        limit: Maximum samples
        percentile: Cap percentile (0.85)
    """
    recent = sorted(history or [], key=lambda d: d.date, reverse=True)
    samples = [d.pm_office_time for d in recent if d.pm_office_time > 0][:limit]
    if not samples:
        return PmOfficeEstimate()

    return PmOfficeEstimate(
        avg=float(round(np.mean(samples))),
        p85=float(round(nearest_rank_percentile(samples, percentile))),
        samples=len(samples),
    )


def pm_office_buffer(estimate: PmOfficeEstimate,
                     break_status: Optional[BreakStatus] = None) -> float:
    """Buffer to add to clock-out; zero once all scheduled breaks are taken."""
    if break_status is not None and break_status.all_taken:
        return 0.0
    return estimate.buffer
