"""
Live Expected Times
===================
Display-time safety nets for expected waypoint times.

- Live offset: an observed deviation at one waypoint is carried forward
  onto waypoints not yet reached, never backwards.
- Rollover: time-of-day arithmetic without a date can land on "yesterday"
  after midnight; this is the single place that corrects it.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional, Union


@dataclass(frozen=True)
class LiveOffset:
    """Deviation in minutes observed at waypoint ``from_seq``."""
    minutes: float = 0.0
    from_seq: Optional[float] = None

    @classmethod
    def coerce(cls, value: Union['LiveOffset', Mapping[str, Any], None]) -> Optional['LiveOffset']:
        if value is None or isinstance(value, LiveOffset):
            return value
        from_seq = value.get('fromSeq', value.get('from_seq'))
        return cls(minutes=value.get('minutes') or 0, from_seq=from_seq)


@dataclass(frozen=True)
class RolloverResult:
    time: Any
    rolled_days: int = 0
    did_adjust: bool = False


def _finite(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    return n if math.isfinite(n) else None


def is_valid_predicted_minutes(value: Any) -> bool:
    """True for any finite number, 0 included."""
    return _finite(value) is not None


def should_apply_live_offset(seq: Any, offset: Union[LiveOffset, Mapping[str, Any], None]) -> bool:
    """True iff ``seq`` is strictly after the waypoint the offset was measured at."""
    offset = LiveOffset.coerce(offset)
    if offset is None:
        return False
    s = _finite(seq)
    start = _finite(offset.from_seq)
    if s is None or start is None:
        return False
    return s > start


def apply_live_offset_to_predicted_time(predicted: Any,
                                        seq: Any,
                                        offset: Union[LiveOffset, Mapping[str, Any], None]) -> Any:
    """Shift ``predicted`` by the offset's whole minutes when it applies."""
    if not isinstance(predicted, datetime):
        return predicted
    if not should_apply_live_offset(seq, offset):
        return predicted
    minutes = _finite(LiveOffset.coerce(offset).minutes)
    if not minutes:
        return predicted
    return predicted + timedelta(minutes=round(minutes))


def apply_expected_time_rollover_sanity(expected: Any,
                                        now: datetime,
                                        max_past_minutes: float = 60,
                                        max_days: int = 2) -> RolloverResult:
    """
    Roll an expected time forward by whole days while it sits implausibly
    far in the past, bounded by ``max_days``.
    """
    if not isinstance(expected, datetime) or not isinstance(now, datetime):
        return RolloverResult(time=expected)

    time = expected
    rolled = 0
    while (now - time).total_seconds() / 60 > max_past_minutes and rolled < max_days:
        time += timedelta(days=1)
        rolled += 1

    return RolloverResult(time=time, rolled_days=rolled, did_adjust=rolled > 0)
