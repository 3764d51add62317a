"""
Prediction Records
==================
Input records consumed by the prediction engine.

Every record accepts camelCase or snake_case keys in ``from_dict`` and
coerces numbers leniently (missing / non-numeric -> 0), so exports from
the app or hand-written JSON can be fed in directly.
"""

from dataclasses import asdict, dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

from ..day_types import DayType
from ..utils import parse_date, parse_hhmm, to_bool, to_number


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """First present, non-None value among several spellings of a key."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _num(data: Mapping[str, Any], *keys: str) -> float:
    return to_number(_pick(data, *keys))


def _optional_num(data: Mapping[str, Any], *keys: str) -> Optional[float]:
    value = to_number(_pick(data, *keys), default=0.0)
    return value if value > 0 else None


@dataclass(frozen=True)
class HistoricalDayRecord:
    """One past workday. Immutable once saved."""
    date: date
    day_type: Optional[DayType] = None
    dps: float = 0.0
    flats: float = 0.0        # feet
    letters: float = 0.0      # feet
    parcels: float = 0.0
    sprs: float = 0.0
    curtailed_flats: float = 0.0
    curtailed_letters: float = 0.0
    street_time: float = 0.0
    street_time_normalized: float = 0.0
    office_time: float = 0.0
    pm_office_time: float = 0.0
    auxiliary_assistance: bool = False
    mail_not_delivered: bool = False
    is_ns_day: bool = False
    exclude_from_averages: bool = False
    has_boxholder: bool = False

    @property
    def effective_street_time(self) -> float:
        """Normalized street time when recorded, raw street time otherwise."""
        if self.street_time_normalized > 0:
            return self.street_time_normalized
        if self.street_time > 0:
            return self.street_time
        return 0.0

    @property
    def is_clean(self) -> bool:
        """Not skewed by help, undelivered mail or a non-scheduled day."""
        return not (self.auxiliary_assistance or self.mail_not_delivered or self.is_ns_day)

    def with_exclusion(self, exclude: bool) -> 'HistoricalDayRecord':
        """Copy with the quarantine flag toggled; the only permitted change."""
        return replace(self, exclude_from_averages=bool(exclude))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'HistoricalDayRecord':
        day = parse_date(_pick(data, 'date'))
        if day is None:
            raise ValueError(f"Historical record has no valid date: {data.get('date')!r}")

        street_time = _num(data, 'streetTime', 'street_time')
        if street_time <= 0:
            street_hours = _num(data, 'streetHours', 'street_hours')
            street_time = street_hours * 60 if street_hours > 0 else _num(data, 'routeTime', 'route_time')

        return cls(
            date=day,
            day_type=DayType.coerce(_pick(data, 'dayType', 'day_type')),
            dps=_num(data, 'dps'),
            flats=_num(data, 'flats'),
            letters=_num(data, 'letters'),
            parcels=_num(data, 'parcels'),
            sprs=_num(data, 'sprs', 'spurs'),
            curtailed_flats=_num(data, 'curtailedFlats', 'curtailed_flats'),
            curtailed_letters=_num(data, 'curtailedLetters', 'curtailed_letters'),
            street_time=street_time,
            street_time_normalized=_num(data, 'streetTimeNormalized', 'street_time_normalized'),
            office_time=_num(data, 'officeTime', 'office_time'),
            pm_office_time=_num(data, 'pmOfficeTime', 'pm_office_time'),
            auxiliary_assistance=to_bool(_pick(data, 'auxiliaryAssistance', 'auxiliary_assistance')),
            mail_not_delivered=to_bool(_pick(data, 'mailNotDelivered', 'mail_not_delivered')),
            is_ns_day=to_bool(_pick(data, 'isNsDay', 'is_ns_day')),
            exclude_from_averages=to_bool(_pick(data, 'excludeFromAverages', 'exclude_from_averages')),
            has_boxholder=to_bool(_pick(data, 'hasBoxholder', 'has_boxholder')),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d['date'] = self.date.isoformat()
        d['day_type'] = self.day_type.value if self.day_type else None
        return d


@dataclass
class RouteConfig:
    """Per-route constants."""
    start_time: str = "07:30"
    tour_length: float = 8.5                         # hours
    lunch_duration: float = 30.0
    comfort_stop_duration: float = 10.0
    manual_street_time: Optional[float] = None       # minutes, carrier-entered
    evaluated_street_time: Optional[float] = None    # hours, official evaluation
    base_parcels: Optional[float] = None
    route_type: str = "mixed"

    @property
    def tour_length_minutes(self) -> float:
        return self.tour_length * 60

    @property
    def normalized_route_type(self) -> str:
        rt = (self.route_type or '').lower()
        if 'mount' in rt:
            return 'mounted'
        if 'walk' in rt:
            return 'walking'
        return 'mixed'

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'RouteConfig':
        start = _pick(data, 'startTime', 'start_time', default="07:30")
        tour_length = to_number(_pick(data, 'tourLength', 'tour_length'), default=8.5)
        return cls(
            start_time=parse_hhmm(start).strftime('%H:%M'),
            tour_length=tour_length if tour_length > 0 else 8.5,
            lunch_duration=to_number(_pick(data, 'lunchDuration', 'lunch_duration'), default=30.0),
            comfort_stop_duration=to_number(
                _pick(data, 'comfortStopDuration', 'comfort_stop_duration'), default=10.0
            ),
            manual_street_time=_optional_num(data, 'manualStreetTime', 'manual_street_time'),
            evaluated_street_time=_optional_num(data, 'evaluatedStreetTime', 'evaluated_street_time'),
            base_parcels=_optional_num(data, 'baseParcels', 'base_parcels'),
            route_type=str(_pick(data, 'routeType', 'route_type', default='mixed')),
        )


@dataclass
class TodayMailVolumes:
    """Today's declared inputs. Re-submitted on every change."""
    dps: float = 0.0
    flats: float = 0.0
    letters: float = 0.0
    parcels: float = 0.0
    sprs: float = 0.0
    curtailed_flats: float = 0.0
    curtailed_letters: float = 0.0
    safety_talk: float = 0.0
    has_boxholder: bool = False
    cased_boxholder: bool = False
    cased_boxholder_type: str = ""
    route_stops: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TodayMailVolumes':
        return cls(
            dps=_num(data, 'dps'),
            flats=_num(data, 'flats'),
            letters=_num(data, 'letters'),
            parcels=_num(data, 'parcels'),
            sprs=_num(data, 'sprs', 'spurs'),
            curtailed_flats=_num(data, 'curtailedFlats', 'curtailed_flats', 'curtailed'),
            curtailed_letters=_num(data, 'curtailedLetters', 'curtailed_letters'),
            safety_talk=_num(data, 'safetyTalk', 'safety_talk'),
            has_boxholder=to_bool(_pick(data, 'hasBoxholder', 'has_boxholder')),
            cased_boxholder=to_bool(_pick(data, 'casedBoxholder', 'cased_boxholder')),
            cased_boxholder_type=str(_pick(data, 'casedBoxholderType', 'cased_boxholder_type', default='')),
            route_stops=_num(data, 'routeStops', 'route_stops'),
        )


@dataclass(frozen=True)
class BreakStatus:
    """Which of the day's scheduled breaks have already been taken."""
    lunch_taken: bool = False
    comfort_stop_taken: bool = False

    @property
    def all_taken(self) -> bool:
        return self.lunch_taken and self.comfort_stop_taken


@dataclass(frozen=True)
class Waypoint:
    """A stop on today's route used for live progress tracking."""
    id: str
    name: str
    order: int = 0
    address: str = ""
    status: str = "pending"
    delivery_time: Optional[datetime] = None

    @property
    def label(self) -> str:
        return self.address or self.name

    @property
    def is_completed(self) -> bool:
        return self.status == 'completed' and self.delivery_time is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Waypoint':
        delivered = _pick(data, 'deliveryTime', 'delivery_time')
        if isinstance(delivered, str) and delivered:
            delivered = datetime.fromisoformat(delivered).replace(tzinfo=None)
        return cls(
            id=str(_pick(data, 'id', default='')),
            name=str(_pick(data, 'name', default='')),
            order=int(to_number(_pick(data, 'order', 'sequence'))),
            address=str(_pick(data, 'address', default='')),
            status=str(_pick(data, 'status', default='pending')),
            delivery_time=delivered if isinstance(delivered, datetime) else None,
        )


@dataclass(frozen=True)
class WaypointDay:
    """Waypoint timings (minutes after leaving the office) for one past day."""
    date: date
    timings: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'WaypointDay':
        raw = _pick(data, 'waypointTimings', 'waypoint_timings', 'timings', default=[])
        if isinstance(raw, Mapping):
            timings = {str(k): to_number(v) for k, v in raw.items()}
        else:
            timings = {
                str(t.get('name')): to_number(_pick(t, 'elapsedMinutes', 'elapsed_minutes'))
                for t in raw if t.get('name')
            }
        return cls(date=parse_date(_pick(data, 'date')) or date.min, timings=timings)
