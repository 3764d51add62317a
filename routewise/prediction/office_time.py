"""
Office Time Decomposition
=========================
Converts today's declared volumes into an AM office (722) time breakdown.

The breakdown is part of the output contract: every minute of the total
must be attributable to a field so the carrier can explain it.
"""

from dataclasses import asdict, dataclass
from typing import Dict, Optional

from ..config import OfficeRates
from .records import TodayMailVolumes


@dataclass(frozen=True)
class CategoryBreakdown:
    """Casing for one mail category."""
    feet: float = 0.0
    pieces: float = 0.0
    time: float = 0.0


@dataclass(frozen=True)
class OfficeTimeBreakdown:
    dps_pieces: float
    flats: CategoryBreakdown
    letters: CategoryBreakdown
    sprs: CategoryBreakdown
    boxholder_pieces: float
    boxholder_bucket: Optional[str]
    boxholder_bundle_time: float
    total_cased_pieces: float
    pull_down_time: float
    parcels: float
    load_truck_time: float
    fixed_office_time: float
    safety_talk: float

    @property
    def case_time(self) -> float:
        return self.flats.time + self.letters.time + self.sprs.time

    @property
    def total(self) -> float:
        """AM office minutes. Load-truck time belongs to street time."""
        return (self.fixed_office_time + self.case_time + self.pull_down_time
                + self.safety_talk + self.boxholder_bundle_time)

    def to_dict(self) -> Dict:
        return {
            'dps': {'pieces': self.dps_pieces},
            'flats': asdict(self.flats),
            'letters': asdict(self.letters),
            'sprs': {'pieces': self.sprs.pieces, 'time': self.sprs.time},
            'boxholder': {
                'pieces': self.boxholder_pieces,
                'bucket': self.boxholder_bucket,
                'bundle_time': self.boxholder_bundle_time,
            },
            'cased_mail': {
                'total_pieces': round(self.total_cased_pieces),
                'pull_down_time': self.pull_down_time,
            },
            'parcels': {'count': self.parcels, 'load_time': self.load_truck_time},
            'components': {
                'fixed_office_time': self.fixed_office_time,
                'case_time': self.case_time,
                'pull_down_time': self.pull_down_time,
                'safety_talk': self.safety_talk,
                'boxholder_time': self.boxholder_bundle_time,
            },
            'total': self.total,
        }


def decompose_office_time(today: TodayMailVolumes,
                          rates: Optional[OfficeRates] = None) -> OfficeTimeBreakdown:
    """
    Break today's volumes into office minutes.

    Args:
        today: Declared volumes (flats/letters in feet)
        rates: Casing standards; defaults to OfficeRates()

    Returns:
        OfficeTimeBreakdown whose ``total`` is the predicted AM office time
    """
    rates = rates or OfficeRates()

    flats_feet = max(0.0, today.flats - today.curtailed_flats)
    letters_feet = max(0.0, today.letters - today.curtailed_letters)

    flats_pieces = flats_feet * rates.flats_per_foot
    letters_pieces = letters_feet * rates.letters_per_foot

    # A cased boxholder is full-coverage mail: credit one piece per stop
    boxholder_pieces = 0.0
    boxholder_bucket = None
    if today.cased_boxholder and today.route_stops > 0:
        boxholder_pieces = today.route_stops
        if (today.cased_boxholder_type or '').strip().lower() == 'letters':
            boxholder_bucket = 'letters'
            letters_pieces += boxholder_pieces
        else:
            boxholder_bucket = 'flats'
            flats_pieces += boxholder_pieces

    sprs = max(0.0, today.sprs)
    flats_time = flats_pieces / rates.flats_case_rate
    letters_time = letters_pieces / rates.letters_case_rate
    sprs_time = sprs / rates.flats_case_rate

    total_cased = flats_pieces + letters_pieces + sprs
    pull_down_time = total_cased / rates.pull_down_rate

    bundle_time = 0.0
    if today.has_boxholder and not today.cased_boxholder:
        bundle_time = rates.boxholder_bundle_time

    parcels = max(0.0, today.parcels)

    return OfficeTimeBreakdown(
        dps_pieces=today.dps,
        flats=CategoryBreakdown(feet=flats_feet, pieces=round(flats_pieces), time=flats_time),
        letters=CategoryBreakdown(feet=letters_feet, pieces=round(letters_pieces), time=letters_time),
        sprs=CategoryBreakdown(pieces=sprs, time=sprs_time),
        boxholder_pieces=boxholder_pieces,
        boxholder_bucket=boxholder_bucket,
        boxholder_bundle_time=bundle_time,
        total_cased_pieces=total_cased,
        pull_down_time=pull_down_time,
        parcels=parcels,
        load_truck_time=(parcels + sprs) * rates.load_truck_time,
        fixed_office_time=rates.fixed_office_time,
        safety_talk=max(0.0, today.safety_talk),
    )
