"""
GNSS Identity and Time Types

These types define the contract between the stochastic models and the
estimator that drives them. The models only rely on a few properties:

    Epoch     - totally ordered, ``a - b`` gives elapsed seconds, and a
                BEGINNING_OF_TIME sentinel earlier than any real epoch
    SourceID  - hashable, orderable station identity
    SatID     - hashable, orderable satellite identity
    TypeID    - key of a per-epoch data field (cycle-slip flag, arc id)

Time scale:
    Epoch stores seconds on the continuous GPS time scale, counted from the
    GPS origin (1980-01-06 00:00:00). No leap seconds are applied inside the
    scale; conversion from UTC uses a fixed leap-second offset.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import ClassVar, Mapping, Tuple, Union

# GPS origin and leap seconds (GPS - UTC), same convention as the RTCM
# decoders that feed the estimator.
GPS_EPOCH = datetime(1980, 1, 6, tzinfo=timezone.utc)
LEAP_SECONDS = 18
SECONDS_PER_DAY = 86400.0
SECONDS_PER_WEEK = 7 * 86400.0

# Modified Julian Date of the GPS origin
MJD_GPS_EPOCH = 44244

_SAT_PATTERN = re.compile(r'^\s*([A-Z])\s*(\d{1,3})\s*$')


@dataclass(frozen=True, order=True)
class Epoch:
    """
    A measurement epoch in GPS seconds.

    Subtracting two epochs yields elapsed seconds as a float, adding a float
    shifts the epoch. ``Epoch.BEGINNING_OF_TIME`` sits at MJD 0, so it sorts
    before every real epoch while differences against it stay finite.
    """
    seconds: float

    BEGINNING_OF_TIME: ClassVar['Epoch']

    def __sub__(self, other: Union['Epoch', float]):
        if isinstance(other, Epoch):
            return self.seconds - other.seconds
        if isinstance(other, (int, float)):
            return Epoch(self.seconds - float(other))
        return NotImplemented

    def __add__(self, other: float) -> 'Epoch':
        if isinstance(other, (int, float)):
            return Epoch(self.seconds + float(other))
        return NotImplemented

    __radd__ = __add__

    @property
    def is_beginning(self) -> bool:
        """True for the 'no prior observation' sentinel."""
        return self.seconds <= Epoch.BEGINNING_OF_TIME.seconds

    @classmethod
    def from_gps(cls, week: int, sow: float) -> 'Epoch':
        """Build an epoch from GPS week and seconds of week."""
        return cls(week * SECONDS_PER_WEEK + float(sow))

    @classmethod
    def from_datetime(cls, utc_dt: datetime) -> 'Epoch':
        """
        Build an epoch from a UTC datetime.

        Naive datetimes are taken as UTC.
        """
        if utc_dt.tzinfo is None:
            utc_dt = utc_dt.replace(tzinfo=timezone.utc)
        delta = utc_dt - GPS_EPOCH
        return cls(delta.total_seconds() + LEAP_SECONDS)

    def to_gps(self) -> Tuple[int, float]:
        """Return (week, seconds_of_week)."""
        week = int(self.seconds // SECONDS_PER_WEEK)
        return week, self.seconds - week * SECONDS_PER_WEEK

    def to_datetime(self) -> datetime:
        """Return the UTC datetime of this epoch."""
        return GPS_EPOCH + timedelta(seconds=self.seconds - LEAP_SECONDS)

    def __str__(self) -> str:
        if self.is_beginning:
            return "BEGINNING_OF_TIME"
        week, sow = self.to_gps()
        return f"{week:04d}/{sow:.3f}"


Epoch.BEGINNING_OF_TIME = Epoch(-MJD_GPS_EPOCH * SECONDS_PER_DAY)


@dataclass(frozen=True, order=True)
class SourceID:
    """Station (receiver) identity."""
    name: str
    receiver_type: str = ""

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, order=True)
class SatID:
    """
    Satellite identity: constellation letter plus PRN.

    Examples:
        SatID('G', 5)            -> G05
        SatID.from_string('E11') -> E11
    """
    system: str
    prn: int

    @classmethod
    def from_string(cls, text: str) -> 'SatID':
        match = _SAT_PATTERN.match(text.upper())
        if not match:
            raise ValueError(f"Invalid satellite identifier: {text!r}")
        return cls(match.group(1), int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.system}{self.prn:02d}"


class TypeID(str, Enum):
    """Data-field identifiers read from the per-epoch data container."""
    CS_FLAG = "CSFlag"    # Generic cycle-slip flag
    CSL1 = "CSL1"         # Cycle-slip flag on L1
    CSL2 = "CSL2"         # Cycle-slip flag on L2
    CSL5 = "CSL5"         # Cycle-slip flag on L5
    SAT_ARC = "satArc"    # Satellite arc counter


# Per-epoch data container for one (source, satellite)
TypeValueMap = Mapping[TypeID, float]
