"""
Per-Entity Random Walk Models

================================================================================
ONE MODEL, MANY VARIABLES
================================================================================
A single instance serves every variable of one kind, each with its own
epoch history. The registry key depends on the variable:

    Model                      Key                 Default qprime
    -------------------------  ------------------  --------------
    TropoRandomWalkModel       station             5.0e-8  m**2/s
    TropoGradRandomWalkModel   station             5.0e-10 m**2/s
    IonoRandomWalkModel        satellite           1.0e-3  m**2/s
    RecBiasRandomWalkModel     station             1.0e-4  m**2/s
    SatBiasRandomWalkModel     satellite           3.0e-6  m**2/s
    ISBRandomWalkModel         station             9.0e-4  m**2/s
    IFCBRandomWalkModel        (station, sat)      1.0e-4  m**2/s

(IonoRandomWalkModel lives in iono_random_walk.py.)

For each prepare():

    record = registry.setdefault(key)        # created on first use
    dt = epoch - record.previous_time        # 0 on the first epoch
    Q = qprime(key) * dt
    record.previous_time = epoch

The first epoch of an entity yields Q = 0: the filter supplies the initial
covariance of a new state itself.

================================================================================
SPECTRAL DENSITY
================================================================================
set_qprime(qp) changes the shared value used by every entity without an
override, including entities created later. set_qprime(qp, key=...) gives
one entity its own spectral density.

Warning: get_q() returns the variance of the LAST prepared entity.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Hashable, Optional, Tuple

from ..interfaces.gnss_types import Epoch, SatID, SourceID, TypeValueMap
from .base import (
    EpochRecord,
    OutOfOrderPolicy,
    StochasticModel,
    check_non_negative,
)

logger = logging.getLogger(__name__)


class EntityRandomWalkModel(StochasticModel, ABC):
    """
    Random walk with an independent epoch history per entity.

    Subclasses set DEFAULT_QPRIME and implement entity_key().
    """

    DEFAULT_QPRIME = 1.0e-4

    def __init__(
        self,
        qprime: Optional[float] = None,
        out_of_order: OutOfOrderPolicy = OutOfOrderPolicy.CLAMP
    ):
        """
        Args:
            qprime: Process spectral density, d(sigma**2)/dt in seconds
                (class default if None)
            out_of_order: Handling of epochs that go backwards for an entity
        """
        if qprime is None:
            qprime = self.DEFAULT_QPRIME
        self.qprime = check_non_negative('qprime', qprime)
        self.out_of_order = OutOfOrderPolicy(out_of_order)
        self.variance = 0.0
        self.records: Dict[Hashable, EpochRecord] = {}

    @abstractmethod
    def entity_key(self, source: Optional[SourceID], sat: Optional[SatID]) -> Hashable:
        """Registry key of the variable identified by (source, sat)."""

    def _record(self, key: Hashable) -> EpochRecord:
        record = self.records.get(key)
        if record is None:
            record = EpochRecord()
            self.records[key] = record
            logger.debug(f"{type(self).__name__}: new entity {key}")
        return record

    def set_previous_time(self, key: Hashable, prev_time: Epoch) -> 'EntityRandomWalkModel':
        self._record(key).previous_time = prev_time
        return self

    def set_current_time(self, key: Hashable, curr_time: Epoch) -> 'EntityRandomWalkModel':
        """
        Record the current epoch of an entity.

        Informational only: the next prepare() overwrites it with its epoch.
        """
        self._record(key).current_time = curr_time
        return self

    def set_qprime(self, qp: float, key: Optional[Hashable] = None) -> 'EntityRandomWalkModel':
        """
        Set the process spectral density.

        Args:
            qp: Spectral density, d(sigma**2)/dt in seconds
            key: Entity to override; None sets the shared value
        """
        qp = check_non_negative('qprime', qp)
        if key is None:
            self.qprime = qp
        else:
            self._record(key).qprime = qp
        return self

    def get_qprime(self, key: Optional[Hashable] = None) -> float:
        """Spectral density applied to an entity (shared value if no override)."""
        if key is not None:
            record = self.records.get(key)
            if record is not None and record.qprime is not None:
                return record.qprime
        return self.qprime

    def get_q(self) -> float:
        return self.variance

    def _compute_q(self, key: Hashable, epoch: Epoch) -> float:
        record = self._record(key)
        dt = record.advance(epoch, self.out_of_order, seed_first=True, label=key)
        self.variance = self.get_qprime(key) * dt
        return self.variance

    def prepare(
        self,
        epoch: Epoch,
        source: Optional[SourceID] = None,
        sat: Optional[SatID] = None,
        data: Optional[TypeValueMap] = None
    ) -> None:
        self._compute_q(self.entity_key(source, sat), epoch)

    def to_dict(self) -> Dict[str, Any]:
        overrides = {str(k): r.qprime for k, r in self.records.items()
                     if r.qprime is not None}
        result = {
            'model': type(self).__name__,
            'qprime': self.qprime,
            'out_of_order': self.out_of_order.value,
            'entities': len(self.records),
        }
        if overrides:
            result['qprime_overrides'] = overrides
        return result


class StationRandomWalkModel(EntityRandomWalkModel):
    """Random walk keyed by station."""

    def entity_key(self, source: Optional[SourceID], sat: Optional[SatID]) -> Hashable:
        return source


class SatelliteRandomWalkModel(EntityRandomWalkModel):
    """Random walk keyed by satellite."""

    def entity_key(self, source: Optional[SourceID], sat: Optional[SatID]) -> Hashable:
        return sat


class TropoRandomWalkModel(StationRandomWalkModel):
    """
    Zenith wet tropospheric delay per station.

    5e-8 m**2/s is about 1.8 cm**2/h.
    """
    DEFAULT_QPRIME = 5.0e-8


class TropoGradRandomWalkModel(StationRandomWalkModel):
    """Tropospheric gradients per station."""
    DEFAULT_QPRIME = 5.0e-10


class RecBiasRandomWalkModel(StationRandomWalkModel):
    """Receiver uncalibrated hardware delay per station."""
    DEFAULT_QPRIME = 1.0e-4


class SatBiasRandomWalkModel(SatelliteRandomWalkModel):
    """
    Satellite uncalibrated hardware delay per satellite.

    The bias is shared by all stations tracking the satellite:
    3e-6 m**2/s over 30 s is about (1 cm)**2.
    """
    DEFAULT_QPRIME = 3.0e-6


class ISBRandomWalkModel(StationRandomWalkModel):
    """
    Inter-system bias per station.

    Intended for GAL/BDS ISB; only valid for GLONASS when FDMA
    inter-frequency biases are ignored.
    """
    DEFAULT_QPRIME = 9.0e-4


class IFCBRandomWalkModel(EntityRandomWalkModel):
    """Inter-frequency code bias per (station, satellite), mainly GLONASS FDMA."""
    DEFAULT_QPRIME = 1.0e-4

    def entity_key(
        self,
        source: Optional[SourceID],
        sat: Optional[SatID]
    ) -> Tuple[Optional[SourceID], Optional[SatID]]:
        return (source, sat)
