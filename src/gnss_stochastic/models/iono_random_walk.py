"""
Slant Ionospheric Delay Model - random walk with scheduled interrupts

The slant ionospheric delay on L1 of each satellite is a random walk
(see entity_random_walk.py). On top of that, external ionospheric
corrections are refreshed on a fixed schedule (e.g. a new map every two
hours). At those boundaries the previous estimate is no longer consistent
with the new correction, so the model injects an interrupt:

    |(t - t0) mod sampling| <= tolerance   ->   Q = interrupt_sigma**2

The interrupt replaces the elapsed-time Q for that epoch only; the epoch
history of the satellite still advances.

Delays on other frequencies scale with 1/f**2 relative to L1; the
spectral density configured here applies to L1.

Warning: this model supports the slant delays of ONE station. Create a new
model for every station processed simultaneously.
"""

import logging
from typing import Any, Dict, Optional

import numpy as np

from ..interfaces.gnss_types import Epoch, SatID, SourceID, TypeValueMap
from .base import OutOfOrderPolicy, check_non_negative
from .entity_random_walk import SatelliteRandomWalkModel

logger = logging.getLogger(__name__)

DEFAULT_INTERRUPT_SAMPLING_S = 7200.0
DEFAULT_INTERRUPT_TOLERANCE_S = 0.5
DEFAULT_INTERRUPT_SIGMA = 100.0


class IonoRandomWalkModel(SatelliteRandomWalkModel):
    """
    Slant ionospheric delays per satellite, 1e-3 m**2/s (3.6 m**2/h).

    Interrupts are anchored at initial_time. With the default
    BEGINNING_OF_TIME anchor they fall on whole multiples of the sampling
    interval in GPS time (e.g. every even hour for 7200 s).
    """

    DEFAULT_QPRIME = 1.0e-3

    def __init__(
        self,
        qprime: Optional[float] = None,
        insert_interrupt: bool = True,
        sampling: float = DEFAULT_INTERRUPT_SAMPLING_S,
        tolerance: float = DEFAULT_INTERRUPT_TOLERANCE_S,
        initial_time: Epoch = Epoch.BEGINNING_OF_TIME,
        interrupt_sigma: float = DEFAULT_INTERRUPT_SIGMA,
        out_of_order: OutOfOrderPolicy = OutOfOrderPolicy.CLAMP
    ):
        """
        Args:
            qprime: Process spectral density for L1 slant delays (m**2/s)
            insert_interrupt: Enable scheduled interrupts
            sampling: Interval between interrupts, seconds
            tolerance: Half-width of the interrupt window, seconds
            initial_time: Anchor epoch of the interrupt schedule
            interrupt_sigma: Standard deviation injected on an interrupt (m)
            out_of_order: Handling of epochs that go backwards for a satellite
        """
        super().__init__(qprime=qprime, out_of_order=out_of_order)
        self.insert_interrupt = bool(insert_interrupt)
        self.sampling = self._check_sampling(sampling)
        self.tolerance = check_non_negative('tolerance', tolerance)
        self.initial_time = initial_time
        self.interrupt_variance = check_non_negative('interrupt_sigma', interrupt_sigma) ** 2
        self.interrupted = False

    @staticmethod
    def _check_sampling(sampling: float) -> float:
        sampling = float(sampling)
        if not np.isfinite(sampling) or sampling <= 0.0:
            raise ValueError(f"sampling must be a positive number of seconds, got {sampling}")
        return sampling

    def set_initial_epoch(self, initial_epoch: Epoch) -> 'IonoRandomWalkModel':
        """Set the epoch the interrupt schedule starts from."""
        self.initial_time = initial_epoch
        return self

    def set_insert_interrupt(self, insert: bool) -> 'IonoRandomWalkModel':
        self.insert_interrupt = bool(insert)
        return self

    def set_sampling(self, sampling: float) -> 'IonoRandomWalkModel':
        self.sampling = self._check_sampling(sampling)
        return self

    def set_tolerance(self, tolerance: float) -> 'IonoRandomWalkModel':
        self.tolerance = check_non_negative('tolerance', tolerance)
        return self

    def set_interrupt_sigma(self, sigma: float) -> 'IonoRandomWalkModel':
        self.interrupt_variance = check_non_negative('interrupt_sigma', sigma) ** 2
        return self

    def is_interrupt(self, epoch: Epoch) -> bool:
        """True if epoch falls on a scheduled interrupt boundary."""
        if not self.insert_interrupt:
            return False

        delta = epoch - self.initial_time
        if delta < -self.tolerance:
            return False

        offset = float(np.remainder(delta, self.sampling))
        return min(offset, self.sampling - offset) <= self.tolerance

    def prepare(
        self,
        epoch: Epoch,
        source: Optional[SourceID] = None,
        sat: Optional[SatID] = None,
        data: Optional[TypeValueMap] = None
    ) -> None:
        key = self.entity_key(source, sat)

        self.interrupted = self.is_interrupt(epoch)
        if self.interrupted:
            self._record(key).advance(epoch, self.out_of_order, seed_first=True, label=key)
            self.variance = self.interrupt_variance
            logger.debug(f"Ionospheric interrupt at {epoch} for {key}")
            return

        self._compute_q(key, epoch)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update({
            'insert_interrupt': self.insert_interrupt,
            'sampling': self.sampling,
            'tolerance': self.tolerance,
            'initial_time': str(self.initial_time),
            'interrupt_variance': self.interrupt_variance,
        })
        return result
