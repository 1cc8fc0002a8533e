"""
Single-stream random walk and white noise models.

RandomWalkModel:
    Q = qprime * (t_k - t_{k-1}),  Phi = 1

    Beware of units: qprime is a spectral density in sigma**2 / second,
    while WhiteNoiseModel takes plain sigma. Time MUST be in seconds.

WhiteNoiseModel:
    Q = sigma**2,  Phi = 0   (the state is re-sampled every epoch)
"""

import logging
from typing import Any, Dict, Optional

from ..interfaces.gnss_types import Epoch, SatID, SourceID, TypeValueMap
from .base import (
    EpochRecord,
    OutOfOrderPolicy,
    StochasticModel,
    check_non_negative,
)

logger = logging.getLogger(__name__)

# Very high default spectral density: an unconfigured random walk behaves
# almost like white noise and lets the filter re-initialize the state.
DEFAULT_RANDOM_WALK_QPRIME = 9.0e10

DEFAULT_WHITE_NOISE_SIGMA = 300000.0


class RandomWalkModel(StochasticModel):
    """
    Random walk over a single global stream of epochs.

    The first prepare() measures the interval from BEGINNING_OF_TIME, so Q
    is huge and the state is effectively re-initialized. Afterwards Q grows
    with the time elapsed since the previous prepare(). Calling prepare()
    twice for the same epoch yields Q = 0 the second time.

    Warning: instances store epoch history. Do not share one object between
    different data streams.
    """

    def __init__(
        self,
        qprime: float = DEFAULT_RANDOM_WALK_QPRIME,
        previous_time: Epoch = Epoch.BEGINNING_OF_TIME,
        out_of_order: OutOfOrderPolicy = OutOfOrderPolicy.CLAMP
    ):
        """
        Args:
            qprime: Process spectral density, d(sigma**2)/dt
            previous_time: Epoch of the previous measurement, if known
            out_of_order: Handling of epochs that go backwards
        """
        self.qprime = check_non_negative('qprime', qprime)
        self.record = EpochRecord(previous_time=previous_time,
                                  current_time=previous_time)
        self.out_of_order = OutOfOrderPolicy(out_of_order)
        self.variance = 0.0

    def set_previous_time(self, prev_time: Epoch) -> 'RandomWalkModel':
        self.record.previous_time = prev_time
        return self

    def set_current_time(self, curr_time: Epoch) -> 'RandomWalkModel':
        """Record the current epoch. The next prepare() overwrites it."""
        self.record.current_time = curr_time
        return self

    def set_qprime(self, qp: float) -> 'RandomWalkModel':
        """Set the process spectral density, d(sigma**2)/dt."""
        self.qprime = check_non_negative('qprime', qp)
        return self

    def get_q(self) -> float:
        return self.variance

    def prepare(
        self,
        epoch: Epoch,
        source: Optional[SourceID] = None,
        sat: Optional[SatID] = None,
        data: Optional[TypeValueMap] = None
    ) -> None:
        dt = self.record.advance(epoch, self.out_of_order,
                                 seed_first=False, label='random walk')
        self.variance = self.qprime * dt

    def to_dict(self) -> Dict[str, Any]:
        return {
            'model': type(self).__name__,
            'qprime': self.qprime,
            'out_of_order': self.out_of_order.value,
        }


class WhiteNoiseModel(StochasticModel):
    """White noise: no memory between epochs."""

    def __init__(self, sigma: float = DEFAULT_WHITE_NOISE_SIGMA):
        """
        Args:
            sigma: Standard deviation of the white noise process
        """
        self.variance = check_non_negative('sigma', sigma) ** 2

    def set_sigma(self, sigma: float) -> 'WhiteNoiseModel':
        self.variance = check_non_negative('sigma', sigma) ** 2
        return self

    def get_phi(self) -> float:
        return 0.0

    def get_q(self) -> float:
        return self.variance

    def to_dict(self) -> Dict[str, Any]:
        return {
            'model': type(self).__name__,
            'variance': self.variance,
        }
