"""
Stochastic Model Base - Phi/Q contract and epoch bookkeeping

================================================================================
CONTRACT
================================================================================
For every scalar state tracked by the Kalman filter, a stochastic model
supplies the two coefficients of the discrete propagation

    x_k = Phi * x_{k-1} + w_k,      w_k ~ N(0, Q)

Per epoch and per tracked variable the filter calls:

    model.prepare(epoch, source, sat, data)   # exactly once
    phi = model.get_phi()
    q = model.get_q()

get_phi()/get_q() return the values computed by the last prepare() and are
stable until the next one.

================================================================================
STATE
================================================================================
Models keep epoch history between calls. One model instance serves ONE data
stream: feeding two interleaved streams for the same entity corrupts the
previous/current epoch pair. Build a fresh model per processing run.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import numpy as np

from ..interfaces.gnss_types import Epoch, SatID, SourceID, TypeValueMap

logger = logging.getLogger(__name__)


class OutOfOrderPolicy(str, Enum):
    """What to do when an epoch arrives earlier than the previous one."""
    CLAMP = "clamp"   # Zero elapsed time, log a warning
    RESET = "reset"   # Treat as a first observation
    RAISE = "raise"   # Raise EpochOrderError


class EpochOrderError(ValueError):
    """An epoch arrived earlier than the previous epoch for the same entity."""


def check_non_negative(name: str, value: float) -> float:
    """Validate a variance-like parameter and return it as float."""
    value = float(value)
    if not np.isfinite(value) or value < 0.0:
        raise ValueError(f"{name} must be a finite non-negative number, got {value}")
    return value


@dataclass
class EpochRecord:
    """
    Previous/current epoch pair for one tracked entity.

    Attributes:
        previous_time: Epoch of the previous measurement (sentinel if none)
        current_time: Epoch of the current measurement
        qprime: Per-entity spectral density override (None = model default)
    """
    previous_time: Epoch = field(default_factory=lambda: Epoch.BEGINNING_OF_TIME)
    current_time: Epoch = field(default_factory=lambda: Epoch.BEGINNING_OF_TIME)
    qprime: Optional[float] = None

    @property
    def has_previous(self) -> bool:
        return not self.previous_time.is_beginning

    def advance(
        self,
        epoch: Epoch,
        policy: OutOfOrderPolicy = OutOfOrderPolicy.CLAMP,
        seed_first: bool = True,
        label: Any = None
    ) -> float:
        """
        Move the record to a new epoch and return the elapsed seconds.

        Args:
            epoch: Current measurement epoch
            policy: Handling of epochs earlier than the previous one
            seed_first: With no previous epoch, seed it with the current one
                (zero elapsed time). Otherwise the interval is measured from
                BEGINNING_OF_TIME, which is very large.
            label: Entity description used in log messages

        Returns:
            Elapsed seconds since the previous epoch, never negative
        """
        self.current_time = epoch

        if not self.has_previous and seed_first:
            self.previous_time = epoch

        dt = self.current_time - self.previous_time

        if dt < 0.0:
            if policy == OutOfOrderPolicy.RAISE:
                raise EpochOrderError(
                    f"Epoch {epoch} is earlier than previous epoch "
                    f"{self.previous_time} for {label}"
                )
            if policy == OutOfOrderPolicy.RESET:
                logger.warning(f"Out-of-order epoch {epoch} for {label}: "
                               f"restarting history")
                self.previous_time = epoch if seed_first else Epoch.BEGINNING_OF_TIME
                dt = max(0.0, self.current_time - self.previous_time)
                self.previous_time = self.current_time
                return dt
            logger.warning(f"Out-of-order epoch {epoch} for {label} "
                           f"(previous {self.previous_time}): elapsed time clamped to 0")
            dt = 0.0

        self.previous_time = self.current_time
        return dt


class StochasticModel:
    """
    Base stochastic model: a constant state (Phi = 1, Q = 0).

    Subclasses override the subset of get_phi(), get_q() and prepare()
    relevant to their semantics.
    """

    def get_phi(self) -> float:
        """Element of the state transition matrix Phi."""
        return 1.0

    def get_q(self) -> float:
        """Element of the process noise matrix Q."""
        return 0.0

    def prepare(
        self,
        epoch: Epoch,
        source: Optional[SourceID] = None,
        sat: Optional[SatID] = None,
        data: Optional[TypeValueMap] = None
    ) -> None:
        """Feed the model with the current epoch and its data."""
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Describe the model configuration."""
        return {'model': type(self).__name__}

    def __repr__(self) -> str:
        params = ', '.join(f"{k}={v!r}" for k, v in self.to_dict().items() if k != 'model')
        return f"{type(self).__name__}({params})"


class ConstantModel(StochasticModel):
    """Constant state: the variable never changes between epochs."""
