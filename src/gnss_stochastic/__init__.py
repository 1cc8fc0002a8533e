"""
gnss-stochastic: Process-noise models for Kalman-filter GNSS estimation

For each scalar state tracked across epochs (tropospheric delay, slant
ionospheric delay, hardware bias, carrier-phase ambiguity, ...) a model
gives the state-transition coefficient Phi and the process-noise variance Q:

    x_k = Phi * x_{k-1} + w_k,      w_k ~ N(0, Q)

Per epoch and per variable the filter calls prepare() once, then reads
get_phi() and get_q(). Matrix assembly and the filter itself live in the
estimator, not here.

Version: 1.0.0
"""

__version__ = "1.0.0"

from .interfaces.gnss_types import Epoch, SourceID, SatID, TypeID
from .models import (
    StochasticModel,
    ConstantModel,
    OutOfOrderPolicy,
    EpochOrderError,
    RandomWalkModel,
    WhiteNoiseModel,
    PhaseAmbiguityModel,
    TropoRandomWalkModel,
    TropoGradRandomWalkModel,
    IonoRandomWalkModel,
    RecBiasRandomWalkModel,
    SatBiasRandomWalkModel,
    ISBRandomWalkModel,
    IFCBRandomWalkModel,
)

__all__ = [
    "Epoch",
    "SourceID",
    "SatID",
    "TypeID",
    "StochasticModel",
    "ConstantModel",
    "OutOfOrderPolicy",
    "EpochOrderError",
    "RandomWalkModel",
    "WhiteNoiseModel",
    "PhaseAmbiguityModel",
    "TropoRandomWalkModel",
    "TropoGradRandomWalkModel",
    "IonoRandomWalkModel",
    "RecBiasRandomWalkModel",
    "SatBiasRandomWalkModel",
    "ISBRandomWalkModel",
    "IFCBRandomWalkModel",
    "__version__",
]
