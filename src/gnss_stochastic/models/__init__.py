"""
Stochastic models for Kalman-filter GNSS estimation.

Contains:
- StochasticModel / ConstantModel: Phi = 1, Q = 0
- WhiteNoiseModel, RandomWalkModel: single-stream models
- PhaseAmbiguityModel: constant between cycle slips
- Per-entity random walks for troposphere, ionosphere and hardware biases
"""

from .base import (
    StochasticModel,
    ConstantModel,
    EpochRecord,
    OutOfOrderPolicy,
    EpochOrderError,
)
from .random_walk import RandomWalkModel, WhiteNoiseModel
from .phase_ambiguity import PhaseAmbiguityModel
from .entity_random_walk import (
    EntityRandomWalkModel,
    TropoRandomWalkModel,
    TropoGradRandomWalkModel,
    RecBiasRandomWalkModel,
    SatBiasRandomWalkModel,
    ISBRandomWalkModel,
    IFCBRandomWalkModel,
)
from .iono_random_walk import IonoRandomWalkModel

__all__ = [
    'StochasticModel', 'ConstantModel', 'EpochRecord', 'OutOfOrderPolicy',
    'EpochOrderError', 'RandomWalkModel', 'WhiteNoiseModel',
    'PhaseAmbiguityModel', 'EntityRandomWalkModel', 'TropoRandomWalkModel',
    'TropoGradRandomWalkModel', 'IonoRandomWalkModel', 'RecBiasRandomWalkModel',
    'SatBiasRandomWalkModel', 'ISBRandomWalkModel', 'IFCBRandomWalkModel',
]
