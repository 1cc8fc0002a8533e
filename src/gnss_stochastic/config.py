"""
Model configuration - build stochastic models from a TOML file.

Example config.toml:

    [general]
    out_of_order = "clamp"          # clamp | reset | raise

    [models.tropo]
    type = "tropo_random_walk"
    qprime = 5.0e-8

    [models.iono]
    type = "iono_random_walk"
    sampling = 7200.0
    tolerance = 0.5
    initial_time = 2024-03-01T00:00:00Z

    [models.ambiguity]
    type = "phase_ambiguity"
    watch_sat_arc = false
    cs_flag_type = "CSL1"

Every call to build_models() returns NEW model instances, so each data
stream gets its own epoch history.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Type

import toml

from .interfaces.gnss_types import Epoch, TypeID
from .models import (
    ConstantModel,
    EntityRandomWalkModel,
    IFCBRandomWalkModel,
    IonoRandomWalkModel,
    ISBRandomWalkModel,
    OutOfOrderPolicy,
    PhaseAmbiguityModel,
    RandomWalkModel,
    RecBiasRandomWalkModel,
    SatBiasRandomWalkModel,
    StochasticModel,
    TropoGradRandomWalkModel,
    TropoRandomWalkModel,
    WhiteNoiseModel,
)

logger = logging.getLogger(__name__)

MODEL_TYPES: Dict[str, Type[StochasticModel]] = {
    'constant': ConstantModel,
    'white_noise': WhiteNoiseModel,
    'random_walk': RandomWalkModel,
    'phase_ambiguity': PhaseAmbiguityModel,
    'tropo_random_walk': TropoRandomWalkModel,
    'tropo_grad_random_walk': TropoGradRandomWalkModel,
    'iono_random_walk': IonoRandomWalkModel,
    'rec_bias_random_walk': RecBiasRandomWalkModel,
    'sat_bias_random_walk': SatBiasRandomWalkModel,
    'isb_random_walk': ISBRandomWalkModel,
    'ifcb_random_walk': IFCBRandomWalkModel,
}


def default_config() -> Dict[str, Any]:
    """Default configuration: a typical undifferenced PPP state set."""
    return {
        'general': {
            'out_of_order': OutOfOrderPolicy.CLAMP.value,
        },
        'models': {
            'tropo': {'type': 'tropo_random_walk'},
            'iono': {'type': 'iono_random_walk'},
            'rec_bias': {'type': 'rec_bias_random_walk'},
            'ambiguity': {'type': 'phase_ambiguity'},
        },
    }


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from TOML file."""
    if config_path and Path(config_path).exists():
        with open(config_path, 'r') as f:
            return toml.load(f)

    if config_path:
        logger.warning(f"Config file {config_path} not found - using defaults")
    return default_config()


def _to_epoch(value: Any) -> Epoch:
    if isinstance(value, Epoch):
        return value
    if isinstance(value, datetime):
        return Epoch.from_datetime(value)
    if isinstance(value, str):
        return Epoch.from_datetime(datetime.fromisoformat(value.replace('Z', '+00:00')))
    if isinstance(value, (int, float)):
        return Epoch(float(value))
    raise ValueError(f"Cannot interpret {value!r} as an epoch")


def create_model(
    model_type: str,
    params: Optional[Dict[str, Any]] = None,
    out_of_order: Optional[str] = None
) -> StochasticModel:
    """
    Instantiate one stochastic model.

    Args:
        model_type: Key of MODEL_TYPES, e.g. 'tropo_random_walk'
        params: Constructor parameters
        out_of_order: Default out-of-order policy for time-dependent models

    Returns:
        A freshly constructed model

    Raises:
        ValueError: Unknown type or invalid parameters
    """
    cls = MODEL_TYPES.get(model_type)
    if cls is None:
        raise ValueError(f"Unknown stochastic model type {model_type!r}. "
                         f"Available: {', '.join(sorted(MODEL_TYPES))}")

    kwargs = dict(params or {})

    if 'cs_flag_type' in kwargs:
        kwargs['cs_flag_type'] = TypeID(kwargs['cs_flag_type'])
    if 'initial_time' in kwargs:
        kwargs['initial_time'] = _to_epoch(kwargs['initial_time'])
    if 'previous_time' in kwargs:
        kwargs['previous_time'] = _to_epoch(kwargs['previous_time'])

    if issubclass(cls, (RandomWalkModel, EntityRandomWalkModel)):
        policy = kwargs.get('out_of_order', out_of_order)
        if policy is not None:
            kwargs['out_of_order'] = OutOfOrderPolicy(policy)

    try:
        return cls(**kwargs)
    except TypeError as e:
        raise ValueError(f"Invalid parameters for {model_type}: {e}") from e


def build_models(config: Dict[str, Any]) -> Dict[str, StochasticModel]:
    """
    Build every model listed under [models].

    Returns:
        Mapping of model name to a new model instance
    """
    out_of_order = config.get('general', {}).get('out_of_order')
    models: Dict[str, StochasticModel] = {}

    for name, entry in config.get('models', {}).items():
        if not isinstance(entry, dict):
            raise ValueError(f"Model entry {name!r} must be a table, got {type(entry).__name__}")
        params = dict(entry)
        model_type = params.pop('type', None)
        if model_type is None:
            raise ValueError(f"Model entry {name!r} has no 'type'")

        models[name] = create_model(model_type, params, out_of_order)
        logger.debug(f"Built model {name}: {models[name]!r}")

    logger.info(f"Built {len(models)} stochastic models: {', '.join(models)}")
    return models
