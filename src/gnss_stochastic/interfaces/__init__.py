"""Identity, time and data-field types shared by all stochastic models."""

from .gnss_types import Epoch, SourceID, SatID, TypeID, TypeValueMap

__all__ = ['Epoch', 'SourceID', 'SatID', 'TypeID', 'TypeValueMap']
