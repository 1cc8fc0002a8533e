"""
Phase Ambiguity Model - constant between cycle slips, reset on a slip

================================================================================
BEHAVIOR
================================================================================
A carrier-phase ambiguity is constant while the receiver keeps phase lock:

    no slip:     Phi = 1,  Q = 0
    cycle slip:  Phi = 0,  Q = sigma**2   (uninformative prior)

Cycle slips are read from the per-epoch data in one of two modes:

    Arc mode (watch_sat_arc=True, default)
        Compare TypeID.SAT_ARC with the last value seen for the same
        (source, satellite). A change means a slip. The first value seen
        for a pair is the baseline and is not a slip.

    Flag mode (watch_sat_arc=False)
        Read the field named by cs_flag_type (TypeID.CS_FLAG by default).
        Any non-zero value means a slip.

A missing field is never an error: it counts as "no slip".
"""

import logging
from typing import Any, Dict, Optional, Tuple

from ..interfaces.gnss_types import Epoch, SatID, SourceID, TypeID, TypeValueMap
from .base import StochasticModel, check_non_negative

logger = logging.getLogger(__name__)

DEFAULT_AMBIGUITY_SIGMA = 2.0e4


class PhaseAmbiguityModel(StochasticModel):
    """
    Stochastic model for carrier-phase ambiguities.

    Usage:
        model = PhaseAmbiguityModel()
        model.prepare(epoch, source, sat, {TypeID.SAT_ARC: 3.0})
        phi, q = model.get_phi(), model.get_q()

    Warning: the arc cache makes instances stateful. Use one object per
    data stream.
    """

    def __init__(
        self,
        sigma: float = DEFAULT_AMBIGUITY_SIGMA,
        watch_sat_arc: bool = True,
        cs_flag_type: TypeID = TypeID.CS_FLAG
    ):
        """
        Args:
            sigma: Standard deviation applied when a cycle slip happens
            watch_sat_arc: Use satellite arcs instead of cycle-slip flags
            cs_flag_type: Data field holding the cycle-slip flag (flag mode)
        """
        self.variance = check_non_negative('sigma', sigma) ** 2
        self.cycle_slip = False
        self.watch_sat_arc = bool(watch_sat_arc)
        self.cs_flag_type = TypeID(cs_flag_type)

        # Last arc value seen per (source, satellite)
        self.sat_arc_map: Dict[Tuple[Optional[SourceID], Optional[SatID]], float] = {}

    def set_cs_flag_type(self, flag_type: TypeID) -> 'PhaseAmbiguityModel':
        """
        Select the cycle-slip flag field.

        Only used when watch_sat_arc is False.
        """
        self.cs_flag_type = TypeID(flag_type)
        return self

    def get_cs_flag_type(self) -> TypeID:
        return self.cs_flag_type

    def set_sigma(self, sigma: float) -> 'PhaseAmbiguityModel':
        self.variance = check_non_negative('sigma', sigma) ** 2
        return self

    def set_cs(self, cs: bool) -> 'PhaseAmbiguityModel':
        """Set the cycle-slip flag for the current epoch directly."""
        self.cycle_slip = bool(cs)
        return self

    def get_cs(self) -> bool:
        return self.cycle_slip

    def set_watch_sat_arc(self, watch_arc: bool) -> 'PhaseAmbiguityModel':
        self.watch_sat_arc = bool(watch_arc)
        return self

    def get_phi(self) -> float:
        return 0.0 if self.cycle_slip else 1.0

    def get_q(self) -> float:
        return self.variance if self.cycle_slip else 0.0

    def check_cs(
        self,
        source: Optional[SourceID],
        sat: Optional[SatID],
        data: Optional[TypeValueMap]
    ) -> bool:
        """
        Derive the cycle-slip flag from the data of one (source, satellite).

        Returns:
            The updated cycle-slip flag
        """
        data = data or {}

        if self.watch_sat_arc:
            arc = data.get(TypeID.SAT_ARC)
            if arc is None:
                self.cycle_slip = False
                return self.cycle_slip

            key = (source, sat)
            last_arc = self.sat_arc_map.get(key)
            self.sat_arc_map[key] = float(arc)

            if last_arc is None:
                logger.debug(f"Arc baseline for {source}/{sat}: {arc}")
                self.cycle_slip = False
            else:
                self.cycle_slip = float(arc) != last_arc
                if self.cycle_slip:
                    logger.debug(f"Arc change for {source}/{sat}: {last_arc} -> {arc}")
        else:
            flag = data.get(self.cs_flag_type)
            self.cycle_slip = flag is not None and float(flag) != 0.0
            if self.cycle_slip:
                logger.debug(f"Cycle slip flag {self.cs_flag_type.value} set for {source}/{sat}")

        return self.cycle_slip

    def prepare(
        self,
        epoch: Epoch,
        source: Optional[SourceID] = None,
        sat: Optional[SatID] = None,
        data: Optional[TypeValueMap] = None
    ) -> None:
        self.check_cs(source, sat, data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'model': type(self).__name__,
            'variance': self.variance,
            'watch_sat_arc': self.watch_sat_arc,
            'cs_flag_type': self.cs_flag_type.value,
        }
