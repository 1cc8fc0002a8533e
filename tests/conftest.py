"""
Pytest configuration and fixtures for gnss-stochastic tests.
"""

import pytest
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))


@pytest.fixture
def t0():
    """A real epoch: GPS week 2300, 0 s of week."""
    from gnss_stochastic.interfaces.gnss_types import Epoch
    return Epoch.from_gps(2300, 0.0)


@pytest.fixture
def station():
    """A reference station."""
    from gnss_stochastic.interfaces.gnss_types import SourceID
    return SourceID('WUHN')


@pytest.fixture
def other_station():
    from gnss_stochastic.interfaces.gnss_types import SourceID
    return SourceID('BJFS')


@pytest.fixture
def gps05():
    from gnss_stochastic.interfaces.gnss_types import SatID
    return SatID('G', 5)


@pytest.fixture
def gal11():
    from gnss_stochastic.interfaces.gnss_types import SatID
    return SatID('E', 11)
