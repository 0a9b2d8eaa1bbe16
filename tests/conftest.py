import os
import sys

import numpy as np
import pytest

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(project_root)

from common.types import GeodeticFix  # noqa: E402


@pytest.fixture
def make_fix():
    """Factory for fixes around the reference site (45.0, -75.0, 100.0)."""
    def _make(lat=45.0, lon=-75.0, alt_m=100.0, cov=(0.25, 0.36, 1.0), ts="2024-01-01T00:00:00.000Z"):
        return GeodeticFix(ts=ts, lat=lat, lon=lon, alt_m=alt_m, position_covariance=np.asarray(cov, dtype=float))
    return _make
