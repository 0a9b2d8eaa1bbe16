"""
Unit tests for WGS84 / ENU helpers
"""

import math
import os
import sys

import numpy as np
import pytest

project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.append(project_root)

from common.geo import enu_rotation, lla_to_ecef, lla_to_enu, rotate_xy, yaw_from_quaternion


class TestEcef:
    """Test cases for geodetic -> ECEF"""

    def test_equator_prime_meridian(self):
        """(0, 0, 0) sits on the semi-major axis"""
        x = lla_to_ecef(0.0, 0.0, 0.0)
        assert x == pytest.approx([6378137.0, 0.0, 0.0])

    def test_north_pole(self):
        """Pole lies on the semi-minor axis"""
        x = lla_to_ecef(90.0, 0.0, 0.0)
        assert x[0] == pytest.approx(0.0, abs=1e-6)
        assert x[2] == pytest.approx(6356752.314, abs=1e-3)

    def test_enu_rotation_is_orthonormal(self):
        """R @ R.T is identity"""
        R = enu_rotation(45.0, -75.0)
        assert np.allclose(R @ R.T, np.eye(3))


class TestLlaToEnu:
    """Test cases for the projection primitive"""

    def test_reference_maps_to_origin(self):
        """The datum itself projects to (0, 0, 0)"""
        ref = (45.0, -75.0, 100.0)
        assert np.allclose(lla_to_enu(ref, ref), 0.0, atol=1e-9)

    def test_north_offset(self):
        """0.001 deg of latitude at 45 deg is ~111.1 m north"""
        enu = lla_to_enu((45.001, -75.0, 100.0), (45.0, -75.0, 100.0))
        assert enu[0] == pytest.approx(0.0, abs=1e-3)
        assert enu[1] == pytest.approx(111.13, abs=0.1)
        assert abs(enu[2]) < 0.01

    def test_east_offset(self):
        """0.001 deg of longitude at 45 deg is ~78.8 m east"""
        enu = lla_to_enu((45.0, -74.999, 100.0), (45.0, -75.0, 100.0))
        assert enu[0] == pytest.approx(78.85, abs=0.1)
        assert enu[1] == pytest.approx(0.0, abs=0.01)

    def test_altitude_is_up(self):
        """Height above the datum comes out on the U axis"""
        enu = lla_to_enu((45.0, -75.0, 110.0), (45.0, -75.0, 100.0))
        assert enu == pytest.approx([0.0, 0.0, 10.0], abs=1e-6)


class TestOrientation:
    """Test cases for yaw extraction and planar rotation"""

    def test_identity_quaternion_has_zero_yaw(self):
        assert yaw_from_quaternion((0.0, 0.0, 0.0, 1.0)) == pytest.approx(0.0)

    def test_quarter_turn(self):
        """Quaternion for +90 deg about Z"""
        q = (0.0, 0.0, math.sin(math.pi / 4), math.cos(math.pi / 4))
        assert yaw_from_quaternion(q) == pytest.approx(math.pi / 2)

    def test_yaw_ignores_roll(self):
        """A pure roll leaves yaw at zero"""
        q = (math.sin(0.2), 0.0, 0.0, math.cos(0.2))
        assert yaw_from_quaternion(q) == pytest.approx(0.0, abs=1e-12)

    def test_rotate_xy(self):
        assert rotate_xy(1.0, 0.0, math.pi / 2) == pytest.approx((0.0, 1.0), abs=1e-12)
        assert rotate_xy(0.0, 1.0, math.pi) == pytest.approx((0.0, -1.0), abs=1e-12)
