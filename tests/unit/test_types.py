"""
Unit tests for message dataclasses
"""

import math
import os
import sys

import numpy as np
import pytest

project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.append(project_root)

from common.types import CorrectedPose, Datum, GeodeticFix, HeadingSample, LeverArm


class TestGeodeticFix:
    """Test cases for GeodeticFix"""

    def test_per_axis_variances(self):
        """Three variances become a diagonal 3x3"""
        fix = GeodeticFix(ts="2024-01-01T00:00:00Z", lat=45.0, lon=-75.0, alt_m=100.0,
                          position_covariance=[1.0, 2.0, 3.0])
        assert fix.position_covariance.shape == (3, 3)
        assert fix.variances == (1.0, 2.0, 3.0)
        assert fix.frame_id == "gps"

    def test_row_major_covariance(self):
        """NavSatFix-style 9-element covariance is reshaped"""
        fix = GeodeticFix(ts="t", lat=0.0, lon=0.0, alt_m=0.0,
                          position_covariance=[4.0, 0, 0, 0, 5.0, 0, 0, 0, 6.0])
        assert fix.variances == (4.0, 5.0, 6.0)

    def test_out_of_range(self):
        with pytest.raises(ValueError, match="lat/lon out of range"):
            GeodeticFix(ts="t", lat=91.0, lon=0.0, alt_m=0.0, position_covariance=[0, 0, 0])

    def test_bad_covariance_shape(self):
        with pytest.raises(ValueError):
            GeodeticFix(ts="t", lat=0.0, lon=0.0, alt_m=0.0, position_covariance=[1.0, 2.0])


class TestDatum:
    """Test cases for Datum"""

    def test_from_fix(self, make_fix):
        d = Datum.from_fix(make_fix(lat=10.0, lon=20.0, alt_m=30.0))
        assert d == Datum(10.0, 20.0, 30.0)
        assert d.to_dict() == {"lat": 10.0, "lon": 20.0, "alt_m": 30.0}

    def test_frozen(self):
        d = Datum(1.0, 2.0, 3.0)
        with pytest.raises(Exception):
            d.lat = 5.0


class TestHeadingAndPose:
    """Test cases for HeadingSample, LeverArm and CorrectedPose"""

    def test_heading_from_quaternion(self):
        q = (0.0, 0.0, math.sin(math.pi / 4), math.cos(math.pi / 4))
        h = HeadingSample.from_quaternion("t", q)
        assert h.yaw == pytest.approx(math.pi / 2)
        assert h.orientation == pytest.approx(q)

    def test_heading_requires_four_components(self):
        with pytest.raises(ValueError):
            HeadingSample.from_quaternion("t", (0.0, 0.0, 1.0))

    def test_lever_arm_floats(self):
        assert LeverArm((1, 2, 3)).translation == (1.0, 2.0, 3.0)

    def test_pose_to_dict(self):
        pose = CorrectedPose(ts="t", frame_id="odom", child_frame_id="base_link",
                             position=(1, 2, 3), covariance=np.eye(6))
        d = pose.to_dict()
        assert d["orientation"] == [0.0, 0.0, 0.0, 1.0]
        assert d["position"] == [1.0, 2.0, 3.0]
        assert len(d["covariance"]) == 36

    def test_pose_covariance_shape(self):
        with pytest.raises(ValueError, match="6x6"):
            CorrectedPose(ts="t", frame_id="odom", child_frame_id="base_link",
                          position=(0, 0, 0), covariance=np.eye(3))
