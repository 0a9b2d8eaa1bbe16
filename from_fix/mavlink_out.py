from __future__ import annotations

import time
from typing import List, Optional

import numpy as np
from pymavlink import mavutil

from common.types import CorrectedPose

# ENU (x=E, y=N, z=U) -> NED (x=N, y=E, z=D) for both position and the
# roll/pitch/yaw block of the covariance.
_ENU_TO_NED = np.array([[0, 1, 0], [1, 0, 0], [0, 0, -1]], dtype=float)
_ENU_TO_NED_6 = np.block([
    [_ENU_TO_NED, np.zeros((3, 3))],
    [np.zeros((3, 3)), _ENU_TO_NED],
])

# ---------------------------
# Connection helpers
# ---------------------------

def open_px4_connection(px4_url: str, timeout_s: float = 10.0) -> mavutil.mavfile:
    """
    Open MAVLink connection to PX4 and wait for heartbeat.
    px4_url examples:
      - "udpout:127.0.0.1:14540" (PX4 SITL default)
      - "udp:0.0.0.0:14550"
      - "serial:/dev/ttyACM0:57600"
    """
    m = mavutil.mavlink_connection(px4_url)
    m.wait_heartbeat(timeout=timeout_s)
    return m


# ---------------------------
# Conversions
# ---------------------------

def enu_to_ned(position) -> np.ndarray:
    return _ENU_TO_NED @ np.asarray(position, dtype=float).reshape(3)


def covariance_enu_to_ned(cov: np.ndarray) -> np.ndarray:
    """Permute a 6x6 (pos, rpy) covariance from ENU to NED axes.

    Axis sign flips do not change variances, and the invalid-marker diagonal
    terms are carried over as-is."""
    cov = np.asarray(cov, dtype=float)
    if cov.shape != (6, 6):
        raise ValueError("cov must be 6x6")
    return _ENU_TO_NED_6 @ cov @ _ENU_TO_NED_6.T


def upper_triangle(cov: np.ndarray) -> List[float]:
    """Row-major upper-right triangle (21 values) as MAVLink expects."""
    iu = np.triu_indices(6)
    return cov[iu].astype(np.float32).tolist()


# ---------------------------
# Message senders
# ---------------------------

def send_pose_vision_estimate(
    m: mavutil.mavfile,
    pose: CorrectedPose,
    ts_usec: Optional[int] = None,
) -> None:
    """
    Send a CorrectedPose as VISION_POSITION_ESTIMATE in PX4's local NED frame.
    Attitude is zero: the pose has none, and its covariance marks it invalid.
    """
    if ts_usec is None:
        ts_usec = int(time.time() * 1e6)
    x, y, z = (float(v) for v in enu_to_ned(pose.position))
    cov = covariance_enu_to_ned(pose.covariance)

    m.mav.vision_position_estimate_send(
        ts_usec,
        x, y, z,
        0.0, 0.0, 0.0,
        upper_triangle(cov),
    )
