from __future__ import annotations

from typing import Sequence, Tuple
import math
import numpy as np


# --- WGS84 constants ---
_WGS84_A = 6378137.0              # semi-major axis (m)
_WGS84_F = 1.0 / 298.257223563    # flattening
_WGS84_E2 = _WGS84_F * (2.0 - _WGS84_F)  # first eccentricity squared


# -------------------------
# LLA <-> ECEF <-> ENU
# -------------------------
def lla_to_ecef(lat: float, lon: float, alt_m: float) -> np.ndarray:
    """WGS84 geodetic to ECEF (x,y,z) meters."""
    phi = math.radians(lat)
    lam = math.radians(lon)
    sinp = math.sin(phi)
    cosp = math.cos(phi)
    N = _WGS84_A / math.sqrt(1.0 - _WGS84_E2 * sinp * sinp)
    x = (N + alt_m) * cosp * math.cos(lam)
    y = (N + alt_m) * cosp * math.sin(lam)
    z = (N * (1.0 - _WGS84_E2) + alt_m) * sinp
    return np.array([x, y, z], dtype=float)


def enu_rotation(ref_lat_deg: float, ref_lon_deg: float) -> np.ndarray:
    """
    Rotation matrix R_e2enu that maps ECEF vectors into local ENU at ref (lat, lon).
    """
    lat = math.radians(ref_lat_deg)
    lon = math.radians(ref_lon_deg)
    sL, cL = math.sin(lat), math.cos(lat)
    sO, cO = math.sin(lon), math.cos(lon)
    return np.array(
        [
            [-sO, cO, 0],
            [-sL * cO, -sL * sO, cL],
            [cL * cO, cL * sO, sL],
        ],
        dtype=float,
    )


def lla_to_enu(
    lla: Tuple[float, float, float],
    ref_lla: Tuple[float, float, float],
) -> np.ndarray:
    """
    Convert LLA to local ENU (meters) around reference LLA.

    Goes through ECEF so it stays valid away from the reference point, unlike
    flat-earth meters-per-degree scaling.
    """
    x = lla_to_ecef(*lla)
    x0 = lla_to_ecef(*ref_lla)
    R = enu_rotation(ref_lla[0], ref_lla[1])
    return R @ (x - x0)


# -------------------------
# Orientation helpers
# -------------------------
def yaw_from_quaternion(q: Sequence[float]) -> float:
    """
    Yaw (rad, about +Z) of a quaternion given as (x, y, z, w).

    Same angle as the Z component of a ZYX roll/pitch/yaw decomposition.
    """
    x, y, z, w = (float(v) for v in q)
    siny_cosp = 2.0 * (w * z + x * y)
    cosy_cosp = 1.0 - 2.0 * (y * y + z * z)
    return math.atan2(siny_cosp, cosy_cosp)


def rotate_xy(x: float, y: float, yaw: float) -> Tuple[float, float]:
    """Rotate a planar vector counter-clockwise by yaw (rad)."""
    c, s = math.cos(yaw), math.sin(yaw)
    return (x * c - y * s, x * s + y * c)
