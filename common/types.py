from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Any, Dict, Sequence
import numpy as np

from common.geo import yaw_from_quaternion


IsoTime = str

IDENTITY_QUATERNION: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)


def _as_float_tuple(x: Sequence[float]) -> Tuple[float, float, float]:
    return (float(x[0]), float(x[1]), float(x[2]))


def _as_covariance_3x3(c: Any) -> np.ndarray:
    """Accept 3 per-axis variances, a 9-element row-major list, or a 3x3 array."""
    a = np.asarray(c, dtype=float)
    if a.shape == (3,):
        return np.diag(a)
    if a.shape == (9,):
        return a.reshape(3, 3)
    if a.shape == (3, 3):
        return a.copy()
    raise ValueError("position_covariance must have 3, 9 or 3x3 elements")


@dataclass(slots=True)
class GeodeticFix:
    """
    Single position fix from a GNSS receiver.

    Attributes:
        ts: ISO-8601 (UTC) timestamp of the measurement.
        lat, lon: WGS84 degrees.
        alt_m: ellipsoidal altitude (meters).
        position_covariance: 3x3 covariance (m^2) in E/N/U.
        frame_id: frame the receiver reports the fix in (antenna mount).
    """
    ts: IsoTime
    lat: float
    lon: float
    alt_m: float
    position_covariance: np.ndarray = field(repr=False)
    frame_id: str = "gps"

    def __post_init__(self) -> None:
        if not (-90.0 <= self.lat <= 90.0) or not (-180.0 <= self.lon <= 180.0):
            raise ValueError("lat/lon out of range")
        self.lat = float(self.lat)
        self.lon = float(self.lon)
        self.alt_m = float(self.alt_m)
        self.position_covariance = _as_covariance_3x3(self.position_covariance)

    @property
    def lla(self) -> Tuple[float, float, float]:
        return (self.lat, self.lon, self.alt_m)

    @property
    def variances(self) -> Tuple[float, float, float]:
        d = np.diag(self.position_covariance)
        return (float(d[0]), float(d[1]), float(d[2]))


@dataclass(frozen=True, slots=True)
class Datum:
    """Geodetic origin of the local ENU frame."""
    lat: float
    lon: float
    alt_m: float

    @classmethod
    def from_fix(cls, fix: GeodeticFix) -> "Datum":
        return cls(lat=fix.lat, lon=fix.lon, alt_m=fix.alt_m)

    @property
    def lla(self) -> Tuple[float, float, float]:
        return (self.lat, self.lon, self.alt_m)

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lon": self.lon, "alt_m": self.alt_m}


@dataclass(frozen=True, slots=True)
class LocalPoint:
    """ENU position (meters) relative to a Datum."""
    x: float
    y: float
    z: float

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)


@dataclass(frozen=True, slots=True)
class LeverArm:
    """Translation (m) of the sensor frame origin expressed in the body frame."""
    translation: Tuple[float, float, float]

    def __post_init__(self) -> None:
        object.__setattr__(self, "translation", _as_float_tuple(self.translation))


@dataclass(slots=True)
class HeadingSample:
    """
    Latest orientation estimate reduced to yaw.

    Attributes:
        ts: ISO-8601 (UTC) timestamp of the orientation estimate.
        yaw: rad, right-hand rule about the vertical axis.
        orientation: optional source quaternion (x, y, z, w).
    """
    ts: IsoTime
    yaw: float
    orientation: Optional[Tuple[float, float, float, float]] = None

    @classmethod
    def from_quaternion(cls, ts: IsoTime, q: Sequence[float]) -> "HeadingSample":
        if len(q) != 4:
            raise ValueError("orientation must be (x, y, z, w)")
        quat = (float(q[0]), float(q[1]), float(q[2]), float(q[3]))
        return cls(ts=ts, yaw=yaw_from_quaternion(quat), orientation=quat)


@dataclass(slots=True)
class CorrectedPose:
    """
    Body-frame pose in the local ENU frame, ready for a fusion node.

    covariance is 6x6 over (x, y, z, roll, pitch, yaw).
    """
    ts: IsoTime
    frame_id: str
    child_frame_id: str
    position: Tuple[float, float, float]
    covariance: np.ndarray = field(repr=False)
    orientation: Tuple[float, float, float, float] = IDENTITY_QUATERNION

    def __post_init__(self) -> None:
        self.position = _as_float_tuple(self.position)
        self.covariance = np.asarray(self.covariance, dtype=float)
        if self.covariance.shape != (6, 6):
            raise ValueError("covariance must be 6x6")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ts": self.ts,
            "frame_id": self.frame_id,
            "child_frame_id": self.child_frame_id,
            "position": list(self.position),
            "orientation": list(self.orientation),
            "covariance": self.covariance.flatten().tolist(),
        }
