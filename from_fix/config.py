from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from common.types import Datum


# -1 is the ROS convention for "do not use this axis"; robot_pose_ekf uses 1e6.
INVALID_COVARIANCE_DEFAULT = -1.0
# lock_altitude value meaning "pass the projected altitude through".
ALTITUDE_UNLOCKED = -1.0


@dataclass
class StaticTransform:
    parent: str
    child: str
    translation: tuple[float, float, float]

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StaticTransform":
        t = d.get("translation", (0.0, 0.0, 0.0))
        if len(t) != 3:
            raise ValueError("static transform translation must be [x, y, z]")
        return cls(
            parent=str(d["parent"]),
            child=str(d["child"]),
            translation=(float(t[0]), float(t[1]), float(t[2])),
        )


@dataclass
class FromFixConfig:
    """
    Node parameters, read once at startup.

    Datum fields are only honoured when all three are present; otherwise the
    first fix becomes the datum.
    """
    output_frame_id: str = "odom"
    robot_frame_id: str = "base_link"
    sensor_frame_id: str = "gps"
    invalid_covariance_value: float = INVALID_COVARIANCE_DEFAULT
    scale_covariance: float = 1.0
    lock_altitude: float = ALTITUDE_UNLOCKED
    datum_latitude: Optional[float] = None
    datum_longitude: Optional[float] = None
    datum_altitude: Optional[float] = None
    tf_timeout_s: float = 1.0
    heading_max_age_s: Optional[float] = None
    static_transforms: List[StaticTransform] = field(default_factory=list)

    @property
    def altitude_locked(self) -> bool:
        return self.lock_altitude != ALTITUDE_UNLOCKED

    @property
    def configured_datum(self) -> Optional[Datum]:
        if None in (self.datum_latitude, self.datum_longitude, self.datum_altitude):
            return None
        return Datum(
            lat=float(self.datum_latitude),
            lon=float(self.datum_longitude),
            alt_m=float(self.datum_altitude),
        )

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "FromFixConfig":
        d = d or {}

        def _opt_float(key: str) -> Optional[float]:
            v = d.get(key)
            return None if v is None else float(v)

        return cls(
            output_frame_id=str(d.get("output_frame_id", "odom")),
            robot_frame_id=str(d.get("robot_frame_id", "base_link")),
            sensor_frame_id=str(d.get("sensor_frame_id", "gps")),
            invalid_covariance_value=float(d.get("invalid_covariance_value", INVALID_COVARIANCE_DEFAULT)),
            scale_covariance=float(d.get("scale_covariance", 1.0)),
            lock_altitude=float(d.get("lock_altitude", ALTITUDE_UNLOCKED)),
            datum_latitude=_opt_float("datum_latitude"),
            datum_longitude=_opt_float("datum_longitude"),
            datum_altitude=_opt_float("datum_altitude"),
            tf_timeout_s=float(d.get("tf_timeout_s", 1.0)),
            heading_max_age_s=_opt_float("heading_max_age_s"),
            static_transforms=[StaticTransform.from_dict(t) for t in d.get("static_transforms") or []],
        )


def _load_yaml(path: str) -> Dict:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_params(path: str = "config/params.yaml") -> Dict:
    """Whole params file, or an empty dict if it does not exist."""
    if not Path(path).exists():
        return {}
    return _load_yaml(path)


def load_config(path: str = "config/params.yaml") -> FromFixConfig:
    return FromFixConfig.from_dict(load_params(path).get("from_fix"))
