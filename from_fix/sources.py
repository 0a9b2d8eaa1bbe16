from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

from common.logging_setup import get_logger
from common.types import GeodeticFix, HeadingSample
from common.utils import normalize_ts


log = get_logger("from_fix.sources")


@dataclass
class StaticOffsetEvent:
    parent: str
    child: str
    translation: tuple[float, float, float]


Event = Union[GeodeticFix, HeadingSample, StaticOffsetEvent]


def fix_from_dict(j: Dict[str, Any]) -> GeodeticFix:
    """
    Build a GeodeticFix from a JSON row.
    Expects keys: lat, lon; optional ts, alt_m, position_covariance, frame_id.
    """
    return GeodeticFix(
        ts=normalize_ts(j.get("ts")),
        lat=float(j["lat"]),
        lon=float(j["lon"]),
        alt_m=float(j.get("alt_m", 0.0) or 0.0),
        position_covariance=j.get("position_covariance", [0.0, 0.0, 0.0]),
        frame_id=str(j.get("frame_id", "gps")),
    )


def heading_from_dict(j: Dict[str, Any]) -> HeadingSample:
    """Orientation row: either `orientation` [x, y, z, w] or a bare `yaw` (rad)."""
    ts = normalize_ts(j.get("ts"))
    if "orientation" in j:
        return HeadingSample.from_quaternion(ts, j["orientation"])
    return HeadingSample(ts=ts, yaw=float(j["yaw"]))


def static_offset_from_dict(j: Dict[str, Any]) -> StaticOffsetEvent:
    t = j["translation"]
    return StaticOffsetEvent(
        parent=str(j["parent"]),
        child=str(j["child"]),
        translation=(float(t[0]), float(t[1]), float(t[2])),
    )


_PARSERS = {
    "fix": fix_from_dict,
    "imu": heading_from_dict,
    "heading": heading_from_dict,
    "tf_static": static_offset_from_dict,
}


def parse_event(line: str) -> Optional[Event]:
    """Parse one JSONL record; malformed records are logged and return None."""
    line = line.strip()
    if not line:
        return None
    try:
        j = json.loads(line)
        parser = _PARSERS[j.get("type", "fix")]
        return parser(j)
    except (ValueError, KeyError, TypeError, IndexError) as e:
        log.warning("Skipping malformed event", extra={"extra": {"error": str(e), "line": line[:200]}})
        return None


def read_events(path: str, follow: bool = False, poll_s: float = 0.1) -> Iterator[Event]:
    """
    Yield events from a JSONL file in order.

    With follow=True keep tailing the file for new rows (like a live
    subscription); otherwise stop at end of file.
    """
    p = Path(path)
    last_pos = 0
    while True:
        if not p.exists():
            if not follow:
                raise FileNotFoundError(f"Event file not found: {path}")
            time.sleep(poll_s)
            continue
        with p.open("r") as f:
            f.seek(last_pos)
            while True:
                line = f.readline()
                if not line:
                    break
                last_pos = f.tell()
                ev = parse_event(line)
                if ev is not None:
                    yield ev
        if not follow:
            return
        time.sleep(poll_s)
