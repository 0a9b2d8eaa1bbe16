from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def iso_now_ms() -> str:
    """UTC ISO-8601 timestamp with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso8601(ts: str) -> datetime:
    """Parse a strict ISO-8601 timestamp with optional 'Z'. Naive values are taken as UTC."""
    if not isinstance(ts, str):
        raise ValueError(f"timestamp must be an ISO-8601 string, got {type(ts).__name__}")
    if ts.endswith("Z"):
        ts = ts[:-1] + "+00:00"
    dt = datetime.fromisoformat(ts)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def normalize_ts(ts: Any) -> str:
    """
    Stamp from a transport row as ISO-8601 UTC.
    Accepts ISO strings (validated, returned unchanged) or epoch seconds.
    Missing stamps get the current time; anything else raises ValueError.
    """
    if ts is None or ts == "":
        return iso_now_ms()
    if isinstance(ts, bool):
        raise ValueError("timestamp must not be a boolean")
    if isinstance(ts, (int, float)):
        try:
            dt = datetime.fromtimestamp(float(ts), tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"epoch stamp out of range: {ts!r}") from e
        return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    parse_iso8601(ts)
    return ts


def age_s(ts: str, now_ts: str) -> float:
    """Seconds elapsed from `ts` to `now_ts` (negative if `ts` is later)."""
    return (parse_iso8601(now_ts) - parse_iso8601(ts)).total_seconds()
