from __future__ import annotations

from common.geo import lla_to_enu
from common.types import Datum, GeodeticFix, LocalPoint


def fix_to_point(fix: GeodeticFix, datum: Datum) -> LocalPoint:
    """
    Project a fix into the ENU tangent plane at `datum`.

    Stateless; safe to call outside the streaming pipeline.
    """
    e, n, u = lla_to_enu(fix.lla, datum.lla)
    return LocalPoint(x=float(e), y=float(n), z=float(u))
