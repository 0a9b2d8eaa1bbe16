from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Optional

from common.logging_setup import get_logger
from common.types import Datum, GeodeticFix
from from_fix.config import FromFixConfig
from from_fix.state import Session


log = get_logger("from_fix.datum")

DatumCallback = Callable[[Datum], None]


class DatumAnnouncer:
    """
    Retained datum output: remembers the announced datum and, if a path is
    given, writes it to a JSON file so consumers that start later can read it.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else None
        self.latest: Optional[Datum] = None

    def __call__(self, datum: Datum) -> None:
        self.latest = datum
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(datum.to_dict()) + "\n")


def ensure_datum(
    session: Session,
    fix: GeodeticFix,
    config: FromFixConfig,
    announce: Optional[DatumCallback] = None,
) -> Datum:
    """
    Return the session datum, latching it on the first call.

    Local ENU coordinates are with respect to a plane tangent at a particular
    lat/lon. A configured datum gives the same local frame across runs at one
    site; otherwise the first fix is used as an arbitrary but fixed origin.
    """
    if session.datum.is_set:
        return session.datum.value

    datum = config.configured_datum
    if datum is not None:
        log.info("Using datum provided by configuration", extra={"extra": datum.to_dict()})
    else:
        datum = Datum.from_fix(fix)
        log.info("Using initial position fix as datum", extra={"extra": datum.to_dict()})

    session.datum.set(datum)
    if announce is not None:
        announce(datum)
    return datum
