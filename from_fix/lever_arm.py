from __future__ import annotations

import time
from typing import Dict, Iterable, Optional, Protocol, Tuple

from common.logging_setup import get_logger
from common.types import LeverArm
from from_fix.config import StaticTransform
from from_fix.state import Session


log = get_logger("from_fix.lever_arm")

Vec3 = Tuple[float, float, float]


class FrameLookupError(RuntimeError):
    """Offset between two frames is unknown or did not arrive in time."""


class FrameOffsetLookup(Protocol):
    def lookup(self, target: str, source: str, timeout_s: float) -> Vec3:
        """Translation of `source`'s origin expressed in `target`."""
        ...


class FrameOffsetBuffer:
    """
    Static frame offsets (translation only), keyed by (parent, child).

    Offsets arrive from configuration or `tf_static` events and never expire.
    A lookup answers the stored pair, its inverse (negated) and the identity
    pair. Otherwise it raises FrameLookupError.

    Waiting only helps when another thread registers offsets, so the poll up
    to `timeout_s` happens only with `threaded=True`. The single-threaded
    service feeds offsets between callbacks, where a wait could never succeed;
    there a miss fails at once and the next fix retries.
    """

    def __init__(
        self,
        transforms: Iterable[StaticTransform] = (),
        poll_s: float = 0.01,
        threaded: bool = False,
    ):
        self._offsets: Dict[Tuple[str, str], Vec3] = {}
        self.poll_s = poll_s
        self.threaded = threaded
        for t in transforms:
            self.set_offset(t.parent, t.child, t.translation)

    def set_offset(self, parent: str, child: str, translation: Iterable[float]) -> None:
        x, y, z = (float(v) for v in translation)
        self._offsets[(parent, child)] = (x, y, z)
        log.debug("Static offset registered", extra={"extra": {"parent": parent, "child": child, "t": [x, y, z]}})

    def _find(self, target: str, source: str) -> Optional[Vec3]:
        if target == source:
            return (0.0, 0.0, 0.0)
        t = self._offsets.get((target, source))
        if t is not None:
            return t
        inv = self._offsets.get((source, target))
        if inv is not None:
            return (-inv[0], -inv[1], -inv[2])
        return None

    def can_transform(self, target: str, source: str) -> bool:
        return self._find(target, source) is not None

    def lookup(self, target: str, source: str, timeout_s: float = 0.0) -> Vec3:
        t = self._find(target, source)
        if t is not None:
            return t
        if not self.threaded:
            raise FrameLookupError(f'"{target}" to "{source}": no offset available')
        deadline = time.monotonic() + max(0.0, timeout_s)
        while time.monotonic() < deadline:
            time.sleep(self.poll_s)
            t = self._find(target, source)
            if t is not None:
                return t
        raise FrameLookupError(
            f'"{target}" to "{source}": no offset available after {timeout_s:.2f}s'
        )


def resolve_lever_arm(
    session: Session,
    lookup: FrameOffsetLookup,
    body_frame: str,
    sensor_frame: str,
    timeout_s: float,
) -> Optional[LeverArm]:
    """
    Return the cached lever arm, or try once to resolve it.

    A failed lookup is logged and not cached; the caller drops the current
    fix and the next fix tries again.
    """
    if session.lever_arm.is_set:
        return session.lever_arm.value

    try:
        t = lookup.lookup(body_frame, sensor_frame, timeout_s)
    except FrameLookupError as e:
        log.error(str(e), extra={"extra": {"target": body_frame, "source": sensor_frame}})
        return None

    lever_arm = session.lever_arm.set(LeverArm(translation=t))
    log.info(
        "Lever arm resolved",
        extra={"extra": {"target": body_frame, "source": sensor_frame, "t": list(lever_arm.translation)}},
    )
    return lever_arm
