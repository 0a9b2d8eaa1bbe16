from __future__ import annotations

import math
from typing import Callable, Optional

from common.logging_setup import get_logger
from common.types import CorrectedPose, GeodeticFix, HeadingSample
from common.utils import age_s
from from_fix.config import FromFixConfig
from from_fix.datum import DatumCallback, ensure_datum
from from_fix.enu import fix_to_point
from from_fix.lever_arm import FrameOffsetLookup, resolve_lever_arm
from from_fix.state import Session
from from_fix.synthesizer import synthesize


log = get_logger("from_fix.pipeline")

PoseCallback = Callable[[CorrectedPose], None]


class FromFixPipeline:
    """
    Fix -> ENU pose pipeline for one receiver.

    Feed it with handle_heading() and handle_fix(); each call runs to
    completion. A fix that cannot be corrected yet (no lever arm, no heading)
    is dropped and counted, never raised.
    """

    def __init__(
        self,
        config: FromFixConfig,
        lookup: FrameOffsetLookup,
        on_pose: Optional[PoseCallback] = None,
        on_datum: Optional[DatumCallback] = None,
    ):
        self.config = config
        self.lookup = lookup
        self.on_pose = on_pose
        self.on_datum = on_datum
        self.session = Session()

    @property
    def stats(self):
        return self.session.stats

    def handle_heading(self, sample: HeadingSample) -> None:
        self.session.heading.update(sample)

    def _current_yaw(self, fix: GeodeticFix) -> Optional[float]:
        sample = self.session.heading.latest
        if sample is None:
            log.error("No heading data, skipping fix", extra={"extra": {"ts": fix.ts}})
            self.session.stats["dropped_no_heading"] += 1
            return None
        max_age = self.config.heading_max_age_s
        if max_age is not None:
            try:
                age = age_s(sample.ts, fix.ts)
            except ValueError as e:
                log.warning(
                    "Unreadable stamp, cannot check heading age, skipping fix",
                    extra={"extra": {"ts": repr(fix.ts), "heading_ts": repr(sample.ts), "error": str(e)}},
                )
                self.session.stats["dropped_bad_stamp"] += 1
                return None
            if age > max_age:
                log.warning(
                    "Heading sample too old, skipping fix",
                    extra={"extra": {"ts": fix.ts, "heading_ts": sample.ts, "age_s": age}},
                )
                self.session.stats["dropped_stale_heading"] += 1
                return None
        return sample.yaw

    def handle_fix(self, fix: GeodeticFix) -> Optional[CorrectedPose]:
        cfg = self.config
        self.session.stats["fixes"] += 1

        datum = ensure_datum(self.session, fix, cfg, self.on_datum)
        point = fix_to_point(fix, datum)

        lever_arm = resolve_lever_arm(
            self.session, self.lookup, cfg.robot_frame_id, cfg.sensor_frame_id, cfg.tf_timeout_s
        )
        if lever_arm is None:
            self.session.stats["dropped_lever_arm"] += 1
            return None

        yaw = self._current_yaw(fix)
        if yaw is None:
            return None

        log.debug(
            "Lever arm correction",
            extra={"extra": {"offset": list(lever_arm.translation), "heading_deg": math.degrees(yaw)}},
        )
        pose = synthesize(point, lever_arm, yaw, fix, cfg)
        self.session.stats["poses"] += 1
        if self.on_pose is not None:
            self.on_pose(pose)
        return pose
