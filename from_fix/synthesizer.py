from __future__ import annotations

from typing import Tuple

import numpy as np

from common.geo import rotate_xy
from common.types import CorrectedPose, GeodeticFix, IDENTITY_QUATERNION, LeverArm, LocalPoint
from from_fix.config import FromFixConfig


def rotate_offset(offset: Tuple[float, float, float], yaw: float) -> Tuple[float, float, float]:
    """Rotate the horizontal part of a body-fixed offset by yaw (rad); z is untouched."""
    dx, dy = rotate_xy(offset[0], offset[1], yaw)
    return (dx, dy, float(offset[2]))


def pose_covariance(fix: GeodeticFix, config: FromFixConfig) -> np.ndarray:
    """
    6x6 covariance over (x, y, z, roll, pitch, yaw).

    Only the diagonal is populated; the axes are treated as independent.
    Orientation terms carry the invalid marker since a fix has no attitude.
    """
    cov = np.zeros((6, 6), dtype=float)
    vx, vy, vz = fix.variances
    cov[0, 0] = vx * config.scale_covariance
    cov[1, 1] = vy * config.scale_covariance
    cov[2, 2] = vz * config.scale_covariance
    cov[3, 3] = config.invalid_covariance_value
    cov[4, 4] = config.invalid_covariance_value
    cov[5, 5] = config.invalid_covariance_value
    return cov


def synthesize(
    local_point: LocalPoint,
    lever_arm: LeverArm,
    heading_yaw: float,
    fix: GeodeticFix,
    config: FromFixConfig,
) -> CorrectedPose:
    """
    Move the sensor position to the body origin and attach covariance.

    `local_point` is where the antenna is in the ENU frame. The lever arm is
    fixed in body coordinates, so it is rotated by the current heading before
    being added.
    """
    dx, dy, dz = rotate_offset(lever_arm.translation, heading_yaw)
    x = local_point.x + dx
    y = local_point.y + dy
    z = config.lock_altitude if config.altitude_locked else local_point.z + dz

    return CorrectedPose(
        ts=fix.ts,
        frame_id=config.output_frame_id,
        child_frame_id=config.robot_frame_id,
        position=(x, y, z),
        orientation=IDENTITY_QUATERNION,
        covariance=pose_covariance(fix, config),
    )
