from __future__ import annotations

"""
from_fix service: replay (or tail) a JSONL event stream through the pipeline.

Input rows (one JSON object per line):
  {"type": "fix", "ts": "...", "lat": 45.0, "lon": -75.0, "alt_m": 100.0,
   "position_covariance": [0.25, 0.25, 1.0]}
  {"type": "imu", "ts": "...", "orientation": [x, y, z, w]}
  {"type": "tf_static", "parent": "base_link", "child": "gps", "translation": [x, y, z]}

Examples:
  # Batch replay
  python -m from_fix.service --config config/params.yaml \
      --events logs/events.jsonl --out logs/enu.jsonl

  # Live tail, forwarding poses to PX4 SITL
  python -m from_fix.service --events logs/events.jsonl --follow \
      --px4 udpout:127.0.0.1:14540
"""

import argparse
import json
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from common.logging_setup import get_logger, setup_logging
from common.types import CorrectedPose, GeodeticFix, HeadingSample
from from_fix.config import FromFixConfig, load_params
from from_fix.datum import DatumAnnouncer
from from_fix.lever_arm import FrameOffsetBuffer
from from_fix.pipeline import FromFixPipeline
from from_fix.sources import Event, StaticOffsetEvent, read_events


log = get_logger("from_fix.service")


def _write_jsonl_row(path: Path, row: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", buffering=1) as f:
        f.write(json.dumps(row) + "\n")


def jsonl_pose_sink(path: str) -> Callable[[CorrectedPose], None]:
    p = Path(path)

    def sink(pose: CorrectedPose) -> None:
        _write_jsonl_row(p, pose.to_dict())
    return sink


def fan_out(*sinks: Optional[Callable[[CorrectedPose], None]]) -> Callable[[CorrectedPose], None]:
    active = [s for s in sinks if s is not None]

    def publish(pose: CorrectedPose) -> None:
        for s in active:
            s(pose)
    return publish


def run(
    events: Iterable[Event],
    pipeline: FromFixPipeline,
    offsets: FrameOffsetBuffer,
) -> int:
    """
    Dispatch each event to its callback, in arrival order.
    Poses go to the pipeline's sinks; returns how many were emitted.
    """
    emitted = 0
    for ev in events:
        if isinstance(ev, GeodeticFix):
            if pipeline.handle_fix(ev) is not None:
                emitted += 1
        elif isinstance(ev, HeadingSample):
            pipeline.handle_heading(ev)
        elif isinstance(ev, StaticOffsetEvent):
            offsets.set_offset(ev.parent, ev.child, ev.translation)
    return emitted


def build_pipeline(
    cfg: FromFixConfig,
    out_path: Optional[str],
    datum_path: Optional[str],
    px4_sink: Optional[Callable[[CorrectedPose], None]] = None,
) -> tuple[FromFixPipeline, FrameOffsetBuffer, DatumAnnouncer]:
    offsets = FrameOffsetBuffer(cfg.static_transforms)
    announcer = DatumAnnouncer(datum_path)
    pipeline = FromFixPipeline(
        cfg,
        offsets,
        on_pose=fan_out(jsonl_pose_sink(out_path) if out_path else None, px4_sink),
        on_datum=announcer,
    )
    return pipeline, offsets, announcer


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="from_fix - GNSS fix to ENU pose")
    ap.add_argument("--config", default="config/params.yaml")
    ap.add_argument("--events", required=True, help="JSONL event file (fix / imu / tf_static rows)")
    ap.add_argument("--out", default="logs/enu.jsonl", help="JSONL file to append poses to")
    ap.add_argument("--datum-file", default="logs/enu_datum.json", help="Retained datum output")
    ap.add_argument("--follow", action="store_true", help="Keep tailing the event file")
    ap.add_argument("--px4", default=None, help="Also forward poses to this MAVLink URL")
    args = ap.parse_args(argv)

    P = load_params(args.config)
    setup_logging(P.get("logging", {}).get("level"), force=True)
    cfg = FromFixConfig.from_dict(P.get("from_fix"))

    px4_sink = None
    if args.px4:
        from from_fix.mavlink_out import open_px4_connection, send_pose_vision_estimate

        log.info("Connecting MAVLink", extra={"extra": {"url": args.px4}})
        m = open_px4_connection(args.px4)
        px4_sink = lambda pose: send_pose_vision_estimate(m, pose)  # noqa: E731

    pipeline, offsets, _ = build_pipeline(cfg, args.out, args.datum_file, px4_sink)
    log.info(
        "from_fix started",
        extra={"extra": {
            "events": args.events,
            "output_frame_id": cfg.output_frame_id,
            "robot_frame_id": cfg.robot_frame_id,
            "sensor_frame_id": cfg.sensor_frame_id,
        }},
    )
    try:
        run(read_events(args.events, follow=args.follow), pipeline, offsets)
    except KeyboardInterrupt:
        pass
    finally:
        log.info("from_fix finished", extra={"extra": dict(pipeline.stats)})


if __name__ == "__main__":
    main()
