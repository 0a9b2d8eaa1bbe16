"""
from_fix - GNSS fix to local ENU pose

Provides:
- Datum latching (configured or first fix) with a retained announcement
- WGS84 fix -> ENU projection (fix_to_point), also served over HTTP (server.py)
- Lever-arm correction from a static sensor->body offset and live heading
- 6x6 pose covariance with scaled position terms and invalid attitude terms
- A JSONL replay/tail service (service.py) with optional MAVLink forwarding

Usage examples:
    from from_fix.pipeline import FromFixPipeline
    from from_fix.lever_arm import FrameOffsetBuffer
"""
from .enu import fix_to_point
from .pipeline import FromFixPipeline

__all__ = ["fix_to_point", "FromFixPipeline"]
