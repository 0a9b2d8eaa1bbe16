from __future__ import annotations

import logging
import os
import sys
import json
import time
from typing import Optional


class JsonFormatter(logging.Formatter):
    """One JSON object per record; `extra={"extra": {...}}` lands under "extra"."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "t": int(time.time() * 1000),
            "lvl": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if hasattr(record, "extra") and isinstance(record.extra, dict):  # type: ignore[attr-defined]
            payload["extra"] = record.extra  # type: ignore[attr-defined]
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: Optional[str] = None, force: bool = False) -> None:
    """
    Configure the root logger with JSON output on stdout.

    Level comes from `level`, then LOG_LEVEL, then INFO. Later calls are
    no-ops unless `force` is set (the CLI re-applies the params.yaml level).
    """
    root = logging.getLogger()
    if getattr(root, "_from_fix_configured", False) and not force:
        return

    lvl = getattr(logging, (level or os.environ.get("LOG_LEVEL") or "INFO").upper(), None)
    if not isinstance(lvl, int):
        lvl = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(lvl)
    root._from_fix_configured = True  # type: ignore[attr-defined]


def get_logger(name: str) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
