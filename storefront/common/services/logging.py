"""Structured event lines: one JSON object per line on stdout."""

import json
import logging
import sys
from datetime import datetime, timezone

_threshold = logging.INFO


def _level_number(level: str) -> int:
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def set_event_level(level: str) -> None:
    """Drop events below `level` (a stdlib level name such as "WARNING")."""
    global _threshold
    _threshold = _level_number(level)


def log_event(level: str, event: str, **fields) -> None:
    if _level_number(level) < _threshold:
        return
    payload = {
        "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "level": level.lower(),
        "event": event,
    }
    payload.update({k: v for k, v in fields.items() if v is not None})
    try:
        sys.stdout.write(json.dumps(payload, ensure_ascii=False, default=str) + "\n")
    except (OSError, ValueError):
        # stdout closed or unwritable; events are best effort
        pass
