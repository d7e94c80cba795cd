"""Clock helpers shared by the API and the client."""

from __future__ import annotations

import time
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """Wall-clock time as integer milliseconds since the epoch."""
    return int(time.time() * 1000)


__all__ = ["now_ms", "utcnow"]
