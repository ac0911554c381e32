"""
Clock helpers.

All scheduling timestamps are integer milliseconds since the Unix epoch, the
same unit the stored word records use.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def to_datetime(ms: int | float) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(ms / 1000.0, tz=timezone.utc)


def date_key(ms: int | float) -> str:
    """
    Calendar-date key (UTC, YYYY-MM-DD) used by the study history counters.
    """
    return to_datetime(ms).date().isoformat()
