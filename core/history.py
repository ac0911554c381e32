"""
Study-history counters: calendar date -> judgments recorded that day.
"""

from __future__ import annotations

from core.clock import date_key

StudyHistory = dict[str, int]


def record_study(history: StudyHistory, now: int) -> StudyHistory:
    """Count one judgment against today's date (modifies in place)."""
    key = date_key(now)
    history[key] = history.get(key, 0) + 1
    return history
