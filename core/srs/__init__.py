"""
SRS - Spaced Repetition Scheduler

Main API for word scheduling.

Quick start:
    from core import srs

    # Apply a recall judgment (algorithm only, no DB calls)
    word = srs.advance(word, srs.Judgment.MASTERED, now)

    # Words due now, in session order
    queue = srs.due_words(words, now)
"""

# Core scheduler API (algorithm logic)
from core.srs.scheduler import (
    advance,
    derive_status,
    next_review_at,
    process_review,
    round_half_up,
)

# Due list
from core.srs.due_list import count_due, due_words

# Constants and parameters
from core.srs.constants import (
    Judgment,
    WordStatus,
    MIN_EASE_FACTOR,
    INITIAL_EASE_FACTOR,
    EASE_STEP,
    MASTERED_INTERVAL_DAYS,
    DAY_MS,
    PENALTY_STREAK_TARGET,
)


__all__ = [
    # Core algorithm
    "advance",
    "derive_status",
    "next_review_at",
    "process_review",
    "round_half_up",

    # Due list
    "due_words",
    "count_due",

    # Enums
    "Judgment",
    "WordStatus",

    # Parameters
    "MIN_EASE_FACTOR",
    "INITIAL_EASE_FACTOR",
    "EASE_STEP",
    "MASTERED_INTERVAL_DAYS",
    "DAY_MS",
    "PENALTY_STREAK_TARGET",
]
