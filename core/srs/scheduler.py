"""
Scheduler - Per-Word Interval and Ease Updates

Pure scheduling logic (no database calls).

Main workflow:
1. Caller looks up the word record
2. Apply the judgment to interval, ease factor and repetitions
3. Derive next review time and status
4. Return updated word (+ event data dict for the review log)

The rules are the product's own simplified SM-2 variant:

    Judgment    ease factor            repetitions   interval
    FORGOT      1.3                    0             0
    UNCERTAIN   max(1.3, EF - 0.1)     0             0 if 0 else interval * 0.5
    MASTERED    EF + 0.1               reps + 1      1 if 0 else round(interval * EF)

Halved intervals are not rounded, so a word can carry a fractional number of
days into a later MASTERED judgment.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple, Union

from core.clock import now_ms
from core.schemas import Word
from core.srs.constants import (
    DAY_MS,
    EASE_STEP,
    MASTERED_INTERVAL_DAYS,
    MIN_EASE_FACTOR,
    UNCERTAIN_INTERVAL_FACTOR,
    Judgment,
    WordStatus,
)

Interval = Union[int, float]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def derive_status(interval: Interval, repetitions: int) -> WordStatus:
    """
    Derive the coarse status from interval and repetitions.

    MASTERED once the interval reaches 21 days, LEARNING while there is an
    unbroken run of successful judgments, NEW otherwise.
    """
    if interval >= MASTERED_INTERVAL_DAYS:
        return WordStatus.MASTERED
    if repetitions > 0:
        return WordStatus.LEARNING
    return WordStatus.NEW


def next_review_at(interval: Interval, now: int) -> int:
    """
    Absolute due time for an interval measured in (possibly fractional) days.
    """
    if interval == 0:
        return now
    return now + round_half_up(interval * DAY_MS)


def _apply_judgment(
    interval: Interval,
    ease_factor: float,
    repetitions: int,
    judgment: Judgment
) -> Tuple[Interval, float, int]:
    """
    Apply one judgment to (interval, ease_factor, repetitions).

    The interval is computed first, from the ease factor the word had going
    into this judgment.
    """
    if judgment == Judgment.FORGOT:
        return 0, MIN_EASE_FACTOR, 0

    if judgment == Judgment.UNCERTAIN:
        new_interval = 0 if interval == 0 else interval * UNCERTAIN_INTERVAL_FACTOR
        return new_interval, max(MIN_EASE_FACTOR, ease_factor - EASE_STEP), 0

    if judgment == Judgment.MASTERED:
        new_interval = 1 if interval == 0 else round_half_up(interval * ease_factor)
        return new_interval, max(MIN_EASE_FACTOR, ease_factor + EASE_STEP), repetitions + 1

    raise ValueError(f"Unknown judgment: {judgment!r}")


def advance(
    word: Word,
    judgment: Judgment,
    now: Optional[int] = None
) -> Word:
    """
    Update a word's memory state after a recall judgment.

    The word is modified in place and returned. No side effects beyond that,
    so this can be called outside of any study session.

    Args:
        word: Word record to update
        judgment: FORGOT, UNCERTAIN or MASTERED
        now: Review timestamp in epoch ms (defaults to the current time)

    Returns:
        The same word, updated
    """
    if now is None:
        now = now_ms()

    interval, ease_factor, repetitions = _apply_judgment(
        word.interval,
        word.ease_factor,
        word.repetitions,
        Judgment(judgment)
    )

    word.interval = interval
    word.ease_factor = ease_factor
    word.repetitions = repetitions
    word.next_review = next_review_at(interval, now)
    word.status = derive_status(interval, repetitions)
    word.last_reviewed = now
    return word


def process_review(
    word: Word,
    judgment: Judgment,
    now: Optional[int] = None
) -> Tuple[Word, dict]:
    """
    Run `advance` and return the updated word + review event data.

    Caller is responsible for persisting both the word and the event.

    Returns:
        Tuple of (updated_word, event_data_dict)
        event_data_dict is ready to pass to store.batch_log_review_events()
    """
    if now is None:
        now = now_ms()

    interval_before = word.interval
    ease_before = word.ease_factor
    repetitions_before = word.repetitions

    advance(word, judgment, now)

    event_data = {
        "word_id": word.id,
        "term": word.term,
        "timestamp": now,
        "judgment": int(judgment),
        "interval_before": interval_before,
        "ease_factor_before": ease_before,
        "repetitions_before": repetitions_before,
        "interval_after": word.interval,
        "ease_factor_after": word.ease_factor,
        "repetitions_after": word.repetitions,
        "status_after": WordStatus(word.status).value,
        "session_id": None,  # Will be set by caller if needed
        "session_position": None,  # Will be set by caller if needed
    }

    return word, event_data
