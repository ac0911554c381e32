"""
Due-list ordering.

Decides which words are due and in what order a normal (non-cram) session
picks them up.
"""

from __future__ import annotations

from typing import Iterable

from core.schemas import Word


def _due_sort_key(word: Word) -> tuple[bool, int]:
    # Interval-0 words (new or just reset) first, then most overdue first
    return (word.interval != 0, word.next_review)


def due_words(all_words: Iterable[Word], now: int) -> list[Word]:
    """
    Filter words due at `now` and sort them by review priority.

    Priority order:
    1. Words with interval 0, regardless of timestamp
    2. Ascending next review time within each group

    Args:
        all_words: The word-record collection
        now: Current time in epoch ms

    Returns:
        Due words, highest priority first
    """
    due = [w for w in all_words if w.next_review <= now]
    due.sort(key=_due_sort_key)
    return due


def count_due(all_words: Iterable[Word], now: int) -> int:
    """Number of words due at `now`."""
    return sum(1 for w in all_words if w.next_review <= now)
