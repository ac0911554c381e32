"""
Metric computations for the overview dashboard and word stats.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

import pandas as pd

from core.analytics.constants import (
    EASY_EASE_ABOVE,
    HARD_EASE_BELOW,
    HEATMAP_DAYS,
    INTENSITY_GOAL_FRACTIONS,
)
from core.analytics.types import DifficultyBand
from core.history import StudyHistory
from core.schemas import Word, WordStatus
from core.srs.constants import DAY_MS


def history_series(history: StudyHistory) -> pd.Series:
    """
    Daily judgment counts as an int series indexed by calendar day.
    """
    if not history:
        return pd.Series(dtype="int64", index=pd.DatetimeIndex([]))
    series = pd.Series(history, dtype="int64")
    series.index = pd.to_datetime(series.index, format="%Y-%m-%d")
    return series.sort_index()


def today_count(history: StudyHistory, today: date) -> int:
    return int(history.get(today.isoformat(), 0))


def goal_progress_percent(count: int, daily_goal: int) -> float:
    """Share of the daily goal reached, capped at 100."""
    if daily_goal <= 0:
        return 100.0
    return min(100.0, count / daily_goal * 100.0)


def study_streak(history: StudyHistory, today: date) -> int:
    """
    Consecutive study days ending today.

    A day without judgments breaks the streak, except today itself: not
    having studied yet today does not reset yesterday's streak.
    """
    streak = 0
    day = today
    if history.get(day.isoformat(), 0) <= 0:
        day -= timedelta(days=1)
    while history.get(day.isoformat(), 0) > 0:
        streak += 1
        day -= timedelta(days=1)
    return streak


def intensity_for(count: int, daily_goal: int) -> int:
    """Heatmap intensity 0-4 for one day's count."""
    if count <= 0:
        return 0
    intensity = 1
    for level, fraction in enumerate(INTENSITY_GOAL_FRACTIONS, start=2):
        if count >= daily_goal * fraction:
            intensity = level
    return intensity


def build_heatmap(
    history: StudyHistory,
    daily_goal: int,
    today: date,
    days: int = HEATMAP_DAYS
) -> pd.DataFrame:
    """
    Per-day counts and intensities for the activity heatmap.

    The range covers the last `days` days, extended back to a Sunday so
    the grid starts on a full week.
    """
    start = today - timedelta(days=days - 1)
    # date.weekday(): Monday=0 .. Sunday=6
    start -= timedelta(days=(start.weekday() + 1) % 7)

    day_index = pd.date_range(start=start, end=today, freq="D")
    counts = history_series(history).reindex(day_index, fill_value=0).astype("int64")

    return pd.DataFrame({
        "date": [d.date().isoformat() for d in day_index],
        "count": counts.to_numpy(),
        "intensity": [intensity_for(int(c), daily_goal) for c in counts.to_numpy()],
    })


def word_difficulty_band(ease_factor: float) -> DifficultyBand:
    """Difficulty band from ease factor (lower ease = harder word)."""
    if ease_factor < HARD_EASE_BELOW:
        return "hard"
    if ease_factor > EASY_EASE_ABOVE:
        return "easy"
    return "normal"


def word_freshness(word: Word, now: int) -> float:
    """
    Percentage of the current review interval still remaining, 0-100.

    Never-reviewed words are treated as reviewed a day ago; words due
    immediately are 0% fresh.
    """
    last_review = word.last_reviewed if word.last_reviewed is not None else now - DAY_MS
    total = word.next_review - last_review
    if total <= 0:
        return 0.0
    passed = now - last_review
    return max(0.0, min(100.0, 100.0 - passed / total * 100.0))


def status_counts(words: Iterable[Word]) -> pd.Series:
    """Number of words per status, including zero counts."""
    statuses = [WordStatus(w.status).value for w in words]
    order = [s.value for s in WordStatus]
    return pd.Series(statuses, dtype="object").value_counts().reindex(order, fill_value=0).astype("int64")


def daily_accuracy(events_df: pd.DataFrame, mastered_value: int) -> pd.Series:
    """
    Share of judgments per UTC day that were MASTERED.
    """
    if events_df.empty:
        return pd.Series(dtype="float64")
    mastered = events_df["judgment"] == mastered_value
    return mastered.groupby(events_df["day_utc"]).mean().astype("float64")
