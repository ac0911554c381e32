"""
Service layer to assemble the overview dashboard.
"""

from __future__ import annotations

from typing import Sequence

from core.analytics.metrics import (
    build_heatmap,
    goal_progress_percent,
    status_counts,
    study_streak,
    today_count,
)
from core.analytics.types import DashboardData
from core.clock import to_datetime
from core.history import StudyHistory
from core.schemas import Word
from core.srs.due_list import count_due


def build_dashboard(
    words: Sequence[Word],
    history: StudyHistory,
    daily_goal: int,
    now: int
) -> DashboardData:
    """
    Build all KPI values and series needed by the overview page.
    """
    today = to_datetime(now).date()
    count = today_count(history, today)

    return DashboardData(
        today_count=count,
        daily_goal=daily_goal,
        goal_progress_percent=goal_progress_percent(count, daily_goal),
        streak_days=study_streak(history, today),
        total_words=len(words),
        due_count=count_due(words, now),
        status_counts=status_counts(words),
        heatmap=build_heatmap(history, daily_goal, today),
    )
