"""
Types for analytics dashboards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import pandas as pd


DifficultyBand = Literal["hard", "normal", "easy"]


@dataclass(frozen=True)
class DashboardData:
    """
    Precomputed metrics and series for the overview page.
    """
    today_count: int
    daily_goal: int
    goal_progress_percent: float
    streak_days: int
    total_words: int
    due_count: int
    status_counts: pd.Series
    heatmap: pd.DataFrame
