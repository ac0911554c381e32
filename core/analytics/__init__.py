"""
Analytics package exports.
"""

from core.analytics.constants import DEFAULT_DAILY_GOAL, DIFFICULTY_LABELS
from core.analytics.metrics import (
    build_heatmap,
    study_streak,
    word_difficulty_band,
    word_freshness,
)
from core.analytics.service import build_dashboard
from core.analytics.types import DashboardData

__all__ = [
    "DEFAULT_DAILY_GOAL",
    "DIFFICULTY_LABELS",
    "build_dashboard",
    "build_heatmap",
    "study_streak",
    "word_difficulty_band",
    "word_freshness",
    "DashboardData",
]
