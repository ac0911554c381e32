"""
Constants for dashboard metrics.
"""

from __future__ import annotations

from typing import Final


DEFAULT_DAILY_GOAL: Final[int] = 50
HEATMAP_DAYS: Final[int] = 105  # 15 weeks

# Heatmap intensity thresholds as fractions of the daily goal (intensity 2..4);
# any activity at all is intensity 1.
INTENSITY_GOAL_FRACTIONS: Final[list[float]] = [0.5, 1.0, 1.5]

# Ease-factor bands for the per-word difficulty label
HARD_EASE_BELOW: Final[float] = 2.0
EASY_EASE_ABOVE: Final[float] = 2.8

DIFFICULTY_LABELS: Final[dict[str, str]] = {
    "hard": "Hard",
    "normal": "Normal",
    "easy": "Easy",
}
