"""
SRS Constants and Parameters

All configurable parameters for the scheduler and the session loop in one place.
"""

from enum import IntEnum

from core.schemas import INITIAL_EASE_FACTOR, WordStatus


# ---- Recall Judgments ----

class Judgment(IntEnum):
    """Learner's self-reported recall outcome for one presentation."""
    FORGOT = 1     # Did not recall the word
    UNCERTAIN = 2  # Recalled, but blurry
    MASTERED = 3   # Recalled confidently


# ---- Scheduler Parameters ----

MIN_EASE_FACTOR = 1.3            # Floor for ease factor, also the reset value on FORGOT
EASE_STEP = 0.1                  # Ease change per UNCERTAIN / MASTERED judgment
UNCERTAIN_INTERVAL_FACTOR = 0.5  # Interval multiplier on UNCERTAIN (not rounded)
MASTERED_INTERVAL_DAYS = 21      # Interval at which a word counts as mastered
DAY_MS = 24 * 60 * 60 * 1000


# ---- Session Loop Parameters ----

PENALTY_STREAK_TARGET = 3        # Consecutive MASTERED judgments to leave the penalty loop
BATCH_SIZE_OPTIONS = (10, 20, 30, 50)
DEFAULT_BATCH_SIZE = 20


# ---- Rewards ----
# Points handed to the reward sink; the trigger conditions live in the session engine.

FIRST_TRY_MASTERY_BONUS = 1
SESSION_COMPLETE_BONUS = 10


# ---- Persistence Keys ----

WORDS_KEY = "kaoyan_vocab_progress_v1"
SESSION_KEY = "kaoyan_session_v1"
HISTORY_KEY = "kaoyan_study_history"
POINTS_KEY = "kaoyan_love_points"
