"""
Session state for one study sitting.

The state is a plain document: it references words by id only and is saved
after every mutation so an interrupted sitting can be resumed verbatim.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, NonNegativeInt


class SessionState(BaseModel):
    """
    Ordered working set of word ids plus the penalty-loop bookkeeping.

    `learning_streaks` is sparse: a key exists only for words that failed at
    least once this sitting. A missing key means "never failed", which is
    different from a streak of 0 ("failed, not yet recovered").
    """
    queue: list[str] = Field(default_factory=list, description="Word ids awaiting a judgment, head first")
    initial_count: int = Field(default=0, ge=0, alias="initialCount")
    last_session_ids: list[str] = Field(default_factory=list, alias="lastSessionIds")
    learning_streaks: dict[str, NonNegativeInt] = Field(default_factory=dict, alias="learningStreaks")
    attempt_counts: dict[str, NonNegativeInt] = Field(default_factory=dict, alias="attemptCounts")
    finished: bool = False
    last_batch_size: int = Field(default=0, ge=0, alias="lastBatchSize")

    # Session context
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    cram: bool = False
    started_at: Optional[int] = Field(default=None, alias="startedAt")
    completion_awarded: bool = Field(default=False, alias="completionAwarded")

    class Config:
        populate_by_name = True

    @property
    def current_word_id(self) -> Optional[str]:
        """Id at the head of the queue, or None when the queue is empty."""
        return self.queue[0] if self.queue else None

    @property
    def remaining_count(self) -> int:
        """Distinct words still awaiting completion."""
        return len(set(self.queue))


def progress_percent(state: SessionState) -> float:
    """
    Share of the starting batch that has left the queue, 0-100.
    """
    if state.initial_count <= 0:
        return 100.0 if state.finished else 0.0
    done = state.initial_count - state.remaining_count
    return max(0.0, min(100.0, done / state.initial_count * 100.0))


def is_in_penalty(state: SessionState, word_id: str) -> bool:
    """True once the word has failed at least once this sitting."""
    return word_id in state.learning_streaks


def penalty_words(state: SessionState) -> dict[str, int]:
    """Penalty-loop words still in the queue, with their current streak."""
    queued = set(state.queue)
    return {
        word_id: streak
        for word_id, streak in state.learning_streaks.items()
        if word_id in queued
    }
