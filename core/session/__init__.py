"""
Study session queue engine.

Quick start:
    from core import session

    state = session.start_session(words, session.by_count(20), now)
    state = session.record_judgment(state, state.current_word_id, Judgment.MASTERED, words, now)
"""

from core.session.builder import select_word_ids, start_session
from core.session.engine import (
    continue_with_next_batch,
    exit_session,
    lookup_word,
    prune_unknown_ids,
    record_judgment,
    review_same_batch_again,
    settle_completion,
)
from core.session.penalty_loop import apply_judgment_to_queue
from core.session.requests import SessionRequest, by_count, by_ids, normalize_session_request
from core.session.state import SessionState, is_in_penalty, penalty_words, progress_percent

__all__ = [
    "SessionRequest",
    "SessionState",
    "apply_judgment_to_queue",
    "by_count",
    "by_ids",
    "continue_with_next_batch",
    "exit_session",
    "is_in_penalty",
    "lookup_word",
    "normalize_session_request",
    "penalty_words",
    "progress_percent",
    "prune_unknown_ids",
    "record_judgment",
    "review_same_batch_again",
    "select_word_ids",
    "settle_completion",
    "start_session",
]
