"""
Session Engine - Judgments and Session Lifecycle

Turns a queue of word ids into a self-correcting practice loop:
1. Caller shows the head of the queue and collects a judgment
2. `record_judgment` updates the word's long-term schedule, the study
   history and the queue/penalty-loop bookkeeping
3. The sitting finishes the moment the queue drains

Every transition returns a new SessionState; the previous state object is
left untouched so callers can persist or compare both. Word records are
owned by the caller and are updated in place by the scheduler.
"""

from __future__ import annotations

import random
from typing import Iterable, Mapping, Optional, Union

from core.clock import now_ms
from core.errors import UnknownWordIdError
from core.history import StudyHistory, record_study
from core.rewards import RewardSink
from core.schemas import Word
from core.session.builder import start_session
from core.session.penalty_loop import apply_judgment_to_queue
from core.session.requests import by_count, by_ids
from core.session.state import SessionState
from core.srs.constants import (
    DEFAULT_BATCH_SIZE,
    FIRST_TRY_MASTERY_BONUS,
    SESSION_COMPLETE_BONUS,
    Judgment,
)
from core.srs.scheduler import process_review

WordCollection = Union[Mapping[str, Word], Iterable[Word]]


def lookup_word(words: WordCollection, word_id: str) -> Word:
    """
    Find a word record by id.

    Raises:
        UnknownWordIdError: If no record has this id
    """
    if isinstance(words, Mapping):
        word = words.get(word_id)
    else:
        word = next((w for w in words if w.id == word_id), None)
    if word is None:
        raise UnknownWordIdError(word_id)
    return word


def _known_ids(words: WordCollection) -> set[str]:
    if isinstance(words, Mapping):
        return set(words.keys())
    return {w.id for w in words}


def _mark_finished(state: SessionState, rewards: Optional[RewardSink]) -> None:
    """
    Flag a drained session as finished (modifies state in place).

    The completion bonus is paid at most once per session, however many
    times this is called on an empty queue.
    """
    if state.queue:
        return
    state.finished = True
    if state.completion_awarded:
        return
    state.completion_awarded = True
    if rewards is not None:
        rewards.award(SESSION_COMPLETE_BONUS, "session_complete")
    print(f"[SESSION] Session complete ({sum(state.attempt_counts.values())} judgments)")


def settle_completion(
    state: SessionState,
    rewards: Optional[RewardSink] = None
) -> SessionState:
    """
    Re-derive the finished flag from the queue, paying the bonus only once.
    """
    next_state = state.model_copy(deep=True)
    _mark_finished(next_state, rewards)
    return next_state


def record_judgment(
    state: SessionState,
    word_id: str,
    judgment: Judgment,
    words: WordCollection,
    now: Optional[int] = None,
    history: Optional[StudyHistory] = None,
    rewards: Optional[RewardSink] = None,
    review_log: Optional[list] = None
) -> SessionState:
    """
    Apply a learner's judgment for one word and return the next session state.

    Always:
    - attempt count for the word + 1
    - word schedule updated by the scheduler (in place)
    - today's study-history counter + 1

    Queue:
    - MASTERED, never failed this sitting: word exits (first-try bonus)
    - MASTERED, in penalty loop: streak + 1, exits at 3, else to the tail
    - FORGOT / UNCERTAIN: streak reset to 0, word to the tail

    Ids that are no longer in the word collection are dropped from the queue
    without touching any schedule. Judgments for ids that are not queued
    leave the session as it was.

    Args:
        state: Current session state (not modified)
        word_id: Word being judged, normally the head of the queue
        judgment: FORGOT, UNCERTAIN or MASTERED
        words: Word records, as a list or an id -> word mapping
        now: Judgment timestamp in epoch ms (defaults to the current time)
        history: Study-history counters to increment, if any
        rewards: Reward sink for bonus points, if any
        review_log: List to append the review event dict to, if any

    Returns:
        The next SessionState
    """
    if now is None:
        now = now_ms()
    judgment = Judgment(judgment)
    next_state = state.model_copy(deep=True)

    if word_id not in next_state.queue:
        return next_state

    try:
        word = lookup_word(words, word_id)
    except UnknownWordIdError as exc:
        print(f"[SESSION] Skipping: {exc}")
        next_state.queue = [queued for queued in next_state.queue if queued != word_id]
        _mark_finished(next_state, rewards)
        return next_state

    position = sum(next_state.attempt_counts.values())
    next_state.attempt_counts[word_id] = next_state.attempt_counts.get(word_id, 0) + 1
    first_try = word_id not in next_state.learning_streaks

    _, event_data = process_review(word, judgment, now)
    if review_log is not None:
        event_data["session_id"] = next_state.session_id
        event_data["session_position"] = position
        review_log.append(event_data)

    if history is not None:
        record_study(history, now)

    exited = apply_judgment_to_queue(next_state, word_id, judgment)
    if exited and first_try and rewards is not None:
        rewards.award(FIRST_TRY_MASTERY_BONUS, "first_try_mastery")

    _mark_finished(next_state, rewards)
    return next_state


def prune_unknown_ids(
    state: SessionState,
    words: WordCollection,
    rewards: Optional[RewardSink] = None
) -> SessionState:
    """
    Drop queued ids whose word records no longer exist (e.g. after a resume).
    """
    known = _known_ids(words)
    next_state = state.model_copy(deep=True)
    dropped = {word_id for word_id in next_state.queue if word_id not in known}
    if not dropped:
        return next_state

    print(f"[SESSION] Dropping {len(dropped)} deleted words from the queue")
    next_state.queue = [word_id for word_id in next_state.queue if word_id in known]
    for word_id in dropped:
        next_state.learning_streaks.pop(word_id, None)
    _mark_finished(next_state, rewards)
    return next_state


def exit_session(state: Optional[SessionState]) -> None:
    """
    Discard an in-progress session. The caller returns to idle.
    """
    if state is not None and not state.finished:
        print(f"[SESSION] Exiting with {state.remaining_count} words left")
    return None


def continue_with_next_batch(
    state: SessionState,
    words: Iterable[Word],
    size: Optional[int] = None,
    now: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> SessionState:
    """
    Start the next batch from the live due list.

    Uses `size` if given, else the batch size of the finished session.

    Raises:
        EmptySelectionError: If nothing is due
    """
    if size is None:
        size = state.last_batch_size or DEFAULT_BATCH_SIZE
    return start_session(words, by_count(size), now=now, rng=rng)


def review_same_batch_again(
    state: SessionState,
    words: Iterable[Word],
    cram: bool = True,
    now: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> SessionState:
    """
    Restart with the original ids of the finished session, shuffled by default.

    Raises:
        EmptySelectionError: If none of those words exist any more
    """
    next_state = start_session(
        words,
        by_ids(state.last_session_ids, cram=cram),
        now=now,
        rng=rng
    )
    if state.last_batch_size:
        next_state.last_batch_size = state.last_batch_size
    return next_state
