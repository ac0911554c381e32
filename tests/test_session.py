"""
Study session tests: selection, penalty loop, completion and batch replay.
"""

import random

import pytest

from core.errors import EmptySelectionError
from core.history import record_study
from core.rewards import PointsLedger
from core.session import (
    SessionState,
    by_count,
    by_ids,
    continue_with_next_batch,
    exit_session,
    is_in_penalty,
    normalize_session_request,
    penalty_words,
    progress_percent,
    prune_unknown_ids,
    record_judgment,
    review_same_batch_again,
    settle_completion,
    start_session,
)
from core.srs import Judgment
from core.srs.constants import DAY_MS, FIRST_TRY_MASTERY_BONUS, SESSION_COMPLETE_BONUS

from tests.conftest import NOW, make_word


def _words(*ids):
    return [make_word(word_id) for word_id in ids]


# ---- Selection ----

def test_start_by_count_takes_due_words_in_order():
    words = [
        make_word("later", next_review=NOW - DAY_MS, interval=2),
        make_word("new", interval=0),
        make_word("future", next_review=NOW + DAY_MS, interval=1),
    ]
    state = start_session(words, by_count(10), now=NOW)

    assert state.queue == ["new", "later"]
    assert state.initial_count == 2
    assert state.last_session_ids == ["new", "later"]
    assert state.learning_streaks == {}
    assert state.finished is False
    assert state.last_batch_size == 10
    assert state.session_id


def test_start_with_nothing_due_raises():
    words = [make_word("future", next_review=NOW + DAY_MS, interval=1)]
    with pytest.raises(EmptySelectionError):
        start_session(words, by_count(20), now=NOW)
    with pytest.raises(EmptySelectionError):
        start_session([], by_count(20), now=NOW)


def test_start_by_ids_skips_unknown_and_keeps_order():
    words = _words("a", "b", "c")
    state = start_session(words, by_ids(["c", "missing", "a", "c"]), now=NOW)

    assert state.queue == ["c", "a"]
    assert state.initial_count == 2

    with pytest.raises(EmptySelectionError):
        start_session(words, by_ids(["missing"]), now=NOW)


def test_cram_shuffles_queue_but_remembers_selection():
    words = _words(*"abcdefgh")
    ids = [w.id for w in words]
    state = start_session(words, by_ids(ids, cram=True), now=NOW, rng=random.Random(3))

    assert sorted(state.queue) == sorted(ids)
    assert state.last_session_ids == ids
    assert state.cram is True


def test_cram_by_count_ignores_due_times():
    words = [make_word(f"w{i}", next_review=NOW + DAY_MS, interval=1) for i in range(6)]
    state = start_session(words, by_count(4, cram=True), now=NOW, rng=random.Random(1))

    assert len(state.queue) == 4
    assert len(set(state.queue)) == 4


def test_normalize_session_request():
    assert normalize_session_request(None, 20) == by_count(20)
    assert normalize_session_request(by_ids(["a"], cram=True), 20).word_ids == ("a",)
    assert normalize_session_request(by_count(5, cram=True), 20).cram is True


# ---- Penalty loop ----

def test_first_try_mastery_exits_with_bonus():
    words = _words("a", "b")
    ledger = PointsLedger()
    state = start_session(words, by_ids(["a", "b"]), now=NOW)

    state = record_judgment(state, "a", Judgment.MASTERED, words, NOW, rewards=ledger)

    assert state.queue == ["b"]
    assert "a" not in state.learning_streaks
    assert ledger.balance == FIRST_TRY_MASTERY_BONUS


def test_failed_word_needs_three_consecutive_masteries():
    words = _words("x")
    state = start_session(words, by_ids(["x"]), now=NOW)

    state = record_judgment(state, "x", Judgment.FORGOT, words, NOW)
    assert state.queue == ["x"]
    assert state.learning_streaks == {"x": 0}

    state = record_judgment(state, "x", Judgment.MASTERED, words, NOW)
    assert state.learning_streaks["x"] == 1
    state = record_judgment(state, "x", Judgment.MASTERED, words, NOW)
    assert state.learning_streaks["x"] == 2
    assert state.finished is False

    state = record_judgment(state, "x", Judgment.MASTERED, words, NOW)
    assert state.queue == []
    assert state.finished is True
    assert state.attempt_counts["x"] == 4


def test_slip_during_penalty_resets_streak():
    words = _words("x")
    state = start_session(words, by_ids(["x"]), now=NOW)

    for judgment in [Judgment.FORGOT, Judgment.MASTERED, Judgment.MASTERED]:
        state = record_judgment(state, "x", judgment, words, NOW)
    assert state.learning_streaks["x"] == 2

    state = record_judgment(state, "x", Judgment.FORGOT, words, NOW)
    assert state.learning_streaks["x"] == 0

    for judgment in [Judgment.MASTERED, Judgment.MASTERED]:
        state = record_judgment(state, "x", judgment, words, NOW)
    assert state.learning_streaks["x"] == 2
    assert state.queue == ["x"]

    state = record_judgment(state, "x", Judgment.MASTERED, words, NOW)
    assert state.finished is True
    assert state.attempt_counts["x"] == 7


def test_failed_word_moves_to_tail():
    words = _words("a", "b", "c")
    state = start_session(words, by_ids(["a", "b", "c"]), now=NOW)

    state = record_judgment(state, "a", Judgment.UNCERTAIN, words, NOW)
    assert state.queue == ["b", "c", "a"]
    assert is_in_penalty(state, "a")
    assert penalty_words(state) == {"a": 0}


def test_no_bonus_for_mastery_after_failure():
    words = _words("a")
    ledger = PointsLedger()
    state = start_session(words, by_ids(["a"]), now=NOW)

    for judgment in [Judgment.FORGOT] + [Judgment.MASTERED] * 3:
        state = record_judgment(state, "a", judgment, words, NOW, rewards=ledger)

    assert state.finished is True
    assert ledger.awards == [(SESSION_COMPLETE_BONUS, "session_complete")]


def test_record_judgment_updates_schedule_and_history():
    words = _words("a")
    history = {}
    log = []
    state = start_session(words, by_ids(["a"]), now=NOW)

    record_judgment(state, "a", Judgment.MASTERED, words, NOW, history=history, review_log=log)

    assert words[0].interval == 1
    assert sum(history.values()) == 1
    assert log[0]["session_id"] == state.session_id
    assert log[0]["session_position"] == 0


def test_record_judgment_leaves_input_state_untouched():
    words = _words("a", "b")
    state = start_session(words, by_ids(["a", "b"]), now=NOW)
    before = state.model_dump()

    record_judgment(state, "a", Judgment.FORGOT, words, NOW)

    assert state.model_dump() == before


# ---- Termination ----

def test_session_terminates_for_any_mastering_sequence():
    rng = random.Random(11)
    for _ in range(50):
        words = _words(*[f"w{i}" for i in range(rng.randint(1, 8))])
        state = start_session(words, by_count(20), now=NOW)
        steps = 0
        while not state.finished:
            head = state.current_word_id
            # Each word fails a bounded number of times, then is always mastered
            judgment = Judgment.FORGOT if state.attempt_counts.get(head, 0) < 2 else Judgment.MASTERED
            state = record_judgment(state, head, judgment, words, NOW)
            steps += 1
            assert steps < 1000
        assert state.queue == []


def test_progress_percent():
    words = _words("a", "b")
    state = start_session(words, by_ids(["a", "b"]), now=NOW)
    assert progress_percent(state) == 0.0

    state = record_judgment(state, "a", Judgment.MASTERED, words, NOW)
    assert progress_percent(state) == 50.0


# ---- Completion and edge cases ----

def test_completion_bonus_is_paid_once():
    words = _words("a")
    ledger = PointsLedger()
    state = start_session(words, by_ids(["a"]), now=NOW)
    state = record_judgment(state, "a", Judgment.MASTERED, words, NOW, rewards=ledger)
    assert state.completion_awarded is True

    state = settle_completion(state, ledger)
    state = settle_completion(state, ledger)

    assert ledger.balance == FIRST_TRY_MASTERY_BONUS + SESSION_COMPLETE_BONUS


def test_unknown_word_id_is_dropped_without_scheduling():
    words = _words("a", "b")
    state = start_session(words, by_ids(["a", "b"]), now=NOW)
    del words[0]

    state = record_judgment(state, "a", Judgment.MASTERED, words, NOW)

    assert state.queue == ["b"]
    assert "a" not in state.attempt_counts


def test_judgment_for_id_not_queued_is_ignored():
    words = _words("a", "b")
    state = start_session(words, by_ids(["a"]), now=NOW)

    next_state = record_judgment(state, "b", Judgment.FORGOT, words, NOW)

    assert next_state.model_dump() == state.model_dump()
    assert words[1].interval == 0
    assert words[1].last_reviewed is None


def test_prune_unknown_ids_finishes_emptied_session():
    words = _words("a")
    state = start_session(words, by_ids(["a"]), now=NOW)
    ledger = PointsLedger()

    state = prune_unknown_ids(state, [], ledger)

    assert state.finished is True
    assert ledger.balance == SESSION_COMPLETE_BONUS


def test_exit_session_returns_idle():
    words = _words("a")
    state = start_session(words, by_ids(["a"]), now=NOW)
    assert exit_session(state) is None


# ---- After completion ----

def test_continue_with_next_batch_uses_last_batch_size():
    words = _words(*[f"w{i}" for i in range(5)])
    state = start_session(words, by_count(2), now=NOW)
    for word_id in list(state.queue):
        state = record_judgment(state, word_id, Judgment.MASTERED, words, NOW)

    later = NOW + 1
    next_state = continue_with_next_batch(state, words, now=later)

    assert len(next_state.queue) == 2
    assert not set(next_state.queue) & set(state.last_session_ids)


def test_continue_with_next_batch_raises_when_nothing_due():
    words = _words("a")
    state = start_session(words, by_count(5), now=NOW)
    state = record_judgment(state, "a", Judgment.MASTERED, words, NOW)

    with pytest.raises(EmptySelectionError):
        continue_with_next_batch(state, words, now=NOW + 1)


def test_review_same_batch_again_reuses_ids():
    words = _words("a", "b", "c")
    state = start_session(words, by_count(20), now=NOW)
    for word_id in list(state.queue):
        state = record_judgment(state, word_id, Judgment.MASTERED, words, NOW)

    again = review_same_batch_again(state, words, rng=random.Random(5))

    assert sorted(again.queue) == ["a", "b", "c"]
    assert again.last_session_ids == state.last_session_ids
    assert again.last_batch_size == 20
    assert again.cram is True
    assert again.finished is False


def test_history_counts_by_utc_day():
    history = {}
    record_study(history, NOW)
    record_study(history, NOW + 1)
    record_study(history, NOW + DAY_MS)
    assert history == {"2023-11-14": 2, "2023-11-15": 1}


def test_session_state_defaults():
    state = SessionState()
    assert state.current_word_id is None
    assert state.remaining_count == 0
