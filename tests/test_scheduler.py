"""
Scheduler tests: interval/ease/repetition updates and derived fields.
"""

import random

import pytest

from core.schemas import WordStatus
from core.srs import Judgment, advance, process_review
from core.srs.constants import DAY_MS, MIN_EASE_FACTOR
from core.srs.scheduler import derive_status, next_review_at, round_half_up

from tests.conftest import NOW, make_word


def test_forgot_resets_everything():
    word = make_word("w1", interval=6, repetitions=3, ease_factor=2.7)
    advance(word, Judgment.FORGOT, NOW)

    assert word.interval == 0
    assert word.repetitions == 0
    assert word.ease_factor == MIN_EASE_FACTOR
    assert word.next_review == NOW
    assert word.status == WordStatus.NEW
    assert word.last_reviewed == NOW


def test_uncertain_halves_interval_and_keeps_fraction():
    word = make_word("w1", interval=3, repetitions=2, ease_factor=2.5)
    advance(word, Judgment.UNCERTAIN, NOW)

    assert word.interval == 1.5
    assert word.repetitions == 0
    assert word.ease_factor == pytest.approx(2.4)
    assert word.next_review == NOW + int(1.5 * DAY_MS)
    assert word.status == WordStatus.NEW


def test_uncertain_on_new_word_stays_due_now():
    word = make_word("w1", ease_factor=1.35)
    advance(word, Judgment.UNCERTAIN, NOW)

    assert word.interval == 0
    assert word.next_review == NOW
    assert word.ease_factor == MIN_EASE_FACTOR


def test_mastered_new_word_gets_one_day():
    word = make_word("w1")
    advance(word, Judgment.MASTERED, NOW)

    assert word.interval == 1
    assert word.repetitions == 1
    assert word.ease_factor == pytest.approx(2.6)
    assert word.next_review == NOW + DAY_MS
    assert word.status == WordStatus.LEARNING


def test_mastered_interval_uses_ease_before_update():
    # 6 * 2.5 = 15, not 6 * 2.6 = 15.6 -> 16
    word = make_word("w1", interval=6, repetitions=2, ease_factor=2.5)
    advance(word, Judgment.MASTERED, NOW)

    assert word.interval == 15
    assert word.ease_factor == pytest.approx(2.6)
    assert word.repetitions == 3


def test_mastered_rounds_half_up():
    # 1.5 * 2.5 = 3.75 -> 4; 1.0 * 2.5 = 2.5 -> 3
    word = make_word("w1", interval=1.5, ease_factor=2.5)
    advance(word, Judgment.MASTERED, NOW)
    assert word.interval == 4

    word = make_word("w2", interval=1, ease_factor=2.5)
    advance(word, Judgment.MASTERED, NOW)
    assert word.interval == 3


def test_status_reaches_mastered_at_21_days():
    word = make_word("w1", interval=9, repetitions=3, ease_factor=2.5)
    advance(word, Judgment.MASTERED, NOW)

    assert word.interval == 23
    assert word.status == WordStatus.MASTERED


def test_derive_status_boundaries():
    assert derive_status(21, 0) == WordStatus.MASTERED
    assert derive_status(20.9, 4) == WordStatus.LEARNING
    assert derive_status(0, 0) == WordStatus.NEW


def test_round_half_up_and_next_review():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
    assert next_review_at(0, NOW) == NOW
    assert next_review_at(2, NOW) == NOW + 2 * DAY_MS


def test_process_review_returns_event():
    word = make_word("w1", interval=1, repetitions=1, ease_factor=2.6)
    _, event = process_review(word, Judgment.FORGOT, NOW)

    assert event["word_id"] == "w1"
    assert event["judgment"] == int(Judgment.FORGOT)
    assert event["interval_before"] == 1
    assert event["interval_after"] == 0
    assert event["ease_factor_after"] == MIN_EASE_FACTOR
    assert event["status_after"] == "new"
    assert event["session_id"] is None


def test_random_judgment_sequences_keep_invariants():
    rng = random.Random(7)
    for trial in range(200):
        word = make_word(f"w{trial}")
        now = NOW
        for _ in range(rng.randint(1, 100)):
            judgment = rng.choice(list(Judgment))
            advance(word, judgment, now)

            assert word.ease_factor >= MIN_EASE_FACTOR
            assert word.interval >= 0
            assert word.repetitions >= 0
            assert word.last_reviewed == now
            if word.interval == 0:
                assert word.next_review == now
            else:
                assert word.next_review >= now
            if judgment != Judgment.MASTERED:
                assert word.repetitions == 0
            now += rng.randint(0, 5) * DAY_MS


def test_mastered_on_tiny_fractional_interval_rounds_to_zero():
    # 0.25 * 1.3 = 0.325 rounds to 0: the word stays due now instead of
    # being clamped up to one day
    word = make_word("w1", interval=0.25, repetitions=0, ease_factor=1.3)
    advance(word, Judgment.MASTERED, NOW)

    assert word.interval == 0
    assert word.next_review == NOW
    assert word.repetitions == 1
    assert word.ease_factor == pytest.approx(1.4)
    assert word.status == WordStatus.LEARNING
