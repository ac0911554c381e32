"""
Session lifecycle controller for hosts (CLI, scripts).

Owns the learner's word collection, active session, study history and
points. Every mutation is followed by a full save, so a restart resumes
exactly where the learner stopped.
"""

from __future__ import annotations

import random
from typing import Callable, Iterable, Optional

from core import store
from core.analytics import DEFAULT_DAILY_GOAL, DashboardData, build_dashboard
from core.clock import now_ms
from core.enrichment import EnrichmentCache, EnrichmentRunner, apply_enrichment
from core.lexicon import delete_word, find_by_term, import_terms, index_by_id, merge_words
from core.rewards import PointsLedger
from core.schemas import Word
from core.session import (
    SessionState,
    continue_with_next_batch,
    exit_session,
    normalize_session_request,
    prune_unknown_ids,
    record_judgment,
    review_same_batch_again,
    start_session,
)
from core.session.requests import by_count, by_ids
from core.srs import Judgment, due_words
from core.srs.constants import DEFAULT_BATCH_SIZE


class StudyController:
    """
    Explicit state container wiring the session engine to the store.

    Args:
        clock: Callable returning epoch ms
        rng: Random source for cram shuffles
    """

    def __init__(
        self,
        clock: Callable[[], int] = now_ms,
        rng: Optional[random.Random] = None
    ):
        store.init_db()
        self.clock = clock
        self.rng = rng or random.Random()
        self.now = clock()

        self.words: list[Word] = store.load_words()
        self.history = store.load_history()
        self.points = PointsLedger(balance=store.load_points())
        self.review_events_buffer: list[dict] = []

        self.session: Optional[SessionState] = store.load_session()
        if self.session is not None:
            self.session = prune_unknown_ids(self.session, self.words_by_id, self.points)
            self._persist()
        else:
            store.clear_session()

    # ---- Derived State ----

    @property
    def words_by_id(self) -> dict[str, Word]:
        return index_by_id(self.words)

    @property
    def is_active(self) -> bool:
        return self.session is not None and not self.session.finished

    def due(self) -> list[Word]:
        """Words due now, in session order."""
        return due_words(self.words, self.now)

    def current_word(self) -> Optional[Word]:
        """Word at the head of the active session's queue."""
        if not self.is_active or self.session.current_word_id is None:
            return None
        return self.words_by_id.get(self.session.current_word_id)

    # ---- Session Lifecycle ----

    def start(
        self,
        count: Optional[int] = None,
        word_ids: Optional[Iterable[str]] = None,
        cram: bool = False
    ) -> SessionState:
        """
        Start a new session, replacing any previous one.

        Raises:
            EmptySelectionError: If nothing matches; the previous session is kept
        """
        self.now = self.clock()
        if word_ids is not None:
            request = by_ids(list(word_ids), cram=cram)
        elif count is not None:
            request = by_count(count, cram=cram)
        else:
            request = normalize_session_request(None, DEFAULT_BATCH_SIZE)

        self.session = start_session(self.words, request, now=self.now, rng=self.rng)
        self.review_events_buffer = []
        self._persist()
        return self.session

    def judge(self, judgment: Judgment) -> Optional[SessionState]:
        """
        Record a judgment for the word at the head of the queue.

        The review event is written together with the word, session and
        history documents, so a pause or crash never loses it.
        """
        if not self.is_active or self.session.current_word_id is None:
            return self.session

        self.session = record_judgment(
            self.session,
            self.session.current_word_id,
            judgment,
            self.words_by_id,
            now=self.clock(),
            history=self.history,
            rewards=self.points,
            review_log=self.review_events_buffer,
        )
        self.now = self.clock()
        self.flush_buffers()
        self._persist()
        return self.session

    def exit(self) -> None:
        """Discard the current session and return to idle."""
        self.session = exit_session(self.session)
        self.flush_buffers()
        self._persist()

    def continue_next_batch(self, size: Optional[int] = None) -> SessionState:
        """
        Start the next batch from the due list after a finished session.

        Raises:
            EmptySelectionError: If nothing is due
        """
        self.now = self.clock()
        previous = self.session or SessionState()
        self.session = continue_with_next_batch(previous, self.words, size=size, now=self.now, rng=self.rng)
        self._persist()
        return self.session

    def review_again(self, cram: bool = True) -> SessionState:
        """
        Replay the original batch of the last session.

        Raises:
            EmptySelectionError: If there is no previous batch
        """
        self.now = self.clock()
        previous = self.session or SessionState()
        self.session = review_same_batch_again(previous, self.words, cram=cram, now=self.now, rng=self.rng)
        self._persist()
        return self.session

    # ---- Word Collection ----

    def import_terms(
        self,
        terms: Iterable[str],
        runner: Optional[EnrichmentRunner] = None
    ) -> list[Word]:
        """
        Add new words and optionally queue background enrichment for them.
        """
        created = import_terms(self.words, terms, self.clock())
        self._persist()
        if runner is not None and created:
            runner.submit([w.term for w in created])
        return created

    def merge_backup(self, records: Iterable[Word]) -> list[Word]:
        """
        Add word records from a backup, keeping existing words as they are.

        Returns:
            The records that were added (terms not already present)
        """
        added = merge_words(self.words, records)
        if added:
            self._persist()
        return added

    def find_word(self, term: str) -> Optional[Word]:
        return find_by_term(self.words, term)

    def apply_enrichment(self, cache: EnrichmentCache) -> int:
        """Attach finished enrichment results to matching words."""
        updated = apply_enrichment(self.words, cache)
        if updated:
            self._persist()
        return updated

    def delete_word(self, word_id: str) -> bool:
        removed = delete_word(self.words, word_id)
        if removed:
            if self.session is not None:
                self.session = prune_unknown_ids(self.session, self.words_by_id, self.points)
            self._persist()
        return removed

    def clear_all(self) -> None:
        """
        DANGEROUS: Forget every word, the session, history and points.
        """
        store.clear_all()
        self.words = []
        self.history = {}
        self.points = PointsLedger()
        self.session = None
        self.review_events_buffer = []

    # ---- Stats ----

    def dashboard(self, daily_goal: int = DEFAULT_DAILY_GOAL) -> DashboardData:
        return build_dashboard(self.words, self.history, daily_goal, self.clock())

    # ---- Persistence ----

    def flush_buffers(self) -> None:
        """
        Flush buffered review events to the database.
        """
        if self.review_events_buffer:
            store.batch_log_review_events(self.review_events_buffer)
        self.review_events_buffer = []

    def _persist(self) -> None:
        if self.session is None:
            store.clear_session()
        else:
            store.save_session(self.session)
        store.save_words(self.words)
        store.save_history(self.history)
        store.save_points(self.points.balance)
