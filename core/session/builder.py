"""
Session Builder - Selecting Words for a Sitting

Creates the starting queue for a study session:
- By count: the first N words of the due list (interval-0 words first,
  then most overdue)
- By ids: an explicit list, e.g. "review this batch again"
- Cram: the selection is shuffled; a cram request by count samples from
  all words, ignoring due timestamps
"""

from __future__ import annotations

import random
import uuid
from typing import Iterable, Optional

from core.clock import now_ms
from core.errors import EmptySelectionError
from core.schemas import Word
from core.session.requests import SessionRequest
from core.session.state import SessionState
from core.srs.due_list import due_words


def select_word_ids(
    words: Iterable[Word],
    request: SessionRequest,
    now: int,
    rng: Optional[random.Random] = None
) -> list[str]:
    """
    Resolve a request to the ordered list of word ids for a new session.

    Explicit ids that are not in the word collection are skipped. The result
    is in selection order; cram shuffling happens when the queue is built.
    """
    rng = rng or random
    words = list(words)

    if request.word_ids is not None:
        known = {w.id for w in words}
        return [word_id for word_id in request.word_ids if word_id in known]

    count = max(0, request.count or 0)
    if count == 0:
        return []

    if request.cram:
        sample = rng.sample(words, min(count, len(words)))
        return [w.id for w in sample]

    return [w.id for w in due_words(words, now)[:count]]


def start_session(
    words: Iterable[Word],
    request: SessionRequest,
    now: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> SessionState:
    """
    Create a study session from a selection request.

    Args:
        words: The word-record collection
        request: Count or explicit ids, plus the cram flag
        now: Current time in epoch ms (defaults to the current time)
        rng: Random source for cram shuffling

    Returns:
        Fresh SessionState with the selected ids queued

    Raises:
        EmptySelectionError: If the request resolves to no words
    """
    if now is None:
        now = now_ms()

    ids = select_word_ids(words, request, now, rng)
    if not ids:
        raise EmptySelectionError()

    queue = list(ids)
    if request.cram:
        (rng or random).shuffle(queue)

    print(f"[SESSION] Starting {'cram ' if request.cram else ''}session with {len(queue)} words")

    return SessionState(
        queue=queue,
        initial_count=len(ids),
        last_session_ids=list(ids),
        learning_streaks={},
        attempt_counts={},
        finished=False,
        last_batch_size=request.batch_size or len(ids),
        session_id=str(uuid.uuid4()),
        cram=request.cram,
        started_at=now,
        completion_awarded=False,
    )
