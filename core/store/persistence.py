"""
Persistence Layer - Documents in the Key-Value Store

Saves and loads the word-record collection, the active session, the study
history and the points balance as JSON documents, plus the review event log.

Load functions are the recovery boundary for damaged data: a document that
fails to parse or validate is reported and replaced by its empty default, it
is never raised to the caller.
"""

from __future__ import annotations

import json
from typing import Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from core.clock import now_ms
from core.errors import CorruptPersistedStateError
from core.history import StudyHistory
from core.schemas import Word
from core.session.state import SessionState
from core.srs.constants import HISTORY_KEY, POINTS_KEY, SESSION_KEY, WORDS_KEY
from core.store.database import get_session
from core.store.models import KeyValueEntry, ReviewEvent as ReviewEventModel

_WORDS_ADAPTER = TypeAdapter(list[Word])
_HISTORY_ADAPTER = TypeAdapter(dict[str, int])


# ---- Serialization ----

def dump_words(words: Iterable[Word]) -> str:
    """Serialize the word collection (camelCase keys, unset fields omitted)."""
    return _WORDS_ADAPTER.dump_json(list(words), by_alias=True, exclude_none=True).decode("utf-8")


def parse_words(raw: str) -> list[Word]:
    """
    Parse a serialized word collection.

    Raises:
        CorruptPersistedStateError: If the text is not a valid word list
    """
    try:
        return _WORDS_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise CorruptPersistedStateError(WORDS_KEY, str(exc)) from exc


def dump_session(state: SessionState) -> str:
    """Serialize a session state."""
    return state.model_dump_json(by_alias=True, exclude_none=True)


def parse_session(raw: str) -> SessionState:
    """
    Parse a serialized session state.

    A session is finished exactly when its queue is empty; a document where
    the two disagree can never be completed and is rejected.

    Raises:
        CorruptPersistedStateError: If the text is not a valid session
    """
    try:
        state = SessionState.model_validate_json(raw)
    except ValidationError as exc:
        raise CorruptPersistedStateError(SESSION_KEY, str(exc)) from exc
    if state.finished == bool(state.queue):
        raise CorruptPersistedStateError(
            SESSION_KEY,
            f"finished={state.finished} with {len(state.queue)} queued words"
        )
    return state


def dump_history(history: StudyHistory) -> str:
    return json.dumps(history, separators=(",", ":"))


def parse_history(raw: str) -> StudyHistory:
    try:
        return _HISTORY_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise CorruptPersistedStateError(HISTORY_KEY, str(exc)) from exc


# ---- Key-Value Access ----

def read_value(key: str) -> Optional[str]:
    """Raw stored text for a key, or None if nothing is stored."""
    session = get_session()
    try:
        entry = session.get(KeyValueEntry, key)
        return entry.value if entry is not None else None
    finally:
        session.close()


def write_value(key: str, value: str) -> None:
    """Store text under a key (insert or replace)."""
    session = get_session()
    try:
        session.merge(KeyValueEntry(key=key, value=value, updated_at=now_ms()))
        session.commit()
    finally:
        session.close()


def delete_value(key: str) -> None:
    """Remove a key; missing keys are ignored."""
    session = get_session()
    try:
        session.query(KeyValueEntry).filter(KeyValueEntry.key == key).delete()
        session.commit()
    finally:
        session.close()


def _load_document(key: str, parse, default):
    raw = read_value(key)
    if raw is None:
        return default
    try:
        return parse(raw)
    except CorruptPersistedStateError as exc:
        print(f"[STORE] {exc.key} is unreadable, starting fresh ({exc.reason.splitlines()[0]})")
        return default


# ---- Word Collection ----

def load_words() -> list[Word]:
    """Load the word collection; empty if missing or unreadable."""
    return _load_document(WORDS_KEY, parse_words, [])


def save_words(words: Iterable[Word]) -> None:
    write_value(WORDS_KEY, dump_words(words))


# ---- Session State ----

def load_session() -> Optional[SessionState]:
    """
    Load the saved session.

    Returns:
        SessionState, or None when there is no (readable) active session
    """
    return _load_document(SESSION_KEY, parse_session, None)


def save_session(state: SessionState) -> None:
    write_value(SESSION_KEY, dump_session(state))


def clear_session() -> None:
    delete_value(SESSION_KEY)


# ---- Study History & Points ----

def load_history() -> StudyHistory:
    return _load_document(HISTORY_KEY, parse_history, {})


def save_history(history: StudyHistory) -> None:
    write_value(HISTORY_KEY, dump_history(history))


def _parse_points(raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise CorruptPersistedStateError(POINTS_KEY, str(exc)) from exc


def load_points() -> int:
    return _load_document(POINTS_KEY, _parse_points, 0)


def save_points(balance: int) -> None:
    write_value(POINTS_KEY, str(int(balance)))


def clear_all() -> None:
    """
    DANGEROUS: Remove words, session, history, points and the review log.
    """
    for key in (WORDS_KEY, SESSION_KEY, HISTORY_KEY, POINTS_KEY):
        delete_value(key)

    session = get_session()
    try:
        session.query(ReviewEventModel).delete()
        session.commit()
    finally:
        session.close()
    print("[STORE] All data cleared")


# ---- Review Event Log ----

def batch_log_review_events(events: list[dict]) -> None:
    """
    Log multiple review events in a single database transaction.

    Args:
        events: List of event dicts as produced by srs.process_review()
    """
    if not events:
        return

    session = get_session()
    try:
        for event in events:
            session.add(ReviewEventModel(
                word_id=event['word_id'],
                term=event['term'],
                timestamp=event['timestamp'],
                judgment=int(event['judgment']),
                interval_before=event.get('interval_before'),
                ease_factor_before=event.get('ease_factor_before'),
                repetitions_before=event.get('repetitions_before'),
                interval_after=event['interval_after'],
                ease_factor_after=event['ease_factor_after'],
                repetitions_after=event['repetitions_after'],
                status_after=event['status_after'],
                session_id=event.get('session_id'),
                session_position=event.get('session_position'),
            ))
        session.commit()
    finally:
        session.close()


def get_review_events(
    word_id: Optional[str] = None,
    session_id: Optional[str] = None,
    limit: Optional[int] = None
) -> list[dict]:
    """
    Get logged review events, oldest first.

    Args:
        word_id: Only events for this word
        session_id: Only events from this session
        limit: Maximum number of events to return

    Returns:
        List of event dicts
    """
    session = get_session()
    try:
        query = session.query(ReviewEventModel)
        if word_id is not None:
            query = query.filter(ReviewEventModel.word_id == word_id)
        if session_id is not None:
            query = query.filter(ReviewEventModel.session_id == session_id)
        query = query.order_by(ReviewEventModel.timestamp, ReviewEventModel.id)
        if limit is not None:
            query = query.limit(limit)

        return [
            {
                "id": event.id,
                "word_id": event.word_id,
                "term": event.term,
                "timestamp": event.timestamp,
                "judgment": event.judgment,
                "interval_before": event.interval_before,
                "ease_factor_before": event.ease_factor_before,
                "repetitions_before": event.repetitions_before,
                "interval_after": event.interval_after,
                "ease_factor_after": event.ease_factor_after,
                "repetitions_after": event.repetitions_after,
                "status_after": event.status_after,
                "session_id": event.session_id,
                "session_position": event.session_position,
            }
            for event in query.all()
        ]
    finally:
        session.close()
