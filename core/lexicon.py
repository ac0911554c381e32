"""
Word-record collection helpers.

Creating, importing, merging and deleting vocabulary items. The collection is
a plain list of Word records; callers persist it through core.store.
"""

from __future__ import annotations

import random
import string
from typing import Iterable, Optional, Sequence

from core.schemas import INITIAL_EASE_FACTOR, Word, WordStatus

IMPORT_TAG = "imported"


def _random_suffix(length: int = 5) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(random.choice(alphabet) for _ in range(length))


def new_word(
    term: str,
    now: int,
    index: int = 0,
    tags: Optional[Sequence[str]] = None
) -> Word:
    """
    Initialize a word that has never been reviewed.

    The word is due immediately with the default ease factor.
    """
    return Word(
        id=f"new-{now}-{index}-{_random_suffix()}",
        term=term.strip(),
        meanings=[],
        status=WordStatus.NEW,
        tags=list(tags) if tags is not None else [IMPORT_TAG],
        next_review=now,
        interval=0,
        repetitions=0,
        ease_factor=INITIAL_EASE_FACTOR,
    )


def find_by_term(words: Iterable[Word], term: str) -> Optional[Word]:
    """Case-insensitive lookup by term."""
    needle = term.strip().lower()
    return next((w for w in words if w.term.lower() == needle), None)


def index_by_id(words: Iterable[Word]) -> dict[str, Word]:
    """Map of id -> word for lookups during a session."""
    return {w.id: w for w in words}


def import_terms(
    words: list[Word],
    terms: Iterable[str],
    now: int
) -> list[Word]:
    """
    Create records for terms not already in the collection.

    New words are placed at the front of the collection (modifies in place).

    Returns:
        The newly created words
    """
    existing = {w.term.lower() for w in words}
    created: list[Word] = []
    for term in terms:
        cleaned = term.strip()
        if not cleaned or cleaned.lower() in existing:
            continue
        existing.add(cleaned.lower())
        created.append(new_word(cleaned, now, index=len(created)))

    words[:0] = created
    return created


def merge_words(current: list[Word], imported: Iterable[Word]) -> list[Word]:
    """
    Append imported records whose term and id are not already present.

    Returns:
        The words that were added
    """
    terms = {w.term.lower() for w in current}
    ids = {w.id for w in current}
    added = []
    for word in imported:
        if word.term.lower() in terms or word.id in ids:
            continue
        terms.add(word.term.lower())
        ids.add(word.id)
        added.append(word)
    current.extend(added)
    return added


def delete_word(words: list[Word], word_id: str) -> bool:
    """
    Remove a word by id (modifies in place).

    Returns:
        True if a word was removed
    """
    for idx, word in enumerate(words):
        if word.id == word_id:
            del words[idx]
            return True
    return False
