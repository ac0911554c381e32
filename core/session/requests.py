"""
Session selection requests.

A request says which words a new session should contain: either the top N
of the due list or an explicit list of ids, optionally shuffled (cram).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class SessionRequest:
    """
    Selection settings for one study sitting.

    Exactly one of `count` / `word_ids` is expected. With `cram`, ids are
    shuffled; a cram request by count samples from all words, ignoring due
    timestamps.
    """
    count: Optional[int] = None
    word_ids: Optional[Tuple[str, ...]] = None
    cram: bool = False

    @property
    def batch_size(self) -> int:
        if self.word_ids is not None:
            return len(self.word_ids)
        return max(0, self.count or 0)


def by_count(count: int, cram: bool = False) -> SessionRequest:
    """Request the first `count` due words (or a random sample when cramming)."""
    return SessionRequest(count=max(0, int(count)), cram=cram)


def by_ids(word_ids: Sequence[str], cram: bool = False) -> SessionRequest:
    """
    Request an explicit list of ids, e.g. replaying a past batch.

    Duplicates are dropped, keeping first occurrence order.
    """
    return SessionRequest(word_ids=tuple(dict.fromkeys(word_ids)), cram=cram)


def normalize_session_request(request: object | None, default_count: int) -> SessionRequest:
    """
    Normalize request-like objects to the latest SessionRequest schema.
    """
    if request is None:
        return by_count(default_count)

    word_ids = getattr(request, "word_ids", None)
    cram = bool(getattr(request, "cram", False))
    if word_ids is not None:
        return by_ids(list(word_ids), cram=cram)

    count = getattr(request, "count", None)
    return by_count(default_count if count is None else count, cram=cram)
