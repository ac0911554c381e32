"""
Term-keyed cache of enrichment results.

Background batches write here as they resolve; word records pick results up
afterwards by term. Keys are case-insensitive and the last write wins.
"""

from __future__ import annotations

import threading
from typing import Iterable, Optional

from core.schemas import AIEnrichResponse, Word


def normalize_term(term: str) -> str:
    return term.strip().lower()


class EnrichmentCache:
    """Thread-safe mapping of normalized term -> AIEnrichResponse."""

    def __init__(self):
        self._results: dict[str, AIEnrichResponse] = {}
        self._lock = threading.Lock()

    def put(self, term: str, result: AIEnrichResponse) -> None:
        """Store a result under the requested term and the returned term."""
        with self._lock:
            self._results[normalize_term(term)] = result
            if result.term:
                self._results[normalize_term(result.term)] = result

    def get(self, term: str) -> Optional[AIEnrichResponse]:
        with self._lock:
            return self._results.get(normalize_term(term))

    def __contains__(self, term: str) -> bool:
        with self._lock:
            return normalize_term(term) in self._results

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def missing(self, terms: Iterable[str]) -> list[str]:
        """Terms that have no cached result yet, in input order."""
        return [t for t in terms if t not in self]


def merge_result(word: Word, result: AIEnrichResponse) -> Word:
    """
    Copy enrichment content onto a word record (modifies in place).

    Scheduling fields are never touched.
    """
    if result.term:
        word.term = result.term
    if result.phonetic:
        word.phonetic = result.phonetic
    if result.meanings:
        word.meanings = [m.model_copy() for m in result.meanings]
    if result.mnemonic:
        word.mnemonic = result.mnemonic
    if result.exam_source:
        word.exam_source = result.exam_source
    return word


def apply_enrichment(words: Iterable[Word], cache: EnrichmentCache) -> int:
    """
    Attach cached results to matching words.

    Returns:
        Number of words updated
    """
    updated = 0
    for word in words:
        result = cache.get(word.term)
        if result is None:
            continue
        merge_result(word, result)
        updated += 1
    return updated
