"""
Background enrichment runner.

Fire-and-forget batches on a thread pool. Each finished batch writes its
results into an EnrichmentCache; nothing here waits on, or is awaited by,
the study session.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Iterable, Optional

from core.enrichment.cache import EnrichmentCache, normalize_term
from core.enrichment.constants import BATCH_SIZE, CONCURRENCY
from core.schemas import AIEnrichResponse

BatchFetcher = Callable[[list[str]], list[AIEnrichResponse]]


def chunk_terms(terms: list[str], size: int = BATCH_SIZE) -> list[list[str]]:
    return [terms[i:i + size] for i in range(0, len(terms), size)]


def match_result(term: str, results: Iterable[AIEnrichResponse]) -> Optional[AIEnrichResponse]:
    """
    Find the result for a requested term.

    Exact (case-insensitive) match first, then a returned term contained in
    the requested one (e.g. "the consensus" -> "consensus").
    """
    needle = normalize_term(term)
    results = [r for r in results if r.term]
    for result in results:
        if normalize_term(result.term) == needle:
            return result
    for result in results:
        if normalize_term(result.term) in needle:
            return result
    return None


class EnrichmentRunner:
    """
    Runs enrichment batches in the background.

    Args:
        cache: Where results land
        fetch_batch: Callable(list of terms) -> results; defaults to the
            OpenAI batch client
        batch_size: Terms per batch
        concurrency: Batches in flight at once
    """

    def __init__(
        self,
        cache: EnrichmentCache,
        fetch_batch: Optional[BatchFetcher] = None,
        batch_size: int = BATCH_SIZE,
        concurrency: int = CONCURRENCY
    ):
        if fetch_batch is None:
            from core.enrichment.client import batch_enrich_words
            fetch_batch = batch_enrich_words
        self.cache = cache
        self.fetch_batch = fetch_batch
        self.batch_size = batch_size
        self.failures: dict[str, str] = {}
        self._failures_lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=concurrency, thread_name_prefix="enrich")

    def _record_failure(self, term: str, reason: str) -> None:
        with self._failures_lock:
            self.failures[normalize_term(term)] = reason

    def _run_batch(self, terms: list[str]) -> int:
        try:
            results = self.fetch_batch(terms)
        except Exception as exc:
            reason = str(exc) or exc.__class__.__name__
            print(f"[ENRICH] Batch {terms} failed: {reason}")
            for term in terms:
                self._record_failure(term, reason)
            return 0

        stored = 0
        for term in terms:
            result = match_result(term, results)
            if result is None:
                self._record_failure(term, "no result returned")
                continue
            self.cache.put(term, result)
            stored += 1
        return stored

    def submit(self, terms: Iterable[str]) -> list[Future]:
        """
        Queue enrichment for terms not already cached.

        Returns:
            One future per batch; each resolves to the number of cached results
        """
        pending = self.cache.missing(list(dict.fromkeys(terms)))
        return [
            self._executor.submit(self._run_batch, chunk)
            for chunk in chunk_terms(pending, self.batch_size)
        ]

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown(wait=True)
