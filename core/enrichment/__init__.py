"""
AI enrichment: background batches that fill a term-keyed cache.
"""

from core.enrichment.cache import EnrichmentCache, apply_enrichment, merge_result
from core.enrichment.runner import EnrichmentRunner, chunk_terms, match_result

__all__ = [
    "EnrichmentCache",
    "EnrichmentRunner",
    "apply_enrichment",
    "chunk_terms",
    "match_result",
    "merge_result",
]
