"""
AI-powered word enrichment.

Uses OpenAI's structured outputs (or any OpenAI-compatible endpoint via
OPENAI_BASE_URL) to fill in phonetics, meanings, examples and mnemonics.

Usage:
    from core.enrichment.client import enrich_word
    result = enrich_word("superfluous")
"""

from __future__ import annotations

import json
import os
from typing import Optional

from dotenv import load_dotenv
from openai import OpenAI

from core.enrichment.constants import (
    BATCH_INSTRUCTIONS,
    DEFAULT_MODEL,
    REQUEST_TIMEOUT_S,
    SYSTEM_PROMPT,
    WORD_INSTRUCTIONS,
    format_prompt,
)
from core.schemas import AIBatchEnrichResponse, AIEnrichResponse

# Load environment variables
load_dotenv()

# Initialize OpenAI client (module-level, reused across calls)
_client: Optional[OpenAI] = None


def get_client() -> OpenAI:
    """Get or create the OpenAI client."""
    global _client
    if _client is None:
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY not found in environment variables")
        _client = OpenAI(
            api_key=api_key,
            base_url=os.getenv("OPENAI_BASE_URL") or None,
            timeout=REQUEST_TIMEOUT_S,
        )
    return _client


def enrich_word(term: str, model: str = DEFAULT_MODEL) -> AIEnrichResponse:
    """
    Enrich a single word with phonetics, meanings and a mnemonic.

    Args:
        term: The word as the learner entered it
        model: Model to use (must support structured outputs)

    Returns:
        AIEnrichResponse; `term` holds the corrected spelling if any

    Raises:
        ValueError: If OPENAI_API_KEY is not set or the output can't be parsed
        openai.APIError: If the API call fails
    """
    completion = get_client().beta.chat.completions.parse(
        model=model,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": format_prompt(WORD_INSTRUCTIONS, term=term)},
        ],
        response_format=AIEnrichResponse,
        temperature=0,
    )

    enriched = completion.choices[0].message.parsed
    if enriched is None:
        raise ValueError(f"Failed to parse structured output for word: {term}")
    if not enriched.term:
        enriched.term = term
    return enriched


def batch_enrich_words(terms: list[str], model: str = DEFAULT_MODEL) -> list[AIEnrichResponse]:
    """
    Enrich several words with one request.

    Returns:
        Entries in the order the model returned them; correlate by `term`

    Raises:
        ValueError: If OPENAI_API_KEY is not set or the output can't be parsed
        openai.APIError: If the API call fails
    """
    if not terms:
        return []

    completion = get_client().beta.chat.completions.parse(
        model=model,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": format_prompt(BATCH_INSTRUCTIONS, terms=json.dumps(terms, ensure_ascii=False))},
        ],
        response_format=AIBatchEnrichResponse,
        temperature=0,
    )

    batch = completion.choices[0].message.parsed
    if batch is None:
        raise ValueError(f"Failed to parse structured output for batch: {terms}")
    return batch.entries


if __name__ == "__main__":
    # Quick test
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m core.enrichment.client <word>")
        sys.exit(1)

    result = enrich_word(sys.argv[1])
    print(result.model_dump_json(indent=2, by_alias=True))
