"""
Prompt fragments and configuration for AI word enrichment.
"""

import os

# Configuration
DEFAULT_MODEL = os.getenv("ENRICH_MODEL", "gpt-4o-mini")
N_MEANINGS = 2           # Meanings requested per word
BATCH_SIZE = 3           # Terms per batch request
CONCURRENCY = 6          # Batch requests in flight at once
REQUEST_TIMEOUT_S = 20.0

# ---- System Prompts ----

SYSTEM_PROMPT = (
    "You are an English vocabulary tutor for Chinese graduate-entrance exam "
    "(kaoyan) students. You return accurate, concise dictionary data."
)

# ---- Prompt Fragments ----

WORD_INSTRUCTIONS = """Analyze the English word "{term}".

If the input is misspelled, put the corrected spelling in "term".
Provide:
- phonetic: IPA transcription
- meanings: the {n_meanings} most common meanings, each with
  * partOfSpeech (e.g. "v.", "n.", "adj.")
  * definition in Chinese, exam style
  * example: a simple English sentence, fewer than 10 words
  * translation: Chinese translation of the example
- mnemonic: a brief memory aid in Chinese (roots, affixes or association)"""

BATCH_INSTRUCTIONS = """Analyze each of these English words: {terms}.

Return one entry per word, in the same order, using the same fields for each:
term (corrected spelling if needed), phonetic, meanings (the {n_meanings} most
common, each with partOfSpeech, Chinese definition, a short example under 10
words, and its Chinese translation) and a brief Chinese mnemonic."""


def format_prompt(template: str, **kwargs) -> str:
    """Fill a prompt template."""
    return template.format(n_meanings=N_MEANINGS, **kwargs)
