"""
Pydantic models for the vocabulary word-record collection.

These models define the structure of the stored documents (camelCase keys,
matching the JSON the learner's existing data uses) and the structured
output expected from AI enrichment.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator


# Ease factor for freshly imported words
INITIAL_EASE_FACTOR = 2.5


class WordStatus(str, Enum):
    """Coarse memory status shown in word lists (derived, never set directly)."""
    NEW = "new"
    LEARNING = "learning"
    MASTERED = "mastered"


# ---- Definitions ----

class Meaning(BaseModel):
    """One sense of a word, with an exam-style definition and an example."""
    part_of_speech: str = Field(default="", alias="partOfSpeech", description="e.g. 'n.', 'v.', 'adj.'")
    definition: str = Field(default="", description="Chinese exam definition")
    example: str = Field(default="", description="English example sentence")
    translation: str = Field(default="", description="Translation of the example")

    class Config:
        populate_by_name = True


# ---- Word Record ----

class Word(BaseModel):
    """
    A single vocabulary item and its memory-strength state.

    `status` is derived from `interval` and `repetitions` by the scheduler;
    it is stored for display only.
    """
    id: str = Field(..., description="Stable identifier, assigned at import time")
    term: str = Field(..., description="The word as the learner studies it")
    phonetic: Optional[str] = None
    meanings: list[Meaning] = Field(default_factory=list)
    status: WordStatus = Field(default=WordStatus.NEW)
    tags: list[str] = Field(default_factory=list)

    # Content features
    mnemonic: Optional[str] = None      # Root/affix/association memory aid
    exam_source: Optional[str] = Field(default=None, alias="examSource")  # e.g. "2010 Text 1"

    # Spaced repetition fields
    next_review: int = Field(..., alias="nextReview", description="Epoch ms when the word is due")
    interval: Union[int, float] = Field(default=0, description="Days until next review; may be fractional")
    repetitions: int = Field(default=0, ge=0, description="Consecutive MASTERED judgments since last reset")
    ease_factor: float = Field(default=INITIAL_EASE_FACTOR, alias="easeFactor")
    last_reviewed: Optional[int] = Field(default=None, alias="lastReviewed")

    @field_validator("interval")
    @classmethod
    def _interval_not_negative(cls, value):
        if value < 0:
            raise ValueError("interval must be >= 0")
        return value

    class Config:
        populate_by_name = True


# ---- AI Enrichment Response Models ----

class AIEnrichResponse(BaseModel):
    """
    Structured output from AI enrichment.

    `term` is the (possibly spelling-corrected) word the model analysed; it is
    used to correlate results back to word records.
    """
    term: Optional[str] = None
    phonetic: str = ""
    meanings: list[Meaning] = Field(default_factory=list)
    mnemonic: Optional[str] = None
    exam_source: Optional[str] = Field(default=None, alias="examSource")

    class Config:
        populate_by_name = True


class AIBatchEnrichResponse(BaseModel):
    """Wrapper so a batch of entries can be requested as one structured output."""
    entries: list[AIEnrichResponse] = Field(default_factory=list)
