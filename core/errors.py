"""
Exception types shared by the scheduler, session engine and store.
"""

from __future__ import annotations


class VocabError(Exception):
    """Base class for vocabulary trainer errors."""


class EmptySelectionError(VocabError):
    """A session selection resolved to zero word ids."""

    def __init__(self, message: str = "Nothing to study right now."):
        super().__init__(message)


class UnknownWordIdError(VocabError, KeyError):
    """A word id is not present in the word-record collection."""

    def __init__(self, word_id: str):
        self.word_id = word_id
        super().__init__(f"Unknown word id: {word_id}")

    def __str__(self) -> str:
        return self.args[0]


class CorruptPersistedStateError(VocabError):
    """Stored words or session data could not be parsed or validated."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Corrupt persisted state under '{key}': {reason}")
