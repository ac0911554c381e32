"""
SQLAlchemy ORM Models for the vocabulary store

Defines the key-value documents table (word collection, session state,
study history, points) and the append-only review event log.
"""

from sqlalchemy import BigInteger, Column, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class KeyValueEntry(Base):
    """
    One serialized document under a string key.

    Values are JSON text written verbatim, so a load returns exactly what the
    last save wrote.
    """
    __tablename__ = 'kv_store'

    key = Column(String(255), primary_key=True, nullable=False)
    value = Column(Text, nullable=False)
    updated_at = Column(BigInteger, nullable=False)  # Epoch ms of last write

    def __repr__(self):
        return f"<KeyValueEntry({self.key}, {len(self.value or '')} chars)>"


class ReviewEvent(Base):
    """
    Log entry for a single judgment on a word.

    Captures schedule state before/after the judgment and the session context.
    """
    __tablename__ = 'review_events'

    # Primary key
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Word identifiers
    word_id = Column(String(255), nullable=False)
    term = Column(String(255), nullable=False)

    # Timing and judgment
    timestamp = Column(BigInteger, nullable=False)  # Epoch ms
    judgment = Column(Integer, nullable=False)  # 1=FORGOT, 2=UNCERTAIN, 3=MASTERED

    # State before review
    interval_before = Column(Float, nullable=True)
    ease_factor_before = Column(Float, nullable=True)
    repetitions_before = Column(Integer, nullable=True)

    # State after review
    interval_after = Column(Float, nullable=False)
    ease_factor_after = Column(Float, nullable=False)
    repetitions_after = Column(Integer, nullable=False)
    status_after = Column(String(50), nullable=False)

    # Session context (optional, for analytics)
    session_id = Column(String(255), nullable=True)
    session_position = Column(Integer, nullable=True)

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, {self.word_id}, judgment={self.judgment})>"
