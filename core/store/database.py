"""
Database - Engine and Session Management

Uses SQLAlchemy with a SQLite file by default; any SQLAlchemy URL works via
DATABASE_URL.

This module handles ONLY connections and schema.
Document (de)serialization is handled by the persistence module.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from core.store.models import Base

# Load environment
load_dotenv()

DEFAULT_DB_DIR = Path("logs")
DEFAULT_DB_NAME = "vocab.db"

# Global engine (reused across requests)
_engine: Optional[Engine] = None
_engine_url: Optional[str] = None


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_database_url() -> str:
    """
    Get the database URL from environment variables.

    Uses DATABASE_URL if set, otherwise a SQLite file under ./logs.
    In TEST_MODE the database name gets a 'test_' prefix so test runs never
    touch the learner's data.

    Returns:
        SQLAlchemy connection URL
    """
    base_url = os.getenv("DATABASE_URL")
    if not base_url:
        db_name = f"test_{DEFAULT_DB_NAME}" if is_test_mode() else DEFAULT_DB_NAME
        DEFAULT_DB_DIR.mkdir(parents=True, exist_ok=True)
        return f"sqlite:///{DEFAULT_DB_DIR / db_name}"

    if is_test_mode() and DEFAULT_DB_NAME in base_url:
        return base_url.replace(DEFAULT_DB_NAME, f"test_{DEFAULT_DB_NAME}")

    return base_url


def get_engine() -> Engine:
    """
    Get the SQLAlchemy engine, creating it on first use.

    The engine is rebuilt if DATABASE_URL changed since the last call.

    Returns:
        SQLAlchemy Engine instance
    """
    global _engine, _engine_url

    db_url = get_database_url()
    if _engine is not None and _engine_url == db_url:
        return _engine

    if _engine is not None:
        _engine.dispose()

    _engine = create_engine(
        db_url,
        pool_pre_ping=True,    # Verify connections before use
        echo=False
    )
    _engine_url = db_url
    return _engine


def get_session() -> Session:
    """
    Get a SQLAlchemy session for database operations.

    Returns:
        SQLAlchemy Session instance
    """
    SessionLocal = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return SessionLocal()


def dispose_engine() -> None:
    """Close pooled connections and forget the cached engine."""
    global _engine, _engine_url
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _engine_url = None


def init_db():
    """
    Create the key-value and review-log tables when missing.

    Idempotent; hosts call it on startup.
    """
    engine = get_engine()

    existing_tables = inspect(engine).get_table_names()
    if 'kv_store' not in existing_tables or 'review_events' not in existing_tables:
        Base.metadata.create_all(engine)


def reset_db():
    """
    DANGEROUS: Drop and recreate every table.

    The word collection, saved session, history, points and review log
    are all lost.
    """
    engine = get_engine()
    Base.metadata.drop_all(engine)
    print("[STORE] All tables dropped")

    init_db()
