"""
Vocabulary store: SQLAlchemy-backed key-value documents and review log.
"""

from core.store.database import (
    dispose_engine,
    get_database_url,
    init_db,
    is_test_mode,
    reset_db,
)
from core.store.persistence import (
    batch_log_review_events,
    clear_all,
    clear_session,
    dump_session,
    dump_words,
    get_review_events,
    load_history,
    load_points,
    load_session,
    load_words,
    parse_session,
    parse_words,
    read_value,
    save_history,
    save_points,
    save_session,
    save_words,
    write_value,
)

__all__ = [
    "batch_log_review_events",
    "clear_all",
    "clear_session",
    "dispose_engine",
    "dump_session",
    "dump_words",
    "get_database_url",
    "get_review_events",
    "init_db",
    "is_test_mode",
    "load_history",
    "load_points",
    "load_session",
    "load_words",
    "parse_session",
    "parse_words",
    "read_value",
    "reset_db",
    "save_history",
    "save_points",
    "save_session",
    "save_words",
    "write_value",
]
