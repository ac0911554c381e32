"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

from typing import Optional

import pandas as pd

from core import store


EVENT_COLUMNS = ["word_id", "judgment", "timestamp", "session_id", "day_utc"]


def load_review_events_df(word_id: Optional[str] = None) -> pd.DataFrame:
    """
    Load logged review events into a dataframe with a UTC day column.
    """
    rows = store.get_review_events(word_id=word_id)
    if not rows:
        return pd.DataFrame(columns=EVENT_COLUMNS)

    df = pd.DataFrame(rows)
    df = df[["word_id", "judgment", "timestamp", "session_id"]].copy()
    df["timestamp"] = pd.to_datetime(df["timestamp"], unit="ms", utc=True, errors="coerce")
    df = df.dropna(subset=["word_id", "timestamp"])
    df["day_utc"] = df["timestamp"].dt.floor("D")
    df = df.sort_values("timestamp").reset_index(drop=True)
    return df
