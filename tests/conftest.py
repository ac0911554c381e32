import random

import pytest

from core import store
from core.lexicon import new_word
from core.schemas import Word

NOW = 1_700_000_000_000  # 2023-11-14 22:13:20 UTC


@pytest.fixture(autouse=True)
def temp_database(tmp_path, monkeypatch):
    """Point the store at a throwaway SQLite file for every test."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'vocab.db'}")
    monkeypatch.setenv("TEST_MODE", "true")
    store.dispose_engine()
    store.init_db()
    yield
    store.dispose_engine()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def rng():
    return random.Random(42)


def make_word(word_id: str, term: str = None, **fields) -> Word:
    data = {
        "id": word_id,
        "term": term or word_id,
        "next_review": fields.pop("next_review", NOW),
    }
    data.update(fields)
    return Word(**data)


@pytest.fixture
def words(now):
    """Five fresh words due now."""
    return [new_word(term, now, index=i) for i, term in enumerate(
        ["abandon", "benevolent", "candid", "diligent", "eloquent"]
    )]
