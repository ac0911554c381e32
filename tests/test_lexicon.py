from core.lexicon import delete_word, find_by_term, import_terms, merge_words, new_word
from core.schemas import INITIAL_EASE_FACTOR, WordStatus

from tests.conftest import NOW, make_word


def test_new_word_is_due_immediately():
    word = new_word("  candid ", NOW, index=3)

    assert word.term == "candid"
    assert word.id.startswith(f"new-{NOW}-3-")
    assert word.next_review == NOW
    assert word.interval == 0
    assert word.repetitions == 0
    assert word.ease_factor == INITIAL_EASE_FACTOR
    assert word.status == WordStatus.NEW
    assert word.tags == ["imported"]


def test_import_terms_skips_duplicates_and_blanks():
    words = [make_word("w1", term="Abandon")]
    created = import_terms(words, ["abandon", "", "candid", "Candid", "diligent"], NOW)

    assert [w.term for w in created] == ["candid", "diligent"]
    assert [w.term for w in words] == ["candid", "diligent", "Abandon"]
    assert len({w.id for w in words}) == 3


def test_find_merge_and_delete():
    words = [make_word("w1", term="abandon")]
    assert find_by_term(words, " ABANDON ").id == "w1"
    assert find_by_term(words, "candid") is None

    added = merge_words(words, [make_word("w2", term="Abandon"), make_word("w3", term="candid")])
    assert [w.id for w in added] == ["w3"]

    assert delete_word(words, "w1") is True
    assert delete_word(words, "w1") is False
    assert [w.id for w in words] == ["w3"]
