from datetime import datetime, timedelta

import pytest

from core.errors import InvalidPredicate
from models.task import Task
from services.search import SearchFilter


BASE = datetime(2024, 5, 10, 8, 30)


@pytest.fixture()
def seeded(store):
    store.create(Task(title="report", category="work", date=BASE))
    store.create(Task(title="groceries", category="Home", date=BASE + timedelta(hours=1)))
    store.create(Task(title="standup", category="Homework", date=BASE + timedelta(hours=2)))
    store.create(Task(title="notes", category="", date=BASE + timedelta(hours=3)))
    return store


def test_empty_query_matches_list(seeded):
    search = SearchFilter()
    assert [t.model_dump() for t in search.apply(seeded, "")] == [
        t.model_dump() for t in seeded.list()
    ]


def test_none_query_behaves_like_empty(seeded):
    assert [t.id for t in SearchFilter().apply(seeded, None)] == [t.id for t in seeded.list()]


def test_substring_match_on_category():
    search = SearchFilter()
    assert search.matches(Task(category="work"), "wo")
    assert not search.matches(Task(category="Home"), "wo")


def test_examples_from_two_records(store):
    store.create(Task(category="work", date=BASE))
    store.create(Task(category="Home", date=BASE))
    search = SearchFilter()

    assert [t.id for t in search.apply(store, "wo")] == [0]
    assert [t.id for t in search.apply(store, "home")] == [1]


def test_case_insensitive_and_ordered(seeded):
    found = SearchFilter().apply(seeded, "HOME")
    assert [t.category for t in found] == ["Homework", "Home"]


def test_results_only_contain_matching_categories(seeded):
    for text in ("o", "me", "k", "zz"):
        found = SearchFilter().apply(seeded, text)
        assert all(text.casefold() in t.category.casefold() for t in found)
        expected = [t.id for t in seeded.list() if text.casefold() in t.category.casefold()]
        assert [t.id for t in found] == expected


def test_title_is_not_searched(seeded):
    assert SearchFilter().apply(seeded, "report") == []


def test_wildcards_match_literally(store):
    store.create(Task(category="100% done", date=BASE))
    store.create(Task(category="1000 done", date=BASE))
    store.create(Task(category="snake_case", date=BASE))
    store.create(Task(category="snakeXcase", date=BASE))
    search = SearchFilter()

    assert [t.category for t in search.apply(store, "0%")] == ["100% done"]
    assert [t.category for t in search.apply(store, "e_c")] == ["snake_case"]


def test_unicode_categories_fold(store):
    store.create(Task(category="仕事", date=BASE))
    store.create(Task(category="Straße", date=BASE))
    store.create(Task(category="ДОМ", date=BASE))
    search = SearchFilter()

    assert [t.category for t in search.apply(store, "仕")] == ["仕事"]
    assert [t.category for t in search.apply(store, "STRASSE")] == ["Straße"]
    assert [t.category for t in search.apply(store, "дом")] == ["ДОМ"]


def test_search_does_not_mutate_store(seeded):
    before = [t.model_dump() for t in seeded.list()]
    SearchFilter().apply(seeded, "home")
    SearchFilter().apply(seeded, "")
    assert [t.model_dump() for t in seeded.list()] == before


def test_non_text_input_is_invalid():
    with pytest.raises(InvalidPredicate):
        SearchFilter().build(42)


def test_empty_text_builds_no_predicate():
    assert SearchFilter().build("") is None


def test_other_field_can_be_searched(seeded):
    found = SearchFilter(field="title").apply(seeded, "STAND")
    assert [t.title for t in found] == ["standup"]


def test_unknown_field_rejected():
    with pytest.raises(ValueError):
        SearchFilter(field="id")
