from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from conftest import FakeNotifier
from core.errors import NotFound, StorageUnavailable, TransactionFailed
from models.task import Task
from services.task_store import TaskStore


BASE = datetime(2024, 3, 1, 9, 0)


def _add(store, minutes=0, **fields):
    return store.create(Task(date=BASE + timedelta(minutes=minutes), **fields))


def test_first_task_gets_id_zero_and_ids_increase_by_one(store):
    ids = [_add(store, minutes=i, title=f"t{i}").id for i in range(5)]
    assert ids == [0, 1, 2, 3, 4]


def test_next_id_follows_max_not_count(store):
    _add(store, title="a")
    _add(store, title="b")
    _add(store, title="c")
    store.delete(1)
    assert store.count() == 2
    assert store.next_id() == 3
    assert _add(store, title="d").id == 3


def test_next_id_restarts_at_zero_when_store_emptied(store):
    _add(store)
    store.delete(0)
    assert store.next_id() == 0


def test_explicit_id_is_kept(store):
    task = store.create(Task(id=41, title="explicit", date=BASE))
    assert task.id == 41
    assert _add(store).id == 42


def test_duplicate_id_raises_transaction_failed(store):
    store.create(Task(id=7, title="one", date=BASE))
    with pytest.raises(TransactionFailed):
        store.create(Task(id=7, title="two", date=BASE))
    assert [t.title for t in store.list()] == ["one"]


def test_create_fills_defaults(store):
    task = store.create(Task())
    assert task.title == ""
    assert task.category == ""
    assert task.contents == ""
    assert task.date is not None


def test_create_stores_aware_dates_as_naive_utc(store):
    aware = datetime(2024, 3, 1, 18, 0, tzinfo=timezone(timedelta(hours=9)))
    task = store.create(Task(title="tokyo", date=aware))
    assert store.get(task.id).date == datetime(2024, 3, 1, 9, 0)


def test_list_is_sorted_by_date_descending(store):
    for offset in (30, -10, 120, 0, 45):
        _add(store, minutes=offset)
    dates = [t.date for t in store.list()]
    assert all(a >= b for a, b in zip(dates, dates[1:]))
    assert dates[0] == BASE + timedelta(minutes=120)


def test_list_breaks_date_ties_by_id(store):
    for _ in range(3):
        _add(store)
    assert [t.id for t in store.list()] == [2, 1, 0]


def test_delete_removes_task_and_cancels_once(store, notifier):
    keep = _add(store, title="keep")
    gone = _add(store, minutes=1, title="gone")

    assert store.delete(gone.id) is True

    assert gone.id not in [t.id for t in store.list()]
    assert [t.id for t in store.list()] == [keep.id]
    assert notifier.cancelled == [gone.id]


def test_delete_missing_id_is_noop_without_cancel(store, notifier):
    _add(store)
    assert store.delete(99) is False
    assert notifier.cancelled == []
    assert store.count() == 1


def test_delete_survives_cancel_failure(session_factory):
    notifier = FakeNotifier(fail_cancel=True)
    store = TaskStore(session_factory, notifier=notifier)
    task = store.create(Task(title="x", date=BASE))

    assert store.delete(task.id) is True
    assert store.get(task.id) is None
    assert notifier.cancelled == [task.id]


def test_update_round_trip_changes_only_title(store):
    original = store.create(
        Task(title="draft", category="work", contents="write report", date=BASE)
    )
    store.update(original.id, title="x")

    reread = store.get(original.id)
    expected = original.model_dump()
    expected["title"] = "x"
    assert reread.model_dump() == expected


def test_update_accepts_task_instance(store):
    task = _add(store, title="a")
    updated = store.update(task, category="home", date=BASE + timedelta(days=1))
    assert updated.id == task.id
    assert updated.category == "home"
    assert updated.date == BASE + timedelta(days=1)


def test_update_rejects_id_change(store):
    task = _add(store)
    with pytest.raises(ValueError):
        store.update(task.id, id=5)


def test_update_rejects_unknown_field(store):
    task = _add(store)
    with pytest.raises(ValueError):
        store.update(task.id, priority=3)


def test_update_missing_task_raises_not_found(store):
    with pytest.raises(NotFound) as excinfo:
        store.update(12, title="nope")
    assert excinfo.value.task_id == 12


def test_update_unsaved_task_is_rejected(store):
    with pytest.raises(ValueError):
        store.update(Task(title="unsaved"), title="x")


def test_commit_failure_is_wrapped_and_rolled_back(store, monkeypatch):
    _add(store, title="before")

    def broken_commit(self):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr("sqlmodel.Session.commit", broken_commit)
    with pytest.raises(TransactionFailed):
        store.update(0, title="after")
    monkeypatch.undo()

    assert store.get(0).title == "before"


def test_read_failure_raises_storage_unavailable(tmp_path):
    from storage.db import create_db_engine, session_factory

    # no schema: the table does not exist
    engine = create_db_engine(f"sqlite:///{(tmp_path / 'empty.db').as_posix()}")
    store = TaskStore(session_factory(engine))
    with pytest.raises(StorageUnavailable):
        store.list()


def test_find_without_predicate_equals_list(store):
    for offset in (5, 1, 3):
        _add(store, minutes=offset)
    assert [t.id for t in store.find(None)] == [t.id for t in store.list()]


def test_find_uses_list_ordering(store):
    _add(store, minutes=1, category="a")
    _add(store, minutes=3, category="b")
    _add(store, minutes=2, category="a")
    found = store.find(Task.category == "a")
    assert [t.id for t in found] == [2, 0]


def test_date_column_is_plain_sqlalchemy_datetime():
    from sqlalchemy import DateTime

    assert type(Task.__table__.c.date.type) is DateTime
    assert Task.__table__.c.date.type.timezone is False


def test_naive_dates_survive_create_and_update(store):
    task = store.create(Task(title="a", date=datetime(2024, 1, 1)))
    assert store.get(task.id).date == datetime(2024, 1, 1)

    store.update(task.id, date=datetime(2024, 2, 1, 8, 15))
    reread = store.get(task.id)
    assert reread.date == datetime(2024, 2, 1, 8, 15)
    assert reread.date.tzinfo is None
