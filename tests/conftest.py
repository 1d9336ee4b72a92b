from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from services.task_store import TaskStore
from storage.db import open_database, session_factory as make_session_factory


class FakeNotifier:
    """Records scheduler calls instead of touching the database."""

    def __init__(self, fail_cancel: bool = False):
        self.scheduled: list[tuple[int, object, dict]] = []
        self.cancelled: list[int] = []
        self.fail_cancel = fail_cancel

    def schedule(self, task_id, fire_time, payload):
        self.scheduled.append((task_id, fire_time, dict(payload)))

    def cancel(self, task_id):
        self.cancelled.append(task_id)
        if self.fail_cancel:
            raise RuntimeError("notification center offline")
        return True


@pytest.fixture()
def engine(tmp_path):
    engine = open_database(tmp_path / "tasks.db")
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture()
def notifier():
    return FakeNotifier()


@pytest.fixture()
def store(session_factory, notifier):
    return TaskStore(session_factory, notifier=notifier)
