# taskapp/services/task_store.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import Session, select

from core.errors import NotFound, StorageUnavailable, TransactionFailed
from models.task import MUTABLE_FIELDS, Task
from services.notifications import NotificationScheduler
from storage.db import SessionFactory
from utils.datetime_utils import storage_now, to_storage

logger = logging.getLogger("taskapp.store")


def _ordered(stmt):
    return stmt.order_by(Task.date.desc(), Task.id.desc())


def _task_id(task: Task | int) -> int:
    task_id = task if isinstance(task, int) else task.id
    if task_id is None:
        raise ValueError("Task has no id yet; create it first")
    return task_id


class TaskStore:
    """CRUD and queries over :class:`Task` rows.

    Each write runs in its own transaction. Failures roll back and surface as
    :class:`TransactionFailed`; nothing here terminates the process.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        notifier: Optional[NotificationScheduler] = None,
    ):
        self._session_factory = session_factory
        self._notifier = notifier

    @contextmanager
    def _read(self) -> Iterator[Session]:
        try:
            with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Read failed: %s", exc)
            raise StorageUnavailable(f"Cannot read tasks: {exc}") from exc

    @contextmanager
    def _write(self, action: str) -> Iterator[Session]:
        with self._session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("%s failed: %s", action, exc)
                raise TransactionFailed(f"{action} failed: {exc}") from exc

    # ----- queries -----
    def list(self) -> List[Task]:
        with self._read() as session:
            return list(session.exec(_ordered(select(Task))))

    def find(self, predicate: Optional[ColumnElement] = None) -> List[Task]:
        stmt = select(Task)
        if predicate is not None:
            stmt = stmt.where(predicate)
        with self._read() as session:
            return list(session.exec(_ordered(stmt)))

    def get(self, task_id: int) -> Optional[Task]:
        with self._read() as session:
            return session.get(Task, task_id)

    def count(self) -> int:
        with self._read() as session:
            return int(session.exec(select(func.count()).select_from(Task)).one())

    def next_id(self) -> int:
        with self._read() as session:
            return self._next_id(session)

    @staticmethod
    def _next_id(session: Session) -> int:
        current = session.exec(select(func.max(Task.id))).one()
        return 0 if current is None else int(current) + 1

    # ----- writes -----
    def create(self, candidate: Task) -> Task:
        with self._write("Create task") as session:
            task = Task(
                id=candidate.id,
                title=candidate.title or "",
                category=candidate.category or "",
                contents=candidate.contents or "",
                date=to_storage(candidate.date) or storage_now(),
            )
            if task.id is None:
                task.id = self._next_id(session)
            session.add(task)
            session.commit()
            session.refresh(task)
        logger.info("Created task %s", task.id)
        return task

    def update(self, task: Task | int, **changes: Any) -> Task:
        task_id = _task_id(task)
        if "id" in changes:
            raise ValueError("Task id is immutable")
        unknown = set(changes) - set(MUTABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown task fields: {', '.join(sorted(unknown))}")

        with self._write("Update task") as session:
            obj = session.get(Task, task_id)
            if obj is None:
                raise NotFound(task_id)
            for key, value in changes.items():
                if key == "date":
                    value = to_storage(value) or storage_now()
                elif value is None:
                    value = ""
                setattr(obj, key, value)
            session.add(obj)
            session.commit()
            session.refresh(obj)
        logger.info("Updated task %s (%s)", task_id, ", ".join(sorted(changes)) or "no changes")
        return obj

    def delete(self, task_id: int) -> bool:
        """Remove the task and cancel its pending notification.

        A missing id is a no-op and returns ``False``.
        """

        with self._write("Delete task") as session:
            obj = session.get(Task, task_id)
            if obj is None:
                logger.debug("Delete skipped, task %s does not exist", task_id)
                return False
            session.delete(obj)
            session.commit()
        logger.info("Deleted task %s", task_id)

        if self._notifier is not None:
            try:
                self._notifier.cancel(task_id)
            except Exception as exc:
                logger.warning("Cannot cancel notification for task %s: %s", task_id, exc)
        return True


__all__ = ["TaskStore"]
