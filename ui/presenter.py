"""List state and user intents for the task screen, independent of Flet."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, List, Optional, Tuple

from core.errors import TaskAppError
from core.settings import UI
from models.task import Task
from services.notifications import NotificationScheduler
from services.search import SearchFilter
from services.task_store import TaskStore
from utils.datetime_utils import ensure_utc, format_row_date, storage_now, utc_now

logger = logging.getLogger("taskapp.ui")


class TaskListPresenter:
    """Keeps the last good task list and forwards intents to the store.

    Every intent reports failures through ``on_error`` and leaves
    :attr:`tasks` at its previous value.
    """

    def __init__(
        self,
        store: TaskStore,
        notifier: Optional[NotificationScheduler] = None,
        *,
        search: Optional[SearchFilter] = None,
        on_error: Optional[Callable[[str], None]] = None,
        on_query_committed: Optional[Callable[[str], None]] = None,
        notifications_enabled: bool = True,
    ):
        self.store = store
        self.notifier = notifier
        self.search = search or SearchFilter()
        self.on_error = on_error
        self.on_query_committed = on_query_committed
        self.notifications_enabled = notifications_enabled
        self.tasks: List[Task] = []
        self.query = ""

    def _report(self, action: str, exc: Exception) -> None:
        message = f"{action}: {exc}"
        logger.error(message)
        if self.on_error:
            self.on_error(message)

    # ---------- reading ----------
    def refresh(self) -> bool:
        try:
            self.tasks = self.search.apply(self.store, self.query)
        except TaskAppError as exc:
            self._report("Cannot load tasks", exc)
            return False
        return True

    def set_query(self, text: Optional[str]) -> bool:
        logger.debug("searchText: %r", text)
        previous = self.query
        self.query = text or ""
        if self.refresh():
            return True
        self.query = previous
        return False

    def commit_query(self, text: Optional[str]) -> bool:
        """Apply ``text`` and hand it to ``on_query_committed`` if it loaded."""

        if not self.set_query(text):
            return False
        if self.on_query_committed:
            try:
                self.on_query_committed(self.query)
            except OSError as exc:
                logger.warning("Cannot remember search text: %s", exc)
        return True

    def row_text(self, task: Task) -> Tuple[str, str]:
        return task.title, format_row_date(task.date, UI.row_date_format)

    # ---------- editing ----------
    def new_draft(self) -> Task:
        return Task(date=storage_now())

    def save(self, draft: Task, **changes: Any) -> Optional[Task]:
        """Create ``draft`` (id unset or unknown) or update the stored task."""

        try:
            if draft.id is not None and self.store.get(draft.id) is not None:
                saved = self.store.update(draft.id, **changes)
            else:
                for key, value in changes.items():
                    setattr(draft, key, value)
                saved = self.store.create(draft)
        except (TaskAppError, ValueError) as exc:
            self._report("Cannot save task", exc)
            return None

        self._sync_notification(saved)
        self.refresh()
        return saved

    def delete(self, task_id: int) -> bool:
        try:
            removed = self.store.delete(task_id)
        except TaskAppError as exc:
            self._report("Cannot delete task", exc)
            return False
        self._log_pending()
        self.refresh()
        return removed

    # ---------- notifications ----------
    def _sync_notification(self, task: Task) -> None:
        if self.notifier is None:
            return
        fire_at: datetime = ensure_utc(task.date)
        try:
            if self.notifications_enabled and fire_at > utc_now():
                payload = {"title": task.title, "body": task.contents}
                self.notifier.schedule(task.id, fire_at, payload)
            else:
                self.notifier.cancel(task.id)
        except TaskAppError as exc:
            logger.warning("Notification for task %s not updated: %s", task.id, exc)

    def _log_pending(self) -> None:
        pending = getattr(self.notifier, "pending", None)
        if pending is None or not logger.isEnabledFor(logging.DEBUG):
            return
        try:
            for alert in pending():
                logger.debug("pending notification: %s", alert)
        except TaskAppError as exc:
            logger.debug("Cannot list pending notifications: %s", exc)


__all__ = ["TaskListPresenter"]
