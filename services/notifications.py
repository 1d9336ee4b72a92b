"""Local notification queue keyed by task id."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from core.errors import NotificationError
from models.notification import PendingNotification
from storage.db import SessionFactory
from utils.datetime_utils import ensure_utc, storage_now, to_storage

logger = logging.getLogger("taskapp.notifications")


def notification_identifier(task_id: int) -> str:
    return str(task_id)


class NotificationScheduler(Protocol):
    def schedule(self, task_id: int, fire_time: datetime, payload: Mapping[str, Any]) -> None:
        ...

    def cancel(self, task_id: int) -> bool:
        ...


@dataclass(frozen=True)
class ScheduledAlert:
    identifier: str
    task_id: int
    fire_at: datetime  # aware UTC
    title: str
    body: str


def _to_alert(row: PendingNotification) -> ScheduledAlert:
    return ScheduledAlert(
        identifier=row.identifier,
        task_id=row.task_id,
        fire_at=ensure_utc(row.fire_at),
        title=row.title,
        body=row.body,
    )


class LocalNotificationCenter:
    """Pending alerts stored next to the tasks.

    Scheduling with an identifier that is already pending replaces it.
    """

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    def schedule(self, task_id: int, fire_time: datetime, payload: Mapping[str, Any]) -> None:
        identifier = notification_identifier(task_id)
        try:
            with self._session_factory() as session:
                row = session.get(PendingNotification, identifier)
                if row is None:
                    row = PendingNotification(identifier=identifier, task_id=task_id, fire_at=storage_now())
                row.fire_at = to_storage(fire_time)
                row.title = str(payload.get("title") or "")
                row.body = str(payload.get("body") or "")
                row.created_at = storage_now()
                session.add(row)
                session.commit()
        except SQLAlchemyError as exc:
            raise NotificationError(f"Cannot schedule notification {identifier}: {exc}") from exc
        logger.info("Notification %s scheduled at %s", identifier, fire_time)

    def cancel(self, task_id: int) -> bool:
        identifier = notification_identifier(task_id)
        try:
            with self._session_factory() as session:
                row = session.get(PendingNotification, identifier)
                if row is None:
                    return False
                session.delete(row)
                session.commit()
        except SQLAlchemyError as exc:
            raise NotificationError(f"Cannot cancel notification {identifier}: {exc}") from exc
        logger.info("Notification %s cancelled", identifier)
        return True

    def pending(self) -> List[ScheduledAlert]:
        try:
            with self._session_factory() as session:
                stmt = select(PendingNotification).order_by(
                    PendingNotification.fire_at.asc(), PendingNotification.identifier.asc()
                )
                return [_to_alert(row) for row in session.exec(stmt)]
        except SQLAlchemyError as exc:
            raise NotificationError(f"Cannot read pending notifications: {exc}") from exc

    def pop_due(self, now: Optional[datetime] = None) -> List[ScheduledAlert]:
        """Return alerts whose time has come and drop them from the queue."""

        cutoff = to_storage(now) if now is not None else storage_now()
        try:
            with self._session_factory() as session:
                stmt = (
                    select(PendingNotification)
                    .where(PendingNotification.fire_at <= cutoff)
                    .order_by(PendingNotification.fire_at.asc())
                )
                rows = list(session.exec(stmt))
                alerts = [_to_alert(row) for row in rows]
                for row in rows:
                    session.delete(row)
                if rows:
                    session.commit()
        except SQLAlchemyError as exc:
            raise NotificationError(f"Cannot deliver notifications: {exc}") from exc
        for alert in alerts:
            logger.info("Notification %s delivered", alert.identifier)
        return alerts


__all__ = [
    "LocalNotificationCenter",
    "NotificationScheduler",
    "ScheduledAlert",
    "notification_identifier",
]
