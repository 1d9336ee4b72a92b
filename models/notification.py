"""SQLModel table for scheduled local notifications."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

from utils.datetime_utils import storage_now


class PendingNotification(SQLModel, table=True):
    __tablename__ = "pending_notification"

    identifier: str = Field(primary_key=True)
    task_id: int = Field(index=True)
    fire_at: datetime = Field(sa_column=Column(DateTime(), index=True, nullable=False))
    title: str = ""
    body: str = ""
    created_at: datetime = Field(
        default_factory=storage_now,
        sa_column=Column(DateTime(), nullable=False),
    )


__all__ = ["PendingNotification"]
