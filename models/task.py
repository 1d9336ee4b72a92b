# taskapp/models/task.py
from typing import Optional
from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field

from utils.datetime_utils import storage_now


MUTABLE_FIELDS = ("title", "category", "contents", "date")


class Task(SQLModel, table=True):
    # assigned by TaskStore: max(id) + 1, or 0 for an empty store
    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        sa_column_kwargs={"autoincrement": False},
    )
    title: str = ""
    category: str = ""
    contents: str = ""
    # plain SQLAlchemy DateTime: values are naive UTC
    date: datetime = Field(
        default_factory=storage_now,
        sa_column=Column(DateTime(), index=True, nullable=False),
    )
