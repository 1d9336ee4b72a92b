"""Exceptions raised by the task store and its collaborators."""
from __future__ import annotations

from typing import Optional


class TaskAppError(Exception):
    """Base class for every recoverable application error."""


class StorageError(TaskAppError):
    """The embedded database could not serve a request."""


class StorageUnavailable(StorageError):
    """The database file cannot be opened or read."""


class TransactionFailed(StorageError):
    """A write could not be committed; the transaction was rolled back."""


class NotFound(TaskAppError, LookupError):
    def __init__(self, task_id: int, message: Optional[str] = None):
        self.task_id = task_id
        super().__init__(message or f"Task {task_id} not found")


class InvalidPredicate(TaskAppError, ValueError):
    """Search input could not be turned into a query."""


class NotificationError(TaskAppError):
    """The local notification queue could not be updated."""


__all__ = [
    "InvalidPredicate",
    "NotFound",
    "NotificationError",
    "StorageError",
    "StorageUnavailable",
    "TaskAppError",
    "TransactionFailed",
]
