"""ORM models exposed by the TaskApp application."""
from .task import MUTABLE_FIELDS, Task
from .notification import PendingNotification

__all__ = ["MUTABLE_FIELDS", "PendingNotification", "Task"]
