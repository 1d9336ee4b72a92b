# taskapp/services/search.py
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, func
from sqlalchemy.sql.elements import ColumnElement

from core.errors import InvalidPredicate
from models.task import Task

if TYPE_CHECKING:
    from services.task_store import TaskStore

logger = logging.getLogger("taskapp.search")


class SearchFilter:
    """Turn search-bar text into a store query.

    Empty text means "no filter". Anything else is a case-insensitive
    substring match on one text column (``category`` by default); ``%`` and
    ``_`` in the text match literally.
    """

    SEARCHABLE = ("title", "category", "contents")

    def __init__(self, field: str = "category"):
        if field not in self.SEARCHABLE:
            raise ValueError(f"Cannot search on {field!r}")
        self.field = field

    def _check(self, text) -> str:
        if text is None:
            return ""
        if not isinstance(text, str):
            raise InvalidPredicate(f"Search text must be a string, got {type(text).__name__}")
        return text

    def build(self, text: Optional[str]) -> Optional[ColumnElement]:
        text = self._check(text)
        if not text:
            return None
        column = getattr(Task, self.field)
        return func.py_casefold(column, type_=String).contains(text.casefold(), autoescape=True)

    def matches(self, task: Task, text: Optional[str]) -> bool:
        text = self._check(text)
        if not text:
            return True
        value = getattr(task, self.field) or ""
        return text.casefold() in value.casefold()

    def apply(self, store: "TaskStore", text: Optional[str]) -> List[Task]:
        predicate = self.build(text)
        if predicate is None:
            return store.list()
        results = store.find(predicate)
        logger.debug("Search %r on %s matched %d task(s)", text, self.field, len(results))
        return results


__all__ = ["SearchFilter"]
