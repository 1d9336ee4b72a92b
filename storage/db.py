# taskapp/storage/db.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Session, create_engine

from core.errors import StorageUnavailable

# Ensure SQLModel metadata is populated
import models.task  # noqa: F401
import models.notification  # noqa: F401
from storage import migrations

SessionFactory = Callable[[], Session]

logger = logging.getLogger("taskapp.db")


def _casefold(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return str(value).casefold()


def create_db_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine whose connections know the ``py_casefold`` function.

    SQLite's ``lower()`` only folds ASCII; search needs full Unicode folding.
    """

    engine = create_engine(url, echo=echo)

    @event.listens_for(engine, "connect")
    def _register_functions(dbapi_connection, _record):
        dbapi_connection.create_function("py_casefold", 1, _casefold, deterministic=True)

    return engine


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)
    migrations.run_all(engine)


def open_database(path: str | Path, *, echo: bool = False) -> Engine:
    """Open (and if needed create) the task database at ``path``.

    Raises :class:`StorageUnavailable` when the file cannot be used.
    """

    db_path = Path(path)
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_db_engine(f"sqlite:///{db_path.as_posix()}", echo=echo)
        init_db(engine)
    except (OSError, SQLAlchemyError) as exc:
        logger.error("Cannot open database %s: %s", db_path, exc)
        raise StorageUnavailable(f"Cannot open database {db_path}: {exc}") from exc
    logger.info("Database ready at %s", db_path)
    return engine


def session_factory(engine: Engine) -> SessionFactory:
    def factory() -> Session:
        return Session(engine)

    return factory


__all__ = [
    "SessionFactory",
    "create_db_engine",
    "init_db",
    "open_database",
    "session_factory",
]
