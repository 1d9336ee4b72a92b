"""Ad-hoc database migrations for TaskApp."""

from __future__ import annotations

from sqlalchemy import text


def _column_exists(conn, table: str, column: str) -> bool:
    result = conn.execute(text(f"PRAGMA table_info('{table}')"))
    return any(row[1] == column for row in result)


def ensure_task_columns(conn) -> None:
    # early builds only stored title, contents and date
    columns = {
        "title": "TEXT NOT NULL DEFAULT ''",
        "category": "TEXT NOT NULL DEFAULT ''",
        "contents": "TEXT NOT NULL DEFAULT ''",
    }
    for name, ddl_type in columns.items():
        if not _column_exists(conn, "task", name):
            conn.execute(text(f"ALTER TABLE task ADD COLUMN {name} {ddl_type}"))


def ensure_indexes(conn) -> None:
    conn.execute(text("CREATE INDEX IF NOT EXISTS ix_task_date ON task (date)"))
    conn.execute(
        text(
            """
            CREATE INDEX IF NOT EXISTS ix_pending_notification_fire_at
            ON pending_notification (fire_at)
            """
        )
    )


def run_all(engine) -> None:
    with engine.begin() as conn:
        ensure_task_columns(conn)
        ensure_indexes(conn)


__all__ = ["ensure_indexes", "ensure_task_columns", "run_all"]
