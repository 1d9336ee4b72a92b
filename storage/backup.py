"""Daily copies of the task database."""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from shutil import copy2

logger = logging.getLogger("taskapp.backup")


def _backup_day(path: Path, prefix: str) -> date | None:
    stem = path.stem
    if not stem.startswith(prefix):
        return None
    try:
        return datetime.strptime(stem[len(prefix) :], "%Y-%m-%d").date()
    except ValueError:
        return None


def _rotate(backups: Path, db_file: Path, prefix: str, oldest_kept: date) -> int:
    removed = 0
    for candidate in backups.glob(f"{prefix}*{db_file.suffix}"):
        day = _backup_day(candidate, prefix)
        if day is None or day >= oldest_kept:
            continue
        try:
            candidate.unlink()
            removed += 1
        except OSError as exc:
            logger.warning("Cannot remove old backup %s: %s", candidate, exc)
    return removed


def ensure_daily_backup(
    db_path: str | Path,
    backup_dir: str | Path,
    *,
    keep_days: int = 7,
) -> Path | None:
    """Copy ``db_path`` to ``<stem>_<YYYY-MM-DD><suffix>`` once per day.

    Copies older than ``keep_days`` days are deleted. Returns the new copy,
    or ``None`` when nothing was written.
    """

    db_file = Path(db_path)
    if not db_file.exists():
        return None

    backups = Path(backup_dir)
    backups.mkdir(parents=True, exist_ok=True)

    today = datetime.now().date()
    prefix = f"{db_file.stem}_"
    destination = backups / f"{prefix}{today.isoformat()}{db_file.suffix}"

    created: Path | None = None
    if not destination.exists():
        copy2(db_file, destination)
        created = destination
        logger.info("Database backup written to %s", destination)

    if keep_days > 0:
        _rotate(backups, db_file, prefix, today - timedelta(days=keep_days - 1))

    return created


__all__ = ["ensure_daily_backup"]
