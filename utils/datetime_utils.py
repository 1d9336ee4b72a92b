"""Utilities for UTC storage timestamps and user-facing date/time text."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Optional

UTC = timezone.utc


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_storage(dt: Optional[datetime]) -> Optional[datetime]:
    """Return ``dt`` as naive UTC, the form SQLite keeps.

    Naive input is assumed to be UTC already.
    """

    if dt is None:
        return None
    return ensure_utc(dt).replace(tzinfo=None)


def storage_now() -> datetime:
    return to_storage(utc_now())


def to_local(dt: Optional[datetime]) -> Optional[datetime]:
    """Convert a stored (naive UTC) timestamp to local wall-clock time."""

    if dt is None:
        return None
    return ensure_utc(dt).astimezone()


def local_to_storage(dt: Optional[datetime]) -> Optional[datetime]:
    """Interpret a naive ``dt`` as local wall-clock time and store it as UTC."""

    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return to_storage(dt)


def format_row_date(dt: Optional[datetime], fmt: str = "%Y-%m-%d %H:%M") -> str:
    local = to_local(dt)
    if local is None:
        return ""
    return local.strftime(fmt)


def parse_date_input(value: str | None) -> Optional[date]:
    """Parse ``DD.MM.YYYY`` or ISO ``YYYY-MM-DD`` text."""

    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    for fmt in ("%d.%m.%Y", "%Y-%m-%d", "%Y/%m/%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    # ISO datetime coming from a DatePicker
    if "T" in text:
        return parse_date_input(text.split("T", 1)[0])
    return None


def parse_time_input(value: str | None) -> Optional[time]:
    """Parse ``HH:MM`` (optionally with seconds) or short ``hhmm`` text."""

    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    for fmt in ("%H:%M", "%H:%M:%S", "%H.%M"):
        try:
            parsed = datetime.strptime(text, fmt)
            return time(parsed.hour, parsed.minute)
        except ValueError:
            continue

    if len(text) in {3, 4} and text.isdigit():
        hours, minutes = int(text[:-2]), int(text[-2:])
        if 0 <= hours <= 23 and 0 <= minutes <= 59:
            return time(hours, minutes)
    return None


def combine_local(raw_date: str | None, raw_time: str | None) -> Optional[datetime]:
    """Combine date and time inputs into a naive local datetime.

    A missing time means midnight, a missing date means today.
    """

    parsed_date = parse_date_input(raw_date)
    parsed_time = parse_time_input(raw_time)
    if parsed_date is None and parsed_time is None:
        return None
    return datetime.combine(parsed_date or date.today(), parsed_time or time(0, 0))


__all__ = [
    "UTC",
    "combine_local",
    "ensure_utc",
    "format_row_date",
    "local_to_storage",
    "parse_date_input",
    "parse_time_input",
    "storage_now",
    "to_local",
    "to_storage",
    "utc_now",
]
