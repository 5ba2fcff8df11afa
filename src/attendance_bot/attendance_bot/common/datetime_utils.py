from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local(tz: ZoneInfo) -> datetime:
    """Current time in the operating timezone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(tz)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes coming back from MySQL as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_date_of(value: datetime, tz: ZoneInfo) -> date:
    return as_utc(value).astimezone(tz).date()


def format_hhmm(value: datetime, tz: ZoneInfo) -> str:
    return as_utc(value).astimezone(tz).strftime("%H:%M")


def to_utc_naive(value: datetime) -> datetime:
    """DATETIME columns hold naive UTC."""
    return as_utc(value).replace(tzinfo=None)
