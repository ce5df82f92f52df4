"""Timezone helpers. All stored timestamps are UTC."""

from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize to tz-aware UTC (SQLite hands back naive datetimes)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_tz(name: str | None) -> tzinfo:
    return ZoneInfo(name) if name and name.upper() != "UTC" else timezone.utc


def local_day(value: datetime | date, tz: tzinfo = timezone.utc) -> date:
    """Calendar day of ``value`` in ``tz``; plain dates pass through."""
    if isinstance(value, datetime):
        return as_utc(value).astimezone(tz).date()
    return value
