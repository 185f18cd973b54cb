"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def as_utc(ts: datetime) -> datetime:
    """Treat naive timestamps as UTC; convert aware ones to UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def is_past(ts: datetime | None, now: datetime | None = None) -> bool:
    """True if ts is set and strictly before now."""
    if ts is None:
        return False
    return as_utc(ts) < as_utc(now or utc_now())
