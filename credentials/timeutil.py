from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(dt: datetime) -> str:
    return as_utc(dt).isoformat(timespec='microseconds').replace('+00:00', 'Z')


def from_iso(s: str) -> datetime:
    return as_utc(datetime.fromisoformat(s.replace('Z', '+00:00')))


def optional_iso(dt: Optional[datetime]) -> Optional[str]:
    return None if dt is None else to_iso(dt)
