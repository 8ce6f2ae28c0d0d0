"""Datetime normalization shared by the models, repositories and schemas.

Every instant handled by the planner is a timezone-aware UTC datetime. Naive
values coming from clients or from older rows are interpreted as UTC rather
than local time so that comparisons never mix aware and naive values.
"""

from __future__ import annotations

import datetime
from typing import Optional


def ensure_utc(value: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    """Return ``value`` as an aware UTC datetime (``None`` passes through)."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def to_storage(value: Optional[datetime.datetime]) -> Optional[str]:
    """Serialize a datetime for a SQLite TEXT column."""

    normalized = ensure_utc(value)
    return normalized.isoformat() if normalized is not None else None


def from_storage(value: Optional[str]) -> Optional[datetime.datetime]:
    """Parse a stored timestamp, tolerating SQLite's ``YYYY-MM-DD HH:MM:SS`` form."""

    if not value:
        return None
    try:
        parsed = datetime.datetime.fromisoformat(value.replace(" ", "T"))
    except ValueError:
        return None
    return ensure_utc(parsed)


__all__ = ["ensure_utc", "utc_now", "to_storage", "from_storage"]
