"""Shared utility functions."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo


def utc_now() -> datetime:
    """Return aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime, default_tz: tzinfo = timezone.utc) -> datetime:
    """Normalize datetime to UTC, reading naive values in ``default_tz``."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=default_tz)
    return dt.astimezone(timezone.utc)


def to_utc_iso(value: str, local_tz: tzinfo = timezone.utc) -> str:
    """Convert a ``YYYY-MM-DDTHH:MM`` input to ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Raises ``ValueError`` when the value is not an ISO-8601 date/time.
    """
    parsed = ensure_utc(datetime.fromisoformat(value.strip()), local_tz)
    return parsed.strftime("%Y-%m-%dT%H:%M:%S.") + f"{parsed.microsecond // 1000:03d}Z"
