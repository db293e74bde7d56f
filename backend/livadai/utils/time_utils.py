from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current instant, timezone-aware in UTC."""
    return datetime.now(timezone.utc)


def ensure_aware(dt: datetime) -> datetime:
    """
    Attach UTC to naive datetimes.

    Aware datetimes are returned unchanged; comparisons between aware values
    are offset-correct, so no conversion is needed.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
