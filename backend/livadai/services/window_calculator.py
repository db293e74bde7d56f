"""
Window calculator: effective start/end instants and the windows derived from them.

Every window is a closed interval (``start <= now <= end``) and is recomputed
against the ``now`` handed in by the caller; nothing here reads the clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional

from ..schemas.booking import BookingSnapshot, ExperienceSnapshot
from .window_policy import DEFAULT_WINDOW_POLICY, WindowPolicy


class EndSource(str, Enum):
    """Which rule produced the effective end."""

    EXPLICIT = "explicit"
    DURATION = "duration"
    DAY_FALLBACK = "day_fallback"


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: Optional[datetime] = None  # None means open ended

    def contains(self, now: datetime) -> bool:
        if now < self.start:
            return False
        return self.end is None or now <= self.end

    @property
    def is_open_ended(self) -> bool:
        return self.end is None

    def to_payload(self) -> dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat() if self.end is not None else None,
        }


@dataclass(frozen=True)
class Schedule:
    """Resolved start/end for one experience occurrence."""

    start: Optional[datetime]
    end: Optional[datetime]
    end_source: Optional[EndSource]


@dataclass(frozen=True)
class BookingWindows:
    schedule: Schedule
    dispute: Optional[TimeWindow]
    attendance: Optional[TimeWindow]
    review: Optional[TimeWindow]
    history_visible_from: Optional[datetime]

    def to_payload(self) -> dict[str, Any]:
        def _window(window: Optional[TimeWindow]) -> Optional[dict[str, Any]]:
            return window.to_payload() if window is not None else None

        schedule = self.schedule
        return {
            "effective_start": schedule.start.isoformat() if schedule.start else None,
            "effective_end": schedule.end.isoformat() if schedule.end else None,
            "end_source": schedule.end_source.value if schedule.end_source else None,
            "dispute": _window(self.dispute),
            "attendance": _window(self.attendance),
            "review": _window(self.review),
            "history_visible_from": (
                self.history_visible_from.isoformat() if self.history_visible_from else None
            ),
        }


def _shift(instant: Optional[datetime], delta: timedelta) -> Optional[datetime]:
    if instant is None:
        return None
    try:
        return instant + delta
    except OverflowError:
        return None


def effective_start(
    experience: ExperienceSnapshot, legacy_date: Optional[datetime] = None
) -> Optional[datetime]:
    """Experience start, falling back to the booking's legacy ``date`` field."""
    return experience.starts_at or legacy_date


def resolve_schedule(
    experience: ExperienceSnapshot,
    legacy_date: Optional[datetime] = None,
    policy: WindowPolicy = DEFAULT_WINDOW_POLICY,
) -> Schedule:
    """
    Resolve the effective end in strict priority order.

    1. An explicit end wins, whatever the duration says.
    2. Start plus a positive duration.
    3. Start plus the single-day fallback.
    4. Otherwise there is no end and every dependent window is unavailable.
    """
    start = effective_start(experience, legacy_date)
    if experience.ends_at is not None:
        return Schedule(start=start, end=experience.ends_at, end_source=EndSource.EXPLICIT)
    if start is None:
        return Schedule(start=None, end=None, end_source=None)

    duration = experience.duration_minutes
    if duration is not None and duration > 0:
        try:
            end = _shift(start, timedelta(minutes=duration))
        except OverflowError:
            end = None
        return Schedule(start=start, end=end, end_source=EndSource.DURATION if end else None)
    end = _shift(start, policy.single_day_fallback)
    return Schedule(start=start, end=end, end_source=EndSource.DAY_FALLBACK if end else None)


def effective_end(
    experience: ExperienceSnapshot,
    legacy_date: Optional[datetime] = None,
    policy: WindowPolicy = DEFAULT_WINDOW_POLICY,
) -> Optional[datetime]:
    return resolve_schedule(experience, legacy_date, policy).end


def dispute_window(
    schedule: Schedule, policy: WindowPolicy = DEFAULT_WINDOW_POLICY
) -> Optional[TimeWindow]:
    opens = _shift(schedule.end, policy.dispute_opens_after)
    closes = _shift(schedule.end, policy.dispute_closes_after)
    if opens is None or closes is None:
        return None
    return TimeWindow(start=opens, end=closes)


def attendance_window(
    schedule: Schedule, policy: WindowPolicy = DEFAULT_WINDOW_POLICY
) -> Optional[TimeWindow]:
    opens = _shift(schedule.start, policy.attendance_opens_after)
    closes = _shift(schedule.end, policy.attendance_closes_after)
    if opens is None or closes is None:
        return None
    return TimeWindow(start=opens, end=closes)


def review_window(
    schedule: Schedule, policy: WindowPolicy = DEFAULT_WINDOW_POLICY
) -> Optional[TimeWindow]:
    opens = _shift(schedule.end, policy.review_opens_after)
    if opens is None:
        return None
    return TimeWindow(start=opens)


def history_visible_from(
    schedule: Schedule, policy: WindowPolicy = DEFAULT_WINDOW_POLICY
) -> Optional[datetime]:
    """Instant after which a completed booking moves from upcoming to history."""
    return _shift(schedule.end, policy.history_visible_after)


def compute_booking_windows(
    booking: BookingSnapshot, policy: WindowPolicy = DEFAULT_WINDOW_POLICY
) -> BookingWindows:
    schedule = resolve_schedule(booking.experience, booking.date, policy)
    return BookingWindows(
        schedule=schedule,
        dispute=dispute_window(schedule, policy),
        attendance=attendance_window(schedule, policy),
        review=review_window(schedule, policy),
        history_visible_from=history_visible_from(schedule, policy),
    )
