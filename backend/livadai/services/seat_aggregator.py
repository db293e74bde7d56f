"""
Seat and capacity aggregation for a host's grouped booking view.

Bookings are counted exactly as the caller hands them over. Cancelled and
refunded bookings still hold their seats in the totals unless the caller asks
for them to be left out with ``include_released=False``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.constants import UNKNOWN_EXPERIENCE_KEY
from ..models.booking import (
    COMPLETED_STATUSES,
    DISPUTED_STATUSES,
    PAID_STATUSES,
    BookingStatus,
    is_released,
    parse_booking_status,
)
from ..models.experience import ActivityType
from ..schemas.booking import BookingSnapshot, ExperienceSnapshot
from .window_calculator import effective_start


@dataclass(frozen=True)
class SeatSummary:
    booked_seats: int
    total_seats: int
    capacity_known: bool

    @property
    def remaining_seats(self) -> int:
        return max(0, self.total_seats - self.booked_seats)

    @property
    def is_full(self) -> bool:
        return self.total_seats > 0 and self.booked_seats >= self.total_seats

    def to_payload(self) -> dict[str, Any]:
        return {
            "booked_seats": self.booked_seats,
            "total_seats": self.total_seats,
            "remaining_seats": self.remaining_seats,
            "capacity_known": self.capacity_known,
            "is_full": self.is_full,
        }


@dataclass(frozen=True)
class ExperienceBookingGroup:
    key: str
    experience: ExperienceSnapshot
    bookings: tuple[BookingSnapshot, ...]
    seats: SeatSummary
    rollup: BookingStatus
    starts_at: Optional[datetime] = field(default=None)


def booked_seats(bookings: Iterable[BookingSnapshot], *, include_released: bool = True) -> int:
    return sum(
        booking.quantity
        for booking in bookings
        if include_released or not is_released(booking.status)
    )


def total_seats(experience: ExperienceSnapshot, booked: int) -> tuple[int, bool]:
    """
    Return ``(total, capacity_known)``.

    Capacity comes from ``max_participants`` when numeric, then from
    ``remaining_spots + booked``. Without either, an individual experience has
    one seat and anything else is reported as exactly what is booked.
    """
    if experience.max_participants is not None:
        return experience.max_participants, True
    if experience.remaining_spots is not None:
        return experience.remaining_spots + booked, True
    if experience.activity_type is ActivityType.INDIVIDUAL:
        return 1, True
    return booked, False


def summarize_seats(
    experience: ExperienceSnapshot,
    bookings: Iterable[BookingSnapshot],
    *,
    include_released: bool = True,
) -> SeatSummary:
    booked = booked_seats(bookings, include_released=include_released)
    total, known = total_seats(experience, booked)
    return SeatSummary(booked_seats=booked, total_seats=total, capacity_known=known)


def rollup_status(bookings: Iterable[BookingSnapshot]) -> BookingStatus:
    """First matching rule wins; the order is a priority, not a vote."""
    statuses = {parse_booking_status(booking.status) for booking in bookings}
    statuses.discard(None)
    if statuses & DISPUTED_STATUSES:
        return BookingStatus.DISPUTED
    if BookingStatus.PENDING_ATTENDANCE in statuses:
        return BookingStatus.PENDING_ATTENDANCE
    if statuses & PAID_STATUSES:
        return BookingStatus.PAID
    if BookingStatus.NO_SHOW in statuses:
        return BookingStatus.NO_SHOW
    if statuses & COMPLETED_STATUSES:
        return BookingStatus.COMPLETED
    return BookingStatus.PENDING


def group_bookings_by_experience(
    bookings: Sequence[BookingSnapshot],
    *,
    include_released: bool = True,
) -> List[ExperienceBookingGroup]:
    """Group bookings per experience, newest start first and undated groups last."""
    grouped: Dict[str, List[BookingSnapshot]] = {}
    for booking in bookings:
        grouped.setdefault(booking.experience_key or UNKNOWN_EXPERIENCE_KEY, []).append(booking)

    groups: List[ExperienceBookingGroup] = []
    for key, members in grouped.items():
        experience = members[0].experience
        groups.append(
            ExperienceBookingGroup(
                key=key,
                experience=experience,
                bookings=tuple(members),
                seats=summarize_seats(experience, members, include_released=include_released),
                rollup=rollup_status(members),
                starts_at=effective_start(experience, members[0].date),
            )
        )

    dated = [group for group in groups if group.starts_at is not None]
    undated = [group for group in groups if group.starts_at is None]
    # Stable sort keeps insertion order for equal starts
    dated.sort(key=lambda group: group.starts_at, reverse=True)  # type: ignore[arg-type,return-value]
    return dated + undated
