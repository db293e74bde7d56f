"""
Split a user's bookings into the "upcoming" and "history" tabs.

One rule for hosts and explorers alike: historical statuses go to history,
except completed bookings, which stay upcoming until their history
visibility instant (the same instant the review window opens).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Optional

from ..models.booking import is_completed, is_historical
from ..schemas.booking import BookingSnapshot
from ..utils.time_utils import ensure_aware
from .window_calculator import history_visible_from, resolve_schedule
from .window_policy import DEFAULT_WINDOW_POLICY, WindowPolicy


@dataclass(frozen=True)
class BookingPartition:
    upcoming: tuple[BookingSnapshot, ...]
    history: tuple[BookingSnapshot, ...]

    def to_payload(self) -> dict[str, Any]:
        return {
            "upcoming": [booking.id for booking in self.upcoming],
            "history": [booking.id for booking in self.history],
        }


def is_in_history(
    booking: BookingSnapshot,
    now: datetime,
    policy: WindowPolicy = DEFAULT_WINDOW_POLICY,
) -> bool:
    if not is_historical(booking.status):
        return False
    if not is_completed(booking.status):
        return True
    visible_from = history_visible_from(
        resolve_schedule(booking.experience, booking.date, policy), policy
    )
    # Without a computable end there is nothing to wait for
    if visible_from is None:
        return True
    return ensure_aware(now) > visible_from


def partition_bookings(
    bookings: Iterable[BookingSnapshot],
    now: datetime,
    *,
    explorer_id: Optional[str] = None,
    policy: WindowPolicy = DEFAULT_WINDOW_POLICY,
) -> BookingPartition:
    """
    Partition bookings, preserving input order within each tab.

    When ``explorer_id`` is given, only that explorer's own bookings are kept.
    """
    upcoming: List[BookingSnapshot] = []
    history: List[BookingSnapshot] = []
    for booking in bookings:
        if explorer_id is not None and booking.explorer_id != explorer_id:
            continue
        if is_in_history(booking, now, policy):
            history.append(booking)
        else:
            upcoming.append(booking)
    return BookingPartition(upcoming=tuple(upcoming), history=tuple(history))
