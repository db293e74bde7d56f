# backend/livadai/models/booking.py
"""
Booking lifecycle states and their classification.

Statuses arrive from the API as free-form strings. Everything in this module
classifies a value without raising: an unrecognized status is neither
actionable nor historical and gates every status-dependent action off.
"""

from __future__ import annotations

from enum import Enum
import logging
from typing import FrozenSet, Optional

from ..core.metrics import UNKNOWN_STATUS_TOTAL

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "PENDING"  # Created, payment in progress
    PAID = "PAID"
    DEPOSIT_PAID = "DEPOSIT_PAID"  # Free experiences hold a refundable deposit
    PENDING_ATTENDANCE = "PENDING_ATTENDANCE"  # Awaiting host confirmation
    COMPLETED = "COMPLETED"
    AUTO_COMPLETED = "AUTO_COMPLETED"  # Host took no action within the grace period
    NO_SHOW = "NO_SHOW"
    CANCELLED = "CANCELLED"
    DISPUTED = "DISPUTED"
    DISPUTE_WON = "DISPUTE_WON"
    DISPUTE_LOST = "DISPUTE_LOST"
    REFUNDED = "REFUNDED"


class StatusBucket(str, Enum):
    """Coarse classification used by list views and the rollup."""

    ACTIONABLE = "actionable"
    HISTORICAL = "historical"
    DISPUTED = "disputed"
    OTHER = "other"
    UNKNOWN = "unknown"


class BookingBadge(str, Enum):
    """Badge shown next to a booking in the host's list."""

    DISPUTED = "DISPUTED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"
    ACTIVE = "ACTIVE"
    UPCOMING = "UPCOMING"


ACTIONABLE_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.PAID, BookingStatus.DEPOSIT_PAID, BookingStatus.PENDING_ATTENDANCE}
)
HISTORICAL_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {
        BookingStatus.COMPLETED,
        BookingStatus.AUTO_COMPLETED,
        BookingStatus.CANCELLED,
        BookingStatus.REFUNDED,
    }
)
DISPUTED_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.DISPUTED, BookingStatus.DISPUTE_WON, BookingStatus.DISPUTE_LOST}
)
COMPLETED_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.COMPLETED, BookingStatus.AUTO_COMPLETED}
)
PAID_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.PAID, BookingStatus.DEPOSIT_PAID}
)
# Seats held by these bookings have been given back
RELEASED_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.CANCELLED, BookingStatus.REFUNDED}
)
TERMINAL_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {
        BookingStatus.COMPLETED,
        BookingStatus.AUTO_COMPLETED,
        BookingStatus.NO_SHOW,
        BookingStatus.CANCELLED,
        BookingStatus.DISPUTE_WON,
        BookingStatus.DISPUTE_LOST,
        BookingStatus.REFUNDED,
    }
)
CHAT_STATUSES: FrozenSet[BookingStatus] = PAID_STATUSES | COMPLETED_STATUSES
DISPUTE_BLOCKING_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.DISPUTED, BookingStatus.CANCELLED}
)


def parse_booking_status(value: object) -> Optional[BookingStatus]:
    """Return the matching status, or None when the value is not a known state."""

    if isinstance(value, BookingStatus):
        return value
    if not isinstance(value, str):
        return None
    normalized = value.strip().upper()
    if not normalized:
        return None
    try:
        return BookingStatus(normalized)
    except ValueError:
        UNKNOWN_STATUS_TOTAL.inc()
        logger.debug("Unrecognized booking status %r", value)
        return None


def _in(value: object, statuses: FrozenSet[BookingStatus]) -> bool:
    parsed = parse_booking_status(value)
    return parsed is not None and parsed in statuses


def is_actionable(value: object) -> bool:
    return _in(value, ACTIONABLE_STATUSES)


def is_historical(value: object) -> bool:
    return _in(value, HISTORICAL_STATUSES)


def is_disputed(value: object) -> bool:
    return _in(value, DISPUTED_STATUSES)


def is_completed(value: object) -> bool:
    """COMPLETED and AUTO_COMPLETED are interchangeable for every check."""
    return _in(value, COMPLETED_STATUSES)


def is_terminal(value: object) -> bool:
    return _in(value, TERMINAL_STATUSES)


def is_released(value: object) -> bool:
    return _in(value, RELEASED_STATUSES)


def status_bucket(value: object) -> StatusBucket:
    parsed = parse_booking_status(value)
    if parsed is None:
        return StatusBucket.UNKNOWN
    if parsed in ACTIONABLE_STATUSES:
        return StatusBucket.ACTIONABLE
    if parsed in HISTORICAL_STATUSES:
        return StatusBucket.HISTORICAL
    if parsed in DISPUTED_STATUSES:
        return StatusBucket.DISPUTED
    return StatusBucket.OTHER


def booking_badge(value: object) -> BookingBadge:
    parsed = parse_booking_status(value)
    if parsed in DISPUTED_STATUSES:
        return BookingBadge.DISPUTED
    if parsed in COMPLETED_STATUSES:
        return BookingBadge.COMPLETED
    if parsed is BookingStatus.NO_SHOW:
        return BookingBadge.NO_SHOW
    if parsed in ACTIONABLE_STATUSES:
        return BookingBadge.ACTIVE
    return BookingBadge.UPCOMING
