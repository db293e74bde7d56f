# backend/livadai/core/enums.py
"""
Core enums for the LivadAI booking rules service.

Booking and experience states live next to their snapshots in
``livadai.models``; the enums here describe who is asking and what they
are asking to do.
"""

from enum import Enum
from typing import Optional


class ActorRole(str, Enum):
    """Roles an actor can hold when querying eligibility."""

    EXPLORER = "EXPLORER"
    HOST = "HOST"

    @classmethod
    def parse(cls, value: object) -> Optional["ActorRole"]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class BookingAction(str, Enum):
    """Actions the eligibility evaluator can gate."""

    DISPUTE = "dispute"
    CONFIRM_ATTENDANCE = "confirm_attendance"
    CANCEL_BY_HOST = "cancel_by_host"
    MARK_NO_SHOW = "mark_no_show"
    REVIEW = "review"
    CHAT = "chat"
