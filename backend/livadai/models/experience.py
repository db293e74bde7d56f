# backend/livadai/models/experience.py
from __future__ import annotations

from enum import Enum
from typing import Optional


class ActivityType(str, Enum):
    """How many explorers an experience can seat."""

    INDIVIDUAL = "INDIVIDUAL"  # Exactly one seat
    GROUP = "GROUP"  # Bounded by max_participants

    @classmethod
    def parse(cls, value: object) -> Optional["ActivityType"]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class ExperienceStatus(str, Enum):
    """Experience states as stored by the API (mixed case on the wire)."""

    ACTIVE = "active"
    CANCELLED = "cancelled"
    DISABLED = "DISABLED"  # Paused by the host

    @classmethod
    def parse(cls, value: object) -> Optional["ExperienceStatus"]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return None


class ListingStatus(str, Enum):
    """Badge shown on a host's experience list."""

    ACTIVE = "ACTIVE"
    SOLD_OUT = "SOLD_OUT"
    CANCELLED = "CANCELLED"
    PAUSED = "PAUSED"
