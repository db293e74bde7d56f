"""Shared helpers for backend test suites."""

from .snapshots import (
    EXPLORER_ID,
    HOST_ID,
    NOW,
    booking_payload,
    ended_booking_payload,
    experience_payload,
)

__all__ = [
    "EXPLORER_ID",
    "HOST_ID",
    "NOW",
    "booking_payload",
    "ended_booking_payload",
    "experience_payload",
]
