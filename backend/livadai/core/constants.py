"""Application-wide constants for the LivadAI booking rules service."""

from __future__ import annotations

BRAND_NAME = "LivadAI"

API_TITLE = f"{BRAND_NAME} Booking Rules API"
API_DESCRIPTION = (
    "Booking lifecycle and time-windowed eligibility rules for explorers and hosts."
)
API_VERSION = "1.0.0"
API_V1_PREFIX = "/api/v1"

# Window defaults (minutes / hours after the experience start or end)
DISPUTE_OPENS_AFTER_MINUTES = 15
DISPUTE_CLOSES_AFTER_HOURS = 72
ATTENDANCE_OPENS_AFTER_MINUTES = 15
ATTENDANCE_CLOSES_AFTER_HOURS = 48
REVIEW_OPENS_AFTER_HOURS = 48
HISTORY_VISIBLE_AFTER_HOURS = 48

# Used when an experience has a start but neither an end nor a duration
SINGLE_DAY_FALLBACK_HOURS = 24

# Group key for bookings whose experience carries no identifier
UNKNOWN_EXPERIENCE_KEY = "unknown"

# Query limits
MAX_BATCH_BOOKINGS = 500
