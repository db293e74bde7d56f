# backend/livadai/schemas/booking.py
"""
Booking and experience snapshots as handed over by the marketplace API.

The API is loose about field names (``startsAt`` vs ``startDate``, ``_id`` vs
``id``) and about value shapes (``explorer`` may be an id or an embedded user).
Snapshots normalize all of that up front. A value that cannot be read is
treated as missing rather than rejected, so a malformed date turns into an
unavailable window downstream instead of an error.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import math
from typing import Any, Dict, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from ..core.metrics import SNAPSHOT_FIELD_DROPPED_TOTAL
from ..models.booking import BookingStatus, parse_booking_status
from ..models.experience import ActivityType, ExperienceStatus

logger = logging.getLogger(__name__)

_INSTANT = TypeAdapter(datetime)


def parse_instant(value: Any) -> Optional[datetime]:
    """
    Read an instant from an API value.

    Accepts datetimes, ISO 8601 strings (with ``Z`` or an offset) and epoch
    milliseconds. Naive values are taken as UTC. Anything else is None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = _INSTANT.validate_python(text)
        except ValidationError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def coerce_id(value: Any) -> Optional[str]:
    """Return an identifier from a bare id or an embedded ``{_id|id}`` document."""
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        return coerce_id(value.get("_id")) or coerce_id(value.get("id"))
    return None


def _coerce_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    # "inf", "nan" and 1e999 parse as floats but are not usable durations
    return number if math.isfinite(number) else None


def _coerce_count(value: Any) -> Optional[int]:
    # Only real numbers count; the client checks ``typeof x === "number"``
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def _first_present(raw: Dict[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


def _record_drop(field: str, value: Any) -> None:
    SNAPSHOT_FIELD_DROPPED_TOTAL.labels(field=field).inc()
    logger.debug("Dropping unreadable %s value %r", field, value)


def _read_instant(raw: Dict[str, Any], field: str, keys: Iterable[str]) -> Optional[datetime]:
    value = _first_present(raw, keys)
    parsed = parse_instant(value)
    if value is not None and parsed is None:
        _record_drop(field, value)
    return parsed


class ExperienceSnapshot(BaseModel):
    """Experience fields the rules read. Everything is optional."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: Optional[str] = None
    title: Optional[str] = None
    host_id: Optional[str] = None
    activity_type: Optional[ActivityType] = None
    max_participants: Optional[int] = None
    remaining_spots: Optional[int] = None
    available_spots: Optional[int] = None
    booked_spots: Optional[int] = None
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    duration_minutes: Optional[float] = None
    status: Optional[str] = None
    is_active: Optional[bool] = None
    sold_out: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"id": coerce_id(data)}
        if not isinstance(data, dict):
            return data
        raw: Dict[str, Any] = data
        duration_raw = _first_present(raw, ("durationMinutes", "duration_minutes"))
        duration = _coerce_number(duration_raw)
        if duration_raw is not None and duration is None:
            _record_drop("duration_minutes", duration_raw)
        activity_raw = _first_present(raw, ("activityType", "activity_type"))
        is_active = _first_present(raw, ("isActive", "is_active"))
        return {
            "id": coerce_id(raw.get("_id")) or coerce_id(raw.get("id")),
            "title": raw.get("title") if isinstance(raw.get("title"), str) else None,
            "host_id": coerce_id(_first_present(raw, ("host", "hostId", "host_id"))),
            "activity_type": ActivityType.parse(activity_raw),
            "max_participants": _coerce_count(
                _first_present(raw, ("maxParticipants", "max_participants"))
            ),
            "remaining_spots": _coerce_count(
                _first_present(raw, ("remainingSpots", "remaining_spots"))
            ),
            "available_spots": _coerce_count(
                _first_present(raw, ("availableSpots", "available_spots"))
            ),
            "booked_spots": _coerce_count(_first_present(raw, ("bookedSpots", "booked_spots"))),
            "starts_at": _read_instant(raw, "starts_at", ("startsAt", "startDate", "starts_at")),
            "ends_at": _read_instant(raw, "ends_at", ("endsAt", "endDate", "ends_at")),
            "duration_minutes": duration,
            "status": raw.get("status") if isinstance(raw.get("status"), str) else None,
            "is_active": is_active if isinstance(is_active, bool) else None,
            "sold_out": bool(_first_present(raw, ("soldOut", "sold_out"))),
        }

    @property
    def parsed_status(self) -> Optional[ExperienceStatus]:
        return ExperienceStatus.parse(self.status)

    @property
    def is_group(self) -> bool:
        return self.activity_type is ActivityType.GROUP


class BookingSnapshot(BaseModel):
    """One explorer's reservation against one experience."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: Optional[str] = None
    experience: ExperienceSnapshot = Field(default_factory=ExperienceSnapshot)
    explorer_id: Optional[str] = None
    host_id: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    status: str = ""
    created_at: Optional[datetime] = None
    date: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        raw: Dict[str, Any] = data
        experience = raw.get("experience")
        if not isinstance(experience, (dict, str, ExperienceSnapshot)):
            experience = {}
        quantity = _coerce_count(raw.get("quantity"))
        status = raw.get("status")
        return {
            "id": coerce_id(raw.get("_id")) or coerce_id(raw.get("id")),
            "experience": experience,
            "explorer_id": coerce_id(
                _first_present(raw, ("explorer", "explorerId", "explorer_id", "user"))
            ),
            "host_id": coerce_id(_first_present(raw, ("host", "hostId", "host_id"))),
            # A missing or non-positive quantity reserves a single seat
            "quantity": quantity if quantity and quantity > 0 else 1,
            "status": status.strip() if isinstance(status, str) else "",
            "created_at": _read_instant(raw, "created_at", ("createdAt", "created_at")),
            "date": _read_instant(raw, "date", ("date",)),
        }

    @property
    def parsed_status(self) -> Optional[BookingStatus]:
        return parse_booking_status(self.status)

    @property
    def effective_host_id(self) -> Optional[str]:
        return self.host_id or self.experience.host_id

    @property
    def experience_key(self) -> Optional[str]:
        return self.experience.id
