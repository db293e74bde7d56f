"""Listing badges, availability figures and the host's past-experience list."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Optional

from ..models.experience import ExperienceStatus, ListingStatus
from ..schemas.booking import ExperienceSnapshot
from ..utils.time_utils import ensure_aware


@dataclass(frozen=True)
class Availability:
    available_spots: Optional[int]
    occupied_seats: int
    sold_out: bool

    def to_payload(self) -> dict[str, Any]:
        return {
            "available_spots": self.available_spots,
            "occupied_seats": self.occupied_seats,
            "sold_out": self.sold_out,
        }


def available_spots(experience: ExperienceSnapshot) -> Optional[int]:
    for value in (
        experience.available_spots,
        experience.remaining_spots,
        experience.max_participants,
    ):
        if value is not None:
            return value
    return None


def availability(experience: ExperienceSnapshot) -> Availability:
    available = available_spots(experience)
    capacity = experience.max_participants or 0
    occupied = 0
    if experience.is_group and capacity:
        occupied = max(0, capacity - (available or 0))
    if experience.is_group:
        sold_out = experience.sold_out or (available or 0) <= 0
    else:
        sold_out = experience.sold_out
    return Availability(available_spots=available, occupied_seats=occupied, sold_out=sold_out)


def listing_status(experience: ExperienceSnapshot) -> ListingStatus:
    status = experience.parsed_status
    if status is ExperienceStatus.CANCELLED or experience.is_active is False:
        return ListingStatus.CANCELLED
    if status is ExperienceStatus.DISABLED:
        return ListingStatus.PAUSED
    if availability(experience).sold_out:
        return ListingStatus.SOLD_OUT
    return ListingStatus.ACTIVE


def duration_minutes(experience: ExperienceSnapshot) -> Optional[int]:
    """Explicit duration, else whole minutes between start and an explicit end."""
    if experience.duration_minutes is not None and experience.duration_minutes > 0:
        return int(experience.duration_minutes)
    if experience.starts_at is None or experience.ends_at is None:
        return None
    seconds = (experience.ends_at - experience.starts_at).total_seconds()
    return max(0, round(seconds / 60))


def participants_count(experience: ExperienceSnapshot) -> int:
    if experience.booked_spots is not None:
        return experience.booked_spots
    if experience.max_participants is not None and experience.available_spots is not None:
        return max(0, experience.max_participants - experience.available_spots)
    return 0


def hosted_experiences(
    experiences: Iterable[ExperienceSnapshot], now: datetime
) -> List[ExperienceSnapshot]:
    """
    Experiences that already happened, for a host's public "hosted" list.

    The reference date is the explicit end, else the start. Undated
    experiences are kept, as the listing has nothing to filter them on.
    """
    moment = ensure_aware(now)
    hosted: List[ExperienceSnapshot] = []
    for experience in experiences:
        reference = experience.ends_at or experience.starts_at
        if reference is None or reference <= moment:
            hosted.append(experience)
    return hosted