# backend/livadai/schemas/eligibility.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from ..core.constants import MAX_BATCH_BOOKINGS
from ..core.enums import ActorRole, BookingAction
from ._strict_base import StrictRequestModel
from .booking import BookingSnapshot, ExperienceSnapshot


class ActorPayload(StrictRequestModel):
    role: ActorRole
    id: str = Field(..., min_length=1)


class EligibilityRequest(StrictRequestModel):
    booking: BookingSnapshot
    actor: ActorPayload
    now: Optional[datetime] = Field(
        None, description="Instant to evaluate at; defaults to the server clock"
    )


class EligibilityBatchRequest(StrictRequestModel):
    bookings: List[BookingSnapshot] = Field(..., min_length=1, max_length=MAX_BATCH_BOOKINGS)
    actor: ActorPayload
    now: Optional[datetime] = None


class AuthorizeActionRequest(StrictRequestModel):
    booking: BookingSnapshot
    actor: ActorPayload
    action: BookingAction
    now: Optional[datetime] = None


class PartitionRequest(StrictRequestModel):
    bookings: List[BookingSnapshot] = Field(default_factory=list, max_length=MAX_BATCH_BOOKINGS)
    explorer_id: Optional[str] = Field(
        None, description="Keep only this explorer's own bookings"
    )
    now: Optional[datetime] = None


class HostSummaryRequest(StrictRequestModel):
    bookings: List[BookingSnapshot] = Field(default_factory=list, max_length=MAX_BATCH_BOOKINGS)
    include_released: bool = Field(
        True, description="Count seats of cancelled and refunded bookings"
    )


class ExperienceStatusRequest(StrictRequestModel):
    experiences: List[ExperienceSnapshot] = Field(..., min_length=1, max_length=MAX_BATCH_BOOKINGS)


class HostedExperiencesRequest(StrictRequestModel):
    experiences: List[ExperienceSnapshot] = Field(
        default_factory=list, max_length=MAX_BATCH_BOOKINGS
    )
    now: Optional[datetime] = None
