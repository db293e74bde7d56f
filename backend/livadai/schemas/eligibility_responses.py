"""Response models for the booking rules endpoints."""

from datetime import datetime
from typing import List, Optional

from ..core.enums import BookingAction
from ..models.booking import BookingBadge, BookingStatus, StatusBucket
from ..models.experience import ListingStatus
from ..services.window_calculator import EndSource
from ._strict_base import StrictModel


class EligibilityFlags(StrictModel):
    can_dispute: bool
    can_confirm_attendance: bool
    can_cancel_by_host: bool
    can_mark_no_show: bool
    can_review: bool
    can_chat: bool


class TimeWindowResponse(StrictModel):
    start: datetime
    end: Optional[datetime] = None


class BookingWindowsResponse(StrictModel):
    effective_start: Optional[datetime] = None
    effective_end: Optional[datetime] = None
    end_source: Optional[EndSource] = None
    dispute: Optional[TimeWindowResponse] = None
    attendance: Optional[TimeWindowResponse] = None
    review: Optional[TimeWindowResponse] = None
    history_visible_from: Optional[datetime] = None


class EligibilityResponse(EligibilityFlags):
    booking_id: Optional[str] = None
    status_bucket: StatusBucket
    evaluated_at: datetime
    windows: Optional[BookingWindowsResponse] = None


class EligibilityBatchResponse(StrictModel):
    evaluated_at: datetime
    results: List[EligibilityResponse]


class AuthorizeActionResponse(StrictModel):
    booking_id: Optional[str] = None
    action: BookingAction
    permitted: bool
    evaluated_at: datetime


class PartitionResponse(StrictModel):
    upcoming: List[Optional[str]]
    history: List[Optional[str]]
    evaluated_at: datetime


class SeatSummaryResponse(StrictModel):
    booked_seats: int
    total_seats: int
    remaining_seats: int
    capacity_known: bool
    is_full: bool


class GroupedBookingItem(StrictModel):
    booking_id: Optional[str] = None
    explorer_id: Optional[str] = None
    status: str
    badge: BookingBadge
    quantity: int


class ExperienceGroupResponse(StrictModel):
    experience_id: Optional[str] = None
    title: Optional[str] = None
    starts_at: Optional[datetime] = None
    rollup_status: BookingStatus
    seats: SeatSummaryResponse
    bookings: List[GroupedBookingItem]


class HostSummaryResponse(StrictModel):
    groups: List[ExperienceGroupResponse]


class ExperienceStatusItem(StrictModel):
    experience_id: Optional[str] = None
    listing_status: ListingStatus
    available_spots: Optional[int] = None
    occupied_seats: int
    sold_out: bool
    duration_minutes: Optional[int] = None


class ExperienceStatusResponse(StrictModel):
    results: List[ExperienceStatusItem]


class HostedExperienceItem(StrictModel):
    experience_id: Optional[str] = None
    title: Optional[str] = None
    participants: int


class HostedExperiencesResponse(StrictModel):
    results: List[HostedExperienceItem]


class WindowPolicyResponse(StrictModel):
    dispute_opens_after_minutes: int
    dispute_closes_after_hours: int
    attendance_opens_after_minutes: int
    attendance_closes_after_hours: int
    review_opens_after_hours: int
    history_visible_after_hours: int
    single_day_fallback_hours: int


class HealthResponse(StrictModel):
    status: str
    service: str
    version: str
    timestamp: datetime
