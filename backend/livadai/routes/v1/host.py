# backend/livadai/routes/v1/host.py
"""
Host dashboard routes - API v1

Endpoints:
    POST /bookings/summary → Bookings grouped per experience with seats and rollup
"""

from fastapi import APIRouter

from ...models.booking import booking_badge
from ...schemas.eligibility import HostSummaryRequest
from ...schemas.eligibility_responses import (
    ExperienceGroupResponse,
    GroupedBookingItem,
    HostSummaryResponse,
    SeatSummaryResponse,
)
from ...services.seat_aggregator import ExperienceBookingGroup, group_bookings_by_experience

# V1 router - mounted at /api/v1/host
router = APIRouter(tags=["host-v1"])


def _group_response(group: ExperienceBookingGroup) -> ExperienceGroupResponse:
    return ExperienceGroupResponse(
        experience_id=group.experience.id,
        title=group.experience.title,
        starts_at=group.starts_at,
        rollup_status=group.rollup,
        seats=SeatSummaryResponse(**group.seats.to_payload()),
        bookings=[
            GroupedBookingItem(
                booking_id=booking.id,
                explorer_id=booking.explorer_id,
                status=booking.status,
                badge=booking_badge(booking.status),
                quantity=booking.quantity,
            )
            for booking in group.bookings
        ],
    )


@router.post("/bookings/summary", response_model=HostSummaryResponse)
def summarize_host_bookings(payload: HostSummaryRequest) -> HostSummaryResponse:
    """Group a host's bookings per experience, newest experience first."""
    groups = group_bookings_by_experience(
        payload.bookings, include_released=payload.include_released
    )
    return HostSummaryResponse(groups=[_group_response(group) for group in groups])
