# backend/livadai/routes/v1/experiences.py
"""
Experience listing routes - API v1

Endpoints:
    POST /status → Listing badge and availability per experience
    POST /hosted → Experiences that already happened, with participant counts
"""

from datetime import datetime

from fastapi import APIRouter, Depends

from ...api.dependencies.services import get_now
from ...schemas.eligibility import ExperienceStatusRequest, HostedExperiencesRequest
from ...schemas.eligibility_responses import (
    ExperienceStatusItem,
    ExperienceStatusResponse,
    HostedExperienceItem,
    HostedExperiencesResponse,
)
from ...services.experience_status import (
    availability,
    duration_minutes,
    hosted_experiences,
    listing_status,
    participants_count,
)
from ...utils.time_utils import ensure_aware

# V1 router - mounted at /api/v1/experiences
router = APIRouter(tags=["experiences-v1"])


@router.post("/status", response_model=ExperienceStatusResponse)
def experience_listing_status(payload: ExperienceStatusRequest) -> ExperienceStatusResponse:
    results = []
    for experience in payload.experiences:
        results.append(
            ExperienceStatusItem(
                experience_id=experience.id,
                listing_status=listing_status(experience),
                duration_minutes=duration_minutes(experience),
                **availability(experience).to_payload(),
            )
        )
    return ExperienceStatusResponse(results=results)


@router.post("/hosted", response_model=HostedExperiencesResponse)
def list_hosted_experiences(
    payload: HostedExperiencesRequest,
    clock_now: datetime = Depends(get_now),
) -> HostedExperiencesResponse:
    now = ensure_aware(payload.now if payload.now is not None else clock_now)
    return HostedExperiencesResponse(
        results=[
            HostedExperienceItem(
                experience_id=experience.id,
                title=experience.title,
                participants=participants_count(experience),
            )
            for experience in hosted_experiences(payload.experiences, now)
        ]
    )
