# backend/livadai/routes/v1/bookings.py
"""
Booking rules routes - API v1

Versioned booking endpoints under /api/v1/bookings.
All business logic delegated to EligibilityEvaluator and the partition rules.

Endpoints:
    POST /eligibility        → Action flags and windows for one booking
    POST /eligibility/batch  → Action flags for many bookings, one actor
    POST /authorize          → Re-validate one action (403 when not permitted)
    POST /partition          → Split bookings into upcoming and history
"""

from datetime import datetime
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends

from ...api.dependencies.services import get_eligibility_evaluator, get_now, get_window_policy
from ...core.exceptions import DomainException
from ...schemas.eligibility import (
    AuthorizeActionRequest,
    EligibilityBatchRequest,
    EligibilityRequest,
    PartitionRequest,
)
from ...schemas.eligibility_responses import (
    AuthorizeActionResponse,
    EligibilityBatchResponse,
    EligibilityResponse,
    PartitionResponse,
)
from ...services.booking_partition import partition_bookings
from ...services.eligibility_service import EligibilityEvaluator, EligibilityReport
from ...services.window_policy import WindowPolicy
from ...utils.time_utils import ensure_aware

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["bookings-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    raise exc.to_http_exception()


def _resolve_now(requested: Optional[datetime], clock_now: datetime) -> datetime:
    return ensure_aware(requested) if requested is not None else ensure_aware(clock_now)


def _to_response(report: EligibilityReport, evaluated_at: datetime) -> EligibilityResponse:
    return EligibilityResponse.model_validate({**report.to_payload(), "evaluated_at": evaluated_at})


@router.post("/eligibility", response_model=EligibilityResponse)
def evaluate_booking_eligibility(
    payload: EligibilityRequest,
    clock_now: datetime = Depends(get_now),
    evaluator: EligibilityEvaluator = Depends(get_eligibility_evaluator),
) -> EligibilityResponse:
    """Return which actions the actor may take on this booking right now."""
    now = _resolve_now(payload.now, clock_now)
    report = evaluator.explain(payload.booking, now, payload.actor.role, payload.actor.id)
    return _to_response(report, now)


@router.post("/eligibility/batch", response_model=EligibilityBatchResponse)
def evaluate_booking_eligibility_batch(
    payload: EligibilityBatchRequest,
    clock_now: datetime = Depends(get_now),
    evaluator: EligibilityEvaluator = Depends(get_eligibility_evaluator),
) -> EligibilityBatchResponse:
    now = _resolve_now(payload.now, clock_now)
    reports = evaluator.evaluate_many(payload.bookings, now, payload.actor.role, payload.actor.id)
    return EligibilityBatchResponse(
        evaluated_at=now,
        results=[_to_response(report, now) for report in reports],
    )


@router.post("/authorize", response_model=AuthorizeActionResponse)
def authorize_booking_action(
    payload: AuthorizeActionRequest,
    clock_now: datetime = Depends(get_now),
    evaluator: EligibilityEvaluator = Depends(get_eligibility_evaluator),
) -> AuthorizeActionResponse:
    """
    Server-side check run before a state-changing booking call is accepted.

    Responds 403 with code ``action_not_permitted`` when the rules reject it.
    """
    now = _resolve_now(payload.now, clock_now)
    try:
        evaluator.assert_permitted(
            payload.action, payload.booking, now, payload.actor.role, payload.actor.id
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return AuthorizeActionResponse(
        booking_id=payload.booking.id,
        action=payload.action,
        permitted=True,
        evaluated_at=now,
    )


@router.post("/partition", response_model=PartitionResponse)
def partition_user_bookings(
    payload: PartitionRequest,
    clock_now: datetime = Depends(get_now),
    policy: WindowPolicy = Depends(get_window_policy),
) -> PartitionResponse:
    now = _resolve_now(payload.now, clock_now)
    partition = partition_bookings(
        payload.bookings, now, explorer_id=payload.explorer_id, policy=policy
    )
    return PartitionResponse(**partition.to_payload(), evaluated_at=now)
