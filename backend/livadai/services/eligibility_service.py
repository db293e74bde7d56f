# backend/livadai/services/eligibility_service.py
"""
EligibilityEvaluator: which booking actions an actor may take right now.

Implements:
- Chat, dispute, attendance confirmation, no-show, host cancellation and review gating
- Server-side re-validation of a requested action (raises ForbiddenException)
- Batch evaluation for list views

Every predicate is pure over the booking snapshot, the actor and ``now``.
None of them changes a booking; the state transition itself is a separate,
authorized API call that must re-run the same check on the server.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Any, FrozenSet, Iterable, List, Optional

from ..core.enums import ActorRole, BookingAction
from ..core.exceptions import ActionNotPermittedException
from ..core.metrics import (
    ACTION_AUTHORIZATIONS_TOTAL,
    ELIGIBILITY_ERRORS_TOTAL,
    ELIGIBILITY_EVALUATIONS_TOTAL,
)
from ..models.booking import (
    CHAT_STATUSES,
    DISPUTE_BLOCKING_STATUSES,
    StatusBucket,
    is_actionable,
    is_completed,
    parse_booking_status,
    status_bucket,
)
from ..schemas.booking import BookingSnapshot
from ..utils.time_utils import ensure_aware
from .base import BaseService
from .window_calculator import BookingWindows, compute_booking_windows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingEligibility:
    can_dispute: bool = False
    can_confirm_attendance: bool = False
    can_cancel_by_host: bool = False
    can_mark_no_show: bool = False
    can_review: bool = False
    can_chat: bool = False

    def allows(self, action: BookingAction) -> bool:
        return action in self.permitted_actions

    @property
    def permitted_actions(self) -> FrozenSet[BookingAction]:
        flags = {
            BookingAction.DISPUTE: self.can_dispute,
            BookingAction.CONFIRM_ATTENDANCE: self.can_confirm_attendance,
            BookingAction.CANCEL_BY_HOST: self.can_cancel_by_host,
            BookingAction.MARK_NO_SHOW: self.can_mark_no_show,
            BookingAction.REVIEW: self.can_review,
            BookingAction.CHAT: self.can_chat,
        }
        return frozenset(action for action, allowed in flags.items() if allowed)

    def to_payload(self) -> dict[str, bool]:
        return {
            "can_dispute": self.can_dispute,
            "can_confirm_attendance": self.can_confirm_attendance,
            "can_cancel_by_host": self.can_cancel_by_host,
            "can_mark_no_show": self.can_mark_no_show,
            "can_review": self.can_review,
            "can_chat": self.can_chat,
        }


NOT_ELIGIBLE = BookingEligibility()


@dataclass(frozen=True)
class EligibilityReport:
    booking_id: Optional[str]
    status_bucket: StatusBucket
    eligibility: BookingEligibility
    windows: Optional[BookingWindows]

    def to_payload(self) -> dict[str, Any]:
        return {
            "booking_id": self.booking_id,
            "status_bucket": self.status_bucket.value,
            **self.eligibility.to_payload(),
            "windows": self.windows.to_payload() if self.windows is not None else None,
        }


class EligibilityEvaluator(BaseService):
    """Gates what the client may offer and what the server may accept."""

    # ------------------------------------------------------------------
    # Actor identity
    # ------------------------------------------------------------------

    @staticmethod
    def is_booking_explorer(booking: BookingSnapshot, actor_id: Optional[str]) -> bool:
        return bool(actor_id) and booking.explorer_id is not None and actor_id == booking.explorer_id

    @staticmethod
    def is_booking_host(
        booking: BookingSnapshot, actor_role: ActorRole | str | None, actor_id: Optional[str]
    ) -> bool:
        if ActorRole.parse(actor_role) is not ActorRole.HOST:
            return False
        host_id = booking.effective_host_id
        return bool(actor_id) and host_id is not None and actor_id == host_id

    # ------------------------------------------------------------------
    # Individual predicates
    # ------------------------------------------------------------------

    def can_chat(self, booking: BookingSnapshot) -> bool:
        """Chat unlocks once payment settles and stays open through completion."""
        status = parse_booking_status(booking.status)
        return status is not None and status in CHAT_STATUSES

    def can_dispute(
        self,
        booking: BookingSnapshot,
        now: datetime,
        actor_id: Optional[str],
        windows: Optional[BookingWindows] = None,
    ) -> bool:
        if not self.is_booking_explorer(booking, actor_id):
            return False
        status = parse_booking_status(booking.status)
        if status is None or status in DISPUTE_BLOCKING_STATUSES:
            return False
        windows = windows or compute_booking_windows(booking, self.policy)
        return windows.dispute is not None and windows.dispute.contains(ensure_aware(now))

    def can_confirm_attendance(
        self,
        booking: BookingSnapshot,
        now: datetime,
        actor_role: ActorRole | str | None,
        actor_id: Optional[str],
        windows: Optional[BookingWindows] = None,
    ) -> bool:
        if not self.is_booking_host(booking, actor_role, actor_id):
            return False
        if not is_actionable(booking.status):
            return False
        windows = windows or compute_booking_windows(booking, self.policy)
        return windows.attendance is not None and windows.attendance.contains(ensure_aware(now))

    def can_mark_no_show(
        self,
        booking: BookingSnapshot,
        now: datetime,
        actor_role: ActorRole | str | None,
        actor_id: Optional[str],
        windows: Optional[BookingWindows] = None,
    ) -> bool:
        # Same gate as attendance confirmation; only the resulting transition differs
        return self.can_confirm_attendance(booking, now, actor_role, actor_id, windows)

    def can_cancel_by_host(
        self,
        booking: BookingSnapshot,
        actor_role: ActorRole | str | None,
        actor_id: Optional[str],
    ) -> bool:
        return self.is_booking_host(booking, actor_role, actor_id) and is_actionable(
            booking.status
        )

    def can_review(
        self,
        booking: BookingSnapshot,
        now: datetime,
        windows: Optional[BookingWindows] = None,
    ) -> bool:
        if not is_completed(booking.status):
            return False
        windows = windows or compute_booking_windows(booking, self.policy)
        return windows.review is not None and windows.review.contains(ensure_aware(now))

    # ------------------------------------------------------------------
    # Aggregate evaluation
    # ------------------------------------------------------------------

    def _evaluate(
        self,
        booking: BookingSnapshot,
        now: datetime,
        actor_role: ActorRole | str | None,
        actor_id: Optional[str],
        windows: BookingWindows,
    ) -> BookingEligibility:
        return BookingEligibility(
            can_dispute=self.can_dispute(booking, now, actor_id, windows),
            can_confirm_attendance=self.can_confirm_attendance(
                booking, now, actor_role, actor_id, windows
            ),
            can_cancel_by_host=self.can_cancel_by_host(booking, actor_role, actor_id),
            can_mark_no_show=self.can_mark_no_show(booking, now, actor_role, actor_id, windows),
            can_review=self.can_review(booking, now, windows),
            can_chat=self.can_chat(booking),
        )

    @BaseService.measure_operation("explain")
    def explain(
        self,
        booking: BookingSnapshot,
        now: datetime,
        actor_role: ActorRole | str | None,
        actor_id: Optional[str],
    ) -> EligibilityReport:
        """
        Evaluate every action for one booking and return the windows used.

        Args:
            booking: Booking snapshot, with its experience embedded when available
            now: The instant to evaluate at; naive values are taken as UTC
            actor_role: EXPLORER or HOST (unknown roles are never a host)
            actor_id: Identifier of the user asking

        Returns:
            EligibilityReport; on an unexpected error, all flags are False
        """
        role = ActorRole.parse(actor_role)
        ELIGIBILITY_EVALUATIONS_TOTAL.labels(role=role.value if role else "unknown").inc()
        try:
            windows = compute_booking_windows(booking, self.policy)
            eligibility = self._evaluate(booking, now, role, actor_id, windows)
        except (TypeError, ValueError, OverflowError, AttributeError) as exc:
            ELIGIBILITY_ERRORS_TOTAL.labels(reason=type(exc).__name__).inc()
            logger.warning(
                "Eligibility evaluation failed for booking %s; treating as not eligible: %s",
                booking.id,
                exc,
            )
            return EligibilityReport(
                booking_id=booking.id,
                status_bucket=status_bucket(booking.status),
                eligibility=NOT_ELIGIBLE,
                windows=None,
            )
        return EligibilityReport(
            booking_id=booking.id,
            status_bucket=status_bucket(booking.status),
            eligibility=eligibility,
            windows=windows,
        )

    def evaluate(
        self,
        booking: BookingSnapshot,
        now: datetime,
        actor_role: ActorRole | str | None,
        actor_id: Optional[str],
    ) -> BookingEligibility:
        return self.explain(booking, now, actor_role, actor_id).eligibility

    @BaseService.measure_operation("evaluate_many")
    def evaluate_many(
        self,
        bookings: Iterable[BookingSnapshot],
        now: datetime,
        actor_role: ActorRole | str | None,
        actor_id: Optional[str],
    ) -> List[EligibilityReport]:
        return [self.explain(booking, now, actor_role, actor_id) for booking in bookings]

    def permitted_actions(
        self,
        booking: BookingSnapshot,
        now: datetime,
        actor_role: ActorRole | str | None,
        actor_id: Optional[str],
    ) -> FrozenSet[BookingAction]:
        return self.evaluate(booking, now, actor_role, actor_id).permitted_actions

    def is_permitted(
        self,
        action: BookingAction,
        booking: BookingSnapshot,
        now: datetime,
        actor_role: ActorRole | str | None,
        actor_id: Optional[str],
    ) -> bool:
        return self.evaluate(booking, now, actor_role, actor_id).allows(action)

    def assert_permitted(
        self,
        action: BookingAction,
        booking: BookingSnapshot,
        now: datetime,
        actor_role: ActorRole | str | None,
        actor_id: Optional[str],
    ) -> None:
        """
        Re-validate an action before the state change is accepted.

        Raises:
            ActionNotPermittedException: If the action is not permitted at ``now``
        """
        if self.is_permitted(action, booking, now, actor_role, actor_id):
            ACTION_AUTHORIZATIONS_TOTAL.labels(action=action.value, outcome="allowed").inc()
            return
        ACTION_AUTHORIZATIONS_TOTAL.labels(action=action.value, outcome="denied").inc()
        self.logger.info(
            "Rejected %s on booking %s for actor %s (%s)",
            action.value,
            booking.id,
            actor_id,
            actor_role,
        )
        raise ActionNotPermittedException(
            action.value,
            booking.id,
            details={"status": booking.status or None},
        )
