# backend/livadai/core/exceptions.py
"""
Domain-specific exceptions for the LivadAI booking rules service.

The rule functions themselves never raise on malformed snapshots; these
exceptions are for the API layer and for server-side re-validation of an
action a client asked to perform.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base for errors the booking rules API reports to its callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when a request is well-formed JSON but not usable."""

    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenException(DomainException):
    """Raised when an actor asks for an action the rules do not permit."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundException(DomainException):
    """Raised when a referenced booking or experience is unknown."""

    status_code = status.HTTP_404_NOT_FOUND


class BusinessRuleException(DomainException):
    """Raised when a request conflicts with the booking lifecycle."""

    status_code = HTTP_422_UNPROCESSABLE


class ActionNotPermittedException(ForbiddenException):
    """Raised by server-side re-validation of a booking action."""

    def __init__(
        self,
        action: str,
        booking_id: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        merged: Dict[str, Any] = {"action": action, "booking_id": booking_id}
        if details:
            merged.update(details)
        super().__init__(
            f"Action '{action}' is not permitted for this booking right now",
            code="action_not_permitted",
            details=merged,
        )
        self.action = action
        self.booking_id = booking_id
