"""
Problem-style error envelopes for the booking rules API.

Every error leaves the service as::

    {"type", "title", "status", "detail", "instance"[, "code", "errors"]}

``type`` is derived from ``code`` so clients can branch on a stable URI
(``.../problems/action_not_permitted``) rather than on the message text.
"""

from typing import Any, Dict, List, Mapping, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException

PROBLEM_TYPE_BASE = "https://livadai.app/problems/"

_TITLES: Mapping[int, str] = {
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
}


def _render(
    request: Request,
    *,
    status: int,
    media_type: str,
    detail: Optional[str] = None,
    code: Optional[str] = None,
    errors: Optional[Any] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    body: Dict[str, Any] = {
        "type": f"{PROBLEM_TYPE_BASE}{code}" if code else "about:blank",
        "title": _TITLES.get(status, "Error"),
        "status": status,
        "detail": detail or "",
        "instance": request.url.path,
    }
    if code:
        body["code"] = code
    if errors:
        body["errors"] = jsonable_encoder(errors)
    return JSONResponse(body, status_code=status, media_type=media_type, headers=headers)


def _unpack_http_detail(detail: Any) -> tuple[Optional[str], Optional[str], Optional[Any]]:
    """Split an ``HTTPException.detail`` into (message, code, errors)."""
    if isinstance(detail, dict):
        message = detail.get("message") or detail.get("detail")
        code = detail.get("code")
        return (
            message if isinstance(message, str) else None,
            code if isinstance(code, str) else None,
            detail.get("details") or detail.get("errors"),
        )
    if detail is None:
        return None, None, None
    return str(detail), None, None


def _field_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    # Drop the leading "body" segment so locations read as request fields
    flattened: List[Dict[str, Any]] = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        flattened.append(
            {
                "field": ".".join(location),
                "message": error.get("msg", ""),
                "type": error.get("type", ""),
            }
        )
    return flattened


def register_error_handlers(app: FastAPI, media_type: str = "application/json") -> None:
    """Install envelope handlers for HTTP, domain and request validation errors."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message, code, errors = _unpack_http_detail(exc.detail)
        return _render(
            request,
            status=exc.status_code,
            media_type=media_type,
            detail=message,
            code=code,
            errors=errors,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        return _render(
            request,
            status=exc.status_code,
            media_type=media_type,
            detail=exc.message,
            code=exc.code,
            errors=exc.details,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _render(
            request,
            status=422,
            media_type=media_type,
            detail="Request validation failed",
            code="validation_error",
            errors=_field_errors(exc),
        )
