"""Domain errors and their RFC 7807 (application/problem+json) rendering.

Every error a request can end with maps onto one ``AppException`` subclass.
The subclass fixes the HTTP status and the default problem ``type`` slug;
``error_type`` may be narrowed per instance (e.g. ``token-expired``).
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, ClassVar, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

BASE_ERROR_URI = "https://shiftdesk.local/errors"
PROBLEM_JSON = "application/problem+json"

logger = logging.getLogger(__name__)


class AppException(Exception):
    status_code: ClassVar[int] = 400
    default_type: ClassVar[str] = "bad-request"
    default_title: ClassVar[str] = "Bad Request"

    def __init__(
        self,
        detail: str,
        *,
        errors: Optional[dict[str, Any]] = None,
        error_type: Optional[str] = None,
        title: Optional[str] = None,
    ) -> None:
        self.detail = detail
        self.errors = errors
        self.error_type = error_type or self.default_type
        self.title = title or self.default_title
        super().__init__(detail)


# ── 401 / 403 ───────────────────────────────────────────────────────

class UnauthenticatedException(AppException):
    """Missing, malformed or expired session token."""

    status_code = 401
    default_type = "invalid-token"
    default_title = "Unauthenticated"

    def __init__(self, error_type: str = "invalid-token", detail: str = "Invalid token.") -> None:
        super().__init__(detail, error_type=error_type)


class BadCredentialException(AppException):
    status_code = 401
    default_type = "bad-credential"
    default_title = "Bad Credential"

    def __init__(self) -> None:
        super().__init__("Incorrect password.")


class ForbiddenException(AppException):
    """Authenticated, but the role does not allow this action."""

    status_code = 403
    default_type = "forbidden"
    default_title = "Forbidden"

    def __init__(
        self,
        detail: str = "You do not have permission to perform this action.",
        error_type: str = "forbidden",
    ) -> None:
        super().__init__(detail, error_type=error_type)


# ── 404 ─────────────────────────────────────────────────────────────

class NotFoundException(AppException):
    status_code = 404
    default_type = "not-found"

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(
            f"{entity_type} with id '{entity_id}' does not exist.",
            title=f"{entity_type} Not Found",
        )


# ── 409 ─────────────────────────────────────────────────────────────

class ConflictError(AppException):
    """Duplicate value on a unique field."""

    status_code = 409
    default_type = "conflict"
    default_title = "Conflict"

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(
            f"An entry with {field}='{value}' already exists.",
            errors={field: [f"'{value}' is already in use."]},
        )


class ScheduleConflictError(AppException):
    """The employee already holds a row for this shift on this date."""

    status_code = 409
    default_type = "schedule-conflict"
    default_title = "Conflict"

    def __init__(self, shift_id: int, schedule_date: date) -> None:
        self.shift_id = shift_id
        self.schedule_date = schedule_date
        super().__init__(
            f"Conflict: already registered for shift_id {shift_id} "
            f"on {schedule_date.isoformat()}.",
            errors={"shift_id": shift_id, "schedule_date": schedule_date.isoformat()},
        )


class InvalidTransitionException(AppException):
    """Decision attempted on a row that is no longer pending."""

    status_code = 409
    default_type = "invalid-transition"
    default_title = "Invalid Transition"

    def __init__(self, entity_type: str, entity_id: Any, current_status: str) -> None:
        super().__init__(
            f"{entity_type} '{entity_id}' is already {current_status}.",
            errors={"status": [f"Only pending rows can be decided; current status is {current_status}."]},
        )


# ── 422 ─────────────────────────────────────────────────────────────

class ValidationException(AppException):
    """Business-rule validation failure on otherwise well-formed input."""

    status_code = 422
    default_type = "validation-error"
    default_title = "Validation Error"

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__("One or more fields failed validation.", errors=errors)


# ── Rendering ───────────────────────────────────────────────────────

def problem_response(
    request: Request,
    *,
    status: int,
    error_type: str,
    title: str,
    detail: str,
    errors: Optional[dict[str, Any]] = None,
) -> JSONResponse:
    body: dict[str, Any] = {
        "type": f"{BASE_ERROR_URI}/{error_type}",
        "title": title,
        "status": status,
        "detail": detail,
        "instance": request.url.path,
    }
    if errors:
        body["errors"] = errors
    return JSONResponse(status_code=status, content=body, media_type=PROBLEM_JSON)


async def _handle_app_exception(request: Request, exc: AppException) -> JSONResponse:
    return problem_response(
        request,
        status=exc.status_code,
        error_type=exc.error_type,
        title=exc.title,
        detail=exc.detail,
        errors=exc.errors,
    )


def _field_name(loc: tuple) -> str:
    # ("body", "items", 0, "shift_id") → "items.0.shift_id"
    if len(loc) > 1:
        return ".".join(str(part) for part in loc[1:])
    return str(loc[0]) if loc else "unknown"


async def _handle_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    field_errors: dict[str, list[str]] = {}
    for err in exc.errors():
        field_errors.setdefault(_field_name(tuple(err.get("loc", ()))), []).append(
            err.get("msg", "Invalid value"),
        )
    return problem_response(
        request,
        status=422,
        error_type="validation-error",
        title="Validation Error",
        detail="Request validation failed.",
        errors=field_errors,
    )


async def _handle_server_error(request: Request, exc: Exception) -> JSONResponse:
    # Storage details stay in the server log
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return problem_response(
        request,
        status=500,
        error_type="server-error",
        title="Server Error",
        detail="An unexpected error occurred.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, _handle_app_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _handle_server_error)
    app.add_exception_handler(Exception, _handle_server_error)
