"""Common module — shared utilities for shiftdesk."""

from shiftdesk.common.audit import AuditAction, AuditTrail, create_audit_entry, diff_values
from shiftdesk.common.constants import (
    DecisionStatus,
    RequestKind,
    RequestStatus,
    ShiftPart,
    UserRole,
)
from shiftdesk.common.exceptions import (
    AppException,
    BadCredentialException,
    ConflictError,
    ForbiddenException,
    InvalidTransitionException,
    NotFoundException,
    ScheduleConflictError,
    UnauthenticatedException,
    ValidationException,
    register_exception_handlers,
)

__all__ = [
    # Audit
    "AuditAction",
    "AuditTrail",
    "create_audit_entry",
    "diff_values",
    # Constants / Enums
    "DecisionStatus",
    "RequestKind",
    "RequestStatus",
    "ShiftPart",
    "UserRole",
    # Exceptions
    "AppException",
    "BadCredentialException",
    "ConflictError",
    "ForbiddenException",
    "InvalidTransitionException",
    "NotFoundException",
    "ScheduleConflictError",
    "UnauthenticatedException",
    "ValidationException",
    "register_exception_handlers",
]
