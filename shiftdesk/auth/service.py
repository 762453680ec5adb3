"""Auth service — password login, JWT issue/verify, password change."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from shiftdesk.auth.passwords import hash_password, verify_password
from shiftdesk.auth.schemas import TokenClaims, TokenResponse, UserInfo
from shiftdesk.common.audit import AuditAction, create_audit_entry
from shiftdesk.common.constants import UserRole
from shiftdesk.common.exceptions import (
    BadCredentialException,
    ForbiddenException,
    NotFoundException,
    UnauthenticatedException,
)
from shiftdesk.config import settings
from shiftdesk.employees.models import Employee

logger = logging.getLogger(__name__)

_ROLE_MISMATCH_DETAIL: dict[UserRole, str] = {
    UserRole.admin: "Not an admin account.",
    UserRole.staff: "Not a staff account.",
}


# ── JWT helpers ─────────────────────────────────────────────────────

def create_access_token(
    employee_id: uuid.UUID,
    employee_code: str,
    role: UserRole,
    *,
    now: Optional[datetime] = None,
) -> tuple[str, int]:
    """Return (encoded_jwt, expires_in_seconds)."""
    issued_at = now or datetime.now(timezone.utc)
    expires_in = settings.JWT_EXPIRY_HOURS * 3600
    payload = {
        "sub": str(employee_id),
        "code": employee_code,
        "role": role.value,
        "type": "access",
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=settings.JWT_EXPIRY_HOURS),
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, expires_in


def verify_token(token: Optional[str]) -> TokenClaims:
    """Decode and validate a session token. Side-effect free."""
    if not token:
        raise UnauthenticatedException(error_type="missing-token", detail="Missing token.")

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        raise UnauthenticatedException(error_type="token-expired", detail="Token has expired.")
    except JWTError:
        raise UnauthenticatedException(error_type="invalid-token", detail="Invalid token.")

    if payload.get("type") != "access":
        raise UnauthenticatedException(error_type="invalid-token", detail="Invalid token type.")

    try:
        return TokenClaims(
            employee_id=uuid.UUID(payload["sub"]),
            employee_code=payload["code"],
            role=UserRole(payload["role"]),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError):
        raise UnauthenticatedException(error_type="invalid-token", detail="Invalid token claims.")


# ── Employee lookup ─────────────────────────────────────────────────

async def get_employee_by_code(db: AsyncSession, employee_code: str) -> Employee:
    """Return an active employee by business code, or raise 404."""
    result = await db.execute(
        select(Employee).where(
            Employee.employee_code == employee_code,
            Employee.is_active.is_(True),
        ),
    )
    employee = result.scalars().first()
    if employee is None:
        raise NotFoundException(entity_type="Employee", entity_id=employee_code)
    return employee


# ── Login ───────────────────────────────────────────────────────────

async def login(
    db: AsyncSession,
    employee_code: str,
    password: str,
    expected_role: UserRole,
    *,
    ip: Optional[str] = None,
) -> TokenResponse:
    """Authenticate on the login surface reserved for ``expected_role``."""
    employee = await get_employee_by_code(db, employee_code)

    if employee.role != expected_role:
        logger.warning(
            "Login for %s refused on %s surface (role=%s)",
            employee_code, expected_role.value, employee.role.value,
        )
        raise ForbiddenException(
            detail=_ROLE_MISMATCH_DETAIL[expected_role],
            error_type="role-mismatch",
        )

    matches = await run_in_threadpool(verify_password, password, employee.password_hash)
    if not matches:
        logger.warning("Bad password for %s", employee_code)
        raise BadCredentialException()

    access_token, expires_in = create_access_token(
        employee.id, employee.employee_code, employee.role,
    )

    await create_audit_entry(
        db,
        action=AuditAction.login,
        entity_type="employee",
        entity_id=employee.id,
        actor_id=employee.id,
        new_values={"surface": expected_role.value},
        ip_address=ip,
    )
    logger.info("Employee %s logged in as %s", employee_code, employee.role.value)

    return TokenResponse(
        access_token=access_token,
        expires_in=expires_in,
        is_password_default=employee.is_password_default,
        user=UserInfo(
            id=employee.id,
            employee_code=employee.employee_code,
            full_name=employee.full_name,
            department=employee.department,
            email=employee.email,
            role=employee.role,
        ),
    )


# ── Password change ─────────────────────────────────────────────────

async def change_password(
    db: AsyncSession,
    employee_id: uuid.UUID,
    new_password: str,
) -> None:
    """Re-hash and store a new password, clearing the default-password flag.

    The caller's live session token is the only proof of identity; the
    current password is not re-checked.
    """
    result = await db.execute(select(Employee).where(Employee.id == employee_id))
    employee = result.scalars().first()
    if employee is None:
        raise NotFoundException(entity_type="Employee", entity_id=str(employee_id))

    employee.password_hash = await run_in_threadpool(hash_password, new_password)
    employee.is_password_default = False
    employee.updated_at = datetime.now(timezone.utc)
    await db.flush()

    await create_audit_entry(
        db,
        action=AuditAction.password_change,
        entity_type="employee",
        entity_id=employee.id,
        actor_id=employee.id,
    )
    logger.info("Password changed for %s", employee.employee_code)
