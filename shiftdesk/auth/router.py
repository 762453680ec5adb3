"""Auth router — admin/staff login surfaces, password change."""


from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shiftdesk.auth import service as auth_service
from shiftdesk.auth.dependencies import get_current_claims
from shiftdesk.auth.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    TokenClaims,
    TokenResponse,
)
from shiftdesk.common.constants import UserRole
from shiftdesk.common.rate_limit import limiter
from shiftdesk.config import settings
from shiftdesk.database import get_db

router = APIRouter(prefix="", tags=["auth"])


def _client_ip(request: Request):
    return request.client.host if request.client else None


# ── POST /admin/login — admin accounts only ─────────────────────────

@router.post("/admin/login", response_model=TokenResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def admin_login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    return await auth_service.login(
        db, body.employee_code, body.password, UserRole.admin, ip=_client_ip(request),
    )


# ── POST /staff/login — non-admin accounts only ─────────────────────

@router.post("/staff/login", response_model=TokenResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def staff_login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    return await auth_service.login(
        db, body.employee_code, body.password, UserRole.staff, ip=_client_ip(request),
    )


# ── POST /change-password ──────────────────────────────────────────

@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    await auth_service.change_password(db, claims.employee_id, body.new_password)
    return MessageResponse(message="Password changed successfully")
