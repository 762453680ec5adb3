"""Auth Pydantic schemas for request / response validation."""


import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from shiftdesk.common.constants import UserRole


# ── Requests ────────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    employee_code: str = Field(..., min_length=1, max_length=20)
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    new_password: str = Field(..., min_length=1, max_length=72)


# ── Embedded / Shared ──────────────────────────────────────────────

class UserInfo(BaseModel):
    id: uuid.UUID
    employee_code: str
    full_name: str
    department: str
    email: str
    role: UserRole


class TokenClaims(BaseModel):
    """Decoded session token payload."""

    employee_id: uuid.UUID
    employee_code: str
    role: UserRole
    issued_at: datetime
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin


# ── Responses ───────────────────────────────────────────────────────

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    is_password_default: bool
    user: UserInfo


class MessageResponse(BaseModel):
    message: str
