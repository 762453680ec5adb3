"""Employee Pydantic schemas for admin provisioning and profile reads."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from shiftdesk.common.constants import UserRole


class EmployeeCreate(BaseModel):
    employee_code: str = Field(..., min_length=1, max_length=20, pattern=r"^[A-Za-z0-9_-]+$")
    full_name: str = Field(..., min_length=1, max_length=150)
    department: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    role: UserRole = UserRole.staff


class EmployeeUpdate(BaseModel):
    """Partial admin edit; unset fields are left untouched."""

    full_name: Optional[str] = Field(None, min_length=1, max_length=150)
    department: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class EmployeeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_code: str
    full_name: str
    department: str
    email: str
    role: UserRole
    is_password_default: bool
    is_active: bool
    created_at: Optional[datetime] = None


class ProfileOut(BaseModel):
    """Caller's own profile (users/me)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_code: str
    full_name: str
    department: str
    email: str
    role: UserRole
    is_password_default: bool
