"""Scheduling Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Item / *Create  → request bodies (write)
  - *Out             → response bodies (read)
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from shiftdesk.common.constants import RequestStatus, ShiftPart


# ═════════════════════════════════════════════════════════════════════
# Shifts
# ═════════════════════════════════════════════════════════════════════


class ShiftOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    shift_name: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None


# ═════════════════════════════════════════════════════════════════════
# Schedule registration
# ═════════════════════════════════════════════════════════════════════


class ScheduleItem(BaseModel):
    """One entry of a batch registration body."""

    shift_id: int = Field(..., ge=1)
    schedule_date: date
    shift_part: ShiftPart


class ScheduleOut(BaseModel):
    """Employee-scoped view of an assignment."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_id: uuid.UUID
    shift_id: int
    shift_name: Optional[str] = None
    schedule_date: date
    shift_part: ShiftPart
    status: RequestStatus
    reviewed_at: Optional[datetime] = None
    reviewer_remarks: Optional[str] = None
    created_at: Optional[datetime] = None


class AdminScheduleOut(ScheduleOut):
    """Admin listing row — assignment joined with employee display metadata."""

    employee_code: str
    full_name: str
    department: str


# ═════════════════════════════════════════════════════════════════════
# Change requests
# ═════════════════════════════════════════════════════════════════════


class ChangeRequestCreate(BaseModel):
    schedule_id: uuid.UUID = Field(..., description="Assignment to be changed")
    new_shift_id: int = Field(..., ge=1)
    new_shift_part: ShiftPart
    reason: Optional[str] = Field(None, max_length=1000)


class ChangeRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    schedule_id: uuid.UUID
    employee_id: uuid.UUID
    new_shift_id: int
    new_shift_part: ShiftPart
    reason: Optional[str] = None
    status: RequestStatus
    reviewed_at: Optional[datetime] = None
    reviewer_remarks: Optional[str] = None
    created_at: Optional[datetime] = None

    # Display metadata — filled by the service on listings
    employee_code: Optional[str] = None
    full_name: Optional[str] = None
    department: Optional[str] = None
    original_shift_name: Optional[str] = None
    original_schedule_date: Optional[date] = None
    original_shift_part: Optional[ShiftPart] = None
    new_shift_name: Optional[str] = None
