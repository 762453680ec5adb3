"""Leave Pydantic v2 schemas — request / response validation."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from shiftdesk.common.constants import RequestStatus


class LeaveRequestCreate(BaseModel):
    """Payload for filing a leave request."""

    leave_type: str = Field(..., min_length=1, max_length=50, description="e.g. annual, sick, unpaid")
    start_date: date = Field(..., description="Leave start date (inclusive)")
    end_date: date = Field(..., description="Leave end date (inclusive)")
    reason: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def validate_dates(self) -> "LeaveRequestCreate":
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date.")
        return self


class LeaveRequestOut(BaseModel):
    """Full leave request response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_id: uuid.UUID
    leave_type: str
    start_date: date
    end_date: date
    reason: Optional[str] = None
    status: RequestStatus
    reviewed_at: Optional[datetime] = None
    reviewer_remarks: Optional[str] = None
    created_at: Optional[datetime] = None

    # Display metadata — filled by the service on admin listings
    employee_code: Optional[str] = None
    full_name: Optional[str] = None
    department: Optional[str] = None
