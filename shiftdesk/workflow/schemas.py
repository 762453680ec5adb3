"""Workflow request bodies."""

from typing import Optional

from pydantic import BaseModel, Field

from shiftdesk.common.constants import DecisionStatus


class StatusUpdateRequest(BaseModel):
    """Admin decision on a pending row."""

    status: DecisionStatus
    remarks: Optional[str] = Field(None, max_length=1000)
