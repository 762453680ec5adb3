"""Leave service layer — filing and listing leave requests.

Decisions on leave requests go through shiftdesk.workflow.approval like
every other workflow row.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftdesk.common.constants import RequestStatus
from shiftdesk.employees.models import Employee
from shiftdesk.leave.models import LeaveRequest
from shiftdesk.leave.schemas import LeaveRequestCreate, LeaveRequestOut

logger = logging.getLogger(__name__)


class LeaveService:
    """Async leave operations: apply, own history, pending queue."""

    @staticmethod
    async def create_leave(
        db: AsyncSession,
        employee_id: uuid.UUID,
        data: LeaveRequestCreate,
    ) -> LeaveRequestOut:
        """File a pending leave request. Overlap with other leave is not checked.

        The date order is enforced by LeaveRequestCreate.
        """
        leave_request = LeaveRequest(
            employee_id=employee_id,
            leave_type=data.leave_type,
            start_date=data.start_date,
            end_date=data.end_date,
            reason=data.reason,
            status=RequestStatus.pending,
        )
        db.add(leave_request)
        await db.flush()

        logger.info(
            "Leave request %s filed by employee %s (%s → %s)",
            leave_request.id, employee_id, data.start_date, data.end_date,
        )
        return LeaveRequestOut.model_validate(leave_request)

    @staticmethod
    async def list_my_leaves(
        db: AsyncSession,
        employee_id: uuid.UUID,
    ) -> list[LeaveRequestOut]:
        result = await db.execute(
            select(LeaveRequest)
            .where(LeaveRequest.employee_id == employee_id)
            .order_by(LeaveRequest.start_date.desc(), LeaveRequest.created_at.desc())
        )
        return [LeaveRequestOut.model_validate(lr) for lr in result.scalars().all()]

    @staticmethod
    async def list_pending_leaves(db: AsyncSession) -> list[LeaveRequestOut]:
        """Pending queue for admins, joined with employee display metadata."""
        result = await db.execute(
            select(
                LeaveRequest,
                Employee.employee_code,
                Employee.full_name,
                Employee.department,
            )
            .join(Employee, LeaveRequest.employee_id == Employee.id)
            .where(LeaveRequest.status == RequestStatus.pending)
            .order_by(LeaveRequest.start_date.asc(), LeaveRequest.created_at.asc())
        )
        output: list[LeaveRequestOut] = []
        for leave_request, employee_code, full_name, department in result.all():
            out = LeaveRequestOut.model_validate(leave_request)
            out.employee_code = employee_code
            out.full_name = full_name
            out.department = department
            output.append(out)
        return output
