"""Scheduling service layer — batch registration, listings, change requests.

Business logic:
  - Batch registration is validated as a whole before anything is written;
    the unique (employee, shift, date) constraint is the final guard
  - Employee-scoped and admin-scoped month listings
  - Change requests against the caller's own assignments
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from shiftdesk.common.constants import RequestStatus
from shiftdesk.common.exceptions import (
    ForbiddenException,
    NotFoundException,
    ScheduleConflictError,
)
from shiftdesk.employees.models import Employee
from shiftdesk.scheduling.conflicts import find_first_conflict
from shiftdesk.scheduling.models import ChangeRequest, ScheduleAssignment, Shift
from shiftdesk.scheduling.schemas import (
    AdminScheduleOut,
    ChangeRequestCreate,
    ChangeRequestOut,
    ScheduleItem,
    ScheduleOut,
    ShiftOut,
)

logger = logging.getLogger(__name__)


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """Return [first day of month, first day of next month)."""
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


class ScheduleService:
    """Async scheduling operations: shifts, registrations, change requests."""

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def _load_shifts(db: AsyncSession, shift_ids: set[int]) -> dict[int, Shift]:
        result = await db.execute(select(Shift).where(Shift.id.in_(shift_ids)))
        return {shift.id: shift for shift in result.scalars().all()}

    @staticmethod
    def _build_schedule_out(row: ScheduleAssignment, shift_name: Optional[str]) -> ScheduleOut:
        out = ScheduleOut.model_validate(row)
        out.shift_name = shift_name
        return out

    @staticmethod
    async def describe_schedule(db: AsyncSession, row: ScheduleAssignment) -> ScheduleOut:
        """Render one assignment with its shift name, as the listings do."""
        shifts = await ScheduleService._load_shifts(db, {row.shift_id})
        shift = shifts.get(row.shift_id)
        return ScheduleService._build_schedule_out(row, shift.shift_name if shift else None)

    # ─────────────────────────────────────────────────────────────────
    # Shifts
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def list_shifts(db: AsyncSession) -> list[ShiftOut]:
        result = await db.execute(select(Shift).order_by(Shift.id.asc()))
        return [ShiftOut.model_validate(s) for s in result.scalars().all()]

    # ─────────────────────────────────────────────────────────────────
    # Batch registration
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def register_schedules(
        db: AsyncSession,
        employee_id: uuid.UUID,
        items: Sequence[ScheduleItem],
    ) -> list[ScheduleOut]:
        """Register a batch of shifts for one employee, all-or-nothing.

        Every item is checked against the ledger (and against the rest of
        the batch) before any row is written. The first offending item is
        reported as a conflict and nothing is persisted. All rows are
        created as pending. An empty batch writes nothing and returns [].
        """
        shift_ids = {item.shift_id for item in items}
        shifts = await ScheduleService._load_shifts(db, shift_ids)
        missing = sorted(shift_ids - shifts.keys())
        if missing:
            raise NotFoundException("Shift", missing[0])

        offender = await find_first_conflict(db, employee_id, items)
        if offender is not None:
            logger.warning(
                "Schedule conflict for employee %s: shift %s on %s",
                employee_id, offender.shift_id, offender.schedule_date,
            )
            raise ScheduleConflictError(offender.shift_id, offender.schedule_date)

        rows = [
            ScheduleAssignment(
                employee_id=employee_id,
                shift_id=item.shift_id,
                schedule_date=item.schedule_date,
                shift_part=item.shift_part,
                status=RequestStatus.pending,
            )
            for item in items
        ]
        db.add_all(rows)
        try:
            await db.flush()
        except IntegrityError:
            # A concurrent registration committed the same triple after our
            # pre-check; the unique constraint rejected the whole flush.
            await db.rollback()
            offender = await find_first_conflict(db, employee_id, items) or items[0]
            logger.warning(
                "Unique constraint rejected registration for employee %s: shift %s on %s",
                employee_id, offender.shift_id, offender.schedule_date,
            )
            raise ScheduleConflictError(offender.shift_id, offender.schedule_date)

        logger.info("Registered %d schedule(s) for employee %s", len(rows), employee_id)
        return [
            ScheduleService._build_schedule_out(row, shifts[row.shift_id].shift_name)
            for row in rows
        ]

    # ─────────────────────────────────────────────────────────────────
    # Listings
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def list_employee_schedules(
        db: AsyncSession,
        employee_id: uuid.UUID,
        month: int,
        year: int,
    ) -> list[ScheduleOut]:
        """The employee's own assignments in a month, oldest date first."""
        start, end = month_bounds(month, year)
        result = await db.execute(
            select(ScheduleAssignment, Shift.shift_name)
            .join(Shift, ScheduleAssignment.shift_id == Shift.id)
            .where(
                ScheduleAssignment.employee_id == employee_id,
                ScheduleAssignment.schedule_date >= start,
                ScheduleAssignment.schedule_date < end,
            )
            .order_by(ScheduleAssignment.schedule_date.asc(), Shift.id.asc())
        )
        return [
            ScheduleService._build_schedule_out(row, shift_name)
            for row, shift_name in result.all()
        ]

    @staticmethod
    async def list_admin_schedules(
        db: AsyncSession,
        month: int,
        year: int,
        department: Optional[str] = None,
    ) -> list[AdminScheduleOut]:
        """Every assignment in a month, optionally limited to one department."""
        start, end = month_bounds(month, year)
        query = (
            select(
                ScheduleAssignment,
                Shift.shift_name,
                Employee.employee_code,
                Employee.full_name,
                Employee.department,
            )
            .join(Shift, ScheduleAssignment.shift_id == Shift.id)
            .join(Employee, ScheduleAssignment.employee_id == Employee.id)
            .where(
                ScheduleAssignment.schedule_date >= start,
                ScheduleAssignment.schedule_date < end,
            )
        )
        if department:
            query = query.where(Employee.department == department)
        query = query.order_by(
            ScheduleAssignment.schedule_date.asc(),
            Employee.employee_code.asc(),
            Shift.id.asc(),
        )

        result = await db.execute(query)
        output: list[AdminScheduleOut] = []
        for row, shift_name, employee_code, full_name, dept in result.all():
            base = ScheduleService._build_schedule_out(row, shift_name)
            output.append(
                AdminScheduleOut(
                    **base.model_dump(),
                    employee_code=employee_code,
                    full_name=full_name,
                    department=dept,
                )
            )
        return output

    # ─────────────────────────────────────────────────────────────────
    # Change requests
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def create_change_request(
        db: AsyncSession,
        employee_id: uuid.UUID,
        data: ChangeRequestCreate,
    ) -> ChangeRequestOut:
        """Ask to move one of the caller's own assignments to another shift."""
        result = await db.execute(
            select(ScheduleAssignment).where(ScheduleAssignment.id == data.schedule_id)
        )
        schedule = result.scalars().first()
        if schedule is None:
            raise NotFoundException("ScheduleAssignment", str(data.schedule_id))
        if schedule.employee_id != employee_id:
            raise ForbiddenException("You can only request changes to your own schedules.")

        shifts = await ScheduleService._load_shifts(db, {data.new_shift_id})
        if data.new_shift_id not in shifts:
            raise NotFoundException("Shift", data.new_shift_id)

        change_request = ChangeRequest(
            schedule_id=schedule.id,
            employee_id=employee_id,
            new_shift_id=data.new_shift_id,
            new_shift_part=data.new_shift_part,
            reason=data.reason,
            status=RequestStatus.pending,
        )
        db.add(change_request)
        await db.flush()

        logger.info(
            "Change request %s filed by employee %s for schedule %s",
            change_request.id, employee_id, schedule.id,
        )
        out = ChangeRequestOut.model_validate(change_request)
        out.new_shift_name = shifts[data.new_shift_id].shift_name
        return out

    @staticmethod
    async def list_my_change_requests(
        db: AsyncSession,
        employee_id: uuid.UUID,
    ) -> list[ChangeRequestOut]:
        return await ScheduleService._list_change_requests(db, employee_id=employee_id)

    @staticmethod
    async def list_pending_change_requests(db: AsyncSession) -> list[ChangeRequestOut]:
        return await ScheduleService._list_change_requests(db, status=RequestStatus.pending)

    @staticmethod
    async def _list_change_requests(
        db: AsyncSession,
        *,
        employee_id: Optional[uuid.UUID] = None,
        status: Optional[RequestStatus] = None,
    ) -> list[ChangeRequestOut]:
        original_shift = aliased(Shift)
        new_shift = aliased(Shift)

        query = (
            select(
                ChangeRequest,
                Employee.employee_code,
                Employee.full_name,
                Employee.department,
                ScheduleAssignment.schedule_date,
                ScheduleAssignment.shift_part,
                original_shift.shift_name,
                new_shift.shift_name,
            )
            .join(Employee, ChangeRequest.employee_id == Employee.id)
            .join(ScheduleAssignment, ChangeRequest.schedule_id == ScheduleAssignment.id)
            .join(original_shift, ScheduleAssignment.shift_id == original_shift.id)
            .join(new_shift, ChangeRequest.new_shift_id == new_shift.id)
        )
        if employee_id is not None:
            query = query.where(ChangeRequest.employee_id == employee_id)
        if status is not None:
            query = query.where(ChangeRequest.status == status)
        query = query.order_by(ChangeRequest.created_at.desc())

        result = await db.execute(query)
        output: list[ChangeRequestOut] = []
        for (
            change_request,
            employee_code,
            full_name,
            department,
            original_date,
            original_part,
            original_name,
            new_name,
        ) in result.all():
            out = ChangeRequestOut.model_validate(change_request)
            out.employee_code = employee_code
            out.full_name = full_name
            out.department = department
            out.original_schedule_date = original_date
            out.original_shift_part = original_part
            out.original_shift_name = original_name
            out.new_shift_name = new_name
            output.append(out)
        return output
