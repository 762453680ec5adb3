"""Conflict detection for schedule registrations.

A proposed assignment conflicts when a row already exists for the same
(employee, shift, date) triple. The row's status is ignored (pending and
rejected rows block re-registration just like approved ones) and so is the
shift part.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Optional, Sequence

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftdesk.scheduling.models import ScheduleAssignment
from shiftdesk.scheduling.schemas import ScheduleItem


async def has_conflict(
    db: AsyncSession,
    employee_id: uuid.UUID,
    shift_id: int,
    schedule_date: date,
) -> bool:
    result = await db.execute(
        select(ScheduleAssignment.id).where(
            ScheduleAssignment.employee_id == employee_id,
            ScheduleAssignment.shift_id == shift_id,
            ScheduleAssignment.schedule_date == schedule_date,
        ).limit(1)
    )
    return result.first() is not None


async def find_first_conflict(
    db: AsyncSession,
    employee_id: uuid.UUID,
    items: Sequence[ScheduleItem],
) -> Optional[ScheduleItem]:
    """Batch form of has_conflict.

    Return the first item colliding with the ledger or with an earlier item
    of the same batch, or None when the whole batch is clear.
    """
    if not items:
        return None
    if len(items) == 1:
        item = items[0]
        if await has_conflict(db, employee_id, item.shift_id, item.schedule_date):
            return item
        return None

    triples = {(item.shift_id, item.schedule_date) for item in items}
    result = await db.execute(
        select(ScheduleAssignment.shift_id, ScheduleAssignment.schedule_date).where(
            ScheduleAssignment.employee_id == employee_id,
            or_(*(
                and_(
                    ScheduleAssignment.shift_id == shift_id,
                    ScheduleAssignment.schedule_date == schedule_date,
                )
                for shift_id, schedule_date in triples
            )),
        )
    )
    taken = {(row.shift_id, row.schedule_date) for row in result.all()}

    for item in items:
        key = (item.shift_id, item.schedule_date)
        if key in taken:
            return item
        taken.add(key)
    return None
