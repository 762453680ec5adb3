"""Approval workflow — pending → approved | rejected for every workflow row.

The same state machine serves schedule assignments, leave requests and
change requests. Approved and rejected are terminal: deciding a row that
is no longer pending raises InvalidTransitionException and leaves it as is.
Approving a change request does not rewrite the referenced assignment.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shiftdesk.common.audit import AuditAction, create_audit_entry
from shiftdesk.common.constants import DecisionStatus, RequestKind, RequestStatus
from shiftdesk.common.exceptions import (
    InvalidTransitionException,
    NotFoundException,
    ValidationException,
)
from shiftdesk.leave.models import LeaveRequest
from shiftdesk.scheduling.models import ChangeRequest, ScheduleAssignment

logger = logging.getLogger(__name__)

WorkflowRow = Union[ScheduleAssignment, LeaveRequest, ChangeRequest]

_MODELS: dict[RequestKind, type] = {
    RequestKind.schedule: ScheduleAssignment,
    RequestKind.leave: LeaveRequest,
    RequestKind.change_request: ChangeRequest,
}

_ENTITY_NAMES: dict[RequestKind, str] = {
    RequestKind.schedule: "ScheduleAssignment",
    RequestKind.leave: "LeaveRequest",
    RequestKind.change_request: "ChangeRequest",
}

# Allowed transitions; anything absent is rejected
_TRANSITIONS: dict[RequestStatus, set[RequestStatus]] = {
    RequestStatus.pending: {RequestStatus.approved, RequestStatus.rejected},
    RequestStatus.approved: set(),
    RequestStatus.rejected: set(),
}


def can_transition(current: RequestStatus, target: RequestStatus) -> bool:
    return target in _TRANSITIONS.get(current, set())


async def set_status(
    db: AsyncSession,
    kind: RequestKind,
    row_id: uuid.UUID,
    new_status: Union[DecisionStatus, str],
    actor_id: uuid.UUID,
    *,
    remarks: Optional[str] = None,
) -> WorkflowRow:
    """Move a pending row to approved or rejected on behalf of an admin.

    Raises:
        ValidationException: ``new_status`` is not approved/rejected.
        NotFoundException: no row of ``kind`` with ``row_id``.
        InvalidTransitionException: the row is not pending any more.
    """
    try:
        decision = DecisionStatus(new_status)
    except ValueError:
        raise ValidationException(
            {"status": [f"'{new_status}' is not one of: approved, rejected."]}
        )
    target = RequestStatus(decision.value)

    model = _MODELS[kind]
    entity_name = _ENTITY_NAMES[kind]

    result = await db.execute(
        select(model).where(model.id == row_id).with_for_update()
    )
    row = result.scalars().first()
    if row is None:
        raise NotFoundException(entity_name, str(row_id))

    if not can_transition(row.status, target):
        logger.warning(
            "Refused %s %s: %s → %s", entity_name, row_id, row.status.value, target.value,
        )
        raise InvalidTransitionException(entity_name, row_id, row.status.value)

    now = datetime.now(timezone.utc)
    old_status = row.status.value
    row.status = target
    row.reviewed_by = actor_id
    row.reviewed_at = now
    row.reviewer_remarks = remarks
    row.updated_at = now
    await db.flush()

    await create_audit_entry(
        db,
        action=AuditAction.approve if target == RequestStatus.approved else AuditAction.reject,
        entity_type=kind.value,
        entity_id=row.id,
        actor_id=actor_id,
        old_values={"status": old_status},
        new_values={"status": target.value, "remarks": remarks},
    )
    logger.info("%s %s %s by %s", entity_name, row_id, target.value, actor_id)
    return row
