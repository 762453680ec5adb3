"""Scheduling ORM models: Shift, ScheduleAssignment, ChangeRequest."""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shiftdesk.common.constants import ShiftPart
from shiftdesk.database import Base
from shiftdesk.workflow.models import ReviewableMixin

if TYPE_CHECKING:
    from shiftdesk.employees.models import Employee


class Shift(Base):
    """Named work-shift definition (reference data)."""

    __tablename__ = "shifts"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    shift_name: Mapped[str] = mapped_column(sa.String(100), unique=True, nullable=False)
    start_time: Mapped[Optional[str]] = mapped_column(sa.String(5))
    end_time: Mapped[Optional[str]] = mapped_column(sa.String(5))

    def __repr__(self) -> str:
        return f"<Shift {self.id} {self.shift_name!r}>"


class ScheduleAssignment(Base, ReviewableMixin):
    """One employee registered on one shift for one calendar date."""

    __tablename__ = "employee_schedules"
    __table_args__ = (
        # Authoritative guard for the conflict rule; the service pre-check
        # only produces a friendlier error before hitting it.
        sa.UniqueConstraint(
            "employee_id", "shift_id", "schedule_date", name="uq_schedule_emp_shift_date",
        ),
        sa.Index("ix_employee_schedules_date", "schedule_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, sa.ForeignKey("employees.id"), nullable=False,
    )
    shift_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("shifts.id"), nullable=False,
    )
    schedule_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    shift_part: Mapped[ShiftPart] = mapped_column(
        sa.Enum(ShiftPart, name="shift_part"), nullable=False,
    )

    # Relationships
    employee: Mapped[Employee] = relationship(
        back_populates="schedules", foreign_keys=[employee_id],
    )
    shift: Mapped[Shift] = relationship()
    change_requests: Mapped[list[ChangeRequest]] = relationship(
        back_populates="schedule",
    )


class ChangeRequest(Base, ReviewableMixin):
    """Request to move an existing assignment to another shift / shift part."""

    __tablename__ = "schedule_change_requests"
    __table_args__ = (
        sa.Index("ix_change_requests_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    schedule_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, sa.ForeignKey("employee_schedules.id"), nullable=False,
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, sa.ForeignKey("employees.id"), nullable=False,
    )
    new_shift_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("shifts.id"), nullable=False,
    )
    new_shift_part: Mapped[ShiftPart] = mapped_column(
        sa.Enum(ShiftPart, name="shift_part"), nullable=False,
    )
    reason: Mapped[Optional[str]] = mapped_column(sa.Text)

    # Relationships
    schedule: Mapped[ScheduleAssignment] = relationship(back_populates="change_requests")
    employee: Mapped[Employee] = relationship(
        foreign_keys=[employee_id],
    )
    new_shift: Mapped[Shift] = relationship()
