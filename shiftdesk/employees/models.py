"""Employee ORM model — the credential store.

SQLAlchemy 2.0 async-compatible model with Mapped[] annotations.
Column names match the schema created by 001_initial_schema.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shiftdesk.common.constants import UserRole
from shiftdesk.database import Base

if TYPE_CHECKING:
    from shiftdesk.leave.models import LeaveRequest
    from shiftdesk.scheduling.models import ScheduleAssignment


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Employee(Base):
    """Employee identity, role flag and password state."""

    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    employee_code: Mapped[str] = mapped_column(
        sa.String(20), unique=True, nullable=False,
    )
    full_name: Mapped[str] = mapped_column(sa.String(150), nullable=False)
    department: Mapped[str] = mapped_column(sa.String(100), nullable=False, index=True)
    email: Mapped[str] = mapped_column(
        sa.String(255), unique=True, nullable=False,
    )

    # ── Credentials ─────────────────────────────────────────────────
    password_hash: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        sa.Enum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.staff,
    )
    is_password_default: Mapped[bool] = mapped_column(
        sa.Boolean, nullable=False, default=True,
    )

    is_active: Mapped[bool] = mapped_column(
        sa.Boolean, nullable=False, default=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, server_default=sa.func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, server_default=sa.func.now(),
    )

    # ── Relationships ───────────────────────────────────────────────
    schedules: Mapped[list[ScheduleAssignment]] = relationship(
        back_populates="employee", foreign_keys="ScheduleAssignment.employee_id",
    )
    leave_requests: Mapped[list[LeaveRequest]] = relationship(
        back_populates="employee", foreign_keys="LeaveRequest.employee_id",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    def __repr__(self) -> str:
        return f"<Employee {self.employee_code!r} ({self.role.value})>"
