"""Audit trail: one immutable row per login, account change and decision."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any, Mapping, Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from shiftdesk.database import Base


class AuditAction(str, enum.Enum):
    create = "create"
    update = "update"
    login = "login"
    password_change = "password_change"
    approve = "approve"
    reject = "reject"


class AuditTrail(Base):
    __tablename__ = "audit_trail"
    __table_args__ = (
        sa.Index("ix_audit_trail_actor_id", "actor_id"),
        sa.Index("ix_audit_trail_entity", "entity_type", "entity_id"),
        sa.Index("ix_audit_trail_created_at", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    # NULL when the change was made outside a session (bootstrap script)
    actor_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        sa.Uuid, sa.ForeignKey("employees.id"),
    )
    action: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    entity_type: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    entity_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, nullable=False)
    old_values: Mapped[Optional[dict]] = mapped_column(sa.JSON)
    new_values: Mapped[Optional[dict]] = mapped_column(sa.JSON)
    ip_address: Mapped[Optional[str]] = mapped_column(sa.String(45))
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(),
    )

    def __repr__(self) -> str:
        return f"<AuditTrail {self.action} {self.entity_type}:{self.entity_id}>"


def diff_values(
    current: Any,
    changes: Mapping[str, Any],
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split ``changes`` into (old, new) dicts for the fields that really change.

    Enum members are stored by value so the JSON columns stay plain.
    """
    old: dict[str, Any] = {}
    new: dict[str, Any] = {}
    for field, value in changes.items():
        before = getattr(current, field)
        if before == value:
            continue
        old[field] = getattr(before, "value", before)
        new[field] = getattr(value, "value", value)
    return old, new


async def create_audit_entry(
    session: AsyncSession,
    *,
    action: AuditAction,
    entity_type: str,
    entity_id: uuid.UUID,
    actor_id: Optional[uuid.UUID] = None,
    old_values: Optional[dict[str, Any]] = None,
    new_values: Optional[dict[str, Any]] = None,
    ip_address: Optional[str] = None,
) -> AuditTrail:
    """Add an audit row to the caller's unit of work and flush it.

    The row commits or rolls back together with the change it describes.
    """
    entry = AuditTrail(
        actor_id=actor_id,
        action=AuditAction(action).value,
        entity_type=entity_type,
        entity_id=entity_id,
        old_values=old_values,
        new_values=new_values,
        ip_address=ip_address,
    )
    session.add(entry)
    await session.flush()
    return entry
