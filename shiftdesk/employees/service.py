"""Employee service — admin provisioning, edits and profile reads."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from shiftdesk.auth.passwords import hash_password
from shiftdesk.common.audit import AuditAction, create_audit_entry, diff_values
from shiftdesk.common.exceptions import ConflictError, NotFoundException
from shiftdesk.config import settings
from shiftdesk.employees.models import Employee
from shiftdesk.employees.schemas import EmployeeCreate, EmployeeUpdate

logger = logging.getLogger(__name__)


class EmployeeService:
    """Static service class for the credential store."""

    @staticmethod
    async def _ensure_unique(
        db: AsyncSession,
        *,
        employee_code: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> None:
        if employee_code is not None:
            query = select(Employee.id).where(Employee.employee_code == employee_code)
            if exclude_id is not None:
                query = query.where(Employee.id != exclude_id)
            if (await db.execute(query)).first() is not None:
                raise ConflictError("employee_code", employee_code)
        if email is not None:
            query = select(Employee.id).where(Employee.email == email)
            if exclude_id is not None:
                query = query.where(Employee.id != exclude_id)
            if (await db.execute(query)).first() is not None:
                raise ConflictError("email", email)

    @staticmethod
    async def create_employee(
        db: AsyncSession,
        data: EmployeeCreate,
        actor_id: Optional[uuid.UUID] = None,
    ) -> Employee:
        """Provision an account with the configured default password.

        The account starts with ``is_password_default=True`` so the client
        can force a password change after the first login.
        """
        await EmployeeService._ensure_unique(
            db, employee_code=data.employee_code, email=str(data.email),
        )

        employee = Employee(
            employee_code=data.employee_code,
            full_name=data.full_name,
            department=data.department,
            email=str(data.email),
            role=data.role,
            password_hash=await run_in_threadpool(
                hash_password, settings.DEFAULT_EMPLOYEE_PASSWORD,
            ),
            is_password_default=True,
            is_active=True,
        )
        db.add(employee)
        await db.flush()

        await create_audit_entry(
            db,
            action=AuditAction.create,
            entity_type="employee",
            entity_id=employee.id,
            actor_id=actor_id,
            new_values={
                "employee_code": employee.employee_code,
                "department": employee.department,
                "role": employee.role.value,
            },
        )
        logger.info("Employee %s created (role=%s)", employee.employee_code, employee.role.value)
        return employee

    @staticmethod
    async def list_employees(
        db: AsyncSession,
        department: Optional[str] = None,
    ) -> list[Employee]:
        query = select(Employee).order_by(Employee.employee_code)
        if department:
            query = query.where(Employee.department == department)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def update_employee(
        db: AsyncSession,
        employee_code: str,
        data: EmployeeUpdate,
        actor_id: Optional[uuid.UUID] = None,
    ) -> Employee:
        result = await db.execute(
            select(Employee).where(Employee.employee_code == employee_code)
        )
        employee = result.scalars().first()
        if employee is None:
            raise NotFoundException("Employee", employee_code)

        update_data = data.model_dump(exclude_unset=True)
        if "email" in update_data and update_data["email"] is not None:
            update_data["email"] = str(update_data["email"])
            await EmployeeService._ensure_unique(
                db, email=update_data["email"], exclude_id=employee.id,
            )

        changes = {key: value for key, value in update_data.items() if value is not None}
        old_values, new_values = diff_values(employee, changes)
        for key in new_values:
            setattr(employee, key, changes[key])
        employee.updated_at = datetime.now(timezone.utc)
        await db.flush()

        if new_values:
            await create_audit_entry(
                db,
                action=AuditAction.update,
                entity_type="employee",
                entity_id=employee.id,
                actor_id=actor_id,
                old_values=old_values,
                new_values=new_values,
            )
        logger.info("Employee %s updated: %s", employee_code, sorted(new_values))
        return employee

    @staticmethod
    async def get_profile(db: AsyncSession, employee_id: uuid.UUID) -> Employee:
        result = await db.execute(select(Employee).where(Employee.id == employee_id))
        employee = result.scalars().first()
        if employee is None:
            raise NotFoundException("Employee", str(employee_id))
        return employee
