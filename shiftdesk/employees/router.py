"""Employee router — own profile and admin account management.

Routes (mounted under /api/v1):
    /users/me                      — Caller's profile
    /admin/users                   — List / provision employees
    /admin/users/{employee_code}   — Edit an employee
"""


from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shiftdesk.auth.dependencies import get_admin_claims, get_current_claims
from shiftdesk.auth.schemas import TokenClaims
from shiftdesk.database import get_db
from shiftdesk.employees.schemas import (
    EmployeeCreate,
    EmployeeOut,
    EmployeeUpdate,
    ProfileOut,
)
from shiftdesk.employees.service import EmployeeService

users_router = APIRouter(prefix="", tags=["users"])
admin_router = APIRouter(prefix="", tags=["admin"])


@users_router.get("/me", response_model=ProfileOut)
async def me(
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    return await EmployeeService.get_profile(db, claims.employee_id)


@admin_router.get("/users", response_model=list[EmployeeOut])
async def list_users(
    department: Optional[str] = Query(None, max_length=100),
    _claims: TokenClaims = Depends(get_admin_claims),
    db: AsyncSession = Depends(get_db),
):
    return await EmployeeService.list_employees(db, department)


@admin_router.post("/users", response_model=EmployeeOut, status_code=201)
async def create_user(
    body: EmployeeCreate,
    claims: TokenClaims = Depends(get_admin_claims),
    db: AsyncSession = Depends(get_db),
):
    """Provision an employee with the default password."""
    return await EmployeeService.create_employee(db, body, actor_id=claims.employee_id)


@admin_router.put("/users/{employee_code}", response_model=EmployeeOut)
async def update_user(
    employee_code: str,
    body: EmployeeUpdate,
    claims: TokenClaims = Depends(get_admin_claims),
    db: AsyncSession = Depends(get_db),
):
    return await EmployeeService.update_employee(
        db, employee_code, body, actor_id=claims.employee_id,
    )
