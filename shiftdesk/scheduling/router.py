"""Scheduling router — shift reference list, registrations, change requests.

Routes (mounted under /api/v1):
    /shifts                                — Shift reference list
    /employee/schedules                    — Own month listing, batch registration
    /employee/schedules/change-request     — File a change request
    /employee/change-requests              — Own change requests
    /admin/schedules                       — Month listing (optionally per department)
    /admin/schedules/{id}                  — Approve / reject an assignment
    /admin/change-requests                 — Pending change requests
    /admin/change-requests/{id}            — Approve / reject a change request
"""


import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shiftdesk.auth.dependencies import get_admin_claims, get_current_claims
from shiftdesk.auth.schemas import TokenClaims
from shiftdesk.common.constants import RequestKind
from shiftdesk.database import get_db
from shiftdesk.scheduling.schemas import (
    AdminScheduleOut,
    ChangeRequestCreate,
    ChangeRequestOut,
    ScheduleItem,
    ScheduleOut,
    ShiftOut,
)
from shiftdesk.scheduling.service import ScheduleService
from shiftdesk.workflow import approval
from shiftdesk.workflow.schemas import StatusUpdateRequest

shifts_router = APIRouter(prefix="", tags=["shifts"])
employee_router = APIRouter(prefix="", tags=["employee"])
admin_router = APIRouter(prefix="", tags=["admin"])


# ═════════════════════════════════════════════════════════════════════
# Shifts
# ═════════════════════════════════════════════════════════════════════

@shifts_router.get("", response_model=list[ShiftOut])
async def list_shifts(
    _claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    return await ScheduleService.list_shifts(db)


# ═════════════════════════════════════════════════════════════════════
# Employee surface
# ═════════════════════════════════════════════════════════════════════

@employee_router.get("/schedules", response_model=list[ScheduleOut])
async def my_schedules(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    """The caller's assignments for one month, oldest date first."""
    return await ScheduleService.list_employee_schedules(db, claims.employee_id, month, year)


@employee_router.post("/schedules", response_model=list[ScheduleOut], status_code=201)
async def register_schedules(
    body: list[ScheduleItem],
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    """Register a batch of shifts. Fails as a whole on the first conflict."""
    return await ScheduleService.register_schedules(db, claims.employee_id, body)


@employee_router.post(
    "/schedules/change-request", response_model=ChangeRequestOut, status_code=201,
)
async def file_change_request(
    body: ChangeRequestCreate,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    return await ScheduleService.create_change_request(db, claims.employee_id, body)


@employee_router.get("/change-requests", response_model=list[ChangeRequestOut])
async def my_change_requests(
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    return await ScheduleService.list_my_change_requests(db, claims.employee_id)


# ═════════════════════════════════════════════════════════════════════
# Admin surface
# ═════════════════════════════════════════════════════════════════════

@admin_router.get("/schedules", response_model=list[AdminScheduleOut])
async def all_schedules(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
    department: Optional[str] = Query(None, max_length=100),
    _claims: TokenClaims = Depends(get_admin_claims),
    db: AsyncSession = Depends(get_db),
):
    return await ScheduleService.list_admin_schedules(db, month, year, department)


@admin_router.put("/schedules/{schedule_id}", response_model=ScheduleOut)
async def decide_schedule(
    schedule_id: uuid.UUID,
    body: StatusUpdateRequest,
    claims: TokenClaims = Depends(get_admin_claims),
    db: AsyncSession = Depends(get_db),
):
    row = await approval.set_status(
        db, RequestKind.schedule, schedule_id, body.status, claims.employee_id,
        remarks=body.remarks,
    )
    return await ScheduleService.describe_schedule(db, row)


@admin_router.get("/change-requests", response_model=list[ChangeRequestOut])
async def pending_change_requests(
    _claims: TokenClaims = Depends(get_admin_claims),
    db: AsyncSession = Depends(get_db),
):
    return await ScheduleService.list_pending_change_requests(db)


@admin_router.put("/change-requests/{change_request_id}", response_model=ChangeRequestOut)
async def decide_change_request(
    change_request_id: uuid.UUID,
    body: StatusUpdateRequest,
    claims: TokenClaims = Depends(get_admin_claims),
    db: AsyncSession = Depends(get_db),
):
    """Decide a change request. The referenced assignment is left unchanged."""
    row = await approval.set_status(
        db, RequestKind.change_request, change_request_id, body.status, claims.employee_id,
        remarks=body.remarks,
    )
    return ChangeRequestOut.model_validate(row)
