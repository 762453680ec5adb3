"""Leave router — file and list own leave; admin pending queue and decisions.

All endpoints require authentication. Admin endpoints enforce the admin role.
"""


import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shiftdesk.auth.dependencies import get_admin_claims, get_current_claims
from shiftdesk.auth.schemas import TokenClaims
from shiftdesk.common.constants import RequestKind
from shiftdesk.database import get_db
from shiftdesk.leave.schemas import LeaveRequestCreate, LeaveRequestOut
from shiftdesk.leave.service import LeaveService
from shiftdesk.workflow import approval
from shiftdesk.workflow.schemas import StatusUpdateRequest

employee_router = APIRouter(prefix="", tags=["leave"])
admin_router = APIRouter(prefix="", tags=["admin"])


# ── POST /employee/leaves ───────────────────────────────────────────

@employee_router.post("/leaves", response_model=LeaveRequestOut, status_code=201)
async def apply_leave(
    body: LeaveRequestCreate,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    """File a leave request (created as pending)."""
    return await LeaveService.create_leave(db, claims.employee_id, body)


# ── GET /employee/leaves ────────────────────────────────────────────

@employee_router.get("/leaves", response_model=list[LeaveRequestOut])
async def my_leaves(
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    return await LeaveService.list_my_leaves(db, claims.employee_id)


# ── GET /admin/leaves ───────────────────────────────────────────────

@admin_router.get("/leaves", response_model=list[LeaveRequestOut])
async def pending_leaves(
    _claims: TokenClaims = Depends(get_admin_claims),
    db: AsyncSession = Depends(get_db),
):
    """Pending leave requests with employee display metadata."""
    return await LeaveService.list_pending_leaves(db)


# ── PUT /admin/leaves/{id} ──────────────────────────────────────────

@admin_router.put("/leaves/{request_id}", response_model=LeaveRequestOut)
async def decide_leave(
    request_id: uuid.UUID,
    body: StatusUpdateRequest,
    claims: TokenClaims = Depends(get_admin_claims),
    db: AsyncSession = Depends(get_db),
):
    row = await approval.set_status(
        db, RequestKind.leave, request_id, body.status, claims.employee_id,
        remarks=body.remarks,
    )
    return LeaveRequestOut.model_validate(row)
