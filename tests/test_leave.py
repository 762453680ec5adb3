"""Leave module test suite — filing, listings, admin decisions.

Tests run against SQLite via the shared conftest.py fixtures.
"""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from shiftdesk.common.constants import RequestStatus
from shiftdesk.leave.models import LeaveRequest
from shiftdesk.leave.schemas import LeaveRequestCreate
from shiftdesk.leave.service import LeaveService
from tests.conftest import TestSessionFactory, count_rows, fetch_one, seed_leave


# ═════════════════════════════════════════════════════════════════════
# Schema validation
# ═════════════════════════════════════════════════════════════════════


def test_leave_create_accepts_single_day():
    data = LeaveRequestCreate(
        leave_type="sick", start_date=date(2024, 7, 1), end_date=date(2024, 7, 1),
    )
    assert data.start_date == data.end_date


def test_leave_create_rejects_inverted_range():
    with pytest.raises(ValidationError):
        LeaveRequestCreate(
            leave_type="sick", start_date=date(2024, 7, 5), end_date=date(2024, 7, 1),
        )


# ═════════════════════════════════════════════════════════════════════
# Service
# ═════════════════════════════════════════════════════════════════════


async def test_create_leave_is_pending(staff):
    async with TestSessionFactory() as session:
        out = await LeaveService.create_leave(
            session,
            staff.id,
            LeaveRequestCreate(
                leave_type="annual",
                start_date=date(2024, 8, 1),
                end_date=date(2024, 8, 2),
                reason="Wedding",
            ),
        )
        await session.commit()

    assert out.status == RequestStatus.pending
    stored = await fetch_one(LeaveRequest, out.id)
    assert stored.employee_id == staff.id
    assert stored.reason == "Wedding"


async def test_overlapping_leave_is_not_rejected(staff):
    await seed_leave(staff.id, start_date=date(2024, 7, 1), end_date=date(2024, 7, 5))
    async with TestSessionFactory() as session:
        await LeaveService.create_leave(
            session,
            staff.id,
            LeaveRequestCreate(
                leave_type="annual", start_date=date(2024, 7, 3), end_date=date(2024, 7, 4),
            ),
        )
        await session.commit()
    assert await count_rows(LeaveRequest) == 2


# ═════════════════════════════════════════════════════════════════════
# API
# ═════════════════════════════════════════════════════════════════════


async def test_apply_leave(client, staff, staff_headers):
    resp = await client.post(
        "/api/v1/employee/leaves",
        json={
            "leave_type": "annual",
            "start_date": "2024-07-01",
            "end_date": "2024-07-03",
            "reason": "Family trip",
        },
        headers=staff_headers,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "pending"
    assert body["employee_id"] == str(staff.id)


async def test_apply_leave_inverted_range_is_422(client, staff_headers):
    resp = await client.post(
        "/api/v1/employee/leaves",
        json={"leave_type": "annual", "start_date": "2024-07-03", "end_date": "2024-07-01"},
        headers=staff_headers,
    )
    assert resp.status_code == 422
    assert await count_rows(LeaveRequest) == 0


async def test_apply_leave_requires_token(client):
    resp = await client.post(
        "/api/v1/employee/leaves",
        json={"leave_type": "annual", "start_date": "2024-07-01", "end_date": "2024-07-01"},
    )
    assert resp.status_code == 401


async def test_my_leaves_only_lists_own(client, staff, other_staff, staff_headers):
    await seed_leave(staff.id, start_date=date(2024, 7, 1), end_date=date(2024, 7, 1))
    await seed_leave(staff.id, start_date=date(2024, 9, 1), end_date=date(2024, 9, 2))
    await seed_leave(other_staff.id)

    resp = await client.get("/api/v1/employee/leaves", headers=staff_headers)
    assert resp.status_code == 200
    rows = resp.json()
    assert len(rows) == 2
    assert {r["employee_id"] for r in rows} == {str(staff.id)}
    # Most recent leave first
    assert rows[0]["start_date"] == "2024-09-01"


async def test_admin_pending_leaves_has_display_fields(
    client, staff, other_staff, admin_headers,
):
    pending = await seed_leave(staff.id)
    await seed_leave(other_staff.id, status=RequestStatus.approved)

    resp = await client.get("/api/v1/admin/leaves", headers=admin_headers)
    assert resp.status_code == 200
    rows = resp.json()
    assert [r["id"] for r in rows] == [str(pending.id)]
    assert rows[0]["employee_code"] == "S001"
    assert rows[0]["full_name"] == "Sam Staff"
    assert rows[0]["department"] == "Operations"


async def test_reject_leave_with_remarks(client, staff, admin, admin_headers):
    leave = await seed_leave(staff.id)
    resp = await client.put(
        f"/api/v1/admin/leaves/{leave.id}",
        json={"status": "rejected", "remarks": "Peak season"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "rejected"

    stored = await fetch_one(LeaveRequest, leave.id)
    assert stored.status == RequestStatus.rejected
    assert stored.reviewed_by == admin.id
    assert stored.reviewer_remarks == "Peak season"

    pending = await client.get("/api/v1/admin/leaves", headers=admin_headers)
    assert pending.json() == []


async def test_decided_leave_cannot_be_redecided(client, staff, admin_headers):
    leave = await seed_leave(staff.id, status=RequestStatus.approved)
    resp = await client.put(
        f"/api/v1/admin/leaves/{leave.id}",
        json={"status": "rejected"},
        headers=admin_headers,
    )
    assert resp.status_code == 409
    stored = await fetch_one(LeaveRequest, leave.id)
    assert stored.status == RequestStatus.approved
