"""Employee management tests — admin provisioning, edits, own profile."""

from __future__ import annotations

from sqlalchemy import select

from shiftdesk.auth.passwords import verify_password
from shiftdesk.common.audit import AuditTrail
from shiftdesk.common.constants import UserRole
from shiftdesk.config import settings
from shiftdesk.employees.models import Employee
from tests.conftest import TestSessionFactory, count_rows, fetch_one

NEW_HIRE = {
    "employee_code": "S100",
    "full_name": "Jordan Lee",
    "department": "Warehouse",
    "email": "jordan.lee@shiftdesk.io",
}


async def test_admin_creates_employee_with_default_password(client, admin, admin_headers):
    resp = await client.post("/api/v1/admin/users", json=NEW_HIRE, headers=admin_headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["employee_code"] == "S100"
    assert body["role"] == "staff"
    assert body["is_password_default"] is True
    assert "password_hash" not in body

    async with TestSessionFactory() as session:
        result = await session.execute(
            select(Employee).where(Employee.employee_code == "S100")
        )
        stored = result.scalars().one()
    assert verify_password(settings.DEFAULT_EMPLOYEE_PASSWORD, stored.password_hash)

    async with TestSessionFactory() as session:
        result = await session.execute(
            select(AuditTrail).where(AuditTrail.entity_id == stored.id)
        )
        entry = result.scalars().one()
    assert entry.action == "create"
    assert entry.actor_id == admin.id


async def test_new_employee_can_log_in_with_default_password(client, admin_headers):
    await client.post("/api/v1/admin/users", json=NEW_HIRE, headers=admin_headers)
    resp = await client.post(
        "/api/v1/auth/staff/login",
        json={"employee_code": "S100", "password": settings.DEFAULT_EMPLOYEE_PASSWORD},
    )
    assert resp.status_code == 200
    assert resp.json()["is_password_default"] is True


async def test_duplicate_employee_code_conflicts(client, staff, admin_headers):
    resp = await client.post(
        "/api/v1/admin/users",
        json={**NEW_HIRE, "employee_code": "S001"},
        headers=admin_headers,
    )
    assert resp.status_code == 409
    assert "employee_code" in resp.json()["errors"]


async def test_duplicate_email_conflicts(client, staff, admin_headers):
    resp = await client.post(
        "/api/v1/admin/users",
        json={**NEW_HIRE, "email": staff.email},
        headers=admin_headers,
    )
    assert resp.status_code == 409
    assert "email" in resp.json()["errors"]


async def test_invalid_email_is_422(client, admin_headers):
    resp = await client.post(
        "/api/v1/admin/users",
        json={**NEW_HIRE, "email": "not-an-email"},
        headers=admin_headers,
    )
    assert resp.status_code == 422


async def test_list_employees_by_department(client, staff, other_staff, admin, admin_headers):
    resp = await client.get("/api/v1/admin/users", headers=admin_headers)
    assert resp.status_code == 200
    assert [e["employee_code"] for e in resp.json()] == ["A001", "S001", "S002"]

    resp = await client.get(
        "/api/v1/admin/users", params={"department": "Warehouse"}, headers=admin_headers,
    )
    assert [e["employee_code"] for e in resp.json()] == ["S002"]


async def test_update_employee(client, staff, admin_headers):
    resp = await client.put(
        "/api/v1/admin/users/S001",
        json={"department": "Warehouse", "role": "admin"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["department"] == "Warehouse"

    stored = await fetch_one(Employee, staff.id)
    assert stored.department == "Warehouse"
    assert stored.role == UserRole.admin
    assert stored.full_name == "Sam Staff"


async def test_deactivated_employee_cannot_log_in(client, staff, admin_headers):
    resp = await client.put(
        "/api/v1/admin/users/S001", json={"is_active": False}, headers=admin_headers,
    )
    assert resp.status_code == 200

    login = await client.post(
        "/api/v1/auth/staff/login",
        json={"employee_code": "S001", "password": "1"},
    )
    assert login.status_code == 404


async def test_update_email_to_taken_address_conflicts(
    client, staff, other_staff, admin_headers,
):
    resp = await client.put(
        "/api/v1/admin/users/S001",
        json={"email": other_staff.email},
        headers=admin_headers,
    )
    assert resp.status_code == 409
    stored = await fetch_one(Employee, staff.id)
    assert stored.email == staff.email


async def test_update_unknown_employee_is_404(client, admin_headers):
    resp = await client.put(
        "/api/v1/admin/users/NOPE", json={"full_name": "Ghost"}, headers=admin_headers,
    )
    assert resp.status_code == 404
    assert await count_rows(AuditTrail) == 0


async def test_me_returns_own_profile(client, staff, staff_headers):
    resp = await client.get("/api/v1/users/me", headers=staff_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["employee_code"] == "S001"
    assert body["department"] == "Operations"
    assert body["role"] == "staff"


async def test_provision_login_change_password_scenario(client, admin_headers):
    created = await client.post("/api/v1/admin/users", json=NEW_HIRE, headers=admin_headers)
    assert created.status_code == 201

    first = await client.post(
        "/api/v1/auth/staff/login",
        json={"employee_code": "S100", "password": "1"},
    )
    assert first.status_code == 200
    assert first.json()["is_password_default"] is True

    changed = await client.post(
        "/api/v1/auth/change-password",
        json={"new_password": "correct-horse"},
        headers={"Authorization": f"Bearer {first.json()['access_token']}"},
    )
    assert changed.status_code == 200

    second = await client.post(
        "/api/v1/auth/staff/login",
        json={"employee_code": "S100", "password": "correct-horse"},
    )
    assert second.status_code == 200
    assert second.json()["is_password_default"] is False

    stale = await client.post(
        "/api/v1/auth/staff/login",
        json={"employee_code": "S100", "password": "1"},
    )
    assert stale.status_code == 401
