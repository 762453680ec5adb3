"""Shared test fixtures — async DB, client, auth helpers, factories.

Reusable across all test modules (auth, scheduling, leave, workflow, ...).
Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import os

# Set test settings before any other import touches pydantic-settings
os.environ.setdefault("JWT_SECRET", "test-secret-for-ci-do-not-use-in-production")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "warning")

import uuid
from datetime import date, datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from shiftdesk.auth.passwords import hash_password
from shiftdesk.auth.service import create_access_token
from shiftdesk.common.constants import DEFAULT_SHIFTS, RequestStatus, ShiftPart, UserRole
from shiftdesk.database import Database
from shiftdesk.main import create_app

# Import ALL model modules so SQLAlchemy can resolve cross-module relationships
import shiftdesk.common.audit  # noqa: F401
import shiftdesk.employees.models  # noqa: F401
import shiftdesk.leave.models  # noqa: F401
import shiftdesk.scheduling.models  # noqa: F401

from shiftdesk.employees.models import Employee
from shiftdesk.leave.models import LeaveRequest
from shiftdesk.scheduling.models import ChangeRequest, ScheduleAssignment, Shift

# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

test_database = Database(engine)
TestSessionFactory = test_database.session_factory

DEFAULT_PASSWORD = "1"


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    await test_database.create_all()
    yield
    await test_database.drop_all()


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from shiftdesk.common.rate_limit import limiter

    limiter.reset()
    yield


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance bound to the test database."""
    yield create_app(database=test_database)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Model factories ─────────────────────────────────────────────────
#
# Seeding helpers commit in their own unit of work so the rows survive a
# rollback triggered by a failing request later in the test.

async def seed_shifts() -> list[Shift]:
    """Insert the default Morning/Afternoon/Night shifts (ids 1, 2, 3)."""
    async with test_database.session() as session:
        shifts = [
            Shift(shift_name=name, start_time=start, end_time=end)
            for name, start, end in DEFAULT_SHIFTS
        ]
        session.add_all(shifts)
        await session.flush()
    return shifts


async def seed_employee(
    *,
    employee_code: Optional[str] = None,
    full_name: str = "Test User",
    department: str = "Operations",
    email: Optional[str] = None,
    role: UserRole = UserRole.staff,
    password: str = DEFAULT_PASSWORD,
    is_password_default: bool = True,
    is_active: bool = True,
) -> Employee:
    code = employee_code or f"E{uuid.uuid4().hex[:6].upper()}"
    async with test_database.session() as session:
        employee = Employee(
            employee_code=code,
            full_name=full_name,
            department=department,
            email=email or f"{code.lower()}@shiftdesk.io",
            password_hash=hash_password(password),
            role=role,
            is_password_default=is_password_default,
            is_active=is_active,
        )
        session.add(employee)
        await session.flush()
    return employee


async def seed_schedule(
    employee_id: uuid.UUID,
    *,
    shift_id: int = 1,
    schedule_date: date = date(2024, 6, 3),
    shift_part: ShiftPart = ShiftPart.full,
    status: RequestStatus = RequestStatus.pending,
) -> ScheduleAssignment:
    async with test_database.session() as session:
        row = ScheduleAssignment(
            employee_id=employee_id,
            shift_id=shift_id,
            schedule_date=schedule_date,
            shift_part=shift_part,
            status=status,
        )
        session.add(row)
        await session.flush()
    return row


async def seed_leave(
    employee_id: uuid.UUID,
    *,
    start_date: date = date(2024, 7, 1),
    end_date: date = date(2024, 7, 3),
    status: RequestStatus = RequestStatus.pending,
) -> LeaveRequest:
    async with test_database.session() as session:
        row = LeaveRequest(
            employee_id=employee_id,
            leave_type="annual",
            start_date=start_date,
            end_date=end_date,
            reason="Family trip",
            status=status,
        )
        session.add(row)
        await session.flush()
    return row


async def seed_change_request(
    schedule: ScheduleAssignment,
    *,
    new_shift_id: int = 2,
    new_shift_part: ShiftPart = ShiftPart.morning,
    status: RequestStatus = RequestStatus.pending,
) -> ChangeRequest:
    async with test_database.session() as session:
        row = ChangeRequest(
            schedule_id=schedule.id,
            employee_id=schedule.employee_id,
            new_shift_id=new_shift_id,
            new_shift_part=new_shift_part,
            reason="Swap with a colleague",
            status=status,
        )
        session.add(row)
        await session.flush()
    return row


async def fetch_one(model, row_id):
    """Reload a row in a fresh session (bypasses any stale identity map)."""
    async with TestSessionFactory() as session:
        result = await session.execute(select(model).where(model.id == row_id))
        return result.scalars().first()


async def count_rows(model, *criteria) -> int:
    async with TestSessionFactory() as session:
        result = await session.execute(
            select(func.count()).select_from(model).where(*criteria)
        )
        return result.scalar_one()


@pytest.fixture
async def shifts() -> list[Shift]:
    return await seed_shifts()


@pytest.fixture
async def staff() -> Employee:
    return await seed_employee(
        employee_code="S001", full_name="Sam Staff", department="Operations",
    )


@pytest.fixture
async def other_staff() -> Employee:
    return await seed_employee(
        employee_code="S002", full_name="Riley Staff", department="Warehouse",
    )


@pytest.fixture
async def admin() -> Employee:
    return await seed_employee(
        employee_code="A001", full_name="Alex Admin", department="Management",
        role=UserRole.admin,
    )


# ── Auth helpers ────────────────────────────────────────────────────

def make_token(
    employee: Employee,
    *,
    issued_at: Optional[datetime] = None,
) -> str:
    """Issue a session token for ``employee`` as the login flow would."""
    token, _ = create_access_token(
        employee.id, employee.employee_code, employee.role, now=issued_at,
    )
    return token


def make_expired_token(employee: Employee) -> str:
    return make_token(
        employee, issued_at=datetime.now(timezone.utc) - timedelta(hours=9),
    )


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def staff_headers(staff) -> dict[str, str]:
    return bearer(make_token(staff))


@pytest.fixture
def other_staff_headers(other_staff) -> dict[str, str]:
    return bearer(make_token(other_staff))


@pytest.fixture
def admin_headers(admin) -> dict[str, str]:
    return bearer(make_token(admin))
