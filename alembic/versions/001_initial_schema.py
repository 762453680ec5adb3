"""001 – Initial schema: employees, shifts, schedules, leave, change requests, audit.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17 09:00:00.000000+00:00
"""

from alembic import op
import sqlalchemy as sa

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ENUM_TYPES: list[tuple[str, list[str]]] = [
    ("user_role", ["staff", "admin"]),
    ("request_status", ["pending", "approved", "rejected"]),
    ("shift_part", ["morning", "afternoon", "full"]),
]

SEED_SHIFTS: list[tuple[str, str, str]] = [
    ("Morning", "06:00", "14:00"),
    ("Afternoon", "14:00", "22:00"),
    ("Night", "22:00", "06:00"),
]


def _create_enum(name: str, values: list[str]) -> None:
    vals = ", ".join(f"'{v}'" for v in values)
    op.execute(f"CREATE TYPE {name} AS ENUM ({vals})")


def _drop_enum(name: str) -> None:
    op.execute(f"DROP TYPE IF EXISTS {name}")


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ── Enum types ────────────────────────────────────────────────────────
    for name, values in ENUM_TYPES:
        _create_enum(name, values)

    # ── 1. employees (credential store) ───────────────────────────────────
    op.execute("""
        CREATE TABLE employees (
            id                  UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_code       VARCHAR(20)  NOT NULL UNIQUE,
            full_name           VARCHAR(150) NOT NULL,
            department          VARCHAR(100) NOT NULL,
            email               VARCHAR(255) NOT NULL UNIQUE,
            password_hash       VARCHAR(255) NOT NULL,
            role                user_role NOT NULL DEFAULT 'staff',
            is_password_default BOOLEAN NOT NULL DEFAULT TRUE,
            is_active           BOOLEAN NOT NULL DEFAULT TRUE,
            created_at          TIMESTAMPTZ DEFAULT NOW(),
            updated_at          TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX ix_employees_department ON employees(department)")

    # ── 2. shifts ─────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE shifts (
            id          SERIAL PRIMARY KEY,
            shift_name  VARCHAR(100) NOT NULL UNIQUE,
            start_time  VARCHAR(5),
            end_time    VARCHAR(5)
        )
    """)

    # ── 3. employee_schedules ─────────────────────────────────────────────
    op.execute("""
        CREATE TABLE employee_schedules (
            id               UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_id      UUID NOT NULL REFERENCES employees(id),
            shift_id         INTEGER NOT NULL REFERENCES shifts(id),
            schedule_date    DATE NOT NULL,
            shift_part       shift_part NOT NULL,
            status           request_status NOT NULL DEFAULT 'pending',
            reviewed_by      UUID REFERENCES employees(id),
            reviewed_at      TIMESTAMPTZ,
            reviewer_remarks TEXT,
            created_at       TIMESTAMPTZ DEFAULT NOW(),
            updated_at       TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT uq_schedule_emp_shift_date
                UNIQUE (employee_id, shift_id, schedule_date)
        )
    """)
    op.execute("CREATE INDEX ix_employee_schedules_date ON employee_schedules(schedule_date)")

    # ── 4. leave_requests ─────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE leave_requests (
            id               UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_id      UUID NOT NULL REFERENCES employees(id),
            leave_type       VARCHAR(50) NOT NULL,
            start_date       DATE NOT NULL,
            end_date         DATE NOT NULL,
            reason           TEXT,
            status           request_status NOT NULL DEFAULT 'pending',
            reviewed_by      UUID REFERENCES employees(id),
            reviewed_at      TIMESTAMPTZ,
            reviewer_remarks TEXT,
            created_at       TIMESTAMPTZ DEFAULT NOW(),
            updated_at       TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT ck_leave_date_range CHECK (start_date <= end_date)
        )
    """)
    op.execute("CREATE INDEX ix_leave_requests_employee ON leave_requests(employee_id)")
    op.execute("CREATE INDEX ix_leave_requests_status   ON leave_requests(status)")

    # ── 5. schedule_change_requests ───────────────────────────────────────
    op.execute("""
        CREATE TABLE schedule_change_requests (
            id               UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            schedule_id      UUID NOT NULL REFERENCES employee_schedules(id),
            employee_id      UUID NOT NULL REFERENCES employees(id),
            new_shift_id     INTEGER NOT NULL REFERENCES shifts(id),
            new_shift_part   shift_part NOT NULL,
            reason           TEXT,
            status           request_status NOT NULL DEFAULT 'pending',
            reviewed_by      UUID REFERENCES employees(id),
            reviewed_at      TIMESTAMPTZ,
            reviewer_remarks TEXT,
            created_at       TIMESTAMPTZ DEFAULT NOW(),
            updated_at       TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX ix_change_requests_status ON schedule_change_requests(status)")

    # ── 6. audit_trail ────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE audit_trail (
            id          UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            actor_id    UUID REFERENCES employees(id),
            action      VARCHAR(50) NOT NULL,
            entity_type VARCHAR(50) NOT NULL,
            entity_id   UUID NOT NULL,
            old_values  JSON,
            new_values  JSON,
            ip_address  VARCHAR(45),
            created_at  TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX ix_audit_trail_actor_id   ON audit_trail(actor_id)")
    op.execute("CREATE INDEX ix_audit_trail_entity     ON audit_trail(entity_type, entity_id)")
    op.execute("CREATE INDEX ix_audit_trail_created_at ON audit_trail(created_at)")

    # ── Seed data ─────────────────────────────────────────────────────────
    shifts = sa.table(
        "shifts",
        sa.column("shift_name", sa.String),
        sa.column("start_time", sa.String),
        sa.column("end_time", sa.String),
    )
    op.bulk_insert(
        shifts,
        [
            {"shift_name": name, "start_time": start, "end_time": end}
            for name, start, end in SEED_SHIFTS
        ],
    )


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    # Drop tables in reverse dependency order
    tables = [
        "audit_trail",
        "schedule_change_requests",
        "leave_requests",
        "employee_schedules",
        "shifts",
        "employees",
    ]
    for t in tables:
        op.execute(f"DROP TABLE IF EXISTS {t} CASCADE")

    for name, _ in reversed(ENUM_TYPES):
        _drop_enum(name)
