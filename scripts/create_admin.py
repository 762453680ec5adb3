#!/usr/bin/env python3
"""Bootstrap an administrator account (and optionally the schema and shifts).

Admin accounts can only be provisioned by another admin through the API,
so the very first one has to be created out of band.

Usage:
    python scripts/create_admin.py --code ADM001 --name "Site Admin" \\
        --department Operations --email admin@example.com
    python scripts/create_admin.py ... --password 's3cret'   # skip default password
    python scripts/create_admin.py ... --create-tables --seed-shifts   # fresh dev DB

Exit codes:
    0 = admin created
    1 = employee code or email already taken
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from sqlalchemy import select

from shiftdesk.auth import service as auth_service
from shiftdesk.common.constants import DEFAULT_SHIFTS, UserRole
from shiftdesk.common.exceptions import ConflictError
from shiftdesk.config import settings
from shiftdesk.database import Database
from shiftdesk.employees.schemas import EmployeeCreate
from shiftdesk.employees.service import EmployeeService
from shiftdesk.scheduling.models import Shift

# Register every mapped class so relationships resolve
import shiftdesk.leave.models  # noqa: F401

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("create_admin")


async def seed_shifts(database: Database) -> int:
    """Insert the default shift catalogue where missing; return rows added."""
    added = 0
    async with database.session() as session:
        result = await session.execute(select(Shift.shift_name))
        existing = set(result.scalars().all())
        for name, start, end in DEFAULT_SHIFTS:
            if name in existing:
                continue
            session.add(Shift(shift_name=name, start_time=start, end_time=end))
            added += 1
    return added


async def create_admin(
    database: Database,
    data: EmployeeCreate,
    password: Optional[str] = None,
) -> None:
    async with database.session() as session:
        employee = await EmployeeService.create_employee(session, data)
        if password:
            await auth_service.change_password(session, employee.id, password)


async def run(args: argparse.Namespace) -> int:
    database = Database.from_settings(settings)
    try:
        if args.create_tables:
            await database.create_all()
            logger.info("Schema created")
        if args.seed_shifts:
            added = await seed_shifts(database)
            logger.info("Seeded %d shift(s)", added)

        data = EmployeeCreate(
            employee_code=args.code,
            full_name=args.name,
            department=args.department,
            email=args.email,
            role=UserRole.admin,
        )
        try:
            await create_admin(database, data, args.password)
        except ConflictError as exc:
            logger.error("%s", exc.detail)
            return 1

        if args.password:
            logger.info("Admin %s created", args.code)
        else:
            logger.info(
                "Admin %s created with the default password; change it after first login",
                args.code,
            )
        return 0
    finally:
        await database.dispose()


def main():
    parser = argparse.ArgumentParser(description="Create a shiftdesk administrator")
    parser.add_argument("--code", required=True, help="Employee code used to log in")
    parser.add_argument("--name", required=True, help="Full name")
    parser.add_argument("--department", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument(
        "--password",
        help="Initial password (defaults to DEFAULT_EMPLOYEE_PASSWORD, flagged for change)",
    )
    parser.add_argument(
        "--create-tables", action="store_true",
        help="Create all tables from the ORM metadata (development only)",
    )
    parser.add_argument(
        "--seed-shifts", action="store_true",
        help="Insert the default Morning/Afternoon/Night shifts if missing",
    )
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
