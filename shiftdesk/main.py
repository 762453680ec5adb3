"""shiftdesk — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shiftdesk.auth.router import router as auth_router
from shiftdesk.common.exceptions import register_exception_handlers
from shiftdesk.common.rate_limit import limiter
from shiftdesk.config import settings
from shiftdesk.database import Database
from shiftdesk.employees.router import admin_router as admin_users_router
from shiftdesk.employees.router import users_router
from shiftdesk.leave.router import admin_router as admin_leave_router
from shiftdesk.leave.router import employee_router as employee_leave_router
from shiftdesk.scheduling.router import admin_router as admin_schedule_router
from shiftdesk.scheduling.router import employee_router as employee_schedule_router
from shiftdesk.scheduling.router import shifts_router

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``database`` lets callers (tests, scripts) inject a pre-built store
    client; otherwise one is built from the global settings and disposed on
    shutdown.
    """
    configure_logging(settings.LOG_LEVEL)
    owns_database = database is None
    database = database or Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup and shutdown events."""
        yield
        if owns_database:
            await database.dispose()

    app = FastAPI(
        title="shiftdesk",
        description="Shift scheduling backend — registrations, leave, change requests and approvals",
        version="1.0.0",
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )
    app.state.database = database

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check (no auth)
    @app.get("/api/v1/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": "1.0.0",
            "environment": settings.ENVIRONMENT,
        }

    # Register routers
    app.include_router(auth_router, prefix="/api/v1/auth", tags=["auth"])
    app.include_router(users_router, prefix="/api/v1/users", tags=["users"])
    app.include_router(shifts_router, prefix="/api/v1/shifts", tags=["shifts"])
    app.include_router(employee_schedule_router, prefix="/api/v1/employee", tags=["employee"])
    app.include_router(employee_leave_router, prefix="/api/v1/employee", tags=["employee"])
    app.include_router(admin_users_router, prefix="/api/v1/admin", tags=["admin"])
    app.include_router(admin_schedule_router, prefix="/api/v1/admin", tags=["admin"])
    app.include_router(admin_leave_router, prefix="/api/v1/admin", tags=["admin"])

    return app
