"""Enums and constants for shiftdesk — matching PostgreSQL ENUM types."""

from __future__ import annotations

import enum


# ── Auth / Roles ────────────────────────────────────────────────────

class UserRole(str, enum.Enum):
    staff = "staff"
    admin = "admin"


# ── Workflow ────────────────────────────────────────────────────────

class RequestStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class DecisionStatus(str, enum.Enum):
    """Target states an admin may move a pending row into."""

    approved = "approved"
    rejected = "rejected"


class RequestKind(str, enum.Enum):
    schedule = "schedule"
    leave = "leave"
    change_request = "change_request"


# ── Scheduling ──────────────────────────────────────────────────────

class ShiftPart(str, enum.Enum):
    morning = "morning"
    afternoon = "afternoon"
    full = "full"


# ── Misc constants ──────────────────────────────────────────────────

DEFAULT_SHIFTS: list[tuple[str, str, str]] = [
    ("Morning", "06:00", "14:00"),
    ("Afternoon", "14:00", "22:00"),
    ("Night", "22:00", "06:00"),
]
