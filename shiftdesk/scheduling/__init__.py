"""Scheduling module — shifts, schedule assignments, change requests, conflict detection."""

from shiftdesk.scheduling.models import ChangeRequest, ScheduleAssignment, Shift

__all__ = ["Shift", "ScheduleAssignment", "ChangeRequest"]
