"""Employees module — credential store and admin account management."""

from shiftdesk.employees.models import Employee

__all__ = ["Employee"]
