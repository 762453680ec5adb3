"""shiftdesk — shift scheduling and approval backend."""

__version__ = "1.0.0"
