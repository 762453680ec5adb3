"""Leave module — leave requests."""
