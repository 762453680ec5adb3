"""Workflow module — pending/approved/rejected state machine shared by all requests."""
