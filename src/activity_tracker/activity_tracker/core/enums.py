from __future__ import annotations

from enum import Enum


class SessionStatus(str, Enum):
    """Lifecycle of a work session row."""

    ONGOING = "ongoing"
    COMPLETED = "completed"


class BreakStatus(str, Enum):
    """Lifecycle of a break row."""

    ACTIVE = "active"
    COMPLETED = "completed"


class ActivityStatus(str, Enum):
    """Status column of the daily activity summary."""

    LOGGED_OUT = "logged_out"
    ACTIVE = "active"
    ON_BREAK = "on_break"


class WorkState(str, Enum):
    """Live state of an employee, derived from the session and break rows."""

    IDLE = "idle"
    ACTIVE = "active"
    ON_BREAK = "on_break"
