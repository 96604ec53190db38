from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ActivityStatus


@dataclass(frozen=True)
class DailyActivitySummary:
    """Read-model: one row per (employee, date) rolled up from that day's sessions."""

    employee_id: int
    work_date: date
    status: ActivityStatus = ActivityStatus.LOGGED_OUT
    session_duration: int = 0
    login_count: int = 0
    total_break_time: int = 0
    last_logged_in: Optional[datetime] = None
    last_logged_out: Optional[datetime] = None
    last_break_start: Optional[datetime] = None
    last_break_end: Optional[datetime] = None
    total_shift_hours: int = 0
    total_overtime: int = 0
    total_undertime: int = 0
    activity_id: Optional[int] = None
