from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import elapsed_seconds
from ..core.enums import SessionStatus


@dataclass(frozen=True)
class WorkSession:
    """Domain entity: one continuous work interval from clock-in to clock-out."""

    session_id: int
    employee_id: int
    work_date: date
    session_number: int
    start_time: datetime
    end_time: Optional[datetime]
    status: SessionStatus
    session_duration: int = 0
    break_count: int = 0
    total_break_duration: int = 0
    overtime_early: int = 0
    overtime_late: int = 0
    total_overtime: int = 0
    undertime: int = 0
    shift_hours: int = 0
    login_date: Optional[date] = None
    logout_date: Optional[date] = None

    @property
    def is_ongoing(self) -> bool:
        return self.status == SessionStatus.ONGOING

    def elapsed_seconds(self, now: datetime) -> int:
        """Stored duration once closed; ``now - start`` while ongoing."""
        if self.is_ongoing or self.end_time is None:
            return elapsed_seconds(self.start_time, now)
        return self.session_duration
