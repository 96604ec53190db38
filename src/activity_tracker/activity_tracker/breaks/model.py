from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import elapsed_seconds
from ..core.enums import BreakStatus


@dataclass(frozen=True)
class SessionBreak:
    """Domain entity: a paused interval nested inside a work session."""

    break_id: int
    session_id: int
    employee_id: int
    start_time: datetime
    end_time: Optional[datetime]
    status: BreakStatus
    reason: str
    notes: Optional[str] = None
    duration: int = 0

    @property
    def is_active(self) -> bool:
        return self.status == BreakStatus.ACTIVE

    def elapsed_seconds(self, now: datetime) -> int:
        if self.is_active or self.end_time is None:
            return elapsed_seconds(self.start_time, now)
        return self.duration
