from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ...common.datetime_utils import elapsed_seconds
from ...shifts.model import ShiftWindow
from ..model import NO_SCHEDULE, OvertimeBreakdown
from .base import OvertimeStrategy


class ScheduledStrategy(OvertimeStrategy):
    """Compare a session with the shift window anchored on the session's start date.

    Early overtime is the part of the session before the window opens, late
    overtime the part after it closes. Undertime is the shortfall of net worked
    time (duration minus breaks) against the shift length.
    """

    def compute(
        self,
        *,
        start: datetime,
        end: datetime,
        break_seconds: int,
        shift: Optional[ShiftWindow],
    ) -> OvertimeBreakdown:
        if shift is None:
            return NO_SCHEDULE

        shift_hours = shift.length_seconds
        window_start = datetime.combine(start.date(), shift.check_in_time)
        window_end = window_start + timedelta(seconds=shift_hours)

        overtime_early = elapsed_seconds(start, min(end, window_start))
        overtime_late = elapsed_seconds(max(start, window_end), end)

        worked = max(elapsed_seconds(start, end) - max(int(break_seconds), 0), 0)
        undertime = max(shift_hours - worked, 0)

        return OvertimeBreakdown(
            shift_hours=shift_hours,
            overtime_early=overtime_early,
            overtime_late=overtime_late,
            undertime=undertime,
        )
