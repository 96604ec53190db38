from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...shifts.model import ShiftWindow
from ..model import NO_SCHEDULE, OvertimeBreakdown
from .base import OvertimeStrategy


class UnscheduledStrategy(OvertimeStrategy):
    """No shift on file: no baseline, so every field is zero."""

    def compute(
        self,
        *,
        start: datetime,
        end: datetime,
        break_seconds: int,
        shift: Optional[ShiftWindow],
    ) -> OvertimeBreakdown:
        return NO_SCHEDULE
