from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..shifts.model import ShiftWindow
from .strategies.base import OvertimeStrategy
from .strategies.scheduled_strategy import ScheduledStrategy
from .strategies.unscheduled_strategy import UnscheduledStrategy


@dataclass
class OvertimeStrategyFactory:
    """Factory Pattern: choose the overtime strategy from the employee's schedule."""

    def for_shift(self, shift: Optional[ShiftWindow]) -> OvertimeStrategy:
        if not shift:
            return UnscheduledStrategy()
        return ScheduledStrategy()
