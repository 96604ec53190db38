from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.exceptions import ValidationError
from ..shifts.model import ShiftWindow
from .factory import OvertimeStrategyFactory
from .model import OvertimeBreakdown


class OvertimeCalculator:
    def __init__(self, factory: OvertimeStrategyFactory | None = None):
        self._factory = factory or OvertimeStrategyFactory()

    def calculate(
        self,
        *,
        start: datetime,
        end: datetime,
        break_seconds: int,
        shift: Optional[ShiftWindow],
    ) -> OvertimeBreakdown:
        if end < start:
            raise ValidationError("Session end precedes its start")

        strategy = self._factory.for_shift(shift)
        return strategy.compute(start=start, end=end, break_seconds=break_seconds, shift=shift)
