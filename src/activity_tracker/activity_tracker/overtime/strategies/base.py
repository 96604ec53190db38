from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ...shifts.model import ShiftWindow
from ..model import OvertimeBreakdown


class OvertimeStrategy(ABC):
    """Strategy Pattern: encapsulate how a closed session is measured against a shift."""

    @abstractmethod
    def compute(
        self,
        *,
        start: datetime,
        end: datetime,
        break_seconds: int,
        shift: Optional[ShiftWindow],
    ) -> OvertimeBreakdown:
        raise NotImplementedError
