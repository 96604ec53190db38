from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OvertimeBreakdown:
    """Overtime/undertime of one closed session, all in whole seconds."""

    shift_hours: int = 0
    overtime_early: int = 0
    overtime_late: int = 0
    undertime: int = 0

    @property
    def total_overtime(self) -> int:
        return self.overtime_early + self.overtime_late


NO_SCHEDULE = OvertimeBreakdown()
