from __future__ import annotations

from typing import Optional, Protocol

from .model import ShiftWindow


class ShiftScheduleProvider(Protocol):
    def get_for_employee(self, employee_id: int) -> Optional[ShiftWindow]:
        """Return the employee's shift window, or None when no schedule is on file."""

        raise NotImplementedError
