from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import DailyActivitySummary


class DailyActivityRepository(Protocol):
    def get(self, employee_id: int, work_date: date) -> Optional[DailyActivitySummary]:
        raise NotImplementedError

    def upsert(self, summary: DailyActivitySummary) -> None:
        """Create or overwrite the row for (employee_id, work_date)."""

        raise NotImplementedError

    def list_range(self, *, employee_id: int, start: date, end: date) -> Sequence[DailyActivitySummary]:
        raise NotImplementedError
