from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..overtime.model import OvertimeBreakdown
from .model import WorkSession


class SessionRepository(Protocol):
    def get_ongoing(self, employee_id: int) -> Optional[WorkSession]:
        raise NotImplementedError

    def get_by_id(self, session_id: int) -> Optional[WorkSession]:
        raise NotImplementedError

    def next_session_number(self, employee_id: int, work_date: date) -> int:
        """Highest session number used on that date plus one (1 for the first session)."""

        raise NotImplementedError

    def create(self, *, employee_id: int, work_date: date, session_number: int, start_time: datetime) -> int:
        raise NotImplementedError

    def close(
        self,
        *,
        session_id: int,
        end_time: datetime,
        session_duration: int,
        breakdown: OvertimeBreakdown,
    ) -> bool:
        raise NotImplementedError

    def add_break(self, *, session_id: int, duration: int) -> bool:
        """Increment break_count by one and total_break_duration by ``duration``."""

        raise NotImplementedError

    def list_for_date(self, employee_id: int, work_date: date) -> Sequence[WorkSession]:
        """All sessions (ongoing and completed) of the day, ordered by session number."""

        raise NotImplementedError
