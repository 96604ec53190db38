from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import SessionBreak


class BreakRepository(Protocol):
    def get_active_for_session(self, session_id: int) -> Optional[SessionBreak]:
        raise NotImplementedError

    def get_active_for_employee(self, employee_id: int) -> Optional[SessionBreak]:
        raise NotImplementedError

    def create(
        self,
        *,
        session_id: int,
        employee_id: int,
        start_time: datetime,
        reason: str,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def close(self, *, break_id: int, end_time: datetime, duration: int) -> bool:
        raise NotImplementedError

    def list_for_session(self, session_id: int) -> Sequence[SessionBreak]:
        raise NotImplementedError
