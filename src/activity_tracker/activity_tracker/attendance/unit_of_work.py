from __future__ import annotations

from typing import ContextManager, Protocol

from ..activity.repository import DailyActivityRepository
from ..breaks.repository import BreakRepository
from ..sessions.repository import SessionRepository


class AttendanceUnitOfWork(Protocol):
    """Repositories sharing one transaction.

    Everything written through them is committed together when the ``with``
    block exits cleanly, and rolled back if it raises.
    """

    sessions: SessionRepository
    breaks: BreakRepository
    activity: DailyActivityRepository


class UnitOfWorkFactory(Protocol):
    def __call__(self, employee_id: int, *, lock: bool = True) -> ContextManager[AttendanceUnitOfWork]:
        """Open a unit of work for one employee, holding that employee's lock when ``lock`` is set."""

        raise NotImplementedError
