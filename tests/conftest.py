from __future__ import annotations

import threading
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import Optional

import pytest

from activity_tracker.activity.model import DailyActivitySummary
from activity_tracker.breaks.model import SessionBreak
from activity_tracker.container import build_attendance_service
from activity_tracker.core.enums import BreakStatus, SessionStatus
from activity_tracker.core.exceptions import ConflictError
from activity_tracker.overtime.model import OvertimeBreakdown
from activity_tracker.sessions.model import WorkSession
from activity_tracker.shifts.model import ShiftWindow


@dataclass
class StoreState:
    sessions: dict[int, WorkSession] = field(default_factory=dict)
    breaks: dict[int, SessionBreak] = field(default_factory=dict)
    activity: dict[tuple[int, date], DailyActivitySummary] = field(default_factory=dict)
    next_session_id: int = 1
    next_break_id: int = 1
    next_activity_id: int = 1


class InMemorySessions:
    def __init__(self, state: StoreState):
        self._s = state

    def get_ongoing(self, employee_id: int) -> Optional[WorkSession]:
        for sess in self._s.sessions.values():
            if sess.employee_id == employee_id and sess.status == SessionStatus.ONGOING:
                return sess
        return None

    def get_by_id(self, session_id: int) -> Optional[WorkSession]:
        return self._s.sessions.get(session_id)

    def next_session_number(self, employee_id: int, work_date: date) -> int:
        numbers = [
            s.session_number
            for s in self._s.sessions.values()
            if s.employee_id == employee_id and s.work_date == work_date
        ]
        return max(numbers, default=0) + 1

    def create(self, *, employee_id: int, work_date: date, session_number: int, start_time: datetime) -> int:
        # Mirrors the unique keys of work_sessions.
        if self.get_ongoing(employee_id):
            raise ConflictError("duplicate ongoing session")
        for s in self._s.sessions.values():
            if (s.employee_id, s.work_date, s.session_number) == (employee_id, work_date, session_number):
                raise ConflictError("duplicate session number")

        sid = self._s.next_session_id
        self._s.next_session_id += 1
        self._s.sessions[sid] = WorkSession(
            session_id=sid,
            employee_id=employee_id,
            work_date=work_date,
            session_number=session_number,
            start_time=start_time,
            end_time=None,
            status=SessionStatus.ONGOING,
            login_date=start_time.date(),
        )
        return sid

    def close(self, *, session_id: int, end_time: datetime, session_duration: int, breakdown: OvertimeBreakdown) -> bool:
        sess = self._s.sessions.get(session_id)
        if not sess or sess.status != SessionStatus.ONGOING:
            return False
        self._s.sessions[session_id] = replace(
            sess,
            end_time=end_time,
            logout_date=end_time.date(),
            session_duration=session_duration,
            status=SessionStatus.COMPLETED,
            overtime_early=breakdown.overtime_early,
            overtime_late=breakdown.overtime_late,
            total_overtime=breakdown.total_overtime,
            undertime=breakdown.undertime,
            shift_hours=breakdown.shift_hours,
        )
        return True

    def add_break(self, *, session_id: int, duration: int) -> bool:
        sess = self._s.sessions.get(session_id)
        if not sess:
            return False
        self._s.sessions[session_id] = replace(
            sess,
            break_count=sess.break_count + 1,
            total_break_duration=sess.total_break_duration + duration,
        )
        return True

    def list_for_date(self, employee_id: int, work_date: date):
        items = [s for s in self._s.sessions.values() if s.employee_id == employee_id and s.work_date == work_date]
        items.sort(key=lambda s: s.session_number)
        return items


class InMemoryBreaks:
    def __init__(self, state: StoreState):
        self._s = state

    def get_active_for_session(self, session_id: int) -> Optional[SessionBreak]:
        for b in self._s.breaks.values():
            if b.session_id == session_id and b.status == BreakStatus.ACTIVE:
                return b
        return None

    def get_active_for_employee(self, employee_id: int) -> Optional[SessionBreak]:
        for b in self._s.breaks.values():
            if b.employee_id == employee_id and b.status == BreakStatus.ACTIVE:
                return b
        return None

    def create(self, *, session_id: int, employee_id: int, start_time: datetime, reason: str, notes=None) -> int:
        if self.get_active_for_session(session_id):
            raise ConflictError("duplicate active break")
        bid = self._s.next_break_id
        self._s.next_break_id += 1
        self._s.breaks[bid] = SessionBreak(
            break_id=bid,
            session_id=session_id,
            employee_id=employee_id,
            start_time=start_time,
            end_time=None,
            status=BreakStatus.ACTIVE,
            reason=reason,
            notes=notes,
        )
        return bid

    def close(self, *, break_id: int, end_time: datetime, duration: int) -> bool:
        b = self._s.breaks.get(break_id)
        if not b or b.status != BreakStatus.ACTIVE:
            return False
        self._s.breaks[break_id] = replace(b, end_time=end_time, duration=duration, status=BreakStatus.COMPLETED)
        return True

    def list_for_session(self, session_id: int):
        items = [b for b in self._s.breaks.values() if b.session_id == session_id]
        items.sort(key=lambda b: b.start_time)
        return items


class InMemoryActivity:
    def __init__(self, state: StoreState):
        self._s = state

    def get(self, employee_id: int, work_date: date) -> Optional[DailyActivitySummary]:
        return self._s.activity.get((employee_id, work_date))

    def upsert(self, summary: DailyActivitySummary) -> None:
        key = (summary.employee_id, summary.work_date)
        existing = self._s.activity.get(key)
        if existing:
            summary = replace(summary, activity_id=existing.activity_id)
        else:
            summary = replace(summary, activity_id=self._s.next_activity_id)
            self._s.next_activity_id += 1
        self._s.activity[key] = summary

    def list_range(self, *, employee_id: int, start: date, end: date):
        items = [a for (eid, d), a in self._s.activity.items() if eid == employee_id and start <= d <= end]
        items.sort(key=lambda a: a.work_date)
        return items


class Guarded:
    """Runs every repository call under the shared store guard."""

    def __init__(self, target, guard):
        self._target = target
        self._guard = guard

    def __getattr__(self, name):
        attr = getattr(self._target, name)
        if not callable(attr):
            return attr

        def call(*args, **kwargs):
            with self._guard:
                return attr(*args, **kwargs)

        return call


class InMemoryUnitOfWork:
    def __init__(self, state: StoreState, guard, *, activity_cls=InMemoryActivity):
        self.sessions = Guarded(InMemorySessions(state), guard)
        self.breaks = Guarded(InMemoryBreaks(state), guard)
        self.activity = Guarded(activity_cls(state), guard)


def _rows_of(state: StoreState, employee_id: int):
    return (
        {k: v for k, v in state.sessions.items() if v.employee_id == employee_id},
        {k: v for k, v in state.breaks.items() if v.employee_id == employee_id},
        {k: v for k, v in state.activity.items() if k[0] == employee_id},
    )


class InMemoryUnitOfWorkFactory:
    """Transactional stand-in for the MySQL unit of work.

    Locked units of work are serialized per employee only, like the MySQL
    named lock. On error the employee's rows are put back as they were on entry.
    """

    def __init__(self, *, activity_cls=InMemoryActivity):
        self.state = StoreState()
        self.activity_cls = activity_cls
        self.commits = 0
        self.rollbacks = 0
        self._guard = threading.RLock()
        self._employee_locks: dict[int, threading.RLock] = {}

    def _employee_lock(self, employee_id: int) -> threading.RLock:
        with self._guard:
            return self._employee_locks.setdefault(employee_id, threading.RLock())

    @contextmanager
    def __call__(self, employee_id: int, *, lock: bool = True):
        with self._employee_lock(employee_id) if lock else nullcontext():
            with self._guard:
                snapshot = _rows_of(self.state, employee_id)
            try:
                yield InMemoryUnitOfWork(self.state, self._guard, activity_cls=self.activity_cls)
            except Exception:
                with self._guard:
                    for table, saved, current in zip(
                        (self.state.sessions, self.state.breaks, self.state.activity),
                        snapshot,
                        _rows_of(self.state, employee_id),
                    ):
                        for key in current:
                            del table[key]
                        table.update(saved)
                    self.rollbacks += 1
                raise
            with self._guard:
                self.commits += 1


@dataclass
class FakeShifts:
    windows: dict[int, ShiftWindow]

    def get_for_employee(self, employee_id: int) -> Optional[ShiftWindow]:
        return self.windows.get(employee_id)


EMPLOYEE_ID = 1
UNSCHEDULED_EMPLOYEE_ID = 2


@pytest.fixture
def shifts() -> FakeShifts:
    return FakeShifts({EMPLOYEE_ID: ShiftWindow(employee_id=EMPLOYEE_ID, check_in_time=time(9, 0), check_out_time=time(18, 0))})


@pytest.fixture
def uow_factory() -> InMemoryUnitOfWorkFactory:
    return InMemoryUnitOfWorkFactory()


@pytest.fixture
def service(uow_factory, shifts):
    return build_attendance_service(uow_factory, shifts, lock_timeout=1.0)
