from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from ..activity.aggregator import DailyActivityAggregator
from ..activity.model import DailyActivitySummary
from ..breaks.model import SessionBreak
from ..common.datetime_utils import elapsed_seconds, now_local
from ..common.locks import KeyedLock
from ..common.validators import optional_text, require_max_length, require_positive_id
from ..core.constants import DEFAULT_BREAK_REASON, DEFAULT_LOCK_TIMEOUT_SECONDS, MAX_SUMMARY_DAYS
from ..core.enums import BreakStatus, WorkState
from ..core.exceptions import AggregationError, ConflictError, DomainError, NotFoundError, ValidationError
from ..overtime.calculator import OvertimeCalculator
from ..sessions.model import WorkSession
from ..shifts.repository import ShiftScheduleProvider
from .model import AttendanceStatusView, BreakView, SessionView
from .unit_of_work import AttendanceUnitOfWork, UnitOfWorkFactory

logger = logging.getLogger(__name__)

MAX_REASON_LENGTH = 100


class AttendanceService:
    """The only writer of session, break and daily activity rows.

    Every mutating action runs under the employee's lock and inside a single
    unit of work: precondition check, ledger writes and the daily summary
    rebuild either all commit or all roll back.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        shifts: ShiftScheduleProvider,
        *,
        calculator: OvertimeCalculator | None = None,
        aggregator: DailyActivityAggregator | None = None,
        locks: KeyedLock | None = None,
    ):
        self._uow = uow_factory
        self._shifts = shifts
        self._calculator = calculator or OvertimeCalculator()
        self._aggregator = aggregator or DailyActivityAggregator()
        self._locks = locks or KeyedLock(timeout=DEFAULT_LOCK_TIMEOUT_SECONDS)

    # ---- actions -------------------------------------------------------

    def start_session(self, employee_id: int, *, now: datetime | None = None) -> WorkSession:
        employee_id = require_positive_id(employee_id, "employee_id")
        now = now or now_local()

        with self._locks.hold(employee_id), self._uow(employee_id) as uow:
            ongoing = uow.sessions.get_ongoing(employee_id)
            if ongoing:
                logger.info(
                    "start_session rejected: session already active",
                    extra={"employee_id": employee_id, "session_id": ongoing.session_id, "action": "start_session"},
                )
                raise ConflictError("Session already active")

            work_date = now.date()
            session_number = uow.sessions.next_session_number(employee_id, work_date)
            session_id = uow.sessions.create(
                employee_id=employee_id,
                work_date=work_date,
                session_number=session_number,
                start_time=now,
            )
            self._refresh_summary(uow, employee_id, work_date)
            session = uow.sessions.get_by_id(session_id)

        logger.info(
            "session started",
            extra={"employee_id": employee_id, "session_id": session_id, "action": "start_session"},
        )
        return session

    def end_session(self, employee_id: int, *, now: datetime | None = None) -> WorkSession:
        employee_id = require_positive_id(employee_id, "employee_id")
        now = now or now_local()

        with self._locks.hold(employee_id), self._uow(employee_id) as uow:
            session = uow.sessions.get_ongoing(employee_id)
            if not session:
                logger.info(
                    "end_session rejected: no active session",
                    extra={"employee_id": employee_id, "action": "end_session"},
                )
                raise NotFoundError("No active session")

            end_time = max(now, session.start_time)
            break_seconds = session.total_break_duration

            # A dangling break is closed at the session's end time.
            active = uow.breaks.get_active_for_session(session.session_id)
            if active:
                closed_break = self._close_break(uow, active, end_time)
                break_seconds += closed_break.duration

            duration = elapsed_seconds(session.start_time, end_time)
            shift = self._shifts.get_for_employee(employee_id)
            breakdown = self._calculator.calculate(
                start=session.start_time,
                end=end_time,
                break_seconds=break_seconds,
                shift=shift,
            )
            uow.sessions.close(
                session_id=session.session_id,
                end_time=end_time,
                session_duration=duration,
                breakdown=breakdown,
            )
            self._refresh_summary(uow, employee_id, session.work_date)
            closed = uow.sessions.get_by_id(session.session_id)

        logger.info(
            "session ended after %ss (overtime=%ss, undertime=%ss)",
            closed.session_duration,
            closed.total_overtime,
            closed.undertime,
            extra={"employee_id": employee_id, "session_id": closed.session_id, "action": "end_session"},
        )
        return closed

    def start_break(
        self,
        employee_id: int,
        reason: Optional[str] = None,
        *,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> SessionBreak:
        employee_id = require_positive_id(employee_id, "employee_id")
        reason = require_max_length(optional_text(reason) or DEFAULT_BREAK_REASON, "reason", MAX_REASON_LENGTH)
        notes = optional_text(notes)
        now = now or now_local()

        with self._locks.hold(employee_id), self._uow(employee_id) as uow:
            session = uow.sessions.get_ongoing(employee_id)
            if not session:
                logger.info(
                    "start_break rejected: not clocked in",
                    extra={"employee_id": employee_id, "action": "start_break"},
                )
                raise ConflictError("Not clocked in")

            existing = uow.breaks.get_active_for_session(session.session_id)
            if existing:
                logger.info(
                    "start_break rejected: break already in progress",
                    extra={"employee_id": employee_id, "break_id": existing.break_id, "action": "start_break"},
                )
                raise ConflictError("Break already in progress")

            start_time = max(now, session.start_time)
            uow.breaks.create(
                session_id=session.session_id,
                employee_id=employee_id,
                start_time=start_time,
                reason=reason,
                notes=notes,
            )
            brk = uow.breaks.get_active_for_session(session.session_id)
            self._refresh_summary(uow, employee_id, session.work_date)

        logger.info(
            "break started (%s)",
            reason,
            extra={"employee_id": employee_id, "session_id": brk.session_id, "break_id": brk.break_id, "action": "start_break"},
        )
        return brk

    def end_break(self, employee_id: int, *, now: datetime | None = None) -> SessionBreak:
        employee_id = require_positive_id(employee_id, "employee_id")
        now = now or now_local()

        with self._locks.hold(employee_id), self._uow(employee_id) as uow:
            active = uow.breaks.get_active_for_employee(employee_id)
            if not active:
                logger.info(
                    "end_break rejected: no active break",
                    extra={"employee_id": employee_id, "action": "end_break"},
                )
                raise NotFoundError("No active break")

            session = uow.sessions.get_by_id(active.session_id)
            closed = self._close_break(uow, active, max(now, active.start_time))
            self._refresh_summary(uow, employee_id, session.work_date)

        logger.info(
            "break ended after %ss",
            closed.duration,
            extra={"employee_id": employee_id, "session_id": closed.session_id, "break_id": closed.break_id, "action": "end_break"},
        )
        return closed

    # ---- reads ---------------------------------------------------------

    def get_status(self, employee_id: int, *, now: datetime | None = None) -> AttendanceStatusView:
        employee_id = require_positive_id(employee_id, "employee_id")
        now = now or now_local()

        with self._uow(employee_id, lock=False) as uow:
            session = uow.sessions.get_ongoing(employee_id)
            active = uow.breaks.get_active_for_session(session.session_id) if session else None
            breaks = list(uow.breaks.list_for_session(session.session_id)) if session else []
            today = list(uow.sessions.list_for_date(employee_id, now.date()))

        # A session started before midnight is still part of "today" until it ends.
        if session and all(s.session_id != session.session_id for s in today):
            today.insert(0, session)

        active_view = BreakView(brk=active, elapsed_seconds=active.elapsed_seconds(now)) if active else None
        live_break = active_view.elapsed_seconds if active_view else 0

        if active:
            state = WorkState.ON_BREAK
        elif session:
            state = WorkState.ACTIVE
        else:
            state = WorkState.IDLE

        return AttendanceStatusView(
            state=state,
            as_of=now,
            session=self._view(session, now, live_break) if session else None,
            active_break=active_view,
            breaks=[BreakView(brk=b, elapsed_seconds=b.elapsed_seconds(now)) for b in breaks],
            today_sessions=[self._view(s, now, live_break if s.is_ongoing else 0) for s in today],
        )

    def get_daily_summaries(self, employee_id: int, *, start: date, end: date) -> list[DailyActivitySummary]:
        employee_id = require_positive_id(employee_id, "employee_id")
        if start > end:
            raise ValidationError("Start date must not be after end date")
        if (end - start).days >= MAX_SUMMARY_DAYS:
            raise ValidationError(f"Date range is limited to {MAX_SUMMARY_DAYS} days")

        with self._uow(employee_id, lock=False) as uow:
            return list(uow.activity.list_range(employee_id=employee_id, start=start, end=end))

    def rebuild_day(self, employee_id: int, work_date: date) -> DailyActivitySummary:
        """Recompute a day's summary from its sessions (explicit correction)."""
        employee_id = require_positive_id(employee_id, "employee_id")

        with self._locks.hold(employee_id), self._uow(employee_id) as uow:
            summary = self._refresh_summary(uow, employee_id, work_date)

        logger.info(
            "daily summary rebuilt",
            extra={"employee_id": employee_id, "work_date": work_date, "action": "rebuild_day"},
        )
        return summary

    # ---- helpers -------------------------------------------------------

    @staticmethod
    def _view(session: WorkSession, now: datetime, live_break_seconds: int) -> SessionView:
        elapsed = session.elapsed_seconds(now)
        net = max(elapsed - session.total_break_duration - live_break_seconds, 0)
        return SessionView(session=session, elapsed_seconds=elapsed, net_elapsed_seconds=net)

    @staticmethod
    def _close_break(uow: AttendanceUnitOfWork, brk: SessionBreak, end_time: datetime) -> SessionBreak:
        duration = elapsed_seconds(brk.start_time, end_time)
        uow.breaks.close(break_id=brk.break_id, end_time=end_time, duration=duration)
        uow.sessions.add_break(session_id=brk.session_id, duration=duration)
        return replace(brk, end_time=end_time, status=BreakStatus.COMPLETED, duration=duration)

    def _refresh_summary(self, uow: AttendanceUnitOfWork, employee_id: int, work_date: date) -> DailyActivitySummary:
        try:
            sessions = uow.sessions.list_for_date(employee_id, work_date)
            breaks = [b for s in sessions for b in uow.breaks.list_for_session(s.session_id)]
            summary = self._aggregator.recompute(
                employee_id=employee_id,
                work_date=work_date,
                sessions=sessions,
                breaks=breaks,
                previous=uow.activity.get(employee_id, work_date),
            )
            uow.activity.upsert(summary)
            return summary
        except DomainError:
            raise
        except Exception as exc:
            logger.exception(
                "daily summary update failed",
                extra={"employee_id": employee_id, "work_date": work_date, "action": "aggregate"},
            )
            raise AggregationError("Failed to update daily activity summary") from exc
