from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..breaks.model import SessionBreak
from ..common.datetime_utils import isoformat_or_none
from ..core.enums import WorkState
from ..sessions.model import WorkSession


@dataclass(frozen=True)
class SessionView:
    """A session with durations evaluated at read time."""

    session: WorkSession
    elapsed_seconds: int
    net_elapsed_seconds: int

    def to_dict(self) -> dict:
        s = self.session
        return {
            "session_id": s.session_id,
            "session_number": s.session_number,
            "date": s.work_date.isoformat(),
            "session_start_time": isoformat_or_none(s.start_time),
            "session_end_time": isoformat_or_none(s.end_time),
            "status": s.status.value,
            "session_duration": self.elapsed_seconds,
            "net_duration": self.net_elapsed_seconds,
            "break_count": s.break_count,
            "total_break_duration": s.total_break_duration,
            "shift_hours": s.shift_hours,
            "overtime_early": s.overtime_early,
            "overtime_late": s.overtime_late,
            "total_overtime": s.total_overtime,
            "undertime": s.undertime,
        }


@dataclass(frozen=True)
class BreakView:
    brk: SessionBreak
    elapsed_seconds: int

    def to_dict(self) -> dict:
        b = self.brk
        return {
            "break_id": b.break_id,
            "session_id": b.session_id,
            "start_time": isoformat_or_none(b.start_time),
            "end_time": isoformat_or_none(b.end_time),
            "status": b.status.value,
            "reason": b.reason,
            "notes": b.notes,
            "duration": self.elapsed_seconds,
        }


@dataclass(frozen=True)
class AttendanceStatusView:
    state: WorkState
    as_of: datetime
    session: Optional[SessionView] = None
    active_break: Optional[BreakView] = None
    breaks: list[BreakView] = field(default_factory=list)
    today_sessions: list[SessionView] = field(default_factory=list)

    @property
    def has_ongoing_session(self) -> bool:
        return self.session is not None

    @property
    def has_active_break(self) -> bool:
        return self.active_break is not None

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "as_of": self.as_of.isoformat(),
            "has_ongoing_session": self.has_ongoing_session,
            "session": self.session.to_dict() if self.session else None,
            "has_active_break": self.has_active_break,
            "active_break": self.active_break.to_dict() if self.active_break else None,
            "breaks": [b.to_dict() for b in self.breaks],
            "today_sessions": [s.to_dict() for s in self.today_sessions],
        }


def summary_to_dict(summary) -> dict:
    return {
        "date": summary.work_date.isoformat(),
        "status": summary.status.value,
        "session_duration": summary.session_duration,
        "login_count": summary.login_count,
        "total_break_time": summary.total_break_time,
        "last_logged_in": isoformat_or_none(summary.last_logged_in),
        "last_logged_out": isoformat_or_none(summary.last_logged_out),
        "last_break_start": isoformat_or_none(summary.last_break_start),
        "last_break_end": isoformat_or_none(summary.last_break_end),
        "total_shift_hours": summary.total_shift_hours,
        "total_overtime": summary.total_overtime,
        "total_undertime": summary.total_undertime,
    }
