from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import SessionStatus
from ..database.mysql_base import fetchall, fetchone
from ..overtime.model import OvertimeBreakdown
from .model import WorkSession
from .repository import SessionRepository

_COLUMNS = """
    session_id, employee_id, work_date, session_number, start_time, end_time, status,
    session_duration, break_count, total_break_duration, overtime_early, overtime_late,
    total_overtime, undertime, shift_hours, login_date, logout_date
"""


def _to_session(r: Dict[str, Any]) -> WorkSession:
    return WorkSession(
        session_id=int(r["session_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        session_number=int(r["session_number"]),
        start_time=r["start_time"],
        end_time=r.get("end_time"),
        status=SessionStatus(r["status"]),
        session_duration=int(r.get("session_duration") or 0),
        break_count=int(r.get("break_count") or 0),
        total_break_duration=int(r.get("total_break_duration") or 0),
        overtime_early=int(r.get("overtime_early") or 0),
        overtime_late=int(r.get("overtime_late") or 0),
        total_overtime=int(r.get("total_overtime") or 0),
        undertime=int(r.get("undertime") or 0),
        shift_hours=int(r.get("shift_hours") or 0),
        login_date=r.get("login_date"),
        logout_date=r.get("logout_date"),
    )


class MySQLSessionRepository(SessionRepository):
    """Session ledger bound to the cursor of an open unit of work."""

    def __init__(self, cur):
        self._cur = cur

    def get_ongoing(self, employee_id: int) -> Optional[WorkSession]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM work_sessions
            WHERE employee_id=%s AND status=%s
            ORDER BY start_time DESC
            LIMIT 1
            """,
            (int(employee_id), SessionStatus.ONGOING.value),
        )
        r = fetchone(self._cur)
        return _to_session(r) if r else None

    def get_by_id(self, session_id: int) -> Optional[WorkSession]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM work_sessions WHERE session_id=%s",
            (int(session_id),),
        )
        r = fetchone(self._cur)
        return _to_session(r) if r else None

    def next_session_number(self, employee_id: int, work_date: date) -> int:
        self._cur.execute(
            """
            SELECT COALESCE(MAX(session_number), 0) + 1 AS next_num
            FROM work_sessions
            WHERE employee_id=%s AND work_date=%s
            """,
            (int(employee_id), work_date),
        )
        r = fetchone(self._cur)
        return int(r["next_num"]) if r else 1

    def create(self, *, employee_id: int, work_date: date, session_number: int, start_time: datetime) -> int:
        self._cur.execute(
            """
            INSERT INTO work_sessions(employee_id, work_date, login_date, session_number, start_time, status)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (int(employee_id), work_date, start_time.date(), int(session_number), start_time, SessionStatus.ONGOING.value),
        )
        return int(self._cur.lastrowid)

    def close(
        self,
        *,
        session_id: int,
        end_time: datetime,
        session_duration: int,
        breakdown: OvertimeBreakdown,
    ) -> bool:
        self._cur.execute(
            """
            UPDATE work_sessions
            SET end_time=%s, logout_date=%s, session_duration=%s, status=%s,
                overtime_early=%s, overtime_late=%s, total_overtime=%s, undertime=%s, shift_hours=%s
            WHERE session_id=%s AND status=%s
            """,
            (
                end_time,
                end_time.date(),
                int(session_duration),
                SessionStatus.COMPLETED.value,
                breakdown.overtime_early,
                breakdown.overtime_late,
                breakdown.total_overtime,
                breakdown.undertime,
                breakdown.shift_hours,
                int(session_id),
                SessionStatus.ONGOING.value,
            ),
        )
        return self._cur.rowcount > 0

    def add_break(self, *, session_id: int, duration: int) -> bool:
        self._cur.execute(
            """
            UPDATE work_sessions
            SET break_count = break_count + 1,
                total_break_duration = total_break_duration + %s
            WHERE session_id=%s
            """,
            (int(duration), int(session_id)),
        )
        return self._cur.rowcount > 0

    def list_for_date(self, employee_id: int, work_date: date) -> Sequence[WorkSession]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM work_sessions
            WHERE employee_id=%s AND work_date=%s
            ORDER BY session_number ASC
            """,
            (int(employee_id), work_date),
        )
        return [_to_session(r) for r in fetchall(self._cur)]
