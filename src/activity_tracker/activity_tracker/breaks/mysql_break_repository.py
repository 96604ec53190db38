from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import BreakStatus
from ..database.mysql_base import fetchall, fetchone
from .model import SessionBreak
from .repository import BreakRepository

_COLUMNS = "break_id, session_id, employee_id, start_time, end_time, status, reason, notes, duration"


def _to_break(r: Dict[str, Any]) -> SessionBreak:
    return SessionBreak(
        break_id=int(r["break_id"]),
        session_id=int(r["session_id"]),
        employee_id=int(r["employee_id"]),
        start_time=r["start_time"],
        end_time=r.get("end_time"),
        status=BreakStatus(r["status"]),
        reason=r["reason"],
        notes=r.get("notes"),
        duration=int(r.get("duration") or 0),
    )


class MySQLBreakRepository(BreakRepository):
    """Break ledger bound to the cursor of an open unit of work."""

    def __init__(self, cur):
        self._cur = cur

    def get_active_for_session(self, session_id: int) -> Optional[SessionBreak]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM session_breaks
            WHERE session_id=%s AND status=%s
            LIMIT 1
            """,
            (int(session_id), BreakStatus.ACTIVE.value),
        )
        r = fetchone(self._cur)
        return _to_break(r) if r else None

    def get_active_for_employee(self, employee_id: int) -> Optional[SessionBreak]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM session_breaks
            WHERE employee_id=%s AND status=%s
            ORDER BY start_time DESC
            LIMIT 1
            """,
            (int(employee_id), BreakStatus.ACTIVE.value),
        )
        r = fetchone(self._cur)
        return _to_break(r) if r else None

    def create(
        self,
        *,
        session_id: int,
        employee_id: int,
        start_time: datetime,
        reason: str,
        notes: Optional[str] = None,
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO session_breaks(session_id, employee_id, start_time, reason, notes, status)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (int(session_id), int(employee_id), start_time, reason, notes, BreakStatus.ACTIVE.value),
        )
        return int(self._cur.lastrowid)

    def close(self, *, break_id: int, end_time: datetime, duration: int) -> bool:
        self._cur.execute(
            """
            UPDATE session_breaks
            SET end_time=%s, duration=%s, status=%s
            WHERE break_id=%s AND status=%s
            """,
            (end_time, int(duration), BreakStatus.COMPLETED.value, int(break_id), BreakStatus.ACTIVE.value),
        )
        return self._cur.rowcount > 0

    def list_for_session(self, session_id: int) -> Sequence[SessionBreak]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM session_breaks
            WHERE session_id=%s
            ORDER BY start_time ASC
            """,
            (int(session_id),),
        )
        return [_to_break(r) for r in fetchall(self._cur)]
