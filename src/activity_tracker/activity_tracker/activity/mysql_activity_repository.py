from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import ActivityStatus
from ..database.mysql_base import fetchall, fetchone
from .model import DailyActivitySummary
from .repository import DailyActivityRepository

_COLUMNS = """
    activity_id, employee_id, work_date, status, session_duration, login_count, total_break_time,
    last_logged_in, last_logged_out, last_break_start, last_break_end,
    total_shift_hours, total_overtime, total_undertime
"""


def _to_summary(r: Dict[str, Any]) -> DailyActivitySummary:
    return DailyActivitySummary(
        activity_id=int(r["activity_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=ActivityStatus(r["status"]),
        session_duration=int(r.get("session_duration") or 0),
        login_count=int(r.get("login_count") or 0),
        total_break_time=int(r.get("total_break_time") or 0),
        last_logged_in=r.get("last_logged_in"),
        last_logged_out=r.get("last_logged_out"),
        last_break_start=r.get("last_break_start"),
        last_break_end=r.get("last_break_end"),
        total_shift_hours=int(r.get("total_shift_hours") or 0),
        total_overtime=int(r.get("total_overtime") or 0),
        total_undertime=int(r.get("total_undertime") or 0),
    )


class MySQLDailyActivityRepository(DailyActivityRepository):
    def __init__(self, cur):
        self._cur = cur

    def get(self, employee_id: int, work_date: date) -> Optional[DailyActivitySummary]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM daily_activity WHERE employee_id=%s AND work_date=%s",
            (int(employee_id), work_date),
        )
        r = fetchone(self._cur)
        return _to_summary(r) if r else None

    def upsert(self, summary: DailyActivitySummary) -> None:
        # Absolute values, not increments: the aggregator always rebuilds the whole day.
        self._cur.execute(
            """
            INSERT INTO daily_activity(
                employee_id, work_date, status, session_duration, login_count, total_break_time,
                last_logged_in, last_logged_out, last_break_start, last_break_end,
                total_shift_hours, total_overtime, total_undertime
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE
                status=VALUES(status),
                session_duration=VALUES(session_duration),
                login_count=VALUES(login_count),
                total_break_time=VALUES(total_break_time),
                last_logged_in=VALUES(last_logged_in),
                last_logged_out=VALUES(last_logged_out),
                last_break_start=VALUES(last_break_start),
                last_break_end=VALUES(last_break_end),
                total_shift_hours=VALUES(total_shift_hours),
                total_overtime=VALUES(total_overtime),
                total_undertime=VALUES(total_undertime)
            """,
            (
                int(summary.employee_id),
                summary.work_date,
                summary.status.value,
                summary.session_duration,
                summary.login_count,
                summary.total_break_time,
                summary.last_logged_in,
                summary.last_logged_out,
                summary.last_break_start,
                summary.last_break_end,
                summary.total_shift_hours,
                summary.total_overtime,
                summary.total_undertime,
            ),
        )

    def list_range(self, *, employee_id: int, start: date, end: date) -> Sequence[DailyActivitySummary]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM daily_activity
            WHERE employee_id=%s AND work_date BETWEEN %s AND %s
            ORDER BY work_date ASC
            """,
            (int(employee_id), start, end),
        )
        return [_to_summary(r) for r in fetchall(self._cur)]
