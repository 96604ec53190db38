from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import fetchone, normalize_mysql_time, read_cursor
from .model import ShiftWindow
from .repository import ShiftScheduleProvider


class MySQLShiftScheduleProvider(ShiftScheduleProvider):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee(self, employee_id: int) -> Optional[ShiftWindow]:
        with read_cursor(self._conn_factory) as cur:
            cur.execute(
                """
                SELECT employee_id, check_in_time, check_out_time
                FROM employee_shifts
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            if not r:
                return None

            check_in = normalize_mysql_time(r.get("check_in_time"))
            check_out = normalize_mysql_time(r.get("check_out_time"))
            # Both ends are required; a half-filled profile counts as unscheduled.
            if check_in is None or check_out is None:
                return None
            return ShiftWindow(employee_id=int(r["employee_id"]), check_in_time=check_in, check_out_time=check_out)
