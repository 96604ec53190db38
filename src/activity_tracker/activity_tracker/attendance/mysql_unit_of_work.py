from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from ..activity.mysql_activity_repository import MySQLDailyActivityRepository
from ..breaks.mysql_break_repository import MySQLBreakRepository
from ..core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS, LOCK_NAME_PREFIX
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import acquire_named_lock, is_duplicate_key, release_named_lock
from ..sessions.mysql_session_repository import MySQLSessionRepository
from .unit_of_work import AttendanceUnitOfWork

logger = logging.getLogger(__name__)


class MySQLUnitOfWork:
    def __init__(self, cur):
        self.sessions = MySQLSessionRepository(cur)
        self.breaks = MySQLBreakRepository(cur)
        self.activity = MySQLDailyActivityRepository(cur)


class MySQLUnitOfWorkFactory:
    """One connection and one transaction per call.

    Mutating calls also take a MySQL named lock per employee so that several
    worker processes apply one employee's actions strictly one at a time.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS):
        self._conn_factory = conn_factory
        self._lock_timeout = float(lock_timeout)

    def _lock_name(self, employee_id: int) -> str:
        return f"{LOCK_NAME_PREFIX}:{self._conn_factory.database}:{int(employee_id)}"

    @contextmanager
    def __call__(self, employee_id: int, *, lock: bool = True) -> Iterator[AttendanceUnitOfWork]:
        conn = self._conn_factory.connect()
        cur = conn.cursor(dictionary=True)
        lock_name = self._lock_name(employee_id)
        locked = False
        try:
            if lock:
                acquire_named_lock(cur, lock_name, timeout=self._lock_timeout)
                locked = True
                # Start the data transaction only once the lock is held.
                conn.commit()
            try:
                yield MySQLUnitOfWork(cur)
                conn.commit()
            except Exception as exc:
                conn.rollback()
                if is_duplicate_key(exc):
                    logger.warning(
                        "write rejected by unique key",
                        extra={"employee_id": employee_id, "action": "unit_of_work"},
                    )
                    raise ConflictError("Attendance state changed concurrently, please refresh") from exc
                raise
        finally:
            try:
                if locked:
                    release_named_lock(cur, lock_name)
            finally:
                cur.close()
                conn.close()
