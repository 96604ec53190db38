from __future__ import annotations

from contextlib import closing, contextmanager
from datetime import time, timedelta
from typing import Any, Dict, Iterator, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.constants import SECONDS_PER_DAY
from ..core.exceptions import LockTimeoutError
from .connection import DatabaseConnection


@contextmanager
def read_cursor(conn_factory: DatabaseConnection) -> Iterator[Any]:
    """Dictionary cursor on a throwaway connection, for lookups outside a unit of work."""
    with closing(conn_factory.connect()) as conn:
        with closing(conn.cursor(dictionary=True)) as cur:
            yield cur
        # Ends the implicit read transaction.
        conn.rollback()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def is_duplicate_key(exc: Exception) -> bool:
    return isinstance(exc, IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def acquire_named_lock(cur, name: str, *, timeout: float) -> None:
    """Take a MySQL user-level lock (GET_LOCK), bounded by ``timeout`` seconds."""

    cur.execute("SELECT GET_LOCK(%s, %s) AS acquired", (name, float(timeout)))
    row = fetchone(cur)
    if not row or int(row["acquired"] or 0) != 1:
        raise LockTimeoutError("Another attendance action is in progress, please retry")


def release_named_lock(cur, name: str) -> None:
    cur.execute("SELECT RELEASE_LOCK(%s) AS released", (name,))
    fetchone(cur)


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Coerce a TIME column to ``datetime.time``.

    Depending on the connector build the column comes back as ``time``,
    ``timedelta`` (seconds since midnight) or an ``HH:MM[:SS]`` string.
    """
    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        secs = int(value.total_seconds()) % SECONDS_PER_DAY
        return time(secs // 3600, secs % 3600 // 60, secs % 60)

    if isinstance(value, str):
        fields = value.strip().split(":")
        if not 2 <= len(fields) <= 3:
            raise ValueError(f"Invalid time string: {value!r}")
        h, m, s = (int(f or 0) for f in fields + ["0"] * (3 - len(fields)))
        return time(h, m, s)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
