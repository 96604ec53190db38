from __future__ import annotations

import pytest
from mysql.connector.errors import IntegrityError

from activity_tracker.attendance.mysql_unit_of_work import MySQLUnitOfWorkFactory
from activity_tracker.core.exceptions import ConflictError
from activity_tracker.sessions.mysql_session_repository import MySQLSessionRepository


class FakeCursor:
    def __init__(self):
        self.executed = []
        self.closed = False
        self._last = None

    def execute(self, sql, params=None):
        self.executed.append(" ".join(sql.split()))
        self._last = sql

    def fetchone(self):
        if "GET_LOCK" in self._last:
            return {"acquired": 1}
        if "RELEASE_LOCK" in self._last:
            return {"released": 1}
        return None

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self):
        self.cur = FakeCursor()
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self, dictionary=False):
        return self.cur

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


class FakeConnFactory:
    database = "activity_test"

    def __init__(self):
        self.connections = []

    def connect(self):
        conn = FakeConnection()
        self.connections.append(conn)
        return conn


def test_locked_unit_of_work_commits_and_releases_lock():
    factory = FakeConnFactory()
    uow_factory = MySQLUnitOfWorkFactory(factory, lock_timeout=3)

    with uow_factory(42) as uow:
        assert isinstance(uow.sessions, MySQLSessionRepository)
        uow.sessions.get_ongoing(42)

    (conn,) = factory.connections
    assert conn.cur.executed[0].startswith("SELECT GET_LOCK")
    assert conn.cur.executed[-1].startswith("SELECT RELEASE_LOCK")
    assert conn.commits == 2
    assert conn.rollbacks == 0
    assert conn.cur.closed and conn.closed


def test_read_only_unit_of_work_skips_lock():
    factory = FakeConnFactory()

    with MySQLUnitOfWorkFactory(factory)(42, lock=False) as uow:
        uow.activity.get(42, None)

    (conn,) = factory.connections
    assert not any("GET_LOCK" in sql for sql in conn.cur.executed)


def test_error_rolls_back_and_still_releases_lock():
    factory = FakeConnFactory()

    with pytest.raises(RuntimeError):
        with MySQLUnitOfWorkFactory(factory)(42):
            raise RuntimeError("boom")

    (conn,) = factory.connections
    assert conn.rollbacks == 1
    assert conn.cur.executed[-1].startswith("SELECT RELEASE_LOCK")
    assert conn.closed


def test_duplicate_key_becomes_conflict():
    factory = FakeConnFactory()

    with pytest.raises(ConflictError):
        with MySQLUnitOfWorkFactory(factory)(42):
            raise IntegrityError(msg="Duplicate entry '42-1' for key 'uq_work_sessions_ongoing'", errno=1062)

    assert factory.connections[0].rollbacks == 1
