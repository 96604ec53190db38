from __future__ import annotations

import threading

import pytest

from activity_tracker.common.locks import KeyedLock
from activity_tracker.core.exceptions import ConflictError, LockTimeoutError


def test_same_key_times_out_while_held():
    locks = KeyedLock(timeout=0.05)
    held = threading.Event()
    release = threading.Event()

    def holder():
        with locks.hold(1):
            held.set()
            release.wait(2)

    t = threading.Thread(target=holder)
    t.start()
    held.wait(2)
    try:
        with pytest.raises(LockTimeoutError):
            with locks.hold(1):
                pass
    finally:
        release.set()
        t.join()


def test_other_keys_do_not_contend():
    locks = KeyedLock(timeout=0.05)

    with locks.hold(1):
        with locks.hold(2):
            pass


def test_lock_timeout_is_a_conflict():
    assert issubclass(LockTimeoutError, ConflictError)


def test_entries_are_dropped_once_nobody_uses_them():
    locks = KeyedLock(timeout=0.05)

    for employee_id in range(1, 50):
        with locks.hold(employee_id):
            assert locks.key_count() == 1

    assert locks.key_count() == 0


def test_waiter_keeps_the_entry_until_it_gives_up():
    locks = KeyedLock(timeout=0.05)

    with locks.hold(7):
        with pytest.raises(LockTimeoutError):
            with locks.hold(7):
                pass
        assert locks.key_count() == 1

    assert locks.key_count() == 0
