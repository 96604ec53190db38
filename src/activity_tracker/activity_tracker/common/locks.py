from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Hashable, Iterator

from ..core.exceptions import LockTimeoutError


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class KeyedLock:
    """One mutex per key (employee id), alive only while someone holds or waits on it.

    Different keys never contend; the same key is applied one-at-a-time.
    Acquisition is bounded by ``timeout`` so callers fail fast instead of queueing.
    """

    def __init__(self, *, timeout: float):
        self._timeout = float(timeout)
        self._guard = threading.Lock()
        self._entries: dict[Hashable, _Entry] = {}

    def key_count(self) -> int:
        with self._guard:
            return len(self._entries)

    def _checkout(self, key: Hashable) -> _Entry:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.users += 1
            return entry

    def _checkin(self, key: Hashable, entry: _Entry) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._entries[key]

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        entry = self._checkout(key)
        try:
            if not entry.lock.acquire(timeout=self._timeout):
                raise LockTimeoutError("Another attendance action is in progress, please retry")
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            self._checkin(key, entry)
