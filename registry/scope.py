from __future__ import annotations

import itertools
import threading


class RequestScope:
    """Hands out request tokens for one view.

    Starting a new request supersedes every earlier one; a result is applied
    only while ``is_current(token)`` holds. ``close()`` invalidates everything,
    which is what a view does when it is torn down.
    """

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._current = 0
        self._closed = False
        self._lock = threading.Lock()

    def begin(self) -> int:
        with self._lock:
            self._current = next(self._counter)
            self._closed = False
            return self._current

    def is_current(self, token: int) -> bool:
        with self._lock:
            return not self._closed and token == self._current

    def close(self) -> None:
        with self._lock:
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed
