"""Readers-writer lock guarding catalog snapshot swaps.

Resolutions (readers) fetch the current catalog snapshot concurrently; a
load or reload (writer) holds exclusive access only for the instant it
swaps in a new immutable snapshot. The lock provides:
- Multiple concurrent readers
- Exclusive writer access with writer preference (no writer starvation)
- Reentrant read acquisition within one thread
- Optional acquisition timeout (raises TimeoutError)

Read-to-write upgrades, write-to-read downgrades and nested write
acquisition are rejected with RuntimeError: every catalog write path is a
single-level operation.

Python 3.13+.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

__all__ = ["RWLock"]


class RWLock:
    """Readers-writer lock with writer preference.

    Example:
        >>> lock = RWLock()
        >>> with lock.read():
        ...     pass  # many threads may be here at once
        >>> with lock.write():
        ...     pass  # exactly one thread, no readers
    """

    __slots__ = (
        "_condition",
        "_reader_depths",
        "_waiting_writers",
        "_writer",
    )

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        # thread id -> reentrant read depth
        self._reader_depths: dict[int, int] = {}
        self._writer: int | None = None
        self._waiting_writers = 0

    @contextmanager
    def read(self, timeout: float | None = None) -> Generator[None]:
        """Hold the lock in shared mode.

        Args:
            timeout: Seconds to wait; None waits indefinitely, 0.0 does not wait.

        Raises:
            RuntimeError: If the thread holds the write lock.
            TimeoutError: If the lock is not acquired in time.
            ValueError: If timeout is negative.
        """
        self._acquire_read(timeout)
        try:
            yield
        finally:
            self._release_read()

    @contextmanager
    def write(self, timeout: float | None = None) -> Generator[None]:
        """Hold the lock in exclusive mode.

        Args:
            timeout: Seconds to wait; None waits indefinitely, 0.0 does not wait.

        Raises:
            RuntimeError: If the thread already holds the read or write lock.
            TimeoutError: If the lock is not acquired in time.
            ValueError: If timeout is negative.
        """
        self._acquire_write(timeout)
        try:
            yield
        finally:
            self._release_write()

    def _wait_for(
        self, ready: Callable[[], bool], timeout: float | None, what: str
    ) -> None:
        """Wait on the condition until ready() holds. Caller holds _condition."""
        deadline = time.monotonic() + timeout if timeout is not None else None
        while not ready():
            if deadline is None:
                self._condition.wait()
                continue
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                msg = f"Timed out waiting for {what} lock"
                raise TimeoutError(msg)
            self._condition.wait(timeout=remaining)

    @staticmethod
    def _check_timeout(timeout: float | None) -> None:
        if timeout is not None and timeout < 0:
            msg = f"Timeout must be non-negative, got {timeout}"
            raise ValueError(msg)

    def _acquire_read(self, timeout: float | None) -> None:
        self._check_timeout(timeout)
        me = threading.get_ident()

        with self._condition:
            if me in self._reader_depths:
                self._reader_depths[me] += 1
                return
            if self._writer == me:
                msg = "Cannot acquire read lock while holding write lock"
                raise RuntimeError(msg)

            self._wait_for(
                lambda: self._writer is None and self._waiting_writers == 0,
                timeout,
                "read",
            )
            self._reader_depths[me] = 1

    def _release_read(self) -> None:
        me = threading.get_ident()

        with self._condition:
            depth = self._reader_depths.get(me)
            if depth is None:
                msg = "Thread does not hold read lock"
                raise RuntimeError(msg)
            if depth > 1:
                self._reader_depths[me] = depth - 1
                return
            del self._reader_depths[me]
            if not self._reader_depths:
                self._condition.notify_all()

    def _acquire_write(self, timeout: float | None) -> None:
        self._check_timeout(timeout)
        me = threading.get_ident()

        with self._condition:
            if me in self._reader_depths:
                msg = "Cannot upgrade read lock to write lock"
                raise RuntimeError(msg)
            if self._writer == me:
                msg = "Cannot acquire write lock: already holding write lock"
                raise RuntimeError(msg)

            self._waiting_writers += 1
            try:
                self._wait_for(
                    lambda: not self._reader_depths and self._writer is None,
                    timeout,
                    "write",
                )
                self._writer = me
            finally:
                # Readers blocked on writer preference must re-check, including
                # after this writer timed out.
                self._waiting_writers -= 1
                self._condition.notify_all()

    def _release_write(self) -> None:
        me = threading.get_ident()

        with self._condition:
            if self._writer != me:
                msg = "Thread does not hold write lock"
                raise RuntimeError(msg)
            self._writer = None
            self._condition.notify_all()

    @property
    def reader_count(self) -> int:
        """Number of distinct threads currently holding the read lock."""
        with self._condition:
            return len(self._reader_depths)

    @property
    def writer_active(self) -> bool:
        """True while some thread holds the write lock."""
        with self._condition:
            return self._writer is not None

    @property
    def writers_waiting(self) -> int:
        """Number of threads blocked waiting for the write lock."""
        with self._condition:
            return self._waiting_writers
