"""
Counting primitive used to drain outstanding deliveries.
"""

from __future__ import annotations

import threading


class WaitGroup:
    """Counter of outstanding tasks with a blocking wait for zero."""

    def __init__(self) -> None:
        self._count = 0
        self._cond = threading.Condition()

    @property
    def count(self) -> int:
        with self._cond:
            return self._count

    def add(self, delta: int = 1) -> None:
        with self._cond:
            count = self._count + delta
            if count < 0:
                raise ValueError("negative WaitGroup counter")
            self._count = count
            if count == 0:
                self._cond.notify_all()

    def done(self) -> None:
        self.add(-1)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the counter is zero.

        Returns:
            False if the timeout expired with tasks still outstanding
        """
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout=timeout)
