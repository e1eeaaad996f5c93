"""
One-shot latch guarding round finalization.
"""

import threading


class OneShotLatch:
    """
    A flag that can be taken exactly once until it is reset.

    The first try_acquire() returns True, every later call returns False,
    even when two callers race.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._set = False

    def try_acquire(self) -> bool:
        with self._lock:
            if self._set:
                return False
            self._set = True
            return True

    def reset(self) -> None:
        with self._lock:
            self._set = False

    @property
    def is_set(self) -> bool:
        return self._set
