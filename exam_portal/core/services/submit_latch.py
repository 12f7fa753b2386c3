"""In-flight guard shared by every submission trigger."""

from __future__ import annotations

from threading import Lock


class SubmitLatch:
    """Boolean latch whose check-and-set happens in one step.

    The session owns the latch and hands it to the timer and the integrity
    monitor so they can see when a submission is already in flight.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._is_set = False

    @property
    def is_set(self) -> bool:
        return self._is_set

    def try_acquire(self) -> bool:
        """Set the latch and return True, or return False if it was already set."""
        with self._lock:
            if self._is_set:
                return False
            self._is_set = True
            return True

    def release(self) -> None:
        with self._lock:
            self._is_set = False
