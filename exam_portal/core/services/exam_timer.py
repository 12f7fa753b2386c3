"""Countdown timer that ends the exam when time runs out."""

from __future__ import annotations

from datetime import datetime, timedelta
import logging
from typing import Callable, Hashable

from exam_portal.constants.exam_constants import TICK_INTERVAL_MS
from exam_portal.core.services.clock import Clock

logger = logging.getLogger(__name__)


def format_remaining(seconds: int) -> str:
    minutes, remaining = divmod(max(0, seconds), 60)
    return f"{minutes}:{remaining:02d}"


class ExamTimer:
    """Counts down to a deadline and reports expiry exactly once per run.

    Each tick reads the clock instead of decrementing a counter, so ticks that
    arrive late or are dropped while the event loop is blocked do not make the
    countdown fall behind.
    """

    def __init__(
        self,
        clock: Clock,
        on_tick: Callable[[int], None],
        on_expire: Callable[[], None],
        tick_interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        self._clock = clock
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._tick_interval_ms = tick_interval_ms
        self._remaining_seconds: int = 0
        self._deadline: datetime | None = None
        self._handle: Hashable | None = None
        self._expired: bool = False

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def is_running(self) -> bool:
        return self._handle is not None

    @property
    def expired(self) -> bool:
        return self._expired

    def start(self, duration_seconds: int) -> None:
        if duration_seconds <= 0:
            raise ValueError("Exam duration must be positive.")
        self.stop()
        self._remaining_seconds = duration_seconds
        self._deadline = self._clock.now() + timedelta(seconds=duration_seconds)
        self._expired = False
        self._handle = self._clock.schedule_tick(self._tick, self._tick_interval_ms)
        self._on_tick(self._remaining_seconds)

    def stop(self) -> None:
        if self._handle is not None:
            self._clock.cancel(self._handle)
            self._handle = None

    def resume(self) -> None:
        """Tick again after an expiry whose submission did not go through."""
        if self._handle is None:
            self._handle = self._clock.schedule_tick(self._tick, self._tick_interval_ms)

    def _tick(self) -> None:
        if self._handle is None:
            return
        self._remaining_seconds = self._seconds_until_deadline()
        self._on_tick(self._remaining_seconds)
        if self._remaining_seconds == 0:
            self.stop()
            self._expired = True
            logger.info("Exam time is up")
            self._on_expire()

    def _seconds_until_deadline(self) -> int:
        if self._deadline is None:
            return 0
        left = (self._deadline - self._clock.now()).total_seconds()
        # Nearest whole second; QTimer may fire a few ms early or late.
        return max(0, round(left))
