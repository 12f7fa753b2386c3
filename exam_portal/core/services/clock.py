"""Scheduling interface used by the timer and the integrity monitor."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Hashable, Protocol


class Clock(Protocol):
    """Event-loop scheduler; implementations must run callbacks on one thread."""

    def schedule_tick(self, callback: Callable[[], None], interval_ms: int) -> Hashable:
        """Call ``callback`` every ``interval_ms`` until cancelled."""

    def schedule_once(self, callback: Callable[[], None], delay_ms: int) -> Hashable:
        """Call ``callback`` once after ``delay_ms``."""

    def cancel(self, handle: Hashable) -> None:
        """Cancel a scheduled callback. Unknown or finished handles are ignored."""

    def now(self) -> datetime:
        """Return the current time as an aware UTC datetime."""
