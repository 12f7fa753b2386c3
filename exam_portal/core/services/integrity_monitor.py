"""Detects attempts to leave the exam surface and enforces the strike policy.

Tab switches and window changes usually raise both a "hidden" and a "blur"
signal for one user action. Whichever arrives first claims the violation and
the other one is ignored until the coalescing window has passed.
"""

from __future__ import annotations

from enum import Enum, auto
import logging
from typing import Callable, Hashable, Protocol

from exam_portal.constants.exam_constants import COALESCE_WINDOW_MS, VIOLATION_LIMIT
from exam_portal.core.services.clock import Clock
from exam_portal.core.services.submit_latch import SubmitLatch

logger = logging.getLogger(__name__)


class IntegritySignalSource(Protocol):
    """Surface that reports focus, visibility, fullscreen and close events."""

    def on_hidden(self, callback: Callable[[], None]) -> None: ...

    def on_blur(self, callback: Callable[[], None]) -> None: ...

    def on_fullscreen_change(self, callback: Callable[[bool], None]) -> None: ...

    def on_unload_attempt(self, callback: Callable[[], bool]) -> None: ...


class SignalKind(Enum):
    HIDDEN = auto()
    BLUR = auto()


class IntegrityMonitor:
    """Counts violations while armed and escalates at the configured limit."""

    def __init__(
        self,
        signal_source: IntegritySignalSource,
        clock: Clock,
        latch: SubmitLatch,
        on_warning: Callable[[int, int], None],
        on_limit_reached: Callable[[], None],
        violation_limit: int = VIOLATION_LIMIT,
        coalesce_window_ms: int = COALESCE_WINDOW_MS,
    ) -> None:
        if violation_limit <= 0:
            raise ValueError("Violation limit must be positive.")
        self._clock = clock
        self._latch = latch
        self._on_warning = on_warning
        self._on_limit_reached = on_limit_reached
        self._violation_limit = violation_limit
        self._coalesce_window_ms = coalesce_window_ms

        self._armed: bool = False
        self._violation_count: int = 0
        self._is_fullscreen: bool = False
        self._claimed_by: SignalKind | None = None
        self._claim_handle: Hashable | None = None

        signal_source.on_hidden(lambda: self._handle_signal(SignalKind.HIDDEN))
        signal_source.on_blur(lambda: self._handle_signal(SignalKind.BLUR))
        signal_source.on_fullscreen_change(self._handle_fullscreen_change)
        signal_source.on_unload_attempt(self._handle_unload_attempt)

    @property
    def violation_count(self) -> int:
        return self._violation_count

    @property
    def violation_limit(self) -> int:
        return self._violation_limit

    @property
    def is_armed(self) -> bool:
        return self._armed

    @property
    def is_fullscreen(self) -> bool:
        return self._is_fullscreen

    @property
    def limit_reached(self) -> bool:
        return self._violation_count >= self._violation_limit

    def arm(self) -> None:
        self._armed = True

    def disarm(self) -> None:
        self._armed = False
        self._release_claim()

    def _handle_signal(self, kind: SignalKind) -> None:
        if not self._armed or self._latch.is_set:
            return
        if self._claimed_by is not None and self._claimed_by is not kind:
            logger.debug("Ignoring %s signal coalesced with %s", kind.name, self._claimed_by.name)
            return
        self._claim(kind)

        if self.limit_reached:
            # The forced submission did not go through; ask again.
            self._on_limit_reached()
            return

        self._violation_count += 1
        logger.warning(
            "Integrity violation %d/%d (%s)",
            self._violation_count,
            self._violation_limit,
            kind.name.lower(),
        )
        if self.limit_reached:
            self._on_limit_reached()
        else:
            self._on_warning(self._violation_count, self._violation_limit)

    def _claim(self, kind: SignalKind) -> None:
        if self._claim_handle is not None:
            self._clock.cancel(self._claim_handle)
        self._claimed_by = kind
        self._claim_handle = self._clock.schedule_once(self._release_claim, self._coalesce_window_ms)

    def _release_claim(self) -> None:
        if self._claim_handle is not None:
            self._clock.cancel(self._claim_handle)
        self._claimed_by = None
        self._claim_handle = None

    def _handle_fullscreen_change(self, is_fullscreen: bool) -> None:
        self._is_fullscreen = is_fullscreen
        if self._armed and not is_fullscreen:
            logger.info("Student left fullscreen during the exam")

    def _handle_unload_attempt(self) -> bool:
        return self._armed
