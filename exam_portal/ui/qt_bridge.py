"""Qt implementations of the clock and the integrity signal source."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Callable, Hashable

from PySide6.QtCore import QEvent, QObject, Qt, QTimer
from PySide6.QtWidgets import QApplication, QWidget

logger = logging.getLogger(__name__)


class QtClock:
    """Schedules callbacks on the Qt event loop with ``QTimer``."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent
        self._timers: dict[int, QTimer] = {}
        self._next_handle = 0

    def schedule_tick(self, callback: Callable[[], None], interval_ms: int) -> Hashable:
        timer = self._create_timer(interval_ms, single_shot=False)
        timer.timeout.connect(callback)
        return self._register(timer)

    def schedule_once(self, callback: Callable[[], None], delay_ms: int) -> Hashable:
        timer = self._create_timer(delay_ms, single_shot=True)
        handle = self._register(timer)

        def fire() -> None:
            self._discard(handle)
            callback()

        timer.timeout.connect(fire)
        return handle

    def cancel(self, handle: Hashable) -> None:
        if isinstance(handle, int):
            self._discard(handle)

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def _create_timer(self, interval_ms: int, single_shot: bool) -> QTimer:
        timer = QTimer(self._parent)
        timer.setSingleShot(single_shot)
        timer.setInterval(max(0, interval_ms))
        return timer

    def _register(self, timer: QTimer) -> int:
        self._next_handle += 1
        handle = self._next_handle
        self._timers[handle] = timer
        timer.start()
        return handle

    def _discard(self, handle: int) -> None:
        timer = self._timers.pop(handle, None)
        if timer is not None:
            timer.stop()
            timer.deleteLater()


class WindowSignalSource(QObject):
    """Turns window and application state changes into integrity signals.

    - the application losing focus to another program -> blur
    - the application being hidden or the window minimised -> hidden
    - entering or leaving fullscreen -> fullscreen change
    - a close request -> unload attempt (see :meth:`confirm_close`)

    Focus moving between windows of this application (for example to a
    warning dialog) is not reported.
    """

    def __init__(self, window: QWidget) -> None:
        super().__init__(window)
        self._window = window
        self._hidden_callbacks: list[Callable[[], None]] = []
        self._blur_callbacks: list[Callable[[], None]] = []
        self._fullscreen_callbacks: list[Callable[[bool], None]] = []
        self._unload_callbacks: list[Callable[[], bool]] = []
        self._was_fullscreen = window.isFullScreen()

        window.installEventFilter(self)
        app = QApplication.instance()
        if app is not None:
            app.applicationStateChanged.connect(self._handle_application_state)

    def on_hidden(self, callback: Callable[[], None]) -> None:
        self._hidden_callbacks.append(callback)

    def on_blur(self, callback: Callable[[], None]) -> None:
        self._blur_callbacks.append(callback)

    def on_fullscreen_change(self, callback: Callable[[bool], None]) -> None:
        self._fullscreen_callbacks.append(callback)

    def on_unload_attempt(self, callback: Callable[[], bool]) -> None:
        self._unload_callbacks.append(callback)

    def confirm_close(self) -> bool:
        """Return True when a subscriber wants the close to be confirmed."""
        results = [callback() for callback in self._unload_callbacks]
        return any(results)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is self._window and event.type() == QEvent.Type.WindowStateChange:
            self._handle_window_state_change()
        return super().eventFilter(watched, event)

    def _handle_window_state_change(self) -> None:
        if self._window.isMinimized():
            logger.debug("Exam window minimised")
            self._emit(self._hidden_callbacks)

        is_fullscreen = self._window.isFullScreen()
        if is_fullscreen != self._was_fullscreen:
            self._was_fullscreen = is_fullscreen
            for callback in list(self._fullscreen_callbacks):
                callback(is_fullscreen)

    def _handle_application_state(self, state: Qt.ApplicationState) -> None:
        if state == Qt.ApplicationState.ApplicationHidden:
            logger.debug("Application hidden")
            self._emit(self._hidden_callbacks)
        elif state == Qt.ApplicationState.ApplicationInactive:
            logger.debug("Application lost focus")
            self._emit(self._blur_callbacks)

    @staticmethod
    def _emit(callbacks: list[Callable[[], None]]) -> None:
        for callback in list(callbacks):
            callback()
