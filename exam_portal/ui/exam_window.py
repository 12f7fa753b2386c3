"""Qt main window that runs one exam session fullscreen."""

from __future__ import annotations

from enum import Enum, auto
import logging

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from exam_portal.constants.ui_constants import (
    AUTO_SUBMIT_VIOLATIONS_MESSAGE,
    AUTO_SUBMITTED_TITLE,
    COMPLETED_MESSAGE,
    ENTER_FULLSCREEN_BUTTON,
    EXAM_STARTED_TEMPLATE,
    EXIT_FULLSCREEN_BUTTON,
    SUBMIT_ERROR_MESSAGE,
    SUBMIT_ERROR_TITLE,
    SUBMITTED_MESSAGE,
    SUBMITTED_TITLE,
    SUBMITTING_MESSAGE,
    TIME_REMAINING_TEMPLATE,
    TIME_WARNING_SECONDS,
    VIOLATION_COUNTER_TEMPLATE,
    VIOLATIONS_SUBMITTED_TITLE,
    WINDOW_TITLE,
)
from exam_portal.core.exam_session import ExamSession, SessionState, SubmitReason
from exam_portal.core.exceptions import RegistrationError, SessionStateError
from exam_portal.core.models import Exam, Submission
from exam_portal.core.services.exam_timer import format_remaining
from exam_portal.styling.color_palette import Theme
from exam_portal.styling.styles import Styles
from exam_portal.ui.components.completion_panel import CompletionPanel
from exam_portal.ui.components.question_panel import QuestionPanel
from exam_portal.ui.components.registration_panel import RegistrationPanel
from exam_portal.ui.dialog_helpers import (
    confirm_leave_exam,
    confirm_submit_exam,
    show_error,
    show_violation_warning,
    show_warning,
)
from exam_portal.ui.qt_bridge import QtClock, WindowSignalSource

logger = logging.getLogger(__name__)


class ExamScreen(Enum):
    """Which panel the window is showing."""

    REGISTRATION = auto()
    QUESTION = auto()
    COMPLETION = auto()


class ExamWindow(QMainWindow):
    """Student-facing window; acts as the presenter of an :class:`ExamSession`."""

    def __init__(self, theme: Theme = Theme.LIGHT) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.theme = theme

        self.clock = QtClock(self)
        self.signal_source = WindowSignalSource(self)
        self.session: ExamSession | None = None
        self._screen = ExamScreen.REGISTRATION
        self._error_dialog_open = False

        self._build_ui()
        self._apply_styles()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self._build_status_row(root_layout)

        self.screen_stack = QStackedWidget(self)
        self.registration_panel = RegistrationPanel(on_start=self._handle_start, theme=self.theme, parent=self)
        self.question_panel = QuestionPanel(
            on_select=self._handle_select,
            on_previous=self._handle_previous,
            on_next=self._handle_next,
            on_submit=self._handle_submit_click,
            on_jump=self._handle_jump,
            theme=self.theme,
            parent=self
        )
        self.completion_panel = CompletionPanel(on_close=self.close, theme=self.theme, parent=self)

        self.screen_stack.addWidget(self.registration_panel)
        self.screen_stack.addWidget(self.question_panel)
        self.screen_stack.addWidget(self.completion_panel)
        root_layout.addWidget(self.screen_stack)

        self._set_screen(ExamScreen.REGISTRATION)

    def _build_status_row(self, layout: QVBoxLayout) -> None:
        status_row = QHBoxLayout()

        self.exam_title_label = QLabel("", self)
        self.exam_title_label.setStyleSheet(Styles.get_large_label_style())
        status_row.addWidget(self.exam_title_label)
        status_row.addStretch(1)

        self.violation_label = QLabel("", self)
        self.violation_label.setStyleSheet(Styles.get_notice_style(self.theme))
        status_row.addWidget(self.violation_label)

        self.timer_label = QLabel("", self)
        self.timer_label.setStyleSheet(Styles.get_timer_style(urgent=False, theme=self.theme))
        status_row.addWidget(self.timer_label)

        self.fullscreen_button = QPushButton(ENTER_FULLSCREEN_BUTTON, self)
        self.fullscreen_button.clicked.connect(self._toggle_fullscreen)
        status_row.addWidget(self.fullscreen_button)

        layout.addLayout(status_row)

    def _set_screen(self, screen: ExamScreen) -> None:
        self._screen = screen
        panels = {
            ExamScreen.REGISTRATION: self.registration_panel,
            ExamScreen.QUESTION: self.question_panel,
            ExamScreen.COMPLETION: self.completion_panel,
        }
        self.screen_stack.setCurrentWidget(panels[screen])
        in_exam = screen is ExamScreen.QUESTION
        self.timer_label.setVisible(in_exam)
        self.violation_label.setVisible(in_exam)
        self.fullscreen_button.setVisible(in_exam)

    def _apply_styles(self) -> None:
        self.setStyleSheet(Styles.get_main_window_style(self.theme))

    # --- Wiring ---

    def attach_session(self, session: ExamSession) -> None:
        self.session = session
        self.exam_title_label.setText(session.exam.title)
        self.registration_panel.set_exam(session.exam)
        self._set_screen(ExamScreen.REGISTRATION)

    def show_load_error(self, message: str) -> None:
        self.session = None
        self.completion_panel.show_load_error(message)
        self._set_screen(ExamScreen.COMPLETION)

    def _handle_start(self, roll_number: str, phone: str) -> None:
        if self.session is None:
            return
        try:
            self.session.start(roll_number, phone)
        except (RegistrationError, SessionStateError) as exc:
            show_warning(self, WINDOW_TITLE, str(exc))

    def _handle_select(self, question_id: str, option_id: str) -> None:
        if self.session is None:
            return
        try:
            selected = self.session.select_option(question_id, option_id)
        except (ValueError, SessionStateError):
            logger.exception("Could not record selection %s for %s", option_id, question_id)
            return
        self.question_panel.update_selection(selected)
        self._refresh_navigator()

    def _handle_previous(self) -> None:
        if self.session is not None:
            self.session.previous_question()
            self._render_current_question()

    def _handle_next(self) -> None:
        if self.session is not None:
            self.session.next_question()
            self._render_current_question()

    def _handle_jump(self, index: int) -> None:
        if self.session is None or self.session.state is not SessionState.IN_PROGRESS:
            return
        self.session.go_to_question(index)
        self._render_current_question()

    def _handle_submit_click(self) -> None:
        if self.session is None or self.session.state is not SessionState.IN_PROGRESS:
            return
        unanswered = self.session.answered_flags().count(False)
        if unanswered and not confirm_submit_exam(self, unanswered):
            return
        self.session.submit(SubmitReason.MANUAL)

    def _render_current_question(self) -> None:
        session = self.session
        if session is None:
            return
        question = session.current_question
        self.question_panel.show_question(
            question,
            number=session.current_index + 1,
            total=session.exam.question_count,
            selected=session.selected_for(question.id),
        )
        self._refresh_navigator()

    def _refresh_navigator(self) -> None:
        if self.session is not None:
            self.question_panel.show_navigator(self.session.current_index, self.session.answered_flags())

    def _toggle_fullscreen(self) -> None:
        if self.isFullScreen():
            self.exit_fullscreen()
        else:
            self.enter_fullscreen()

    # --- Session presenter ---

    def enter_fullscreen(self) -> None:
        self.showFullScreen()
        self.fullscreen_button.setText(EXIT_FULLSCREEN_BUTTON)

    def exit_fullscreen(self) -> None:
        if self.isFullScreen():
            self.showNormal()
        self.fullscreen_button.setText(ENTER_FULLSCREEN_BUTTON)

    def show_exam_started(self, exam: Exam) -> None:
        self._set_screen(ExamScreen.QUESTION)
        self._update_violation_label()
        self._render_current_question()
        self.statusBar().showMessage(EXAM_STARTED_TEMPLATE.format(duration=exam.duration_minutes), 5000)

    def show_time_remaining(self, seconds: int) -> None:
        self.timer_label.setText(TIME_REMAINING_TEMPLATE.format(remaining=format_remaining(seconds)))
        urgent = seconds <= TIME_WARNING_SECONDS
        self.timer_label.setStyleSheet(Styles.get_timer_style(urgent=urgent, theme=self.theme))

    def show_violation_warning(self, count: int, limit: int) -> None:
        self._update_violation_label()
        show_violation_warning(self, count, limit)

    def show_submitting(self, reason: SubmitReason) -> None:
        self.question_panel.set_submitting(True)
        self.statusBar().showMessage(SUBMITTING_MESSAGE)
        # The save blocks the event loop; paint the submitting state first.
        QApplication.processEvents()

    def show_submitted(self, submission: Submission, reason: SubmitReason) -> None:
        if reason is SubmitReason.VIOLATIONS:
            title, message = VIOLATIONS_SUBMITTED_TITLE, AUTO_SUBMIT_VIOLATIONS_MESSAGE
        elif reason is SubmitReason.TIMER:
            title, message = AUTO_SUBMITTED_TITLE, SUBMITTED_MESSAGE
        else:
            title, message = SUBMITTED_TITLE, f"{SUBMITTED_MESSAGE}\n{COMPLETED_MESSAGE}"
        self.statusBar().clearMessage()
        self.completion_panel.show_completed(submission, title, message)
        self._set_screen(ExamScreen.COMPLETION)

    def show_submit_error(self, message: str) -> None:
        self.statusBar().clearMessage()
        self.question_panel.set_submitting(False)
        self.question_panel.set_retry_mode(True)
        self._update_violation_label()
        self.statusBar().showMessage(f"{SUBMIT_ERROR_TITLE}: {message}")
        if self._error_dialog_open:
            return
        # Automatic retries keep failing while the dialog is up; show it once.
        self._error_dialog_open = True
        try:
            show_error(self, SUBMIT_ERROR_TITLE, f"{SUBMIT_ERROR_MESSAGE}\n\n{message}")
        finally:
            self._error_dialog_open = False

    def _update_violation_label(self) -> None:
        if self.session is None:
            return
        self.violation_label.setText(
            VIOLATION_COUNTER_TEMPLATE.format(
                count=self.session.violation_count,
                limit=self.session.violation_limit,
            )
        )

    # --- Qt overrides ---

    def closeEvent(self, event: QCloseEvent) -> None:
        if self.signal_source.confirm_close() and not confirm_leave_exam(self):
            event.ignore()
            return
        event.accept()
