"""Component that shows one question with its options and navigation."""

from __future__ import annotations

from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from PySide6.QtWebEngineWidgets import QWebEngineView

from exam_portal.constants.ui_constants import (
    MARKS_TEMPLATE,
    MULTI_SELECT_BADGE,
    NAVIGATOR_TOOLTIP_TEMPLATE,
    NEXT_BUTTON,
    PREVIOUS_BUTTON,
    QUESTION_COUNTER_TEMPLATE,
    RETRY_SUBMIT_BUTTON,
    SUBMIT_BUTTON,
)
from exam_portal.core.models import ExamQuestion
from exam_portal.styling.color_palette import ColorPalette, Theme
from exam_portal.styling.styles import Styles
from exam_portal.ui.question_renderer import render_option_label, render_question


class QuestionPanel(QWidget):
    """UI component for answering the current question."""

    def __init__(
        self,
        on_select: callable,
        on_previous: callable,
        on_next: callable,
        on_submit: callable,
        on_jump: callable,
        theme: Theme = Theme.LIGHT,
        parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self.theme = theme
        self.on_select = on_select
        self.on_previous = on_previous
        self.on_next = on_next
        self.on_submit = on_submit
        self.on_jump = on_jump
        self._question: ExamQuestion | None = None
        self._option_buttons: dict[str, QPushButton] = {}
        self._navigator_buttons: list[QPushButton] = []
        self._number: int = 0
        self._font_size: int = 14

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header_row = QHBoxLayout()
        self.counter_label = QLabel("", self)
        header_row.addWidget(self.counter_label)
        self.multi_select_badge = QLabel(MULTI_SELECT_BADGE, self)
        self.multi_select_badge.setStyleSheet(Styles.get_badge_style(self.theme))
        header_row.addWidget(self.multi_select_badge)
        header_row.addStretch(1)
        self.marks_label = QLabel("", self)
        header_row.addWidget(self.marks_label)
        layout.addLayout(header_row)

        self.question_view = QWebEngineView(self)
        self.question_view.setMinimumHeight(200)
        self.question_view.page().setBackgroundColor(QColor(ColorPalette.BACKGROUND_PRIMARY.get(self.theme)))
        layout.addWidget(self.question_view, stretch=1)

        self.options_layout = QVBoxLayout()
        layout.addLayout(self.options_layout)

        nav_row = QHBoxLayout()
        self.previous_button = QPushButton(PREVIOUS_BUTTON, self)
        self.previous_button.clicked.connect(self.on_previous)
        nav_row.addWidget(self.previous_button)
        nav_row.addStretch(1)
        self.next_button = QPushButton(NEXT_BUTTON, self)
        self.next_button.clicked.connect(self.on_next)
        nav_row.addWidget(self.next_button)
        self.submit_button = QPushButton(SUBMIT_BUTTON, self)
        self.submit_button.setStyleSheet(Styles.get_primary_button_style(self.theme))
        self.submit_button.clicked.connect(self.on_submit)
        nav_row.addWidget(self.submit_button)
        layout.addLayout(nav_row)

        self.navigator_layout = QHBoxLayout()
        self.navigator_layout.addStretch(1)
        self.navigator_layout.addStretch(1)
        layout.addLayout(self.navigator_layout)

    def show_question(
        self,
        question: ExamQuestion,
        number: int,
        total: int,
        selected: list[str],
    ) -> None:
        self._question = question
        self._number = number
        self.counter_label.setText(QUESTION_COUNTER_TEMPLATE.format(number=number, total=total))
        self.marks_label.setText(MARKS_TEMPLATE.format(marks=question.marks))
        self.multi_select_badge.setVisible(question.is_multi_select)
        text_color = ColorPalette.TEXT_PRIMARY.get(self.theme)
        self.question_view.setHtml(render_question(question, font_size=self._font_size, text_color=text_color))

        self._clear_options()
        for index, option in enumerate(question.options):
            button = QPushButton(render_option_label(index, option.text), self)
            button.setCheckable(True)
            button.clicked.connect(
                lambda _checked=False, option_id=option.id: self._handle_option_click(option_id)
            )
            self.options_layout.addWidget(button)
            self._option_buttons[option.id] = button
        self.update_selection(selected)

        is_last = number == total
        self.previous_button.setEnabled(number > 1)
        self.next_button.setVisible(not is_last)
        self.submit_button.setVisible(is_last)

    def show_navigator(self, current_index: int, answered: list[bool]) -> None:
        """Colour one numbered button per question; rebuilt when the count changes."""
        if len(self._navigator_buttons) != len(answered):
            self._build_navigator(len(answered))
        for index, button in enumerate(self._navigator_buttons):
            button.setStyleSheet(
                Styles.get_navigator_button_style(
                    current=index == current_index,
                    answered=answered[index],
                    theme=self.theme,
                )
            )

    def update_selection(self, selected: list[str]) -> None:
        chosen = set(selected)
        for option_id, button in self._option_buttons.items():
            is_selected = option_id in chosen
            button.setChecked(is_selected)
            button.setStyleSheet(Styles.get_option_style(is_selected, self.theme))

    def set_submitting(self, submitting: bool) -> None:
        for button in self._option_buttons.values():
            button.setEnabled(not submitting)
        self.previous_button.setEnabled(not submitting and self._number > 1)
        self.next_button.setEnabled(not submitting)
        self.submit_button.setEnabled(not submitting)
        for button in self._navigator_buttons:
            button.setEnabled(not submitting)

    def set_retry_mode(self, retry: bool) -> None:
        self.submit_button.setText(RETRY_SUBMIT_BUTTON if retry else SUBMIT_BUTTON)
        if retry:
            self.submit_button.setVisible(True)

    def _handle_option_click(self, option_id: str) -> None:
        if self._question is None:
            return
        self.on_select(self._question.id, option_id)

    def _clear_options(self) -> None:
        for button in self._option_buttons.values():
            self.options_layout.removeWidget(button)
            button.deleteLater()
        self._option_buttons = {}

    def _build_navigator(self, count: int) -> None:
        for button in self._navigator_buttons:
            self.navigator_layout.removeWidget(button)
            button.deleteLater()
        self._navigator_buttons = []
        for index in range(count):
            button = QPushButton(str(index + 1), self)
            button.setToolTip(NAVIGATOR_TOOLTIP_TEMPLATE.format(number=index + 1))
            button.clicked.connect(lambda _checked=False, target=index: self.on_jump(target))
            # Between the two stretches so the row stays centred.
            self.navigator_layout.insertWidget(self.navigator_layout.count() - 1, button)
            self._navigator_buttons.append(button)
