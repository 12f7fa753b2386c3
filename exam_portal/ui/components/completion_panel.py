"""Component shown once the exam is over or could not be opened."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QPushButton, QVBoxLayout, QWidget

from exam_portal.constants.ui_constants import (
    ANSWERED_SUMMARY_TEMPLATE,
    CLOSE_BUTTON,
    LOAD_ERROR_ACTION,
    LOAD_ERROR_TITLE,
)
from exam_portal.core.models import Submission
from exam_portal.styling.color_palette import Theme
from exam_portal.styling.styles import Styles


class CompletionPanel(QWidget):
    """Final message with a single action that closes the window."""

    def __init__(
        self,
        on_close: callable,
        theme: Theme = Theme.LIGHT,
        parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self.theme = theme
        self.on_close = on_close
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)
        layout.addStretch(1)

        self.title_label = QLabel("", self)
        self.title_label.setAlignment(Qt.AlignCenter)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.title_label)

        self.message_label = QLabel("", self)
        self.message_label.setAlignment(Qt.AlignCenter)
        self.message_label.setWordWrap(True)
        layout.addWidget(self.message_label)

        self.summary_label = QLabel("", self)
        self.summary_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.summary_label)

        self.close_button = QPushButton(CLOSE_BUTTON, self)
        self.close_button.clicked.connect(self.on_close)
        layout.addWidget(self.close_button, alignment=Qt.AlignCenter)
        layout.addStretch(1)

    def show_completed(self, submission: Submission, title: str, message: str) -> None:
        self.title_label.setText(title)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        self.message_label.setText(message)
        self.summary_label.setText(
            ANSWERED_SUMMARY_TEMPLATE.format(
                answered=submission.answered_count,
                total=len(submission.answers),
            )
        )
        self.summary_label.setVisible(True)
        self.close_button.setText(CLOSE_BUTTON)

    def show_load_error(self, message: str) -> None:
        self.title_label.setText(LOAD_ERROR_TITLE)
        self.title_label.setStyleSheet(Styles.get_large_label_style() + Styles.get_error_style(self.theme))
        self.message_label.setText(message)
        self.summary_label.setVisible(False)
        self.close_button.setText(LOAD_ERROR_ACTION)
