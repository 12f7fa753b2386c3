"""Component for entering student details before the exam starts."""

from __future__ import annotations

from PySide6.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from exam_portal.constants.about import INSTRUCTIONS_TEXT
from exam_portal.constants.ui_constants import (
    PHONE_LABEL,
    PHONE_PLACEHOLDER,
    REGISTRATION_PROMPT,
    REGISTRATION_WARNING,
    REQUIRED_INFO_MESSAGE,
    REQUIRED_INFO_TITLE,
    ROLL_NUMBER_LABEL,
    ROLL_NUMBER_PLACEHOLDER,
    START_BUTTON,
)
from exam_portal.core.models import Exam
from exam_portal.styling.color_palette import Theme
from exam_portal.styling.styles import Styles
from exam_portal.ui.dialog_helpers import show_warning


class RegistrationPanel(QWidget):
    """Shows the exam instructions and collects roll number and phone."""

    def __init__(
        self,
        on_start: callable,
        theme: Theme = Theme.LIGHT,
        parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self.theme = theme
        self.on_start = on_start
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.title_label = QLabel("", self)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        self.title_label.setWordWrap(True)
        layout.addWidget(self.title_label)

        self.description_label = QLabel("", self)
        self.description_label.setWordWrap(True)
        layout.addWidget(self.description_label)

        instructions_box = QGroupBox("Instructions", self)
        instructions_layout = QVBoxLayout()
        instructions_box.setLayout(instructions_layout)
        self.instructions_label = QLabel("", instructions_box)
        self.instructions_label.setWordWrap(True)
        instructions_layout.addWidget(self.instructions_label)
        layout.addWidget(instructions_box)

        prompt_label = QLabel(REGISTRATION_PROMPT, self)
        prompt_label.setWordWrap(True)
        layout.addWidget(prompt_label)

        form = QFormLayout()
        self.roll_number_input = QLineEdit(self)
        self.roll_number_input.setPlaceholderText(ROLL_NUMBER_PLACEHOLDER)
        form.addRow(ROLL_NUMBER_LABEL, self.roll_number_input)
        self.phone_input = QLineEdit(self)
        self.phone_input.setPlaceholderText(PHONE_PLACEHOLDER)
        form.addRow(PHONE_LABEL, self.phone_input)
        layout.addLayout(form)

        warning_label = QLabel(REGISTRATION_WARNING, self)
        warning_label.setWordWrap(True)
        warning_label.setStyleSheet(Styles.get_notice_style(self.theme))
        layout.addWidget(warning_label)

        self.start_button = QPushButton(START_BUTTON, self)
        self.start_button.setStyleSheet(Styles.get_primary_button_style(self.theme))
        self.start_button.clicked.connect(self._handle_start_click)
        layout.addWidget(self.start_button)
        layout.addStretch(1)

    def set_exam(self, exam: Exam) -> None:
        self.title_label.setText(exam.title)
        self.description_label.setText(exam.description)
        self.description_label.setVisible(bool(exam.description))
        self.instructions_label.setText(
            INSTRUCTIONS_TEXT.format(
                question_count=exam.question_count,
                total_marks=exam.total_marks,
                duration=exam.duration_minutes,
            )
        )

    def _handle_start_click(self) -> None:
        roll_number = self.roll_number_input.text().strip()
        phone = self.phone_input.text().strip()
        if not roll_number or not phone:
            show_warning(self, REQUIRED_INFO_TITLE, REQUIRED_INFO_MESSAGE)
            return
        self.on_start(roll_number, phone)
