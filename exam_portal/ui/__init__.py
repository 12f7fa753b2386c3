"""Qt UI components for the student exam client."""

from .dialog_helpers import (
    confirm_leave_exam,
    confirm_submit_exam,
    show_error,
    show_violation_warning,
    show_warning,
)
from .exam_window import ExamWindow
from .qt_bridge import QtClock, WindowSignalSource
from .question_renderer import render_option_label, render_question

__all__ = [
    "ExamWindow",
    "QtClock",
    "WindowSignalSource",
    "confirm_leave_exam",
    "confirm_submit_exam",
    "show_error",
    "show_violation_warning",
    "show_warning",
    "render_option_label",
    "render_question",
]
