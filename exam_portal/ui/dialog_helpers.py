"""Message boxes shown while a student takes an exam."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QMessageBox, QWidget

from exam_portal.constants.ui_constants import (
    LEAVE_CONFIRM_MESSAGE,
    LEAVE_CONFIRM_TITLE,
    SUBMIT_CONFIRM_MESSAGE,
    SUBMIT_CONFIRM_TITLE,
    WARNING_MESSAGE,
    WARNING_TITLE_TEMPLATE,
)


def _ask_yes_no(parent: QWidget, title: str, message: str) -> bool:
    # "No" is the default so a stray Enter never ends the attempt.
    reply = QMessageBox.question(
        parent,
        title,
        message,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def confirm_leave_exam(parent: QWidget) -> bool:
    """Ask whether the student really wants to close the exam window."""
    return _ask_yes_no(parent, LEAVE_CONFIRM_TITLE, LEAVE_CONFIRM_MESSAGE)


def confirm_submit_exam(parent: QWidget, unanswered_count: int) -> bool:
    """Ask for confirmation before a manual submission with open questions.

    Args:
        parent: Parent widget for the dialog
        unanswered_count: Number of questions without a selection

    Returns:
        True if the student confirmed, False otherwise
    """
    return _ask_yes_no(
        parent,
        SUBMIT_CONFIRM_TITLE,
        SUBMIT_CONFIRM_MESSAGE.format(unanswered=unanswered_count),
    )


def show_violation_warning(parent: QWidget, count: int, limit: int) -> QMessageBox:
    """Open the integrity warning without blocking the event loop.

    The box is modeless so the countdown and further integrity signals keep
    being processed while it is visible.
    """
    box = QMessageBox(parent)
    box.setIcon(QMessageBox.Warning)
    box.setWindowTitle(WARNING_TITLE_TEMPLATE.format(count=count, limit=limit))
    box.setText(WARNING_MESSAGE.format(limit=limit))
    box.setStandardButtons(QMessageBox.Ok)
    box.setAttribute(Qt.WA_DeleteOnClose)
    box.setModal(False)
    box.show()
    return box


def show_error(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.critical(parent, title, message)


def show_warning(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)
