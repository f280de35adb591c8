"""Helper functions for common dialog patterns in the quiz UI."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget

from quiz_runner.constants.ui_constants import FINISH_CONFIRM_TEMPLATE


def confirm_finish_with_unanswered(parent: QWidget, unanswered: int) -> bool:
    """Ask before finishing while some questions are still unanswered.

    Args:
        parent: Parent widget for the dialog
        unanswered: Number of questions without an answer

    Returns:
        True if user confirmed, False otherwise
    """
    reply = QMessageBox.question(
        parent,
        "Finish Quiz",
        FINISH_CONFIRM_TEMPLATE.format(count=unanswered, suffix="" if unanswered == 1 else "s"),
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def confirm_discard_saved_quiz(parent: QWidget) -> bool:
    """Ask before deleting the saved progress offered on the resume prompt."""
    reply = QMessageBox.question(
        parent,
        "Discard Saved Quiz",
        "Your saved progress will be deleted. Continue?",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def show_error(parent: QWidget, title: str, message: str) -> None:
    """Show error dialog.

    Args:
        parent: Parent widget for the dialog
        title: Dialog title
        message: Error message
    """
    QMessageBox.critical(parent, title, message)


def show_info(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.information(parent, title, message)


def show_warning(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)
