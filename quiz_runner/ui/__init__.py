"""Qt UI components for the quiz runner."""

from .dialog_helpers import (
    confirm_discard_saved_quiz,
    confirm_finish_with_unanswered,
    show_error,
    show_info,
    show_warning,
)
from .main_window import QuizMainWindow
from .question_renderer import render_question_page

__all__ = [
    "QuizMainWindow",
    "confirm_discard_saved_quiz",
    "confirm_finish_with_unanswered",
    "show_error",
    "show_info",
    "show_warning",
    "render_question_page",
]
