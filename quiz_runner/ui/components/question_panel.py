"""Component for answering one question at a time."""

from __future__ import annotations

from typing import Callable

from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QButtonGroup,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QRadioButton,
    QVBoxLayout,
    QWidget,
)

from quiz_runner.constants.quiz_constants import FALSE_LABEL, TRUE_LABEL
from quiz_runner.constants.ui_constants import (
    QUESTION_FINISH_BUTTON,
    QUESTION_NEXT_BUTTON,
    QUESTION_POSITION_TEMPLATE,
    QUESTION_PREV_BUTTON,
    QUESTION_QUIT_BUTTON,
)
from quiz_runner.core.models import AnswerValue, MCQuestion, Question, SessionState
from quiz_runner.core.services import game_session
from quiz_runner.styling.styles import Styles
from quiz_runner.ui.question_renderer import render_question_page

# Button ids for the true/false pair; bool(id) is the recorded answer.
_TRUE_ID = 1
_FALSE_ID = 0


class QuestionPanel(QWidget):
    """Shows the current question and the navigation buttons."""

    def __init__(
        self,
        on_answer: Callable[[str, AnswerValue], None],
        on_next: Callable[[], None],
        on_previous: Callable[[], None],
        on_finish: Callable[[], None],
        on_quit: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_answer = on_answer
        self.on_next = on_next
        self.on_previous = on_previous
        self.on_finish = on_finish
        self.on_quit = on_quit

        self._game_font_size: int = 14
        self._shown_question: Question | None = None
        self._option_buttons: list[QRadioButton] = []

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.position_label = QLabel("", self)
        self.position_label.setStyleSheet(Styles.get_secondary_label_style())
        layout.addWidget(self.position_label)

        self.prompt_view = QWebEngineView(self)
        layout.addWidget(self.prompt_view, stretch=1)

        self.options_group = QGroupBox(self)
        self.options_layout = QVBoxLayout()
        self.options_group.setLayout(self.options_layout)
        layout.addWidget(self.options_group)

        self.button_group = QButtonGroup(self)
        self.button_group.setExclusive(True)
        self.button_group.idClicked.connect(self._handle_option_clicked)

        button_row = QHBoxLayout()
        self.quit_button = QPushButton(QUESTION_QUIT_BUTTON, self)
        self.quit_button.clicked.connect(self.on_quit)
        button_row.addWidget(self.quit_button)

        button_row.addStretch()

        self.previous_button = QPushButton(QUESTION_PREV_BUTTON, self)
        self.previous_button.clicked.connect(self.on_previous)
        button_row.addWidget(self.previous_button)

        self.next_button = QPushButton(QUESTION_NEXT_BUTTON, self)
        self.next_button.clicked.connect(self.on_next)
        button_row.addWidget(self.next_button)

        self.finish_button = QPushButton(QUESTION_FINISH_BUTTON, self)
        self.finish_button.clicked.connect(self.on_finish)
        button_row.addWidget(self.finish_button)

        layout.addLayout(button_row)

    def show_state(self, state: SessionState) -> None:
        """Sync the page with ``state``; the prompt only reloads when the question changes."""
        question = game_session.current_question(state)
        if question is None:
            return

        total = len(state.active_order)
        position = state.current_position
        self.position_label.setText(
            QUESTION_POSITION_TEMPLATE.format(position=position + 1, total=total)
        )

        if question is not self._shown_question:
            self._shown_question = question
            self._render_prompt(question)
            self._rebuild_options(question)
        self._check_answer(question, state.answers.get(question.id))

        is_last = position >= total - 1
        self.previous_button.setEnabled(position > 0)
        self.next_button.setVisible(not is_last)
        self.finish_button.setVisible(is_last)
        self.next_button.setDefault(not is_last)
        self.finish_button.setDefault(is_last)

    def reset(self) -> None:
        self._shown_question = None
        self._clear_options()
        self.prompt_view.setHtml("")

    def _render_prompt(self, question: Question) -> None:
        self.prompt_view.setHtml(render_question_page(question, font_size=self._game_font_size))

    def _rebuild_options(self, question: Question) -> None:
        self._clear_options()
        if isinstance(question, MCQuestion):
            choices = list(enumerate(question.options))
        else:
            choices = [(_TRUE_ID, TRUE_LABEL), (_FALSE_ID, FALSE_LABEL)]
        for button_id, text in choices:
            button = QRadioButton(text, self.options_group)
            self.button_group.addButton(button, button_id)
            self.options_layout.addWidget(button)
            self._option_buttons.append(button)

    def _clear_options(self) -> None:
        for button in self._option_buttons:
            self.button_group.removeButton(button)
            self.options_layout.removeWidget(button)
            button.deleteLater()
        self._option_buttons.clear()

    def _check_answer(self, question: Question, value: AnswerValue | None) -> None:
        if value is None:
            # An exclusive group refuses to uncheck its last button.
            self.button_group.setExclusive(False)
            for button in self._option_buttons:
                button.setChecked(False)
            self.button_group.setExclusive(True)
            return
        button_id = int(value) if isinstance(question, MCQuestion) else (_TRUE_ID if value else _FALSE_ID)
        button = self.button_group.button(button_id)
        if button is not None:
            button.setChecked(True)

    def _handle_option_clicked(self, button_id: int) -> None:
        question = self._shown_question
        if question is None:
            return
        value: AnswerValue = button_id if isinstance(question, MCQuestion) else button_id == _TRUE_ID
        self.on_answer(question.id, value)
