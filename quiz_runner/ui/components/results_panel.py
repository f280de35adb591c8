"""Component for the score summary and per-question review."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from quiz_runner.constants.ui_constants import (
    RESULT_STATUS_CORRECT,
    RESULT_STATUS_INCORRECT,
    RESULT_STATUS_UNANSWERED,
    RESULTS_BACK_BUTTON,
    RESULTS_EXPORT_CSV_BUTTON,
    RESULTS_EXPORT_JSON_BUTTON,
    RESULTS_SCORE_TEMPLATE,
    RESULTS_START_OVER_BUTTON,
)
from quiz_runner.core.services.scoreboard import QuestionResult, ScoreSummary
from quiz_runner.styling.color_palette import ColorPalette, Theme
from quiz_runner.styling.styles import Styles

_COLUMNS = ("#", "Question", "Your answer", "Correct answer", "Result", "Explanation")


class ResultsPanel(QWidget):
    """Score line, review table and the export/restart buttons."""

    def __init__(
        self,
        on_export: Callable[[str], None],
        on_start_over: Callable[[], None],
        on_back: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_export = on_export
        self.on_start_over = on_start_over
        self.on_back = on_back
        self._theme = Theme.LIGHT
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.score_label = QLabel("", self)
        self.score_label.setAlignment(Qt.AlignCenter)
        self.score_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.score_label)

        self.results_table = QTableWidget(0, len(_COLUMNS), self)
        self.results_table.setHorizontalHeaderLabels(list(_COLUMNS))
        self.results_table.verticalHeader().setVisible(False)
        self.results_table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.results_table.setSelectionMode(QAbstractItemView.NoSelection)
        self.results_table.setWordWrap(True)
        header = self.results_table.horizontalHeader()
        header.setSectionResizeMode(QHeaderView.ResizeToContents)
        header.setSectionResizeMode(1, QHeaderView.Stretch)
        header.setSectionResizeMode(len(_COLUMNS) - 1, QHeaderView.Stretch)
        layout.addWidget(self.results_table, stretch=1)

        button_row = QHBoxLayout()
        self.export_csv_button = QPushButton(RESULTS_EXPORT_CSV_BUTTON, self)
        self.export_csv_button.clicked.connect(lambda: self.on_export("csv"))
        button_row.addWidget(self.export_csv_button)

        self.export_json_button = QPushButton(RESULTS_EXPORT_JSON_BUTTON, self)
        self.export_json_button.clicked.connect(lambda: self.on_export("json"))
        button_row.addWidget(self.export_json_button)

        button_row.addStretch()

        self.back_button = QPushButton(RESULTS_BACK_BUTTON, self)
        self.back_button.clicked.connect(self.on_back)
        button_row.addWidget(self.back_button)

        self.start_over_button = QPushButton(RESULTS_START_OVER_BUTTON, self)
        self.start_over_button.setDefault(True)
        self.start_over_button.clicked.connect(self.on_start_over)
        button_row.addWidget(self.start_over_button)

        layout.addLayout(button_row)

    def show_results(self, results: list[QuestionResult], summary: ScoreSummary) -> None:
        self.score_label.setText(
            RESULTS_SCORE_TEMPLATE.format(
                correct=summary.correct, total=summary.total, percent=summary.percent
            )
        )
        self.results_table.setRowCount(len(results))
        for row, result in enumerate(results):
            status, background = self._status_for(result)
            values = (
                str(result.question_number),
                result.question_text,
                result.user_answer_label,
                result.correct_answer_label,
                status,
                result.explanation or "",
            )
            for column, value in enumerate(values):
                item = QTableWidgetItem(value)
                item.setBackground(QColor(background))
                self.results_table.setItem(row, column, item)
        self.results_table.resizeRowsToContents()

    def _status_for(self, result: QuestionResult) -> tuple[str, str]:
        if not result.is_answered:
            return RESULT_STATUS_UNANSWERED, ColorPalette.NEUTRAL_BG.get(self._theme)
        if result.is_correct:
            return RESULT_STATUS_CORRECT, ColorPalette.SUCCESS_BG.get(self._theme)
        return RESULT_STATUS_INCORRECT, ColorPalette.ERROR_BG.get(self._theme)
