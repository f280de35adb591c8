"""Component showing the loaded quiz and the pre-start options."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quiz_runner.constants.ui_constants import (
    SETTINGS_AUTHOR_TEMPLATE,
    SETTINGS_COUNT_TEMPLATE,
    SETTINGS_RANDOM_ORDER,
    SETTINGS_START_BUTTON,
    SETTINGS_TITLE_TEMPLATE,
)
from quiz_runner.core.models import QuizDocument, QuizSettings
from quiz_runner.styling.styles import Styles


class SettingsPanel(QWidget):
    """Quiz summary with the random-order switch and the start button."""

    def __init__(
        self,
        on_start: Callable[[QuizSettings], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_start = on_start
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)
        layout.addStretch()

        self.title_label = QLabel("", self)
        self.title_label.setAlignment(Qt.AlignCenter)
        self.title_label.setWordWrap(True)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.title_label)

        self.author_label = QLabel("", self)
        self.author_label.setAlignment(Qt.AlignCenter)
        self.author_label.setStyleSheet(Styles.get_secondary_label_style())
        layout.addWidget(self.author_label)

        self.count_label = QLabel("", self)
        self.count_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.count_label)

        self.random_order_checkbox = QCheckBox(SETTINGS_RANDOM_ORDER, self)
        layout.addWidget(self.random_order_checkbox, alignment=Qt.AlignCenter)

        layout.addStretch()

        button_row = QHBoxLayout()
        button_row.addStretch()

        self.start_button = QPushButton(SETTINGS_START_BUTTON, self)
        self.start_button.setDefault(True)
        self.start_button.clicked.connect(self._handle_start)
        button_row.addWidget(self.start_button)
        layout.addLayout(button_row)

    def show_document(self, document: QuizDocument, settings: QuizSettings) -> None:
        self.title_label.setText(SETTINGS_TITLE_TEMPLATE.format(name=document.metadata.name))
        author = document.metadata.author
        self.author_label.setText(SETTINGS_AUTHOR_TEMPLATE.format(author=author) if author else "")
        self.author_label.setVisible(bool(author))
        self.count_label.setText(SETTINGS_COUNT_TEMPLATE.format(count=len(document.questions)))
        self.random_order_checkbox.setChecked(settings.random_order)

    def _handle_start(self) -> None:
        self.on_start(QuizSettings(random_order=self.random_order_checkbox.isChecked()))
