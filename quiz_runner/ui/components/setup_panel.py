"""Component for pasting, opening and resuming quizzes."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quiz_runner.constants.ui_constants import (
    PLACEHOLDER_DOCUMENT,
    RESUME_BUTTON,
    RESUME_DISCARD_BUTTON,
    RESUME_TEMPLATE,
    RESUME_TITLE,
    SETUP_JSON_TEMPLATE_BUTTON,
    SETUP_LOAD_BUTTON,
    SETUP_OPEN_FILE_BUTTON,
    SETUP_YAML_TEMPLATE_BUTTON,
)
from quiz_runner.core.quiz_templates import get_template
from quiz_runner.core.services.snapshot import PersistedSnapshot
from quiz_runner.styling.styles import Styles


class SetupPanel(QWidget):
    """UI component for the import page."""

    def __init__(
        self,
        on_load_text: Callable[[str], None],
        on_open_file: Callable[[], None],
        on_resume: Callable[[PersistedSnapshot], None],
        on_discard: Callable[[PersistedSnapshot], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_load_text = on_load_text
        self.on_open_file = on_open_file
        self.on_resume = on_resume
        self.on_discard = on_discard
        self._offered_snapshot: PersistedSnapshot | None = None

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self._build_resume_group(layout)

        self.document_edit = QPlainTextEdit(self)
        self.document_edit.setPlaceholderText(PLACEHOLDER_DOCUMENT)
        layout.addWidget(self.document_edit, stretch=1)

        self.error_label = QLabel("", self)
        self.error_label.setWordWrap(True)
        self.error_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        self.error_label.setStyleSheet(Styles.get_error_label_style())
        self.error_label.setVisible(False)
        layout.addWidget(self.error_label)

        button_row = QHBoxLayout()

        self.json_template_button = QPushButton(SETUP_JSON_TEMPLATE_BUTTON, self)
        self.json_template_button.clicked.connect(lambda: self._insert_template("json"))
        button_row.addWidget(self.json_template_button)

        self.yaml_template_button = QPushButton(SETUP_YAML_TEMPLATE_BUTTON, self)
        self.yaml_template_button.clicked.connect(lambda: self._insert_template("yaml"))
        button_row.addWidget(self.yaml_template_button)

        button_row.addStretch()

        self.open_file_button = QPushButton(SETUP_OPEN_FILE_BUTTON, self)
        self.open_file_button.clicked.connect(self.on_open_file)
        button_row.addWidget(self.open_file_button)

        self.load_button = QPushButton(SETUP_LOAD_BUTTON, self)
        self.load_button.setDefault(True)
        self.load_button.clicked.connect(self._handle_load)
        button_row.addWidget(self.load_button)

        layout.addLayout(button_row)

    def _build_resume_group(self, layout: QVBoxLayout) -> None:
        self.resume_group = QGroupBox(RESUME_TITLE, self)
        group_layout = QHBoxLayout()
        self.resume_group.setLayout(group_layout)

        self.resume_label = QLabel("", self.resume_group)
        self.resume_label.setWordWrap(True)
        group_layout.addWidget(self.resume_label, stretch=1)

        self.discard_button = QPushButton(RESUME_DISCARD_BUTTON, self.resume_group)
        self.discard_button.clicked.connect(self._handle_discard)
        group_layout.addWidget(self.discard_button)

        self.resume_button = QPushButton(RESUME_BUTTON, self.resume_group)
        self.resume_button.clicked.connect(self._handle_resume)
        group_layout.addWidget(self.resume_button)

        self.resume_group.setVisible(False)
        layout.addWidget(self.resume_group)

    # --- Public API used by the main window ---

    def show_error(self, message: str) -> None:
        self.error_label.setText(message)
        self.error_label.setVisible(True)

    def clear_error(self) -> None:
        self.error_label.clear()
        self.error_label.setVisible(False)

    def document_text(self) -> str:
        return self.document_edit.toPlainText()

    def offer_resume(self, snapshot: PersistedSnapshot) -> None:
        """Show the resume prompt for ``snapshot``."""
        questions = max(len(snapshot.document) - 1, 0)
        total = len(snapshot.active_order) or questions
        name = snapshot.document[0].get("metadata", {}).get("name", "") if snapshot.document else ""
        self.resume_label.setText(
            RESUME_TEMPLATE.format(
                name=name,
                answered=len(snapshot.answers),
                total=total,
                saved_at=snapshot.timestamp.astimezone().strftime("%Y-%m-%d %H:%M"),
            )
        )
        self._offered_snapshot = snapshot
        self.resume_group.setVisible(True)

    def hide_resume(self) -> None:
        self._offered_snapshot = None
        self.resume_group.setVisible(False)

    # --- Handlers ---

    def _insert_template(self, kind: str) -> None:
        self.document_edit.setPlainText(get_template(kind))
        self.clear_error()

    def _handle_load(self) -> None:
        self.clear_error()
        self.on_load_text(self.document_text())

    def _handle_resume(self) -> None:
        if self._offered_snapshot is not None:
            self.on_resume(self._offered_snapshot)

    def _handle_discard(self) -> None:
        if self._offered_snapshot is not None:
            self.on_discard(self._offered_snapshot)
