"""Qt main window switching between the setup, settings, question and results pages."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Coroutine

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QProgressBar,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from quiz_runner.constants.about import (
    APP_ABOUT_TEXT,
    APP_LICENSE,
    APP_NAME,
    APP_VERSION,
    HELP_TEXT,
)
from quiz_runner.constants.ui_constants import (
    ANSWER_REQUIRED_MESSAGE,
    EXPORT_CSV_FILTER,
    EXPORT_DIALOG_TITLE,
    EXPORT_JSON_FILTER,
    IMPORT_DIALOG_TITLE,
    IMPORT_FILE_FILTER,
    PROGRESS_TEMPLATE,
    WINDOW_TITLE,
)
from quiz_runner.core.errors import QuizImportError
from quiz_runner.core.models import AnswerValue, QuizSettings, SessionPhase, SessionState
from quiz_runner.core.quiz_manager import QuizManager
from quiz_runner.core.services import game_session
from quiz_runner.core.services.snapshot import PersistedSnapshot
from quiz_runner.styling.styles import Styles
from quiz_runner.ui.components.question_panel import QuestionPanel
from quiz_runner.ui.components.results_panel import ResultsPanel
from quiz_runner.ui.components.settings_panel import SettingsPanel
from quiz_runner.ui.components.setup_panel import SetupPanel
from quiz_runner.ui.dialog_helpers import (
    confirm_discard_saved_quiz,
    confirm_finish_with_unanswered,
    show_error,
    show_info,
    show_warning,
)

logger = logging.getLogger(__name__)

_PHASE_PAGES = {
    SessionPhase.SETUP: 0,
    SessionPhase.SETTINGS: 1,
    SessionPhase.ACTIVE: 2,
    SessionPhase.RESULTS: 3,
}


class QuizMainWindow(QMainWindow):
    """Main Qt window; one stacked page per session phase."""

    def __init__(self, quiz_manager: QuizManager) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(900, 700)

        self.quiz_manager = quiz_manager
        self._phase: SessionPhase | None = None
        self._closing = False
        self._last_directory: Path = Path.home()
        self._tasks: set[asyncio.Future] = set()

        self._build_ui()
        self._apply_styles()
        self._unsubscribe = self.quiz_manager.subscribe(self._on_state_changed)
        self._on_state_changed(self.quiz_manager.state)

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self._build_header(root_layout)

        self.page_stack = QStackedWidget(self)
        self.setup_panel = SetupPanel(
            on_load_text=self._handle_load_text,
            on_open_file=self._handle_open_file,
            on_resume=self._handle_resume,
            on_discard=self._handle_discard,
            parent=self,
        )
        self.settings_panel = SettingsPanel(on_start=self._handle_start, parent=self)
        self.question_panel = QuestionPanel(
            on_answer=self._handle_answer,
            on_next=self._handle_next,
            on_previous=self.quiz_manager.retreat,
            on_finish=self._handle_finish,
            on_quit=self._handle_quit,
            parent=self,
        )
        self.results_panel = ResultsPanel(
            on_export=self._handle_export,
            on_start_over=lambda: self._run_async(self.quiz_manager.start_over()),
            on_back=self._handle_back_to_import,
            parent=self,
        )

        # Page order must match _PHASE_PAGES.
        self.page_stack.addWidget(self.setup_panel)
        self.page_stack.addWidget(self.settings_panel)
        self.page_stack.addWidget(self.question_panel)
        self.page_stack.addWidget(self.results_panel)
        root_layout.addWidget(self.page_stack, stretch=1)

    def _build_header(self, layout: QVBoxLayout) -> None:
        header_row = QHBoxLayout()

        self.progress_label = QLabel("", self)
        header_row.addWidget(self.progress_label)

        self.progress_bar = QProgressBar(self)
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setTextVisible(False)
        header_row.addWidget(self.progress_bar, stretch=1)

        self.about_button = QPushButton(f"About {APP_NAME}", self)
        self.about_button.clicked.connect(self._handle_about)
        header_row.addWidget(self.about_button)

        self.help_button = QPushButton("Help", self)
        self.help_button.clicked.connect(self._handle_help)
        header_row.addWidget(self.help_button)

        layout.addLayout(header_row)

    def _apply_styles(self) -> None:
        self.setStyleSheet(Styles.get_main_window_style())

    # --- State sync ---

    def _on_state_changed(self, state: SessionState) -> None:
        phase_changed = state.phase is not self._phase
        self._phase = state.phase
        self.page_stack.setCurrentIndex(_PHASE_PAGES[state.phase])
        self._update_header(state)

        if state.phase is SessionPhase.SETUP:
            self.question_panel.reset()
        elif state.phase is SessionPhase.SETTINGS and phase_changed:
            self.settings_panel.show_document(state.document, state.settings)
        elif state.phase is SessionPhase.ACTIVE:
            self.question_panel.show_state(state)
        elif state.phase is SessionPhase.RESULTS and phase_changed:
            self.results_panel.show_results(
                self.quiz_manager.get_results(), self.quiz_manager.get_summary()
            )

    def _update_header(self, state: SessionState) -> None:
        visible = state.phase is SessionPhase.ACTIVE
        self.progress_label.setVisible(visible)
        self.progress_bar.setVisible(visible)
        if not visible:
            return
        percent = game_session.progress_percent(state)
        self.progress_label.setText(
            PROGRESS_TEMPLATE.format(
                answered=game_session.answered_count(state),
                total=len(state.active_order),
                percent=percent,
            )
        )
        self.progress_bar.setValue(percent)

    # --- Setup page ---

    async def check_for_resumable_session(self) -> None:
        """Offer the most recent unfinished quiz on the setup page, if any."""
        snapshot = await self.quiz_manager.find_resumable_session()
        if snapshot is None:
            self.setup_panel.hide_resume()
            return
        if self.quiz_manager.state.phase is SessionPhase.SETUP:
            self.setup_panel.offer_resume(snapshot)

    def _handle_load_text(self, text: str) -> None:
        try:
            self.quiz_manager.load_quiz_from_text(text)
        except QuizImportError as exc:
            self.setup_panel.show_error(str(exc))
            return
        self.setup_panel.hide_resume()

    def _handle_open_file(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(
            self, IMPORT_DIALOG_TITLE, str(self._last_directory), IMPORT_FILE_FILTER
        )
        if not file_path:
            return
        path = Path(file_path)
        self._last_directory = path.parent
        try:
            self.quiz_manager.load_quiz_from_file(path)
        except QuizImportError as exc:
            self.setup_panel.show_error(str(exc))
            return
        self.setup_panel.clear_error()
        self.setup_panel.hide_resume()

    def _handle_resume(self, snapshot: PersistedSnapshot) -> None:
        try:
            self.quiz_manager.resume(snapshot)
        except QuizImportError as exc:
            logger.warning("Saved session %s cannot be restored: %s", snapshot.session_id, exc)
            show_error(self, "Resume Failed", f"The saved quiz could not be restored.\n\n{exc}")
            return
        self.setup_panel.hide_resume()

    def _handle_discard(self, snapshot: PersistedSnapshot) -> None:
        if not confirm_discard_saved_quiz(self):
            return
        self.setup_panel.hide_resume()
        self._run_async(self.quiz_manager.discard_session(snapshot.session_id))

    # --- Settings and question pages ---

    def _handle_start(self, settings: QuizSettings) -> None:
        self.quiz_manager.start_quiz(settings)

    def _handle_answer(self, question_id: str, value: AnswerValue) -> None:
        self.quiz_manager.answer(question_id, value)

    def _handle_next(self) -> None:
        if not self.quiz_manager.advance():
            show_warning(self, "Answer Required", ANSWER_REQUIRED_MESSAGE)

    def _handle_finish(self) -> None:
        self.quiz_manager.finish(
            confirm=lambda unanswered: confirm_finish_with_unanswered(self, unanswered)
        )

    def _handle_quit(self) -> None:
        self._run_async(self._quit_to_setup())

    async def _quit_to_setup(self) -> None:
        await self.quiz_manager.quit()
        await self.check_for_resumable_session()

    # --- Results page ---

    def _handle_export(self, fmt: str) -> None:
        suggested = self._last_directory / self.quiz_manager.suggested_export_filename(fmt)
        file_filter = EXPORT_CSV_FILTER if fmt == "csv" else EXPORT_JSON_FILTER
        file_path, _ = QFileDialog.getSaveFileName(
            self, EXPORT_DIALOG_TITLE, str(suggested), file_filter
        )
        if not file_path:
            return
        path = Path(file_path)
        try:
            self.quiz_manager.export_results(path, fmt)
        except OSError as exc:
            show_error(self, "Export Failed", f"Could not write results to {path}:\n{exc}")
            return
        self._last_directory = path.parent
        show_info(self, "Export Complete", f"Results saved to:\n{path}")

    def _handle_back_to_import(self) -> None:
        self._run_async(self._restart_to_setup())

    async def _restart_to_setup(self) -> None:
        await self.quiz_manager.restart()
        self.setup_panel.clear_error()
        await self.check_for_resumable_session()

    # --- Misc ---

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"About {APP_NAME}", details)

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT)

    def _run_async(self, coroutine: Coroutine) -> None:
        task = asyncio.ensure_future(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Future) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background task failed", exc_info=task.exception())

    def closeEvent(self, event: QCloseEvent) -> None:
        if self._closing or self.quiz_manager.state.phase is not SessionPhase.ACTIVE:
            self._unsubscribe()
            event.accept()
            return
        # Save the running quiz before the window goes away.
        event.ignore()
        self._closing = True
        self._run_async(self._quit_and_close())

    async def _quit_and_close(self) -> None:
        await self.quiz_manager.quit()
        self.close()
