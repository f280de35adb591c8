"""Application entry point for QuizRunner."""

from __future__ import annotations

import sys

from PySide6 import QtAsyncio
from PySide6.QtWidgets import QApplication

from quiz_runner.constants.about import APP_NAME, APP_VERSION
from quiz_runner.constants.quiz_constants import SESSION_STORE_DIR
from quiz_runner.core.quiz_manager import QuizManager
from quiz_runner.core.services.session_store import FileSessionStore
from quiz_runner.ui.main_window import QuizMainWindow
from quiz_runner.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging and storage, then launch the Qt UI on an asyncio loop."""
    logger = configure_logging()
    logger.info("Starting %s v%s…", APP_NAME, APP_VERSION)

    store = FileSessionStore(SESSION_STORE_DIR)
    if store.is_available:
        logger.info("Saving progress to %s", SESSION_STORE_DIR)
    quiz_manager = QuizManager(store)

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    window = QuizMainWindow(quiz_manager=quiz_manager)
    window.show()
    QtAsyncio.run(window.check_for_resumable_session(), keep_running=True, quit_qapp=True)


if __name__ == "__main__":
    main()
