"""Static metadata describing QuizRunner."""

APP_NAME = "QuizRunner"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "QuizRunner is a single-user desktop quiz player built with Qt. "
    "Load a quiz written in JSON or YAML, answer one question per page, "
    "pick up where you left off after closing the app, and export your results."
)

HELP_TEXT = (
    "Paste or open a quiz document. The first entry holds the quiz metadata, every "
    "following entry is a question of type 'mc' (multiple choice) or 'tf' (true/false):\n\n"
    "- metadata:\n"
    "    name: Sample quiz\n"
    "    author: Jane Doe\n"
    "- id: q1\n"
    "  type: mc\n"
    "  prompt: What is $2 + 2$?\n"
    "  options: [\"3\", \"4\", \"5\"]\n"
    "  answer: 1\n"
    "- id: q2\n"
    "  type: tf\n"
    "  prompt: The sky is green.\n"
    "  answer: false\n\n"
    "Prompts support Markdown and LaTeX. Progress is saved automatically; an unfinished "
    "quiz can be resumed for up to seven days."
)
