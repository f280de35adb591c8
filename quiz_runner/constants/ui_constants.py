"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "QuizRunner"
PLACEHOLDER_DOCUMENT: str = "Paste your quiz here (JSON or YAML), or open a file."

SETUP_LOAD_BUTTON: str = "Load Quiz"
SETUP_OPEN_FILE_BUTTON: str = "Open File…"
SETUP_JSON_TEMPLATE_BUTTON: str = "Insert JSON Template"
SETUP_YAML_TEMPLATE_BUTTON: str = "Insert YAML Template"
RESUME_TITLE: str = "Resume Previous Quiz?"
RESUME_TEMPLATE: str = "'{name}': {answered} of {total} answered, last saved {saved_at}."
RESUME_BUTTON: str = "Resume Quiz"
RESUME_DISCARD_BUTTON: str = "Discard"

SETTINGS_TITLE_TEMPLATE: str = "{name}"
SETTINGS_AUTHOR_TEMPLATE: str = "by {author}"
SETTINGS_COUNT_TEMPLATE: str = "{count} question(s)"
SETTINGS_RANDOM_ORDER: str = "Shuffle question order"
SETTINGS_START_BUTTON: str = "Start Quiz"

QUESTION_PREV_BUTTON: str = "Previous"
QUESTION_NEXT_BUTTON: str = "Next"
QUESTION_FINISH_BUTTON: str = "Finish"
QUESTION_QUIT_BUTTON: str = "Save && Quit"
QUESTION_POSITION_TEMPLATE: str = "Question {position} of {total}"
PROGRESS_TEMPLATE: str = "{answered}/{total} answered · {percent}%"

RESULTS_SCORE_TEMPLATE: str = "Score: {correct}/{total} ({percent}%)"
RESULTS_EXPORT_CSV_BUTTON: str = "Export CSV"
RESULTS_EXPORT_JSON_BUTTON: str = "Export JSON"
RESULTS_START_OVER_BUTTON: str = "Start Over"
RESULTS_BACK_BUTTON: str = "Back to Import"
RESULT_STATUS_CORRECT: str = "Correct"
RESULT_STATUS_INCORRECT: str = "Incorrect"
RESULT_STATUS_UNANSWERED: str = "Unanswered"

IMPORT_DIALOG_TITLE: str = "Open quiz file"
IMPORT_FILE_FILTER: str = "Quiz files (*.json *.yaml *.yml);;All files (*.*)"
EXPORT_DIALOG_TITLE: str = "Export results"
EXPORT_CSV_FILTER: str = "CSV files (*.csv)"
EXPORT_JSON_FILTER: str = "JSON files (*.json)"

ANSWER_REQUIRED_MESSAGE: str = "Please answer the current question before proceeding to the next one."
FINISH_CONFIRM_TEMPLATE: str = "You still have {count} unanswered question{suffix}. Finish anyway?"
