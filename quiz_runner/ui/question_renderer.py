"""Question rendering utilities for the quiz pages."""

from __future__ import annotations

from quiz_runner.core.markdown_math_renderer import renderer
from quiz_runner.core.models import Question


def render_question_page(
    question: Question,
    *,
    font_size: int = 14,
    text_color: str = "#000000",
    show_explanation: bool = False,
) -> str:
    """Render a question prompt (and optionally its explanation) as HTML.

    Args:
        question: Question to display; prompts support Markdown and LaTeX.
        font_size: Font size in points for the prompt.
        text_color: CSS color for the text, taken from the active theme.
        show_explanation: Append the explanation block when one exists.

    Returns:
        HTML string ready for display in QWebEngineView.
    """
    body = renderer.render_fragment(question.prompt)
    if show_explanation and question.explanation:
        body += f'<div class="explanation">{renderer.render_fragment(question.explanation)}</div>'
    return renderer.wrap_with_mathjax(
        body, title=question.id, font_size=font_size, text_color=text_color
    )
