"""Markdown + LaTeX rendering for prompts, options and explanations.

Prompts are converted to HTML with markdown-it and typeset by MathJax when
the page is shown in a ``QWebEngineView``. Raw HTML in quiz documents is
not passed through, so an imported file cannot inject markup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import html

from markdown_it import MarkdownIt

_MATHJAX_SCRIPT = (
    "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
)


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments or full documents."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def wrap_with_mathjax(
        self,
        body_html: str,
        *,
        title: str = "QuizRunner",
        font_size: int = 14,
        text_color: str = "#000000",
    ) -> str:
        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{html.escape(title)}</title>
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; background: transparent; color: {text_color}; }}
      .quiz-html {{ font-size: {font_size}pt; line-height: 1.5; }}
      .explanation {{ margin-top: 1rem; padding: 0.5rem 0.75rem; border-left: 3px solid #888; opacity: 0.85; }}
    </style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }}, svg: {{ fontCache: 'global' }} }};
    </script>
    <script defer src=\"{_MATHJAX_SCRIPT}\"></script>
  </head>
  <body>
    <div class=\"quiz-html\">{body_html}</div>
  </body>
</html>"""


# Shared instance; the Qt UI renders from a single thread.
renderer = MarkdownMathRenderer()
