"""Markdown + LaTeX rendering for exam questions.

Question text is converted to HTML with markdown-it and formulas are typeset
by MathJax when the page is displayed, so exam files can keep plain ``$...$``
markup. The generated page disables text selection and the context menu so
question text cannot be copied out of the kiosk window.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import html
from string import Template

from markdown_it import MarkdownIt

MATHJAX_URL = "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
EMPTY_QUESTION_HTML = "<p><em>No content provided.</em></p>"

_PAGE = Template(
    """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>$title</title>
    <style>
      body { font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem;
             color: $color; user-select: none; -webkit-user-select: none; }
      .question { font-size: ${font_size}pt; line-height: 1.5; }
      .question img { max-width: 100%; border-radius: 0.5rem; margin-top: 0.75rem; }
    </style>
    <script>
      window.MathJax = { tex: { inlineMath: [['$$', '$$']], displayMath: [['$$$$', '$$$$']] } };
      document.addEventListener('contextmenu', (event) => event.preventDefault());
    </script>
    <script defer src="$mathjax_url"></script>
  </head>
  <body>
    <div class="question">$body</div>
  </body>
</html>"""
)


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Turns exam markdown into HTML fragments or complete exam pages."""

    enable_html: bool = False
    text_color: str = "#1f2933"
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = MarkdownIt("commonmark", {"html": self.enable_html}).enable("table")

    def render_fragment(self, markdown_text: str) -> str:
        text = markdown_text.strip()
        if not text:
            return EMPTY_QUESTION_HTML
        return self._markdown.render(text)

    def wrap_with_mathjax(self, body_html: str, title: str = "Exam Portal", font_size: int = 14) -> str:
        """Embed a rendered fragment in a standalone page that loads MathJax.

        Args:
            body_html: Fragment produced by :meth:`render_fragment`
            title: Page title, HTML-escaped before insertion
            font_size: Question text size in points

        Returns:
            The full HTML document as a string
        """
        return _PAGE.substitute(
            title=html.escape(title),
            color=self.text_color,
            font_size=font_size,
            mathjax_url=MATHJAX_URL,
            body=body_html,
        )

    def render_full_document(
        self,
        markdown_text: str,
        title: str = "Exam Portal",
        font_size: int = 14,
    ) -> str:
        fragment = self.render_fragment(markdown_text)
        return self.wrap_with_mathjax(fragment, title=title, font_size=font_size)


renderer = MarkdownMathRenderer()
