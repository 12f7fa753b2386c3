"""Question rendering utilities for the exam window."""

from __future__ import annotations

from exam_portal.core.markdown_math_renderer import MarkdownMathRenderer, renderer
from exam_portal.core.models import ExamQuestion


def render_question(
    question: ExamQuestion,
    font_size: int = 14,
    text_color: str | None = None,
) -> str:
    """Render a question's text (and image, if any) as an HTML document.

    Args:
        question: The question to display (text supports Markdown and LaTeX)
        font_size: Font size in points for the question text (default 14)
        text_color: CSS color for the text; the shared renderer default when None

    Returns:
        HTML string ready for display in QWebEngineView
    """
    markdown_lines = [question.text.strip() or "(No question text)"]
    if question.image_url:
        markdown_lines.append(f"![Question image]({question.image_url})")
    markdown = "\n\n".join(markdown_lines)
    page_renderer = renderer if text_color is None else MarkdownMathRenderer(text_color=text_color)
    return page_renderer.render_full_document(markdown, title=question.id, font_size=font_size)


def render_option_label(index: int, text: str) -> str:
    letter = chr(ord("A") + index)
    return f"{letter}. {text or '(empty)'}"
