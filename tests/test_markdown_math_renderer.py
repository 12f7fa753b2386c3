from __future__ import annotations

from exam_portal.core.markdown_math_renderer import MarkdownMathRenderer, renderer


def test_render_fragment_converts_markdown() -> None:
    html = renderer.render_fragment("What is **2 + 2**?")

    assert "<strong>2 + 2</strong>" in html


def test_render_fragment_placeholder_for_blank_text() -> None:
    assert "No content provided" in renderer.render_fragment("   ")


def test_raw_html_is_escaped_by_default() -> None:
    html = MarkdownMathRenderer().render_fragment("<script>alert(1)</script>")

    assert "<script>" not in html


def test_full_document_loads_mathjax_and_keeps_latex() -> None:
    document = renderer.render_full_document("Solve $x^2 = 4$", title="q1", font_size=18)

    assert "mathjax" in document.lower()
    assert "$x^2 = 4$" in document
    assert "font-size: 18pt" in document
    assert "<title>q1</title>" in document


def test_exam_page_blocks_copying_and_escapes_title() -> None:
    document = renderer.wrap_with_mathjax("<p>body</p>", title="<Quiz & Co>")

    assert "user-select: none" in document
    assert "contextmenu" in document
    assert "<title>&lt;Quiz &amp; Co&gt;</title>" in document
    assert "inlineMath: [['$', '$']]" in document
