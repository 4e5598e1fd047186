from __future__ import annotations

"""HTML extraction tests."""

from src.web.html import extract_html


def test_missing_title_falls_back_to_url() -> None:
    page = extract_html("<html><body>No title here</body></html>", "https://x.test/a")

    assert page.title == "https://x.test/a"
    assert page.text == "No title here"


def test_blank_title_falls_back_to_url() -> None:
    page = extract_html("<html><head><title>  </title></head><body>Hi</body></html>", "https://x.test/b")

    assert page.title == "https://x.test/b"


def test_first_title_is_used() -> None:
    html = (
        "<html><head><title>First\n Page</title></head>"
        "<body><title>Second</title><p>Body</p></body></html>"
    )

    page = extract_html(html, "https://x.test/c")

    assert page.title == "First Page"


def test_links_keep_text_and_drop_href() -> None:
    html = '<body><p>Read the <a href="https://docs.test/guide">guide</a> first.</p></body>'

    page = extract_html(html, "https://x.test/d")

    assert "guide" in page.text
    assert "docs.test" not in page.text


def test_whitespace_is_collapsed_and_scripts_dropped() -> None:
    html = (
        "<html><head><style>p { color: red; }</style></head><body>\n"
        "  <h1>Quantum</h1>\r\n\n<p>computing\tuses   qubits.</p>"
        "<script>var tracking = true;</script></body></html>"
    )

    page = extract_html(html, "https://x.test/e")

    assert page.text == "Quantum computing uses qubits."


def test_malformed_markup_does_not_raise() -> None:
    page = extract_html("<div><p>unclosed <b>bold <i>text</div></p", "https://x.test/f")

    assert "unclosed" in page.text
    assert page.title == "https://x.test/f"
