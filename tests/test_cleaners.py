"""Tests for HTML cleaning."""

from mcp_browser_sessions.cleaners import approx_token_count, clean_html


def test_clean_html_removes_non_content():
    html = """
    <html>
        <head>
            <script>alert('test');</script>
            <style>.test { color: red; }</style>
            <link rel="stylesheet" href="/a.css">
            <link rel="canonical" href="https://example.com/">
            <meta charset="utf-8">
            <!-- This is a comment -->
        </head>
        <body>
            <h1 class="title">Hello World</h1>
            <svg><circle r="1"></circle></svg>
            <noscript>Enable JS</noscript>
        </body>
    </html>
    """

    result_html, counts = clean_html(html)

    assert counts == {"script": 1, "style": 1, "noise": 4, "comments": 1}
    assert "Hello World" in result_html
    assert "alert" not in result_html
    assert "stylesheet" not in result_html
    assert "canonical" in result_html
    assert "Enable JS" not in result_html


def test_whitespace_is_collapsed_outside_pre():
    html = "<div>a \n\n   b</div><pre>x\n    y</pre>"
    result_html, _ = clean_html(html)
    assert "<div>a b</div>" in result_html
    assert "x\n    y" in result_html


def test_whitespace_can_be_kept():
    html = "<p>a\n\n  b</p>"
    result_html, _ = clean_html(html, collapse_whitespace=False)
    assert result_html == html


def test_empty_input():
    result_html, counts = clean_html(None)
    assert result_html == ""
    assert sum(counts.values()) == 0


def test_approx_token_count():
    assert approx_token_count("") == 0
    assert approx_token_count("abcd" * 10) == 10
