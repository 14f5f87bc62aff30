"""
Тесты для подсветки синтаксиса (Pygments).

Проверяем:
- Сопоставление id языков и сокращений с лексерами
- Фолбэк на экранированный <pre><code> (никогда не падает)
- Темы
"""

import pytest

from src.integrations.highlight import THEMES, highlight, plain_html, resolve_lexer_name
from src.models import Language


@pytest.mark.parametrize(
    "language, lexer",
    [
        ("c-sharp", "csharp"),
        ("c-plus-plus", "cpp"),
        ("shell-bash", "bash"),
        (" JS ", "javascript"),
        ("yml", "yaml"),
        ("other", "text"),
        ("python", "python"),
    ],
)
def test_resolve_lexer_name(language, lexer):
    """Test: id языков и частые сокращения -> имя лексера Pygments."""
    assert resolve_lexer_name(language) == lexer


@pytest.mark.parametrize("language", [language.value for language in Language])
def test_every_supported_language_highlights(language):
    """Test: для каждого поддерживаемого языка возвращается HTML."""
    html = highlight("x = 1", language)

    assert "x" in html
    assert html.strip()


def test_highlight_python_uses_inline_styles():
    """Test: подсветка с inline-стилями, без внешнего CSS."""
    html = highlight("def foo():\n    return 1\n", "python", theme="light")

    assert 'class="highlight"' in html
    assert "style=" in html
    assert "foo" in html


def test_highlight_unknown_language_falls_back_to_escaped_text():
    """Test: неизвестный язык - экранированный код без подсветки."""
    html = highlight("<script>alert(1)</script>", "brainfuck-9000")

    assert html == plain_html("<script>alert(1)</script>")
    assert "&lt;script&gt;" in html
    assert "<script>" not in html


def test_highlight_escapes_html_in_code():
    """Test: HTML внутри кода экранируется и при подсветке."""
    html = highlight("<b>bold</b>", "html")

    assert "<b>bold</b>" not in html


def test_highlight_never_raises_on_pygments_failure(monkeypatch):
    """Test: ошибка внутри Pygments - фолбэк, а не исключение."""
    from src.integrations.highlight import highlighter

    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(highlighter, "pygments_highlight", broken)

    assert highlight("a < b", "python") == "<pre><code>a &lt; b</code></pre>"


def test_highlight_themes():
    """Test: обе темы работают, другие - ValueError."""
    assert THEMES == ("dark", "light")
    assert highlight("x", "python", theme="dark")
    assert highlight("x", "python", theme="light")

    with pytest.raises(ValueError, match="Theme"):
        highlight("x", "python", theme="solarized")
