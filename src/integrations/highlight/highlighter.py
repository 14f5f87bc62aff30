"""Syntax highlighting of snippet content (Pygments)."""

import html

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from ...core.logging import get_logger

logger = get_logger(__name__)

THEMES = ("dark", "light")

# Тема UI -> стиль Pygments (первый найденный)
THEME_STYLES: dict[str, tuple[str, ...]] = {
    "dark": ("github-dark", "monokai"),
    "light": ("default",),
}

# Id языков и частые сокращения -> имя лексера Pygments
LANGUAGE_ALIASES: dict[str, str] = {
    "c-sharp": "csharp",
    "c-plus-plus": "cpp",
    "shell-bash": "bash",
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "rb": "ruby",
    "sh": "bash",
    "shell": "bash",
    "c": "cpp",
    "c++": "cpp",
    "c#": "csharp",
    "cs": "csharp",
    "yml": "yaml",
    "md": "markdown",
    "ps1": "powershell",
    "other": "text",
    "text": "text",
    "plaintext": "text",
}


def resolve_lexer_name(language: str) -> str:
    """"JS " -> "javascript", "c-sharp" -> "csharp", "python" -> "python"."""
    normalized = language.strip().lower()
    return LANGUAGE_ALIASES.get(normalized, normalized)


def _style_for(theme: str) -> str:
    for style in THEME_STYLES[theme]:
        try:
            get_style_by_name(style)
            return style
        except ClassNotFound:
            continue
    return "default"


def plain_html(content: str) -> str:
    """Код без подсветки: экранированный <pre><code>."""
    return f"<pre><code>{html.escape(content)}</code></pre>"


def highlight(content: str, language: str, theme: str = "dark") -> str:
    """
    Подсветить код и вернуть HTML.

    Args:
        content: Код сниппета
        language: Id языка или сокращение ("python", "c-sharp", "js")
        theme: "dark" или "light"

    Returns:
        HTML с inline-стилями. Для неизвестного языка или при ошибке
        Pygments - экранированный <pre><code>, вызывающий код
        всегда получает что показать.

    Raises:
        ValueError: Если theme не "dark" и не "light"
    """
    if theme not in THEMES:
        raise ValueError(f'Theme must be "dark" or "light", got {theme!r}')

    lexer_name = resolve_lexer_name(language)
    try:
        lexer = get_lexer_by_name(lexer_name, stripnl=False)
    except ClassNotFound:
        logger.warning(
            "Language not supported by highlighter, falling back to plain text",
            extra={"language": language, "lexer": lexer_name},
        )
        return plain_html(content)

    try:
        formatter = HtmlFormatter(style=_style_for(theme), noclasses=True, cssclass="highlight")
        return pygments_highlight(content, lexer, formatter)
    except Exception:
        logger.warning(
            "Highlighting failed, falling back to plain text",
            extra={"language": language},
            exc_info=True,
        )
        return plain_html(content)
