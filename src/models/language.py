"""Supported snippet languages."""

import enum


class UnsupportedLanguageError(ValueError):
    """Language id is not in the supported set."""

    def __init__(self, language: str | None):
        self.language = language
        super().__init__(f"Unsupported language identifier: {language}")


class Language(str, enum.Enum):
    """
    Закрытый набор языков сниппетов.

    Значение (value) - это id языка, который хранится в БД и
    приходит от клиента: "javascript", "c-sharp", "shell-bash".
    """

    C_SHARP = "c-sharp"
    C_PLUS_PLUS = "c-plus-plus"
    CSS = "css"
    GO = "go"
    HTML = "html"
    JAVA = "java"
    JAVASCRIPT = "javascript"
    JSON = "json"
    KOTLIN = "kotlin"
    MARKDOWN = "markdown"
    OTHER = "other"
    PHP = "php"
    POWERSHELL = "powershell"
    PYTHON = "python"
    RUBY = "ruby"
    RUST = "rust"
    SHELL_BASH = "shell-bash"
    SQL = "sql"
    SWIFT = "swift"
    TYPESCRIPT = "typescript"
    YAML = "yaml"

    @property
    def label(self) -> str:
        """Название для отображения в UI (C#, Shell/Bash, ...)."""
        return LANGUAGE_LABELS[self]

    @classmethod
    def parse(cls, raw: "str | Language | None") -> "Language":
        """
        Разобрать id языка без учёта регистра.

        Args:
            raw: Значение от клиента ("Python", "JAVASCRIPT", Language.GO)

        Returns:
            Элемент Language

        Raises:
            UnsupportedLanguageError: Если такого языка нет

        Пример:
            Language.parse("TypeScript")  # Language.TYPESCRIPT
        """
        if isinstance(raw, cls):
            return raw
        if raw is None:
            raise UnsupportedLanguageError(raw)
        try:
            return cls(str(raw).lower())
        except ValueError:
            raise UnsupportedLanguageError(raw) from None

    @classmethod
    def ids(cls) -> list[str]:
        return [member.value for member in cls]


LANGUAGE_LABELS: dict[Language, str] = {
    Language.C_SHARP: "C#",
    Language.C_PLUS_PLUS: "C++",
    Language.CSS: "CSS",
    Language.GO: "Go",
    Language.HTML: "HTML",
    Language.JAVA: "Java",
    Language.JAVASCRIPT: "JavaScript",
    Language.JSON: "JSON",
    Language.KOTLIN: "Kotlin",
    Language.MARKDOWN: "Markdown",
    Language.OTHER: "Other",
    Language.PHP: "PHP",
    Language.POWERSHELL: "PowerShell",
    Language.PYTHON: "Python",
    Language.RUBY: "Ruby",
    Language.RUST: "Rust",
    Language.SHELL_BASH: "Shell/Bash",
    Language.SQL: "SQL",
    Language.SWIFT: "Swift",
    Language.TYPESCRIPT: "TypeScript",
    Language.YAML: "YAML",
}

# Отсортировано по названию - в таком порядке языки показываются в форме
LANGUAGE_OPTIONS: list[tuple[str, str]] = sorted(
    ((language.value, label) for language, label in LANGUAGE_LABELS.items()),
    key=lambda option: option[1].lower(),
)
