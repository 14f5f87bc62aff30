"""
Validation and normalization for snippet fields.

Все функции чистые: не трогают БД и не бросают исключений.
Возвращают FieldError (или список FieldError), либо None если всё в порядке.
"""

from collections.abc import Sequence

from ..models.language import Language, UnsupportedLanguageError
from .errors import FieldError, ValidationErrorCode

MAX_TITLE_LENGTH = 100
MAX_CONTENT_LENGTH = 50_000


def validate_title(title: str | None) -> FieldError | None:
    """
    Проверить заголовок сниппета.

    Правила:
    1. Обязателен (None или "" -> TitleRequired)
    2. Не только пробелы (TitleBlank)
    3. Не длиннее 100 символов (TitleTooLong)
    """
    if not title:
        return FieldError("title", ValidationErrorCode.TITLE_REQUIRED, "Title is required")

    if not title.strip():
        return FieldError(
            "title",
            ValidationErrorCode.TITLE_BLANK,
            "Title cannot be empty or whitespace only",
        )

    if len(title) > MAX_TITLE_LENGTH:
        return FieldError(
            "title",
            ValidationErrorCode.TITLE_TOO_LONG,
            f"Title must be {MAX_TITLE_LENGTH} characters or less",
        )

    return None


def validate_content(content: str | None) -> FieldError | None:
    """Проверить код сниппета: обязателен, не пустой, не длиннее 50 000 символов."""
    if not content:
        return FieldError(
            "content", ValidationErrorCode.CONTENT_REQUIRED, "Code content is required"
        )

    if not content.strip():
        return FieldError(
            "content",
            ValidationErrorCode.CONTENT_BLANK,
            "Code content cannot be empty or whitespace only",
        )

    if len(content) > MAX_CONTENT_LENGTH:
        return FieldError(
            "content",
            ValidationErrorCode.CONTENT_TOO_LONG,
            f"Code content must be {MAX_CONTENT_LENGTH:,} characters or less",
        )

    return None


def validate_language(language: str | None) -> FieldError | None:
    """
    Проверить язык по закрытому списку Language (без учёта регистра).

    Пример:
        validate_language("Python")  # None
        validate_language("cobol")   # FieldError(LanguageUnsupported)
    """
    if language is None or not str(language).strip():
        return FieldError(
            "language",
            ValidationErrorCode.LANGUAGE_REQUIRED,
            "Language selection is required",
        )

    try:
        Language.parse(language)
    except UnsupportedLanguageError:
        return FieldError(
            "language",
            ValidationErrorCode.LANGUAGE_UNSUPPORTED,
            "Choose a language from the supported list",
        )

    return None


def validate_tags(tags: Sequence[str] | None) -> FieldError | None:
    """
    Проверить, что указан хотя бы один тег.

    Верхняя граница (5 тегов) проверяется отдельно в validate_tag_count
    на уровне формы/API.
    """
    if not tags:
        return FieldError("tags", ValidationErrorCode.TAGS_REQUIRED, "At least one tag is required")
    return None


def validate_snippet_data(
    title: str | None,
    content: str | None,
    language: str | None,
    tags: Sequence[str] | None,
) -> list[FieldError]:
    """
    Проверить все поля сниппета разом.

    Returns:
        Список ВСЕХ ошибок в порядке: title, content, language, tags.
        Пустой список - данные валидны.
    """
    checks = (
        validate_title(title),
        validate_content(content),
        validate_language(language),
        validate_tags(tags),
    )
    return [error for error in checks if error is not None]


def normalize_line_endings(content: str) -> str:
    """
    Привести переводы строк к LF.

    Сначала CRLF -> LF, потом оставшиеся CR -> LF.
    Повторное применение ничего не меняет.
    """
    return content.replace("\r\n", "\n").replace("\r", "\n")


def validate_snippet_update(
    title: str | None = None,
    content: str | None = None,
    language: str | None = None,
) -> list[FieldError]:
    """
    Проверить только переданные поля частичного обновления (None - поле не меняется).

    Теги здесь не проверяются: пустой список при обновлении допустим
    и означает "убрать все теги".
    """
    errors = []
    if title is not None:
        errors.append(validate_title(title))
    if content is not None:
        errors.append(validate_content(content))
    if language is not None:
        errors.append(validate_language(language))
    return [error for error in errors if error is not None]
