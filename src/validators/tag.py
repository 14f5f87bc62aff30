"""Tag name validation and normalization."""

import re
from collections.abc import Iterable, Sequence

from .errors import FieldError, TagValidationResult, ValidationErrorCode

TAG_FORMAT_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")

MAX_TAG_LENGTH = 30
MIN_TAGS_PER_SNIPPET = 1
MAX_TAGS_PER_SNIPPET = 5


def validate_tag_format(name: str) -> TagValidationResult:
    """
    Проверить формат одного тега (после trim).

    Правила:
    - Не пустой
    - Не длиннее 30 символов
    - Только буквы, цифры, дефис и подчёркивание

    Примеры:
        validate_tag_format(" react ").valid      # True
        validate_tag_format("c++").error.code     # TagInvalidChars
    """
    trimmed = trim_tag(name)

    if not trimmed:
        return TagValidationResult.fail(ValidationErrorCode.TAG_EMPTY, "Tag cannot be empty")

    if len(trimmed) > MAX_TAG_LENGTH:
        return TagValidationResult.fail(
            ValidationErrorCode.TAG_TOO_LONG,
            f"Tag must be {MAX_TAG_LENGTH} characters or less",
        )

    if not TAG_FORMAT_PATTERN.fullmatch(trimmed):
        return TagValidationResult.fail(
            ValidationErrorCode.TAG_INVALID_CHARS,
            "Tags can only contain letters, numbers, hyphens, and underscores",
        )

    return TagValidationResult.ok()


def trim_tag(name: str) -> str:
    return name.strip()


def normalize_tag_name(name: str) -> str:
    """Trim + lowercase. " JavaScript " -> "javascript"."""
    return name.strip().lower()


def validate_tag_count(count: int) -> TagValidationResult:
    """Количество тегов у сниппета: от 1 до 5."""
    if count < MIN_TAGS_PER_SNIPPET:
        return TagValidationResult.fail(
            ValidationErrorCode.TOO_FEW_TAGS, "At least one tag is required"
        )

    if count > MAX_TAGS_PER_SNIPPET:
        return TagValidationResult.fail(
            ValidationErrorCode.TOO_MANY_TAGS,
            f"Maximum {MAX_TAGS_PER_SNIPPET} tags per snippet",
        )

    return TagValidationResult.ok()


def is_duplicate_tag(candidate: str, existing: Iterable[str]) -> bool:
    """Есть ли тег в списке без учёта регистра и пробелов по краям."""
    normalized = normalize_tag_name(candidate)
    return any(normalize_tag_name(tag) == normalized for tag in existing)


def unique_tag_names(names: Iterable[str]) -> list[str]:
    """
    Нормализовать и убрать дубликаты, сохраняя порядок первого вхождения.

    Пример:
        unique_tag_names(["JS", "js", " Python "])  # ["js", "python"]
    """
    return list(dict.fromkeys(normalize_tag_name(name) for name in names))


def validate_tag_formats(tags: Iterable[str]) -> list[FieldError]:
    """
    Формат каждого тега; в сообщении указан сам тег ("'c++': Tags can only ...").

    Returns:
        Список ошибок (пустой - всё в порядке)
    """
    errors = []
    for tag in tags:
        result = validate_tag_format(tag)
        if not result.valid:
            errors.append(
                FieldError(result.error.field, result.error.code, f"'{tag}': {result.error.message}")
            )
    return errors


def validate_tag_list(tags: Sequence[str]) -> list[FieldError]:
    """
    Проверка набора тегов из формы: количество (1..5) и формат каждого тега.

    Returns:
        Список ошибок (пустой - всё в порядке)
    """
    errors = []

    count = validate_tag_count(len(tags))
    if not count.valid:
        errors.append(count.error)

    return errors + validate_tag_formats(tags)
