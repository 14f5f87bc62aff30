"""Validation error types shared by validators, services and the API."""

import enum
from dataclasses import dataclass


class ValidationErrorCode(str, enum.Enum):
    """Машинно-читаемые коды ошибок валидации."""

    TITLE_REQUIRED = "TitleRequired"
    TITLE_BLANK = "TitleBlank"
    TITLE_TOO_LONG = "TitleTooLong"
    CONTENT_REQUIRED = "ContentRequired"
    CONTENT_BLANK = "ContentBlank"
    CONTENT_TOO_LONG = "ContentTooLong"
    LANGUAGE_REQUIRED = "LanguageRequired"
    LANGUAGE_UNSUPPORTED = "LanguageUnsupported"
    TAGS_REQUIRED = "TagsRequired"
    TAG_EMPTY = "TagEmpty"
    TAG_TOO_LONG = "TagTooLong"
    TAG_INVALID_CHARS = "TagInvalidChars"
    TOO_FEW_TAGS = "TooFewTags"
    TOO_MANY_TAGS = "TooManyTags"


@dataclass(frozen=True)
class FieldError:
    """Ошибка, привязанная к конкретному полю формы."""

    field: str
    code: ValidationErrorCode
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class TagValidationResult:
    """Результат проверки одного тега или количества тегов."""

    valid: bool
    error: FieldError | None = None

    @classmethod
    def ok(cls) -> "TagValidationResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, code: ValidationErrorCode, message: str) -> "TagValidationResult":
        return cls(valid=False, error=FieldError("tags", code, message))


class SnippetValidationError(ValueError):
    """
    Сниппет не прошёл валидацию.

    Содержит ВСЕ найденные ошибки, а не только первую,
    чтобы клиент мог показать их за один раз.
    """

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in self.errors))

    @property
    def codes(self) -> list[ValidationErrorCode]:
        return [error.code for error in self.errors]
