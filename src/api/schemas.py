"""
Pydantic схемы для API.

DTOs (Data Transfer Objects) - объекты для передачи данных через HTTP.

Схемы сниппетов описывают только форму запроса. Правила полей
(длина заголовка, язык, 1..5 тегов, формат тегов) проверяются в endpoints
через validators, чтобы клиент получил ВСЕ ошибки одним ответом 400,
а не первую попавшуюся ошибку Pydantic.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# TAG SCHEMAS
# ============================================================================


class TagResponse(BaseModel):
    """
    Схема для тега в ответе.

    Используется в автодополнении и внутри SnippetResponse.
    """

    id: int
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# SNIPPET SCHEMAS
# ============================================================================


class SnippetCreate(BaseModel):
    """
    Схема для создания сниппета (POST /snippets).

    Пример запроса:
    {
        "title": "Debounce helper",
        "content": "function debounce(fn, ms) { ... }",
        "language": "javascript",
        "tags": ["js", "utils"]
    }
    """

    title: str | None = Field(None, description="Заголовок (1-100 символов)")
    content: str | None = Field(None, description="Код (1-50 000 символов)")
    language: str | None = Field(None, description="Id языка (см. GET /languages)")
    tags: list[str] | None = Field(None, description="Теги: от 1 до 5")


class SnippetUpdate(BaseModel):
    """
    Схема для обновления сниппета (PUT /snippets/{id}).

    Все поля опциональные (частичное обновление).
    Если tags передан - набор тегов заменяется целиком.
    """

    title: str | None = None
    content: str | None = None
    language: str | None = None
    tags: list[str] | None = Field(None, description="Новый набор тегов: от 1 до 5")


class SnippetResponse(BaseModel):
    """
    Схема для ответа API (GET /snippets/{id}).

    Пример ответа:
    {
        "id": 1,
        "title": "Debounce helper",
        "content": "function debounce(fn, ms) { ... }",
        "language": "javascript",
        "tags": "js,utils",
        "tag_list": [{"id": 1, "name": "js", "created_at": "..."}, ...],
        "created_at": "2026-10-18T12:00:00",
        "updated_at": "2026-10-18T12:00:00"
    }

    tags - строка через запятую для старых клиентов,
    tag_list - полноценный список тегов.
    """

    id: int
    title: str
    content: str
    language: str
    tags: str
    tag_list: list[TagResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("language", mode="before")
    @classmethod
    def language_id(cls, value):
        # Language -> "c-sharp"
        return getattr(value, "value", value)


# ============================================================================
# LANGUAGE SCHEMAS
# ============================================================================


class LanguageOptionResponse(BaseModel):
    """Язык из списка поддерживаемых: {"id": "c-sharp", "label": "C#"}."""

    id: str
    label: str


# ============================================================================
# HIGHLIGHT SCHEMAS
# ============================================================================


class HighlightRequest(BaseModel):
    """
    Схема для подсветки кода (POST /highlight).

    Пример:
    {
        "content": "print('hi')",
        "language": "python",
        "theme": "dark"
    }
    """

    content: str = Field(..., min_length=1, description="Код для подсветки")
    language: str = Field(..., min_length=1, description="Id языка или сокращение")
    theme: str | None = Field(
        None, pattern=r"^(dark|light)$", description='"dark" или "light"'
    )


class HighlightResponse(BaseModel):
    """HTML с подсвеченным кодом."""

    html: str


# ============================================================================
# COMMON SCHEMAS
# ============================================================================


class ErrorDetail(BaseModel):
    """
    Детали ошибки для конкретного поля.

    Пример:
    {
        "field": "title",
        "message": "Title is required"
    }
    """

    field: str = Field(..., description="Название поля с ошибкой")
    message: str = Field(..., description="Описание ошибки")


class ErrorBody(BaseModel):
    """
    Тело ошибки с кодом и деталями.

    Примеры кодов:
    - VALIDATION_ERROR: ошибка валидации полей
    - NOT_FOUND: ресурс не найден
    - UNAUTHORIZED: нет или неверный API ключ
    - INTERNAL_ERROR: внутренняя ошибка сервера
    """

    code: str = Field(..., description="Код ошибки (VALIDATION_ERROR, NOT_FOUND, etc.)")
    message: str = Field(..., description="Человекочитаемое сообщение")
    details: list[ErrorDetail] | None = Field(
        default=None, description="Список ошибок по полям (для валидации)"
    )


class ErrorResponse(BaseModel):
    """
    Единый формат ответа для всех ошибок API.

    Пример ошибки валидации:
    {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Ошибка валидации сниппета",
            "details": [
                {"field": "title", "message": "Title is required"},
                {"field": "tags", "message": "At least one tag is required"}
            ]
        }
    }
    """

    error: ErrorBody
