"""
Обработчики ошибок (Exception Handlers) для API.

Все ошибки отдаются в одном формате ErrorResponse:
1. APIError (наши исключения) - код и статус из исключения
2. SnippetValidationError (ошибки полей сниппета) - 400 со списком ВСЕХ ошибок
3. RequestValidationError (форма запроса, Pydantic) - 422
4. Всё остальное - 500 без внутренних деталей

Как это работает:
1. Где-то в коде возникает исключение (Exception)
2. FastAPI ищет подходящий handler для этого типа исключения
3. Handler преобразует исключение в HTTP ответ
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.logging import get_logger
from ..validators import SnippetValidationError
from .schemas import ErrorBody, ErrorDetail, ErrorResponse

logger = get_logger(__name__)


# =============================================================================
# CUSTOM EXCEPTIONS (Наши собственные исключения)
# =============================================================================


class APIError(Exception):
    """
    Базовый класс для всех API ошибок.

    Использование:
        raise APIError(
            code="NOT_FOUND",
            message="Сниппет не найден",
            status_code=404
        )
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: list[dict] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class NotFoundError(APIError):
    """
    Ресурс не найден (404).

    Использование:
        raise NotFoundError("Snippet", 123)
        # Сообщение: "Snippet с id=123 не найден"
    """

    def __init__(self, resource: str, resource_id: int | str):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource} с id={resource_id} не найден",
            status_code=status.HTTP_404_NOT_FOUND,
        )


class UnauthorizedError(APIError):
    """Нет или неверный API ключ (401)."""

    def __init__(self, message: str = "Invalid API key"):
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class ValidationError_(APIError):
    """
    Ошибка валидации бизнес-логики (400).

    Использование:
        raise ValidationError_("Недопустимое поле сортировки", details=[...])
    """

    def __init__(self, message: str, details: list[dict] | None = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


# =============================================================================
# EXCEPTION HANDLERS (Обработчики исключений)
# =============================================================================


def _error_response(
    status_code: int, code: str, message: str, details: list[ErrorDetail] | None = None
) -> JSONResponse:
    body = ErrorResponse(error=ErrorBody(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """
    Обработчик для наших кастомных ошибок (APIError).

    Преобразует APIError в единый формат ErrorResponse.
    """
    logger.warning(
        "API error",
        extra={"code": exc.code, "status_code": exc.status_code, "path": request.url.path},
    )

    details = None
    if exc.details:
        details = [ErrorDetail(field=d["field"], message=d["message"]) for d in exc.details]

    response = _error_response(exc.status_code, exc.code, exc.message, details)
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        response.headers["WWW-Authenticate"] = "ApiKey"
    return response


async def snippet_validation_error_handler(
    request: Request, exc: SnippetValidationError
) -> JSONResponse:
    """
    Обработчик для ошибок валидации сниппета (400).

    В details попадают ВСЕ ошибки, а не только первая:
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
    logger.info(
        "Snippet validation failed",
        extra={"codes": [code.value for code in exc.codes], "path": request.url.path},
    )

    details = [ErrorDetail(field=e.field, message=e.message) for e in exc.errors]
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        "Ошибка валидации сниппета",
        details,
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Обработчик для ошибок валидации Pydantic (422).

    Pydantic возвращает ошибки в своём формате:
    {
        "detail": [
            {"type": "string_too_short", "loc": ["body", "content"], "msg": "..."}
        ]
    }

    Мы преобразуем это в наш формат с details по полям.
    """
    logger.warning("Request validation error", extra={"path": request.url.path})

    details = []
    for error in exc.errors():
        # loc - путь к полю, например ["body", "content"] или ["query", "limit"]
        field_path = error.get("loc", [])
        field_name = field_path[-1] if field_path else "unknown"

        if len(field_path) > 1 and field_path[0] == "body":
            field_name = ".".join(str(p) for p in field_path[1:])

        details.append(
            ErrorDetail(field=str(field_name), message=error.get("msg", "Ошибка валидации"))
        )

    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Ошибка валидации входных данных",
        details,
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Обработчик для всех остальных ошибок (500).

    ВАЖНО: Не показываем детали внутренних ошибок клиенту!
    Полная ошибка со stack trace уходит только в лог.
    """
    logger.error(
        f"Internal Error: {type(exc).__name__}: {exc}",
        exc_info=exc,
        extra={"path": request.url.path},
    )

    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "Внутренняя ошибка сервера",
    )


# =============================================================================
# РЕГИСТРАЦИЯ HANDLERS
# =============================================================================


def register_error_handlers(app):
    """
    Регистрирует все error handlers в приложении FastAPI.

    Вызывается из main.py:
        from src.api.errors import register_error_handlers
        register_error_handlers(app)
    """
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(SnippetValidationError, snippet_validation_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    logger.debug("Error handlers registered")
