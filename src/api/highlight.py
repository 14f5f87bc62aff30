"""API endpoint для подсветки синтаксиса."""

from fastapi import APIRouter

from ..core.config import settings
from ..integrations.highlight import highlight
from .errors import ValidationError_
from .schemas import ErrorResponse, HighlightRequest, HighlightResponse

router = APIRouter(prefix="/highlight", tags=["highlight"])


@router.post(
    "",
    response_model=HighlightResponse,
    summary="Подсветить код",
    responses={422: {"model": ErrorResponse, "description": "Нет кода, языка или неверная тема"}},
)
async def highlight_code(data: HighlightRequest) -> HighlightResponse:
    """
    Вернуть HTML с подсвеченным кодом (inline-стили, без CSS классов).

    Пример запроса:
    ```json
    {"content": "print('hi')", "language": "python", "theme": "light"}
    ```

    Неизвестный язык - не ошибка: код вернётся экранированным без подсветки.
    Тема по умолчанию - HIGHLIGHT_DEFAULT_THEME.
    """
    theme = data.theme or settings.HIGHLIGHT_DEFAULT_THEME
    try:
        html = highlight(data.content, data.language, theme)
    except ValueError as e:
        raise ValidationError_(str(e), details=[{"field": "theme", "message": str(e)}]) from e
    return HighlightResponse(html=html)
