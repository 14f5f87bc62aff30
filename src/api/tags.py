"""
API endpoints для работы с тегами.

Теги создаются автоматически при сохранении сниппета,
поэтому здесь только автодополнение.
"""

from fastapi import APIRouter, Depends, Query

from ..core.config import settings
from ..services import TagService
from .dependencies import get_tag_service
from .schemas import TagResponse

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=list[TagResponse], summary="Автодополнение тегов")
async def get_tags(
    q: str = Query(..., description="Начало имени тега"),
    limit: int | None = Query(None, ge=1, le=100, description="Максимум результатов"),
    service: TagService = Depends(get_tag_service),
) -> list[TagResponse]:
    """
    Теги, начинающиеся с q (без учёта регистра), по алфавиту.

    Query параметры:
    - q: префикс (обязателен; пустой - пустой список)
    - limit: по умолчанию TAG_AUTOCOMPLETE_LIMIT (8)

    Пример запроса:
    ```
    GET /tags?q=Ja
    ```

    Пример ответа:
    ```json
    [
        {"id": 3, "name": "java", "created_at": "..."},
        {"id": 1, "name": "javascript", "created_at": "..."}
    ]
    ```
    """
    tags = await service.get_tags_by_prefix(q, limit or settings.TAG_AUTOCOMPLETE_LIMIT)
    return [TagResponse.model_validate(t) for t in tags]
