"""
API endpoints для работы со сниппетами.

Endpoints:
- POST   /snippets        - создать сниппет
- GET    /snippets        - список (фильтры: language, tags)
- GET    /snippets/{id}   - получить сниппет
- PUT    /snippets/{id}   - частично обновить
- DELETE /snippets/{id}   - удалить
"""

from fastapi import APIRouter, Depends, Query, status

from ..services import SnippetService
from ..validators import (
    SnippetValidationError,
    validate_snippet_data,
    validate_snippet_update,
    validate_tag_list,
)
from .dependencies import get_snippet_service
from .errors import NotFoundError
from .schemas import ErrorResponse, SnippetCreate, SnippetResponse, SnippetUpdate

router = APIRouter(prefix="/snippets", tags=["snippets"])


# ============================================================================
# CREATE SNIPPET
# ============================================================================


@router.post(
    "",
    response_model=SnippetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Создать сниппет",
    responses={400: {"model": ErrorResponse, "description": "Ошибка валидации полей"}},
)
async def create_snippet(
    data: SnippetCreate, service: SnippetService = Depends(get_snippet_service)
) -> SnippetResponse:
    """
    Создать сниппет с тегами.

    Пример запроса:
    ```json
    {
        "title": "Debounce helper",
        "content": "function debounce(fn, ms) { ... }",
        "language": "javascript",
        "tags": ["JS", "utils"]
    }
    ```

    Бизнес-правила:
    - Все ошибки полей возвращаются одним ответом 400
    - Теги: от 1 до 5, только буквы, цифры, "-" и "_"
    - Теги нормализуются (trim + lowercase), дубликаты схлопываются
    - Переводы строк в коде приводятся к LF
    """
    errors = validate_snippet_data(data.title, data.content, data.language, data.tags)
    if data.tags:
        errors += validate_tag_list(data.tags)
    if errors:
        raise SnippetValidationError(errors)

    snippet = await service.create_snippet(
        title=data.title, content=data.content, language=data.language, tags=data.tags
    )
    return SnippetResponse.model_validate(snippet)


# ============================================================================
# LIST SNIPPETS
# ============================================================================


@router.get("", response_model=list[SnippetResponse], summary="Получить список сниппетов")
async def get_snippets(
    language: str | None = Query(None, description="Только сниппеты этого языка"),
    tags: str | None = Query(
        None, description="Теги через запятую; совпадение по подстроке, любой из тегов"
    ),
    order_by: str | None = Query(
        None,
        pattern=r"^(created_at|updated_at)$",
        description="Поле сортировки (по умолчанию created_at, с фильтрами updated_at)",
    ),
    skip: int = Query(0, ge=0, description="Пропустить N записей"),
    limit: int | None = Query(None, ge=1, le=1000, description="Максимум записей"),
    service: SnippetService = Depends(get_snippet_service),
) -> list[SnippetResponse]:
    """
    Получить сниппеты, новые первыми.

    Query параметры:
    - language: id языка (регистр не важен); неизвестный язык - пустой список
    - tags: "react,hooks" - сниппеты, где хоть один тег содержит "react" или "hooks"
    - order_by, skip, limit: сортировка и пагинация, с фильтрами и без

    Без order_by список без фильтров сортируется по created_at,
    а отфильтрованный - по updated_at (недавно изменённые первыми).
    Если переданы оба фильтра, сниппет должен подходить под оба.

    Примеры запросов:
    ```
    GET /snippets
    GET /snippets?language=python
    GET /snippets?tags=react,hooks&order_by=created_at&limit=10
    ```
    """
    if language is None and tags is None:
        snippets = await service.get_all_snippets(
            order_by=order_by or "created_at", skip=skip, limit=limit
        )
        return [SnippetResponse.model_validate(s) for s in snippets]

    if tags is not None:
        snippets = await service.search_by_tags(tags.split(","))
        if language is not None:
            by_language = {s.id for s in await service.filter_by_language(language)}
            snippets = [s for s in snippets if s.id in by_language]
    else:
        snippets = await service.filter_by_language(language)

    # Фильтры уже отдают updated_at DESC, id DESC
    if order_by is not None:
        snippets.sort(key=lambda s: (getattr(s, order_by), s.id), reverse=True)
    snippets = snippets[skip:]
    if limit is not None:
        snippets = snippets[:limit]

    return [SnippetResponse.model_validate(s) for s in snippets]


# ============================================================================
# GET SNIPPET
# ============================================================================


@router.get(
    "/{snippet_id}",
    response_model=SnippetResponse,
    summary="Получить сниппет",
    responses={404: {"model": ErrorResponse, "description": "Сниппет не найден"}},
)
async def get_snippet(
    snippet_id: int, service: SnippetService = Depends(get_snippet_service)
) -> SnippetResponse:
    """Получить сниппет по ID вместе с тегами."""
    snippet = await service.get_snippet_by_id(snippet_id)
    if not snippet:
        raise NotFoundError("Snippet", snippet_id)
    return SnippetResponse.model_validate(snippet)


# ============================================================================
# UPDATE SNIPPET
# ============================================================================


@router.put(
    "/{snippet_id}",
    response_model=SnippetResponse,
    summary="Обновить сниппет",
    responses={
        400: {"model": ErrorResponse, "description": "Ошибка валидации полей"},
        404: {"model": ErrorResponse, "description": "Сниппет не найден"},
    },
)
async def update_snippet(
    snippet_id: int,
    data: SnippetUpdate,
    service: SnippetService = Depends(get_snippet_service),
) -> SnippetResponse:
    """
    Частичное обновление сниппета.

    Пример запроса (сменить только теги):
    ```json
    {"tags": ["x", "y"]}
    ```

    Бизнес-правила:
    - Меняются только переданные поля
    - Если передан tags, набор тегов заменяется целиком (1..5 тегов)
    - updated_at меняется при любом обновлении
    """
    errors = validate_snippet_update(data.title, data.content, data.language)
    if data.tags is not None:
        errors += validate_tag_list(data.tags)
    if errors:
        raise SnippetValidationError(errors)

    snippet = await service.update_snippet(
        snippet_id,
        title=data.title,
        content=data.content,
        language=data.language,
        tags=data.tags,
    )
    if not snippet:
        raise NotFoundError("Snippet", snippet_id)
    return SnippetResponse.model_validate(snippet)


# ============================================================================
# DELETE SNIPPET
# ============================================================================


@router.delete(
    "/{snippet_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить сниппет",
    responses={404: {"model": ErrorResponse, "description": "Сниппет не найден"}},
)
async def delete_snippet(
    snippet_id: int, service: SnippetService = Depends(get_snippet_service)
) -> None:
    """
    Удалить сниппет.

    Связи с тегами удаляются, сами теги остаются для повторного использования.
    """
    deleted = await service.delete_snippet(snippet_id)
    if not deleted:
        raise NotFoundError("Snippet", snippet_id)
