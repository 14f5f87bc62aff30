"""
Dependencies для FastAPI endpoints.

Вместо того чтобы создавать сессию и сервисы вручную в каждом endpoint,
используем FastAPI Depends():
    async def create_snippet(
        service: SnippetService = Depends(get_snippet_service)
    ):
        ...

Цепочка зависимостей:
    get_snippet_service зависит от get_db
    → get_db берёт Database из app.state и открывает сессию
    → сессия коммитится после успешного endpoint и откатывается при ошибке
"""

from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..services import SnippetService, TagService
from .errors import UnauthorizedError

# ============================================================================
# API KEY AUTHENTICATION
# ============================================================================

api_key_header = APIKeyHeader(
    name="X-API-Key",
    auto_error=False,  # Ошибку формируем сами, в едином формате
    description="API ключ для авторизации. Нужен, только если задан API_KEY",
)


async def verify_api_key(api_key: str | None = Depends(api_key_header)) -> str | None:
    """
    Dependency для проверки API ключа.

    Если API_KEY в настройках не задан - авторизация выключена
    (локальный менеджер сниппетов). Иначе заголовок X-API-Key обязателен
    и должен совпадать с ключом, иначе 401 Unauthorized.

    Пример запроса:
        curl -H "X-API-Key: your-secret-key" http://localhost:8000/api/v1/snippets
    """
    if settings.API_KEY is None:
        return None

    if api_key is None:
        raise UnauthorizedError("API key is missing. Add header: X-API-Key: your-key")

    if api_key != settings.API_KEY:
        raise UnauthorizedError("Invalid API key")

    return api_key


# ============================================================================
# DATABASE SESSION DEPENDENCY
# ============================================================================


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency для получения сессии БД.

    Database.session() сам делает commit() при успехе и rollback() при ошибке,
    так что один запрос = одна транзакция.

    В тестах заменяется через app.dependency_overrides[get_db].
    """
    async with request.app.state.database.session() as session:
        yield session


# ============================================================================
# SERVICE DEPENDENCIES
# ============================================================================


async def get_snippet_service(db: AsyncSession = Depends(get_db)) -> SnippetService:
    """Dependency для SnippetService."""
    return SnippetService(db)


async def get_tag_service(db: AsyncSession = Depends(get_db)) -> TagService:
    """Dependency для TagService."""
    return TagService(db)
