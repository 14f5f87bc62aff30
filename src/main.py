"""
Главный файл FastAPI приложения.

Точка входа в приложение Snippet Manager.

Запуск:
    uvicorn src.main:app --reload

API документация:
    http://localhost:8000/docs       - Swagger UI
    http://localhost:8000/redoc      - ReDoc

Версионирование:
    API доступно по путям /api/v1/...
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .api import highlight_router, languages_router, snippets_router, tags_router
from .api.dependencies import verify_api_key
from .api.errors import register_error_handlers
from .api.middleware import RequestLoggingMiddleware
from .core.config import settings
from .core.database import Database
from .core.logging import get_logger, setup_logging

# LOG_LEVEL: DEBUG/INFO/WARNING/ERROR - что логировать
# LOG_FORMAT: json (production) / simple (development)
setup_logging(
    log_level=settings.LOG_LEVEL,
    log_format=settings.LOG_FORMAT,
    sql_echo=settings.DATABASE_ECHO,
)

logger = get_logger(__name__)

# ============================================================================
# APPLICATION METADATA
# ============================================================================

APP_VERSION = "1.0.0"
APP_START_TIME: float = 0.0  # Will be set on startup
RATE_LIMIT = "100/minute"

# ============================================================================
# RATE LIMITER SETUP
# ============================================================================

# key_func определяет по какому ключу группировать запросы (по IP адресу)
limiter = Limiter(key_func=get_remote_address)


def custom_rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Превышение лимита запросов (429) в едином формате ErrorResponse."""
    return JSONResponse(
        status_code=429,
        content={
            "error": {
                "code": "RATE_LIMIT_EXCEEDED",
                "message": f"Слишком много запросов. Лимит: {exc.detail}",
                "details": [{"field": "rate_limit", "message": str(exc.detail)}],
            }
        },
    )


# ============================================================================
# LIFESPAN EVENT HANDLER
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: создаём таблицы, если их ещё нет.
    Shutdown: закрываем соединения с БД.
    """
    global APP_START_TIME
    APP_START_TIME = time.time()

    database: Database = app.state.database
    await database.init_db()

    logger.info(
        "Application started",
        extra={
            "app_name": settings.APP_NAME,
            "version": APP_VERSION,
            "debug": settings.DEBUG,
            "database": database.backend,
            "auth_enabled": settings.API_KEY is not None,
        },
    )

    yield  # Application runs here

    await database.close()
    uptime = int(time.time() - APP_START_TIME)
    logger.info("Application stopped", extra={"uptime_seconds": uptime})


# ============================================================================
# CREATE APPLICATION
# ============================================================================

app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    description="""
    Менеджер сниппетов кода: заголовок, код, язык и теги.

    ## Возможности

    * **Сниппеты** - создание, просмотр, частичное обновление, удаление
    * **Теги** - нормализация, переиспользование, автодополнение по префиксу
    * **Поиск** - по тегам (подстрока) и по языку
    * **Подсветка** - HTML подсветка синтаксиса (Pygments), тёмная и светлая темы

    ## 3-Layer Architecture

    ```
    API Layer (FastAPI) → Service Layer (Business Logic) → Repository Layer (Database)
    ```

    ## Модель данных

    ```
    Snippets ←(M:M snippet_tags)→ Tags
    ```

    ## Rate Limiting

    Служебные endpoints ограничены: **100 запросов/минуту**.
    При превышении лимита вернётся ошибка 429 Too Many Requests.
    """,
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Один клиент БД на приложение; в тестах подменяется на in-memory
app.state.database = Database.from_settings(settings)

app.state.limiter = limiter
# slowapi handler имеет специфичный тип, но работает корректно
app.add_exception_handler(RateLimitExceeded, custom_rate_limit_exceeded_handler)  # type: ignore[arg-type]


# ============================================================================
# MIDDLEWARE
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Каждый запрос логируется с методом, путём, статусом и временем
app.add_middleware(RequestLoggingMiddleware)


# ============================================================================
# API VERSIONING
# ============================================================================

api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(snippets_router)
api_v1_router.include_router(tags_router)
api_v1_router.include_router(languages_router)
api_v1_router.include_router(highlight_router)

# dependencies=[Depends(verify_api_key)] - проверка X-API-Key, если задан API_KEY
app.include_router(api_v1_router, dependencies=[Depends(verify_api_key)])

register_error_handlers(app)


# ============================================================================
# ROOT ENDPOINT
# ============================================================================


@app.get("/", tags=["root"], summary="Root endpoint", description="Информация о API")
@limiter.limit(RATE_LIMIT)
async def root(request: Request):
    """Информация о API и полезные ссылки."""
    return {
        "name": settings.APP_NAME,
        "version": APP_VERSION,
        "api_version": "v1",
        "docs": "/docs",
        "redoc": "/redoc",
        "openapi": "/openapi.json",
        "endpoints": {
            "snippets": "/api/v1/snippets",
            "tags": "/api/v1/tags",
            "languages": "/api/v1/languages",
            "highlight": "/api/v1/highlight",
        },
        "rate_limit": "100 requests/minute",
        "description": "Менеджер сниппетов кода с тегами",
    }


# ============================================================================
# HEALTH CHECK
# ============================================================================


@app.get(
    "/health", tags=["health"], summary="Health check", description="Проверка работоспособности API"
)
@limiter.limit(RATE_LIMIT)
async def health_check(request: Request):
    """
    Health check endpoint.

    Проверяет подключение к базе данных.

    Пример ответа (200 OK):
    ```json
    {
        "status": "ok",
        "checks": {
            "database": "connected",
            "version": "1.0.0",
            "uptime_seconds": 3600
        },
        "timestamp": "2026-10-18T12:00:00Z"
    }
    ```

    Если БД недоступна - status "error" и код 503.
    """
    uptime_seconds = int(time.time() - APP_START_TIME) if APP_START_TIME > 0 else 0

    db_status = "disconnected"
    try:
        async with request.app.state.database.session() as session:
            await session.execute(text("SELECT 1"))
            db_status = "connected"
    except (SQLAlchemyError, OSError):
        logger.warning("Health check: database unavailable", exc_info=True)

    overall_status = "ok" if db_status == "connected" else "error"

    return JSONResponse(
        status_code=200 if overall_status == "ok" else 503,
        content={
            "status": overall_status,
            "checks": {
                "database": db_status,
                "version": APP_VERSION,
                "uptime_seconds": uptime_seconds,
            },
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )
