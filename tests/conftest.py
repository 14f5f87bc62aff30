"""
Pytest fixtures для тестов.

Предоставляет:
- test_database: клиент Database на изолированной SQLite in-memory БД
- test_db: сессия этой БД для тестов сервисов и репозиториев
- test_client: HTTP клиент для тестирования API endpoints
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import get_db
from src.core.database import Database
from src.main import app

# Test database URL (SQLite in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_database():
    """
    Database на in-memory SQLite.

    Database сам выбирает StaticPool для :memory: (одно соединение,
    иначе данные теряются) и включает PRAGMA foreign_keys.
    Каждый тест получает новую пустую БД.
    """
    database = Database(TEST_DATABASE_URL)
    await database.init_db()

    yield database

    await database.close()


@pytest_asyncio.fixture
async def test_db(test_database):
    """
    Async session тестовой БД.

    Изменения видны внутри теста и после commit();
    всё незакоммиченное откатывается в конце.
    """
    async with test_database.session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def test_client(test_database):
    """
    HTTP клиент для API endpoints поверх тестовой БД.

    get_db заменяется на сессию тестовой Database (commit при успехе,
    rollback при ошибке), health check ходит в неё же через app.state.
    """

    async def override_get_db():
        async with test_database.session() as session:
            yield session

    original_database = app.state.database
    app.state.database = test_database
    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    app.state.database = original_database


@pytest.fixture
def snippet_payload():
    """Валидное тело запроса на создание сниппета."""
    return {
        "title": "Debounce helper",
        "content": "function debounce(fn, ms) {\r\n  return fn;\r\n}",
        "language": "javascript",
        "tags": ["JS", "utils"],
    }
