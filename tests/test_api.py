"""
Тесты для API Layer (REST endpoints).

Проверяем:
- HTTP статус-коды
- Форматы запросов/ответов (JSON)
- Обработку ошибок (400, 401, 404, 422, 500) в едином формате
- Интеграцию всех слоёв (API → Service → Repository → DB)
"""

import json
from datetime import datetime

import pytest
from httpx import AsyncClient
from sqlalchemy import update
from starlette.requests import Request

from src.api.errors import generic_error_handler
from src.core.config import settings
from src.models import Snippet

API = "/api/v1"


async def create_snippet(client: AsyncClient, **overrides) -> dict:
    payload = {"title": "Test", "content": "print(1)", "language": "python", "tags": ["py"]}
    payload.update(overrides)
    response = await client.post(f"{API}/snippets", json=payload)
    assert response.status_code == 201, response.json()
    return response.json()


# ============================================================================
# CREATE
# ============================================================================


@pytest.mark.asyncio
async def test_create_snippet(test_client: AsyncClient, snippet_payload):
    """Test: POST /snippets - 201, нормализация кода и тегов."""
    response = await test_client.post(f"{API}/snippets", json=snippet_payload)

    assert response.status_code == 201
    data = response.json()
    assert data["id"] > 0
    assert data["title"] == "Debounce helper"
    assert data["content"] == "function debounce(fn, ms) {\n  return fn;\n}"
    assert data["language"] == "javascript"
    assert data["tags"] == "js,utils"
    assert [t["name"] for t in data["tag_list"]] == ["js", "utils"]
    assert "created_at" in data
    assert "updated_at" in data
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_create_snippet_duplicate_tags_collapse(test_client: AsyncClient):
    """Test: ["JS", "js"] - один тег."""
    data = await create_snippet(test_client, language="JavaScript", tags=["JS", "js"])

    assert data["language"] == "javascript"
    assert data["tags"] == "js"


@pytest.mark.asyncio
async def test_create_snippet_validation_reports_all_errors(test_client: AsyncClient):
    """Test: POST /snippets - 400 со всеми ошибками полей разом."""
    response = await test_client.post(
        f"{API}/snippets", json={"title": "", "content": "  ", "language": "cobol", "tags": []}
    )

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"] == [
        {"field": "title", "message": "Title is required"},
        {"field": "content", "message": "Code content cannot be empty or whitespace only"},
        {"field": "language", "message": "Choose a language from the supported list"},
        {"field": "tags", "message": "At least one tag is required"},
    ]


@pytest.mark.asyncio
async def test_create_snippet_missing_fields(test_client: AsyncClient):
    """Test: пустое тело - 400 с ошибкой по каждому обязательному полю."""
    response = await test_client.post(f"{API}/snippets", json={})

    assert response.status_code == 400
    fields = [d["field"] for d in response.json()["error"]["details"]]
    assert fields == ["title", "content", "language", "tags"]


@pytest.mark.asyncio
async def test_create_snippet_tag_rules(test_client: AsyncClient):
    """Test: больше 5 тегов и недопустимые символы - 400."""
    response = await test_client.post(
        f"{API}/snippets",
        json={
            "title": "T",
            "content": "x",
            "language": "go",
            "tags": ["a", "b", "c", "d", "e", "c++"],
        },
    )

    assert response.status_code == 400
    messages = [d["message"] for d in response.json()["error"]["details"]]
    assert "Maximum 5 tags per snippet" in messages
    assert any(m.startswith("'c++': ") for m in messages)


@pytest.mark.asyncio
async def test_create_snippet_wrong_type_is_422(test_client: AsyncClient):
    """Test: неправильная форма запроса - 422 в едином формате."""
    response = await test_client.post(
        f"{API}/snippets", json={"title": "T", "content": "x", "language": "go", "tags": "py"}
    )

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "tags"


# ============================================================================
# READ
# ============================================================================


@pytest.mark.asyncio
async def test_get_snippet(test_client: AsyncClient):
    """Test: GET /snippets/{id}."""
    created = await create_snippet(test_client, tags=["b", "a"])

    response = await test_client.get(f"{API}/snippets/{created['id']}")

    assert response.status_code == 200
    assert response.json()["tags"] == "a,b"


@pytest.mark.asyncio
async def test_get_snippet_not_found(test_client: AsyncClient):
    """Test: GET /snippets/{id} - 404 в едином формате."""
    response = await test_client.get(f"{API}/snippets/999")

    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert "999" in error["message"]


@pytest.mark.asyncio
async def test_list_snippets_newest_first(test_client: AsyncClient):
    """Test: GET /snippets - новые первыми, пагинация."""
    for title in ["One", "Two", "Three"]:
        await create_snippet(test_client, title=title)

    response = await test_client.get(f"{API}/snippets")
    assert [s["title"] for s in response.json()] == ["Three", "Two", "One"]

    response = await test_client.get(f"{API}/snippets?skip=1&limit=1")
    assert [s["title"] for s in response.json()] == ["Two"]


@pytest.mark.asyncio
async def test_list_snippets_invalid_order_by(test_client: AsyncClient):
    """Test: сортировка только по created_at/updated_at."""
    response = await test_client.get(f"{API}/snippets?order_by=title")

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_snippets_filters(test_client: AsyncClient):
    """Test: ?tags= (подстрока, OR), ?language=, оба фильтра вместе."""
    await create_snippet(test_client, title="JS", language="javascript", tags=["javascript"])
    await create_snippet(test_client, title="Java", language="java", tags=["java"])
    await create_snippet(test_client, title="Py", language="python", tags=["python"])

    response = await test_client.get(f"{API}/snippets?tags=java")
    assert {s["title"] for s in response.json()} == {"JS", "Java"}

    response = await test_client.get(f"{API}/snippets?tags=java,python")
    assert len(response.json()) == 3

    response = await test_client.get(f"{API}/snippets?language=PYTHON")
    assert [s["title"] for s in response.json()] == ["Py"]

    response = await test_client.get(f"{API}/snippets?language=cobol")
    assert response.json() == []

    response = await test_client.get(f"{API}/snippets?tags=java&language=java")
    assert [s["title"] for s in response.json()] == ["Java"]


@pytest.mark.asyncio
async def test_list_snippets_filters_with_order_and_pagination(
    test_client: AsyncClient, test_database
):
    """Test: order_by, skip, limit применяются и к отфильтрованному списку."""
    timestamps = {
        "A": (datetime(2024, 1, 1), datetime(2024, 3, 1)),
        "B": (datetime(2024, 1, 2), datetime(2024, 1, 2)),
        "C": (datetime(2024, 1, 3), datetime(2024, 2, 1)),
    }
    for title in timestamps:
        await create_snippet(test_client, title=title, tags=["shared"])

    async with test_database.session() as session:
        for title, (created_at, updated_at) in timestamps.items():
            await session.execute(
                update(Snippet)
                .where(Snippet.title == title)
                .values(created_at=created_at, updated_at=updated_at)
            )

    response = await test_client.get(f"{API}/snippets?tags=shared")
    assert [s["title"] for s in response.json()] == ["A", "C", "B"]

    response = await test_client.get(f"{API}/snippets?tags=shared&order_by=created_at")
    assert [s["title"] for s in response.json()] == ["C", "B", "A"]

    response = await test_client.get(f"{API}/snippets?tags=shared&skip=1&limit=1")
    assert [s["title"] for s in response.json()] == ["C"]

    response = await test_client.get(
        f"{API}/snippets?language=python&order_by=created_at&limit=2"
    )
    assert [s["title"] for s in response.json()] == ["C", "B"]


# ============================================================================
# UPDATE
# ============================================================================


@pytest.mark.asyncio
async def test_update_snippet(test_client: AsyncClient):
    """Test: PUT /snippets/{id} - частичное обновление, теги заменяются."""
    created = await create_snippet(test_client, title="Old", tags=["a", "b", "c"])

    response = await test_client.put(
        f"{API}/snippets/{created['id']}", json={"title": "New", "tags": ["x", "y"]}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "New"
    assert data["content"] == created["content"]
    assert data["tags"] == "x,y"
    assert data["created_at"] == created["created_at"]


@pytest.mark.asyncio
async def test_update_snippet_validation(test_client: AsyncClient):
    """Test: PUT - невалидные поля и пустой список тегов - 400."""
    created = await create_snippet(test_client)

    response = await test_client.put(
        f"{API}/snippets/{created['id']}", json={"title": "a" * 101, "tags": []}
    )

    assert response.status_code == 400
    details = response.json()["error"]["details"]
    assert details == [
        {"field": "title", "message": "Title must be 100 characters or less"},
        {"field": "tags", "message": "At least one tag is required"},
    ]


@pytest.mark.asyncio
async def test_update_snippet_not_found(test_client: AsyncClient):
    """Test: PUT несуществующего - 404."""
    response = await test_client.put(f"{API}/snippets/999", json={"title": "x"})

    assert response.status_code == 404


# ============================================================================
# DELETE
# ============================================================================


@pytest.mark.asyncio
async def test_delete_snippet(test_client: AsyncClient):
    """Test: DELETE - 204, потом 404; теги остаются."""
    created = await create_snippet(test_client, tags=["keepme"])

    response = await test_client.delete(f"{API}/snippets/{created['id']}")
    assert response.status_code == 204

    response = await test_client.get(f"{API}/snippets/{created['id']}")
    assert response.status_code == 404

    response = await test_client.delete(f"{API}/snippets/{created['id']}")
    assert response.status_code == 404

    response = await test_client.get(f"{API}/tags?q=keep")
    assert [t["name"] for t in response.json()] == ["keepme"]


# ============================================================================
# TAGS / LANGUAGES / HIGHLIGHT
# ============================================================================


@pytest.mark.asyncio
async def test_tag_autocomplete(test_client: AsyncClient):
    """Test: GET /tags?q= - префикс, по алфавиту; пустой q - пусто."""
    await create_snippet(test_client, tags=["redux", "react", "rust"])

    response = await test_client.get(f"{API}/tags?q=RE")
    assert [t["name"] for t in response.json()] == ["react", "redux"]

    response = await test_client.get(f"{API}/tags?q=")
    assert response.json() == []

    response = await test_client.get(f"{API}/tags?q=r&limit=1")
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_tag_autocomplete_requires_q(test_client: AsyncClient):
    """Test: GET /tags без q - 422."""
    response = await test_client.get(f"{API}/tags")

    assert response.status_code == 422
    assert response.json()["error"]["details"][0]["field"] == "q"


@pytest.mark.asyncio
async def test_languages(test_client: AsyncClient):
    """Test: GET /languages - все языки, по названию."""
    response = await test_client.get(f"{API}/languages")

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 21
    assert {"id": "shell-bash", "label": "Shell/Bash"} in data
    labels = [lang["label"].lower() for lang in data]
    assert labels == sorted(labels)


@pytest.mark.asyncio
async def test_highlight(test_client: AsyncClient):
    """Test: POST /highlight - HTML с подсветкой или экранированный текст."""
    response = await test_client.post(
        f"{API}/highlight", json={"content": "print('hi')", "language": "python"}
    )
    assert response.status_code == 200
    assert "print" in response.json()["html"]

    response = await test_client.post(
        f"{API}/highlight", json={"content": "<x>", "language": "unknown-lang", "theme": "light"}
    )
    assert response.json()["html"] == "<pre><code>&lt;x&gt;</code></pre>"


@pytest.mark.asyncio
async def test_highlight_validation(test_client: AsyncClient):
    """Test: POST /highlight - нет кода или неверная тема - 422."""
    response = await test_client.post(f"{API}/highlight", json={"content": "", "language": "go"})
    assert response.status_code == 422

    response = await test_client.post(
        f"{API}/highlight", json={"content": "x", "language": "go", "theme": "blue"}
    )
    assert response.status_code == 422
    assert response.json()["error"]["details"][0]["field"] == "theme"


# ============================================================================
# AUTH / ROOT / HEALTH / ERRORS
# ============================================================================


@pytest.mark.asyncio
async def test_api_key_required_when_configured(test_client: AsyncClient, monkeypatch):
    """Test: если задан API_KEY - без ключа 401, с верным ключом 200."""
    monkeypatch.setattr(settings, "API_KEY", "secret")

    response = await test_client.get(f"{API}/languages")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"

    response = await test_client.get(f"{API}/languages", headers={"X-API-Key": "wrong"})
    assert response.status_code == 401

    response = await test_client.get(f"{API}/languages", headers={"X-API-Key": "secret"})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_root(test_client: AsyncClient):
    """Test: GET / - информация о API."""
    response = await test_client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == settings.APP_NAME
    assert data["endpoints"]["snippets"] == "/api/v1/snippets"


@pytest.mark.asyncio
async def test_health_check(test_client: AsyncClient):
    """Test: GET /health - БД доступна."""
    response = await test_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["checks"]["database"] == "connected"


@pytest.mark.asyncio
async def test_generic_error_handler_hides_details():
    """Test: внутренняя ошибка - 500 без деталей исключения."""
    request = Request({"type": "http", "method": "GET", "path": "/boom", "headers": []})

    response = await generic_error_handler(request, RuntimeError("secret internals"))

    assert response.status_code == 500
    body = json.loads(response.body)
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert "secret internals" not in response.body.decode()
