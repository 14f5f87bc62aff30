"""
Тесты для Repository Layer.

Проверяем:
- Базовые CRUD операции (BaseRepository)
- Запросы тегов: по имени, по префиксу, по сниппету, связи
- Запросы сниппетов: с тегами, сортировка, поиск по подстроке, язык
- Ограничения схемы (UNIQUE, CHECK, ON DELETE CASCADE)
"""

import logging

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from src.models import Language, Snippet, Tag, snippet_tags
from src.repositories import SnippetRepository, TagRepository


async def make_snippet(db, title="Test", language=Language.PYTHON, content="print(1)") -> Snippet:
    return await SnippetRepository(db).create(
        Snippet(title=title, content=content, language=language)
    )


async def tag_snippet(db, snippet: Snippet, *names: str) -> None:
    repo = TagRepository(db)
    for name in names:
        tag = await repo.get_or_create(name)
        await repo.link_to_snippet(snippet.id, tag.id)


# ============================================================================
# BASE REPOSITORY (через SnippetRepository)
# ============================================================================


@pytest.mark.asyncio
async def test_snippet_create(test_db):
    """Test: создание сниппета - id и timestamps заполнены."""
    created = await make_snippet(test_db, title="Hello")
    await test_db.commit()

    assert created.id is not None
    assert created.title == "Hello"
    assert created.language is Language.PYTHON
    assert created.created_at is not None
    assert created.updated_at is not None


@pytest.mark.asyncio
async def test_snippet_language_stored_as_id(test_db):
    """Test: в колонке language хранится id ("c-sharp"), а не имя элемента."""
    await make_snippet(test_db, language=Language.C_SHARP)
    await test_db.commit()

    raw = await test_db.execute(select(Snippet.__table__.c.language))
    assert raw.scalar_one() == "c-sharp"


@pytest.mark.asyncio
async def test_base_crud(test_db):
    """Test: get_by_id, get_all, update, exists, count, delete."""
    repo = SnippetRepository(test_db)
    first = await make_snippet(test_db, title="First")
    second = await make_snippet(test_db, title="Second")
    await test_db.commit()

    assert (await repo.get_by_id(first.id)).title == "First"
    assert [s.title for s in await repo.get_all()] == ["First", "Second"]
    assert [s.title for s in await repo.get_all(skip=1, limit=1)] == ["Second"]

    updated = await repo.update(first.id, title="Renamed")
    assert updated.title == "Renamed"
    assert await repo.update(999, title="x") is None

    assert await repo.exists(second.id)
    assert await repo.count() == 2

    assert await repo.delete(second.id) is True
    assert await repo.delete(second.id) is False
    assert not await repo.exists(second.id)
    assert await repo.count() == 1


@pytest.mark.asyncio
async def test_snippet_ids_not_reused_after_delete(test_db):
    """Test: id монотонно растут, даже после удаления последней записи."""
    repo = SnippetRepository(test_db)
    first = await make_snippet(test_db)
    await repo.delete(first.id)
    second = await make_snippet(test_db)
    await test_db.commit()

    assert second.id > first.id


# ============================================================================
# TAG REPOSITORY
# ============================================================================


@pytest.mark.asyncio
async def test_tag_get_or_create(test_db):
    """Test: повторный get_or_create возвращает тот же тег."""
    repo = TagRepository(test_db)

    tag1 = await repo.get_or_create("python")
    tag2 = await repo.get_or_create("python")
    await test_db.commit()

    assert tag1.id == tag2.id
    assert await repo.count() == 1


@pytest.mark.asyncio
async def test_tag_get_or_create_recovers_from_unique_conflict(test_db, test_database, caplog):
    """Test: тег создан в другой транзакции между проверкой и INSERT."""
    caplog.set_level(logging.INFO, logger="src.repositories.tag")
    async with test_database.session() as other:
        other.add(Tag(name="race"))

    repo = TagRepository(test_db)
    original_get_by_name = repo.get_by_name
    calls = []

    async def stale_first_read(name):
        calls.append(name)
        if len(calls) == 1:
            return None  # первая проверка "не видит" чужой тег
        return await original_get_by_name(name)

    repo.get_by_name = stale_first_read

    tag = await repo.get_or_create("race")

    assert tag.name == "race"
    assert len(calls) == 2
    assert await repo.count() == 1
    assert "Tag created concurrently, reusing existing row" in caplog.messages


@pytest.mark.asyncio
async def test_tag_get_or_create_other_constraint_is_not_a_race(test_db, caplog):
    """Test: нарушение CHECK пробрасывается и не логируется как гонка."""
    caplog.set_level(logging.INFO, logger="src.repositories.tag")
    repo = TagRepository(test_db)

    with pytest.raises(IntegrityError):
        await repo.get_or_create("x" * 31)

    assert "Tag insert violated a constraint" in caplog.messages
    assert not any("concurrently" in message for message in caplog.messages)
    assert await repo.count() == 0


@pytest.mark.asyncio
async def test_tag_name_unique_constraint(test_db):
    """Test: UNIQUE(name) на уровне БД."""
    test_db.add(Tag(name="dup"))
    await test_db.flush()
    test_db.add(Tag(name="dup"))

    with pytest.raises(IntegrityError):
        await test_db.flush()


@pytest.mark.asyncio
async def test_tag_name_length_check_constraint(test_db):
    """Test: CHECK на длину имени тега (1..30)."""
    test_db.add(Tag(name="x" * 31))

    with pytest.raises(IntegrityError):
        await test_db.flush()


@pytest.mark.asyncio
async def test_tag_get_by_prefix(test_db):
    """Test: префикс, алфавитный порядок, limit."""
    repo = TagRepository(test_db)
    for name in ["javascript", "java", "jquery", "python", "jsx"]:
        await repo.get_or_create(name)
    await test_db.commit()

    tags = await repo.get_by_prefix("ja")
    assert [t.name for t in tags] == ["java", "javascript"]

    tags = await repo.get_by_prefix("j", limit=2)
    assert [t.name for t in tags] == ["java", "javascript"]


@pytest.mark.asyncio
async def test_tag_get_by_prefix_escapes_wildcards(test_db):
    """Test: "_" в префиксе - обычный символ, а не wildcard LIKE."""
    repo = TagRepository(test_db)
    await repo.get_or_create("my_tag")
    await repo.get_or_create("myxtag")
    await test_db.commit()

    tags = await repo.get_by_prefix("my_")
    assert [t.name for t in tags] == ["my_tag"]


@pytest.mark.asyncio
async def test_tag_link_and_unlink(test_db):
    """Test: связи сниппет-тег, теги сниппета по алфавиту."""
    repo = TagRepository(test_db)
    snippet = await make_snippet(test_db)
    await tag_snippet(test_db, snippet, "zeta", "alpha")
    await test_db.commit()

    assert [t.name for t in await repo.get_by_snippet_id(snippet.id)] == ["alpha", "zeta"]

    removed = await repo.unlink_all_from_snippet(snippet.id)
    await test_db.commit()

    assert removed == 2
    assert await repo.get_by_snippet_id(snippet.id) == []
    assert await repo.count() == 2  # сами теги остаются


@pytest.mark.asyncio
async def test_delete_snippet_cascades_links(test_db):
    """Test: ON DELETE CASCADE удаляет связи удалённого сниппета."""
    snippet = await make_snippet(test_db)
    await tag_snippet(test_db, snippet, "a", "b")
    await SnippetRepository(test_db).delete(snippet.id)
    await test_db.commit()

    links = await test_db.execute(select(func.count()).select_from(snippet_tags))
    assert links.scalar_one() == 0


# ============================================================================
# SNIPPET REPOSITORY
# ============================================================================


@pytest.mark.asyncio
async def test_snippet_get_by_id_full_loads_tags(test_db):
    """Test: теги загружены сразу и отсортированы; tags - строка через запятую."""
    repo = SnippetRepository(test_db)
    snippet = await make_snippet(test_db)
    await tag_snippet(test_db, snippet, "web", "api")
    await test_db.commit()

    loaded = await repo.get_by_id_full(snippet.id)

    assert [t.name for t in loaded.tag_list] == ["api", "web"]
    assert loaded.tags == "api,web"
    assert await repo.get_by_id_full(999) is None


@pytest.mark.asyncio
async def test_snippet_get_all_with_tags_newest_first(test_db):
    """Test: новые первыми, при равном времени - больший id."""
    repo = SnippetRepository(test_db)
    first = await make_snippet(test_db, title="First")
    second = await make_snippet(test_db, title="Second")
    second.created_at = first.created_at
    await test_db.commit()

    snippets = await repo.get_all_with_tags()
    assert [s.title for s in snippets] == ["Second", "First"]

    snippets = await repo.get_all_with_tags(limit=1)
    assert [s.title for s in snippets] == ["Second"]


@pytest.mark.asyncio
async def test_snippet_get_all_with_tags_rejects_unknown_order(test_db):
    """Test: сортировать можно только по created_at/updated_at."""
    with pytest.raises(ValueError, match="Cannot order snippets"):
        await SnippetRepository(test_db).get_all_with_tags(order_by="title")


@pytest.mark.asyncio
async def test_snippet_search_by_tag_substrings(test_db):
    """Test: подстрока в имени тега, OR по терминам, без дубликатов."""
    repo = SnippetRepository(test_db)
    js = await make_snippet(test_db, title="JS")
    java = await make_snippet(test_db, title="Java")
    py = await make_snippet(test_db, title="Py")
    await tag_snippet(test_db, js, "javascript", "web")
    await tag_snippet(test_db, java, "java")
    await tag_snippet(test_db, py, "python")
    await test_db.commit()

    found = await repo.search_by_tag_substrings(["java"])
    assert {s.title for s in found} == {"JS", "Java"}

    found = await repo.search_by_tag_substrings(["web", "pyth"])
    assert {s.title for s in found} == {"JS", "Py"}

    assert await repo.search_by_tag_substrings(["rust"]) == []


@pytest.mark.asyncio
async def test_snippet_get_by_language(test_db):
    """Test: точное совпадение языка."""
    repo = SnippetRepository(test_db)
    await make_snippet(test_db, title="Py", language=Language.PYTHON)
    await make_snippet(test_db, title="Go", language=Language.GO)
    await test_db.commit()

    found = await repo.get_by_language(Language.GO)
    assert [s.title for s in found] == ["Go"]
