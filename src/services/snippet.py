"""Snippet service with business logic."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..models import Language, Snippet, UnsupportedLanguageError, utc_now
from ..repositories import SnippetRepository
from ..validators import (
    SnippetValidationError,
    normalize_line_endings,
    normalize_tag_name,
    validate_snippet_data,
    validate_snippet_update,
    validate_tag_formats,
)
from .tag import TagService

logger = get_logger(__name__)


def _present_tags(tags: list[str] | None) -> list[str]:
    # пустые имена тегов пропускаются при привязке, формат проверяем у остальных
    return [tag for tag in tags or () if tag and tag.strip()]


class SnippetService:
    """
    Сервис для работы со сниппетами.

    Координирует:
    - Валидацию полей (validators)
    - Хранение сниппетов (SnippetRepository)
    - Теги (TagService)

    Сервис не делает commit(): каждая операция записи выполняется
    в SAVEPOINT, а общую транзакцию закрывает Database.session()
    (или get_db dependency в API).
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса с репозиторием и сервисом тегов."""
        self.db = db
        self.snippet_repo = SnippetRepository(db)
        self.tag_service = TagService(db)

    async def create_snippet(
        self,
        title: str | None,
        content: str | None,
        language: str | Language | None,
        tags: list[str] | None,
    ) -> Snippet:
        """
        Создать сниппет с тегами.

        Args:
            title: Заголовок (1-100 символов)
            content: Код (1-50 000 символов), переводы строк приводятся к LF
            language: Id языка без учёта регистра ("Python" -> "python")
            tags: Имена тегов, хотя бы одно

        Returns:
            Созданный сниппет с загруженными тегами

        Raises:
            SnippetValidationError: Со списком ВСЕХ ошибок валидации

        Вставка сниппета и привязка тегов - одна операция: если привязка
        тегов упадёт, сниппет тоже не сохранится.
        """
        # 1. ВАЛИДАЦИЯ: все поля разом, до обращения к БД
        errors = validate_snippet_data(title, content, language, tags)
        errors += validate_tag_formats(_present_tags(tags))
        if errors:
            raise SnippetValidationError(errors)

        # 2. СОЗДАНИЕ + КООРДИНАЦИЯ: сниппет и теги в одном SAVEPOINT
        async with self.db.begin_nested():
            snippet = Snippet(
                title=title,
                content=normalize_line_endings(content),
                language=Language.parse(language),
            )
            snippet = await self.snippet_repo.create(snippet)
            await self.tag_service.associate_tags_with_snippet(snippet.id, tags)

        logger.info(
            "Snippet created",
            extra={
                "snippet_id": snippet.id,
                "language": snippet.language.value,
                "tag_count": len({normalize_tag_name(t) for t in tags}),
            },
        )

        # 3. ЗАГРУЗКА: вернуть сниппет вместе с тегами
        return await self.snippet_repo.get_by_id_full(snippet.id)

    async def get_snippet_by_id(self, snippet_id: int) -> Snippet | None:
        """
        Получить сниппет с тегами.

        Returns:
            Сниппет или None, если не найден ("не найден" - не ошибка)
        """
        return await self.snippet_repo.get_by_id_full(snippet_id)

    async def get_all_snippets(
        self, order_by: str = "created_at", skip: int = 0, limit: int | None = None
    ) -> list[Snippet]:
        """
        Все сниппеты с тегами, новые первыми.

        Args:
            order_by: "created_at" (по умолчанию) или "updated_at"
            skip: Пропустить N записей
            limit: Максимум записей

        При одинаковом времени создания новее тот, у кого больше id.
        """
        return await self.snippet_repo.get_all_with_tags(order_by=order_by, skip=skip, limit=limit)

    async def update_snippet(
        self,
        snippet_id: int,
        title: str | None = None,
        content: str | None = None,
        language: str | Language | None = None,
        tags: list[str] | None = None,
    ) -> Snippet | None:
        """
        Частичное обновление сниппета.

        Args:
            snippet_id: ID сниппета
            title: Новый заголовок (None - не менять)
            content: Новый код (None - не менять)
            language: Новый язык (None - не менять)
            tags: Новый набор тегов; None - не менять, [] - убрать все теги

        Returns:
            Обновлённый сниппет или None, если сниппета нет

        Raises:
            SnippetValidationError: Если переданные поля не прошли валидацию

        Бизнес-правила:
        1. Проверяются только переданные поля
        2. Теги заменяются целиком, а не дополняются
        3. updated_at меняется при любом обновлении, в том числе только тегов
        """
        # 1. ВАЛИДАЦИЯ: только переданные поля
        errors = validate_snippet_update(title, content, language)
        errors += validate_tag_formats(_present_tags(tags))
        if errors:
            raise SnippetValidationError(errors)

        # 2. ПРОВЕРКА: сниппет существует
        snippet = await self.snippet_repo.get_by_id(snippet_id)
        if not snippet:
            return None

        # 3. ОБНОВЛЕНИЕ: поля и теги в одном SAVEPOINT
        async with self.db.begin_nested():
            if title is not None:
                snippet.title = title
            if content is not None:
                snippet.content = normalize_line_endings(content)
            if language is not None:
                snippet.language = Language.parse(language)
            snippet.updated_at = utc_now()

            if tags is not None:
                await self.tag_service.associate_tags_with_snippet(snippet_id, tags)

        logger.info(
            "Snippet updated",
            extra={"snippet_id": snippet_id, "tags_replaced": tags is not None},
        )

        return await self.snippet_repo.get_by_id_full(snippet_id)

    async def delete_snippet(self, snippet_id: int) -> bool:
        """
        Удалить сниппет и его связи с тегами.

        Returns:
            True если удалён, False если такого сниппета не было

        Связи удаляются явно, не полагаясь только на ON DELETE CASCADE.
        Сами теги остаются для повторного использования.
        """
        async with self.db.begin_nested():
            await self.tag_service.remove_tags_from_snippet(snippet_id)
            deleted = await self.snippet_repo.delete(snippet_id)

        if deleted:
            logger.info("Snippet deleted", extra={"snippet_id": snippet_id})
        return deleted

    async def search_by_tags(self, tag_names: list[str]) -> list[Snippet]:
        """
        Поиск сниппетов по тегам (OR, подстрока).

        Args:
            tag_names: Искомые подстроки имён тегов

        Returns:
            Сниппеты, где хоть один тег содержит хоть одну подстроку,
            недавно изменённые первыми

        Внимание: совпадение по подстроке, "java" найдёт и "javascript".
        Пустые строки игнорируются; если не осталось ни одной - пустой результат.
        """
        terms = [normalize_tag_name(name) for name in tag_names if name and name.strip()]
        if not terms:
            return []

        return await self.snippet_repo.search_by_tag_substrings(terms)

    async def filter_by_language(self, language: str | Language) -> list[Snippet]:
        """
        Сниппеты одного языка, недавно изменённые первыми.

        Args:
            language: Id языка без учёта регистра

        Returns:
            Список сниппетов; для неизвестного языка - пустой список
        """
        try:
            parsed = Language.parse(language)
        except UnsupportedLanguageError:
            return []

        return await self.snippet_repo.get_by_language(parsed)
