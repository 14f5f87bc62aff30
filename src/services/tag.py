"""Tag service: tag lookup, autocomplete and snippet-tag association."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..models import Tag
from ..repositories import TagRepository
from ..validators import (
    SnippetValidationError,
    normalize_tag_name,
    unique_tag_names,
    validate_tag_format,
    validate_tag_formats,
)

logger = get_logger(__name__)

DEFAULT_PREFIX_LIMIT = 8


class TagService:
    """
    Сервис для работы с тегами.

    Отвечает за:
    - Уникальность тегов по нормализованному имени (create-or-find)
    - Автодополнение по префиксу
    - Связь многие-ко-многим между сниппетами и тегами

    Набор тегов сниппета всегда заменяется целиком (удалить все связи,
    создать новые), без вычисления разницы: тегов не больше пяти.
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса."""
        self.db = db
        self.tag_repo = TagRepository(db)

    async def create_or_find_tag(self, name: str) -> Tag:
        """
        Найти тег по нормализованному имени или создать новый.

        Args:
            name: Имя тега в любом регистре, с пробелами по краям

        Returns:
            Существующий или новый тег

        Raises:
            SnippetValidationError: Если имя пустое, длиннее 30 символов
                или содержит недопустимые символы (это ValueError)

        Пример:
            a = await service.create_or_find_tag("JavaScript")
            b = await service.create_or_find_tag(" javascript ")
            assert a.id == b.id
        """
        result = validate_tag_format(name)
        if not result.valid:
            raise SnippetValidationError([result.error])

        return await self.tag_repo.get_or_create(normalize_tag_name(name))

    async def get_tags_by_prefix(
        self, prefix: str | None, limit: int = DEFAULT_PREFIX_LIMIT
    ) -> list[Tag]:
        """
        Автодополнение тегов.

        Args:
            prefix: Начало имени тега (регистр не важен)
            limit: Максимум результатов

        Returns:
            Теги по алфавиту. Пустой prefix - пустой список,
            чтобы не отдавать клиенту все теги разом.
        """
        if not prefix or not prefix.strip():
            return []

        return await self.tag_repo.get_by_prefix(normalize_tag_name(prefix), limit)

    async def get_tags_by_snippet_id(self, snippet_id: int) -> list[Tag]:
        """Теги сниппета по алфавиту (пустой список, если тегов или сниппета нет)."""
        return await self.tag_repo.get_by_snippet_id(snippet_id)

    async def associate_tags_with_snippet(self, snippet_id: int, names: list[str]) -> list[Tag]:
        """
        Заменить набор тегов сниппета.

        Args:
            snippet_id: ID сниппета
            names: Новые имена тегов (могут повторяться в разном регистре)

        Returns:
            Привязанные теги

        Бизнес-правила:
        1. Все старые связи удаляются
        2. Имена нормализуются, дубликаты схлопываются ("A", "a", " a " -> "a")
        3. Для каждого имени - create-or-find тега и новая связь
        4. Пустой список - у сниппета не остаётся тегов
        5. Пустые имена пропускаются, остальные проверяются на формат
           до любых изменений в БД

        Raises:
            SnippetValidationError: Со всеми тегами недопустимого формата

        Всё выполняется в одном SAVEPOINT: при ошибке на середине
        сниппет остаётся со старым набором тегов, а не с частичным.
        """
        present = [name for name in names if name and name.strip()]
        errors = validate_tag_formats(present)
        if errors:
            raise SnippetValidationError(errors)

        tag_names = unique_tag_names(present)

        async with self.db.begin_nested():
            removed = await self.tag_repo.unlink_all_from_snippet(snippet_id)

            tags = []
            for tag_name in tag_names:
                tag = await self.create_or_find_tag(tag_name)
                await self.tag_repo.link_to_snippet(snippet_id, tag.id)
                tags.append(tag)

        logger.debug(
            "Snippet tags replaced",
            extra={"snippet_id": snippet_id, "removed": removed, "tags": tag_names},
        )
        return tags

    async def remove_tags_from_snippet(self, snippet_id: int) -> int:
        """
        Отвязать все теги от сниппета.

        Связи других сниппетов и сами теги не затрагиваются.

        Returns:
            Количество удалённых связей
        """
        return await self.tag_repo.unlink_all_from_snippet(snippet_id)
