"""Tag repository with specific queries."""

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..models import Tag, snippet_tags
from .base import BaseRepository

logger = get_logger(__name__)


class TagRepository(BaseRepository[Tag]):
    """
    Репозиторий для работы с тегами и таблицей связей snippet_tags.

    Все имена сюда приходят уже нормализованными (trim + lowercase),
    нормализацией занимается TagService.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Tag, db)

    async def get_by_name(self, name: str) -> Tag | None:
        """
        Получить тег по точному имени.

        SQL эквивалент:
            SELECT * FROM tags WHERE name = {name};
        """
        result = await self.db.execute(select(Tag).where(Tag.name == name))
        return result.scalar_one_or_none()

    async def get_or_create(self, name: str) -> Tag:
        """
        Получить тег по имени или создать, если не существует.

        Проверка "есть ли тег" + INSERT не атомарны: два запроса могут
        одновременно не найти тег и оба попытаться его создать.
        Поэтому INSERT выполняется внутри SAVEPOINT, а нарушение
        UNIQUE(name) означает, что тег уже создал кто-то другой -
        откатываем SAVEPOINT и читаем существующую строку.

        Пример:
            tag = await repo.get_or_create("python")
        """
        tag = await self.get_by_name(name)
        if tag:
            return tag

        try:
            async with self.db.begin_nested():
                tag = Tag(name=name)
                self.db.add(tag)
        except IntegrityError:
            tag = await self.get_by_name(name)
            if tag is None:
                # Нарушено не UNIQUE, а другое ограничение (например, длина)
                logger.warning("Tag insert violated a constraint", extra={"tag": name})
                raise
            logger.info("Tag created concurrently, reusing existing row", extra={"tag": name})
            return tag

        await self.db.refresh(tag)
        return tag

    async def get_by_prefix(self, prefix: str, limit: int = 8) -> list[Tag]:
        """
        Теги, имя которых начинается с prefix, по алфавиту.

        autoescape=True экранирует % и _ в prefix,
        иначе "_" (допустимый символ тега) работал бы как wildcard.

        SQL эквивалент:
            SELECT * FROM tags WHERE name LIKE '{prefix}%' ESCAPE '/'
            ORDER BY name LIMIT {limit};
        """
        result = await self.db.execute(
            select(Tag)
            .where(Tag.name.startswith(prefix, autoescape=True))
            .order_by(Tag.name)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_by_snippet_id(self, snippet_id: int) -> list[Tag]:
        """
        Все теги сниппета по алфавиту.

        SQL эквивалент:
            SELECT t.* FROM tags t
            JOIN snippet_tags st ON t.id = st.tag_id
            WHERE st.snippet_id = {snippet_id}
            ORDER BY t.name;
        """
        result = await self.db.execute(
            select(Tag)
            .join(snippet_tags, Tag.id == snippet_tags.c.tag_id)
            .where(snippet_tags.c.snippet_id == snippet_id)
            .order_by(Tag.name)
        )
        return list(result.scalars().all())

    async def link_to_snippet(self, snippet_id: int, tag_id: int) -> None:
        """
        Создать связь сниппет-тег.

        SQL эквивалент:
            INSERT INTO snippet_tags (snippet_id, tag_id) VALUES (...);
        """
        await self.db.execute(insert(snippet_tags).values(snippet_id=snippet_id, tag_id=tag_id))

    async def unlink_all_from_snippet(self, snippet_id: int) -> int:
        """
        Удалить все связи сниппета с тегами (сами теги остаются).

        Returns:
            Количество удалённых связей
        """
        result = await self.db.execute(
            delete(snippet_tags).where(snippet_tags.c.snippet_id == snippet_id)
        )
        return result.rowcount
