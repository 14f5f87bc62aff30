"""Snippet repository with specific queries."""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models import Language, Snippet, Tag
from .base import BaseRepository

# Допустимые поля сортировки списка сниппетов
ORDERABLE_FIELDS = ("created_at", "updated_at")


class SnippetRepository(BaseRepository[Snippet]):
    """
    Репозиторий для работы со сниппетами.

    Все выборки сразу загружают теги (selectinload), иначе обращение
    к snippet.tag_list в async коде вызвало бы ленивую загрузку.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Snippet, db)

    def _with_tags(self):
        # populate_existing: связи могли поменяться через таблицу snippet_tags
        # в этой же сессии, а объект в identity map об этом не знает
        return (
            select(Snippet)
            .options(selectinload(Snippet.tag_list))
            .execution_options(populate_existing=True)
        )

    async def get_by_id_full(self, id: int) -> Snippet | None:
        """
        Получить сниппет вместе с тегами.

        Использование:
            snippet = await repo.get_by_id_full(1)
            print(snippet.tag_list)  # без дополнительного запроса
        """
        result = await self.db.execute(self._with_tags().where(Snippet.id == id))
        return result.scalar_one_or_none()

    async def get_all_with_tags(
        self, order_by: str = "created_at", skip: int = 0, limit: int | None = None
    ) -> list[Snippet]:
        """
        Все сниппеты, новые первыми.

        Args:
            order_by: "created_at" или "updated_at"
            skip: Пропустить N записей
            limit: Максимум записей (None - без ограничения)

        При одинаковом времени порядок определяет id (больший - новее).

        SQL эквивалент:
            SELECT * FROM snippets ORDER BY created_at DESC, id DESC;
        """
        if order_by not in ORDERABLE_FIELDS:
            raise ValueError(f"Cannot order snippets by '{order_by}'")

        column = getattr(Snippet, order_by)
        query = self._with_tags().order_by(column.desc(), Snippet.id.desc()).offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def search_by_tag_substrings(self, terms: list[str]) -> list[Snippet]:
        """
        Сниппеты, у которых хотя бы одно имя тега содержит любую из подстрок.

        Подстрока, а не точное совпадение: "java" найдёт и "javascript".

        SQL эквивалент:
            SELECT * FROM snippets s
            WHERE EXISTS (
                SELECT 1 FROM snippet_tags st JOIN tags t ON t.id = st.tag_id
                WHERE st.snippet_id = s.id
                  AND (t.name LIKE '%{term1}%' OR t.name LIKE '%{term2}%')
            )
            ORDER BY updated_at DESC;
        """
        conditions = [Tag.name.contains(term, autoescape=True) for term in terms]
        result = await self.db.execute(
            self._with_tags()
            .where(Snippet.tag_list.any(or_(*conditions)))
            .order_by(Snippet.updated_at.desc(), Snippet.id.desc())
        )
        return list(result.scalars().all())

    async def get_by_language(self, language: Language) -> list[Snippet]:
        """
        Сниппеты одного языка, недавно изменённые первыми.

        SQL эквивалент:
            SELECT * FROM snippets WHERE language = {language}
            ORDER BY updated_at DESC, id DESC;
        """
        result = await self.db.execute(
            self._with_tags()
            .where(Snippet.language == language)
            .order_by(Snippet.updated_at.desc(), Snippet.id.desc())
        )
        return list(result.scalars().all())
