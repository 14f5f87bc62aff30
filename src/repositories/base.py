"""Base repository with common CRUD operations."""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import Base

# TypeVar для Generic класса - позволяет работать с любой моделью
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Базовый репозиторий с CRUD операциями.

    Репозиторий никогда не делает commit(): только flush().
    Границы транзакции определяет вызывающий код (сервис или Database.session()).

    Пример использования:
        tag_repo = BaseRepository[Tag](Tag, session)
        tag = await tag_repo.get_by_id(1)
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        """
        Args:
            model: Класс модели SQLAlchemy (Snippet, Tag)
            db: Асинхронная сессия базы данных
        """
        self.model = model
        self.db = db

    async def create(self, obj: ModelType) -> ModelType:
        """
        Создать новую запись в БД.

        Returns:
            Созданный объект с заполненным ID и timestamps
        """
        self.db.add(obj)
        await self.db.flush()  # flush() отправляет INSERT, но не commit
        await self.db.refresh(obj)  # подтягиваем id и значения по умолчанию
        return obj

    async def get_by_id(self, id: int) -> ModelType | None:
        """
        Получить объект по ID.

        SQL эквивалент:
            SELECT * FROM table WHERE id = {id} LIMIT 1;
        """
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[ModelType]:
        """
        Получить все записи с пагинацией.

        SQL эквивалент:
            SELECT * FROM table OFFSET {skip} LIMIT {limit};
        """
        result = await self.db.execute(
            select(self.model).order_by(self.model.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def update(self, id: int, **kwargs: Any) -> ModelType | None:
        """
        Обновить запись по ID (только переданные поля).

        Returns:
            Обновлённый объект или None, если не найден

        SQL эквивалент:
            UPDATE table SET field1=value1, field2=value2 WHERE id={id};
        """
        obj = await self.get_by_id(id)
        if not obj:
            return None

        for key, value in kwargs.items():
            if hasattr(obj, key):
                setattr(obj, key, value)

        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, id: int) -> bool:
        """
        Удалить запись по ID.

        Returns:
            True если удалено, False если не найдено

        SQL эквивалент:
            DELETE FROM table WHERE id={id};
        """
        result = await self.db.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0

    async def exists(self, id: int) -> bool:
        """
        Проверить существование записи.

        SQL эквивалент:
            SELECT EXISTS(SELECT 1 FROM table WHERE id={id});
        """
        query = select(self.model.id).where(self.model.id == id).exists()
        result = await self.db.execute(select(query))
        return bool(result.scalar())

    async def count(self) -> int:
        """
        Подсчитать количество записей.

        SQL эквивалент:
            SELECT COUNT(*) FROM table;
        """
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()
