"""
Скрипт для инициализации базы данных.

Создаёт все таблицы напрямую через SQLAlchemy (по DATABASE_URL из настроек).
Используется для разработки вместо Alembic миграций.
"""

import asyncio

from src.core.config import settings
from src.core.database import Database


async def main():
    """Создать все таблицы."""
    database = Database.from_settings(settings)
    print(f"Создание таблиц ({database.backend})...")
    try:
        await database.init_db()
    finally:
        await database.close()
    print("✓ Таблицы созданы успешно!")


if __name__ == "__main__":
    asyncio.run(main())
