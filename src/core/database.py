"""Database client: engine lifecycle and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from .config import Settings
from .logging import get_logger

logger = get_logger(__name__)


def _is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def _is_memory_sqlite(url: str) -> bool:
    database = make_url(url).database
    return not database or database == ":memory:"


class Database:
    """
    Клиент хранилища с явным жизненным циклом.

    Вместо глобального engine на уровне модуля приложение (и тесты)
    создают свой экземпляр Database:

        db = Database("sqlite+aiosqlite:///./data/snippets.db")
        await db.init_db()
        async with db.session() as session:
            ...
        await db.close()

    Engine создаётся лениво при первом обращении. После close()
    клиент можно использовать снова - engine будет создан заново.
    """

    def __init__(self, url: str, echo: bool = False):
        """
        Args:
            url: Строка подключения SQLAlchemy (async драйвер)
            echo: Выводить SQL запросы в лог
        """
        self.url = url
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Создать клиент из настроек приложения."""
        return cls(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

    # =========================================================================
    # Engine lifecycle
    # =========================================================================

    def _open(self) -> None:
        self._engine = self._create_engine()
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.debug("Database engine created", extra={"backend": self.backend})

    @property
    def engine(self) -> AsyncEngine:
        """Async engine (создаётся при первом обращении)."""
        if self._engine is None:
            self._open()
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Фабрика сессий, привязанная к текущему engine."""
        if self._session_factory is None:
            self._open()
        return self._session_factory

    @property
    def backend(self) -> str:
        return make_url(self.url).get_backend_name()

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def _create_engine(self) -> AsyncEngine:
        if not _is_sqlite(self.url):
            # PostgreSQL: без пула соединений, как и раньше
            return create_async_engine(self.url, echo=self.echo, poolclass=NullPool)

        if _is_memory_sqlite(self.url):
            # In-memory БД живёт только в одном соединении
            engine = create_async_engine(
                self.url,
                echo=self.echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            self._ensure_sqlite_directory()
            engine = create_async_engine(
                self.url,
                echo=self.echo,
                connect_args={"check_same_thread": False},
            )

        self._install_sqlite_hooks(engine)
        return engine

    def _ensure_sqlite_directory(self) -> None:
        database = make_url(self.url).database
        if database:
            Path(database).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _install_sqlite_hooks(engine: AsyncEngine) -> None:
        """
        Настройка SQLite соединений.

        1. PRAGMA foreign_keys=ON - без неё ON DELETE CASCADE не работает
        2. isolation_level=None + явный BEGIN - рецепт из документации SQLAlchemy,
           иначе драйвер pysqlite сам управляет транзакциями и SAVEPOINT
           (begin_nested) ведёт себя некорректно.
        """

        @event.listens_for(engine.sync_engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine.sync_engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN")

    async def close(self) -> None:
        """Закрыть все соединения. Повторный вызов безопасен."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.debug("Database engine disposed", extra={"backend": self.backend})
        self._engine = None
        self._session_factory = None

    async def reconfigure(self, url: str, echo: bool | None = None) -> None:
        """
        Переключить клиент на другую базу данных.

        Текущий engine закрывается, новый будет создан при следующем обращении.
        """
        await self.close()
        self.url = url
        if echo is not None:
            self.echo = echo

    # =========================================================================
    # Sessions
    # =========================================================================

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Сессия = одна транзакция.

        - commit() при успешном выходе из блока
        - rollback() при любой ошибке (исключение пробрасывается дальше)

        Использование:
            async with db.session() as session:
                service = SnippetService(session)
                await service.create_snippet(...)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    # =========================================================================
    # Schema
    # =========================================================================

    async def init_db(self) -> None:
        """Создать все таблицы."""
        from ..models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_db(self) -> None:
        """Удалить все таблицы (use with caution!)."""
        from ..models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
