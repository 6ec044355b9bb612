"""Настройка пула соединений и фабрики сессий."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from cashier_api.core.config import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Создает асинхронный "движок" с ограниченным пулом соединений.

    Args:
        settings: Настройки приложения.

    Returns:
        Движок SQLAlchemy, владеющий пулом.
    """
    return create_async_engine(
        settings.database_url,
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        # Пересоздаем соединения старше DB_POOL_RECYCLE секунд
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,  # Проверяет "живо" ли соединение перед использованием
        connect_args={"ssl": settings.POSTGRES_SSL_MODE},
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Создает фабрику асинхронных сессий поверх движка.

    Args:
        engine: Движок с пулом соединений.

    Returns:
        Фабрика сессий.
    """
    return async_sessionmaker(
        engine,
        autoflush=False,
        expire_on_commit=False,
        class_=AsyncSession,
    )


async def ping(engine: AsyncEngine) -> None:
    """
    Проверяет доступность БД простым запросом.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: Если БД недоступна.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
