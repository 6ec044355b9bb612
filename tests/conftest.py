"""Конфигурация и фикстуры для тестов Pytest."""

import datetime
from collections.abc import AsyncGenerator, Callable

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from cashier_api.db import models  # noqa: F401
from cashier_api.handlers.products import get_product_gateway
from cashier_api.main import create_app
from cashier_api.services import product_service
from cashier_api.services.product_service import ProductGateway

# Используем асинхронный драйвер для SQLite для тестов
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Фикстура для создания чистой in-memory БД на каждый тест.
    """
    async_engine = create_async_engine(
        TEST_DATABASE_URL, echo=False, poolclass=StaticPool
    )
    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield async_engine

    await async_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Фикстура, создающая фабрику сессий для тестов.
    """
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
        class_=AsyncSession,
    )


@pytest.fixture
def gateway(session_factory: async_sessionmaker[AsyncSession]) -> ProductGateway:
    return ProductGateway(session_factory)


@pytest.fixture
def advance_clock(monkeypatch: pytest.MonkeyPatch) -> Callable[[float], None]:
    """
    Фикстура, фиксирующая часы шлюза.

    Возвращает функцию, сдвигающую текущее время на заданное число секунд.
    """
    now = [datetime.datetime(2026, 1, 1, 12, 0, tzinfo=datetime.UTC)]
    monkeypatch.setattr(product_service, "utcnow", lambda: now[0])

    def advance(seconds: float) -> None:
        now[0] += datetime.timedelta(seconds=seconds)

    return advance


@pytest.fixture
def app(gateway: ProductGateway) -> FastAPI:
    """
    Приложение без lifespan: шлюз подменяется через dependency_overrides.
    """
    application = create_app()
    application.dependency_overrides[get_product_gateway] = lambda: gateway
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as http_client:
        yield http_client
