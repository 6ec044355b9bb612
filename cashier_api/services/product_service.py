"""Сервисный слой для хранения товаров."""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from decimal import Decimal

from sqlalchemy import bindparam, delete, exists, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import col, select

from cashier_api.core.exceptions import (
    ProductNotFound,
    StoreConstraintViolation,
    TransientFailure,
)
from cashier_api.db.models import Product, utcnow
from cashier_api.services.update_clause import UpdateClause

_PRODUCT_COLUMNS = Product.__table__.c  # type: ignore[attr-defined]


class ProductGateway:
    """
    Доступ к таблице products через пул соединений.

    На каждую операцию берется отдельная короткая сессия, поэтому
    один экземпляр безопасно разделять между запросами.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, failure_message: str) -> AsyncIterator[AsyncSession]:
        """
        Открывает сессию и переводит ошибки хранилища в TransientFailure.

        Args:
            failure_message: Текст ошибки для клиента.
        """
        try:
            async with self._session_factory() as session:
                yield session
        except IntegrityError as e:
            logging.warning("Storage constraint rejected a product row: %s", e.orig)
            raise StoreConstraintViolation(failure_message) from e
        except (SQLAlchemyError, OSError) as e:
            logging.exception("Storage failure: %s", failure_message)
            raise TransientFailure(failure_message) from e

    async def list_all(self) -> Sequence[Product]:
        """
        Возвращает все товары, сначала самые новые.

        Returns:
            Последовательность объектов Product (может быть пустой).
        """
        statement = select(Product).order_by(
            col(Product.created_at).desc(), col(Product.id).desc()
        )
        async with self._session("Failed to fetch products") as session:
            result = await session.execute(statement)
            return result.scalars().all()

    async def get_by_id(self, product_id: int) -> Product:
        """
        Находит товар по ID.

        Raises:
            ProductNotFound: Если товара нет.
        """
        async with self._session("Failed to fetch product") as session:
            product = await _fetch(session, product_id)
        if product is None:
            raise ProductNotFound()
        return product

    async def create(self, name: str, price: Decimal, stock: int) -> Product:
        """
        Создает новый товар в базе данных.

        ID и обе метки времени назначает хранилище; при создании
        created_at и updated_at совпадают.

        Args:
            name: Название товара.
            price: Цена.
            stock: Начальный остаток.

        Returns:
            Созданный объект товара.
        """
        now = utcnow()
        db_product = Product(
            name=name, price=price, stock=stock, created_at=now, updated_at=now
        )
        async with self._session("Failed to create product") as session:
            session.add(db_product)
            await session.commit()
            await session.refresh(db_product)
        return db_product

    async def exists_by_id(self, product_id: int) -> bool:
        """Проверяет, существует ли товар с таким ID."""
        statement = select(exists().where(col(Product.id) == product_id))
        async with self._session("Failed to fetch product") as session:
            result = await session.execute(statement)
            return bool(result.scalar())

    async def update(self, product_id: int, clause: UpdateClause) -> Product:
        """
        Применяет SET-часть к товару и возвращает его новое состояние.

        Ноль затронутых строк означает, что товар удалили между проверкой
        существования и обновлением.

        Args:
            product_id: ID товара.
            clause: Результат build_update_clause.

        Returns:
            Обновленный объект Product.

        Raises:
            ProductNotFound: Если строка не была обновлена.
        """
        statement = text(
            f"UPDATE products SET {clause.set_clause} WHERE id = :id"  # noqa: S608
        ).bindparams(
            *(
                bindparam(name, type_=_PRODUCT_COLUMNS[name].type)
                for name in (*clause.fields, "updated_at", "id")
            )
        )
        params = clause.parameters(id=product_id, updated_at=utcnow())

        async with self._session("Failed to update product") as session:
            result = await session.execute(statement, params)
            if result.rowcount == 0:  # type: ignore[attr-defined]
                await session.rollback()
                logging.warning("Product %s disappeared before update", product_id)
                raise ProductNotFound()
            await session.commit()
            product = await _fetch(session, product_id)

        if product is None:
            raise ProductNotFound()
        return product

    async def delete(self, product_id: int) -> int:
        """
        Удаляет товар безвозвратно.

        Returns:
            ID удаленного товара.

        Raises:
            ProductNotFound: Если строка не была удалена.
        """
        statement = delete(Product).where(col(Product.id) == product_id)
        async with self._session("Failed to delete product") as session:
            result = await session.execute(statement)
            if result.rowcount == 0:  # type: ignore[attr-defined]
                await session.rollback()
                logging.warning("Product %s disappeared before delete", product_id)
                raise ProductNotFound()
            await session.commit()
        return product_id


async def _fetch(session: AsyncSession, product_id: int) -> Product | None:
    statement = select(Product).where(col(Product.id) == product_id)
    result = await session.execute(statement)
    return result.scalar_one_or_none()
