"""Модели базы данных проекта."""

import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime.datetime:
    """
    Текущее время в UTC.

    Returns:
        datetime с tzinfo=UTC.
    """
    return datetime.datetime.now(datetime.UTC)


class Product(SQLModel, table=True):
    """Модель товара кассы."""

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_products_price_positive"),
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    )

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(index=True, max_length=100)
    price: Decimal = Field(index=True, max_digits=10, decimal_places=2)
    stock: int = Field(default=0)
    created_at: datetime.datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True)
    )
    updated_at: datetime.datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True)
    )
