"""Схемы тел запросов и ответов API товаров."""

import datetime
from decimal import Decimal
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictInt,
    StrictStr,
    field_serializer,
    field_validator,
)

from cashier_api.core.exceptions import MalformedInput
from cashier_api.services.requests import CreateRequest, UpdateRequest


def _json_number_to_decimal(value: Any) -> Any:
    """
    Принимает цену только как JSON-число.

    Строки и true/false отклоняются, float переводится в Decimal
    через str, чтобы 1.1 не превратилось в 1.100000000000000088...

    Raises:
        ValueError: Если значение не число.
    """
    if value is None:
        return value
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError("must be a JSON number")
    return Decimal(str(value))


class CreateProductPayload(BaseModel):
    """Тело POST /products."""

    name: StrictStr
    price: Decimal
    stock: StrictInt = 0

    @field_validator("price", mode="before")
    @classmethod
    def price_must_be_number(cls, value: Any) -> Any:
        return _json_number_to_decimal(value)

    def to_request(self) -> CreateRequest:
        """Переводит тело в CreateRequest для слоя проверки."""
        return CreateRequest(name=self.name, price=self.price, stock=self.stock)


class UpdateProductPayload(BaseModel):
    """
    Тело PUT /products/{id}.

    Отличить "поле не передано" от переданного значения позволяет
    model_fields_set, а не значение по умолчанию.
    """

    name: StrictStr | None = None
    price: Decimal | None = None
    stock: StrictInt | None = None

    @field_validator("price", mode="before")
    @classmethod
    def price_must_be_number(cls, value: Any) -> Any:
        return _json_number_to_decimal(value)

    def to_request(self) -> UpdateRequest:
        """
        Переводит тело в UpdateRequest, сохраняя только переданные поля.

        Raises:
            MalformedInput: Если поле передано как null.
        """
        present: dict[str, Any] = {}
        for field in sorted(self.model_fields_set):
            value = getattr(self, field)
            if value is None:
                raise MalformedInput(f"{field}: must not be null")
            present[field] = value
        return UpdateRequest(**present)


class ProductRead(BaseModel):
    """Товар в ответах API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: Decimal
    stock: int
    created_at: datetime.datetime
    updated_at: datetime.datetime

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        """Отдает цену JSON-числом, а не строкой."""
        return float(price)


class ProductList(BaseModel):
    """Ответ GET /products: товары и их количество."""

    products: list[ProductRead]
    count: int


class ProductEnvelope(BaseModel):
    """Ответ создания и обновления: сообщение и товар."""

    message: str
    product: ProductRead


class ProductDeleted(BaseModel):
    """Подтверждение удаления с ID товара."""

    message: str
    id: int
