"""Проверка бизнес-правил для запросов создания и обновления товара."""

from decimal import Decimal

from cashier_api.core.exceptions import ValidationError
from cashier_api.services.requests import Absent, CreateRequest, UpdateRequest

NAME_MAX_LENGTH = 100
# Вместимость колонки NUMERIC(10, 2)
PRICE_MAX = Decimal("99999999.99")
PRICE_STEP = Decimal("0.01")
# Диапазон колонки INTEGER
INT_MAX = 2_147_483_647


def _check_name(name: str) -> None:
    if not name.strip():
        raise ValidationError("name must not be empty")
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError(
            f"name must be at most {NAME_MAX_LENGTH} characters long"
        )


def _check_price(price: Decimal) -> None:
    if price <= 0:
        raise ValidationError("price must be greater than 0")
    if price > PRICE_MAX:
        raise ValidationError(f"price must not exceed {PRICE_MAX}")
    if price != price.quantize(PRICE_STEP):
        raise ValidationError("price must have at most 2 decimal places")


def _check_stock(stock: int) -> None:
    if stock < 0:
        raise ValidationError("stock must be greater than or equal to 0")
    if stock > INT_MAX:
        raise ValidationError(f"stock must not exceed {INT_MAX}")


def validate_create(request: CreateRequest) -> None:
    """
    Проверяет запрос на создание товара.

    Args:
        request: Запрос на создание.

    Raises:
        ValidationError: Если пустое или слишком длинное название,
                         неположительная цена, цена с долями копейки
                         или остаток вне диапазона INTEGER.
    """
    _check_name(request.name)
    _check_price(request.price)
    _check_stock(request.stock)


def validate_update(request: UpdateRequest) -> None:
    """
    Проверяет только переданные поля запроса на обновление.

    Запрос без полей корректен: он лишь обновит updated_at.

    Raises:
        ValidationError: Если переданное поле нарушает правило.
    """
    if not isinstance(request.name, Absent):
        _check_name(request.name)
    if not isinstance(request.price, Absent):
        _check_price(request.price)
    if not isinstance(request.stock, Absent):
        _check_stock(request.stock)
