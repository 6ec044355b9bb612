"""Входные данные операций над товарами."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Final


class Absent:
    """Маркер поля, которое клиент не передал."""

    _instance: "Absent | None" = None

    def __new__(cls) -> "Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Final = Absent()

# Порядок полей фиксирован: от него зависят позиции параметров в UPDATE
UPDATABLE_FIELDS: Final = ("name", "price", "stock")


@dataclass(frozen=True)
class CreateRequest:
    """Запрос на создание товара."""

    name: str
    price: Decimal
    stock: int = 0


@dataclass(frozen=True)
class UpdateRequest:
    """
    Запрос на частичное обновление товара.

    Каждое поле либо ABSENT (не передано), либо несет новое значение.
    Значения 0 и "" считаются переданными.
    """

    name: str | Absent = ABSENT
    price: Decimal | Absent = ABSENT
    stock: int | Absent = ABSENT

    def present_fields(self) -> list[tuple[str, Any]]:
        """
        Возвращает переданные поля в порядке UPDATABLE_FIELDS.

        Returns:
            Список пар (поле, значение).
        """
        return [
            (field, getattr(self, field))
            for field in UPDATABLE_FIELDS
            if getattr(self, field) is not ABSENT
        ]
