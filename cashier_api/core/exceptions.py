"""Иерархия ошибок сервиса и их HTTP-статусы."""


class CashierError(Exception):
    """
    Базовая ошибка сервиса.

    Атрибуты:
        status_code: HTTP-статус, которым отвечает API.
        message: Текст, который безопасно показать клиенту.
    """

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedInput(CashierError):
    """Не удалось разобрать идентификатор или тело запроса."""

    status_code = 400


class ValidationError(CashierError):
    """Поля запроса нарушают бизнес-правила."""

    status_code = 400


class ProductNotFound(CashierError):
    """Товар с указанным ID отсутствует."""

    status_code = 404

    def __init__(self, message: str = "Product not found") -> None:
        super().__init__(message)


class TransientFailure(CashierError):
    """
    Сбой хранилища: недоступность БД или неожиданная ошибка драйвера.

    Текст исходной ошибки в message не попадает, только в лог.
    """

    status_code = 500


class StoreConstraintViolation(TransientFailure):
    """Хранилище отклонило строку по ограничению (CHECK, NOT NULL)."""
