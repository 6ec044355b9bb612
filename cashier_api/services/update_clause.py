"""Построение SET-части запроса UPDATE для частичного обновления товара."""

from dataclasses import dataclass
from typing import Any

from cashier_api.services.requests import UPDATABLE_FIELDS, UpdateRequest

# Только эти фрагменты попадают в текст запроса, значения идут параметрами
_ASSIGNMENTS = {field: f"{field} = :{field}" for field in UPDATABLE_FIELDS}
REFRESH_ASSIGNMENT = "updated_at = :updated_at"


@dataclass(frozen=True)
class UpdateClause:
    """
    Результат построения SET-части.

    Атрибуты:
        fields: Обновляемые поля в порядке name, price, stock.
        assignments: Фрагменты присваивания; последний всегда обновляет
                     updated_at.
        values: Значения полей, параллельно fields.
    """

    fields: tuple[str, ...]
    assignments: tuple[str, ...]
    values: tuple[Any, ...]

    @property
    def set_clause(self) -> str:
        return ", ".join(self.assignments)

    def parameters(self, **statement_params: Any) -> dict[str, Any]:
        """
        Собирает словарь параметров для выполнения запроса.

        Args:
            statement_params: Параметры уровня запроса (id, updated_at).

        Returns:
            Значения полей вместе с параметрами запроса.
        """
        params = dict(zip(self.fields, self.values, strict=True))
        params.update(statement_params)
        return params


def build_update_clause(request: UpdateRequest) -> UpdateClause:
    """
    Строит минимальную SET-часть по переданным полям запроса.

    Без переданных полей результат содержит только обновление updated_at.

    Args:
        request: Провалидированный запрос на обновление.

    Returns:
        Фрагменты присваивания и значения для привязки.
    """
    present = request.present_fields()
    fields = tuple(field for field, _ in present)
    return UpdateClause(
        fields=fields,
        assignments=tuple(_ASSIGNMENTS[field] for field in fields)
        + (REFRESH_ASSIGNMENT,),
        values=tuple(value for _, value in present),
    )
