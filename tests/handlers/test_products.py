"""Тесты HTTP-обработчиков товаров."""

from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from cashier_api.core.exceptions import ProductNotFound, TransientFailure
from cashier_api.handlers.products import get_product_gateway


async def create_pen(client: AsyncClient) -> int:
    """Хелпер: создает товар Pen и возвращает его ID."""
    response = await client.post(
        "/products", json={"name": "Pen", "price": 1.5, "stock": 10}
    )
    assert response.status_code == 201
    product_id: int = response.json()["product"]["id"]
    return product_id


async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Cashier API is running"}


async def test_pen_full_scenario(client: AsyncClient) -> None:
    """Создание, частичное обновление, удаление и повторное чтение товара."""
    response = await client.post(
        "/products", json={"name": "Pen", "price": 1.5, "stock": 10}
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Product created successfully"
    product = body["product"]
    assert product["id"] >= 1
    assert product["price"] == 1.5
    assert product["stock"] == 10
    assert product["created_at"] == product["updated_at"]

    product_id = product["id"]
    response = await client.put(f"/products/{product_id}", json={"price": 2.0})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Product updated successfully"
    assert body["product"]["price"] == 2.0
    assert body["product"]["stock"] == 10
    assert body["product"]["name"] == "Pen"

    response = await client.delete(f"/products/{product_id}")
    assert response.status_code == 200
    assert response.json() == {
        "message": "Product deleted successfully",
        "id": product_id,
    }

    response = await client.get(f"/products/{product_id}")
    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


async def test_list_products(client: AsyncClient) -> None:
    response = await client.get("/products")
    assert response.status_code == 200
    assert response.json() == {"products": [], "count": 0}

    await create_pen(client)
    await client.post("/products", json={"name": "Pencil", "price": 0.5})

    response = await client.get("/products")
    body = response.json()
    assert body["count"] == 2
    assert [p["name"] for p in body["products"]] == ["Pencil", "Pen"]
    assert body["products"][0]["stock"] == 0


async def test_get_product(client: AsyncClient) -> None:
    product_id = await create_pen(client)

    response = await client.get(f"/products/{product_id}")

    assert response.status_code == 200
    assert response.json()["name"] == "Pen"


@pytest.mark.parametrize("raw_id", ["abc", "0", "-1", "1.5", "99999999999"])
async def test_malformed_id_is_rejected(client: AsyncClient, raw_id: str) -> None:
    for method in ("GET", "PUT", "DELETE"):
        response = await client.request(method, f"/products/{raw_id}", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid product ID"}


@pytest.mark.parametrize(
    ("payload", "error"),
    [
        ({"name": "", "price": 1.5}, "name must not be empty"),
        (
            {"name": "x" * 101, "price": 1.5},
            "name must be at most 100 characters long",
        ),
        ({"name": "Pen", "price": 0}, "price must be greater than 0"),
        (
            {"name": "Pen", "price": 1, "stock": -1},
            "stock must be greater than or equal to 0",
        ),
        (
            {"name": "Pen", "price": 0.001},
            "price must have at most 2 decimal places",
        ),
        (
            {"name": "Pen", "price": 1.005},
            "price must have at most 2 decimal places",
        ),
        (
            {"name": "Pen", "price": 1, "stock": 10**20},
            "stock must not exceed 2147483647",
        ),
    ],
)
async def test_create_validation_error(
    client: AsyncClient, payload: dict[str, object], error: str
) -> None:
    response = await client.post("/products", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": error}


async def test_create_missing_field(client: AsyncClient) -> None:
    response = await client.post("/products", json={"name": "Pen"})

    assert response.status_code == 400
    assert "price" in response.json()["error"]


async def test_create_with_invalid_json(client: AsyncClient) -> None:
    response = await client.post(
        "/products",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid JSON body")


async def test_create_with_non_object_body(client: AsyncClient) -> None:
    response = await client.post("/products", json=["Pen", 1.5])

    assert response.status_code == 400
    assert response.json() == {"error": "Request body must be a JSON object"}


@pytest.mark.parametrize(
    ("payload", "field"),
    [
        ({"name": "Pen", "price": "1.5"}, "price"),
        ({"name": "Pen", "price": True}, "price"),
        ({"name": "Pen", "price": 1.5, "stock": True}, "stock"),
        ({"name": "Pen", "price": 1.5, "stock": "10"}, "stock"),
        ({"name": "Pen", "price": 1.5, "stock": 2.5}, "stock"),
        ({"name": 123, "price": 1.5}, "name"),
    ],
)
async def test_create_with_wrong_json_types(
    client: AsyncClient, payload: dict[str, object], field: str
) -> None:
    """Типы полей не приводятся: строка вместо числа и true вместо 1 отклоняются."""
    response = await client.post("/products", json=payload)

    assert response.status_code == 400
    assert response.json()["error"].startswith(f"{field}:")

    response = await client.get("/products")
    assert response.json()["count"] == 0


@pytest.mark.parametrize(
    "payload",
    [{"price": "2.0"}, {"price": False}, {"stock": True}, {"name": ["Pen"]}],
)
async def test_update_with_wrong_json_types(
    client: AsyncClient, payload: dict[str, object]
) -> None:
    product_id = await create_pen(client)

    response = await client.put(f"/products/{product_id}", json=payload)

    assert response.status_code == 400
    product = (await client.get(f"/products/{product_id}")).json()
    assert (product["name"], product["price"], product["stock"]) == ("Pen", 1.5, 10)


async def test_price_with_two_decimal_places_round_trips(client: AsyncClient) -> None:
    response = await client.post("/products", json={"name": "Pen", "price": 19.99})

    assert response.status_code == 201
    product_id = response.json()["product"]["id"]
    product = (await client.get(f"/products/{product_id}")).json()
    assert product["price"] == 19.99


async def test_update_with_sub_cent_price_is_rejected(client: AsyncClient) -> None:
    product_id = await create_pen(client)

    response = await client.put(f"/products/{product_id}", json={"price": 0.001})

    assert response.status_code == 400
    assert response.json() == {"error": "price must have at most 2 decimal places"}
    product = (await client.get(f"/products/{product_id}")).json()
    assert product["price"] == 1.5


async def test_update_missing_product(client: AsyncClient) -> None:
    response = await client.put("/products/999", json={"price": 2.0})

    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


async def test_update_validation_runs_before_existence_check(
    client: AsyncClient,
) -> None:
    response = await client.put("/products/999", json={"price": -1})

    assert response.status_code == 400
    assert response.json() == {"error": "price must be greater than 0"}


async def test_update_with_null_field(client: AsyncClient) -> None:
    product_id = await create_pen(client)

    response = await client.put(f"/products/{product_id}", json={"name": None})

    assert response.status_code == 400
    assert response.json() == {"error": "name: must not be null"}


async def test_update_with_empty_body_refreshes_timestamp(
    client: AsyncClient, advance_clock: Callable[[float], None]
) -> None:
    product_id = await create_pen(client)
    advance_clock(1)

    response = await client.put(f"/products/{product_id}", json={})

    assert response.status_code == 200
    product = response.json()["product"]
    assert (product["name"], product["price"], product["stock"]) == ("Pen", 1.5, 10)
    assert product["updated_at"] > product["created_at"]


async def test_update_stock_to_zero(client: AsyncClient) -> None:
    product_id = await create_pen(client)

    response = await client.put(f"/products/{product_id}", json={"stock": 0})

    assert response.status_code == 200
    assert response.json()["product"]["stock"] == 0


async def test_delete_missing_product(client: AsyncClient) -> None:
    response = await client.delete("/products/999")

    assert response.status_code == 404


async def test_update_race_with_delete_gives_not_found(
    app: FastAPI, client: AsyncClient
) -> None:
    """Товар удален между проверкой существования и UPDATE."""
    gateway = AsyncMock()
    gateway.exists_by_id.return_value = True
    gateway.update.side_effect = ProductNotFound()
    app.dependency_overrides[get_product_gateway] = lambda: gateway

    response = await client.put("/products/1", json={"stock": 1})

    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


async def test_storage_failure_is_reported_generically(
    app: FastAPI, client: AsyncClient
) -> None:
    gateway = AsyncMock()
    gateway.create.side_effect = TransientFailure("Failed to create product")
    app.dependency_overrides[get_product_gateway] = lambda: gateway

    response = await client.post("/products", json={"name": "Pen", "price": 1.5})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create product"}
