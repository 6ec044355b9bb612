"""HTTP-обработчики CRUD-операций над товарами."""

import json
import logging
from typing import Annotated, TypeVar

import pydantic
from fastapi import APIRouter, Depends, Request, status

from cashier_api.core.exceptions import MalformedInput, ProductNotFound
from cashier_api.schemas.product import (
    CreateProductPayload,
    ProductDeleted,
    ProductEnvelope,
    ProductList,
    ProductRead,
    UpdateProductPayload,
)
from cashier_api.services.product_service import ProductGateway
from cashier_api.services.update_clause import build_update_clause
from cashier_api.services.validation import (
    INT_MAX,
    validate_create,
    validate_update,
)

# Диапазон колонки SERIAL
MAX_PRODUCT_ID = INT_MAX

PayloadT = TypeVar("PayloadT", bound=pydantic.BaseModel)

router = APIRouter(prefix="/products", tags=["products"])


def get_product_gateway(request: Request) -> ProductGateway:
    """
    Зависимость (dependency) для получения шлюза к таблице товаров.

    Шлюз создается один раз в lifespan и хранится в app.state.
    """
    gateway: ProductGateway = request.app.state.product_gateway
    return gateway


Gateway = Annotated[ProductGateway, Depends(get_product_gateway)]


def parse_product_id(raw_id: str) -> int:
    """
    Разбирает ID товара из пути.

    Raises:
        MalformedInput: Если ID не является положительным целым.
    """
    if not (raw_id.isascii() and raw_id.isdigit()):
        raise MalformedInput("Invalid product ID")
    product_id = int(raw_id)
    if not 1 <= product_id <= MAX_PRODUCT_ID:
        raise MalformedInput("Invalid product ID")
    return product_id


async def decode_body(request: Request, model: type[PayloadT]) -> PayloadT:
    """
    Читает JSON-тело запроса и разбирает его в модель.

    Raises:
        MalformedInput: Если тело не JSON-объект или типы полей неверны.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedInput(f"Invalid JSON body: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedInput("Request body must be a JSON object")

    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        raise MalformedInput(_describe(e)) from e


def _describe(error: pydantic.ValidationError) -> str:
    """Склеивает ошибки pydantic в одну строку вида "поле: причина"."""
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}"
        for item in error.errors()
    )


@router.get("", response_model=ProductList)
async def list_products(gateway: Gateway) -> ProductList:
    """Возвращает все товары, сначала самые новые."""
    products = [ProductRead.model_validate(p) for p in await gateway.list_all()]
    return ProductList(products=products, count=len(products))


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(product_id: str, gateway: Gateway) -> ProductRead:
    """Возвращает товар по ID."""
    product = await gateway.get_by_id(parse_product_id(product_id))
    return ProductRead.model_validate(product)


@router.post("", response_model=ProductEnvelope, status_code=status.HTTP_201_CREATED)
async def create_product(request: Request, gateway: Gateway) -> ProductEnvelope:
    """
    Создает товар.

    Args:
        request: Входящий запрос с телом {name, price, stock}.
        gateway: Шлюз к таблице товаров.
    """
    payload = await decode_body(request, CreateProductPayload)
    create_request = payload.to_request()
    validate_create(create_request)

    product = await gateway.create(
        create_request.name, create_request.price, create_request.stock
    )
    logging.info("Product %s created", product.id)
    return ProductEnvelope(
        message="Product created successfully",
        product=ProductRead.model_validate(product),
    )


@router.put("/{product_id}", response_model=ProductEnvelope)
async def update_product(
    product_id: str, request: Request, gateway: Gateway
) -> ProductEnvelope:
    """
    Частично обновляет товар: меняются только переданные поля.

    Args:
        product_id: ID товара из пути.
        request: Входящий запрос с любым подмножеством {name, price, stock}.
        gateway: Шлюз к таблице товаров.
    """
    parsed_id = parse_product_id(product_id)
    payload = await decode_body(request, UpdateProductPayload)
    update_request = payload.to_request()
    validate_update(update_request)

    if not await gateway.exists_by_id(parsed_id):
        raise ProductNotFound()

    product = await gateway.update(parsed_id, build_update_clause(update_request))
    return ProductEnvelope(
        message="Product updated successfully",
        product=ProductRead.model_validate(product),
    )


@router.delete("/{product_id}", response_model=ProductDeleted)
async def delete_product(product_id: str, gateway: Gateway) -> ProductDeleted:
    """Удаляет товар безвозвратно."""
    parsed_id = parse_product_id(product_id)

    if not await gateway.exists_by_id(parsed_id):
        raise ProductNotFound()

    deleted_id = await gateway.delete(parsed_id)
    logging.info("Product %s deleted", deleted_id)
    return ProductDeleted(message="Product deleted successfully", id=deleted_id)
