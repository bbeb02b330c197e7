from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from crudkit.api.v1.dependencies import get_container, get_current_user
from crudkit.container import Container
from crudkit.schemas.responses import respond

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
async def list_products(request: Request, container: Container = Depends(get_container)):
    query = container.product_validator.validate("list_query", dict(request.query_params))
    result = await container.products.list_products(query)
    return respond(result.to_dict())


@router.post("", dependencies=[Depends(get_current_user)])
async def create_product(
    payload: dict[str, Any] | None = Body(default=None),
    container: Container = Depends(get_container),
):
    data = container.product_validator.validate("create", payload)
    product = await container.products.create(data)
    return respond(product, "Product created", 201)


@router.get("/{product_id}")
async def get_product(product_id: str, container: Container = Depends(get_container)):
    return respond(await container.products.get(product_id))


@router.patch("/{product_id}", dependencies=[Depends(get_current_user)])
async def update_product(
    product_id: str,
    payload: dict[str, Any] | None = Body(default=None),
    container: Container = Depends(get_container),
):
    data = container.product_validator.validate("update", payload)
    product = await container.products.update(product_id, data)
    return respond(product, "Product updated")


@router.delete("/{product_id}", dependencies=[Depends(get_current_user)])
async def delete_product(product_id: str, container: Container = Depends(get_container)):
    product = await container.products.delete(product_id)
    return respond(product, "Product deleted")


@router.post("/{product_id}/stock", dependencies=[Depends(get_current_user)])
async def adjust_stock(
    product_id: str,
    payload: dict[str, Any] | None = Body(default=None),
    container: Container = Depends(get_container),
):
    data = container.product_validator.validate("adjust_stock", payload)
    product = await container.products.adjust_stock(product_id, data["delta"])
    return respond(product, "Stock updated")
