import logging
from typing import Any, Mapping

from crudkit.exceptions.base import BadRequestError
from crudkit.repositories.product_repository import ProductRepository
from crudkit.schemas.pagination import PaginationResult

from .base_service import CrudService

logger = logging.getLogger(__name__)


class ProductService:
    def __init__(self, repository: ProductRepository):
        self.repository = repository
        self.crud = CrudService(repository)

    async def create(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        return await self.crud.create(payload)

    async def get(self, product_id: str) -> dict[str, Any]:
        return await self.crud.get_by_id(product_id)

    async def update(self, product_id: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        return await self.crud.update(product_id, payload)

    async def delete(self, product_id: str) -> dict[str, Any]:
        return await self.crud.delete(product_id)

    async def list_products(self, query: Mapping[str, Any]) -> PaginationResult:
        """
        `query` is a validated `list_query` payload: page, limit and an
        optional category filter.
        """
        filter: dict[str, Any] = {}
        if query.get("category"):
            filter["category"] = query["category"]
        return await self.crud.paginate(filter, page=query.get("page"), limit=query.get("limit"))

    async def adjust_stock(self, product_id: str, delta: int) -> dict[str, Any]:
        """
        Add `delta` (negative to remove) to the product's stock.

        Read-modify-write: a concurrent writer can still interleave between the
        read and the write; the store reports that as WRITE_CONFLICT.

        Raises:
            NotFoundError: unknown product
            BadRequestError: the result would be negative
        """
        product = await self.crud.get_by_id(product_id)
        current = int(product.get("stock", 0))
        new_stock = current + delta
        if new_stock < 0:
            logger.info(
                "product.stock_insufficient",
                extra={"product_id": product_id, "stock": current, "delta": delta},
            )
            raise BadRequestError(
                f"Insufficient stock: {current} available, {-delta} requested",
                details={"delta": [f"stock cannot go below zero (current: {current})"]},
            )

        updated = await self.crud.update(product_id, {"stock": new_stock})
        logger.info("product.stock_adjusted", extra={"product_id": product_id, "delta": delta, "stock": new_stock})
        return updated

    async def low_stock(self, threshold: int) -> list[dict[str, Any]]:
        return await self.repository.find_low_stock(threshold)
