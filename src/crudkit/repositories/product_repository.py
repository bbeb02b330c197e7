"""
Product repository.
"""

import logging
from typing import Any, Mapping

from crudkit.config.settings import Settings
from crudkit.schemas.pagination import PaginationResult

from .base_repository import ASCENDING, Document, DocumentRepository

logger = logging.getLogger(__name__)

PRODUCTS_COLLECTION = "products"


class ProductRepository:
    """
    Repository for Product documents.

    Stored shape:
        {"_id": ObjectId, "name": str, "sku": str (unique), "price": float,
         "stock": int, "description": str | None, "category": str | None,
         "created_at", "updated_at"}
    """

    entity_name = "Product"

    def __init__(self, database, settings: Settings):
        self.documents = DocumentRepository(database[PRODUCTS_COLLECTION], self.entity_name, settings)

    async def create(self, data: Mapping[str, Any]) -> Document:
        return await self.documents.create(data)

    async def update(self, product_id: str, data: Mapping[str, Any]) -> Document:
        return await self.documents.update(product_id, data)

    async def delete(self, product_id: str) -> Document:
        return await self.documents.delete(product_id)

    async def get_by_id(self, product_id: str) -> Document:
        return await self.documents.get_by_id(product_id)

    async def find_one(self, filter: Mapping[str, Any]) -> Document:
        return await self.documents.find_one(filter)

    async def find(self, filter: Mapping[str, Any] | None = None, **kwargs) -> list[Document]:
        return await self.documents.find(filter, **kwargs)

    async def get_all(self) -> list[Document]:
        return await self.documents.get_all()

    async def paginate(self, filter: Mapping[str, Any] | None = None, **kwargs) -> PaginationResult:
        return await self.documents.paginate(filter, **kwargs)

    # Product-specific queries

    async def get_by_sku(self, sku: str) -> Document:
        return await self.documents.find_one({"sku": sku})

    async def find_by_category(
        self, category: str, *, page: int | None = None, limit: int | None = None
    ) -> PaginationResult:
        return await self.documents.paginate({"category": category}, page=page, limit=limit)

    async def find_low_stock(self, threshold: int) -> list[Document]:
        """Products whose stock is at or below `threshold`, lowest first."""
        products = await self.documents.find(
            {"stock": {"$lte": threshold}},
            sort=[("stock", ASCENDING), ("_id", ASCENDING)],
        )
        logger.debug("product.low_stock", extra={"threshold": threshold, "count": len(products)})
        return products
