"""
Generic service layer.

`CrudService` exposes the repository surface one to one. It adds no error
handling: typed errors raised by the repository propagate unchanged to the
caller. Entity services hold a `CrudService` and put their business rules
around it.
"""

from typing import Any, Mapping

from crudkit.repositories.base_repository import CrudRepository, Document, Filter, SortSpec
from crudkit.schemas.pagination import PaginationResult


class CrudService:
    def __init__(self, repository: CrudRepository):
        self.repository = repository

    async def create(self, data: Mapping[str, Any]) -> Document:
        return await self.repository.create(data)

    async def update(self, entity_id: str, data: Mapping[str, Any]) -> Document:
        return await self.repository.update(entity_id, data)

    async def delete(self, entity_id: str) -> Document:
        return await self.repository.delete(entity_id)

    async def get_by_id(self, entity_id: str) -> Document:
        return await self.repository.get_by_id(entity_id)

    async def find_one(self, filter: Filter) -> Document:
        return await self.repository.find_one(filter)

    async def find(
        self,
        filter: Filter | None = None,
        *,
        sort: SortSpec | None = None,
        limit: int | None = None,
        skip: int = 0,
    ) -> list[Document]:
        return await self.repository.find(filter, sort=sort, limit=limit, skip=skip)

    async def get_all(self) -> list[Document]:
        return await self.repository.get_all()

    async def paginate(
        self,
        filter: Filter | None = None,
        *,
        page: int | None = None,
        limit: int | None = None,
        sort: SortSpec | None = None,
    ) -> PaginationResult:
        return await self.repository.paginate(filter, page=page, limit=limit, sort=sort)
