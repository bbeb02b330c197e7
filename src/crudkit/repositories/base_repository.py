"""
Generic document repository providing common CRUD operations.

`DocumentRepository` is configured, not subclassed: it is built with the
collection handle and the entity name, and entity repositories hold one and
add their own queries on top of `find` / `find_one`.

Guarantees:
  - Every store call runs inside `store_error_boundary`, so callers only ever
    see typed errors (DatabaseError, NotFoundError, ...), never raw driver errors.
  - Absence is an error at this layer: `get_by_id`, `find_one`, `update` and
    `delete` raise NotFoundError instead of returning None.
  - Documents are returned as plain dicts with `_id` rendered as a string `id`.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Mapping, Protocol, Sequence

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from crudkit.config.settings import Settings
from crudkit.exceptions.base import NotFoundError
from crudkit.exceptions.mapper import store_error_boundary
from crudkit.schemas.pagination import (
    PaginationResult,
    build_pagination_meta,
    normalize_page_options,
)

logger = logging.getLogger(__name__)

Document = dict[str, Any]
Filter = Mapping[str, Any]
SortSpec = Sequence[tuple[str, int]]

DEFAULT_SORT: SortSpec = [("created_at", DESCENDING), ("_id", DESCENDING)]


class CrudRepository(Protocol):
    """Capability interface shared by repositories and services."""

    async def create(self, data: Mapping[str, Any]) -> Document: ...
    async def update(self, entity_id: str, data: Mapping[str, Any]) -> Document: ...
    async def delete(self, entity_id: str) -> Document: ...
    async def get_by_id(self, entity_id: str) -> Document: ...
    async def find_one(self, filter: Filter) -> Document: ...
    async def find(self, filter: Filter | None = None, *, sort: SortSpec | None = None, limit: int | None = None, skip: int = 0) -> list[Document]: ...
    async def get_all(self) -> list[Document]: ...
    async def paginate(self, filter: Filter | None = None, *, page: int | None = None, limit: int | None = None, sort: SortSpec | None = None) -> PaginationResult: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(entity_id: Any) -> ObjectId:
    """
    Convert an identifier to ObjectId. A malformed value raises bson's
    InvalidId, which the error boundary maps to INVALID_ID.
    """
    if isinstance(entity_id, ObjectId):
        return entity_id
    return ObjectId(str(entity_id))


def serialize_document(document: Mapping[str, Any]) -> Document:
    out = dict(document)
    if "_id" in out:
        out["id"] = str(out.pop("_id"))
    return out


class DocumentRepository:
    """
    Generic repository over one collection.

    Args:
        collection: async collection handle (pymongo AsyncCollection or compatible)
        entity_name: human-readable entity name used in error messages and logs
        settings: application settings (pagination defaults and ceiling)
        default_sort: ordering used by find/paginate when the caller gives none
    """

    def __init__(
        self,
        collection,
        entity_name: str,
        settings: Settings,
        *,
        default_sort: SortSpec = DEFAULT_SORT,
    ):
        self.collection = collection
        self.entity_name = entity_name
        self.settings = settings
        self.default_sort = list(default_sort)

    def _log_extra(self, operation: str, **kwargs) -> dict:
        return {"model": self.entity_name, "operation": operation, **kwargs}

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create(self, data: Mapping[str, Any]) -> Document:
        """
        Insert a new document and return it.

        Raises:
            DatabaseError(DUPLICATE_KEY): a unique index rejected the document
            DatabaseError(DB_VALIDATION_ERROR): the collection validator rejected it
        """
        # keys only, values may be sensitive
        logger.debug("repo.create.start", extra=self._log_extra("create", provided_keys=sorted(data.keys())))
        start = time.perf_counter()

        now = _utcnow()
        document: Document = {**data, "created_at": now, "updated_at": now}
        document.pop("_id", None)
        document.pop("id", None)

        async with store_error_boundary(self.entity_name):
            result = await self.collection.insert_one(document)
            document["_id"] = result.inserted_id

        logger.info(
            "repo.create.success",
            extra=self._log_extra(
                "create",
                id=str(result.inserted_id),
                duration_ms=int((time.perf_counter() - start) * 1000),
            ),
        )
        return serialize_document(document)

    # =================================================================================================================
    # Read (single)
    # =================================================================================================================

    async def get_by_id(self, entity_id: Any) -> Document:
        """
        Raises:
            NotFoundError: no document has this id
            DatabaseError(INVALID_ID): the id is not a valid ObjectId
        """
        async with store_error_boundary(self.entity_name):
            document = await self.collection.find_one({"_id": to_object_id(entity_id)})

        if document is None:
            logger.debug("repo.get_by_id.not_found", extra=self._log_extra("get_by_id", id=str(entity_id)))
            raise NotFoundError(f"{self.entity_name} with id {entity_id} not found")

        return serialize_document(document)

    async def find_one(self, filter: Filter) -> Document:
        """
        Return the first document matching `filter`.

        Raises:
            NotFoundError: nothing matches
        """
        async with store_error_boundary(self.entity_name):
            document = await self.collection.find_one(dict(filter))

        if document is None:
            logger.debug("repo.find_one.not_found", extra=self._log_extra("find_one", filter_keys=sorted(filter.keys())))
            raise NotFoundError(f"{self.entity_name} not found")

        return serialize_document(document)

    # =================================================================================================================
    # Read (multiple)
    # =================================================================================================================

    async def find(
        self,
        filter: Filter | None = None,
        *,
        sort: SortSpec | None = None,
        limit: int | None = None,
        skip: int = 0,
    ) -> list[Document]:
        """
        Return every document matching `filter` (empty list when none match).
        """
        async with store_error_boundary(self.entity_name):
            cursor = self.collection.find(dict(filter or {}))
            cursor = cursor.sort(list(sort or self.default_sort))
            if skip:
                cursor = cursor.skip(skip)
            if limit:
                cursor = cursor.limit(limit)
            documents = await cursor.to_list(length=None)

        logger.debug("repo.find.success", extra=self._log_extra("find", count=len(documents)))
        return [serialize_document(d) for d in documents]

    async def get_all(self) -> list[Document]:
        return await self.find({})

    async def count(self, filter: Filter | None = None) -> int:
        async with store_error_boundary(self.entity_name):
            return await self.collection.count_documents(dict(filter or {}))

    async def exists(self, filter: Filter) -> bool:
        async with store_error_boundary(self.entity_name):
            document = await self.collection.find_one(dict(filter), projection={"_id": 1})
        return document is not None

    async def paginate(
        self,
        filter: Filter | None = None,
        *,
        page: int | None = None,
        limit: int | None = None,
        sort: SortSpec | None = None,
    ) -> PaginationResult:
        """
        Return one page of documents plus the pagination metadata.

        page/limit default to 1 / PAGINATION_DEFAULT_LIMIT when omitted or
        non-positive; a limit above PAGINATION_MAX_LIMIT is clamped.
        The bounded fetch and the count run concurrently.
        """
        options = normalize_page_options(
            page,
            limit,
            default_limit=self.settings.PAGINATION_DEFAULT_LIMIT,
            max_limit=self.settings.PAGINATION_MAX_LIMIT,
        )

        documents, total = await asyncio.gather(
            self.find(filter, sort=sort, limit=options.limit, skip=options.skip),
            self.count(filter),
        )

        meta = build_pagination_meta(total, options)
        logger.debug(
            "repo.paginate.success",
            extra=self._log_extra("paginate", page=meta.page, limit=meta.limit, total_items=total),
        )
        return PaginationResult(data=documents, pagination=meta)

    # =================================================================================================================
    # Update / Delete
    # =================================================================================================================

    async def update(self, entity_id: Any, data: Mapping[str, Any]) -> Document:
        """
        `$set` the given fields and return the updated document.

        Raises:
            NotFoundError: no document has this id
            DatabaseError(DUPLICATE_KEY): the update collides with a unique index
        """
        changes = {k: v for k, v in data.items() if k not in ("_id", "id", "created_at")}
        if not changes:
            logger.warning("repo.update.empty", extra=self._log_extra("update", id=str(entity_id)))
            return await self.get_by_id(entity_id)

        changes["updated_at"] = _utcnow()

        async with store_error_boundary(self.entity_name):
            document = await self.collection.find_one_and_update(
                {"_id": to_object_id(entity_id)},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )

        if document is None:
            logger.info("repo.update.not_found", extra=self._log_extra("update", id=str(entity_id)))
            raise NotFoundError(f"{self.entity_name} with id {entity_id} not found")

        logger.info(
            "repo.update.success",
            extra=self._log_extra("update", id=str(entity_id), updated_keys=sorted(changes.keys())),
        )
        return serialize_document(document)

    async def delete(self, entity_id: Any) -> Document:
        """
        Delete a document and return it as it was.

        Raises:
            NotFoundError: no document has this id
        """
        async with store_error_boundary(self.entity_name):
            document = await self.collection.find_one_and_delete({"_id": to_object_id(entity_id)})

        if document is None:
            logger.info("repo.delete.not_found", extra=self._log_extra("delete", id=str(entity_id)))
            raise NotFoundError(f"{self.entity_name} with id {entity_id} not found")

        logger.info("repo.delete.success", extra=self._log_extra("delete", id=str(entity_id)))
        return serialize_document(document)


__all__ = [
    "ASCENDING",
    "DESCENDING",
    "CrudRepository",
    "DocumentRepository",
    "Document",
    "Filter",
    "SortSpec",
    "serialize_document",
    "to_object_id",
]
