"""
User repository for user-specific document operations.

Holds a `DocumentRepository` for the `users` collection and adds the lookups
authentication needs. Every query goes through the generic repository, so
driver failures are still mapped to DatabaseError.
"""

import logging
from typing import Any, Mapping

from crudkit.config.settings import Settings
from crudkit.exceptions.base import NotFoundError
from crudkit.schemas.pagination import PaginationResult

from .base_repository import Document, DocumentRepository

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository:
    """
    Repository for User documents.

    Stored shape:
        {"_id": ObjectId, "name": str, "email": str (lowercase, unique),
         "password_hash": str, "is_active": bool, "created_at", "updated_at"}
    """

    entity_name = "User"

    def __init__(self, database, settings: Settings):
        self.documents = DocumentRepository(database[USERS_COLLECTION], self.entity_name, settings)

    # Generic CRUD, delegated
    async def create(self, data: Mapping[str, Any]) -> Document:
        payload = dict(data)
        if "email" in payload:
            payload["email"] = normalize_email(payload["email"])
        payload.setdefault("is_active", True)
        return await self.documents.create(payload)

    async def update(self, user_id: str, data: Mapping[str, Any]) -> Document:
        payload = dict(data)
        if "email" in payload:
            payload["email"] = normalize_email(payload["email"])
        return await self.documents.update(user_id, payload)

    async def delete(self, user_id: str) -> Document:
        return await self.documents.delete(user_id)

    async def get_by_id(self, user_id: str) -> Document:
        return await self.documents.get_by_id(user_id)

    async def find_one(self, filter: Mapping[str, Any]) -> Document:
        return await self.documents.find_one(filter)

    async def find(self, filter: Mapping[str, Any] | None = None, **kwargs) -> list[Document]:
        return await self.documents.find(filter, **kwargs)

    async def get_all(self) -> list[Document]:
        return await self.documents.get_all()

    async def paginate(self, filter: Mapping[str, Any] | None = None, **kwargs) -> PaginationResult:
        return await self.documents.paginate(filter, **kwargs)

    # =================================================================================================================
    # User-specific queries
    # =================================================================================================================

    async def get_by_email(self, email: str) -> Document:
        """
        Raises:
            NotFoundError: no user with this email
        """
        try:
            user = await self.documents.find_one({"email": normalize_email(email)})
        except NotFoundError:
            logger.debug("user.get_by_email.not_found")
            raise NotFoundError("User with this email not found")
        logger.debug("user.get_by_email.found", extra={"user_id": user["id"]})
        return user

    async def email_exists(self, email: str) -> bool:
        return await self.documents.exists({"email": normalize_email(email)})

    async def get_active_users(self, *, page: int | None = None, limit: int | None = None) -> PaginationResult:
        return await self.documents.paginate({"is_active": True}, page=page, limit=limit)

    async def update_password(self, user_id: str, password_hash: str) -> Document:
        logger.info("user.update_password", extra={"user_id": user_id})
        return await self.documents.update(user_id, {"password_hash": password_hash})

    async def set_active(self, user_id: str, is_active: bool) -> Document:
        logger.info("user.set_active", extra={"user_id": user_id, "is_active": is_active})
        return await self.documents.update(user_id, {"is_active": is_active})
