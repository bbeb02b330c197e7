import logging
from typing import Any, Mapping

from crudkit.auth.security import create_access_token, hash_password, verify_password
from crudkit.config.settings import Settings
from crudkit.exceptions.base import NotFoundError, UnauthorizedError
from crudkit.repositories.user_repository import UserRepository

from .base_service import CrudService

logger = logging.getLogger(__name__)

PRIVATE_FIELDS = frozenset({"password_hash"})

INVALID_CREDENTIALS = "Invalid email or password"


class UserService:
    """
    Registration, authentication and profile management.

    Generic CRUD goes through `self.crud`; the rules here only decide what is
    stored (hashed password, never the plain one) and what is returned
    (`public_view`, never the hash).
    """

    def __init__(self, repository: UserRepository, settings: Settings):
        self.repository = repository
        self.crud = CrudService(repository)
        self.settings = settings

    @staticmethod
    def public_view(user: Mapping[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in user.items() if k not in PRIVATE_FIELDS}

    async def register(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        """
        Create a user from a validated `register` payload.

        Raises:
            DatabaseError(DUPLICATE_KEY): the email is already registered
        """
        data = dict(payload)
        data["password_hash"] = hash_password(data.pop("password"))
        user = await self.crud.create(data)
        logger.info("user.registered", extra={"user_id": user["id"]})
        return self.public_view(user)

    async def authenticate(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        """
        Check credentials and issue an access token.

        Unknown email and wrong password produce the same UnauthorizedError so
        the response does not reveal which accounts exist.
        """
        try:
            user = await self.repository.get_by_email(payload["email"])
        except NotFoundError:
            logger.info("user.login_failed", extra={"reason": "unknown_email"})
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not verify_password(payload["password"], user.get("password_hash", "")):
            logger.info("user.login_failed", extra={"reason": "bad_password", "user_id": user["id"]})
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not user.get("is_active", True):
            logger.info("user.login_failed", extra={"reason": "inactive", "user_id": user["id"]})
            raise UnauthorizedError("User account is disabled")

        token = create_access_token(self.settings, subject=user["id"])
        logger.info("user.logged_in", extra={"user_id": user["id"]})
        return {"access_token": token, "token_type": "bearer", "user": self.public_view(user)}

    async def get_profile(self, user_id: str) -> dict[str, Any]:
        return self.public_view(await self.crud.get_by_id(user_id))

    async def update_profile(self, user_id: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        data = dict(payload)
        if "password" in data:
            data["password_hash"] = hash_password(data.pop("password"))
        user = await self.crud.update(user_id, data)
        return self.public_view(user)

    async def deactivate(self, user_id: str) -> dict[str, Any]:
        return self.public_view(await self.repository.set_active(user_id, False))
