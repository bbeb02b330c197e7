import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from crudkit.config.settings import Settings
from crudkit.exceptions.base import UnauthorizedError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password must not be empty")
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    if not hashed.startswith(("$2a$", "$2b$", "$2y$")):
        logger.warning("auth.unknown_hash_format")
        return False
    return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))


def create_access_token(
    settings: Settings, *, subject: str, extra_claims: dict[str, Any] | None = None
) -> str:
    """
    Create a short-lived JWT access token.
    subject is the user id (ObjectId as string).
    """
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)

    payload: dict[str, Any] = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
        "jti": secrets.token_urlsafe(16),
    }
    if extra_claims:
        payload.update(extra_claims)

    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(settings: Settings, token: str) -> dict[str, Any]:
    """
    Raises:
        UnauthorizedError: the token is malformed, expired or has no subject
    """
    try:
        claims = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        logger.info("auth.token_rejected", extra={"reason": type(exc).__name__})
        raise UnauthorizedError("Invalid or expired token") from exc

    if not claims.get("sub"):
        raise UnauthorizedError("Invalid or expired token")
    return claims
