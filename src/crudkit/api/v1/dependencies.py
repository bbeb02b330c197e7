from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from crudkit.auth.security import decode_access_token
from crudkit.container import Container
from crudkit.exceptions.base import DatabaseError, DatabaseErrorKind, NotFoundError, UnauthorizedError

# auto_error=False: a missing header is reported through our own UnauthorizedError envelope
bearer_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> Container:
    return request.app.state.container


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    container: Container = Depends(get_container),
) -> dict:
    """
    Resolve the bearer token to the (public view of the) current user.

    Raises:
        UnauthorizedError: no token, bad token, or the user no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not authenticated")

    claims = decode_access_token(container.settings, credentials.credentials)
    try:
        user = await container.users.get_profile(claims["sub"])
    except NotFoundError:
        raise UnauthorizedError("Invalid or expired token")
    except DatabaseError as exc:
        # a signed token whose subject is not a user id
        if exc.kind is not DatabaseErrorKind.INVALID_ID:
            raise
        raise UnauthorizedError("Invalid or expired token")

    if not user.get("is_active", True):
        raise UnauthorizedError("User account is disabled")
    return user
