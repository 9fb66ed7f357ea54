"""API Dependencies"""

from typing import Callable, Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenError, UnauthenticatedError
from app.core.logging import get_logger
from app.core.permissions import Permission, has_permission
from app.core.security import ACCESS_TOKEN_TYPE, decode_token
from app.database import get_db, get_session_factory
from app.models.user import User
from app.services.user_service import UserService

logger = get_logger(__name__)

# auto_error=False: a missing header resolves to "no caller" (401), not 403
security = HTTPBearer(auto_error=False)

__all__ = [
    "get_db",
    "get_session_factory",
    "get_current_user",
    "require_user",
    "require_permission",
]


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[User]:
    """
    Resolve the caller from the bearer token.

    Returns:
        The active user named by the token, or None when there is no token,
        the token is invalid or expired, or the user is unknown or suspended.
    """
    if credentials is None:
        return None

    payload = decode_token(credentials.credentials)
    if not payload or payload.get("type") != ACCESS_TOKEN_TYPE:
        return None

    user_id_str: Optional[str] = payload.get("sub")
    if not user_id_str:
        return None

    try:
        user_id = UUID(user_id_str)
    except ValueError:
        return None

    user = await UserService.get_user_by_id(db, user_id)
    if user is None or not user.is_active:
        return None

    return user


async def require_user(
    current_user: Optional[User] = Depends(get_current_user),
) -> User:
    """Fail with 401 when there is no resolved caller"""
    if current_user is None:
        raise UnauthenticatedError()
    return current_user


def require_permission(permission: Permission) -> Callable:
    """
    Build a dependency that requires the caller's role to grant `permission`.

    Example:
        ```python
        @router.get("/stats")
        async def stats(user: User = Depends(require_permission(Permission.ADMIN_ACCESS))):
            ...
        ```
    """

    async def dependency(current_user: User = Depends(require_user)) -> User:
        if not has_permission(current_user.role, permission):
            logger.info(
                "Permission denied",
                extra={"user_id": str(current_user.id), "permission": permission.value},
            )
            raise ForbiddenError()
        return current_user

    return dependency
