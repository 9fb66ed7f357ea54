from typing import Any, Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.api import deps
from app.core.exceptions import NotFoundError
from app.core.permissions import Permission
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.admin import StatsSnapshot
from app.schemas.responses import ErrorResponse
from app.schemas.user import UserListResponse, UserSummary, UserUpdate
from app.services.stats_service import StatsService
from app.services.user_service import UserService

router = APIRouter()

_error_responses = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Missing capability"},
    500: {"model": ErrorResponse, "description": "Store failure"},
}


@router.get("/stats", response_model=StatsSnapshot, responses=_error_responses)
async def get_admin_stats(
    current_user: User = Depends(deps.require_permission(Permission.ADMIN_ACCESS)),
    session_factory: async_sessionmaker[AsyncSession] = Depends(deps.get_session_factory),
) -> Any:
    """
    Dashboard counters: users by role, active/suspended, recent signups and
    logins, courses, enrollments and the latest audit entries.
    """
    return await StatsService.compute_stats(session_factory)


@router.get("/users", response_model=UserListResponse, responses=_error_responses)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=255),
    role: Optional[UserRole] = None,
    status: Optional[Literal["active", "suspended"]] = None,
    current_user: User = Depends(deps.require_permission(Permission.USERS_VIEW)),
    session_factory: async_sessionmaker[AsyncSession] = Depends(deps.get_session_factory),
) -> Any:
    """
    Paginated user directory, newest first.
    """
    return await UserService.list_users(
        session_factory,
        page=page,
        limit=limit,
        search=search,
        role=role,
        status=status,
    )


@router.get("/users/{user_id}", response_model=UserSummary, responses=_error_responses)
async def get_user(
    user_id: UUID,
    current_user: User = Depends(deps.require_permission(Permission.USERS_VIEW)),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Single user with enrollment count.
    """
    summary = await UserService.get_user_summary(db, user_id)
    if summary is None:
        raise NotFoundError("User")
    return summary


@router.patch("/users/{user_id}", response_model=UserSummary, responses=_error_responses)
async def update_user(
    user_id: UUID,
    user_update: UserUpdate,
    current_user: User = Depends(deps.require_permission(Permission.USERS_EDIT)),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Change name, email, role or active status. Suspending is `isActive: false`.
    """
    summary = await UserService.update_user(db, current_user, user_id, user_update)
    if summary is None:
        raise NotFoundError("User")
    return summary


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_error_responses,
)
async def delete_user(
    user_id: UUID,
    current_user: User = Depends(deps.require_permission(Permission.USERS_DELETE)),
    db: AsyncSession = Depends(deps.get_db),
) -> None:
    """
    Delete a user (SUPER_ADMIN only).
    """
    if not await UserService.delete_user(db, current_user, user_id):
        raise NotFoundError("User")
