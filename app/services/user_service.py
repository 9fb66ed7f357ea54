"""User Directory - user queries and admin account management"""

import asyncio
import math
from typing import Any, Dict, List, Optional, Tuple, Union
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import BadRequestError, ConflictError, ForbiddenError, StoreFailure
from app.core.logging import get_logger
from app.core.permissions import can_assign_role
from app.models.enrollment import Enrollment
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.responses import Pagination
from app.schemas.user import UserListResponse, UserSummary, UserUpdate
from app.services.audit_service import AuditService

logger = get_logger(__name__)

# Roles an account may hold while changing its own role
SELF_ASSIGNABLE_ROLES = (UserRole.SUPER_ADMIN, UserRole.ADMIN)


def _role_value(role: Union[UserRole, str]) -> str:
    return role.value if isinstance(role, UserRole) else role


class UserService:
    """Service layer for user lookups and admin edits"""

    @staticmethod
    def _filters(
        search: Optional[str],
        role: Optional[UserRole],
        status: Optional[str],
    ) -> list:
        filters = []
        if search:
            # Literal substring: % and _ in the search text are escaped
            filters.append(or_(
                User.name.icontains(search, autoescape=True),
                User.email.icontains(search, autoescape=True),
            ))
        if role is not None:
            filters.append(User.role == role)
        if status == "active":
            filters.append(User.is_active.is_(True))
        elif status == "suspended":
            filters.append(User.is_active.is_(False))
        return filters

    @staticmethod
    async def _fetch_page(
        session_factory: async_sessionmaker[AsyncSession],
        filters: list,
        offset: int,
        limit: int,
    ) -> List[Tuple[User, int]]:
        enrollment_count = (
            select(func.count(Enrollment.id))
            .where(Enrollment.user_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        stmt = (
            select(User, enrollment_count)
            .where(*filters)
            .order_by(User.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        async with session_factory() as db:
            result = await db.execute(stmt)
            return [(row[0], row[1]) for row in result.all()]

    @staticmethod
    async def _count(session_factory: async_sessionmaker[AsyncSession], filters: list) -> int:
        async with session_factory() as db:
            return (await db.scalar(select(func.count(User.id)).where(*filters))) or 0

    @staticmethod
    async def list_users(
        session_factory: async_sessionmaker[AsyncSession],
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        role: Optional[UserRole] = None,
        status: Optional[str] = None,
    ) -> UserListResponse:
        """
        List users newest first with optional filters.

        Args:
            search: Case-insensitive substring matched against name or email
            role: Exact role match
            status: "active" or "suspended"
        """
        filters = UserService._filters(search, role, status)
        offset = (page - 1) * limit

        try:
            rows, total = await asyncio.gather(
                UserService._fetch_page(session_factory, filters, offset, limit),
                UserService._count(session_factory, filters),
            )
        except Exception as exc:
            raise StoreFailure("An error occurred while fetching users") from exc

        users = []
        for user, enrollments in rows:
            if not user.has_known_role:
                logger.warning(
                    "Listing user with unknown role",
                    extra={"user_id": str(user.id), "role": user.role},
                )
            summary = UserSummary.model_validate(user)
            summary.enrollment_count = enrollments or 0
            users.append(summary)

        return UserListResponse(
            users=users,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                total_pages=math.ceil(total / limit),
            ),
        )

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_summary(db: AsyncSession, user_id: UUID) -> Optional[UserSummary]:
        """User row with its enrollment count, or None if the user does not exist"""
        user = await UserService.get_user_by_id(db, user_id)
        if user is None:
            return None
        enrollments = await db.scalar(
            select(func.count(Enrollment.id)).where(Enrollment.user_id == user_id)
        )
        summary = UserSummary.model_validate(user)
        summary.enrollment_count = enrollments or 0
        return summary

    @staticmethod
    async def update_user(
        db: AsyncSession,
        actor: User,
        user_id: UUID,
        user_update: UserUpdate,
    ) -> Optional[UserSummary]:
        """
        Apply an admin edit to another account (or the caller's own).

        Writes an UPDATE_USER audit entry in the same transaction.

        Returns:
            The updated user, or None if not found

        Raises:
            BadRequestError: The caller would demote themselves below ADMIN
            ForbiddenError: The caller may not assign the requested role
            ConflictError: The new email belongs to another account
        """
        db_user = await UserService.get_user_by_id(db, user_id)
        if db_user is None:
            return None

        update_data: Dict[str, Any] = user_update.model_dump(exclude_unset=True, exclude_none=True)
        new_role = update_data.get("role")

        if db_user.id == actor.id and new_role is not None and new_role not in SELF_ASSIGNABLE_ROLES:
            raise BadRequestError("You cannot demote yourself below Admin")

        if new_role is not None and not can_assign_role(actor.role, new_role):
            raise ForbiddenError("You do not have permission to assign this role")

        if "email" in update_data:
            update_data["email"] = update_data["email"].lower()
            if update_data["email"] != db_user.email:
                taken = await db.scalar(
                    select(func.count(User.id)).where(User.email == update_data["email"])
                )
                if taken:
                    raise ConflictError("A user with this email already exists")

        if not update_data:
            return await UserService.get_user_summary(db, user_id)

        details: Dict[str, Any] = {"changes": sorted(update_data)}
        if new_role is not None:
            details["role_changed"] = {"from": _role_value(db_user.role), "to": new_role.value}
        if "is_active" in update_data:
            details["status_changed"] = {"from": db_user.is_active, "to": update_data["is_active"]}

        for field, value in update_data.items():
            setattr(db_user, field, value)

        AuditService.record(db, actor, "UPDATE_USER", "USER", str(db_user.id), details)
        await db.commit()

        logger.info(
            "User updated",
            extra={"user_id": str(db_user.id), "actor_id": str(actor.id), "changes": details["changes"]},
        )
        return await UserService.get_user_summary(db, user_id)

    @staticmethod
    async def delete_user(db: AsyncSession, actor: User, user_id: UUID) -> bool:
        """
        Delete an account and its enrollments, recording a DELETE_USER entry.

        Returns:
            True if deleted, False if not found
        """
        if user_id == actor.id:
            raise BadRequestError("You cannot delete your own account")

        db_user = await UserService.get_user_by_id(db, user_id)
        if db_user is None:
            return False

        details = {
            "deleted_user_email": db_user.email,
            "deleted_user_role": _role_value(db_user.role),
        }
        await db.delete(db_user)
        AuditService.record(db, actor, "DELETE_USER", "USER", str(user_id), details)
        await db.commit()

        logger.info("User deleted", extra={"user_id": str(user_id), "actor_id": str(actor.id)})
        return True
