"""Admin Dashboard Statistics"""

import asyncio
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import String, func, select, type_coerce
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql import Select

from app.config import settings
from app.core.exceptions import StoreFailure
from app.core.logging import get_logger
from app.models.audit import AuditLog
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.enums import EnrollmentStatus, UserRole
from app.models.user import User
from app.schemas.admin import (
    ActivityEntry,
    CourseStats,
    EnrollmentStats,
    StatsSnapshot,
    UserStats,
)
from app.utils.time import get_utc_now

logger = get_logger(__name__)

SessionFactory = async_sessionmaker[AsyncSession]


class StatsService:
    """
    Read-only aggregation behind the admin dashboard.

    Every query runs on its own session so the whole set can be awaited
    concurrently; nothing here writes to the store.
    """

    @staticmethod
    def build_role_counts(rows: Iterable[Tuple[Any, int]]) -> Dict[UserRole, int]:
        """
        Merge sparse (role, count) rows into a map holding every known role.

        Roles missing from `rows` stay at zero. Rows whose role is not one of
        the known roles are dropped and logged.
        """
        role_counts = {role: 0 for role in UserRole}
        for role, count in rows:
            try:
                known_role = UserRole(role)
            except ValueError:
                logger.warning(
                    "Ignoring users with unknown role in stats",
                    extra={"role": str(role), "count": count},
                )
                continue
            role_counts[known_role] = count
        return role_counts

    @staticmethod
    async def _count(session_factory: SessionFactory, stmt: Select) -> int:
        async with session_factory() as db:
            return (await db.scalar(stmt)) or 0

    @staticmethod
    async def _users_by_role(session_factory: SessionFactory) -> List[Tuple[str, int]]:
        # Raw strings, so a role the enum does not know cannot break loading
        role = type_coerce(User.role, String)
        stmt = select(role, func.count(User.id)).group_by(User.role)
        async with session_factory() as db:
            result = await db.execute(stmt)
            return [(row[0], row[1]) for row in result.all()]

    @staticmethod
    async def _recent_activity(session_factory: SessionFactory, limit: int) -> List[ActivityEntry]:
        stmt = (
            select(
                AuditLog.id,
                AuditLog.action,
                AuditLog.entity,
                AuditLog.created_at,
                AuditLog.user_id,
            )
            .order_by(AuditLog.created_at.desc())
            .limit(limit)
        )
        async with session_factory() as db:
            result = await db.execute(stmt)
            return [ActivityEntry(**row._mapping) for row in result.all()]

    @staticmethod
    async def compute_stats(
        session_factory: SessionFactory,
        now: Optional[datetime] = None,
    ) -> StatsSnapshot:
        """
        Compute the dashboard snapshot.

        Args:
            session_factory: Factory producing one AsyncSession per query
            now: Reference time (naive UTC); defaults to the current time

        Returns:
            StatsSnapshot with users, courses, enrollments and recent activity

        Raises:
            StoreFailure: If any of the queries fails. No partial snapshot is
                returned; queries still in flight are left to finish.
        """
        now = now or get_utc_now()
        signup_since = now - timedelta(days=settings.STATS_SIGNUP_WINDOW_DAYS)
        login_since = now - timedelta(days=settings.STATS_LOGIN_WINDOW_DAYS)
        count = StatsService._count

        try:
            (
                users_by_role,
                active_users,
                recent_signups,
                recent_logins,
                total_courses,
                enabled_courses,
                total_enrollments,
                active_enrollments,
                recent_activity,
            ) = await asyncio.gather(
                StatsService._users_by_role(session_factory),
                count(session_factory, select(func.count(User.id)).where(User.is_active.is_(True))),
                count(session_factory, select(func.count(User.id)).where(User.created_at >= signup_since)),
                count(session_factory, select(func.count(User.id)).where(User.last_login_at >= login_since)),
                count(session_factory, select(func.count(Course.id))),
                count(session_factory, select(func.count(Course.id)).where(Course.enabled.is_(True))),
                count(session_factory, select(func.count(Enrollment.id))),
                count(
                    session_factory,
                    select(func.count(Enrollment.id)).where(Enrollment.status == EnrollmentStatus.ACTIVE),
                ),
                StatsService._recent_activity(session_factory, settings.STATS_RECENT_ACTIVITY_LIMIT),
            )
        except Exception as exc:
            raise StoreFailure("An error occurred while fetching statistics") from exc

        role_counts = StatsService.build_role_counts(users_by_role)
        total_users = sum(role_counts.values())

        return StatsSnapshot(
            users=UserStats(
                total=total_users,
                by_role=role_counts,
                active=active_users,
                suspended=total_users - active_users,
                recent_signups=recent_signups,
                recent_logins=recent_logins,
            ),
            courses=CourseStats(total=total_courses, enabled=enabled_courses),
            enrollments=EnrollmentStats(total=total_enrollments, active=active_enrollments),
            recent_activity=recent_activity,
        )
