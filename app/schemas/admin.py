"""Admin dashboard schemas."""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import Field

from app.models.enums import UserRole
from app.schemas.responses import CamelModel


class UserStats(CamelModel):
    total: int = Field(..., ge=0, description="Sum of the four per-role counts")
    by_role: Dict[UserRole, int] = Field(
        ...,
        description="User count per role; every known role is present, zero when empty",
    )
    active: int = Field(..., ge=0)
    suspended: int = Field(..., description="total - active")
    recent_signups: int = Field(..., ge=0, description="Users created in the signup window (7 days)")
    recent_logins: int = Field(..., ge=0, description="Users who logged in within the login window (1 day)")


class CourseStats(CamelModel):
    total: int = Field(..., ge=0)
    enabled: int = Field(..., ge=0)


class EnrollmentStats(CamelModel):
    total: int = Field(..., ge=0)
    active: int = Field(..., ge=0, description="Enrollments with status ACTIVE")


class ActivityEntry(CamelModel):
    """Projection of an audit-log row"""
    id: UUID
    action: str
    entity: str
    created_at: datetime
    user_id: Optional[UUID] = None


class StatsSnapshot(CamelModel):
    """
    Dashboard statistics. Returned by GET /api/admin/stats.

    The counts come from independent concurrent queries and are not a
    single transactional view of the store.
    """
    users: UserStats
    courses: CourseStats
    enrollments: EnrollmentStats
    recent_activity: List[ActivityEntry] = Field(
        default_factory=list,
        description="Newest audit-log entries first",
    )
