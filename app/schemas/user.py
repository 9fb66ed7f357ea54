"""User Directory Schemas"""

from datetime import datetime
from typing import List, Optional, Union
from uuid import UUID

from pydantic import EmailStr, Field

from app.models.enums import UserRole
from app.schemas.responses import CamelModel, Pagination


class UserSummary(CamelModel):
    """
    User row as shown in the admin user table.

    `role` is normally a `UserRole`; a value the platform does not know is
    passed through as the stored string.
    """
    id: UUID
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    role: Union[UserRole, str]
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime
    enrollment_count: int = 0


class UserListResponse(CamelModel):
    users: List[UserSummary]
    pagination: Pagination


class UserUpdate(CamelModel):
    """Fields an admin may change on another account; all optional"""
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
