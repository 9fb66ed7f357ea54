"""User Model"""

from typing import Optional, Union

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator

from app.models.base import BaseModel, StatusMixin
from app.models.enums import UserRole


class RoleType(TypeDecorator):
    """
    VARCHAR role column.

    Known values load as `UserRole`; anything else stored in the column
    loads as the raw string instead of failing the whole row.
    """
    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value, dialect) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, UserRole):
            return value.value
        return str(value)

    def process_result_value(self, value, dialect) -> Optional[Union[UserRole, str]]:
        if value is None:
            return None
        try:
            return UserRole(value)
        except ValueError:
            return value


class User(BaseModel, StatusMixin):
    """
    Platform user. `is_active=False` means the account is suspended.
    """
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    image = Column(String(500), nullable=True)

    role = Column(RoleType(), nullable=False, default=UserRole.STUDENT, index=True)

    last_login_at = Column(DateTime, nullable=True, index=True)

    enrollments = relationship("Enrollment", back_populates="user", cascade="all, delete-orphan")
    audit_logs = relationship("AuditLog", back_populates="user")

    @property
    def has_known_role(self) -> bool:
        return isinstance(self.role, UserRole)

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
