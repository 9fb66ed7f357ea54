"""Models Package - Export all models for easy imports"""

from app.models.base import BaseModel, StatusMixin
from app.models.enums import UserRole, EnrollmentStatus
from app.models.user import User
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.audit import AuditLog


__all__ = [
    # Base classes
    "BaseModel",
    "StatusMixin",

    # Enums
    "UserRole",
    "EnrollmentStatus",

    # Models
    "User",
    "Course",
    "Enrollment",
    "AuditLog",
]
