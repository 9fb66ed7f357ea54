"""Centralized Enum Definitions"""

import enum


class UserRole(str, enum.Enum):
    """User roles for RBAC. The set is closed; dashboards report all four."""
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    INSTRUCTOR = "INSTRUCTOR"
    STUDENT = "STUDENT"


class EnrollmentStatus(str, enum.Enum):
    """Learner enrollment status on a course"""
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    PAUSED = "PAUSED"
    CANCELLED = "CANCELLED"
