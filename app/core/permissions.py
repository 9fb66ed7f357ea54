"""Role-Based Capability Checks"""

import enum
from typing import Dict, FrozenSet, Iterable, List, Union

from app.models.enums import UserRole


class Permission(str, enum.Enum):
    """Named capabilities checked against a caller's role"""
    USERS_VIEW = "users:view"
    USERS_CREATE = "users:create"
    USERS_EDIT = "users:edit"
    USERS_DELETE = "users:delete"
    USERS_ASSIGN_ROLES = "users:assign_roles"
    COURSES_VIEW_ALL = "courses:view_all"
    COURSES_VIEW_ASSIGNED = "courses:view_assigned"
    COURSES_ENABLE_DISABLE = "courses:enable_disable"
    COURSES_ASSIGN_INSTRUCTORS = "courses:assign_instructors"
    CONTENT_VIEW = "content:view"
    CONTENT_EDIT_NOTES = "content:edit_notes"
    CONTENT_DOWNLOAD_ALL = "content:download_all"
    CONTENT_DOWNLOAD_STUDENT = "content:download_student"
    PROGRESS_VIEW_OWN = "progress:view_own"
    PROGRESS_VIEW_ALL = "progress:view_all"
    PROGRESS_MARK_OWN = "progress:mark_own"
    PROGRESS_MARK_OTHERS = "progress:mark_others"
    ADMIN_ACCESS = "admin:access"
    ADMIN_ANALYTICS = "admin:analytics"
    ADMIN_SETTINGS = "admin:settings"


RoleLike = Union[UserRole, str]
PermissionLike = Union[Permission, str]

_INSTRUCTOR_PERMISSIONS = frozenset({
    Permission.COURSES_VIEW_ASSIGNED,
    Permission.CONTENT_VIEW,
    Permission.CONTENT_EDIT_NOTES,
    Permission.CONTENT_DOWNLOAD_ALL,
    Permission.CONTENT_DOWNLOAD_STUDENT,
    # Per-course scoping of progress is enforced on the data, not here
    Permission.PROGRESS_VIEW_OWN,
    Permission.PROGRESS_MARK_OWN,
})

_STUDENT_PERMISSIONS = frozenset({
    Permission.COURSES_VIEW_ASSIGNED,
    Permission.CONTENT_VIEW,
    Permission.CONTENT_DOWNLOAD_STUDENT,
    Permission.PROGRESS_VIEW_OWN,
    Permission.PROGRESS_MARK_OWN,
})

ROLE_PERMISSIONS: Dict[UserRole, FrozenSet[Permission]] = {
    UserRole.SUPER_ADMIN: frozenset(Permission),
    UserRole.ADMIN: frozenset(Permission) - {Permission.USERS_DELETE},
    UserRole.INSTRUCTOR: _INSTRUCTOR_PERMISSIONS,
    UserRole.STUDENT: _STUDENT_PERMISSIONS,
}

ROLE_DISPLAY_NAMES: Dict[UserRole, str] = {
    UserRole.SUPER_ADMIN: "Super Administrator",
    UserRole.ADMIN: "Administrator",
    UserRole.INSTRUCTOR: "Instructor",
    UserRole.STUDENT: "Student",
}

ROLE_DESCRIPTIONS: Dict[UserRole, str] = {
    UserRole.SUPER_ADMIN: "Full system access including user deletion and system settings",
    UserRole.ADMIN: "User management, course assignments, and organization settings",
    UserRole.INSTRUCTOR: "Full access to assigned courses and student progress tracking",
    UserRole.STUDENT: "Read-only access to enrolled courses with personal progress tracking",
}

ASSIGNABLE_ROLES: Dict[UserRole, FrozenSet[UserRole]] = {
    UserRole.SUPER_ADMIN: frozenset(UserRole),
    UserRole.ADMIN: frozenset({UserRole.ADMIN, UserRole.INSTRUCTOR, UserRole.STUDENT}),
    UserRole.INSTRUCTOR: frozenset(),
    UserRole.STUDENT: frozenset(),
}


def _coerce_role(role: RoleLike):
    try:
        return UserRole(role)
    except ValueError:
        return None


def _coerce_permission(permission: PermissionLike):
    try:
        return Permission(permission)
    except ValueError:
        return None


def has_permission(role: RoleLike, permission: PermissionLike) -> bool:
    """
    Check if a role grants a capability.

    Unknown roles and unknown capability names are never granted.
    """
    resolved_role = _coerce_role(role)
    resolved_permission = _coerce_permission(permission)
    if resolved_role is None or resolved_permission is None:
        return False
    return resolved_permission in ROLE_PERMISSIONS[resolved_role]


def has_all_permissions(role: RoleLike, permissions: Iterable[PermissionLike]) -> bool:
    """Check if a role grants every capability in `permissions`"""
    return all(has_permission(role, permission) for permission in permissions)


def has_any_permission(role: RoleLike, permissions: Iterable[PermissionLike]) -> bool:
    """Check if a role grants at least one capability in `permissions`"""
    return any(has_permission(role, permission) for permission in permissions)


def get_permissions(role: RoleLike) -> List[Permission]:
    """All capabilities of a role, in declaration order"""
    resolved_role = _coerce_role(role)
    if resolved_role is None:
        return []
    granted = ROLE_PERMISSIONS[resolved_role]
    return [permission for permission in Permission if permission in granted]


def can_assign_role(assigner_role: RoleLike, target_role: RoleLike) -> bool:
    """Check if a user holding `assigner_role` may give `target_role` to someone"""
    assigner = _coerce_role(assigner_role)
    target = _coerce_role(target_role)
    if assigner is None or target is None:
        return False
    return target in ASSIGNABLE_ROLES[assigner]
