"""Permission components: resources, actions, and grant conditions.

Permissions are expressed as resource:action pairs (e.g. "grades:write"),
optionally narrowed by a PermissionCondition.

Usage:
    from schoolgate.domain.enums import Action, Resource

    evaluator.has_permission(UserRole.TEACHER, Resource.GRADES, Action.WRITE)
"""

from enum import Enum


class Resource(str, Enum):
    """Resources protected by the permission table.

    ALL is the wildcard: a grant on it covers every resource and action.
    """

    CLASSES = "classes"
    STUDENTS = "students"
    GRADES = "grades"
    ASSIGNMENTS = "assignments"
    ATTENDANCE = "attendance"
    CATEGORIES = "categories"
    """Assignment categories (grade weighting groups)."""
    ENROLLMENTS = "enrollments"
    USERS = "users"
    FINANCE = "finance"
    REPORTS = "reports"
    SETTINGS = "settings"
    IMPORT = "import"
    SYSTEM = "system"
    """System configuration (admin only)."""

    ALL = "*"
    """Wildcard resource."""

    @classmethod
    def values(cls) -> list[str]:
        """Get all resource values as strings."""
        return [resource.value for resource in cls]


class Action(str, Enum):
    """Actions that can be performed on resources.

    MANAGE subsumes every other action on the same resource.
    """

    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    MANAGE = "manage"

    @classmethod
    def values(cls) -> list[str]:
        """Get all action values as strings."""
        return [action.value for action in cls]


class PermissionCondition(str, Enum):
    """Predicate narrowing a permission grant.

    The set is closed; check_with_conditions dispatches over every variant.
    """

    UNCONDITIONAL = "unconditional"
    OWN_ONLY = "own_only"
    """Principal must be the resource owner."""

    CLASS_ONLY = "class_only"
    """Resource's class must be one of the principal's classes."""

    OWN_AND_CLASS = "own_and_class"
    """Both OWN_ONLY and CLASS_ONLY must hold."""

    @property
    def requires_ownership(self) -> bool:
        """True when the owner check applies."""
        return self in (PermissionCondition.OWN_ONLY, PermissionCondition.OWN_AND_CLASS)

    @property
    def requires_class_membership(self) -> bool:
        """True when the class membership check applies."""
        return self in (
            PermissionCondition.CLASS_ONLY,
            PermissionCondition.OWN_AND_CLASS,
        )
