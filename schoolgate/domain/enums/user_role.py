"""User roles for school authorization.

Role Hierarchy:
    - admin: Super admin, full system access (wildcard grants)
    - staff: Office staff, operations without system configuration
    - teacher: Teaching functions scoped to own classes
    - student: Self-service, own data only

Usage:
    from schoolgate.domain.enums import UserRole

    if principal.role is UserRole.ADMIN:
        ...
"""

from enum import Enum


class UserRole(str, Enum):
    """Closed set of roles known to the permission table.

    String Enum:
        Inherits from str so values round-trip through the profile store
        and Casbin policy rows unchanged.
    """

    ADMIN = "admin"
    """Super admin with wildcard access to every resource."""

    STAFF = "staff"
    """Office staff: users, students, classes, finance; no settings/system."""

    TEACHER = "teacher"
    """Teacher: grading, attendance, and assignments within own classes."""

    STUDENT = "student"
    """Student: reads own grades, attendance, and enrolled classes."""

    @classmethod
    def values(cls) -> list[str]:
        """Get all role values as strings.

        Returns:
            list[str]: ['admin', 'staff', 'teacher', 'student'].
        """
        return [role.value for role in cls]

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a string is a valid role.

        Args:
            value: String to check.

        Returns:
            bool: True if value is a valid role.
        """
        return value in cls.values()
