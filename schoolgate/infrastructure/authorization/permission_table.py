"""Role permission table.

Static, loaded at import time, never mutated. Order matters: for a given
(role, resource, action) the first matching grant decides the condition.

Role Hierarchy:
    - admin: wildcard grants on every resource
    - staff: operational access (users, students, classes, enrollments,
      attendance, finance, import) with read-only oversight of grades,
      assignments and reports; no settings or system access
    - teacher: class-scoped teaching functions
    - student: own data and enrolled classes, read only
"""

from collections.abc import Mapping
from types import MappingProxyType

from schoolgate.domain.enums import Action, PermissionCondition, Resource, UserRole
from schoolgate.domain.value_objects import Permission

_OWN = PermissionCondition.OWN_ONLY
_CLASS = PermissionCondition.CLASS_ONLY


def _grant(
    resource: Resource,
    *actions: Action,
    condition: PermissionCondition = PermissionCondition.UNCONDITIONAL,
) -> tuple[Permission, ...]:
    return tuple(
        Permission(resource=resource, action=action, condition=condition)
        for action in actions
    )


READ, WRITE, DELETE, MANAGE = Action.READ, Action.WRITE, Action.DELETE, Action.MANAGE

ROLE_PERMISSIONS: Mapping[UserRole, tuple[Permission, ...]] = MappingProxyType(
    {
        UserRole.ADMIN: _grant(Resource.ALL, READ, WRITE, DELETE, MANAGE),
        UserRole.STAFF: (
            # No user or student deletes; admins handle removals.
            *_grant(Resource.USERS, READ, WRITE),
            *_grant(Resource.STUDENTS, READ, WRITE),
            *_grant(Resource.CLASSES, READ, WRITE),
            *_grant(Resource.ENROLLMENTS, READ, WRITE, DELETE),
            *_grant(Resource.GRADES, READ),
            *_grant(Resource.ASSIGNMENTS, READ),
            *_grant(Resource.CATEGORIES, READ),
            *_grant(Resource.ATTENDANCE, READ, WRITE),
            *_grant(Resource.FINANCE, READ, WRITE),
            *_grant(Resource.REPORTS, READ),
            *_grant(Resource.IMPORT, READ, WRITE),
        ),
        UserRole.TEACHER: (
            *_grant(Resource.CLASSES, READ),
            *_grant(Resource.CLASSES, WRITE, condition=_CLASS),
            *_grant(Resource.STUDENTS, READ),
            *_grant(Resource.STUDENTS, WRITE, condition=_CLASS),
            *_grant(Resource.GRADES, READ, WRITE, DELETE, condition=_CLASS),
            *_grant(Resource.ASSIGNMENTS, READ, WRITE, DELETE, condition=_CLASS),
            *_grant(Resource.CATEGORIES, READ, WRITE, DELETE, condition=_CLASS),
            *_grant(Resource.ATTENDANCE, READ, WRITE, DELETE, condition=_CLASS),
            *_grant(Resource.ENROLLMENTS, READ, WRITE, condition=_CLASS),
            *_grant(Resource.REPORTS, READ, condition=_CLASS),
        ),
        UserRole.STUDENT: (
            *_grant(Resource.CLASSES, READ, condition=_CLASS),
            *_grant(Resource.GRADES, READ, condition=_OWN),
            *_grant(Resource.ASSIGNMENTS, READ, condition=_CLASS),
            *_grant(Resource.ATTENDANCE, READ, condition=_OWN),
            *_grant(Resource.REPORTS, READ, condition=_OWN),
        ),
    }
)


def validate_permission_table(table: Mapping[UserRole, tuple[Permission, ...]]) -> None:
    """Check the table covers every role.

    Raises:
        ValueError: If a UserRole has no entry.
    """
    missing = [role.value for role in UserRole if role not in table]
    if missing:
        raise ValueError(f"permission table has no entry for roles: {missing}")
