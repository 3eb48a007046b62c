"""Permission evaluator backed by an in-memory Casbin enforcer.

The role permission table is loaded into Casbin as policy rows
``(role, resource, action, condition)``. Matching follows three rules:

1. A grant on resource ``*`` matches any resource and action.
2. A grant on ``(resource, action)`` matches exactly.
3. A grant on ``(resource, manage)`` matches any action on that resource.

The first matching row (table order) wins; its condition column decides
whether caller-supplied context must be checked.

The evaluator is pure: no I/O, no external state, safe to share between
threads once constructed.

Usage:
    evaluator = PermissionEvaluator()
    evaluator.has_permission("teacher", "grades", "write")  # True
    evaluator.check_with_conditions(
        "teacher", "grades", "write",
        AccessContext(user_class_ids=frozenset({"c1"}), resource_class_id="c1"),
    )  # True
"""

from collections.abc import Mapping

import casbin

from schoolgate.domain.enums import Action, PermissionCondition, Resource, UserRole
from schoolgate.domain.value_objects import AccessContext, Permission
from schoolgate.infrastructure.authorization.permission_table import (
    ROLE_PERMISSIONS,
    validate_permission_table,
)

CASBIN_MODEL = """
[request_definition]
r = sub, obj, act

[policy_definition]
p = sub, obj, act, cond

[policy_effect]
e = some(where (p.eft == allow))

[matchers]
m = r.sub == p.sub && (p.obj == "*" || (r.obj == p.obj && (r.act == p.act || p.act == "manage")))
"""

# Roles with operational admin access (admin console, user management).
_ADMIN_ACCESS_ROLES = frozenset({UserRole.ADMIN, UserRole.STAFF})


def _coerce_role(role: UserRole | str) -> UserRole | None:
    try:
        return UserRole(role)
    except ValueError:
        return None


class PermissionEvaluator:
    """Decides whether a role may perform an action on a resource.

    Args:
        table: Role permission table. Defaults to ROLE_PERMISSIONS.

    Raises:
        ValueError: If the table does not cover every UserRole.
    """

    def __init__(
        self, table: Mapping[UserRole, tuple[Permission, ...]] | None = None
    ) -> None:
        self._table = ROLE_PERMISSIONS if table is None else table
        validate_permission_table(self._table)

        model = casbin.Enforcer.new_model(text=CASBIN_MODEL)
        self._enforcer = casbin.Enforcer(model)
        for role, permissions in self._table.items():
            for permission in permissions:
                self._enforcer.add_policy(
                    role.value,
                    permission.resource.value,
                    permission.action.value,
                    permission.condition.value,
                )

    # -------------------------------------------------------------------------
    # Core checks
    # -------------------------------------------------------------------------
    def has_permission(
        self,
        role: UserRole | str,
        resource: Resource | str,
        action: Action | str,
    ) -> bool:
        """Whether any grant of ``role`` covers ``resource``/``action``.

        Unknown role, resource or action strings are denied.
        """
        return self._first_match(role, resource, action) is not None

    def get_conditions(
        self,
        role: UserRole | str,
        resource: Resource | str,
        action: Action | str,
    ) -> PermissionCondition | None:
        """Condition of the first matching grant.

        Returns:
            PermissionCondition | None: None when no grant matches,
            UNCONDITIONAL for a plain grant.
        """
        return self._first_match(role, resource, action)

    def check_with_conditions(
        self,
        role: UserRole | str,
        resource: Resource | str,
        action: Action | str,
        context: AccessContext | None = None,
    ) -> bool:
        """Permission check including the grant's condition.

        A conditional grant evaluated without context is denied.

        Args:
            role: Caller role.
            resource: Resource being accessed.
            action: Action being performed.
            context: Ownership and class facts supplied by the caller.

        Returns:
            bool: True when a grant matches and its condition holds.
        """
        condition = self._first_match(role, resource, action)
        if condition is None:
            return False
        return condition_satisfied(condition, context)

    # -------------------------------------------------------------------------
    # Role helpers
    # -------------------------------------------------------------------------
    def role_permissions(self, role: UserRole | str) -> tuple[Permission, ...]:
        """All grants of a role (empty for unknown roles)."""
        known = _coerce_role(role)
        if known is None:
            return ()
        return self._table.get(known, ())

    def is_admin_role(self, role: UserRole | str) -> bool:
        """Whether the role holds a wildcard grant."""
        return any(p.resource is Resource.ALL for p in self.role_permissions(role))

    def has_admin_access(self, role: UserRole | str) -> bool:
        """Admin or staff: may open administrative features."""
        return _coerce_role(role) in _ADMIN_ACCESS_ROLES

    def is_super_admin(self, role: UserRole | str) -> bool:
        return _coerce_role(role) is UserRole.ADMIN

    def can_manage_users(self, role: UserRole | str) -> bool:
        return _coerce_role(role) in _ADMIN_ACCESS_ROLES

    def can_access_finance(self, role: UserRole | str) -> bool:
        return _coerce_role(role) in _ADMIN_ACCESS_ROLES

    def can_configure_system(self, role: UserRole | str) -> bool:
        return _coerce_role(role) is UserRole.ADMIN

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------
    def _first_match(
        self,
        role: UserRole | str,
        resource: Resource | str,
        action: Action | str,
    ) -> PermissionCondition | None:
        try:
            request = (
                UserRole(role).value,
                Resource(resource).value,
                Action(action).value,
            )
        except ValueError:
            return None

        allowed, explain_rule = self._enforcer.enforce_ex(*request)
        if not allowed or not explain_rule:
            return None
        return PermissionCondition(explain_rule[3])


def condition_satisfied(
    condition: PermissionCondition, context: AccessContext | None
) -> bool:
    """Evaluate a grant condition against caller-supplied context.

    Args:
        condition: Condition attached to the matching grant.
        context: Ownership and class facts; None fails every condition
            except UNCONDITIONAL.

    Returns:
        bool: Whether the condition holds.
    """
    if condition is PermissionCondition.UNCONDITIONAL:
        return True
    if context is None:
        return False

    if condition.requires_ownership:
        if not context.user_id or not context.resource_owner_id:
            return False
        if context.user_id != context.resource_owner_id:
            return False

    if condition.requires_class_membership:
        if not context.resource_class_id:
            return False
        if context.resource_class_id not in context.user_class_ids:
            return False

    return True


def describe_permission(permission: Permission) -> str:
    """Human-readable grant, e.g. "Can write grades (within their classes)"."""
    description = f"Can {permission.action.value} {permission.resource.value}"
    if permission.condition.requires_ownership:
        description += " (own only)"
    if permission.condition.requires_class_membership:
        description += " (within their classes)"
    return description
