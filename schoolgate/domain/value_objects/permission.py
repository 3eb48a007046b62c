"""Permission value objects.

Usage:
    Permission(
        resource=Resource.GRADES,
        action=Action.WRITE,
        condition=PermissionCondition.CLASS_ONLY,
    )

    AccessContext(
        user_id="t1",
        user_class_ids=frozenset({"c1", "c2"}),
        resource_class_id="c1",
    )
"""

from dataclasses import dataclass, field

from schoolgate.domain.enums import Action, PermissionCondition, Resource


@dataclass(frozen=True, slots=True, kw_only=True)
class Permission:
    """A single grant in the role permission table.

    Attributes:
        resource: Protected resource, or Resource.ALL for the wildcard.
        action: Granted action. MANAGE covers every action on the resource.
        condition: Predicate narrowing the grant.
    """

    resource: Resource
    action: Action
    condition: PermissionCondition = PermissionCondition.UNCONDITIONAL

    @property
    def key(self) -> str:
        """Permission in resource:action form (e.g. "grades:write")."""
        return f"{self.resource.value}:{self.action.value}"


@dataclass(frozen=True, slots=True, kw_only=True)
class AccessContext:
    """Caller-supplied facts for conditional grants.

    The evaluator never fetches these itself.

    Attributes:
        user_id: Principal's user id.
        resource_owner_id: Owner of the resource being accessed.
        user_class_ids: Classes the principal teaches or attends.
        resource_class_id: Class the resource belongs to.
    """

    user_id: str | None = None
    resource_owner_id: str | None = None
    user_class_ids: frozenset[str] = field(default_factory=frozenset)
    resource_class_id: str | None = None
