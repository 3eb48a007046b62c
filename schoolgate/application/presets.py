"""Common authorization requirements.

Usage:
    verdict = await service.authorize(request, staff_only())
    verdict = await service.authorize(
        request,
        requires_permission(
            Resource.GRADES,
            Action.WRITE,
            context=AccessContext(
                user_id=user_id,
                user_class_ids=frozenset(teacher_class_ids),
                resource_class_id=class_id,
            ),
        ),
    )
"""

from schoolgate.application.dtos import AuthorizationRequirement
from schoolgate.domain.enums import Action, Resource, UserRole
from schoolgate.domain.value_objects import AccessContext, SlidingWindowRule
from schoolgate.infrastructure.rate_limit.config import RATE_LIMIT_PRESETS


def authenticated(
    rate_limit: SlidingWindowRule = RATE_LIMIT_PRESETS["api"],
) -> AuthorizationRequirement:
    """Any authenticated user."""
    return AuthorizationRequirement(rate_limit=rate_limit)


def admin_only(
    rate_limit: SlidingWindowRule = RATE_LIMIT_PRESETS["api"],
) -> AuthorizationRequirement:
    """Admins only.

    Pass ``RATE_LIMIT_PRESETS["auth_strict"]`` for sensitive admin
    actions such as password resets.
    """
    return AuthorizationRequirement(roles=(UserRole.ADMIN,), rate_limit=rate_limit)


def staff_only() -> AuthorizationRequirement:
    """Admin or office staff."""
    return AuthorizationRequirement(roles=(UserRole.ADMIN, UserRole.STAFF))


def teacher_or_admin() -> AuthorizationRequirement:
    return AuthorizationRequirement(roles=(UserRole.TEACHER, UserRole.ADMIN))


def requires_permission(
    resource: Resource,
    action: Action,
    *,
    context: AccessContext | None = None,
    rate_limit: SlidingWindowRule = RATE_LIMIT_PRESETS["api"],
) -> AuthorizationRequirement:
    """A resource/action permission, optionally narrowed by context.

    Args:
        resource: Resource being accessed.
        action: Action being performed.
        context: Ownership/class facts for conditional grants. Without it a
            conditional grant is refused.
        rate_limit: Sliding window rule.
    """
    return AuthorizationRequirement(
        resource=resource,
        action=action,
        context=context,
        rate_limit=rate_limit,
    )
