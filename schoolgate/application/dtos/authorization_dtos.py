"""Authorization request/response DTOs.

AuthorizationRequirement describes what an endpoint demands; the verdict is
the externally visible contract upstream handlers translate into HTTP
responses (401/403/429).
"""

from dataclasses import dataclass

from schoolgate.core.errors import AuthorizationError, DomainError
from schoolgate.domain.enums import Action, Resource, UserRole
from schoolgate.domain.errors import RateLimitError
from schoolgate.domain.value_objects import (
    AccessContext,
    Principal,
    SlidingWindowRule,
    TokenBucketRule,
)
from schoolgate.infrastructure.rate_limit.config import RATE_LIMIT_PRESETS


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthorizationRequirement:
    """What a protected operation requires.

    Roles and resource/action may be combined; both must then hold. With
    neither, any authenticated principal is accepted.

    Attributes:
        roles: Accepted roles (any of).
        resource: Resource the operation touches.
        action: Action performed on the resource.
        context: Ownership/class facts for conditional grants.
        rate_limit: Sliding window applied before identity resolution.
        bucket: Optional token bucket applied after the sliding window.
        bucket_prefix: Namespace of token bucket keys.

    Raises:
        ValueError: If only one of resource and action is given.
    """

    roles: tuple[UserRole, ...] = ()
    resource: Resource | None = None
    action: Action | None = None
    context: AccessContext | None = None
    rate_limit: SlidingWindowRule = RATE_LIMIT_PRESETS["api"]
    bucket: TokenBucketRule | None = None
    bucket_prefix: str = "bucket"

    def __post_init__(self) -> None:
        if (self.resource is None) != (self.action is None):
            raise ValueError("resource and action must be given together")

    @property
    def permission_key(self) -> str | None:
        """Required permission as "resource:action", if any."""
        if self.resource is None or self.action is None:
            return None
        return f"{self.resource.value}:{self.action.value}"


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthorizationVerdict:
    """Outcome of AuthorizationService.authorize.

    Attributes:
        authorized: Whether the request may proceed.
        principal: Resolved caller (also set on permission denials).
        reason: Why the request was refused.
        rate_limited: True when a rate limiter refused the request.
        error: Typed failure (AuthenticationError, AuthorizationError or
            RateLimitError).
        retry_after_seconds: Backoff hint for rate limited requests.
        rate_limit_remaining: Sliding window budget left after this request.
    """

    authorized: bool
    principal: Principal | None = None
    reason: str | None = None
    rate_limited: bool = False
    error: DomainError | None = None
    retry_after_seconds: float | None = None
    rate_limit_remaining: int | None = None

    @property
    def forbidden(self) -> bool:
        """Authenticated but lacking the required role or permission."""
        return isinstance(self.error, AuthorizationError)

    @property
    def rate_limit_error(self) -> RateLimitError | None:
        return self.error if isinstance(self.error, RateLimitError) else None
