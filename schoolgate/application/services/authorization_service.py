"""Authorization orchestrator.

Composes the rate limiters, identity resolver, permission evaluator and
audit log into one call. Steps, each a potential early exit:

1. Sliding window check on the rate limit identifier (user id hint, else
   client IP), then the optional token bucket. A denial is audited and
   returned with ``rate_limited=True``; identity is not resolved.
2. Resolve the principal. A failure is audited as auth.login.failure and
   returned unauthorized.
3. Check required roles and/or resource+action (with conditions). A
   failure is audited as authz.access.denied and returned forbidden with
   the principal attached.
4. Audit authz.access.granted and return the principal.

Fail closed: an exception in any step becomes an unauthorized verdict whose
reason is the exception message. Nothing propagates out of ``authorize``.

Usage:
    service = build_authorization_service(identity_provider, profile_store)
    verdict = await service.authorize(request, admin_only())
    if not verdict.authorized:
        ...
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from schoolgate.application.dtos import AuthorizationRequirement, AuthorizationVerdict
from schoolgate.core.enums import ErrorCode
from schoolgate.core.errors import AuthenticationError, AuthorizationError
from schoolgate.core.result import Failure, Success
from schoolgate.domain.enums import AuditEventType
from schoolgate.domain.errors import RateLimitError
from schoolgate.domain.value_objects import Principal, RequestContext
from schoolgate.infrastructure.audit import request_metadata
from schoolgate.infrastructure.rate_limit.config import rate_limit_identifier

if TYPE_CHECKING:
    from schoolgate.domain.protocols import LoggerProtocol
    from schoolgate.infrastructure.audit import MemoryAuditLog
    from schoolgate.infrastructure.authorization import PermissionEvaluator
    from schoolgate.infrastructure.identity import IdentityResolver
    from schoolgate.infrastructure.rate_limit import (
        SlidingWindowRateLimiter,
        TokenBucketRateLimiter,
    )


class AuthorizationDenial:
    """Reason strings of refused requests."""

    RATE_LIMITED = "Rate limit exceeded"
    QUOTA_EXHAUSTED = "Request quota exhausted"
    MISSING_PERMISSION = "Missing permission: {permission}"
    CONDITION_NOT_MET = "Permission condition not met: {condition}"
    INSUFFICIENT_ROLE = "Insufficient permissions ({roles} required)"


class AuthorizationService:
    """Single entry point deciding whether a request may proceed.

    Dependencies (injected via constructor):
        - IdentityResolver: request -> Principal
        - PermissionEvaluator: role/resource/action decisions
        - SlidingWindowRateLimiter / TokenBucketRateLimiter: throttling
        - MemoryAuditLog: audit trail
        - LoggerProtocol: structured logging
    """

    def __init__(
        self,
        *,
        resolver: IdentityResolver,
        evaluator: PermissionEvaluator,
        sliding_window: SlidingWindowRateLimiter,
        token_bucket: TokenBucketRateLimiter,
        audit: MemoryAuditLog,
        logger: LoggerProtocol,
    ) -> None:
        self._resolver = resolver
        self._evaluator = evaluator
        self._sliding_window = sliding_window
        self._token_bucket = token_bucket
        self._audit = audit
        self._logger = logger

    async def authorize(
        self,
        request: RequestContext,
        requirement: AuthorizationRequirement,
    ) -> AuthorizationVerdict:
        """Decide whether ``request`` satisfies ``requirement``.

        Args:
            request: Incoming request snapshot.
            requirement: Roles, permission and rate limits to enforce.

        Returns:
            AuthorizationVerdict: Never raises.
        """
        try:
            return await self._authorize(request, requirement)
        except Exception as e:  # noqa: BLE001 - fail closed
            return self._fail_closed(request, requirement, e)

    async def _authorize(
        self,
        request: RequestContext,
        requirement: AuthorizationRequirement,
    ) -> AuthorizationVerdict:
        # Step 1: rate limiting
        identifier = rate_limit_identifier(request, request.user_id_hint)
        throttled = self._check_rate_limits(request, requirement, identifier)
        if isinstance(throttled, AuthorizationVerdict):
            return throttled
        remaining = throttled

        # Step 2: identity
        match await self._resolver.resolve(request):
            case Failure(error=auth_error):
                self._audit.log_auth_attempt(
                    success=False, reason=auth_error.message, request=request
                )
                return AuthorizationVerdict(
                    authorized=False, reason=auth_error.message, error=auth_error
                )
            case Success(value=principal):
                pass

        # Step 3: role and permission
        denial = self._check_requirement(principal, requirement)
        if denial is not None:
            self._audit.log_authz_check(
                success=False,
                user_id=principal.user_id,
                user_email=principal.email,
                user_role=principal.role.value,
                resource=requirement.resource.value if requirement.resource else None,
                action=requirement.action.value if requirement.action else None,
                reason=denial.message,
                request=request,
            )
            return AuthorizationVerdict(
                authorized=False,
                principal=principal,
                reason=denial.message,
                error=denial,
            )

        # Step 4: granted
        self._audit.log_authz_check(
            success=True,
            user_id=principal.user_id,
            user_email=principal.email,
            user_role=principal.role.value,
            resource=requirement.resource.value if requirement.resource else None,
            action=requirement.action.value if requirement.action else None,
            request=request,
        )
        return AuthorizationVerdict(
            authorized=True, principal=principal, rate_limit_remaining=remaining
        )

    def _check_rate_limits(
        self,
        request: RequestContext,
        requirement: AuthorizationRequirement,
        identifier: str,
    ) -> AuthorizationVerdict | int:
        """Run both limiters; return a verdict on denial, else the window budget."""
        rule = requirement.rate_limit
        window = self._sliding_window.check(identifier, rule)
        if not window.allowed:
            newly_blocked = window.attempts > rule.max_attempts
            self._audit.log_rate_limit_event(
                "exceeded" if newly_blocked else "blocked",
                identifier=identifier,
                attempts=window.attempts,
                request=request,
            )
            retry_after = window.retry_after(time.time())
            return AuthorizationVerdict(
                authorized=False,
                reason=AuthorizationDenial.RATE_LIMITED,
                rate_limited=True,
                retry_after_seconds=retry_after,
                error=RateLimitError(
                    code=(
                        ErrorCode.RATE_LIMIT_EXCEEDED
                        if newly_blocked
                        else ErrorCode.RATE_LIMIT_BLOCKED
                    ),
                    message=AuthorizationDenial.RATE_LIMITED,
                    identifier=identifier,
                    retry_after_seconds=retry_after,
                ),
            )

        if requirement.bucket is not None:
            bucket_key = f"{requirement.bucket_prefix}:{identifier}"
            bucket = self._token_bucket.check(bucket_key, requirement.bucket)
            if not bucket.allowed:
                self._audit.log(
                    AuditEventType.RATE_LIMIT_EXCEEDED,
                    success=False,
                    reason=AuthorizationDenial.QUOTA_EXHAUSTED,
                    metadata={
                        "identifier": bucket_key,
                        "retry_after_seconds": bucket.retry_after_seconds,
                    },
                    request=request_metadata(request),
                )
                return AuthorizationVerdict(
                    authorized=False,
                    reason=AuthorizationDenial.QUOTA_EXHAUSTED,
                    rate_limited=True,
                    retry_after_seconds=float(bucket.retry_after_seconds),
                    error=RateLimitError(
                        code=ErrorCode.QUOTA_EXHAUSTED,
                        message=AuthorizationDenial.QUOTA_EXHAUSTED,
                        identifier=bucket_key,
                        retry_after_seconds=float(bucket.retry_after_seconds),
                    ),
                )

        return window.remaining

    def _check_requirement(
        self,
        principal: Principal,
        requirement: AuthorizationRequirement,
    ) -> AuthorizationError | None:
        if requirement.roles and principal.role not in requirement.roles:
            accepted = " or ".join(role.value for role in requirement.roles)
            return AuthorizationError(
                code=ErrorCode.ROLE_NOT_ALLOWED,
                message=AuthorizationDenial.INSUFFICIENT_ROLE.format(roles=accepted),
                required_permission=",".join(role.value for role in requirement.roles),
            )

        if requirement.resource is None or requirement.action is None:
            return None

        permission = requirement.permission_key
        if not self._evaluator.has_permission(
            principal.role, requirement.resource, requirement.action
        ):
            return AuthorizationError(
                code=ErrorCode.PERMISSION_DENIED,
                message=AuthorizationDenial.MISSING_PERMISSION.format(
                    permission=permission
                ),
                required_permission=permission,
            )

        if not self._evaluator.check_with_conditions(
            principal.role,
            requirement.resource,
            requirement.action,
            requirement.context,
        ):
            condition = self._evaluator.get_conditions(
                principal.role, requirement.resource, requirement.action
            )
            return AuthorizationError(
                code=ErrorCode.CONDITION_NOT_MET,
                message=AuthorizationDenial.CONDITION_NOT_MET.format(
                    condition=condition.value if condition else "unknown"
                ),
                required_permission=permission,
            )

        return None

    def _fail_closed(
        self,
        request: RequestContext,
        requirement: AuthorizationRequirement,
        error: Exception,
    ) -> AuthorizationVerdict:
        reason = str(error)
        self._logger.error(
            "authorization_error",
            error=error,
            url=request.url,
            permission=requirement.permission_key,
        )
        try:
            self._audit.log(
                AuditEventType.AUTHZ_ACCESS_DENIED,
                success=False,
                resource=requirement.resource.value if requirement.resource else None,
                action=requirement.action.value if requirement.action else None,
                reason=reason,
                metadata={"error_type": type(error).__name__},
                request=request_metadata(request),
            )
        except Exception as audit_error:  # noqa: BLE001 - verdict must still be returned
            self._logger.error("audit_write_failed", error=audit_error)
        return AuthorizationVerdict(
            authorized=False,
            reason=reason,
            error=AuthenticationError(
                code=ErrorCode.AUTHORIZATION_FAILED,
                message=reason,
            ),
        )
