"""Composition root.

Application-scoped singletons for the authorization pipeline:
- Logging (structlog console adapter)
- Cache (in-memory, namespaced TTL)
- Rate limiting (sliding window, token bucket)
- Audit log (in-memory ring buffer)
- Permission evaluator (Casbin, static policy)

The identity provider and profile store are external; callers pass them to
``build_authorization_service``.

Usage:
    from schoolgate.core.container import build_authorization_service

    service = build_authorization_service(identity_provider, profile_store)
    verdict = await service.authorize(request, admin_only())

    # Tests: reset singletons between cases
    get_cache.cache_clear()
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from schoolgate.core.config import settings

if TYPE_CHECKING:
    from schoolgate.application.services import AuthorizationService
    from schoolgate.domain.protocols import (
        IdentityProviderProtocol,
        LoggerProtocol,
        ProfileStoreProtocol,
    )
    from schoolgate.infrastructure.audit import MemoryAuditLog
    from schoolgate.infrastructure.authorization import PermissionEvaluator
    from schoolgate.infrastructure.cache import MemoryCache
    from schoolgate.infrastructure.jobs import PeriodicSweeper
    from schoolgate.infrastructure.rate_limit import (
        SlidingWindowRateLimiter,
        TokenBucketRateLimiter,
    )


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Get logger singleton.

    JSON output under testing/CI, colored console output otherwise.
    """
    from schoolgate.infrastructure.logging import ConsoleAdapter

    return ConsoleAdapter(use_json=settings.is_testing, level=settings.log_level)


@lru_cache()
def get_cache() -> "MemoryCache":
    """Get the process-wide cache."""
    from schoolgate.infrastructure.cache import MemoryCache

    return MemoryCache()


@lru_cache()
def get_sliding_window_limiter() -> "SlidingWindowRateLimiter":
    from schoolgate.infrastructure.rate_limit import SlidingWindowRateLimiter

    return SlidingWindowRateLimiter(logger=get_logger())


@lru_cache()
def get_token_bucket_limiter() -> "TokenBucketRateLimiter":
    from schoolgate.infrastructure.rate_limit import TokenBucketRateLimiter

    return TokenBucketRateLimiter()


@lru_cache()
def get_audit_log() -> "MemoryAuditLog":
    """Get the audit ring buffer (capacity from settings)."""
    from schoolgate.infrastructure.audit import MemoryAuditLog

    return MemoryAuditLog(logger=get_logger(), capacity=settings.audit_capacity)


@lru_cache()
def get_permission_evaluator() -> "PermissionEvaluator":
    """Get the evaluator loaded with the default role permission table."""
    from schoolgate.infrastructure.authorization import PermissionEvaluator

    return PermissionEvaluator()


@lru_cache()
def get_sweepers() -> "tuple[PeriodicSweeper, ...]":
    """Build (not start) the cache and rate limit sweepers.

    Usage:
        for sweeper in get_sweepers():
            sweeper.start()
    """
    from schoolgate.infrastructure.jobs import PeriodicSweeper

    batch_size = settings.sweep_batch_size
    idle_seconds = settings.rate_limit_idle_seconds
    cache = get_cache()
    sliding_window = get_sliding_window_limiter()
    token_bucket = get_token_bucket_limiter()

    return (
        PeriodicSweeper(
            name="cache-sweeper",
            interval_seconds=settings.cache_sweep_interval_seconds,
            jobs={"cache": lambda: cache.cleanup_expired(batch_size=batch_size)},
            logger=get_logger(),
        ),
        PeriodicSweeper(
            name="rate-limit-sweeper",
            interval_seconds=settings.rate_limit_sweep_interval_seconds,
            jobs={
                "sliding_window": lambda: sliding_window.cleanup_idle(
                    idle_seconds, batch_size=batch_size
                ),
                "token_bucket": lambda: token_bucket.cleanup_idle(
                    idle_seconds, batch_size=batch_size
                ),
            },
            logger=get_logger(),
        ),
    )


# ============================================================================
# Request Pipeline
# ============================================================================


def build_authorization_service(
    identity_provider: "IdentityProviderProtocol",
    profile_store: "ProfileStoreProtocol",
) -> "AuthorizationService":
    """Wire the orchestrator around the shared stores.

    Args:
        identity_provider: Validates session cookies and bearer tokens.
        profile_store: Reads a user's role.

    Returns:
        AuthorizationService sharing the app-scoped cache, limiters, audit
        log and evaluator.
    """
    from schoolgate.application.services import AuthorizationService
    from schoolgate.domain.value_objects import CacheConfig
    from schoolgate.infrastructure.identity import (
        BearerTokenStrategy,
        IdentityResolver,
        SessionCookieStrategy,
    )

    resolver = IdentityResolver(
        strategies=[
            SessionCookieStrategy(
                identity_provider, cookie_prefixes=settings.session_cookie_prefixes
            ),
            BearerTokenStrategy(identity_provider),
        ],
        profile_store=profile_store,
        cache=get_cache(),
        logger=get_logger(),
        cache_config=CacheConfig(
            ttl_seconds=settings.profile_cache_ttl_seconds,
            max_size=settings.profile_cache_max_size,
        ),
    )
    return AuthorizationService(
        resolver=resolver,
        evaluator=get_permission_evaluator(),
        sliding_window=get_sliding_window_limiter(),
        token_bucket=get_token_bucket_limiter(),
        audit=get_audit_log(),
        logger=get_logger(),
    )
