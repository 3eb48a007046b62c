"""Rate limit presets and identifier derivation.

Presets:
    auth: login-style endpoints, 10 attempts per minute, 15 minute block.
    auth_strict: password reset and similar, 5 per minute, 30 minute block.
    api: general API traffic, 100 per minute, 5 minute block.

API_BUCKET shapes bursty API clients: 60 token burst, 2 tokens per second.

Usage:
    from schoolgate.infrastructure.rate_limit.config import (
        RATE_LIMIT_PRESETS,
        rate_limit_identifier,
    )

    identifier = rate_limit_identifier(request)
    limiter.check(identifier, RATE_LIMIT_PRESETS["auth"])
"""

from types import MappingProxyType

from schoolgate.domain.value_objects import (
    RequestContext,
    SlidingWindowRule,
    TokenBucketRule,
)

RATE_LIMIT_PRESETS: MappingProxyType[str, SlidingWindowRule] = MappingProxyType(
    {
        "auth": SlidingWindowRule(
            max_attempts=10,
            window_seconds=60.0,
            block_duration_seconds=15 * 60.0,
        ),
        "auth_strict": SlidingWindowRule(
            max_attempts=5,
            window_seconds=60.0,
            block_duration_seconds=30 * 60.0,
        ),
        "api": SlidingWindowRule(
            max_attempts=100,
            window_seconds=60.0,
            block_duration_seconds=5 * 60.0,
        ),
    }
)

API_BUCKET = TokenBucketRule(capacity=60, refill_per_second=2.0)


def rate_limit_identifier(request: RequestContext, user_id: str | None = None) -> str:
    """Derive the rate limit key for a request.

    Args:
        request: Incoming request snapshot.
        user_id: Known user id; preferred over the client address.

    Returns:
        str: "user:<id>" or "ip:<address>" ("ip:unknown" when no address).
    """
    if user_id:
        return f"user:{user_id}"
    return f"ip:{request.client_ip or 'unknown'}"
