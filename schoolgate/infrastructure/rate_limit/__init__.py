"""In-memory rate limiters (sliding window and token bucket)."""

from schoolgate.infrastructure.rate_limit.config import (
    API_BUCKET,
    RATE_LIMIT_PRESETS,
    rate_limit_identifier,
)
from schoolgate.infrastructure.rate_limit.sliding_window import (
    SlidingWindowEntry,
    SlidingWindowRateLimiter,
)
from schoolgate.infrastructure.rate_limit.token_bucket import (
    TokenBucketEntry,
    TokenBucketRateLimiter,
)

__all__ = [
    "API_BUCKET",
    "RATE_LIMIT_PRESETS",
    "SlidingWindowEntry",
    "SlidingWindowRateLimiter",
    "TokenBucketEntry",
    "TokenBucketRateLimiter",
    "rate_limit_identifier",
]
