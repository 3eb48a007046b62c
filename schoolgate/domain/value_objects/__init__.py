"""Domain value objects (immutable)."""

from schoolgate.domain.value_objects.cache_config import CacheConfig
from schoolgate.domain.value_objects.permission import AccessContext, Permission
from schoolgate.domain.value_objects.principal import Principal, RawIdentity
from schoolgate.domain.value_objects.rate_limit_rule import (
    SlidingWindowResult,
    SlidingWindowRule,
    SlidingWindowStatus,
    TokenBucketResult,
    TokenBucketRule,
)
from schoolgate.domain.value_objects.request_context import RequestContext

__all__ = [
    "AccessContext",
    "CacheConfig",
    "Permission",
    "Principal",
    "RawIdentity",
    "RequestContext",
    "SlidingWindowResult",
    "SlidingWindowRule",
    "SlidingWindowStatus",
    "TokenBucketResult",
    "TokenBucketRule",
]
