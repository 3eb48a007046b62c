"""Cache presets.

Usage:
    from schoolgate.infrastructure.cache.config import CACHE_CONFIGS

    cache.set(key, role, namespace="auth", config=CACHE_CONFIGS["profile"])
"""

from types import MappingProxyType

from schoolgate.domain.value_objects import CacheConfig

# Role data is short lived on purpose: a role change takes effect within
# minutes even without an explicit invalidate.
CACHE_CONFIGS: MappingProxyType[str, CacheConfig] = MappingProxyType(
    {
        "profile": CacheConfig(ttl_seconds=5 * 60, max_size=1000),
        "session": CacheConfig(ttl_seconds=10 * 60, max_size=5000),
        "permission": CacheConfig(ttl_seconds=15 * 60, max_size=500),
    }
)
