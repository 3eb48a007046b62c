"""In-memory cache layer."""

from schoolgate.infrastructure.cache.config import CACHE_CONFIGS
from schoolgate.infrastructure.cache.memory_cache import (
    CacheEntry,
    CacheStats,
    MemoryCache,
)

__all__ = ["CACHE_CONFIGS", "CacheEntry", "CacheStats", "MemoryCache"]
