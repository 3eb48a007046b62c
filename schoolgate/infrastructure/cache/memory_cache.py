"""In-memory namespaced TTL cache.

Entries are keyed by the ``(namespace, key)`` pair and expire lazily: a read past
``expires_at`` deletes the entry and reports a miss. A periodic sweep
(``cleanup_expired``) reclaims memory for keys nobody reads again.

Thread-safe: every read-modify-write runs under one lock per instance and
never awaits while holding it.

Usage:
    from schoolgate.infrastructure.cache import MemoryCache
    from schoolgate.infrastructure.cache.config import CACHE_CONFIGS

    cache = MemoryCache()
    cache.set("profile:u1", "teacher", namespace="auth",
              config=CACHE_CONFIGS["profile"])
    role = cache.get("profile:u1", namespace="auth")
"""

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from itertools import islice
from threading import Lock
from typing import Any, TypeAlias

from schoolgate.domain.value_objects import CacheConfig
from schoolgate.infrastructure.cache.config import CACHE_CONFIGS

EVICTION_FRACTION = 0.1


@dataclass(slots=True)
class CacheEntry:
    """Stored value with its lifetime (epoch seconds)."""

    data: Any
    created_at: float
    expires_at: float


@dataclass
class CacheStats:
    """Point-in-time view of the store.

    Attributes:
        size: Number of stored entries (expired but unswept included).
        namespaces: Entry count per namespace.
        oldest_entry: created_at of the oldest entry, None when empty.
        newest_entry: created_at of the newest entry, None when empty.
    """

    size: int = 0
    namespaces: dict[str, int] = field(default_factory=dict)
    oldest_entry: float | None = None
    newest_entry: float | None = None


CacheKey: TypeAlias = tuple[str, str]


def _cache_key(key: str, namespace: str) -> CacheKey:
    return (namespace, key)


class MemoryCache:
    """Namespaced key/value store with per-entry TTL and size eviction."""

    def __init__(self) -> None:
        self._store: dict[CacheKey, CacheEntry] = {}
        self._lock = Lock()

    def get(self, key: str, namespace: str = "default") -> Any | None:
        """Return the live value, or None when missing or expired.

        Expired entries are deleted as a side effect.
        """
        cache_key = _cache_key(key, namespace)
        with self._lock:
            entry = self._store.get(cache_key)
            if entry is None:
                return None
            if time.time() > entry.expires_at:
                del self._store[cache_key]
                return None
            return entry.data

    def set(
        self,
        key: str,
        value: Any,
        namespace: str = "default",
        config: CacheConfig | None = None,
    ) -> None:
        """Insert or overwrite a value.

        Args:
            key: Key within the namespace.
            value: Value to store.
            namespace: Logical partition (e.g. "auth").
            config: TTL and size budget. Defaults to the profile preset.
        """
        config = config or CACHE_CONFIGS["profile"]
        now = time.time()
        with self._lock:
            self._store[_cache_key(key, namespace)] = CacheEntry(
                data=value,
                created_at=now,
                expires_at=now + config.ttl_seconds,
            )
            if config.max_size is not None and len(self._store) > config.max_size:
                self._evict_oldest(max(1, int(config.max_size * EVICTION_FRACTION)))

    def delete(self, key: str, namespace: str = "default") -> bool:
        """Delete a value. Returns True if it existed."""
        with self._lock:
            return self._store.pop(_cache_key(key, namespace), None) is not None

    def clear_namespace(self, namespace: str) -> int:
        """Delete every entry in a namespace and return how many were removed."""
        with self._lock:
            doomed = [k for k in self._store if k[0] == namespace]
            for cache_key in doomed:
                del self._store[cache_key]
        return len(doomed)

    def clear_all(self) -> None:
        """Delete everything."""
        with self._lock:
            self._store.clear()

    def cleanup_expired(self, batch_size: int | None = None) -> int:
        """Delete expired entries.

        Args:
            batch_size: Keys examined per lock acquisition. None processes
                the whole store under one acquisition.

        Returns:
            int: Number of entries removed.
        """
        now = time.time()
        with self._lock:
            keys = list(self._store)
        step = batch_size or max(1, len(keys))
        removed = 0
        it = iter(keys)
        while batch := list(islice(it, step)):
            with self._lock:
                for cache_key in batch:
                    entry = self._store.get(cache_key)
                    if entry is not None and now > entry.expires_at:
                        del self._store[cache_key]
                        removed += 1
        return removed

    def stats(self) -> CacheStats:
        """Summarize size, namespaces and entry ages."""
        stats = CacheStats()
        with self._lock:
            stats.size = len(self._store)
            for (namespace, _), entry in self._store.items():
                stats.namespaces[namespace] = stats.namespaces.get(namespace, 0) + 1
                if stats.oldest_entry is None or entry.created_at < stats.oldest_entry:
                    stats.oldest_entry = entry.created_at
                if stats.newest_entry is None or entry.created_at > stats.newest_entry:
                    stats.newest_entry = entry.created_at
        return stats

    async def get_or_set(
        self,
        key: str,
        fetcher: Callable[[], Awaitable[Any]],
        namespace: str = "default",
        config: CacheConfig | None = None,
    ) -> Any:
        """Return the cached value or await ``fetcher`` and cache its result.

        The lock is not held across the await; two concurrent misses may
        both fetch, and the later write wins.
        """
        cached = self.get(key, namespace)
        if cached is not None:
            return cached
        value = await fetcher()
        self.set(key, value, namespace, config)
        return value

    def _evict_oldest(self, count: int) -> int:
        # Caller holds the lock.
        oldest = sorted(self._store.items(), key=lambda item: item[1].created_at)
        for cache_key, _ in oldest[:count]:
            del self._store[cache_key]
        return min(count, len(oldest))
