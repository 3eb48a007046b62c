"""Unit tests for MemoryCache.

Covers lazy TTL expiry, namespace isolation, size eviction, sweeping,
stats, and the read-through helper.
"""

import threading
import time
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from freezegun import freeze_time

from schoolgate.domain.value_objects import CacheConfig
from schoolgate.infrastructure.cache import CACHE_CONFIGS, MemoryCache


# =============================================================================
# Get / set / delete
# =============================================================================


class TestGetSet:
    """Tests for basic reads and writes."""

    def test_set_then_get_returns_value(self, cache: MemoryCache) -> None:
        """Should return the stored value."""
        cache.set("profile:u1", "teacher", namespace="auth")

        assert cache.get("profile:u1", namespace="auth") == "teacher"

    def test_missing_key_returns_none(self, cache: MemoryCache) -> None:
        """Should return None for unknown keys."""
        assert cache.get("nope") is None

    def test_overwrite_replaces_value(self, cache: MemoryCache) -> None:
        """Should keep the latest write."""
        cache.set("k", 1)
        cache.set("k", 2)

        assert cache.get("k") == 2

    def test_namespaces_are_isolated(self, cache: MemoryCache) -> None:
        """Same key in two namespaces should hold independent values."""
        cache.set("k", "a", namespace="auth")
        cache.set("k", "b", namespace="session")

        assert cache.get("k", namespace="auth") == "a"
        assert cache.get("k", namespace="session") == "b"
        assert cache.get("k") is None

    def test_delete_existing_returns_true(self, cache: MemoryCache) -> None:
        """Should remove the entry and report it existed."""
        cache.set("k", "v")

        assert cache.delete("k") is True
        assert cache.get("k") is None

    def test_delete_missing_returns_false(self, cache: MemoryCache) -> None:
        """Should report False when nothing was removed."""
        assert cache.delete("k") is False


# =============================================================================
# Expiry
# =============================================================================


class TestExpiry:
    """Tests for lazy TTL expiry."""

    def test_value_available_until_ttl(self, cache: MemoryCache) -> None:
        """Entry is live before expires_at."""
        with freeze_time("2024-01-01 12:00:00") as frozen:
            cache.set("k", "v", config=CacheConfig(ttl_seconds=0.1))
            frozen.tick(timedelta(seconds=0.05))

            assert cache.get("k") == "v"

    def test_value_absent_after_ttl(self, cache: MemoryCache) -> None:
        """Entry read past expires_at is reported absent and deleted."""
        with freeze_time("2024-01-01 12:00:00") as frozen:
            cache.set("k", "v", config=CacheConfig(ttl_seconds=0.1))
            frozen.tick(timedelta(seconds=0.15))

            assert cache.get("k") is None
            assert cache.stats().size == 0

    def test_default_config_is_profile_preset(self, cache: MemoryCache) -> None:
        """Without config the profile TTL (5 minutes) applies."""
        with freeze_time("2024-01-01 12:00:00") as frozen:
            cache.set("k", "v")
            frozen.tick(timedelta(minutes=4, seconds=59))
            assert cache.get("k") == "v"

            frozen.tick(timedelta(seconds=2))
            assert cache.get("k") is None


# =============================================================================
# Eviction
# =============================================================================


class TestEviction:
    """Tests for size-based eviction of the oldest entries."""

    def test_evicts_oldest_ten_percent(self, cache: MemoryCache) -> None:
        """Exceeding max_size should drop the oldest 10% of max_size."""
        config = CacheConfig(ttl_seconds=60, max_size=10)
        with freeze_time("2024-01-01 12:00:00") as frozen:
            for i in range(11):
                cache.set(f"k{i}", i, config=config)
                frozen.tick(timedelta(seconds=1))

            assert cache.stats().size == 10
            assert cache.get("k0") is None
            assert cache.get("k1") == 1
            assert cache.get("k10") == 10

    def test_evicts_at_least_one(self, cache: MemoryCache) -> None:
        """Small max_size still evicts one entry."""
        config = CacheConfig(ttl_seconds=60, max_size=3)
        with freeze_time("2024-01-01 12:00:00") as frozen:
            for i in range(4):
                cache.set(f"k{i}", i, config=config)
                frozen.tick(timedelta(seconds=1))

            assert cache.stats().size == 3
            assert cache.get("k0") is None
            assert [cache.get(f"k{i}") for i in range(1, 4)] == [1, 2, 3]

    def test_eviction_ignores_namespace(self, cache: MemoryCache) -> None:
        """Oldest entry goes regardless of which namespace it lives in."""
        config = CacheConfig(ttl_seconds=60, max_size=2)
        with freeze_time("2024-01-01 12:00:00") as frozen:
            cache.set("old", 1, namespace="session", config=config)
            frozen.tick(timedelta(seconds=1))
            cache.set("mid", 2, namespace="auth", config=config)
            frozen.tick(timedelta(seconds=1))
            cache.set("new", 3, namespace="auth", config=config)

            assert cache.get("old", namespace="session") is None
            assert cache.get("mid", namespace="auth") == 2
            assert cache.get("new", namespace="auth") == 3

    def test_no_max_size_never_evicts(self, cache: MemoryCache) -> None:
        config = CacheConfig(ttl_seconds=60)
        for i in range(50):
            cache.set(f"k{i}", i, config=config)

        assert cache.stats().size == 50


# =============================================================================
# Bulk operations and sweeping
# =============================================================================


class TestBulkOperations:
    """Tests for clear_namespace, clear_all and cleanup_expired."""

    def test_clear_namespace_counts_removed(self, cache: MemoryCache) -> None:
        """Should clear only the namespace and return the count."""
        cache.set("a", 1, namespace="auth")
        cache.set("b", 2, namespace="auth")
        cache.set("c", 3, namespace="session")

        assert cache.clear_namespace("auth") == 2
        assert cache.get("c", namespace="session") == 3

    def test_clear_namespace_does_not_match_prefixes(self, cache: MemoryCache) -> None:
        """Namespace "auth" must not clear "author"."""
        cache.set("a", 1, namespace="author")

        assert cache.clear_namespace("auth") == 0
        assert cache.get("a", namespace="author") == 1

    def test_colons_do_not_cross_namespaces(self, cache: MemoryCache) -> None:
        """("a", "b:x") and ("a:b", "x") are distinct entries."""
        cache.set("b:x", 1, namespace="a")
        cache.set("x", 2, namespace="a:b")

        assert cache.get("b:x", namespace="a") == 1
        assert cache.get("x", namespace="a:b") == 2
        assert cache.clear_namespace("a") == 1
        assert cache.get("x", namespace="a:b") == 2
        assert cache.stats().namespaces == {"a:b": 1}

    def test_clear_all(self, cache: MemoryCache) -> None:
        cache.set("a", 1)
        cache.set("b", 2, namespace="x")

        cache.clear_all()

        assert cache.stats().size == 0

    @pytest.mark.parametrize("batch_size", [None, 1, 2, 100])
    def test_cleanup_expired_removes_only_expired(
        self, cache: MemoryCache, batch_size: int | None
    ) -> None:
        """Sweep should remove expired entries in any batch size."""
        with freeze_time("2024-01-01 12:00:00") as frozen:
            cache.set("short1", 1, config=CacheConfig(ttl_seconds=1))
            cache.set("short2", 2, config=CacheConfig(ttl_seconds=1))
            cache.set("short3", 3, config=CacheConfig(ttl_seconds=1))
            cache.set("long", 4, config=CacheConfig(ttl_seconds=60))
            frozen.tick(timedelta(seconds=2))

            assert cache.cleanup_expired(batch_size=batch_size) == 3
            assert cache.get("long") == 4


# =============================================================================
# Stats
# =============================================================================


class TestStats:
    """Tests for stats()."""

    def test_empty_stats(self, cache: MemoryCache) -> None:
        stats = cache.stats()

        assert stats.size == 0
        assert stats.namespaces == {}
        assert stats.oldest_entry is None
        assert stats.newest_entry is None

    def test_stats_reports_namespaces_and_ages(self, cache: MemoryCache) -> None:
        """Should count per namespace and report oldest/newest created_at."""
        with freeze_time("2024-01-01 12:00:00") as frozen:
            cache.set("a", 1, namespace="auth")
            first = time.time()
            frozen.tick(timedelta(seconds=5))
            cache.set("b", 2, namespace="auth")
            cache.set("c", 3, namespace="session")

            stats = cache.stats()

        assert stats.size == 3
        assert stats.namespaces == {"auth": 2, "session": 1}
        assert stats.oldest_entry == pytest.approx(first)
        assert stats.newest_entry == pytest.approx(first + 5)


# =============================================================================
# Read-through helper
# =============================================================================


class TestGetOrSet:
    """Tests for the async read-through helper."""

    @pytest.mark.asyncio
    async def test_miss_fetches_and_caches(self, cache: MemoryCache) -> None:
        """Should await the fetcher once and cache its result."""
        fetcher = AsyncMock(return_value="staff")

        first = await cache.get_or_set("profile:u1", fetcher, namespace="auth")
        second = await cache.get_or_set("profile:u1", fetcher, namespace="auth")

        assert first == second == "staff"
        fetcher.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_uses_given_config(self, cache: MemoryCache) -> None:
        fetcher = AsyncMock(return_value={"id": "s1"})

        await cache.get_or_set(
            "s1", fetcher, namespace="session", config=CACHE_CONFIGS["session"]
        )

        assert cache.get("s1", namespace="session") == {"id": "s1"}


class TestCacheConfig:
    """Tests for CacheConfig validation and presets."""

    def test_presets(self) -> None:
        assert CACHE_CONFIGS["profile"] == CacheConfig(ttl_seconds=300, max_size=1000)
        assert CACHE_CONFIGS["session"] == CacheConfig(ttl_seconds=600, max_size=5000)
        assert CACHE_CONFIGS["permission"] == CacheConfig(
            ttl_seconds=900, max_size=500
        )

    def test_rejects_non_positive_ttl(self) -> None:
        with pytest.raises(ValueError, match="ttl_seconds must be positive"):
            CacheConfig(ttl_seconds=0)

    def test_rejects_non_positive_max_size(self) -> None:
        with pytest.raises(ValueError, match="max_size must be positive"):
            CacheConfig(ttl_seconds=1, max_size=0)


# =============================================================================
# Concurrency
# =============================================================================


class TestConcurrency:
    """Concurrent writers must keep the store within its size budget."""

    def test_concurrent_sets_respect_max_size(self, cache: MemoryCache) -> None:
        config = CacheConfig(ttl_seconds=60, max_size=100)
        barrier = threading.Barrier(8)
        errors: list[Exception] = []

        def worker(worker_id: int) -> None:
            barrier.wait()
            try:
                for i in range(200):
                    cache.set(f"w{worker_id}:k{i}", i, config=config)
                    cache.get(f"w{worker_id}:k{i}")
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert 90 <= cache.stats().size <= 100

    def test_concurrent_overwrites_keep_one_entry(self, cache: MemoryCache) -> None:
        barrier = threading.Barrier(8)

        def worker(worker_id: int) -> None:
            barrier.wait()
            for _ in range(200):
                cache.set("shared", worker_id, namespace="auth")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert cache.stats().namespaces == {"auth": 1}
        assert cache.get("shared", namespace="auth") in range(8)
