"""Unit tests for SlidingWindowRateLimiter.

Covers the allow/deny sequence, hard blocks, window rollover, status,
snapshots, idle cleanup, and concurrent increments.
"""

import threading
import time
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from schoolgate.domain.value_objects import SlidingWindowRule
from schoolgate.infrastructure.rate_limit import (
    RATE_LIMIT_PRESETS,
    SlidingWindowRateLimiter,
)

RULE = SlidingWindowRule(
    max_attempts=10, window_seconds=60.0, block_duration_seconds=900.0
)
IDENTIFIER = "ip:1.2.3.4"


# =============================================================================
# check()
# =============================================================================


class TestCheck:
    """Tests for the counting and blocking sequence."""

    def test_remaining_counts_down(self, sliding_window: SlidingWindowRateLimiter) -> None:
        """Ten attempts should be allowed with remaining 9..0."""
        with freeze_time("2024-01-01 12:00:00"):
            results = [sliding_window.check(IDENTIFIER, RULE) for _ in range(10)]

        assert all(r.allowed for r in results)
        assert [r.remaining for r in results] == list(range(9, -1, -1))
        assert [r.attempts for r in results] == list(range(1, 11))

    def test_eleventh_attempt_blocks(self, sliding_window: SlidingWindowRateLimiter) -> None:
        """Exceeding max_attempts should deny and set block_until."""
        with freeze_time("2024-01-01 12:00:00"):
            for _ in range(10):
                sliding_window.check(IDENTIFIER, RULE)
            result = sliding_window.check(IDENTIFIER, RULE)
            now = time.time()

        assert result.allowed is False
        assert result.blocked is True
        assert result.remaining == 0
        assert result.attempts == 11
        assert result.block_until == pytest.approx(now + 900.0)

    def test_blocked_check_does_not_count(
        self, sliding_window: SlidingWindowRateLimiter
    ) -> None:
        """Checks during a block are denied and leave the count capped."""
        with freeze_time("2024-01-01 12:00:00") as frozen:
            for _ in range(11):
                sliding_window.check(IDENTIFIER, RULE)
            frozen.tick(timedelta(seconds=10))
            result = sliding_window.check(IDENTIFIER, RULE)

        assert result.allowed is False
        assert result.blocked is True
        assert result.attempts == RULE.max_attempts
        assert sliding_window.snapshot()[IDENTIFIER].count == RULE.max_attempts

    def test_block_survives_window_rollover(
        self, sliding_window: SlidingWindowRateLimiter
    ) -> None:
        """Block lasts block_duration even after the window would reset."""
        with freeze_time("2024-01-01 12:00:00") as frozen:
            for _ in range(11):
                sliding_window.check(IDENTIFIER, RULE)
            frozen.tick(timedelta(seconds=120))

            assert sliding_window.check(IDENTIFIER, RULE).allowed is False

    def test_expired_block_starts_fresh_window(
        self, sliding_window: SlidingWindowRateLimiter
    ) -> None:
        """After the block lifts the next attempt opens a new window."""
        with freeze_time("2024-01-01 12:00:00") as frozen:
            for _ in range(11):
                sliding_window.check(IDENTIFIER, RULE)
            frozen.tick(timedelta(seconds=901))
            result = sliding_window.check(IDENTIFIER, RULE)

        assert result.allowed is True
        assert result.blocked is False
        assert result.remaining == 9

    def test_window_rollover_resets_count(
        self, sliding_window: SlidingWindowRateLimiter
    ) -> None:
        """A new window opens once reset_at has passed."""
        with freeze_time("2024-01-01 12:00:00") as frozen:
            for _ in range(5):
                sliding_window.check(IDENTIFIER, RULE)
            frozen.tick(timedelta(seconds=61))
            result = sliding_window.check(IDENTIFIER, RULE)

        assert result.remaining == 9

    def test_identifiers_are_independent(
        self, sliding_window: SlidingWindowRateLimiter
    ) -> None:
        for _ in range(11):
            sliding_window.check("ip:a", RULE)

        assert sliding_window.check("ip:b", RULE).allowed is True

    def test_retry_after_reports_block_remaining(
        self, sliding_window: SlidingWindowRateLimiter
    ) -> None:
        with freeze_time("2024-01-01 12:00:00"):
            for _ in range(10):
                sliding_window.check(IDENTIFIER, RULE)
            result = sliding_window.check(IDENTIFIER, RULE)
            now = time.time()

        assert result.retry_after(now) == pytest.approx(900.0)
        assert result.retry_after(now + 1000) == 0.0

    def test_block_is_logged(self) -> None:
        """Starting a block should emit a warning."""
        logger = MagicMock()
        limiter = SlidingWindowRateLimiter(logger=logger)
        rule = SlidingWindowRule(
            max_attempts=1, window_seconds=60, block_duration_seconds=60
        )

        limiter.check(IDENTIFIER, rule)
        limiter.check(IDENTIFIER, rule)

        logger.warning.assert_called_once()
        assert logger.warning.call_args.args[0] == "rate_limit_block_started"


# =============================================================================
# reset / status / snapshot
# =============================================================================


class TestInspection:
    """Tests for reset, status and snapshot."""

    def test_reset_restores_budget(self, sliding_window: SlidingWindowRateLimiter) -> None:
        """After reset the next check behaves like the first one."""
        for _ in range(11):
            sliding_window.check(IDENTIFIER, RULE)

        sliding_window.reset(IDENTIFIER)

        assert sliding_window.check(IDENTIFIER, RULE).remaining == 9

    def test_status_does_not_increment(
        self, sliding_window: SlidingWindowRateLimiter
    ) -> None:
        sliding_window.check(IDENTIFIER, RULE)
        sliding_window.check(IDENTIFIER, RULE)

        status = sliding_window.status(IDENTIFIER, RULE)
        again = sliding_window.status(IDENTIFIER, RULE)

        assert status.attempts == again.attempts == 2
        assert status.remaining == 8
        assert status.blocked is False

    def test_status_unknown_identifier(
        self, sliding_window: SlidingWindowRateLimiter
    ) -> None:
        status = sliding_window.status("ip:new", RULE)

        assert status.attempts == 0
        assert status.remaining == RULE.max_attempts

    def test_status_while_blocked(self, sliding_window: SlidingWindowRateLimiter) -> None:
        for _ in range(11):
            sliding_window.check(IDENTIFIER, RULE)

        status = sliding_window.status(IDENTIFIER, RULE)

        assert status.blocked is True
        assert status.remaining == 0
        assert status.block_until is not None

    def test_snapshot_is_a_copy(self, sliding_window: SlidingWindowRateLimiter) -> None:
        """Mutating the snapshot must not affect the limiter."""
        sliding_window.check(IDENTIFIER, RULE)

        snapshot = sliding_window.snapshot()
        snapshot[IDENTIFIER].count = 99

        assert sliding_window.status(IDENTIFIER, RULE).attempts == 1

    def test_clear_all(self, sliding_window: SlidingWindowRateLimiter) -> None:
        sliding_window.check("ip:a", RULE)
        sliding_window.check("ip:b", RULE)

        sliding_window.clear_all()

        assert sliding_window.snapshot() == {}


# =============================================================================
# cleanup_idle
# =============================================================================


class TestCleanupIdle:
    """Tests for idle entry eviction."""

    @pytest.mark.parametrize("batch_size", [None, 1])
    def test_removes_idle_entries(
        self, sliding_window: SlidingWindowRateLimiter, batch_size: int | None
    ) -> None:
        with freeze_time("2024-01-01 12:00:00") as frozen:
            sliding_window.check("ip:old", RULE)
            frozen.tick(timedelta(hours=2))
            sliding_window.check("ip:fresh", RULE)

            removed = sliding_window.cleanup_idle(3600, batch_size=batch_size)

        assert removed == 1
        assert set(sliding_window.snapshot()) == {"ip:fresh"}

    def test_keeps_blocked_entries(
        self, sliding_window: SlidingWindowRateLimiter
    ) -> None:
        """An idle but still blocked identifier must keep its block."""
        rule = SlidingWindowRule(
            max_attempts=1, window_seconds=60, block_duration_seconds=4 * 3600
        )
        with freeze_time("2024-01-01 12:00:00") as frozen:
            sliding_window.check(IDENTIFIER, rule)
            sliding_window.check(IDENTIFIER, rule)
            frozen.tick(timedelta(hours=2))

            assert sliding_window.cleanup_idle(3600) == 0
            assert sliding_window.check(IDENTIFIER, rule).allowed is False


# =============================================================================
# Concurrency
# =============================================================================


class TestConcurrency:
    """Concurrent checks must not lose increments."""

    def test_concurrent_checks_are_all_counted(
        self, sliding_window: SlidingWindowRateLimiter
    ) -> None:
        rule = SlidingWindowRule(
            max_attempts=10_000, window_seconds=3600, block_duration_seconds=60
        )

        def worker() -> None:
            for _ in range(100):
                sliding_window.check(IDENTIFIER, rule)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sliding_window.status(IDENTIFIER, rule).attempts == 800


class TestPresets:
    """Tests for the sliding window presets."""

    def test_preset_values(self) -> None:
        assert RATE_LIMIT_PRESETS["auth"] == SlidingWindowRule(
            max_attempts=10, window_seconds=60, block_duration_seconds=900
        )
        assert RATE_LIMIT_PRESETS["auth_strict"] == SlidingWindowRule(
            max_attempts=5, window_seconds=60, block_duration_seconds=1800
        )
        assert RATE_LIMIT_PRESETS["api"] == SlidingWindowRule(
            max_attempts=100, window_seconds=60, block_duration_seconds=300
        )
