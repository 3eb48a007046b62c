"""Sliding window rate limiter with hard block.

Counts attempts per identifier inside a window that starts at the first
attempt. Exceeding ``max_attempts`` blocks the identifier for
``block_duration_seconds``; while blocked, checks are denied without
counting. Once the block lifts the next check opens a fresh window.

Thread-safe: one lock per instance guards every read-modify-write, so
concurrent checks on the same identifier never lose an increment.

Usage:
    from schoolgate.infrastructure.rate_limit import SlidingWindowRateLimiter
    from schoolgate.infrastructure.rate_limit.config import RATE_LIMIT_PRESETS

    limiter = SlidingWindowRateLimiter()
    result = limiter.check("ip:1.2.3.4", RATE_LIMIT_PRESETS["auth"])
    if not result.allowed:
        retry_after = result.retry_after(time.time())
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from itertools import islice
from threading import Lock
from typing import TYPE_CHECKING

from schoolgate.domain.value_objects import (
    SlidingWindowResult,
    SlidingWindowRule,
    SlidingWindowStatus,
)

if TYPE_CHECKING:
    from schoolgate.domain.protocols import LoggerProtocol


@dataclass(slots=True)
class SlidingWindowEntry:
    """Mutable per-identifier state (epoch seconds).

    ``count`` never exceeds the rule's ``max_attempts`` once ``blocked``.
    """

    count: int
    window_reset_at: float
    last_seen: float
    blocked: bool = False
    block_until: float | None = None

    def is_blocked(self, now: float) -> bool:
        return self.blocked and self.block_until is not None and now < self.block_until


class SlidingWindowRateLimiter:
    """In-memory sliding window limiter keyed by identifier.

    Args:
        logger: Optional structured logger; block episodes are logged at
            warning level.
    """

    def __init__(self, *, logger: LoggerProtocol | None = None) -> None:
        self._entries: dict[str, SlidingWindowEntry] = {}
        self._lock = Lock()
        self._logger = logger

    def check(self, identifier: str, rule: SlidingWindowRule) -> SlidingWindowResult:
        """Count one attempt and decide whether it is allowed.

        Args:
            identifier: Rate limit key (e.g. "ip:1.2.3.4", "user:u1").
            rule: Window configuration.

        Returns:
            SlidingWindowResult: Decision plus remaining budget.
        """
        now = time.time()
        with self._lock:
            entry = self._entries.get(identifier)

            if entry is not None and entry.is_blocked(now):
                entry.last_seen = now
                return SlidingWindowResult(
                    allowed=False,
                    remaining=0,
                    reset_at=entry.window_reset_at,
                    blocked=True,
                    block_until=entry.block_until,
                    attempts=entry.count,
                )

            if entry is None or now > entry.window_reset_at or entry.blocked:
                entry = SlidingWindowEntry(
                    count=1,
                    window_reset_at=now + rule.window_seconds,
                    last_seen=now,
                )
                self._entries[identifier] = entry
                return SlidingWindowResult(
                    allowed=True,
                    remaining=rule.max_attempts - 1,
                    reset_at=entry.window_reset_at,
                    attempts=1,
                )

            attempts = entry.count + 1
            entry.last_seen = now

            if attempts > rule.max_attempts:
                entry.count = rule.max_attempts
                entry.blocked = True
                entry.block_until = now + rule.block_duration_seconds
                block_until = entry.block_until
            else:
                entry.count = attempts
                block_until = None

            reset_at = entry.window_reset_at

        if block_until is not None:
            if self._logger is not None:
                self._logger.warning(
                    "rate_limit_block_started",
                    identifier=identifier,
                    attempts=attempts,
                    block_until=block_until,
                )
            return SlidingWindowResult(
                allowed=False,
                remaining=0,
                reset_at=reset_at,
                blocked=True,
                block_until=block_until,
                attempts=attempts,
            )

        return SlidingWindowResult(
            allowed=True,
            remaining=rule.max_attempts - attempts,
            reset_at=reset_at,
            attempts=attempts,
        )

    def status(self, identifier: str, rule: SlidingWindowRule) -> SlidingWindowStatus:
        """Read the identifier's window without counting an attempt."""
        now = time.time()
        with self._lock:
            entry = self._entries.get(identifier)
            if entry is not None and entry.is_blocked(now):
                return SlidingWindowStatus(
                    attempts=entry.count,
                    remaining=0,
                    reset_at=entry.window_reset_at,
                    blocked=True,
                    block_until=entry.block_until,
                )
            if entry is None or now > entry.window_reset_at or entry.blocked:
                return SlidingWindowStatus(
                    attempts=0,
                    remaining=rule.max_attempts,
                    reset_at=now + rule.window_seconds,
                )
            return SlidingWindowStatus(
                attempts=entry.count,
                remaining=max(0, rule.max_attempts - entry.count),
                reset_at=entry.window_reset_at,
            )

    def reset(self, identifier: str) -> None:
        """Forget an identifier (e.g. after a successful login)."""
        with self._lock:
            self._entries.pop(identifier, None)

    def snapshot(self) -> dict[str, SlidingWindowEntry]:
        """Copy of every entry, for monitoring."""
        with self._lock:
            return {key: replace(entry) for key, entry in self._entries.items()}

    def clear_all(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def cleanup_idle(self, idle_seconds: float, batch_size: int | None = None) -> int:
        """Drop entries untouched for ``idle_seconds`` that are not blocked.

        Args:
            idle_seconds: Minimum time since the last check.
            batch_size: Identifiers examined per lock acquisition. None
                processes everything under one acquisition.

        Returns:
            int: Number of entries removed.
        """
        now = time.time()
        with self._lock:
            identifiers = list(self._entries)
        it = iter(identifiers)
        step = batch_size or max(1, len(identifiers))
        removed = 0
        while batch := list(islice(it, step)):
            with self._lock:
                for identifier in batch:
                    entry = self._entries.get(identifier)
                    if entry is None or entry.is_blocked(now):
                        continue
                    if now - entry.last_seen > idle_seconds:
                        del self._entries[identifier]
                        removed += 1
        return removed
