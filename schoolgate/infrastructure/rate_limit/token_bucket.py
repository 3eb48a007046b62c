"""Token bucket rate limiter.

Each identifier owns a bucket of up to ``capacity`` tokens refilled at
``refill_per_second``. Refill is lazy: it is computed from elapsed time on
every check, never by a timer. A request consumes one token.

Thread-safe: one lock per instance.

Usage:
    from schoolgate.infrastructure.rate_limit import TokenBucketRateLimiter
    from schoolgate.infrastructure.rate_limit.config import API_BUCKET

    limiter = TokenBucketRateLimiter()
    result = limiter.check("api:user:u1", API_BUCKET)
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from itertools import islice
from threading import Lock

from schoolgate.domain.value_objects import TokenBucketResult, TokenBucketRule

# Retry hint for buckets that never refill.
NO_REFILL_RETRY_SECONDS = 60


@dataclass(slots=True)
class TokenBucketEntry:
    """Per-identifier bucket; 0 <= tokens <= capacity."""

    tokens: float
    last_refill_at: float


def _refilled(entry: TokenBucketEntry, rule: TokenBucketRule, now: float) -> float:
    elapsed = max(0.0, now - entry.last_refill_at)
    return min(float(rule.capacity), entry.tokens + elapsed * rule.refill_per_second)


class TokenBucketRateLimiter:
    """In-memory token bucket limiter keyed by identifier."""

    def __init__(self) -> None:
        self._buckets: dict[str, TokenBucketEntry] = {}
        self._lock = Lock()

    def check(self, identifier: str, rule: TokenBucketRule) -> TokenBucketResult:
        """Refill, then try to consume one token.

        Returns:
            TokenBucketResult: allowed with whole tokens remaining, or denied
            with seconds until the next token.
        """
        now = time.time()
        with self._lock:
            entry = self._buckets.get(identifier)
            if entry is None:
                self._buckets[identifier] = TokenBucketEntry(
                    tokens=float(rule.capacity - 1), last_refill_at=now
                )
                return TokenBucketResult(allowed=True, remaining=rule.capacity - 1)

            entry.tokens = _refilled(entry, rule, now)
            entry.last_refill_at = now

            if entry.tokens >= 1:
                entry.tokens -= 1
                return TokenBucketResult(
                    allowed=True, remaining=math.floor(entry.tokens)
                )

            if rule.refill_per_second == 0:
                retry_after = NO_REFILL_RETRY_SECONDS
            else:
                retry_after = math.ceil((1 - entry.tokens) / rule.refill_per_second)
            return TokenBucketResult(
                allowed=False, remaining=0, retry_after_seconds=retry_after
            )

    def peek(self, identifier: str, rule: TokenBucketRule) -> float:
        """Tokens available right now, without consuming or rebasing."""
        now = time.time()
        with self._lock:
            entry = self._buckets.get(identifier)
            if entry is None:
                return float(rule.capacity)
            return _refilled(entry, rule, now)

    def reset(self, identifier: str) -> None:
        """Forget a bucket; the next check starts full."""
        with self._lock:
            self._buckets.pop(identifier, None)

    def clear_all(self) -> None:
        with self._lock:
            self._buckets.clear()

    def cleanup_idle(self, idle_seconds: float, batch_size: int | None = None) -> int:
        """Drop buckets not checked for ``idle_seconds``.

        An idle bucket has refilled anyway, so dropping it is lossless once
        idle_seconds exceeds capacity / refill_per_second.
        """
        now = time.time()
        with self._lock:
            identifiers = list(self._buckets)
        it = iter(identifiers)
        step = batch_size or max(1, len(identifiers))
        removed = 0
        while batch := list(islice(it, step)):
            with self._lock:
                for identifier in batch:
                    entry = self._buckets.get(identifier)
                    if entry is not None and now - entry.last_refill_at > idle_seconds:
                        del self._buckets[identifier]
                        removed += 1
        return removed
