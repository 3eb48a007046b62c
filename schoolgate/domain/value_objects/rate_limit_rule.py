"""Rate limit rule and result value objects.

Two algorithms share the identifier space but not their storage:

- Sliding window (authentication-style): counts attempts inside a fixed
  window and hard-blocks the identifier once the budget is exceeded.
- Token bucket (API shaping): a refillable pool of permits; no block
  window, callers become eligible again as tokens accumulate.

Usage:
    from schoolgate.domain.value_objects import SlidingWindowRule, TokenBucketRule

    login_rule = SlidingWindowRule(
        max_attempts=10,
        window_seconds=60.0,
        block_duration_seconds=900.0,
    )
    api_bucket = TokenBucketRule(capacity=60, refill_per_second=2.0)
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class SlidingWindowRule:
    """Sliding window configuration (value object).

    Attributes:
        max_attempts: Attempts allowed per window.
        window_seconds: Length of the counting window.
        block_duration_seconds: Hard block applied once max_attempts is
            exceeded. Typically much longer than the window.

    Raises:
        ValueError: If any field is not positive.
    """

    max_attempts: int
    window_seconds: float
    block_duration_seconds: float

    def __post_init__(self) -> None:
        """Validate rule configuration after initialization.

        Raises:
            ValueError: If any numeric field is invalid.
        """
        if self.max_attempts <= 0:
            raise ValueError(f"max_attempts must be positive, got {self.max_attempts}")
        if self.window_seconds <= 0:
            raise ValueError(
                f"window_seconds must be positive, got {self.window_seconds}"
            )
        if self.block_duration_seconds <= 0:
            raise ValueError(
                "block_duration_seconds must be positive, "
                f"got {self.block_duration_seconds}"
            )


@dataclass(frozen=True, slots=True, kw_only=True)
class SlidingWindowResult:
    """Result of a sliding window check.

    Attributes:
        allowed: Whether the attempt is allowed.
        remaining: Attempts left in the current window.
        reset_at: Epoch seconds when the current window ends.
        blocked: Whether the identifier is blocked.
        block_until: Epoch seconds when the block lifts (blocked only).
        attempts: Attempt count this check observed, including itself.
    """

    allowed: bool
    remaining: int
    reset_at: float
    blocked: bool = False
    block_until: float | None = None
    attempts: int = 0

    def retry_after(self, now: float) -> float:
        """Seconds until the identifier may try again.

        Args:
            now: Current epoch seconds.

        Returns:
            float: 0.0 when allowed, otherwise time until block/window end.
        """
        if self.allowed:
            return 0.0
        until = self.block_until if self.block_until is not None else self.reset_at
        return max(0.0, until - now)


@dataclass(frozen=True, slots=True, kw_only=True)
class SlidingWindowStatus:
    """Read-only view of an identifier's window (no increment).

    Attributes:
        attempts: Attempts counted in the current window.
        remaining: Attempts left in the current window.
        reset_at: Epoch seconds when the current window ends.
        blocked: Whether the identifier is blocked.
        block_until: Epoch seconds when the block lifts.
    """

    attempts: int
    remaining: int
    reset_at: float
    blocked: bool = False
    block_until: float | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class TokenBucketRule:
    """Token bucket configuration (value object).

    Attributes:
        capacity: Maximum tokens in the bucket (burst size).
        refill_per_second: Tokens added per second. Zero means the bucket
            never refills and denied callers get a fixed retry hint.

    Raises:
        ValueError: If capacity < 1 or refill_per_second < 0.
    """

    capacity: int
    refill_per_second: float

    def __post_init__(self) -> None:
        """Validate rule configuration after initialization.

        Raises:
            ValueError: If any numeric field is invalid.
        """
        if self.capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {self.capacity}")
        if self.refill_per_second < 0:
            raise ValueError(
                f"refill_per_second must not be negative, got {self.refill_per_second}"
            )

    @property
    def seconds_per_token(self) -> float | None:
        """Seconds between token refills (None when the bucket never refills).

        Example:
            TokenBucketRule(capacity=60, refill_per_second=2.0).seconds_per_token
            # 0.5
        """
        if self.refill_per_second == 0:
            return None
        return 1.0 / self.refill_per_second


@dataclass(frozen=True, slots=True, kw_only=True)
class TokenBucketResult:
    """Result of a token bucket check.

    Attributes:
        allowed: Whether the request is allowed.
        remaining: Whole tokens left after this request.
        retry_after_seconds: Seconds until a token is available (0 if allowed).
    """

    allowed: bool
    remaining: int = 0
    retry_after_seconds: int = 0
