"""Rate limit error type.

Attached to a verdict whose rate_limited flag is set, so upstream handlers
can apply backoff UX distinct from 401/403 handling.

Usage:
    RateLimitError(
        code=ErrorCode.RATE_LIMIT_BLOCKED,
        message="Too many attempts",
        identifier="ip:10.0.0.1",
        retry_after_seconds=840.0,
    )
"""

from dataclasses import dataclass

from schoolgate.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitError(DomainError):
    """Sliding-window block or token-bucket exhaustion.

    Attributes:
        identifier: Rate limit key that was denied ("user:<id>" or "ip:<addr>").
        retry_after_seconds: Seconds until the caller may retry.
    """

    identifier: str
    retry_after_seconds: float | None = None
