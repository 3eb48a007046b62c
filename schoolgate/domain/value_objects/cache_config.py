"""Cache configuration value object."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheConfig:
    """TTL and size budget for a cache write.

    Attributes:
        ttl_seconds: Time to live of the written entry.
        max_size: Store size that triggers eviction of the oldest 10%.
            None disables size-based eviction for this write.

    Raises:
        ValueError: If ttl_seconds or max_size is not positive.
    """

    ttl_seconds: float
    max_size: int | None = None

    def __post_init__(self) -> None:
        if self.ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {self.ttl_seconds}")
        if self.max_size is not None and self.max_size <= 0:
            raise ValueError(f"max_size must be positive, got {self.max_size}")
