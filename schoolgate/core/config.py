"""
Configuration management using Pydantic Settings.

Type-safe, validated configuration loaded from environment variables.
Only tunables live here; the permission matrix and rate limit presets are
code (see schoolgate.infrastructure.authorization and
schoolgate.infrastructure.rate_limit.config).

Usage:
    from schoolgate.core.config import settings

    capacity = settings.audit_capacity
    if settings.is_development:
        ...
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from schoolgate.core.enums import Environment


class Settings(BaseSettings):
    """
    Authorization pipeline settings (flat structure).

    Configuration precedence:
        1. Environment variables
        2. Default values

    Returns:
        Settings: Configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Audit trail
    audit_capacity: int = Field(
        default=10_000,
        description="Maximum audit events kept in the in-memory ring buffer",
    )

    # Identity resolution
    session_cookie_prefixes: list[str] = Field(
        default=["sb-"],
        description="Cookie name prefixes that carry an identity provider session",
    )

    # Identity cache
    profile_cache_ttl_seconds: float = Field(
        default=300.0,
        description="How long a resolved role stays cached (minutes, not hours)",
    )
    profile_cache_max_size: int = Field(
        default=1000,
        description="Cache size that triggers eviction of the oldest 10%",
    )

    # Background cleanup
    cache_sweep_interval_seconds: float = Field(
        default=120.0,
        description="Interval between expired cache entry sweeps",
    )
    rate_limit_sweep_interval_seconds: float = Field(
        default=300.0,
        description="Interval between idle rate limit entry sweeps",
    )
    rate_limit_idle_seconds: float = Field(
        default=3600.0,
        description="Rate limit entries untouched for this long are dropped",
    )
    sweep_batch_size: int = Field(
        default=500,
        description="Entries examined per lock acquisition during a sweep",
    )

    model_config = SettingsConfigDict(
        env_prefix="SCHOOLGATE_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "audit_capacity",
        "profile_cache_ttl_seconds",
        "profile_cache_max_size",
        "cache_sweep_interval_seconds",
        "rate_limit_sweep_interval_seconds",
        "rate_limit_idle_seconds",
        "sweep_batch_size",
    )
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """
        Reject zero and negative tunables.

        Args:
            v: Configured value.

        Returns:
            The validated value.

        Raises:
            ValueError: If the value is not positive.
        """
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the level name and reject unknown levels."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level

    @property
    def is_development(self) -> bool:
        """True when running in the development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """True when running under the test suite or CI."""
        return self.environment in {Environment.TESTING, Environment.CI}

    @property
    def is_production(self) -> bool:
        """True when running in production."""
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Cached settings instance (loaded once per process).
    """
    return Settings()


# Global settings instance (singleton pattern)
settings = get_settings()
