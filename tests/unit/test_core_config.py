"""Unit tests for Settings loading and validation."""

import pytest
from pydantic import ValidationError

from schoolgate.core.config import Settings, get_settings
from schoolgate.core.enums import Environment


class TestDefaults:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SCHOOLGATE_ENVIRONMENT", raising=False)

        config = Settings()

        assert config.environment is Environment.DEVELOPMENT
        assert config.is_development is True
        assert config.log_level == "INFO"
        assert config.audit_capacity == 10_000
        assert config.session_cookie_prefixes == ["sb-"]
        assert config.profile_cache_ttl_seconds == 300.0

    def test_test_suite_runs_in_testing(self) -> None:
        assert get_settings().is_testing is True


class TestEnvironmentOverrides:
    """Values come from SCHOOLGATE_* variables."""

    def test_scalar_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCHOOLGATE_ENVIRONMENT", "production")
        monkeypatch.setenv("SCHOOLGATE_AUDIT_CAPACITY", "50")
        monkeypatch.setenv("SCHOOLGATE_LOG_LEVEL", "debug")

        config = Settings()

        assert config.is_production is True
        assert config.is_testing is False
        assert config.audit_capacity == 50
        assert config.log_level == "DEBUG"

    def test_cookie_prefixes_from_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCHOOLGATE_SESSION_COOKIE_PREFIXES", '["sb-", "school-"]')

        assert Settings().session_cookie_prefixes == ["sb-", "school-"]

    def test_ci_counts_as_testing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCHOOLGATE_ENVIRONMENT", "ci")
        assert Settings().is_testing is True


class TestValidation:
    @pytest.mark.parametrize(
        "field",
        ["audit_capacity", "profile_cache_max_size", "sweep_batch_size"],
    )
    def test_rejects_non_positive(self, field: str) -> None:
        with pytest.raises(ValidationError, match="value must be positive"):
            Settings(**{field: 0})

    def test_rejects_unknown_log_level(self) -> None:
        with pytest.raises(ValidationError, match="unknown log level"):
            Settings(log_level="verbose")
