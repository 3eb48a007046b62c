"""Shared pytest fixtures.

Every store is built fresh per test so no state leaks between cases.
Collaborators outside the pipeline (identity provider, profile store,
logger) are mocks.
"""

import os

os.environ.setdefault("SCHOOLGATE_ENVIRONMENT", "testing")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402

from schoolgate.domain.value_objects import RawIdentity, RequestContext  # noqa: E402
from schoolgate.infrastructure.audit import MemoryAuditLog  # noqa: E402
from schoolgate.infrastructure.authorization import PermissionEvaluator  # noqa: E402
from schoolgate.infrastructure.cache import MemoryCache  # noqa: E402
from schoolgate.infrastructure.rate_limit import (  # noqa: E402
    SlidingWindowRateLimiter,
    TokenBucketRateLimiter,
)


def make_request(
    *,
    cookies: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
    client_host: str | None = "10.0.0.1",
    method: str = "GET",
    url: str = "https://school.example/api/grades",
    user_id_hint: str | None = None,
) -> RequestContext:
    """Helper to build a RequestContext for tests.

    Usage:
        request = make_request(headers={"Authorization": "Bearer abc"})
    """
    return RequestContext(
        cookies=cookies or {},
        headers=headers or {},
        client_host=client_host,
        method=method,
        url=url,
        user_id_hint=user_id_hint,
    )


@pytest.fixture
def logger() -> MagicMock:
    """Mock structured logger (LoggerProtocol)."""
    return MagicMock()


@pytest.fixture
def cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def sliding_window() -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter()


@pytest.fixture
def token_bucket() -> TokenBucketRateLimiter:
    return TokenBucketRateLimiter()


@pytest.fixture
def audit_log(logger: MagicMock) -> MemoryAuditLog:
    return MemoryAuditLog(logger=logger, capacity=100)


@pytest.fixture(scope="session")
def evaluator() -> PermissionEvaluator:
    """Evaluator with the default table (pure, safe to share)."""
    return PermissionEvaluator()


@pytest.fixture
def identity_provider() -> AsyncMock:
    """Identity provider that rejects everything unless configured."""
    provider = AsyncMock()
    provider.validate_session.return_value = None
    provider.validate_bearer_token.return_value = None
    return provider


@pytest.fixture
def profile_store() -> AsyncMock:
    store = AsyncMock()
    store.get_role.return_value = None
    return store


@pytest.fixture
def teacher_identity() -> RawIdentity:
    return RawIdentity(user_id="t-1", email="teacher@school.example")
