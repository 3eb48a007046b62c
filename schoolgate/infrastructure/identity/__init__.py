"""Identity strategies and resolver."""

from schoolgate.infrastructure.identity.resolver import (
    CACHE_NAMESPACE,
    IdentityResolver,
    profile_cache_key,
)
from schoolgate.infrastructure.identity.strategies import (
    BearerTokenStrategy,
    SessionCookieStrategy,
)

__all__ = [
    "CACHE_NAMESPACE",
    "BearerTokenStrategy",
    "IdentityResolver",
    "SessionCookieStrategy",
    "profile_cache_key",
]
