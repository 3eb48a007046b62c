"""Identity resolver: request -> Principal.

Steps:
    1. Try each identity strategy in order until one returns a RawIdentity.
    2. Read the user's role through the cache (namespace "auth", key
       "profile:<user_id>"); on a miss call the profile store once.
    3. Any profile problem (store error, missing profile, unknown role)
       becomes an authentication failure, never an exception.

Usage:
    resolver = IdentityResolver(
        strategies=[SessionCookieStrategy(provider), BearerTokenStrategy(provider)],
        profile_store=profile_store,
        cache=cache,
        logger=logger,
    )
    match await resolver.resolve(request):
        case Success(value=principal):
            ...
        case Failure(error=error):
            ...
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from schoolgate.core.enums import ErrorCode
from schoolgate.core.errors import AuthenticationError
from schoolgate.core.result import Failure, Result, Success
from schoolgate.domain.enums import UserRole
from schoolgate.domain.errors import ProfileLookupError
from schoolgate.domain.value_objects import (
    CacheConfig,
    Principal,
    RawIdentity,
    RequestContext,
)
from schoolgate.infrastructure.cache.config import CACHE_CONFIGS

if TYPE_CHECKING:
    from schoolgate.domain.protocols import (
        CacheProtocol,
        IdentityStrategyProtocol,
        LoggerProtocol,
        ProfileStoreProtocol,
    )

CACHE_NAMESPACE = "auth"


def profile_cache_key(user_id: str) -> str:
    """Cache key of a user's role within the "auth" namespace."""
    return f"profile:{user_id}"


class IdentityResolver:
    """Resolves the caller of a request into a Principal.

    Args:
        strategies: Identity strategies, tried in order.
        profile_store: Source of the user's role.
        cache: Role cache.
        logger: Structured logger.
        cache_config: TTL/size for cached roles. Defaults to the profile preset.
    """

    def __init__(
        self,
        *,
        strategies: Sequence[IdentityStrategyProtocol],
        profile_store: ProfileStoreProtocol,
        cache: CacheProtocol,
        logger: LoggerProtocol,
        cache_config: CacheConfig | None = None,
    ) -> None:
        self._strategies = tuple(strategies)
        self._profile_store = profile_store
        self._cache = cache
        self._logger = logger
        self._cache_config = cache_config or CACHE_CONFIGS["profile"]

    async def resolve(
        self, request: RequestContext
    ) -> Result[Principal, AuthenticationError]:
        """Resolve the request's principal.

        Returns:
            Result[Principal, AuthenticationError]:
                - Success(Principal) when a strategy vouches for the caller
                  and the profile has a valid role
                - Failure(AuthenticationError) otherwise
        """
        identity, strategy = await self._resolve_identity(request)
        if identity is None:
            return Failure(
                error=AuthenticationError(
                    code=ErrorCode.AUTHENTICATION_REQUIRED,
                    message="Authentication required",
                    strategy=strategy,
                )
            )

        match await self._lookup_role(identity.user_id):
            case Failure(error=lookup_error):
                self._logger.warning(
                    "profile_lookup_failed",
                    user_id=identity.user_id,
                    error_code=lookup_error.code.value,
                    reason=lookup_error.message,
                )
                return Failure(
                    error=AuthenticationError(
                        code=ErrorCode.AUTHENTICATION_FAILED,
                        message=lookup_error.message,
                        strategy=strategy,
                        details={"cause": lookup_error.code.value},
                    )
                )
            case Success(value=role):
                return Success(
                    value=Principal(
                        user_id=identity.user_id, email=identity.email, role=role
                    )
                )

    def invalidate(self, user_id: str) -> bool:
        """Drop a cached role (call after a role change).

        Returns:
            bool: True if a cached role was removed.
        """
        return self._cache.delete(profile_cache_key(user_id), namespace=CACHE_NAMESPACE)

    async def _resolve_identity(
        self, request: RequestContext
    ) -> tuple[RawIdentity | None, str | None]:
        strategy_name: str | None = None
        for strategy in self._strategies:
            strategy_name = strategy.name
            try:
                identity = await strategy.resolve(request)
            except Exception as e:
                self._logger.warning(
                    "identity_strategy_failed",
                    strategy=strategy.name,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                continue
            if identity is not None:
                self._logger.debug(
                    "identity_resolved",
                    strategy=strategy.name,
                    user_id=identity.user_id,
                )
                return identity, strategy.name
        return None, strategy_name

    async def _lookup_role(self, user_id: str) -> Result[UserRole, ProfileLookupError]:
        key = profile_cache_key(user_id)
        cached = self._cache.get(key, namespace=CACHE_NAMESPACE)
        if cached is not None and UserRole.is_valid(cached):
            return Success(value=UserRole(cached))

        try:
            role = await self._profile_store.get_role(user_id)
        except Exception as e:
            self._logger.error("profile_store_error", error=e, user_id=user_id)
            return Failure(
                error=ProfileLookupError(
                    code=ErrorCode.PROFILE_LOOKUP_FAILED,
                    message="Profile lookup failed",
                    user_id=user_id,
                )
            )

        if role is None:
            return Failure(
                error=ProfileLookupError(
                    code=ErrorCode.PROFILE_NOT_FOUND,
                    message="Profile not found",
                    user_id=user_id,
                )
            )
        if not UserRole.is_valid(role):
            return Failure(
                error=ProfileLookupError(
                    code=ErrorCode.PROFILE_ROLE_INVALID,
                    message=f"Invalid user role: {role}",
                    user_id=user_id,
                )
            )

        self._cache.set(key, role, namespace=CACHE_NAMESPACE, config=self._cache_config)
        return Success(value=UserRole(role))
