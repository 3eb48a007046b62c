"""Identity strategies.

Each strategy recognizes the caller one way and answers with a
RawIdentity or None. The resolver tries them in order; the default order
is session cookie first, then bearer token, matching browser traffic
before API clients.
"""

from collections.abc import Iterable

from schoolgate.domain.protocols import IdentityProviderProtocol
from schoolgate.domain.value_objects import RawIdentity, RequestContext


class SessionCookieStrategy:
    """Cookie-bound session issued by the identity provider.

    Args:
        provider: Identity provider client.
        cookie_prefixes: Cookie name prefixes that carry a provider session.
            The provider is only consulted when one of them is present.
            None consults it whenever the request has any cookie.
    """

    name = "session_cookie"

    def __init__(
        self,
        provider: IdentityProviderProtocol,
        *,
        cookie_prefixes: Iterable[str] | None = None,
    ) -> None:
        self._provider = provider
        self._cookie_prefixes = (
            tuple(cookie_prefixes) if cookie_prefixes is not None else None
        )

    def _has_session_cookie(self, request: RequestContext) -> bool:
        if not request.cookies:
            return False
        if self._cookie_prefixes is None:
            return True
        return any(
            name.startswith(self._cookie_prefixes) for name in request.cookies
        )

    async def resolve(self, request: RequestContext) -> RawIdentity | None:
        if not self._has_session_cookie(request):
            return None
        return await self._provider.validate_session(request.cookies)


class BearerTokenStrategy:
    """``Authorization: Bearer <token>`` header validated by the provider."""

    name = "bearer_token"

    def __init__(self, provider: IdentityProviderProtocol) -> None:
        self._provider = provider

    async def resolve(self, request: RequestContext) -> RawIdentity | None:
        token = request.bearer_token
        if token is None:
            return None
        return await self._provider.validate_bearer_token(token)
