"""Identity strategy port.

The resolver tries an ordered list of strategies; each answers found
(RawIdentity) or not-found (None).
"""

from typing import Protocol

from schoolgate.domain.value_objects import RawIdentity, RequestContext


class IdentityStrategyProtocol(Protocol):
    """One way of recognizing the caller (session cookie, bearer token, ...)."""

    name: str

    async def resolve(self, request: RequestContext) -> RawIdentity | None:
        """Resolve a raw identity from the request, or None."""
        ...
