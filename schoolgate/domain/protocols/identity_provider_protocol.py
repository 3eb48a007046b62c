"""Identity provider port.

The provider issues session cookies and bearer tokens; this core only asks
it to vouch for them. Implementations wrap the hosted auth service client.
"""

from collections.abc import Mapping
from typing import Protocol

from schoolgate.domain.value_objects import RawIdentity


class IdentityProviderProtocol(Protocol):
    """What the identity resolver needs from the identity provider."""

    async def validate_session(self, cookies: Mapping[str, str]) -> RawIdentity | None:
        """Validate a cookie-bound session.

        Args:
            cookies: All request cookies.

        Returns:
            RawIdentity when the session is valid, None otherwise.
        """
        ...

    async def validate_bearer_token(self, token: str) -> RawIdentity | None:
        """Validate a bearer access token.

        Args:
            token: Token taken from the Authorization header.

        Returns:
            RawIdentity when the token is valid, None otherwise.
        """
        ...
