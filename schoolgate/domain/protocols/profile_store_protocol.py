"""Profile store port.

A single round trip returning the role stored on the user's profile.
"""

from typing import Protocol


class ProfileStoreProtocol(Protocol):
    """What the identity resolver needs from the profile store."""

    async def get_role(self, user_id: str) -> str | None:
        """Read the role stored on a profile.

        Args:
            user_id: Provider user identifier.

        Returns:
            Role string, or None when no profile exists.

        Raises:
            Exception: Store errors propagate; the resolver converts them
                into ProfileLookupError.
        """
        ...
