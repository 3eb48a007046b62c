"""Profile lookup error type.

Raised (as a value) when the external profile store fails, has no profile
for the user, or returns a role outside UserRole. The identity resolver
reports it as an authentication failure so internal state never leaks to
callers as a server error.
"""

from dataclasses import dataclass

from schoolgate.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ProfileLookupError(DomainError):
    """Profile store errored or returned not-found.

    Attributes:
        user_id: User whose profile could not be read.
    """

    user_id: str
