"""Principal value objects.

RawIdentity is what the identity provider vouches for (id + email).
Principal adds the role read from the profile store; it is immutable and
lives for one request only.
"""

from dataclasses import dataclass

from schoolgate.domain.enums import UserRole


@dataclass(frozen=True, slots=True, kw_only=True)
class RawIdentity:
    """Identity validated by the provider, before role lookup.

    Attributes:
        user_id: Provider user identifier.
        email: Email on the provider account.
    """

    user_id: str
    email: str


@dataclass(frozen=True, slots=True, kw_only=True)
class Principal:
    """Resolved caller attached to an in-flight request.

    Attributes:
        user_id: Provider user identifier.
        email: Email on the provider account.
        role: Role read from the profile store.
    """

    user_id: str
    email: str
    role: UserRole
