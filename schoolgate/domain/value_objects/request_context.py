"""Transport-neutral snapshot of an incoming request.

The pipeline never touches framework request objects directly; the
presentation layer converts them (see schoolgate.presentation).

Usage:
    request = RequestContext(
        cookies={"sb-access-token": "..."},
        headers={"Authorization": "Bearer abc", "X-Forwarded-For": "1.2.3.4"},
        client_host="10.0.0.5",
        method="GET",
        url="https://school.example/api/grades",
    )
    request.bearer_token  # "abc"
    request.client_ip  # "1.2.3.4"
"""

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, kw_only=True)
class RequestContext:
    """Immutable request facts consumed by the authorization pipeline.

    Header names are normalized to lower case on construction.

    Attributes:
        cookies: Request cookies by name.
        headers: Request headers (lower-cased names).
        client_host: Peer address reported by the server.
        method: HTTP method.
        url: Full request URL.
        user_id_hint: User id already known upstream (e.g. from a session
            middleware); preferred as the rate limit identifier.
    """

    cookies: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    client_host: str | None = None
    method: str | None = None
    url: str | None = None
    user_id_hint: str | None = None

    def __post_init__(self) -> None:
        headers = {name.lower(): value for name, value in self.headers.items()}
        object.__setattr__(self, "headers", headers)
        object.__setattr__(self, "cookies", dict(self.cookies))

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower())

    @property
    def bearer_token(self) -> str | None:
        """Token from an "Authorization: Bearer <token>" header, if any."""
        authorization = self.header("authorization")
        if not authorization:
            return None
        scheme, _, token = authorization.strip().partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()

    @property
    def client_ip(self) -> str | None:
        """First X-Forwarded-For hop, then X-Real-IP, then the peer address."""
        forwarded = self.header("x-forwarded-for")
        if forwarded:
            first_hop = forwarded.split(",")[0].strip()
            if first_hop:
                return first_hop
        real_ip = self.header("x-real-ip")
        if real_ip:
            return real_ip.strip()
        return self.client_host
