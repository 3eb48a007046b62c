"""Error classes shared across layers.

- AuthenticationError: no resolvable principal
- AuthorizationError: resolved principal lacks the required role/permission

Usage:
    from schoolgate.core.errors import AuthenticationError
    from schoolgate.core.enums import ErrorCode
    from schoolgate.core.result import Failure

    return Failure(error=AuthenticationError(
        code=ErrorCode.AUTHENTICATION_REQUIRED,
        message="Authentication required",
    ))
"""

from dataclasses import dataclass

from schoolgate.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthenticationError(DomainError):
    """No principal could be resolved for the request.

    Attributes:
        strategy: Name of the last identity strategy consulted, if any.
    """

    strategy: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthorizationError(DomainError):
    """Resolved principal lacks the required role or permission.

    Attributes:
        required_permission: Permission that was required ("grades:write"),
            or the comma separated list of accepted roles.
    """

    required_permission: str | None = None
