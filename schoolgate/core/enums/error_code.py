"""Machine-readable error codes.

Codes follow ENTITY_ACTION_REASON naming and travel inside DomainError
values (see schoolgate.core.errors).
"""

from enum import Enum


class ErrorCode(Enum):
    """Error codes used by the authorization pipeline."""

    # Authentication errors
    AUTHENTICATION_REQUIRED = "authentication_required"
    AUTHENTICATION_FAILED = "authentication_failed"

    # Profile lookup errors
    PROFILE_NOT_FOUND = "profile_not_found"
    PROFILE_LOOKUP_FAILED = "profile_lookup_failed"
    PROFILE_ROLE_INVALID = "profile_role_invalid"

    # Authorization errors
    PERMISSION_DENIED = "permission_denied"
    ROLE_NOT_ALLOWED = "role_not_allowed"
    CONDITION_NOT_MET = "condition_not_met"
    AUTHORIZATION_FAILED = "authorization_failed"

    # Rate limit errors
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    RATE_LIMIT_BLOCKED = "rate_limit_blocked"
    QUOTA_EXHAUSTED = "quota_exhausted"
