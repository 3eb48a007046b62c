"""Core error classes.

Usage:
    from schoolgate.core.errors import DomainError, AuthenticationError
"""

from schoolgate.core.errors.common_errors import (
    AuthenticationError,
    AuthorizationError,
)
from schoolgate.core.errors.domain_error import DomainError

__all__ = [
    "DomainError",
    "AuthenticationError",
    "AuthorizationError",
]
