"""Application DTOs."""

from schoolgate.application.dtos.authorization_dtos import (
    AuthorizationRequirement,
    AuthorizationVerdict,
)

__all__ = ["AuthorizationRequirement", "AuthorizationVerdict"]
