"""Application services."""

from schoolgate.application.services.authorization_service import (
    AuthorizationService,
)

__all__ = ["AuthorizationService"]
