"""Domain protocols (ports) implemented by infrastructure adapters."""

from schoolgate.domain.protocols.cache_protocol import CacheProtocol
from schoolgate.domain.protocols.identity_provider_protocol import (
    IdentityProviderProtocol,
)
from schoolgate.domain.protocols.identity_strategy_protocol import (
    IdentityStrategyProtocol,
)
from schoolgate.domain.protocols.logger_protocol import LoggerProtocol
from schoolgate.domain.protocols.profile_store_protocol import ProfileStoreProtocol

__all__ = [
    "CacheProtocol",
    "IdentityProviderProtocol",
    "IdentityStrategyProtocol",
    "LoggerProtocol",
    "ProfileStoreProtocol",
]
