"""Domain errors.

Usage:
    from schoolgate.domain.errors import ProfileLookupError, RateLimitError
"""

from schoolgate.domain.errors.profile_lookup_error import ProfileLookupError
from schoolgate.domain.errors.rate_limit_error import RateLimitError

__all__ = [
    "ProfileLookupError",
    "RateLimitError",
]
