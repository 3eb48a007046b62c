"""Result types for railway-oriented programming.

Expected failures (unknown caller, missing permission, rate limit) travel
through the pipeline as values instead of exceptions.

Usage:
    def lookup_role(user_id: str) -> Result[UserRole, ProfileLookupError]:
        if user_id not in roles:
            return Failure(error=ProfileLookupError(...))
        return Success(value=roles[user_id])

    match lookup_role("u-1"):
        case Success(value=role):
            ...
        case Failure(error=error):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


# Type alias for Result union
Result: TypeAlias = Success[T] | Failure[E]
