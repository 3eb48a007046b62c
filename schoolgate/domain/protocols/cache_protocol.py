"""Cache port used by the identity resolver."""

from typing import Any, Protocol

from schoolgate.domain.value_objects import CacheConfig


class CacheProtocol(Protocol):
    """Namespaced TTL cache.

    Lookups return None both for missing and for logically expired entries.
    """

    def get(self, key: str, namespace: str = "default") -> Any | None:
        """Get a live value, or None."""
        ...

    def set(
        self,
        key: str,
        value: Any,
        namespace: str = "default",
        config: CacheConfig | None = None,
    ) -> None:
        """Insert or overwrite a value."""
        ...

    def delete(self, key: str, namespace: str = "default") -> bool:
        """Delete a value; True if it existed."""
        ...
