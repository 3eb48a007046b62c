"""Audit event entity.

An immutable record of a security-relevant decision. Events are only ever
appended to the audit log; the ring buffer drops the oldest when full.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from types import MappingProxyType
from typing import Any

from schoolgate.domain.enums import AuditEventType


@dataclass(frozen=True, slots=True, kw_only=True)
class RequestMetadata:
    """Request facts captured alongside an audit event.

    Attributes:
        ip: Client IP (forwarded-for aware).
        user_agent: User-Agent header.
        method: HTTP method.
        url: Request URL.
    """

    ip: str | None = None
    user_agent: str | None = None
    method: str | None = None
    url: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditEvent:
    """Immutable audit trail record.

    Attributes:
        timestamp: When the event was logged (timezone-aware UTC).
        type: Event type.
        success: Outcome of the audited operation.
        user_id: Principal id, when known.
        user_email: Principal email, when known.
        user_role: Principal role value, when known.
        resource: Resource involved.
        action: Action attempted.
        reason: Why the operation failed (or extra detail on success).
        metadata: Free-form structured context, copied on construction and
            exposed read-only.
        request: Request facts.
    """

    timestamp: datetime
    type: AuditEventType
    success: bool
    user_id: str | None = None
    user_email: str | None = None
    user_role: str | None = None
    resource: str | None = None
    action: str | None = None
    reason: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    request: RequestMetadata | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", _frozen(dict(self.metadata)))

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain containers; metadata values are copies."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["metadata"] = _thawed(self.metadata)
        data["request"] = asdict(self.request) if self.request else None
        data["timestamp"] = self.timestamp.isoformat()
        data["type"] = self.type.value
        return data

    def summary(self) -> str:
        """One-line human-readable summary used for the application log.

        Example:
            "[authz.access.denied] | User: t@school.example | Role: teacher |
            write grades | Failed | (class not assigned) | IP: 10.0.0.1"
        """
        parts = [f"[{self.type.value}]"]
        if self.user_id:
            parts.append(f"User: {self.user_email or self.user_id}")
        if self.user_role:
            parts.append(f"Role: {self.user_role}")
        if self.resource and self.action:
            parts.append(f"{self.action} {self.resource}")
        parts.append("Success" if self.success else "Failed")
        if self.reason:
            parts.append(f"({self.reason})")
        if self.request and self.request.ip:
            parts.append(f"IP: {self.request.ip}")
        return " | ".join(parts)


def _frozen(value: Any) -> Any:
    """Read-only deep copy: mappings become proxies, lists/sets become tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _frozen(item) for key, item in value.items()})
    if isinstance(value, list | tuple):
        return tuple(_frozen(item) for item in value)
    if isinstance(value, set | frozenset):
        return frozenset(_frozen(item) for item in value)
    return value


def _thawed(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thawed(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thawed(item) for item in value]
    return value
