"""In-memory audit log (bounded ring buffer).

Appends immutable AuditEvent records, keeps the most recent ``capacity``
events, and mirrors each one to the application logger: info for
successes, warning for failures.

Thread-safe: appends and reads share one lock.

Usage:
    from schoolgate.core.container import get_audit_log

    audit = get_audit_log()
    audit.log_authz_check(
        success=False,
        user_id="u1",
        user_role="student",
        resource="grades",
        action="write",
        reason="Missing permission: grades:write",
    )
    recent_failures = audit.query(AuditQuery(success=False, limit=50))
"""

from __future__ import annotations

import csv
import io
import json
from collections import Counter, deque
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from threading import Lock
from typing import TYPE_CHECKING, Any, Literal

from schoolgate.domain.entities import AuditEvent, RequestMetadata
from schoolgate.domain.enums import Action, AuditEventType, UserRole
from schoolgate.domain.value_objects import RequestContext

if TYPE_CHECKING:
    from schoolgate.domain.protocols import LoggerProtocol

DEFAULT_CAPACITY = 10_000

CSV_HEADERS = (
    "Timestamp",
    "Type",
    "User ID",
    "User Email",
    "Role",
    "Resource",
    "Action",
    "Success",
    "Reason",
    "IP",
)

_DATA_EVENT_TYPES = {
    Action.READ: AuditEventType.DATA_READ,
    Action.WRITE: AuditEventType.DATA_WRITE,
    Action.DELETE: AuditEventType.DATA_DELETE,
}


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditQuery:
    """Filter for ``MemoryAuditLog.query``. Unset fields match everything.

    Attributes:
        user_id: Only events of this user.
        types: Only events of these types.
        success: Only successes (True) or failures (False).
        start_time: Inclusive lower timestamp bound.
        end_time: Inclusive upper timestamp bound.
        limit: Keep only the most recent N matches.
    """

    user_id: str | None = None
    types: frozenset[AuditEventType] | None = None
    success: bool | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    limit: int | None = None

    def matches(self, event: AuditEvent) -> bool:
        if self.user_id and event.user_id != self.user_id:
            return False
        if self.types and event.type not in self.types:
            return False
        if self.success is not None and event.success != self.success:
            return False
        if self.start_time and event.timestamp < self.start_time:
            return False
        if self.end_time and event.timestamp > self.end_time:
            return False
        return True


@dataclass
class AuditStats:
    """Aggregates over a recent time window."""

    total: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    success_rate: float = 0.0
    failed_attempts: int = 0
    unique_users: frozenset[str] = frozenset()


def request_metadata(request: RequestContext | None) -> RequestMetadata | None:
    """Extract the audit-relevant facts of a request.

    Args:
        request: Request snapshot, or None.

    Returns:
        RequestMetadata | None: ip, user agent, method and url.
    """
    if request is None:
        return None
    return RequestMetadata(
        ip=request.client_ip,
        user_agent=request.header("user-agent"),
        method=request.method,
        url=request.url,
    )


class MemoryAuditLog:
    """Bounded, append-only audit trail.

    Args:
        logger: Application logger the events are mirrored to.
        capacity: Maximum events retained; oldest are dropped first.

    Raises:
        ValueError: If capacity is not positive.
    """

    def __init__(
        self, *, logger: LoggerProtocol, capacity: int = DEFAULT_CAPACITY
    ) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._events: deque[AuditEvent] = deque(maxlen=capacity)
        self._lock = Lock()
        self._logger = logger

    @property
    def capacity(self) -> int:
        return self._events.maxlen or DEFAULT_CAPACITY

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------
    def log(
        self,
        event_type: AuditEventType,
        *,
        success: bool,
        user_id: str | None = None,
        user_email: str | None = None,
        user_role: str | None = None,
        resource: str | None = None,
        action: str | None = None,
        reason: str | None = None,
        metadata: dict[str, Any] | None = None,
        request: RequestMetadata | None = None,
    ) -> AuditEvent:
        """Append a timestamped event and mirror it to the logger.

        Returns:
            AuditEvent: The stored event.
        """
        event = AuditEvent(
            timestamp=datetime.now(UTC),
            type=event_type,
            success=success,
            user_id=user_id,
            user_email=user_email,
            user_role=user_role,
            resource=resource,
            action=action,
            reason=reason,
            metadata=metadata or {},
            request=request,
        )
        with self._lock:
            self._events.append(event)

        log_method = self._logger.info if success else self._logger.warning
        log_method(
            "audit_event",
            summary=event.summary(),
            event_type=event.type.value,
            success=success,
            user_id=user_id,
            user_role=user_role,
            resource=resource,
            action=action,
            reason=reason,
        )
        return event

    def log_auth_attempt(
        self,
        *,
        success: bool,
        user_id: str | None = None,
        user_email: str | None = None,
        user_role: str | None = None,
        reason: str | None = None,
        request: RequestContext | None = None,
    ) -> AuditEvent:
        """Record a login attempt (auth.login.success / auth.login.failure)."""
        return self.log(
            AuditEventType.AUTH_LOGIN_SUCCESS
            if success
            else AuditEventType.AUTH_LOGIN_FAILURE,
            success=success,
            user_id=user_id,
            user_email=user_email,
            user_role=user_role,
            reason=reason,
            request=request_metadata(request),
        )

    def log_authz_check(
        self,
        *,
        success: bool,
        resource: str | None = None,
        action: str | None = None,
        user_id: str | None = None,
        user_email: str | None = None,
        user_role: str | None = None,
        reason: str | None = None,
        request: RequestContext | None = None,
    ) -> AuditEvent:
        """Record an authorization decision (authz.access.granted / denied)."""
        return self.log(
            AuditEventType.AUTHZ_ACCESS_GRANTED
            if success
            else AuditEventType.AUTHZ_ACCESS_DENIED,
            success=success,
            user_id=user_id,
            user_email=user_email,
            user_role=user_role,
            resource=resource,
            action=action,
            reason=reason,
            request=request_metadata(request),
        )

    def log_admin_action(
        self,
        *,
        user_id: str,
        action: str,
        resource: str,
        user_email: str | None = None,
        user_role: str = UserRole.ADMIN.value,
        metadata: dict[str, Any] | None = None,
        request: RequestContext | None = None,
    ) -> AuditEvent:
        """Record a successful administrative action."""
        return self.log(
            AuditEventType.ADMIN_ACTION,
            success=True,
            user_id=user_id,
            user_email=user_email,
            user_role=user_role,
            resource=resource,
            action=action,
            metadata=metadata,
            request=request_metadata(request),
        )

    def log_data_access(
        self,
        access: Action | Literal["read", "write", "delete"],
        *,
        resource: str,
        success: bool,
        user_id: str | None = None,
        user_email: str | None = None,
        user_role: str | None = None,
        reason: str | None = None,
        metadata: dict[str, Any] | None = None,
        request: RequestContext | None = None,
    ) -> AuditEvent:
        """Record a data read, write or delete.

        Raises:
            ValueError: If ``access`` is not read, write or delete.
        """
        action = Action(access)
        event_type = _DATA_EVENT_TYPES.get(action)
        if event_type is None:
            raise ValueError(f"data access must be read, write or delete, got {access}")
        return self.log(
            event_type,
            success=success,
            user_id=user_id,
            user_email=user_email,
            user_role=user_role,
            resource=resource,
            action=action.value,
            reason=reason,
            metadata=metadata,
            request=request_metadata(request),
        )

    def log_rate_limit_event(
        self,
        kind: Literal["exceeded", "blocked"],
        *,
        identifier: str,
        attempts: int,
        request: RequestContext | None = None,
    ) -> AuditEvent:
        """Record a rate limit denial (rate_limit.exceeded / blocked)."""
        return self.log(
            AuditEventType.RATE_LIMIT_EXCEEDED
            if kind == "exceeded"
            else AuditEventType.RATE_LIMIT_BLOCKED,
            success=False,
            reason=f"Rate limit {kind}: {attempts} attempts",
            metadata={"identifier": identifier, "attempts": attempts},
            request=request_metadata(request),
        )

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------
    def query(self, audit_query: AuditQuery | None = None) -> list[AuditEvent]:
        """Filtered events, most recent first.

        ``limit`` keeps the most recent matches.
        """
        with self._lock:
            events = list(self._events)
        if audit_query is not None:
            events = [event for event in events if audit_query.matches(event)]
            if audit_query.limit is not None:
                events = events[-audit_query.limit :] if audit_query.limit > 0 else []
        events.reverse()
        return events

    def stats(self, window_seconds: float = 3600.0) -> AuditStats:
        """Aggregate events logged within the last ``window_seconds``."""
        cutoff = datetime.now(UTC) - timedelta(seconds=window_seconds)
        with self._lock:
            recent = [event for event in self._events if event.timestamp >= cutoff]

        if not recent:
            return AuditStats()

        successes = sum(1 for event in recent if event.success)
        return AuditStats(
            total=len(recent),
            by_type=dict(Counter(event.type.value for event in recent)),
            success_rate=successes / len(recent),
            failed_attempts=len(recent) - successes,
            unique_users=frozenset(event.user_id for event in recent if event.user_id),
        )

    def export(self, format: Literal["json", "csv"] = "json") -> str:
        """Serialize the whole buffer (oldest first) for archival.

        Raises:
            ValueError: On an unknown format.
        """
        with self._lock:
            events = list(self._events)

        if format == "json":
            return json.dumps(
                [event.to_dict() for event in events], indent=2, default=str
            )
        if format != "csv":
            raise ValueError(f"unsupported export format: {format}")

        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        for event in events:
            writer.writerow(
                (
                    event.timestamp.isoformat(),
                    event.type.value,
                    event.user_id or "",
                    event.user_email or "",
                    event.user_role or "",
                    event.resource or "",
                    event.action or "",
                    "Yes" if event.success else "No",
                    event.reason or "",
                    (event.request.ip if event.request else None) or "",
                )
            )
        return buffer.getvalue().rstrip("\n")

    def clear(self) -> int:
        """Drop every event and return how many were removed."""
        with self._lock:
            cleared = len(self._events)
            self._events.clear()
        self._logger.warning("audit_log_cleared", cleared=cleared)
        return cleared
