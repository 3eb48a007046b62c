"""Audit event types for security monitoring.

Values are dotted names grouped by prefix so filters and exports stay
readable: auth.*, authz.*, admin.*, data.*, rate_limit.*.

Usage:
    from schoolgate.domain.enums import AuditEventType

    audit.log(AuditEventType.AUTHZ_ACCESS_DENIED, success=False, reason="...")
"""

from enum import Enum


class AuditEventType(str, Enum):
    """Audit event types recorded by the in-memory audit log."""

    # Authentication
    AUTH_LOGIN_SUCCESS = "auth.login.success"
    AUTH_LOGIN_FAILURE = "auth.login.failure"
    AUTH_LOGOUT = "auth.logout"
    AUTH_TOKEN_CREATED = "auth.token.created"
    AUTH_TOKEN_REVOKED = "auth.token.revoked"
    AUTH_SESSION_EXPIRED = "auth.session.expired"

    # Authorization
    AUTHZ_ACCESS_GRANTED = "authz.access.granted"
    AUTHZ_ACCESS_DENIED = "authz.access.denied"
    AUTHZ_PERMISSION_CHECKED = "authz.permission.checked"

    # Administrative
    ADMIN_ACTION = "admin.action"

    # Data access
    DATA_READ = "data.read"
    DATA_WRITE = "data.write"
    DATA_DELETE = "data.delete"

    # Rate limiting
    RATE_LIMIT_EXCEEDED = "rate_limit.exceeded"
    RATE_LIMIT_BLOCKED = "rate_limit.blocked"
