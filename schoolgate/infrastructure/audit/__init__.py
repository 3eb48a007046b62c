"""In-memory audit trail."""

from schoolgate.infrastructure.audit.memory_audit_log import (
    AuditQuery,
    AuditStats,
    MemoryAuditLog,
    request_metadata,
)

__all__ = ["AuditQuery", "AuditStats", "MemoryAuditLog", "request_metadata"]
