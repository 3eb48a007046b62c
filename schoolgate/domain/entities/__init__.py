"""Domain entities."""

from schoolgate.domain.entities.audit_event import AuditEvent, RequestMetadata

__all__ = ["AuditEvent", "RequestMetadata"]
