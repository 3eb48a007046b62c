"""Domain enums.

Available Enums:
    - UserRole: closed role set (admin, staff, teacher, student)
    - Resource / Action: permission components
    - PermissionCondition: closed set of grant predicates
    - AuditEventType: audit trail event names
"""

from schoolgate.domain.enums.audit_event_type import AuditEventType
from schoolgate.domain.enums.permission import Action, PermissionCondition, Resource
from schoolgate.domain.enums.user_role import UserRole

__all__ = [
    "Action",
    "AuditEventType",
    "PermissionCondition",
    "Resource",
    "UserRole",
]
