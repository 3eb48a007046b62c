"""Permission table and Casbin-backed evaluator."""

from schoolgate.infrastructure.authorization.permission_evaluator import (
    PermissionEvaluator,
    condition_satisfied,
    describe_permission,
)
from schoolgate.infrastructure.authorization.permission_table import (
    ROLE_PERMISSIONS,
    validate_permission_table,
)

__all__ = [
    "ROLE_PERMISSIONS",
    "PermissionEvaluator",
    "condition_satisfied",
    "describe_permission",
    "validate_permission_table",
]
