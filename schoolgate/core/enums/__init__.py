"""Core enums shared by every layer."""

from schoolgate.core.enums.environment import Environment
from schoolgate.core.enums.error_code import ErrorCode

__all__ = ["Environment", "ErrorCode"]
