"""SchoolGate - request authorization pipeline for the school platform.

Resolves callers, evaluates role permissions, throttles abusive traffic,
caches identity lookups, and keeps an in-memory audit trail.
"""

__version__ = "0.1.0"
