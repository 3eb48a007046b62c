"""Presentation adapters."""

from schoolgate.presentation.request_context import request_context_from

__all__ = ["request_context_from"]
