# ruff: noqa: D107
"""Completion service exceptions."""

from .base import InternalError


class CompletionServiceError(InternalError):
    """Raised when the upstream completion service fails.

    The message sent to the client is always generic; callers log the cause.
    """

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message=message, error_code="COMPLETION_SERVICE_ERROR")


class CompletionConfigurationError(CompletionServiceError):
    """Raised when the completion service has no API key configured."""
