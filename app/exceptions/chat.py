"""Chat-related exceptions."""

from .base import NotFoundError


class ChatNotFoundError(NotFoundError):
    """Raised when a chat does not resolve for the calling user."""

    def __init__(self, message: str = "Chat not found"):
        super().__init__(message=message, error_code="CHAT_NOT_FOUND")
